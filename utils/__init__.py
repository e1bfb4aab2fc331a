"""Utilities - logging and configuration."""
