"""
Configuration - settings for the disassembler front end.

Defaults can be overridden from a JSON file and then from the command line.

Example file:
    {
        "base_address": "0x8000",
        "endian": "little",
        "strict": false,
        "log_level": "debug",
        "max_words": 0
    }
"""

import os
import json


class Config:
    """Disassembler settings."""

    ENDIANS = ("little", "big")

    _KEYS = (
        "base_address", "endian", "strict",
        "log_level", "log_file", "max_words",
    )

    def __init__(self):
        # === Input ===
        self.base_address = 0           # address of the first word
        self.endian = "little"          # byte order of image files
        self.max_words = 0              # word limit (0 = no limit)

        # === Decoding ===
        self.strict = False             # stop at the first undecodable word

        # === Logging ===
        self.log_level = "info"
        self.log_file = None

        self.source_path = None         # JSON file the values came from

    @classmethod
    def load(cls, path):
        """
        Load a JSON config file on top of the defaults.

        Unknown keys are ignored; base_address may be an int or a string
        such as "0x8000".
        """
        if not os.path.exists(path):
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path, 'r') as handle:
            data = json.load(handle)

        if not isinstance(data, dict):
            raise ValueError(f"Config file must contain a JSON object: {path}")

        config = cls()
        config.update(data)
        config.source_path = path
        return config

    def update(self, values):
        """Apply a mapping of settings; None values are skipped."""
        for key in self._KEYS:
            value = values.get(key)
            if value is None:
                continue
            if key == "base_address" and isinstance(value, str):
                value = int(value, 0)
            setattr(self, key, value)

    def validate(self):
        """
        Check the settings.

        Returns (ok: bool, errors: list[str]).
        """
        errors = []

        if not isinstance(self.base_address, int) or not 0 <= self.base_address <= 0xFFFFFFFF:
            errors.append(f"base_address out of range: {self.base_address!r}")
        elif self.base_address & 3:
            errors.append(f"base_address not word aligned: 0x{self.base_address:X}")

        if self.endian not in self.ENDIANS:
            errors.append(f"Unknown endian: {self.endian!r} (expected little or big)")

        if not isinstance(self.max_words, int) or self.max_words < 0:
            errors.append(f"max_words must be >= 0: {self.max_words!r}")

        if self.log_level not in ("error", "warn", "info", "debug", "trace"):
            errors.append(f"Unknown log_level: {self.log_level!r}")

        ok = len(errors) == 0
        return ok, errors

    def __repr__(self):
        return (f"Config(base=0x{self.base_address:08X}, "
                f"endian={self.endian}, "
                f"strict={self.strict})")
