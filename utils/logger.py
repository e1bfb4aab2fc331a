"""
Logger - leveled logging for the decoder tools.

Levels: ERROR, WARN, INFO, DEBUG, TRACE.
Output to a stream (stderr by default) and optionally to a file.
Output can be switched on/off per subsystem (DECODE, CLI, CONFIG, ...).
"""

import sys
import time
from enum import IntEnum


class LogLevel(IntEnum):
    """Log levels."""
    NONE  = 0
    ERROR = 1
    WARN  = 2
    INFO  = 3
    DEBUG = 4
    TRACE = 5

    @classmethod
    def from_name(cls, name, default=None):
        """'debug' -> LogLevel.DEBUG; unknown names give `default`."""
        try:
            return cls[name.upper()]
        except KeyError:
            return default


class Logger:
    """
    Decoder tools logger.

    Usage:
        log = Logger(level=LogLevel.INFO)
        log.info("CLI", "Decoding 4 words")
        log.debug("DECODE", f"0x{addr:08X}: {reason}")

        # Enable/disable subsystems
        log.enable("DECODE")
        log.disable("CONFIG")
    """

    # ANSI terminal colours
    _COLORS = {
        LogLevel.ERROR: "\033[91m",   # Red
        LogLevel.WARN:  "\033[93m",   # Yellow
        LogLevel.INFO:  "\033[92m",   # Green
        LogLevel.DEBUG: "\033[96m",   # Cyan
        LogLevel.TRACE: "\033[90m",   # Gray
    }
    _RESET = "\033[0m"

    _LEVEL_NAMES = {
        LogLevel.ERROR: "ERR",
        LogLevel.WARN:  "WRN",
        LogLevel.INFO:  "INF",
        LogLevel.DEBUG: "DBG",
        LogLevel.TRACE: "TRC",
    }

    def __init__(self, level=LogLevel.INFO, use_color=True, log_file=None, stream=None):
        """
        level: minimum level that is written
        use_color: ANSI colours when the stream is a TTY
        log_file: path of a file to copy every line to (None = stream only)
        stream: output stream (None = sys.stderr)
        """
        self.level = level
        self.use_color = use_color
        self._stream = stream
        self._file = None
        self._start_time = time.time()

        # Subsystem filter: empty means everything is written
        self._enabled_subsystems = set()
        self._disabled_subsystems = set()

        # Counters
        self._counts = {lvl: 0 for lvl in LogLevel if lvl != LogLevel.NONE}

        if log_file:
            try:
                self._file = open(log_file, 'w')
            except IOError as e:
                print(f"[LOGGER] Cannot open log file: {e}", file=sys.stderr)

    def close(self):
        """Close the log file."""
        if self._file:
            self._file.close()
            self._file = None

    # ================================================================
    # Subsystem filter
    # ================================================================

    def enable(self, subsystem):
        """Enable output for a subsystem."""
        self._enabled_subsystems.add(subsystem.upper())
        self._disabled_subsystems.discard(subsystem.upper())

    def disable(self, subsystem):
        """Disable output for a subsystem."""
        self._disabled_subsystems.add(subsystem.upper())
        self._enabled_subsystems.discard(subsystem.upper())

    def _is_allowed(self, subsystem):
        sub = subsystem.upper()
        if sub in self._disabled_subsystems:
            return False
        if self._enabled_subsystems and sub not in self._enabled_subsystems:
            return False
        return True

    # ================================================================
    # Logging methods
    # ================================================================

    def log(self, level, subsystem, message):
        if level > self.level:
            return
        if not self._is_allowed(subsystem):
            return

        self._counts[level] = self._counts.get(level, 0) + 1

        elapsed = time.time() - self._start_time
        level_name = self._LEVEL_NAMES.get(level, "???")

        line = f"[{elapsed:8.3f}] [{level_name}] [{subsystem:6s}] {message}"

        stream = self._stream if self._stream is not None else sys.stderr
        if self.use_color and stream.isatty():
            color = self._COLORS.get(level, "")
            print(f"{color}{line}{self._RESET}", file=stream)
        else:
            print(line, file=stream)

        if self._file:
            self._file.write(line + '\n')
            self._file.flush()

    def error(self, subsystem, message):
        self.log(LogLevel.ERROR, subsystem, message)

    def warn(self, subsystem, message):
        self.log(LogLevel.WARN, subsystem, message)

    def info(self, subsystem, message):
        self.log(LogLevel.INFO, subsystem, message)

    def debug(self, subsystem, message):
        self.log(LogLevel.DEBUG, subsystem, message)

    def trace(self, subsystem, message):
        self.log(LogLevel.TRACE, subsystem, message)

    # ================================================================
    # Decode helpers
    # ================================================================

    def decoded(self, address, inst):
        """Log a decoded word (TRACE)."""
        if self.level < LogLevel.TRACE:
            return
        if not self._is_allowed("DECODE"):
            return
        self.trace("DECODE", f"0x{address:08X}: {inst!r}")

    def undecodable(self, address, word, reason):
        """Log a word the decoder rejected (DEBUG)."""
        self.debug("DECODE", f"0x{address:08X}: 0x{word:08X} not decoded ({reason})")

    # ================================================================
    # Summary
    # ================================================================

    def count(self, level):
        return self._counts.get(level, 0)

    def get_summary(self):
        """Message count per level."""
        parts = []
        for lvl in (LogLevel.ERROR, LogLevel.WARN, LogLevel.INFO,
                    LogLevel.DEBUG, LogLevel.TRACE):
            count = self._counts.get(lvl, 0)
            if count > 0:
                parts.append(f"{self._LEVEL_NAMES[lvl]}={count}")
        return "Log: " + ", ".join(parts) if parts else "Log: (empty)"

    def __repr__(self):
        return f"Logger(level={self.level.name})"
