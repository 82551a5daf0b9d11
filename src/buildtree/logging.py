"""Logging infrastructure for buildtree.

Provides the Logger interface that is passed explicitly to every component that
reports progress or diagnostics.
"""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod


class LogLevel(enum.Enum):
    """Log verbosity levels for buildtree diagnostic messages.

    Lower numeric values represent higher severity / less verbosity.
    """
    FATAL = 0  # Only unrecoverable errors (broken build scripts)
    ERROR = 1  # Fatal errors plus command and function failures
    WARN = 2   # Errors plus diagnostics such as unreadable dependencies
    INFO = 3   # Warnings plus commands being run (default)
    DEBUG = 4  # Info plus skipped tasks and selected targets
    TRACE = 5  # Debug plus fine-grained traversal tracing


def parse_log_level(value: str) -> LogLevel:
    """Convert a level name such as "debug" to a LogLevel.

    Raises:
        ValueError: If the name is not a known level
    """
    try:
        return LogLevel[value.strip().upper()]
    except KeyError:
        names = ", ".join(level.name.lower() for level in LogLevel)
        raise ValueError(f"Invalid log level '{value}' (expected one of: {names})") from None


class Logger(ABC):
    """Abstract leveled logger."""

    @abstractmethod
    def log(self, level: LogLevel = LogLevel.INFO, *args, **kwargs) -> None:
        ...

    @abstractmethod
    def push_level(self, level: LogLevel) -> None:
        ...

    @abstractmethod
    def pop_level(self) -> LogLevel:
        ...

    def fatal(self, *args, **kwargs) -> None:
        self.log(LogLevel.FATAL, *args, **kwargs)

    def error(self, *args, **kwargs) -> None:
        self.log(LogLevel.ERROR, *args, **kwargs)

    def warn(self, *args, **kwargs) -> None:
        self.log(LogLevel.WARN, *args, **kwargs)

    def info(self, *args, **kwargs) -> None:
        self.log(LogLevel.INFO, *args, **kwargs)

    def debug(self, *args, **kwargs) -> None:
        self.log(LogLevel.DEBUG, *args, **kwargs)

    def trace(self, *args, **kwargs) -> None:
        self.log(LogLevel.TRACE, *args, **kwargs)
