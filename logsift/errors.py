"""
Exception hierarchy for logsift.
"""

from typing import Optional


class LogsiftError(Exception):
    """Base class for all logsift errors."""


class FormatError(LogsiftError, ValueError):
    """A log line does not match the '<timestamp> [<level>] <message>' shape."""

    def __init__(self, line: str, reason: str, line_number: Optional[int] = None):
        self.line = line
        self.reason = reason
        self.line_number = line_number

        if line_number is not None:
            text = f"Invalid log format at line {line_number}: {reason}: {line!r}"
        else:
            text = f"Invalid log format: {reason}: {line!r}"
        super().__init__(text)


class ConfigError(LogsiftError):
    """Invalid configuration value or export rule definition."""


class SinkError(LogsiftError):
    """A line sink could not deliver its lines."""
