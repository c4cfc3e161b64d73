"""
Structured log records produced by the bracket line parser.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List

from ..errors import FormatError


@dataclass(frozen=True)
class LogEntry:
    """
    One log line: '<timestamp> [<level>] <message>'.

    Timestamps carry second resolution; sub-second parts are dropped so an
    entry always compares equal to its own formatted-then-parsed copy.
    """
    timestamp: datetime
    level: str
    message: str

    def __post_init__(self):
        if self.timestamp.microsecond:
            object.__setattr__(self, 'timestamp', self.timestamp.replace(microsecond=0))


@dataclass
class ParseResult:
    """Outcome of parsing a batch of lines."""
    entries: List[LogEntry] = field(default_factory=list)
    failures: List[FormatError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures
