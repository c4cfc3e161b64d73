"""
Log analysis over parsed entries.
Counts entries by level, finds recent errors and exports filtered subsets.
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from .parsers.bracket_parser import format_entry, parse_line, parse_lines
from .schemas.log_entry import LogEntry, ParseResult

ERROR_LEVEL = 'ERROR'
DEFAULT_RECENT_WINDOW = timedelta(hours=1)

Predicate = Callable[[LogEntry], bool]


class LogAnalyzer:
    """Parses log lines and runs read-only queries over the resulting entries."""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize the analyzer.

        Args:
            config: Analyzer section of the processed configuration
        """
        config = config or {}
        self.recent_window = timedelta(
            minutes=config.get('recent_window_minutes', DEFAULT_RECENT_WINDOW.total_seconds() / 60)
        )
        self.on_error = config.get('on_error', 'strict')

        self.logger = logging.getLogger(__name__)

    def parse(self, line: str) -> LogEntry:
        return parse_line(line)

    def format(self, entry: LogEntry) -> str:
        return format_entry(entry)

    def parse_lines(self, lines: Iterable[str], errors: Optional[str] = None) -> ParseResult:
        """
        Parse a batch of lines with the given (or configured) error policy.

        Args:
            lines: Ordered log lines
            errors: 'strict', 'skip' or 'collect'; defaults to the configured policy

        Returns:
            ParseResult with entries in input order
        """
        result = parse_lines(lines, errors=errors or self.on_error)
        self.logger.info(f"Parsed {len(result.entries)} log entries")
        return result

    def count_by_level(self, entries: Iterable[LogEntry]) -> Dict[str, int]:
        """
        Count entries per level.

        Levels are compared exactly; only observed levels appear, in the
        order they are first seen.
        """
        counts: Dict[str, int] = {}
        for entry in entries:
            counts[entry.level] = counts.get(entry.level, 0) + 1
        return counts

    def recent_errors(self, entries: Iterable[LogEntry], now: Optional[datetime] = None,
                      window: Optional[timedelta] = None) -> List[LogEntry]:
        """
        Find ERROR entries newer than now - window.

        Args:
            entries: Parsed entries
            now: Reference time, defaults to the current local time
            window: How far back to look, defaults to the configured window

        Returns:
            Matching entries in input order; empty for a non-positive window
        """
        if window is None:
            window = self.recent_window
        if window <= timedelta(0):
            return []

        if now is None:
            now = datetime.now()
        cutoff = now - window

        return [
            entry for entry in entries
            if entry.level == ERROR_LEVEL and entry.timestamp > cutoff
        ]

    def export_filtered(self, entries: Iterable[LogEntry], predicate: Predicate, sink=None) -> List[str]:
        """
        Format the entries accepted by a predicate.

        Args:
            entries: Parsed entries
            predicate: Test applied to each entry
            sink: Optional object with write_lines(lines) that receives the result

        Returns:
            Formatted lines in input order
        """
        lines = [format_entry(entry) for entry in entries if predicate(entry)]

        if sink is not None:
            written = sink.write_lines(lines)
            self.logger.info(f"Exported {written} lines")

        return lines

    def find_first(self, entries: Iterable[LogEntry], predicate: Predicate) -> Optional[LogEntry]:
        """Return the first entry accepted by the predicate, or None."""
        return next((entry for entry in entries if predicate(entry)), None)

    def latest(self, entries: Iterable[LogEntry], level: Optional[str] = None) -> Optional[LogEntry]:
        """Return the newest entry (optionally of one level), or None. Earlier entries win ties."""
        latest = None
        for entry in entries:
            if level is not None and entry.level != level:
                continue
            if latest is None or entry.timestamp > latest.timestamp:
                latest = entry
        return latest

    def summarize(self, entries: Sequence[LogEntry], now: Optional[datetime] = None,
                  window: Optional[timedelta] = None) -> Dict[str, Any]:
        """
        Build a JSON-friendly summary of a batch.

        Returns:
            Dictionary with totals, level counts, recent errors and time range
        """
        timestamps = [entry.timestamp for entry in entries]

        return {
            'total': len(entries),
            'by_level': self.count_by_level(entries),
            'recent_errors': [format_entry(e) for e in self.recent_errors(entries, now, window)],
            'first_timestamp': min(timestamps).isoformat() if timestamps else None,
            'last_timestamp': max(timestamps).isoformat() if timestamps else None,
        }
