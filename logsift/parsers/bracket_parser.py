"""
Parser for '<timestamp> [<level>] <message>' log lines.

The format has no escaping: a level or message that contains ' [' or '] '
produces extra parts and is rejected rather than silently reinterpreted.
"""

import logging
import re
from datetime import datetime
from typing import Iterable, Optional

from ..errors import FormatError
from ..schemas.log_entry import LogEntry, ParseResult

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = '%Y-%m-%d %H:%M:%S'

# ' [' before the level, '] ' after it
DELIMITER_PATTERN = re.compile(r' \[|\] ')
TIMESTAMP_PATTERN = re.compile(r'^\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}$')

ERROR_POLICIES = ('strict', 'skip', 'collect')


def parse_timestamp(text: str) -> datetime:
    """
    Parse a 'YYYY-MM-DD HH:MM:SS' timestamp.

    Raises:
        ValueError: If the text is not zero-padded or not a valid date/time
    """
    # strptime alone accepts unpadded fields like '2024-1-1 9:0:0'
    if not TIMESTAMP_PATTERN.match(text):
        raise ValueError(f"timestamp {text!r} does not match {TIMESTAMP_FORMAT}")
    return datetime.strptime(text, TIMESTAMP_FORMAT)


def format_timestamp(timestamp: datetime) -> str:
    """Render a timestamp as 'YYYY-MM-DD HH:MM:SS' with a four-digit year."""
    # strftime('%Y') does not pad years below 1000 on every platform
    return (
        f"{timestamp.year:04d}-{timestamp.month:02d}-{timestamp.day:02d} "
        f"{timestamp.hour:02d}:{timestamp.minute:02d}:{timestamp.second:02d}"
    )


def strip_terminator(line: str) -> str:
    """Remove one trailing '\n' or '\r\n', leaving any other characters."""
    if line.endswith('\r\n'):
        return line[:-2]
    if line.endswith('\n'):
        return line[:-1]
    return line


def parse_line(line: str, line_number: Optional[int] = None) -> LogEntry:
    """
    Parse a single log line into a LogEntry.

    Args:
        line: Raw log line, optionally ending with a line terminator
        line_number: Position of the line in its batch, used in error messages

    Returns:
        Parsed log entry

    Raises:
        FormatError: If the line is not exactly three parts or the timestamp is invalid
    """
    text = strip_terminator(line)

    parts = DELIMITER_PATTERN.split(text)
    if len(parts) != 3:
        raise FormatError(text, f"expected 3 parts, found {len(parts)}", line_number)

    timestamp_text, level, message = parts
    try:
        timestamp = parse_timestamp(timestamp_text)
    except ValueError as e:
        raise FormatError(text, str(e), line_number) from e

    return LogEntry(timestamp=timestamp, level=level, message=message)


def format_entry(entry: LogEntry) -> str:
    """Render an entry back into its log line form."""
    return f"{format_timestamp(entry.timestamp)} [{entry.level}] {entry.message}"


def parse_lines(lines: Iterable[str], errors: str = 'strict') -> ParseResult:
    """
    Parse a batch of lines.

    Blank lines are ignored; line numbers still count them so errors point
    at the physical line.

    Args:
        lines: Ordered log lines
        errors: 'strict' raises on the first malformed line, 'skip' drops
            malformed lines, 'collect' drops them and returns them as failures

    Returns:
        ParseResult with entries in input order
    """
    if errors not in ERROR_POLICIES:
        raise ValueError(f"Unknown error policy {errors!r}, expected one of {', '.join(ERROR_POLICIES)}")

    result = ParseResult()

    for line_number, line in enumerate(lines, start=1):
        if not line.strip():
            continue

        try:
            result.entries.append(parse_line(line, line_number))
        except FormatError as e:
            if errors == 'strict':
                raise
            logger.warning(f"Skipping malformed line: {e}")
            if errors == 'collect':
                result.failures.append(e)

    logger.debug(f"Parsed {len(result.entries)} entries, {len(result.failures)} failures")
    return result
