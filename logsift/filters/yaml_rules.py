"""
YAML-defined export rules for logsift.
Lets users describe which entries to export without writing code.
"""

import re
import yaml
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Pattern
from pathlib import Path
import logging

from ..errors import ConfigError
from ..parsers.bracket_parser import format_timestamp, parse_timestamp
from ..schemas.log_entry import LogEntry

VALID_KEYS = ('levels', 'message_contains', 'message_regex', 'since', 'until')

logger = logging.getLogger(__name__)


def level_predicate(level: str) -> Callable[[LogEntry], bool]:
    """Predicate accepting entries whose level equals the given one exactly."""
    def predicate(entry: LogEntry) -> bool:
        return entry.level == level
    return predicate


class ExportRules:
    """Conjunction of export conditions; omitted conditions accept everything."""

    def __init__(self, levels: Optional[List[str]] = None, message_contains: Optional[str] = None,
                 message_regex: Optional[Pattern] = None, since: Optional[datetime] = None,
                 until: Optional[datetime] = None):
        if since and until and since > until:
            raise ConfigError(f"'since' ({since}) is after 'until' ({until})")

        self.levels = set(levels) if levels is not None else None
        self.message_contains = message_contains
        self.message_regex = message_regex
        self.since = since
        self.until = until

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'ExportRules':
        """
        Build rules from a parsed YAML document.

        Args:
            data: Mapping with any of levels, message_contains, message_regex, since, until

        Returns:
            ExportRules instance
        """
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(f"Export rules must be a mapping, got {type(data).__name__}")

        unknown = [key for key in data if key not in VALID_KEYS]
        if unknown:
            raise ConfigError(f"Unknown export rule keys: {', '.join(map(str, unknown))}")

        levels = data.get('levels')
        if isinstance(levels, str):
            levels = [levels]
        if levels is not None:
            if not isinstance(levels, list):
                raise ConfigError("'levels' must be a string or a list of strings")
            levels = [str(level) for level in levels]

        message_regex = None
        if data.get('message_regex') is not None:
            try:
                message_regex = re.compile(str(data['message_regex']))
            except re.error as e:
                raise ConfigError(f"Invalid message_regex: {e}")

        message_contains = data.get('message_contains')
        if message_contains is not None:
            message_contains = str(message_contains)

        return cls(
            levels=levels,
            message_contains=message_contains,
            message_regex=message_regex,
            since=cls._timestamp(data, 'since'),
            until=cls._timestamp(data, 'until'),
        )

    @staticmethod
    def _timestamp(data: Dict[str, Any], key: str) -> Optional[datetime]:
        value = data.get(key)
        if value is None:
            return None
        # YAML turns unquoted timestamps into datetime objects
        if isinstance(value, datetime):
            if value.tzinfo is not None:
                raise ConfigError(f"'{key}' must be a local time without a time zone, got {value}")
            return value.replace(microsecond=0)
        try:
            return parse_timestamp(str(value))
        except ValueError as e:
            raise ConfigError(f"Invalid '{key}': {e}")

    def matches(self, entry: LogEntry) -> bool:
        if self.levels is not None and entry.level not in self.levels:
            return False
        if self.message_contains is not None and self.message_contains not in entry.message:
            return False
        if self.message_regex is not None and not self.message_regex.search(entry.message):
            return False
        if self.since is not None and entry.timestamp < self.since:
            return False
        if self.until is not None and entry.timestamp > self.until:
            return False
        return True

    __call__ = matches

    def describe(self) -> Dict[str, Any]:
        """Rules as a plain mapping, in the same shape as the YAML file."""
        described = {}
        if self.levels is not None:
            described['levels'] = sorted(self.levels)
        if self.message_contains is not None:
            described['message_contains'] = self.message_contains
        if self.message_regex is not None:
            described['message_regex'] = self.message_regex.pattern
        if self.since is not None:
            described['since'] = format_timestamp(self.since)
        if self.until is not None:
            described['until'] = format_timestamp(self.until)
        return described


def load_rules(yaml_path: str) -> ExportRules:
    """
    Load export rules from YAML file.

    Args:
        yaml_path: Path to YAML rules file

    Returns:
        ExportRules instance
    """
    yaml_file = Path(yaml_path)
    if not yaml_file.exists():
        raise FileNotFoundError(f"Export rules file not found: {yaml_path}")

    with open(yaml_file, 'r', encoding='utf-8') as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Malformed export rules file {yaml_path}: {e}") from e

    rules = ExportRules.from_dict(data)
    logger.info(f"Loaded export rules from {yaml_path}: {rules.describe()}")
    return rules


def create_sample_rules(output_path: str):
    """
    Create a sample YAML rules file.

    Args:
        output_path: Path to create sample file
    """
    sample_rules = {
        'levels': ['ERROR', 'WARN'],
        'message_contains': 'connection',
        'since': '2024-01-01 00:00:00',
        'until': '2024-12-31 23:59:59'
    }

    with open(output_path, 'w', encoding='utf-8') as f:
        yaml.safe_dump(sample_rules, f, default_flow_style=False, indent=2)

    print(f"Sample export rules created at: {output_path}")
