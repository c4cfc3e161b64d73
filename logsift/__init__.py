"""
logsift - parse, analyze and export '<timestamp> [<level>] <message>' log files.
"""

__version__ = '0.1.0'

from .analyzer import LogAnalyzer
from .errors import ConfigError, FormatError, LogsiftError, SinkError
from .schemas.log_entry import LogEntry, ParseResult

__all__ = [
    'ConfigError',
    'FormatError',
    'LogAnalyzer',
    'LogEntry',
    'LogsiftError',
    'ParseResult',
    'SinkError',
]
