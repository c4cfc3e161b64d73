from .log_entry import LogEntry, ParseResult

__all__ = ['LogEntry', 'ParseResult']
