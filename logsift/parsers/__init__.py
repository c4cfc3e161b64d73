from .bracket_parser import TIMESTAMP_FORMAT, format_entry, format_timestamp, parse_line, parse_lines, parse_timestamp

__all__ = ['TIMESTAMP_FORMAT', 'format_entry', 'format_timestamp', 'parse_line', 'parse_lines', 'parse_timestamp']
