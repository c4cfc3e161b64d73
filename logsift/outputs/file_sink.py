"""
File output for exported log lines.
"""

import os
from typing import Iterable, Optional, TextIO
import logging


class FileLineSink:
    """Writes lines to a fresh text file, replacing any previous content."""

    def __init__(self, file_path: str, encoding: str = 'utf-8'):
        self.file_path = file_path
        self.encoding = encoding
        self.file_handle: Optional[TextIO] = None
        self.lines_written = 0

        self.logger = logging.getLogger(__name__)

    def __enter__(self) -> 'FileLineSink':
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def open(self):
        """Create or truncate the target file. Its directory must already exist."""
        directory = os.path.dirname(os.path.abspath(self.file_path))
        if not os.path.isdir(directory):
            raise FileNotFoundError(f"Output directory not found: {directory}")

        self.file_handle = open(self.file_path, 'w', encoding=self.encoding)
        self.lines_written = 0

    def close(self):
        if self.file_handle:
            self.file_handle.close()
            self.file_handle = None
            self.logger.info(f"Wrote {self.lines_written} lines to {self.file_path}")

    def write_lines(self, lines: Iterable[str]) -> int:
        """
        Write lines, one per row.

        Without an open handle the file is opened, written and closed in one go.

        Returns:
            Number of lines written by this call
        """
        if self.file_handle is None:
            with self:
                return self.write_lines(lines)

        count = 0
        for line in lines:
            self.file_handle.write(line + '\n')
            count += 1

        self.lines_written += count
        return count
