"""
File input handler for reading log files.
Supplies the lines of one file to the analyzer.
"""

import os
from typing import Iterator, List, Optional, TextIO
import logging

from ..parsers.bracket_parser import strip_terminator


class FileLineSource:
    """Line source backed by a log file."""

    def __init__(self, file_path: str, encoding: str = 'utf-8'):
        """
        Initialize file input.

        Args:
            file_path: Path to the log file
            encoding: Text encoding of the file
        """
        self.file_path = file_path
        self.encoding = encoding
        self.file_handle: Optional[TextIO] = None
        self.lines_read = 0

        # Setup logging
        self.logger = logging.getLogger(__name__)

    def __enter__(self) -> 'FileLineSource':
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def open(self):
        """Open the file for reading."""
        if not os.path.exists(self.file_path):
            raise FileNotFoundError(f"Log file not found: {self.file_path}")

        self.file_handle = open(self.file_path, 'r', encoding=self.encoding, errors='replace')
        self.lines_read = 0
        self.logger.debug(f"File input opened for {self.file_path}")

    def close(self):
        """Close the file if open."""
        if self.file_handle:
            self.file_handle.close()
            self.file_handle = None
            self.logger.info(f"Finished reading {self.lines_read} lines from {self.file_path}")

    def __iter__(self) -> Iterator[str]:
        if self.file_handle is None:
            raise RuntimeError(f"File input for {self.file_path} is not open")

        for line in self.file_handle:
            self.lines_read += 1
            yield strip_terminator(line)

    def read_lines(self) -> List[str]:
        """Read all lines, opening and closing the file if needed."""
        if self.file_handle is not None:
            return list(self)

        with self:
            return list(self)
