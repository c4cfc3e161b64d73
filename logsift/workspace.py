"""
Scoped scratch directory for demonstration runs.
"""

import os
import shutil
import tempfile
from typing import Optional
import logging


class Workspace:
    """
    Owns a scratch directory for the duration of a with-block.

    The directory is created on enter and removed on exit, whether the
    block succeeds or raises. A given base_dir must not exist yet or be an
    empty directory, so nothing the caller owns is ever deleted.
    """

    def __init__(self, base_dir: Optional[str] = None):
        self.base_dir = base_dir
        self.root: Optional[str] = None

        self.logger = logging.getLogger(__name__)

    def __enter__(self) -> 'Workspace':
        if self.base_dir:
            if not os.path.exists(self.base_dir):
                os.makedirs(self.base_dir)
            elif not os.path.isdir(self.base_dir):
                raise NotADirectoryError(f"Workspace path is not a directory: {self.base_dir}")
            elif os.listdir(self.base_dir):
                raise FileExistsError(f"Workspace directory is not empty: {self.base_dir}")
            self.root = self.base_dir
        else:
            self.root = tempfile.mkdtemp(prefix='logsift-')

        self.logger.info(f"Created workspace directory: {self.root}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.root and os.path.exists(self.root):
            try:
                shutil.rmtree(self.root)
                self.logger.info(f"Cleaned up workspace directory: {self.root}")
            except OSError as e:
                self.logger.error(f"Cleanup failed for {self.root}: {e}")
        self.root = None

    def path(self, name: str) -> str:
        """Path of a file inside the workspace."""
        if self.root is None:
            raise RuntimeError("Workspace is not active")
        return os.path.join(self.root, name)
