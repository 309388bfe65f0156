"""
Scoped temporary directory holding the exported image of one scan.
"""

import logging
import shutil
import tempfile
from pathlib import Path
from typing import Optional

from constants import TMP_PREFIX
from core.exceptions import WorkspaceException

logger = logging.getLogger(__name__)


class Workspace:
    """
    Temporary directory owning every on-disk layer archive of a run.

    Usable as a context manager; the directory is removed on exit
    whatever the outcome of the block.
    """

    def __init__(self, prefix: str = TMP_PREFIX, base_dir: Optional[Path] = None):
        """
        Initialize workspace.

        Args:
            prefix: Prefix of the temporary directory name
            base_dir: Parent directory (defaults to the system temp dir)
        """
        self.prefix = prefix
        self.base_dir = base_dir
        self._path: Optional[Path] = None

    @property
    def path(self) -> Path:
        """Workspace directory; only valid after create()."""
        if self._path is None:
            raise WorkspaceException("workspace has not been created")
        return self._path

    def create(self) -> Path:
        """
        Allocate a unique temporary directory.

        Returns:
            Path to the new directory

        Raises:
            WorkspaceException: If the directory cannot be created
        """
        try:
            self._path = Path(tempfile.mkdtemp(prefix=self.prefix, dir=self.base_dir))
        except OSError as e:
            raise WorkspaceException(str(e)) from e

        logger.debug(f"Workspace created: {self._path}")
        return self._path

    def destroy(self) -> None:
        """Remove the directory tree. Safe to call more than once; OS errors are logged, never raised."""
        if self._path is None:
            return

        # The path is kept until removal completes so an interrupted destroy can be retried
        path = self._path
        try:
            shutil.rmtree(path)
            logger.debug(f"Workspace removed: {path}")
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Failed to remove workspace {path}: {e}")
            return
        self._path = None

    def __enter__(self) -> "Workspace":
        self.create()
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.destroy()
