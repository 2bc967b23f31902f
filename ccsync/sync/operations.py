"""Mutating storage operations with dry-run support."""

import logging
import time
from pathlib import Path
from typing import Callable

from ..exceptions import CcsyncStorageError
from .storage import Storage

logger = logging.getLogger(__name__)


class SyncOperations:
    """Wraps the storage calls that change the target tree.

    One instance belongs to one sync run. It remembers the directories it
    created, or would have created in a dry run, so that a dry run reports
    the same directory count as a real run.
    """

    def __init__(
        self,
        storage: Storage,
        dry_run: bool = False,
        clock: Callable[[], float] = time.time,
    ):
        """Initialize sync operations.

        Args:
            storage: Storage to operate on
            dry_run: If True, never call mutating storage methods
            clock: Returns the timestamp stamped on copied files
        """
        self.storage = storage
        self.dry_run = dry_run
        self.clock = clock
        self._planned_directories: set[Path] = set()

    def directory_exists(self, path: Path) -> bool:
        """Check whether a directory exists or was created during this run."""
        return path in self._planned_directories or self.storage.exists(path)

    def ensure_directory(self, path: Path) -> bool:
        """Create a directory if it is absent.

        Args:
            path: Directory to create

        Returns:
            True if the directory was created (or would be, in a dry run)
        """
        if self.directory_exists(path):
            return False

        if not self.dry_run:
            self.storage.create_directory(path)
        # create_directory makes missing parents as well
        self._planned_directories.update([path, *path.parents])
        return True

    def copy_file(self, source: Path, target: Path) -> None:
        """Copy a file and stamp the target with the current time.

        The target's parent directory must already exist. A failure to set
        the timestamp is logged and otherwise ignored.

        Args:
            source: Source file path
            target: Target file path
        """
        if self.dry_run:
            return

        self.storage.copy_file(source, target)

        try:
            self.storage.set_modified_time(target, self.clock())
        except CcsyncStorageError as e:
            logger.warning(f"Failed to update timestamp for {target}: {e}")
