"""Storage capability used by the sync engine.

The engine never touches the filesystem directly. It goes through a
:class:`Storage` so that the same traversal logic runs against the real
filesystem and against the in-memory fake used in tests.
"""

import logging
import os
import shutil
from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from stat import S_ISDIR
from typing import Union

from ..exceptions import (
    CcsyncIOError,
    CcsyncNotFoundError,
    CcsyncPathError,
)

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


@dataclass(frozen=True)
class EntryMetadata:
    """Represents one storage entry with metadata."""

    path: Path
    """Absolute path to the entry"""

    modified: float
    """Last modification time (Unix timestamp)"""

    is_directory: bool
    """Whether the entry is a directory"""

    @property
    def name(self) -> str:
        """Final path component."""
        return self.path.name

    @classmethod
    def from_path(cls, path: Path) -> "EntryMetadata":
        """Create EntryMetadata from a filesystem path.

        Args:
            path: Path to stat

        Returns:
            EntryMetadata instance
        """
        stat = path.stat()
        return cls(
            path=path,
            modified=stat.st_mtime,
            is_directory=S_ISDIR(stat.st_mode),
        )


class Storage(ABC):
    """Narrow storage interface consumed by the sync engine.

    Every method raises a subclass of ``CcsyncStorageError``:
    ``CcsyncNotFoundError`` when the entry is missing, ``CcsyncPathError``
    when the entry has the wrong kind, ``CcsyncIOError`` otherwise.
    """

    @abstractmethod
    def list_directory(self, path: PathLike) -> list[EntryMetadata]:
        """List the direct children of a directory."""

    @abstractmethod
    def get_metadata(self, path: PathLike) -> EntryMetadata:
        """Get metadata for a single entry."""

    @abstractmethod
    def copy_file(self, source: PathLike, target: PathLike) -> None:
        """Copy file bytes. The target's parent directory must exist."""

    @abstractmethod
    def create_directory(self, path: PathLike) -> None:
        """Create a directory and any missing parents. Idempotent."""

    @abstractmethod
    def exists(self, path: PathLike) -> bool:
        """Check whether an entry exists."""

    @abstractmethod
    def set_modified_time(self, path: PathLike, timestamp: float) -> None:
        """Set the modification time of an entry."""


@contextmanager
def _translate_errors(path: Path) -> Iterator[None]:
    """Map OSError subclasses onto the storage error hierarchy."""
    try:
        yield
    except FileNotFoundError as e:
        raise CcsyncNotFoundError(e.filename or path) from e
    except (NotADirectoryError, IsADirectoryError, FileExistsError) as e:
        raise CcsyncPathError(f"Invalid path {path}: {e.strerror or e}") from e
    except OSError as e:
        raise CcsyncIOError(f"I/O error on {path}: {e}") from e


class LocalStorage(Storage):
    """Storage backed by the local filesystem."""

    def list_directory(self, path: PathLike) -> list[EntryMetadata]:
        directory = Path(path)
        with _translate_errors(directory):
            items = sorted(directory.iterdir())

        entries: list[EntryMetadata] = []
        for item in items:
            try:
                entries.append(EntryMetadata.from_path(item))
            except OSError as e:
                # Entry vanished or can't be stat'ed
                logger.debug(f"Skipping unreadable entry {item}: {e}")
                continue
        return entries

    def get_metadata(self, path: PathLike) -> EntryMetadata:
        entry_path = Path(path)
        with _translate_errors(entry_path):
            return EntryMetadata.from_path(entry_path)

    def copy_file(self, source: PathLike, target: PathLike) -> None:
        source_path = Path(source)
        target_path = Path(target)
        with _translate_errors(source_path):
            if source_path.is_dir():
                raise CcsyncPathError(f"Cannot copy a directory: {source_path}")
            if not target_path.parent.is_dir():
                if target_path.parent.exists():
                    raise CcsyncPathError(
                        f"Target parent is not a directory: {target_path.parent}"
                    )
                raise CcsyncNotFoundError(target_path.parent)
            shutil.copyfile(source_path, target_path)

    def create_directory(self, path: PathLike) -> None:
        directory = Path(path)
        with _translate_errors(directory):
            directory.mkdir(parents=True, exist_ok=True)

    def exists(self, path: PathLike) -> bool:
        entry_path = Path(path)
        with _translate_errors(entry_path):
            return entry_path.exists()

    def set_modified_time(self, path: PathLike, timestamp: float) -> None:
        entry_path = Path(path)
        with _translate_errors(entry_path):
            access_time = entry_path.stat().st_atime
            os.utime(entry_path, (access_time, timestamp))
