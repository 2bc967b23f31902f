"""In-memory storage used to exercise the sync engine without touching disk."""

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from ..exceptions import CcsyncNotFoundError, CcsyncPathError
from .storage import EntryMetadata, PathLike, Storage


@dataclass
class _MemoryFile:
    content: bytes
    modified: float


class InMemoryStorage(Storage):
    """Storage keeping files and directories in dictionaries.

    Follows the same rules as :class:`LocalStorage`: missing entries raise
    ``CcsyncNotFoundError``, entries of the wrong kind raise
    ``CcsyncPathError``, and copying requires an existing target parent.

    Examples:
        >>> storage = InMemoryStorage()
        >>> storage.add_file("/src/a.json", b"{}")
        >>> [entry.name for entry in storage.list_directory("/src")]
        ['a.json']
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        """Initialize in-memory storage.

        Args:
            clock: Returns the current time for new entries and copies
        """
        self.clock = clock
        self._files: dict[Path, _MemoryFile] = {}
        self._directories: dict[Path, float] = {}

    # -------------------------------------------------------------------------
    # Test helpers
    # -------------------------------------------------------------------------

    def add_file(
        self,
        path: PathLike,
        content: bytes = b"",
        modified: Optional[float] = None,
    ) -> None:
        """Add a file, creating its parent directories."""
        file_path = Path(path)
        self.create_directory(file_path.parent)
        if self._is_directory(file_path):
            raise CcsyncPathError(f"Is a directory: {file_path}")
        self._files[file_path] = _MemoryFile(
            content=content,
            modified=self.clock() if modified is None else modified,
        )

    def add_directory(self, path: PathLike, modified: Optional[float] = None) -> None:
        """Add a directory and its parents."""
        directory = Path(path)
        self.create_directory(directory)
        if modified is not None:
            self._directories[directory] = modified

    def read_file(self, path: PathLike) -> bytes:
        """Return the content of a file."""
        file_path = Path(path)
        if file_path not in self._files:
            raise CcsyncNotFoundError(file_path)
        return self._files[file_path].content

    def list_all_files(self) -> list[Path]:
        """Return every file path, sorted."""
        return sorted(self._files)

    def list_all_directories(self) -> list[Path]:
        """Return every directory path, sorted."""
        return sorted(self._directories)

    # -------------------------------------------------------------------------
    # Storage interface
    # -------------------------------------------------------------------------

    def _is_directory(self, path: Path) -> bool:
        return path in self._directories or path == Path(path.anchor)

    def list_directory(self, path: PathLike) -> list[EntryMetadata]:
        directory = Path(path)
        if directory in self._files:
            raise CcsyncPathError(f"Not a directory: {directory}")
        if not self._is_directory(directory):
            raise CcsyncNotFoundError(directory)

        entries = [
            EntryMetadata(path=file_path, modified=entry.modified, is_directory=False)
            for file_path, entry in self._files.items()
            if file_path.parent == directory
        ]
        entries.extend(
            EntryMetadata(path=dir_path, modified=modified, is_directory=True)
            for dir_path, modified in self._directories.items()
            if dir_path.parent == directory and dir_path != directory
        )
        return sorted(entries, key=lambda entry: entry.path)

    def get_metadata(self, path: PathLike) -> EntryMetadata:
        entry_path = Path(path)
        if entry_path in self._files:
            return EntryMetadata(
                path=entry_path,
                modified=self._files[entry_path].modified,
                is_directory=False,
            )
        if self._is_directory(entry_path):
            return EntryMetadata(
                path=entry_path,
                modified=self._directories.get(entry_path, 0.0),
                is_directory=True,
            )
        raise CcsyncNotFoundError(entry_path)

    def copy_file(self, source: PathLike, target: PathLike) -> None:
        source_path = Path(source)
        target_path = Path(target)

        if self._is_directory(source_path):
            raise CcsyncPathError(f"Cannot copy a directory: {source_path}")
        if source_path not in self._files:
            raise CcsyncNotFoundError(source_path)
        if target_path.parent in self._files:
            raise CcsyncPathError(
                f"Target parent is not a directory: {target_path.parent}"
            )
        if not self._is_directory(target_path.parent):
            raise CcsyncNotFoundError(target_path.parent)
        if self._is_directory(target_path):
            raise CcsyncPathError(f"Is a directory: {target_path}")

        self._files[target_path] = _MemoryFile(
            content=self._files[source_path].content,
            modified=self.clock(),
        )

    def create_directory(self, path: PathLike) -> None:
        directory = Path(path)
        for candidate in [*reversed(directory.parents), directory]:
            if candidate in self._files:
                raise CcsyncPathError(f"Not a directory: {candidate}")
            if not self._is_directory(candidate):
                self._directories[candidate] = self.clock()

    def exists(self, path: PathLike) -> bool:
        entry_path = Path(path)
        return entry_path in self._files or self._is_directory(entry_path)

    def set_modified_time(self, path: PathLike, timestamp: float) -> None:
        entry_path = Path(path)
        if entry_path in self._files:
            self._files[entry_path].modified = timestamp
        elif entry_path in self._directories:
            self._directories[entry_path] = timestamp
        else:
            raise CcsyncNotFoundError(entry_path)
