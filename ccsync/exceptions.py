"""Exceptions raised by ccsync."""

from pathlib import Path
from typing import Union


class CcsyncError(Exception):
    """Base exception for all ccsync errors."""


class CcsyncInvalidInputError(CcsyncError, ValueError):
    """Raised when a path or identifier has the wrong shape."""


class CcsyncConfigError(CcsyncError):
    """Raised when the repository or source directory cannot be resolved."""


class CcsyncStorageError(CcsyncError):
    """Base exception for storage failures."""


class CcsyncIOError(CcsyncStorageError):
    """Raised when the underlying storage fails to read or write."""


class CcsyncNotFoundError(CcsyncStorageError):
    """Raised when a storage entry does not exist."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        super().__init__(f"Not found: {path}")


class CcsyncPathError(CcsyncStorageError):
    """Raised when a path is invalid for the requested operation."""
