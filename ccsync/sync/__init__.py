"""Sync engine for ccsync - incremental one-way session copying."""

from .comparator import FileComparator, SyncAction, SyncDecision
from .engine import SyncEngine
from .memory import InMemoryStorage
from .operations import SyncOperations
from .options import SyncOptions, SyncResult
from .storage import EntryMetadata, LocalStorage, Storage

__all__ = [
    "SyncEngine",
    "SyncOptions",
    "SyncResult",
    "SyncOperations",
    "FileComparator",
    "SyncAction",
    "SyncDecision",
    "EntryMetadata",
    "Storage",
    "LocalStorage",
    "InMemoryStorage",
]
