"""File comparison logic for sync operations."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .storage import EntryMetadata


class SyncAction(str, Enum):
    """Actions that can be taken during sync."""

    COPY = "copy"
    """Copy source file to target"""

    SKIP = "skip"
    """Skip file (target is up to date)"""


@dataclass
class SyncDecision:
    """Represents a decision about how to sync a file."""

    action: SyncAction
    """Action to take"""

    reason: str
    """Human-readable reason for this decision"""

    source: EntryMetadata
    """Source file"""

    target: Optional[EntryMetadata]
    """Target file (if exists)"""

    @property
    def should_copy(self) -> bool:
        return self.action == SyncAction.COPY


class FileComparator:
    """Decides whether a source file needs to be copied over its target.

    A file is stale when the target is missing or when the source was
    modified strictly later than the target. Equal timestamps count as up
    to date.
    """

    def compare(
        self, source: EntryMetadata, target: Optional[EntryMetadata]
    ) -> SyncDecision:
        """Compare a source file with its target counterpart.

        Args:
            source: Source file metadata
            target: Target file metadata, None if the target does not exist

        Returns:
            SyncDecision for this file
        """
        if target is None:
            return SyncDecision(
                action=SyncAction.COPY,
                reason="Target does not exist",
                source=source,
                target=None,
            )

        if source.modified > target.modified:
            return SyncDecision(
                action=SyncAction.COPY,
                reason="Source file is newer",
                source=source,
                target=target,
            )

        return SyncDecision(
            action=SyncAction.SKIP,
            reason="Target is up to date",
            source=source,
            target=target,
        )

    def should_copy(
        self, source: EntryMetadata, target: Optional[EntryMetadata]
    ) -> bool:
        """Return True when the source file is stale relative to the target."""
        return self.compare(source, target).should_copy
