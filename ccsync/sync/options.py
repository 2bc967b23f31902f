"""Options and result types for a sync run."""

from dataclasses import dataclass, field


@dataclass
class SyncOptions:
    """Options controlling a sync run."""

    dry_run: bool = False
    """Report every action without changing the target"""

    verbose: bool = False
    """Log one line per action"""


@dataclass
class SyncResult:
    """Accumulated outcome of one sync run."""

    files_copied: int = 0
    """Files copied (or that would be copied in a dry run)"""

    files_skipped: int = 0
    """Files already up to date"""

    directories_created: int = 0
    """Directories created (or that would be created in a dry run)"""

    errors: list[str] = field(default_factory=list)
    """Per-file failures, in the order they happened"""

    @property
    def has_errors(self) -> bool:
        """Whether any file failed to sync."""
        return bool(self.errors)

    @property
    def total_files(self) -> int:
        """Number of files that were considered."""
        return self.files_copied + self.files_skipped + len(self.errors)

    def to_dict(self) -> dict:
        """Convert result to dictionary for JSON serialization."""
        return {
            "files_copied": self.files_copied,
            "files_skipped": self.files_skipped,
            "directories_created": self.directories_created,
            "errors": list(self.errors),
        }
