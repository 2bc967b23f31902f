"""Core sync engine for executing sync operations."""

import logging
import time
from collections import deque
from pathlib import Path
from typing import Callable, Optional, Union

from rich.progress import Progress, SpinnerColumn, TextColumn

from ..exceptions import CcsyncPathError, CcsyncStorageError
from ..output import OutputFormatter
from ..path_codec import DomainSuffixConverter
from .comparator import FileComparator
from .operations import SyncOperations
from .options import SyncOptions, SyncResult
from .storage import EntryMetadata, Storage

logger = logging.getLogger(__name__)


class SyncEngine:
    """Copies session directories into a project repository.

    Session directories live flat under a source root, each named after the
    project path it belongs to. The engine picks the ones matching an
    identifier prefix, turns their names back into nested paths and copies
    every stale file below them into the target root. It never deletes
    anything.
    """

    def __init__(
        self,
        storage: Storage,
        output: Optional[OutputFormatter] = None,
        comparator: Optional[FileComparator] = None,
        suffix_converter: Optional[DomainSuffixConverter] = None,
        clock: Callable[[], float] = time.time,
    ):
        """Initialize sync engine.

        Args:
            storage: Storage the source and target trees live on
            output: Output formatter for displaying progress/status
            comparator: Decides which files are stale
            suffix_converter: Converts session directory names to paths
            clock: Returns the timestamp stamped on copied files
        """
        self.storage = storage
        self.output = output or OutputFormatter(quiet=True)
        self.comparator = comparator or FileComparator()
        self.suffix_converter = suffix_converter or DomainSuffixConverter()
        self.clock = clock

    def sync(
        self,
        source_root: Union[str, Path],
        identifier_prefix: str,
        target_root: Union[str, Path],
        options: Optional[SyncOptions] = None,
    ) -> SyncResult:
        """Sync every session directory matching a prefix.

        Args:
            source_root: Directory holding the flat session directories
            identifier_prefix: Only session directories whose name starts
                with this prefix are synced
            target_root: Directory receiving the nested copies
            options: Dry-run and verbosity options

        Returns:
            SyncResult with counters and per-file errors

        Raises:
            CcsyncPathError: If an entry cannot be placed under the target
            CcsyncStorageError: If the storage fails outside of listing or
                copying a single file

        Examples:
            >>> engine = SyncEngine(LocalStorage())
            >>> result = engine.sync(
            ...     Path.home() / ".claude" / "projects",
            ...     "-Users-dev-project",
            ...     Path("/Users/dev/project/.claude/ccss_sessions"),
            ...     SyncOptions(dry_run=True),
            ... )
            >>> print(f"Would copy {result.files_copied} files")
        """
        source_root = Path(source_root)
        target_root = Path(target_root)
        options = options or SyncOptions()

        result = SyncResult()
        operations = SyncOperations(
            self.storage, dry_run=options.dry_run, clock=self.clock
        )

        logger.debug(
            f"Starting sync {source_root} -> {target_root} "
            f"(prefix={identifier_prefix}, dry_run={options.dry_run})"
        )

        if operations.ensure_directory(target_root):
            result.directories_created += 1
            self._log_action(options, f"Created directory: {target_root}")

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            transient=True,
            disable=self.output.quiet or self.output.json_output,
        ) as progress:
            task = progress.add_task("Scanning session directories...", total=None)

            pending: deque[Path] = deque(
                entry.path
                for entry in self._list_directory(source_root)
                if entry.is_directory and entry.name.startswith(identifier_prefix)
            )
            logger.debug(f"Found {len(pending)} matching session directories")

            while pending:
                current_dir = pending.popleft()
                progress.update(task, description=f"Syncing {current_dir.name}...")

                for entry in self._list_directory(current_dir):
                    target_path = target_root / self.target_relative_path(
                        entry.path, source_root
                    )

                    if entry.is_directory:
                        if operations.ensure_directory(target_path):
                            result.directories_created += 1
                            self._log_action(
                                options, f"Created directory: {target_path}"
                            )
                        pending.append(entry.path)
                    else:
                        self._sync_file(
                            entry, target_path, operations, options, result
                        )

        logger.debug(
            f"Sync finished: {result.total_files} files considered, "
            f"{result.files_copied} copied, {len(result.errors)} errors"
        )

        if not (self.output.quiet or self.output.json_output):
            self._display_summary(result, options.dry_run)

        return result

    def target_relative_path(self, path: Path, source_root: Path) -> Path:
        """Map a source entry onto its path relative to the target root.

        The first component is a flattened session directory name and is
        expanded into nested directories; the rest is kept as is.

        Args:
            path: Absolute path of a source entry
            source_root: Root the session directories live in

        Returns:
            Relative target path

        Raises:
            CcsyncPathError: If the path is not below the source root, or
                its converted name would leave the target root
        """
        try:
            relative_path = path.relative_to(source_root)
        except ValueError as e:
            raise CcsyncPathError(
                f"Path {path} is not inside source root {source_root}"
            ) from e

        if not relative_path.parts:
            raise CcsyncPathError(f"Path {path} is the source root itself")

        head, *rest = relative_path.parts
        if "-" in head:
            head = self.suffix_converter.convert(head)

        target_relative = Path(head, *rest)
        if target_relative.is_absolute() or ".." in target_relative.parts:
            raise CcsyncPathError(
                f"Path {path} would be placed outside the target root: "
                f"{target_relative}"
            )
        return target_relative

    def _list_directory(self, directory: Path) -> list[EntryMetadata]:
        """List a directory, returning nothing if it cannot be read."""
        try:
            return self.storage.list_directory(directory)
        except CcsyncStorageError as e:
            logger.warning(f"Failed to list directory {directory}: {e}")
            return []

    def _sync_file(
        self,
        entry: EntryMetadata,
        target_path: Path,
        operations: SyncOperations,
        options: SyncOptions,
        result: SyncResult,
    ) -> None:
        """Copy a single file if it is stale, recording any failure.

        Args:
            entry: Source file
            target_path: Where the file belongs in the target tree
            operations: Operations of the current run
            options: Sync options
            result: Result accumulator (modified in place)
        """
        try:
            target = None
            if self.storage.exists(target_path):
                target = self.storage.get_metadata(target_path)
            decision = self.comparator.compare(entry, target)
        except CcsyncStorageError as e:
            result.errors.append(f"Error checking file {entry.path}: {e}")
            return

        if not decision.should_copy:
            result.files_skipped += 1
            self._log_action(options, f"Skipped (up to date): {entry.path}")
            return

        try:
            if operations.ensure_directory(target_path.parent):
                result.directories_created += 1
                self._log_action(options, f"Created directory: {target_path.parent}")
            operations.copy_file(entry.path, target_path)
        except CcsyncStorageError as e:
            result.errors.append(f"Failed to copy {entry.path} -> {target_path}: {e}")
            return

        result.files_copied += 1
        self._log_action(options, f"Copied: {entry.path} -> {target_path}")

    def _log_action(self, options: SyncOptions, message: str) -> None:
        if options.verbose:
            logger.info(message)

    def _display_summary(self, result: SyncResult, dry_run: bool) -> None:
        """Display sync summary.

        Args:
            result: Result of the run
            dry_run: Whether this was a dry run
        """
        self.output.print("")
        if dry_run:
            self.output.success("Dry run complete!")
        else:
            self.output.success("Sync complete!")

        prefix = "Would copy" if dry_run else "Files copied"
        self.output.info(f"  {prefix}: {result.files_copied}")
        self.output.info(f"  Files skipped: {result.files_skipped}")
        self.output.info(f"  Directories created: {result.directories_created}")

        if result.has_errors:
            self.output.print("")
            self.output.warning("Errors encountered:")
            for error in result.errors:
                self.output.warning(f"  - {error}")
