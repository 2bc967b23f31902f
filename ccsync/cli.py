"""CLI interface for syncing Claude Code sessions into a repository."""

import logging
from pathlib import Path
from typing import Any, Optional

import click

from .config import SOURCE_DIR_ENV_VAR, config, find_git_repo, find_repo_dir
from .exceptions import CcsyncConfigError, CcsyncError, CcsyncInvalidInputError
from .output import OutputFormatter
from .path_codec import AmbiguousPath, decode, encode_path
from .sync import LocalStorage, SyncEngine, SyncOptions

logger = logging.getLogger(__name__)


@click.group()
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
@click.option("--json", is_flag=True, help="Output in JSON format")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose/debug logging output",
)
@click.version_option(package_name="ccsync")
@click.pass_context
def main(ctx: Any, quiet: bool, json: bool, verbose: bool) -> None:
    """ccsync - Sync Claude Code session files into a repository."""
    ctx.ensure_object(dict)
    ctx.obj["out"] = OutputFormatter(json_output=json, quiet=quiet)
    ctx.obj["verbose"] = verbose

    # Configure logging based on verbose flag
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%H:%M:%S",
        )
        logging.getLogger("ccsync").setLevel(logging.DEBUG)
    else:
        logging.basicConfig(level=logging.WARNING)


@main.command()
@click.option(
    "--repo-dir",
    "-r",
    type=click.Path(file_okay=False, path_type=Path),
    help="Repository directory (defaults to the nearest parent with .git)",
)
@click.pass_context
def init(ctx: Any, repo_dir: Optional[Path]) -> None:
    """Initialize a repository for session syncing.

    Creates .claude/ccss_sessions with an empty .gitkeep marker.
    """
    out: OutputFormatter = ctx.obj["out"]

    if repo_dir is None:
        repo_dir = find_git_repo(Path.cwd().resolve())
        if repo_dir is None:
            out.error(
                "No git repository found in current directory or parent directories"
            )
            ctx.exit(1)
            return
    repo_dir = repo_dir.resolve()

    try:
        sessions_dir, marker_file = config.init_sessions_dir(repo_dir)
    except OSError as e:
        out.error(f"Failed to create session sync directory: {e}")
        ctx.exit(1)
        return

    if out.json_output:
        out.output_json(
            {"sessions_dir": str(sessions_dir), "marker_file": str(marker_file)}
        )
        return

    out.success(f"Initialized session sync directory at: {sessions_dir}")
    out.info(f"Created: {marker_file}")


def _resolve_sync_paths(
    source_dir: Optional[Path], repo_dir: Optional[Path]
) -> tuple[Path, str, Path]:
    """Resolve the directories a sync run works on.

    Args:
        source_dir: Explicit session source root, or None for the default
        repo_dir: Explicit repository, or None to search from the cwd

    Returns:
        Tuple of (source_root, identifier_prefix, target_dir)

    Raises:
        CcsyncConfigError: If the repository, the session directory or the
            sessions target directory cannot be found
        CcsyncInvalidInputError: If the repository path cannot be encoded
    """
    if repo_dir is None:
        repo_dir = find_repo_dir(Path.cwd().resolve())
        if repo_dir is None:
            raise CcsyncConfigError(
                "No repository with .claude/ccss_sessions found. "
                "Run 'ccsync init' first"
            )
    # ".." must not reach the identifier
    repo_dir = repo_dir.resolve()
    logger.info(f"Using repository directory: {repo_dir}")

    identifier_prefix = encode_path(repo_dir)
    logger.debug(f"Repository identifier: {identifier_prefix}")

    source_root = (source_dir or config.get_source_root()).absolute()
    session_dir = source_root / identifier_prefix
    logger.info(f"Using source directory: {session_dir}")

    if not session_dir.exists():
        raise CcsyncConfigError(f"Source directory does not exist: {session_dir}")
    if not session_dir.is_dir():
        raise CcsyncConfigError(f"Source path is not a directory: {session_dir}")

    target_dir = config.get_sessions_dir(repo_dir)
    if not config.is_initialized(repo_dir):
        raise CcsyncConfigError(
            f"Target directory does not exist: {target_dir}. "
            "Run 'ccsync init' first"
        )

    return source_root, identifier_prefix, target_dir


@main.command()
@click.option(
    "--source-dir",
    "-s",
    type=click.Path(path_type=Path),
    help=(
        "Directory containing Claude Code sessions "
        f"(defaults to ${SOURCE_DIR_ENV_VAR} or ~/.claude/projects/)"
    ),
)
@click.option(
    "--repo-dir",
    "-r",
    type=click.Path(path_type=Path),
    help="Repository directory (defaults to the nearest initialized parent)",
)
@click.option(
    "--dry-run",
    "-d",
    is_flag=True,
    help="Show what would be synced without syncing",
)
@click.pass_context
def sync(
    ctx: Any,
    source_dir: Optional[Path],
    repo_dir: Optional[Path],
    dry_run: bool,
) -> None:
    """Sync session files into the repository.

    Copies every session file of this repository that is newer than its
    copy in .claude/ccss_sessions. Nothing is ever deleted.

    Examples:
        ccsync sync                       # Sync the current repository
        ccsync sync --dry-run             # Preview sync changes
        ccsync sync -s /tmp/projects      # Use another session source
    """
    out: OutputFormatter = ctx.obj["out"]
    verbose: bool = ctx.obj["verbose"]

    try:
        source_root, identifier_prefix, target_dir = _resolve_sync_paths(
            source_dir, repo_dir
        )
    except CcsyncError as e:
        out.error(str(e))
        ctx.exit(1)
        return
    session_dir = source_root / identifier_prefix

    out.info("Syncing Claude Code sessions:")
    out.info(f"  Source: {session_dir}")
    out.info(f"  Target: {target_dir}")
    if dry_run:
        out.info("  Mode: DRY RUN (no changes will be made)")

    engine = SyncEngine(LocalStorage(), out)
    try:
        result = engine.sync(
            source_root,
            identifier_prefix,
            target_dir,
            SyncOptions(dry_run=dry_run, verbose=verbose),
        )
    except CcsyncError as e:
        out.error(f"Failed to sync sessions: {e}")
        ctx.exit(1)
        return

    if out.json_output:
        out.output_json({"dry_run": dry_run, **result.to_dict()})
    elif out.quiet:
        for error in result.errors:
            out.warning(f"  - {error}")


@main.command()
@click.argument("path", type=click.Path(path_type=Path))
@click.pass_context
def encode(ctx: Any, path: Path) -> None:
    """Print the session identifier of an absolute directory PATH."""
    out: OutputFormatter = ctx.obj["out"]

    try:
        identifier = encode_path(path)
    except CcsyncInvalidInputError as e:
        out.error(str(e))
        ctx.exit(1)
        return

    if out.json_output:
        out.output_json({"path": str(path), "identifier": identifier})
    else:
        click.echo(identifier)


@main.command(name="decode")
@click.argument("identifier", type=str)
@click.pass_context
def decode_identifier(ctx: Any, identifier: str) -> None:
    """Print the candidate path(s) of a session IDENTIFIER.

    Hyphens inside directory names cannot be told apart from separators,
    so the result is a best guess. Put -- before identifiers starting
    with a hyphen:

        ccsync decode -- -Users-dev-project
    """
    out: OutputFormatter = ctx.obj["out"]

    result = decode(identifier)
    if isinstance(result, AmbiguousPath):
        candidates = [str(candidate) for candidate in result.candidates]
    else:
        candidates = [str(result.path)]

    if out.json_output:
        out.output_json({"identifier": identifier, "candidates": candidates})
        return

    for candidate in candidates:
        click.echo(candidate)
