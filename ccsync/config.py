"""Configuration and repository discovery for ccsync."""

import logging
import os
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

# Environment variable overriding the default session source directory
SOURCE_DIR_ENV_VAR = "CC_SYNC_SESSION_SOURCE_DIR"

# Location of the synced sessions inside a repository
SESSIONS_DIR_PARTS: tuple[str, ...] = (".claude", "ccss_sessions")

# Empty file marking an initialized sessions directory
MARKER_FILE_NAME = ".gitkeep"

GIT_DIR_NAME = ".git"


def find_git_repo(start: Path) -> Optional[Path]:
    """Find the nearest directory containing a .git entry.

    Args:
        start: Directory to start searching from (inclusive)

    Returns:
        Repository directory, or None if no ancestor is a repository
    """
    for current in [start, *start.parents]:
        if (current / GIT_DIR_NAME).exists():
            return current
    return None


def find_repo_dir(start: Path) -> Optional[Path]:
    """Find the nearest git repository that has been initialized for syncing.

    Args:
        start: Directory to start searching from (inclusive)

    Returns:
        Repository directory containing both .git and the sessions
        directory, or None if there is none
    """
    for current in [start, *start.parents]:
        git_dir = current / GIT_DIR_NAME
        sessions_dir = current.joinpath(*SESSIONS_DIR_PARTS)
        logger.debug(
            f"Checking directory: {current} git: {git_dir.exists()}, "
            f"sessions: {sessions_dir.exists()}"
        )
        if git_dir.exists() and sessions_dir.exists():
            return current
    return None


class Config:
    """Resolves default locations used by the CLI."""

    def __init__(self, home: Optional[Path] = None):
        """Initialize configuration.

        Args:
            home: Home directory (defaults to the current user's home)
        """
        self._home = home

    @property
    def home(self) -> Path:
        return self._home or Path.home()

    def get_source_root(self) -> Path:
        """Get the directory holding Claude Code session directories.

        Uses $CC_SYNC_SESSION_SOURCE_DIR when set, ~/.claude/projects
        otherwise.
        """
        env_source = os.environ.get(SOURCE_DIR_ENV_VAR)
        if env_source:
            return Path(env_source).expanduser()
        return self.home / ".claude" / "projects"

    def get_sessions_dir(self, repo_dir: Path) -> Path:
        """Get the directory synced sessions are written to."""
        return repo_dir.joinpath(*SESSIONS_DIR_PARTS)

    def is_initialized(self, repo_dir: Path) -> bool:
        """Check whether a repository has a sessions directory."""
        return self.get_sessions_dir(repo_dir).is_dir()

    def init_sessions_dir(self, repo_dir: Path) -> tuple[Path, Path]:
        """Create the sessions directory and its marker file.

        Args:
            repo_dir: Repository directory

        Returns:
            Tuple of (sessions_dir, marker_file)
        """
        sessions_dir = self.get_sessions_dir(repo_dir)
        sessions_dir.mkdir(parents=True, exist_ok=True)
        marker_file = sessions_dir / MARKER_FILE_NAME
        marker_file.touch(exist_ok=True)
        return sessions_dir, marker_file


config = Config()
