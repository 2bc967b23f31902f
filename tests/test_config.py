"""Unit tests for configuration and repository discovery."""

from pathlib import Path

import pytest

from ccsync.config import (
    MARKER_FILE_NAME,
    SOURCE_DIR_ENV_VAR,
    Config,
    find_git_repo,
    find_repo_dir,
)


@pytest.fixture
def repo(tmp_path):
    """Create a git repository with a nested directory."""
    (tmp_path / "repo" / ".git").mkdir(parents=True)
    (tmp_path / "repo" / "src" / "pkg").mkdir(parents=True)
    return tmp_path / "repo"


class TestFindGitRepo:
    """Tests for find_git_repo function."""

    def test_repository_root(self, repo):
        """Test the start directory itself is checked."""
        assert find_git_repo(repo) == repo

    def test_nested_directory(self, repo):
        """Test parents are searched."""
        assert find_git_repo(repo / "src" / "pkg") == repo

    def test_git_file_counts(self, tmp_path):
        """Test a .git file (worktree) marks a repository too."""
        worktree = tmp_path / "worktree"
        worktree.mkdir()
        (worktree / ".git").write_text("gitdir: /elsewhere")
        assert find_git_repo(worktree) == worktree

    def test_innermost_repository_wins(self, repo):
        """Test a nested repository is found before its parent."""
        inner = repo / "src" / "pkg"
        (inner / ".git").mkdir()
        assert find_git_repo(inner) == inner


class TestFindRepoDir:
    """Tests for find_repo_dir function."""

    def test_requires_sessions_directory(self, repo):
        """Test a repository without sessions directory is skipped."""
        assert find_repo_dir(repo / "src") != repo

    def test_initialized_repository(self, repo):
        """Test an initialized repository is found from a subdirectory."""
        Config().init_sessions_dir(repo)
        assert find_repo_dir(repo / "src" / "pkg") == repo

    def test_sessions_directory_without_git(self, tmp_path):
        """Test a sessions directory alone is not enough."""
        base = tmp_path / "nogit"
        (base / ".claude" / "ccss_sessions").mkdir(parents=True)
        assert find_repo_dir(base) != base


class TestConfig:
    """Tests for the Config class."""

    def test_default_source_root(self, tmp_path, monkeypatch):
        """Test the source root defaults to ~/.claude/projects."""
        monkeypatch.delenv(SOURCE_DIR_ENV_VAR, raising=False)
        config = Config(home=tmp_path)
        assert config.get_source_root() == tmp_path / ".claude" / "projects"

    def test_source_root_from_environment(self, tmp_path, monkeypatch):
        """Test the environment variable overrides the default."""
        monkeypatch.setenv(SOURCE_DIR_ENV_VAR, str(tmp_path / "custom"))
        assert Config(home=tmp_path).get_source_root() == tmp_path / "custom"

    def test_source_root_expands_user(self, monkeypatch):
        """Test ~ in the environment variable is expanded."""
        monkeypatch.setenv(SOURCE_DIR_ENV_VAR, "~/sessions")
        assert Config().get_source_root() == Path.home() / "sessions"

    def test_empty_environment_variable_ignored(self, tmp_path, monkeypatch):
        """Test an empty variable falls back to the default."""
        monkeypatch.setenv(SOURCE_DIR_ENV_VAR, "")
        config = Config(home=tmp_path)
        assert config.get_source_root() == tmp_path / ".claude" / "projects"

    def test_home_defaults_to_user_home(self):
        """Test home falls back to the current user's home."""
        assert Config().home == Path.home()

    def test_sessions_dir(self, repo):
        """Test the sessions directory location."""
        assert Config().get_sessions_dir(repo) == repo / ".claude" / "ccss_sessions"

    def test_init_sessions_dir(self, repo):
        """Test init creates the directory and an empty marker."""
        config = Config()
        assert not config.is_initialized(repo)

        sessions_dir, marker_file = config.init_sessions_dir(repo)

        assert sessions_dir.is_dir()
        assert marker_file == sessions_dir / MARKER_FILE_NAME
        assert marker_file.read_bytes() == b""
        assert config.is_initialized(repo)

    def test_init_keeps_existing_files(self, repo):
        """Test init does not clear an existing sessions directory."""
        config = Config()
        sessions_dir, _ = config.init_sessions_dir(repo)
        (sessions_dir / "kept.json").write_text("{}")

        config.init_sessions_dir(repo)

        assert (sessions_dir / "kept.json").read_text() == "{}"
