"""Tests for the storage implementations.

Every test runs against both LocalStorage and InMemoryStorage so that the
fake keeps the same not-found and existence rules as the real filesystem.
"""

import os
from pathlib import Path

import pytest

from ccsync.exceptions import (
    CcsyncNotFoundError,
    CcsyncPathError,
    CcsyncStorageError,
)
from ccsync.sync.memory import InMemoryStorage
from ccsync.sync.storage import EntryMetadata, LocalStorage


class StorageHarness:
    """Creates fixture entries on one storage implementation."""

    def __init__(self, storage, root: Path):
        self.storage = storage
        self.root = root

    def add_file(self, relative: str, content: bytes = b"", mtime: float = None):
        path = self.root / relative
        if isinstance(self.storage, InMemoryStorage):
            self.storage.add_file(path, content, modified=mtime)
        else:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(content)
            if mtime is not None:
                os.utime(path, (mtime, mtime))
        return path

    def add_directory(self, relative: str):
        path = self.root / relative
        if isinstance(self.storage, InMemoryStorage):
            self.storage.add_directory(path)
        else:
            path.mkdir(parents=True, exist_ok=True)
        return path

    def read(self, path: Path) -> bytes:
        if isinstance(self.storage, InMemoryStorage):
            return self.storage.read_file(path)
        return path.read_bytes()


@pytest.fixture(params=["local", "memory"])
def harness(request, tmp_path):
    """Provide a harness for each storage implementation."""
    if request.param == "local":
        return StorageHarness(LocalStorage(), tmp_path)
    storage = InMemoryStorage(clock=lambda: 1_000_000.0)
    root = Path("/mem/root")
    storage.add_directory(root)
    return StorageHarness(storage, root)


class TestListDirectory:
    """Tests for list_directory."""

    def test_lists_direct_children_sorted(self, harness):
        """Test only direct children are listed, in name order."""
        harness.add_file("b.json", b"b")
        harness.add_file("a.json", b"a")
        harness.add_file("sub/nested.json", b"n")

        entries = harness.storage.list_directory(harness.root)

        assert [entry.name for entry in entries] == ["a.json", "b.json", "sub"]
        assert [entry.is_directory for entry in entries] == [False, False, True]
        assert all(entry.path.parent == harness.root for entry in entries)

    def test_reports_modified_time(self, harness):
        """Test listed files carry their modification time."""
        harness.add_file("a.json", mtime=1_500_000.0)

        (entry,) = harness.storage.list_directory(harness.root)

        assert entry.modified == pytest.approx(1_500_000.0)

    def test_missing_directory(self, harness):
        """Test listing a missing directory raises not-found."""
        with pytest.raises(CcsyncNotFoundError):
            harness.storage.list_directory(harness.root / "missing")

    def test_listing_a_file(self, harness):
        """Test listing a file raises a path error."""
        path = harness.add_file("a.json")
        with pytest.raises(CcsyncPathError):
            harness.storage.list_directory(path)


class TestGetMetadata:
    """Tests for get_metadata."""

    def test_file_metadata(self, harness):
        """Test metadata of a file."""
        path = harness.add_file("a.json", mtime=1_200_000.0)

        metadata = harness.storage.get_metadata(path)

        assert metadata.path == path
        assert metadata.is_directory is False
        assert metadata.modified == pytest.approx(1_200_000.0)

    def test_directory_metadata(self, harness):
        """Test metadata of a directory."""
        path = harness.add_directory("sub")
        assert harness.storage.get_metadata(path).is_directory is True

    def test_missing_entry(self, harness):
        """Test metadata of a missing entry raises not-found."""
        with pytest.raises(CcsyncNotFoundError) as exc_info:
            harness.storage.get_metadata(harness.root / "missing.json")
        assert exc_info.value.path == harness.root / "missing.json"


class TestCopyFile:
    """Tests for copy_file."""

    def test_copies_bytes(self, harness):
        """Test the target receives the source content."""
        source = harness.add_file("a.json", b'{"a": 1}')
        target = harness.add_directory("out") / "a.json"

        harness.storage.copy_file(source, target)

        assert harness.read(target) == b'{"a": 1}'

    def test_overwrites_existing_target(self, harness):
        """Test copying over an existing file replaces its content."""
        source = harness.add_file("a.json", b"new")
        target = harness.add_file("out/a.json", b"old")

        harness.storage.copy_file(source, target)

        assert harness.read(target) == b"new"

    def test_missing_source(self, harness):
        """Test copying a missing source raises not-found."""
        target = harness.add_directory("out") / "a.json"
        with pytest.raises(CcsyncNotFoundError):
            harness.storage.copy_file(harness.root / "missing.json", target)

    def test_missing_target_parent(self, harness):
        """Test the target parent is not created implicitly."""
        source = harness.add_file("a.json")
        with pytest.raises(CcsyncNotFoundError):
            harness.storage.copy_file(source, harness.root / "nope" / "a.json")
        assert not harness.storage.exists(harness.root / "nope")

    def test_copying_a_directory(self, harness):
        """Test copying a directory raises a path error."""
        source = harness.add_directory("sub")
        target = harness.add_directory("out") / "sub"
        with pytest.raises(CcsyncPathError):
            harness.storage.copy_file(source, target)


class TestCreateDirectory:
    """Tests for create_directory."""

    def test_creates_intermediate_directories(self, harness):
        """Test missing parents are created."""
        path = harness.root / "a" / "b" / "c"

        harness.storage.create_directory(path)

        assert harness.storage.exists(harness.root / "a")
        assert harness.storage.get_metadata(path).is_directory

    def test_idempotent(self, harness):
        """Test creating an existing directory succeeds."""
        path = harness.add_directory("sub")
        harness.storage.create_directory(path)
        assert harness.storage.exists(path)

    def test_over_a_file(self, harness):
        """Test creating a directory where a file exists fails."""
        path = harness.add_file("a.json")
        with pytest.raises(CcsyncStorageError):
            harness.storage.create_directory(path / "sub")


class TestExistsAndModifiedTime:
    """Tests for exists and set_modified_time."""

    def test_exists(self, harness):
        """Test existence of files, directories and missing entries."""
        file_path = harness.add_file("a.json")
        dir_path = harness.add_directory("sub")

        assert harness.storage.exists(file_path)
        assert harness.storage.exists(dir_path)
        assert not harness.storage.exists(harness.root / "missing")

    def test_set_modified_time(self, harness):
        """Test the modification time can be changed."""
        path = harness.add_file("a.json", mtime=1_000.0)

        harness.storage.set_modified_time(path, 2_000_000.0)

        assert harness.storage.get_metadata(path).modified == pytest.approx(
            2_000_000.0
        )

    def test_set_modified_time_missing(self, harness):
        """Test setting the time of a missing entry raises not-found."""
        with pytest.raises(CcsyncNotFoundError):
            harness.storage.set_modified_time(harness.root / "missing", 1.0)


class TestEntryMetadata:
    """Tests for EntryMetadata."""

    def test_from_path(self, tmp_path):
        """Test building metadata from a real path."""
        path = tmp_path / "a.json"
        path.write_text("{}")
        os.utime(path, (100.0, 100.0))

        metadata = EntryMetadata.from_path(path)

        assert metadata == EntryMetadata(path=path, modified=100.0, is_directory=False)
        assert metadata.name == "a.json"

    def test_immutable(self):
        """Test metadata cannot be modified."""
        metadata = EntryMetadata(path=Path("/a"), modified=1.0, is_directory=False)
        with pytest.raises(AttributeError):
            metadata.modified = 2.0


class TestInMemoryStorageHelpers:
    """Tests for the InMemoryStorage test helpers."""

    def test_add_file_creates_parents(self):
        """Test add_file creates parent directories."""
        storage = InMemoryStorage()
        storage.add_file("/a/b/c.txt", b"x")

        assert storage.exists(Path("/a/b"))
        assert storage.list_all_files() == [Path("/a/b/c.txt")]
        assert Path("/a") in storage.list_all_directories()

    def test_copy_uses_clock(self):
        """Test copies are stamped with the storage clock."""
        storage = InMemoryStorage(clock=lambda: 42.0)
        storage.add_file("/src/a.txt", b"x", modified=10.0)
        storage.add_directory("/dst")

        storage.copy_file("/src/a.txt", "/dst/a.txt")

        assert storage.get_metadata("/dst/a.txt").modified == 42.0

    def test_read_missing_file(self):
        """Test reading a missing file raises not-found."""
        with pytest.raises(CcsyncNotFoundError):
            InMemoryStorage().read_file("/missing")
