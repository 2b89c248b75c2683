# =============================================================================
# tests/test_file_ops_service.py - File Operation Tests
# =============================================================================
# Tests for FileOpsService: upload placement, delete, folder creation and
# move, including the size cap, root confinement, symlinks and the staging
# folder.
# =============================================================================

import os

import pytest

from app.exceptions import (
    FileTooLargeError,
    InvalidPathError,
    InvalidTargetError,
    NotFoundError,
    StorageIOError,
)
from core.services.file_ops_service import FileOpsService
from core.services.tree_service import list_tree


def _stage(staging_dir, name: str, content: bytes):
    """Write a staged upload and return (path, size)."""
    staged = staging_dir / name
    staged.write_bytes(content)
    return staged, len(content)


def _all_files(root):
    return sorted(
        p.relative_to(root).as_posix()
        for p in root.rglob("*")
        if p.is_file()
    )


# =============================================================================
# Upload Tests
# =============================================================================

class TestUpload:
    """Tests for FileOpsService.upload()."""

    def test_places_file(self, file_ops, storage_root, staging_dir):
        """The staged file ends up at the target path."""
        staged, size = _stage(staging_dir, "tmp-1", b"hello")

        saved = file_ops.upload("docs/hello.txt", staged, size)

        assert (storage_root / "docs" / "hello.txt").read_bytes() == b"hello"
        assert not staged.exists()
        assert saved.name == "hello.txt"
        assert saved.path == "docs/hello.txt"
        assert saved.size == 5
        assert saved.url == "/uploads/docs/hello.txt"

    def test_creates_nested_parents(self, file_ops, storage_root, staging_dir):
        staged, size = _stage(staging_dir, "tmp-2", b"x")

        file_ops.upload("a/b/c/d.txt", staged, size)

        assert (storage_root / "a" / "b" / "c" / "d.txt").is_file()

    def test_target_is_sanitized(self, file_ops, storage_root, staging_dir):
        """Unsafe characters in the target path are replaced."""
        staged, size = _stage(staging_dir, "tmp-3", b"x")

        saved = file_ops.upload("my docs\\q&a?.txt", staged, size)

        assert saved.path == "my_docs/q_a_.txt"
        assert (storage_root / "my_docs" / "q_a_.txt").is_file()

    def test_too_large_rejected_before_commit(self, file_ops, storage_root, staging_dir):
        """Nothing reaches the storage root when the cap is exceeded."""
        staged, _ = _stage(staging_dir, "tmp-4", b"x" * 2048)

        with pytest.raises(FileTooLargeError):
            file_ops.upload("big.bin", staged, 2048)

        assert _all_files(storage_root) == []
        assert list(storage_root.iterdir()) == []

    def test_exactly_at_cap_allowed(self, file_ops, storage_root, staging_dir):
        staged, size = _stage(staging_dir, "tmp-5", b"x" * 1024)

        file_ops.upload("edge.bin", staged, size)

        assert (storage_root / "edge.bin").stat().st_size == 1024

    @pytest.mark.parametrize("target", ["", "/", "./.", "../../x", ".."])
    def test_empty_target_rejected(self, file_ops, staging_dir, target):
        """Targets that sanitize to the root are invalid."""
        staged, size = _stage(staging_dir, "tmp-6", b"x")

        with pytest.raises(InvalidPathError):
            file_ops.upload(target, staged, size)

        assert staged.exists()

    def test_overwrites_existing_file(self, file_ops, storage_root, staging_dir):
        """Last write wins."""
        (storage_root / "same.txt").write_bytes(b"old")
        staged, size = _stage(staging_dir, "tmp-7", b"new")

        file_ops.upload("same.txt", staged, size)

        assert (storage_root / "same.txt").read_bytes() == b"new"

    def test_target_is_a_folder(self, file_ops, storage_root, staging_dir):
        """A folder in the way is rejected instead of receiving the file."""
        (storage_root / "taken" / "inner").mkdir(parents=True)
        staged, size = _stage(staging_dir, "tmp-8", b"x")

        with pytest.raises(InvalidTargetError):
            file_ops.upload("taken", staged, size)

        assert _all_files(storage_root) == []


# =============================================================================
# Delete Tests
# =============================================================================

class TestDelete:
    """Tests for FileOpsService.delete()."""

    def test_missing_path(self, file_ops):
        with pytest.raises(NotFoundError):
            file_ops.delete("nope.txt")

    def test_deletes_file(self, file_ops, sample_tree):
        file_ops.delete("a.txt")

        assert not (sample_tree / "a.txt").exists()
        assert (sample_tree / "b" / "c.txt").exists()

    def test_deletes_folder_recursively(self, file_ops, sample_tree):
        """The folder and all descendants disappear from the listing."""
        (sample_tree / "b" / "deeper").mkdir()
        (sample_tree / "b" / "deeper" / "x.txt").write_bytes(b"x")

        file_ops.delete("b")

        assert not (sample_tree / "b").exists()
        assert [node.name for node in list_tree(sample_tree)] == ["a.txt"]

    @pytest.mark.parametrize("path", ["", "/", "../.."])
    def test_root_never_deleted(self, file_ops, sample_tree, path):
        with pytest.raises(InvalidPathError):
            file_ops.delete(path)

        assert (sample_tree / "a.txt").exists()

    def test_symlink_escape_refused(self, file_ops, storage_root, tmp_path):
        """A link pointing outside the root can't be used to delete there."""
        outside = tmp_path / "outside"
        outside.mkdir()
        (outside / "keep.txt").write_bytes(b"keep")
        os.symlink(outside, storage_root / "link")

        with pytest.raises(InvalidPathError):
            file_ops.delete("link/keep.txt")

        assert (outside / "keep.txt").exists()


# =============================================================================
# Create Folder Tests
# =============================================================================

class TestCreateFolder:
    """Tests for FileOpsService.create_folder()."""

    def test_creates_nested(self, file_ops, storage_root):
        file_ops.create_folder("photos/2024/summer")

        assert (storage_root / "photos" / "2024" / "summer").is_dir()

    def test_idempotent(self, file_ops, storage_root):
        """A second call neither fails nor touches existing contents."""
        file_ops.create_folder("photos")
        (storage_root / "photos" / "cat.jpg").write_bytes(b"meow")

        file_ops.create_folder("photos")

        assert (storage_root / "photos" / "cat.jpg").read_bytes() == b"meow"

    def test_empty_rejected(self, file_ops):
        with pytest.raises(InvalidPathError):
            file_ops.create_folder("")

    def test_file_in_the_way(self, file_ops, sample_tree):
        with pytest.raises(StorageIOError):
            file_ops.create_folder("a.txt")


# =============================================================================
# Move Tests
# =============================================================================

class TestMove:
    """Tests for FileOpsService.move()."""

    def test_move_creates_destination_folder(self, file_ops, storage_root):
        """folder/old.txt -> folder2/new.txt with folder2 not existing yet."""
        (storage_root / "folder").mkdir()
        (storage_root / "folder" / "old.txt").write_bytes(b"payload \x00\xff")

        file_ops.move("folder/old.txt", "folder2/new.txt")

        assert not (storage_root / "folder" / "old.txt").exists()
        assert (storage_root / "folder2").is_dir()
        assert (storage_root / "folder2" / "new.txt").read_bytes() == b"payload \x00\xff"

    def test_move_folder(self, file_ops, sample_tree):
        file_ops.move("b", "renamed")

        assert not (sample_tree / "b").exists()
        assert (sample_tree / "renamed" / "c.txt").read_bytes() == b"abc"

    def test_missing_source(self, file_ops, storage_root):
        with pytest.raises(NotFoundError):
            file_ops.move("ghost.txt", "anywhere.txt")

    @pytest.mark.parametrize("src,dest", [("", "x"), ("a.txt", ""), ("..", "x")])
    def test_empty_paths_rejected(self, file_ops, sample_tree, src, dest):
        with pytest.raises(InvalidPathError):
            file_ops.move(src, dest)

    def test_into_itself_rejected(self, file_ops, sample_tree):
        with pytest.raises(InvalidPathError):
            file_ops.move("b", "b/inside")

        assert (sample_tree / "b" / "c.txt").exists()

    def test_paths_are_sanitized(self, file_ops, sample_tree):
        file_ops.move("a.txt", "new folder/a copy.txt")

        assert (sample_tree / "new_folder" / "a_copy.txt").read_bytes() == b"0123456789"


# =============================================================================
# Symlink Tests
# =============================================================================

class TestSymlinks:
    """Mutations act on a link itself, never on what it points to."""

    @pytest.fixture
    def linked(self, storage_root):
        """
        Storage root with:
            real/keep.txt
            real.txt
            link      -> real/
            link.txt  -> real.txt
        """
        (storage_root / "real").mkdir()
        (storage_root / "real" / "keep.txt").write_bytes(b"keep")
        (storage_root / "real.txt").write_bytes(b"data")
        os.symlink(storage_root / "real", storage_root / "link")
        os.symlink(storage_root / "real.txt", storage_root / "link.txt")
        return storage_root

    def test_delete_folder_link(self, file_ops, linked):
        file_ops.delete("link")

        assert not os.path.lexists(linked / "link")
        assert (linked / "real" / "keep.txt").read_bytes() == b"keep"

    def test_delete_file_link(self, file_ops, linked):
        file_ops.delete("link.txt")

        assert not os.path.lexists(linked / "link.txt")
        assert (linked / "real.txt").read_bytes() == b"data"

    def test_delete_dangling_link(self, file_ops, storage_root):
        os.symlink(storage_root / "gone", storage_root / "dangling")

        file_ops.delete("dangling")

        assert not os.path.lexists(storage_root / "dangling")

    def test_move_file_link(self, file_ops, linked):
        file_ops.move("link.txt", "moved.txt")

        assert (linked / "moved.txt").is_symlink()
        assert not os.path.lexists(linked / "link.txt")
        assert (linked / "real.txt").read_bytes() == b"data"

    def test_move_folder_link(self, file_ops, linked):
        file_ops.move("link", "other/link")

        assert (linked / "other" / "link").is_symlink()
        assert (linked / "real" / "keep.txt").exists()

    def test_upload_replaces_link(self, file_ops, linked, staging_dir):
        """The upload takes the link's place; the linked file is untouched."""
        staged, size = _stage(staging_dir, "tmp-9", b"fresh")

        file_ops.upload("link.txt", staged, size)

        assert not (linked / "link.txt").is_symlink()
        assert (linked / "link.txt").read_bytes() == b"fresh"
        assert (linked / "real.txt").read_bytes() == b"data"


# =============================================================================
# Staging Folder Tests
# =============================================================================

class TestStagingFolder:
    """The staging folder inside the root is off limits."""

    @pytest.fixture
    def ops(self, storage_root):
        incoming = storage_root / ".incoming"
        incoming.mkdir()
        (incoming / "partial").write_bytes(b"in flight")
        return FileOpsService(storage_root, max_upload_bytes=1024, staging_dir=incoming)

    def test_delete_refused(self, ops, storage_root):
        with pytest.raises(InvalidPathError):
            ops.delete(".incoming")

        assert (storage_root / ".incoming" / "partial").exists()

    def test_delete_inside_refused(self, ops, storage_root):
        with pytest.raises(InvalidPathError):
            ops.delete(".incoming/partial")

        assert (storage_root / ".incoming" / "partial").exists()

    def test_move_out_refused(self, ops, storage_root):
        with pytest.raises(InvalidPathError):
            ops.move(".incoming", "elsewhere")

        assert (storage_root / ".incoming").is_dir()

    def test_move_in_refused(self, ops, storage_root):
        (storage_root / "a.txt").write_bytes(b"a")

        with pytest.raises(InvalidPathError):
            ops.move("a.txt", ".incoming/a.txt")

        assert (storage_root / "a.txt").exists()

    def test_upload_into_refused(self, ops, storage_root, staging_dir):
        staged, size = _stage(staging_dir, "tmp-10", b"x")

        with pytest.raises(InvalidPathError):
            ops.upload(".incoming/partial", staged, size)

        assert (storage_root / ".incoming" / "partial").read_bytes() == b"in flight"

    def test_create_folder_inside_refused(self, ops):
        with pytest.raises(InvalidPathError):
            ops.create_folder(".incoming/sub")

    def test_other_dot_folders_allowed(self, ops, storage_root):
        ops.create_folder(".config")

        assert (storage_root / ".config").is_dir()
