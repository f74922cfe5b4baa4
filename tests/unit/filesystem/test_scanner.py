"""Tests for DirectoryScanner and path resolution."""

from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path
from unittest.mock import patch

import pytest
from dirwarden.filesystem.errors import (
    AccessDeniedError,
    DirectoryNotFoundError,
    MissingRootError,
)
from dirwarden.filesystem.models import DIRECTORY_SIZE, DirectoryEntry, ScanMode
from dirwarden.filesystem.scanner import DirectoryScanner, is_within_root, resolve_path


@pytest.fixture
def root(tmp_path: Path) -> Path:
    """Root directory inside a sandbox, with a sibling directory next to it."""
    root = tmp_path / "data"
    root.mkdir()
    (tmp_path / "data2").mkdir()
    (tmp_path / "secret.txt").write_text("secret")
    return root.resolve()


class TestIsWithinRoot:
    """Tests for is_within_root containment check."""

    def test_root_itself(self) -> None:
        """The root is inside itself."""
        assert is_within_root(Path("/srv/data"), Path("/srv/data")) is True

    def test_child(self) -> None:
        """A nested path is inside the root."""
        assert is_within_root(Path("/srv/data/a/b.txt"), Path("/srv/data")) is True

    def test_sibling_with_common_prefix(self) -> None:
        """A sibling sharing a string prefix is outside the root."""
        assert is_within_root(Path("/srv/data2/x"), Path("/srv/data")) is False

    def test_parent(self) -> None:
        """The root's parent is outside the root."""
        assert is_within_root(Path("/srv"), Path("/srv/data")) is False


class TestResolvePath:
    """Tests for resolve_path traversal defense."""

    def test_empty_path_is_root(self, root: Path) -> None:
        """An empty relative path resolves to the root."""
        assert resolve_path(root, "") == root

    def test_leading_slash_is_relative_to_root(self, root: Path) -> None:
        """Absolute-looking request paths are interpreted under the root."""
        (root / "etc").mkdir()
        assert resolve_path(root, "/etc") == root / "etc"

    def test_inner_dotdot_allowed(self, root: Path) -> None:
        """Traversal that stays inside the root is allowed."""
        (root / "a").mkdir()
        assert resolve_path(root, "a/../a") == root / "a"

    @pytest.mark.parametrize(
        "traversal",
        [
            "..",
            "../",
            "../secret.txt",
            "../../etc/passwd",
            "../../../../../../etc/passwd",
            "/../../etc/passwd",
            "a/../../secret.txt",
            "../data2",
            "./../data2/x",
        ],
    )
    def test_traversal_rejected(self, root: Path, traversal: str) -> None:
        """Paths resolving outside the root raise AccessDeniedError."""
        with pytest.raises(AccessDeniedError) as exc_info:
            resolve_path(root, traversal)
        assert exc_info.value.requested == traversal
        assert exc_info.value.root == root

    def test_symlink_escape_rejected(self, root: Path) -> None:
        """A symlink pointing outside the root is rejected after resolution."""
        (root / "escape").symlink_to(root.parent)
        with pytest.raises(AccessDeniedError):
            resolve_path(root, "escape/secret.txt")

    def test_symlink_loop_rejected(self, root: Path) -> None:
        """Resolution failures are reported as access denied."""
        original_resolve = Path.resolve

        def looping_resolve(self: Path, strict: bool = False) -> Path:
            if self.name == "loop":
                raise RuntimeError(f"Symlink loop from {self}")
            return original_resolve(self, strict=strict)

        with patch.object(Path, "resolve", looping_resolve), pytest.raises(AccessDeniedError):
            resolve_path(root, "loop")


class TestListDirectory:
    """Tests for shallow listing."""

    def test_empty_directory(self, root: Path) -> None:
        """Listing an empty directory returns an empty list."""
        assert DirectoryScanner(root).list_directory() == []

    def test_lists_files_and_directories(
        self, root: Path, make_file: Callable[..., Path]
    ) -> None:
        """Files and directories one level deep are returned."""
        mtime = datetime(2025, 1, 15, 10, 0, tzinfo=UTC)
        make_file(root / "b.txt", size=10, mtime=mtime)
        (root / "a_dir").mkdir()
        make_file(root / "a_dir" / "nested.txt", size=5)

        entries = DirectoryScanner(root).list_directory()

        assert [e.name for e in entries] == ["a_dir", "b.txt"]
        directory, file = entries
        assert directory.is_directory is True
        assert directory.size == DIRECTORY_SIZE
        assert file.is_directory is False
        assert file.size == 10
        assert file.last_modified == mtime
        assert file.full_path == root / "b.txt"

    def test_lists_subdirectory(self, root: Path, make_file: Callable[..., Path]) -> None:
        """A relative path lists that directory only."""
        make_file(root / "top.txt")
        make_file(root / "sub" / "inner.txt", size=3)

        entries = DirectoryScanner(root).list_directory("/sub")

        assert [e.name for e in entries] == ["inner.txt"]

    def test_timestamps_are_utc(self, root: Path, make_file: Callable[..., Path]) -> None:
        """Modification times are timezone-aware UTC."""
        make_file(root / "a.txt")
        (entry,) = DirectoryScanner(root).list_directory()
        assert entry.last_modified.tzinfo == UTC

    def test_traversal_rejected(self, root: Path) -> None:
        """Listing outside the root raises AccessDeniedError."""
        with pytest.raises(AccessDeniedError):
            DirectoryScanner(root).list_directory("../")

    def test_missing_directory(self, root: Path) -> None:
        """Listing a missing directory raises DirectoryNotFoundError."""
        with pytest.raises(DirectoryNotFoundError):
            DirectoryScanner(root).list_directory("nope")

    def test_file_is_not_a_directory(self, root: Path, make_file: Callable[..., Path]) -> None:
        """Listing a file raises DirectoryNotFoundError."""
        make_file(root / "a.txt")
        with pytest.raises(DirectoryNotFoundError):
            DirectoryScanner(root).list_directory("a.txt")

    def test_vanished_entry_skipped(
        self,
        root: Path,
        make_file: Callable[..., Path],
        events: Callable[..., list[tuple[str, dict[str, object]]]],
    ) -> None:
        """An entry that disappears mid-scan is skipped and reported."""
        make_file(root / "ok.txt")
        (root / "gone.txt").symlink_to(root / "deleted-target.txt")

        entries = DirectoryScanner(root).list_directory()

        assert [e.name for e in entries] == ["ok.txt"]
        scan_errors = events("scan_error")
        assert len(scan_errors) == 1
        assert scan_errors[0][1]["path"] == str(root / "gone.txt")

    def test_backslash_name_listed(self, root: Path, make_file: Callable[..., Path]) -> None:
        """A backslash is an ordinary filename character on POSIX."""
        make_file(root / "odd\\name.txt", size=4)
        make_file(root / "plain.txt")

        entries = DirectoryScanner(root).list_directory()

        assert sorted(e.name for e in entries) == ["odd\\name.txt", "plain.txt"]

    def test_rejected_record_skipped(
        self,
        root: Path,
        make_file: Callable[..., Path],
        events: Callable[..., list[tuple[str, dict[str, object]]]],
    ) -> None:
        """An entry the record rejects is reported and the listing continues."""
        make_file(root / "a.txt")
        make_file(root / "bad.txt")

        def build(**fields: object) -> DirectoryEntry:
            if fields["name"] == "bad.txt":
                raise ValueError("unrepresentable entry")
            return DirectoryEntry(**fields)  # type: ignore[arg-type]

        with patch("dirwarden.filesystem.scanner.DirectoryEntry", side_effect=build):
            entries = DirectoryScanner(root).list_directory()

        assert [e.name for e in entries] == ["a.txt"]
        (event,) = events("scan_error")
        assert event[1]["path"] == str(root / "bad.txt")
        assert event[1]["reason"] == "unrepresentable entry"

    def test_symlink_outside_root_skipped(
        self,
        root: Path,
        make_file: Callable[..., Path],
        events: Callable[..., list[tuple[str, dict[str, object]]]],
    ) -> None:
        """Entries whose resolved path escapes the root are skipped."""
        make_file(root / "ok.txt")
        (root / "leak").symlink_to(root.parent / "secret.txt")

        entries = DirectoryScanner(root).list_directory()

        assert [e.name for e in entries] == ["ok.txt"]
        assert events("scan_error")[0][1]["reason"] == "resolves outside root"

    def test_symlink_inside_root_listed(self, root: Path, make_file: Callable[..., Path]) -> None:
        """Symlinks to entries inside the root are listed by their link name."""
        target = make_file(root / "real.txt", size=4)
        (root / "alias.txt").symlink_to(target)

        entries = DirectoryScanner(root).list_directory()

        alias = next(e for e in entries if e.name == "alias.txt")
        assert alias.full_path == target
        assert alias.size == 4

    def test_unreadable_directory_returns_empty(
        self,
        root: Path,
        events: Callable[..., list[tuple[str, dict[str, object]]]],
    ) -> None:
        """A directory that cannot be enumerated yields an empty listing."""
        with patch.object(Path, "iterdir", side_effect=PermissionError("Permission denied")):
            entries = DirectoryScanner(root).list_directory()

        assert entries == []
        assert len(events("scan_error")) == 1


class TestInventory:
    """Tests for recursive retention inventory."""

    def test_recursive_files_only(self, root: Path, make_file: Callable[..., Path]) -> None:
        """The inventory includes nested files and no directories."""
        make_file(root / "a.txt", size=1)
        make_file(root / "sub" / "b.txt", size=2)
        make_file(root / "sub" / "deeper" / "c.txt", size=3)
        (root / "empty").mkdir()

        entries = DirectoryScanner(root).inventory()

        assert sorted(e.name for e in entries) == ["a.txt", "b.txt", "c.txt"]
        assert all(e.is_file for e in entries)

    def test_empty_root(self, root: Path) -> None:
        """An empty root yields an empty inventory."""
        assert DirectoryScanner(root).inventory() == []

    def test_missing_root(self, tmp_path: Path) -> None:
        """A missing root raises MissingRootError."""
        with pytest.raises(MissingRootError):
            DirectoryScanner(tmp_path / "absent").inventory()

    def test_root_is_file(self, tmp_path: Path, make_file: Callable[..., Path]) -> None:
        """A root that is a file raises MissingRootError."""
        root = make_file(tmp_path / "not-a-dir")
        with pytest.raises(MissingRootError):
            DirectoryScanner(root).inventory()

    def test_symlinks_skipped(self, root: Path, make_file: Callable[..., Path]) -> None:
        """File symlinks and directory symlinks are not followed."""
        make_file(root / "real.txt")
        (root / "alias.txt").symlink_to(root / "real.txt")
        outside = root.parent / "outside"
        make_file(outside / "foreign.txt")
        (root / "linked_dir").symlink_to(outside)

        entries = DirectoryScanner(root).inventory()

        assert [e.name for e in entries] == ["real.txt"]

    def test_backslash_name_included(self, root: Path, make_file: Callable[..., Path]) -> None:
        """Files with a backslash in their name are part of the inventory."""
        make_file(root / "odd\\name.txt", size=7)
        make_file(root / "sub" / "b.txt", size=2)

        entries = DirectoryScanner(root).inventory()

        assert sorted(e.name for e in entries) == ["b.txt", "odd\\name.txt"]
        assert {e.size for e in entries} == {2, 7}

    def test_vanished_file_skipped(
        self,
        root: Path,
        make_file: Callable[..., Path],
        events: Callable[..., list[tuple[str, dict[str, object]]]],
    ) -> None:
        """A file that vanishes mid-scan is skipped and the scan continues."""
        make_file(root / "a.txt")
        make_file(root / "vanished.txt")
        make_file(root / "z.txt")

        original_resolve = Path.resolve

        def flaky_resolve(self: Path, strict: bool = False) -> Path:
            if self.name == "vanished.txt":
                raise FileNotFoundError(2, "No such file or directory", str(self))
            return original_resolve(self, strict=strict)

        scanner = DirectoryScanner(root)
        with patch.object(Path, "resolve", flaky_resolve):
            entries = scanner.inventory()

        assert [e.name for e in entries] == ["a.txt", "z.txt"]
        assert len(events("scan_error")) == 1

    def test_walk_error_reported(
        self,
        root: Path,
        events: Callable[..., list[tuple[str, dict[str, object]]]],
    ) -> None:
        """Unreadable subdirectories are reported without aborting."""
        locked = root / "locked"

        def fake_walk(top: Path, onerror: Callable[[OSError], None], **_kwargs: object):
            onerror(PermissionError(13, "Permission denied", str(locked)))
            yield str(top), [], []

        with patch("dirwarden.filesystem.scanner.os.walk", fake_walk):
            entries = DirectoryScanner(root).inventory()

        assert entries == []
        (event,) = events("scan_error")
        assert event[1]["path"] == str(locked)


class TestScanDispatch:
    """Tests for scan() mode dispatch."""

    def test_shallow(self, root: Path, make_file: Callable[..., Path]) -> None:
        """Shallow mode lists one level including directories."""
        make_file(root / "sub" / "a.txt")
        entries = DirectoryScanner(root).scan(mode=ScanMode.SHALLOW)
        assert [e.name for e in entries] == ["sub"]

    def test_recursive(self, root: Path, make_file: Callable[..., Path]) -> None:
        """Recursive mode returns nested files only."""
        make_file(root / "sub" / "a.txt")
        entries = DirectoryScanner(root).scan(mode=ScanMode.RECURSIVE)
        assert [e.name for e in entries] == ["a.txt"]
