"""Filesystem scanning, ordering and deletion module.

This module provides the directory scanner, the listing sorter, the
file deletion operator and upload admission for the managed root
directory.
"""

from pathlib import Path

from dirwarden.filesystem.errors import (
    AccessDeniedError,
    DirectoryNotFoundError,
    DirwardenError,
    MissingRootError,
    ScanError,
    UploadRejectedError,
)
from dirwarden.filesystem.models import (
    DIRECTORY_SIZE,
    DirectoryEntry,
    ScanMode,
    SortKey,
    SortOrder,
)
from dirwarden.filesystem.operator import DeletionResult, FileDeleter
from dirwarden.filesystem.scanner import DirectoryScanner, is_within_root, resolve_path
from dirwarden.filesystem.sorter import parse_sort, sort_entries
from dirwarden.filesystem.uploads import store_upload


def list_sorted(
    root: Path,
    relative_path: str = "",
    sort: str | SortKey | None = None,
    order: str | SortOrder | None = None,
) -> list[DirectoryEntry]:
    """List a directory under root in the requested order.

    Args:
        root: Root directory.
        relative_path: Directory to list, relative to the root.
        sort: Sort key (name, size or date).
        order: Direction (asc or desc).

    Returns:
        Ordered entries, directories first.

    Raises:
        AccessDeniedError: If the path resolves outside the root.
        DirectoryNotFoundError: If the path is not an existing directory.
    """
    entries = DirectoryScanner(root).list_directory(relative_path)
    return sort_entries(entries, sort, order)


__all__ = [
    "DIRECTORY_SIZE",
    "AccessDeniedError",
    "DeletionResult",
    "DirectoryEntry",
    "DirectoryNotFoundError",
    "DirectoryScanner",
    "DirwardenError",
    "FileDeleter",
    "MissingRootError",
    "ScanError",
    "ScanMode",
    "SortKey",
    "SortOrder",
    "UploadRejectedError",
    "is_within_root",
    "list_sorted",
    "parse_sort",
    "resolve_path",
    "sort_entries",
    "store_upload",
]
