"""Filesystem domain models for directory listing.

This module defines the immutable record produced by every scan, the
scan traversal modes, and the sort keys and directions accepted by the
listing path.
"""

import os
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path

# Size reported for directories, whose size is not computed.
DIRECTORY_SIZE = -1

# Separators of the running platform; a backslash is a legal name on POSIX.
_SEPARATORS = tuple(sep for sep in (os.sep, os.altsep) if sep)


class ScanMode(str, Enum):
    """Traversal mode of a scan.

    Attributes:
        SHALLOW: One level, files and directories (listing).
        RECURSIVE: Whole subtree, files only (retention).
    """

    SHALLOW = "shallow"
    RECURSIVE = "recursive"


class SortKey(str, Enum):
    """Field a listing is ordered by."""

    NAME = "name"
    SIZE = "size"
    DATE = "date"


class SortOrder(str, Enum):
    """Direction a listing is ordered in."""

    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True, slots=True)
class DirectoryEntry:
    """A single filesystem object discovered by a scan.

    Entries are created fresh by each scan and never mutated.

    Attributes:
        name: Base name, without path separators.
        full_path: Absolute resolved path inside the root directory.
        size: Size in bytes for files, DIRECTORY_SIZE for directories.
        last_modified: Last modification time (timezone-aware, UTC).
        is_directory: Whether the entry is a directory.
    """

    name: str
    full_path: Path
    size: int
    last_modified: datetime
    is_directory: bool

    def __post_init__(self) -> None:
        """Validate entry data after initialization."""
        if not self.name:
            msg = "Name cannot be empty"
            raise ValueError(msg)
        if any(sep in self.name for sep in _SEPARATORS):
            msg = f"Name must not contain path separators, got {self.name!r}"
            raise ValueError(msg)
        if not isinstance(self.full_path, Path) or not self.full_path.is_absolute():
            msg = f"Full path must be an absolute Path, got {self.full_path!r}"
            raise ValueError(msg)
        if not isinstance(self.last_modified, datetime) or self.last_modified.tzinfo is None:
            msg = "Last modified must be a timezone-aware datetime"
            raise ValueError(msg)
        if not isinstance(self.is_directory, bool):
            msg = f"is_directory must be a bool, got {self.is_directory!r}"
            raise ValueError(msg)
        # bool is an int subclass but never a valid size
        if not isinstance(self.size, int) or isinstance(self.size, bool):
            msg = f"Size must be an int, got {self.size!r}"
            raise ValueError(msg)
        if self.is_directory and self.size != DIRECTORY_SIZE:
            msg = f"Directory size must be {DIRECTORY_SIZE}, got {self.size}"
            raise ValueError(msg)
        if not self.is_directory and self.size < 0:
            msg = f"File size cannot be negative, got {self.size}"
            raise ValueError(msg)

    @property
    def is_file(self) -> bool:
        """Check if the entry is a regular file."""
        return not self.is_directory
