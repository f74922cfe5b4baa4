"""Exceptions raised by the filesystem layer."""

from pathlib import Path


class DirwardenError(Exception):
    """Base exception for dirwarden filesystem operations."""


class ScanError(DirwardenError):
    """Base exception for scan failures that abort the whole scan."""


class AccessDeniedError(ScanError):
    """Raised when a requested path resolves outside the root directory.

    Attributes:
        requested: The relative path as supplied by the caller.
        root: The root directory the path was resolved against.
    """

    def __init__(self, requested: str, root: Path) -> None:
        self.requested = requested
        self.root = root
        super().__init__(f"Access denied: {requested!r} resolves outside {root}")


class DirectoryNotFoundError(ScanError):
    """Raised when a listing target does not exist or is not a directory."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Directory not found: {path}")


class MissingRootError(ScanError):
    """Raised when the configured root directory does not exist."""

    def __init__(self, root: Path) -> None:
        self.root = root
        super().__init__(f"Root directory does not exist: {root}")


class UploadRejectedError(DirwardenError):
    """Raised when a file cannot be admitted into the root directory."""
