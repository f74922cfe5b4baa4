"""Directory scanner producing typed entry records.

Resolves requested paths against the configured root directory and
enumerates entries either one level deep (for listings) or across the
whole subtree (for retention). Per-entry failures are reported as
``scan_error`` events and skipped; they never abort a scan.
"""

import logging
import os
import stat
from datetime import UTC, datetime
from pathlib import Path

from dirwarden.core.events import SCAN_ERROR, log_event
from dirwarden.filesystem.errors import (
    AccessDeniedError,
    DirectoryNotFoundError,
    MissingRootError,
)
from dirwarden.filesystem.models import DIRECTORY_SIZE, DirectoryEntry, ScanMode

logger = logging.getLogger(__name__)


def is_within_root(path: Path, root: Path) -> bool:
    """Check whether a resolved path is the root or lies beneath it.

    Containment is checked per path component, so ``/srv/data2`` is not
    inside ``/srv/data``.

    Args:
        path: Resolved absolute path.
        root: Resolved absolute root directory.

    Returns:
        True if path is inside root.
    """
    return path == root or path.is_relative_to(root)


def resolve_path(root: Path, relative_path: str = "") -> Path:
    """Resolve a caller-supplied path against the root directory.

    Leading slashes are stripped so that absolute-looking request paths
    are interpreted relative to the root. The result is fully resolved
    (``..`` and symlinks collapsed) before the containment check.

    Args:
        root: Root directory.
        relative_path: Path relative to the root, as requested.

    Returns:
        Absolute resolved path inside the root.

    Raises:
        AccessDeniedError: If the resolved path is outside the root.
    """
    base = Path(root).resolve()
    try:
        candidate = (base / relative_path.lstrip("/\\")).resolve()
    except (OSError, ValueError, RuntimeError) as e:
        raise AccessDeniedError(relative_path, base) from e

    if not is_within_root(candidate, base):
        raise AccessDeniedError(relative_path, base)
    return candidate


class DirectoryScanner:
    """Enumerates filesystem entries under a single root directory.

    The scanner holds no mutable state and is safe to share between
    concurrent callers.

    Args:
        root: Root directory all scans are confined to.
    """

    def __init__(self, root: Path) -> None:
        self._root = Path(root).resolve()

    @property
    def root(self) -> Path:
        """Resolved root directory."""
        return self._root

    def scan(
        self,
        relative_path: str = "",
        mode: ScanMode = ScanMode.SHALLOW,
    ) -> list[DirectoryEntry]:
        """Scan a path under the root in the given traversal mode.

        Args:
            relative_path: Path relative to the root. Only used for shallow scans;
                recursive scans always cover the whole root.
            mode: Traversal mode.

        Returns:
            Entries reachable under the given mode.
        """
        if mode == ScanMode.RECURSIVE:
            return self.inventory()
        return self.list_directory(relative_path)

    def list_directory(self, relative_path: str = "") -> list[DirectoryEntry]:
        """List files and directories one level below a directory.

        Args:
            relative_path: Directory to list, relative to the root.

        Returns:
            Entries in scan order (sorted by path).

        Raises:
            AccessDeniedError: If the path resolves outside the root.
            DirectoryNotFoundError: If the path is not an existing directory.
        """
        directory = resolve_path(self._root, relative_path)
        if not directory.is_dir():
            raise DirectoryNotFoundError(directory)

        try:
            children = sorted(directory.iterdir())
        except OSError as e:
            self._report(directory, e)
            return []

        entries: list[DirectoryEntry] = []
        for child in children:
            entry = self._build_entry(child)
            if entry is not None:
                entries.append(entry)
        return entries

    def inventory(self) -> list[DirectoryEntry]:
        """Collect every regular file in the root's subtree.

        Directory symlinks are not followed and file symlinks are skipped,
        so only files physically inside the root are returned.

        Returns:
            File entries in scan order (walk order, names sorted per directory).

        Raises:
            MissingRootError: If the root does not exist or is not a directory.
        """
        if not self._root.is_dir():
            raise MissingRootError(self._root)

        entries: list[DirectoryEntry] = []
        for dirpath, dirnames, filenames in os.walk(self._root, onerror=self._report_walk_error):
            dirnames.sort()
            for filename in sorted(filenames):
                path = Path(dirpath) / filename
                if path.is_symlink():
                    logger.debug("Skipping symlink in inventory: %s", path)
                    continue
                entry = self._build_entry(path)
                if entry is not None and entry.is_file:
                    entries.append(entry)
        return entries

    def _build_entry(self, path: Path) -> DirectoryEntry | None:
        """Build an entry for a single path, or report why it was skipped.

        Args:
            path: Path of the entry as enumerated.

        Returns:
            DirectoryEntry, or None if the entry is unreadable, vanished,
            escapes the root, cannot be represented as a record, or is
            neither a regular file nor a directory.
        """
        try:
            resolved = path.resolve(strict=True)
            info = resolved.stat()
        except (OSError, RuntimeError) as e:
            self._report(path, e)
            return None

        if not is_within_root(resolved, self._root):
            self._report(path, "resolves outside root")
            return None

        is_directory = stat.S_ISDIR(info.st_mode)
        if not is_directory and not stat.S_ISREG(info.st_mode):
            logger.debug("Skipping special file: %s", path)
            return None

        try:
            return DirectoryEntry(
                name=path.name,
                full_path=resolved,
                size=DIRECTORY_SIZE if is_directory else info.st_size,
                last_modified=datetime.fromtimestamp(info.st_mtime, tz=UTC),
                is_directory=is_directory,
            )
        except (ValueError, OverflowError, OSError) as e:
            self._report(path, e)
            return None

    def _report_walk_error(self, error: OSError) -> None:
        path = Path(error.filename) if error.filename else self._root
        self._report(path, error)

    @staticmethod
    def _report(path: Path, reason: object) -> None:
        log_event(
            logger,
            SCAN_ERROR,
            level=logging.WARNING,
            path=str(path),
            reason=str(reason),
        )
