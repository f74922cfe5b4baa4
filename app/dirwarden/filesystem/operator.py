"""File deletion operator.

Deletes files selected by the retention policy with dry-run support.
Failures are isolated per path and reported as results, never raised.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from dirwarden.core.events import DELETION_FAILED, log_event

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DeletionResult:
    """Result of a single file deletion.

    Attributes:
        path: Absolute path that was operated on.
        success: Whether the file was deleted.
        error: Error message if the deletion failed, None otherwise.
        dry_run: Whether this was a dry-run (no actual deletion).
    """

    path: Path
    success: bool
    error: str | None = None
    dry_run: bool = False

    @property
    def failed(self) -> bool:
        """Check if the deletion failed."""
        return not self.success


class FileDeleter:
    """Deletes individual files from the managed directory.

    Directories are never deleted; retention only removes files.

    Attributes:
        _dry_run: If True, simulate deletions without modifying the filesystem.
    """

    def __init__(self, dry_run: bool = False) -> None:
        """Initialize the FileDeleter.

        Args:
            dry_run: If True, report what would be deleted without deleting.
        """
        self._dry_run = dry_run

    @property
    def dry_run(self) -> bool:
        """Whether deletions are simulated."""
        return self._dry_run

    def delete(self, paths: list[Path]) -> list[DeletionResult]:
        """Delete multiple files and return results.

        Each file is deleted individually; a failure on one path does not
        affect the remaining paths.

        Args:
            paths: Absolute file paths to delete.

        Returns:
            List of DeletionResult, one per input path, in input order.
        """
        results: list[DeletionResult] = []
        for path in paths:
            result = self._delete_single(Path(path))
            if result.failed:
                log_event(
                    logger,
                    DELETION_FAILED,
                    level=logging.WARNING,
                    path=str(result.path),
                    reason=result.error,
                )
            results.append(result)
        return results

    def _delete_single(self, path: Path) -> DeletionResult:
        """Delete a single file.

        Args:
            path: Absolute file path to delete.

        Returns:
            DeletionResult indicating success or failure.
        """
        if self._dry_run:
            logger.info("Dry-run: would delete %s", path)
            return DeletionResult(path=path, success=True, dry_run=True)

        try:
            if path.is_dir() and not path.is_symlink():
                return DeletionResult(
                    path=path,
                    success=False,
                    error=f"Refusing to delete directory: {path}",
                )
            path.unlink()
        except FileNotFoundError:
            return DeletionResult(
                path=path,
                success=False,
                error=f"Path does not exist: {path}",
            )
        except OSError as e:
            return DeletionResult(path=path, success=False, error=str(e))

        logger.debug("Deleted file: %s", path)
        return DeletionResult(path=path, success=True)
