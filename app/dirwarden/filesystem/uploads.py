"""Admission of new files into the managed directory.

Validates a file against the upload restrictions and copies it into the
root directory under a name that never overwrites an existing file.
"""

import logging
import shutil
from pathlib import Path

from dirwarden.core.config import BYTES_PER_MB, UploadConfig
from dirwarden.filesystem.errors import UploadRejectedError
from dirwarden.filesystem.scanner import resolve_path

logger = logging.getLogger(__name__)


def sanitize_filename(filename: str) -> str:
    """Strip any directory components from a client-supplied file name.

    Args:
        filename: File name as supplied, possibly with a path.

    Returns:
        Base name, or an empty string if nothing usable remains.
    """
    name = filename.replace("\\", "/").rsplit("/", 1)[-1].strip()
    if name in (".", ".."):
        return ""
    return name


def unique_target(directory: Path, filename: str) -> Path:
    """Pick a path in directory that does not exist yet.

    ``report.pdf`` becomes ``report_1.pdf``, ``report_2.pdf``, ... when
    taken.

    Args:
        directory: Target directory.
        filename: Desired file name.

    Returns:
        First free path.
    """
    target = directory / filename
    stem, suffix = Path(filename).stem, Path(filename).suffix
    counter = 1
    while target.exists():
        target = directory / f"{stem}_{counter}{suffix}"
        counter += 1
    return target


def validate_upload(filename: str, size: int, config: UploadConfig) -> str:
    """Check a file against the upload restrictions.

    Args:
        filename: File name as supplied.
        size: File size in bytes.
        config: Upload restrictions.

    Returns:
        Sanitized file name.

    Raises:
        UploadRejectedError: If uploads are disabled, the file is too large,
            its extension is not allowed, or its name is blank.
    """
    if not config.enable_upload:
        raise UploadRejectedError("File upload is disabled")

    if size > config.max_file_size_bytes:
        limit_mb = config.max_file_size_bytes // BYTES_PER_MB
        raise UploadRejectedError(f"File size exceeds maximum allowed size of {limit_mb} MB")

    name = sanitize_filename(filename)
    if not name:
        raise UploadRejectedError("Invalid filename")

    extension = Path(name).suffix.lower()
    if extension not in config.allowed_extensions:
        raise UploadRejectedError(f"File type '{extension}' is not allowed")

    return name


def store_upload(
    source: Path,
    root: Path,
    config: UploadConfig,
    relative_dir: str = "",
) -> Path:
    """Copy a local file into the managed directory.

    Args:
        source: File to admit.
        root: Managed root directory.
        config: Upload restrictions.
        relative_dir: Target directory relative to the root.

    Returns:
        Path the file was stored at.

    Raises:
        UploadRejectedError: If the file fails validation, the target
            directory does not exist, or the copy fails.
        AccessDeniedError: If relative_dir resolves outside the root.
    """
    if not source.is_file():
        raise UploadRejectedError(f"No file provided: {source}")

    name = validate_upload(source.name, source.stat().st_size, config)

    directory = resolve_path(root, relative_dir)
    if not directory.is_dir():
        raise UploadRejectedError(f"Target directory does not exist: {directory}")

    target = unique_target(directory, name)
    try:
        shutil.copy2(source, target)
    except OSError as e:
        raise UploadRejectedError(f"Failed to store {name}: {e}") from e

    logger.info("Stored upload %s as %s", source, target)
    return target
