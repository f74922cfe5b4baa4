"""Server configuration and settings.

This module provides the configuration models and I/O functions for
dirwarden: the managed root directory, retention limits and upload
restrictions.

Configuration is stored in ~/.config/dirwarden/config.toml
"""

import os
import tomllib
from datetime import timedelta
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from dirwarden.core.paths import get_config_path

BYTES_PER_MB = 1024 * 1024

DEFAULT_ALLOWED_EXTENSIONS: tuple[str, ...] = (".txt", ".jpg", ".png", ".pdf")


class RetentionConfig(BaseModel):
    """Retention limits applied by the cleanup scheduler.

    A value of 0 for ``max_age_days`` or ``max_size_mb`` disables the
    corresponding cleanup phase. A value of 0 for
    ``cleanup_interval_hours`` disables periodic cleanup.

    Attributes:
        max_age_days: Files strictly older than this many days are deleted.
        max_size_mb: Size budget for all files under the root, in MiB.
        cleanup_interval_hours: Hours between two scheduled cleanup passes.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    max_age_days: Annotated[int, Field(ge=0, description="Maximum file age in days")] = 30
    max_size_mb: Annotated[int, Field(ge=0, description="Directory size budget in MiB")] = 1000
    cleanup_interval_hours: Annotated[
        int,
        Field(ge=0, description="Hours between cleanup passes"),
    ] = 1

    @property
    def age_limit(self) -> timedelta | None:
        """Maximum age as a timedelta, or None when the age phase is disabled."""
        if self.max_age_days == 0:
            return None
        return timedelta(days=self.max_age_days)

    @property
    def size_limit_bytes(self) -> int | None:
        """Size budget in bytes, or None when the size phase is disabled."""
        if self.max_size_mb == 0:
            return None
        return self.max_size_mb * BYTES_PER_MB

    @property
    def interval(self) -> timedelta | None:
        """Cleanup interval, or None when periodic cleanup is disabled."""
        if self.cleanup_interval_hours == 0:
            return None
        return timedelta(hours=self.cleanup_interval_hours)


class UploadConfig(BaseModel):
    """Restrictions for files admitted into the root directory.

    Attributes:
        enable_upload: Whether uploads are accepted at all.
        max_file_size_bytes: Largest accepted file size.
        allowed_extensions: Accepted file extensions (lowercase, with dot).
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    enable_upload: bool = True
    max_file_size_bytes: Annotated[int, Field(gt=0, description="Maximum upload size")] = (
        100 * BYTES_PER_MB
    )
    allowed_extensions: Annotated[
        tuple[str, ...],
        Field(description="Accepted file extensions"),
    ] = DEFAULT_ALLOWED_EXTENSIONS

    @field_validator("allowed_extensions", mode="before")
    @classmethod
    def normalize_extensions(cls, v: object) -> object:
        """Lowercase extensions and ensure a leading dot."""
        if not isinstance(v, list | tuple):
            return v
        normalized: list[object] = []
        for ext in v:
            if isinstance(ext, str):
                ext = ext.strip().lower()
                if ext and not ext.startswith("."):
                    ext = f".{ext}"
            normalized.append(ext)
        return tuple(normalized)


class ServerConfig(BaseModel):
    """Top-level dirwarden configuration.

    Attributes:
        directory_path: Root directory managed by dirwarden.
        retention: Retention limits.
        upload: Upload restrictions.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    directory_path: Annotated[Path, Field(description="Managed root directory")] = Path("/tmp")
    retention: RetentionConfig = Field(default_factory=RetentionConfig)
    upload: UploadConfig = Field(default_factory=UploadConfig)

    def with_root(self, root: Path | None) -> "ServerConfig":
        """Return a copy with the root directory replaced, if given."""
        if root is None:
            return self
        return self.model_copy(update={"directory_path": root})


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigNotFoundError(ConfigError):
    """Raised when the config file is not found."""


class ConfigParseError(ConfigError):
    """Raised when the config file cannot be parsed."""


def load_config(path: Path | None = None) -> ServerConfig:
    """Load configuration from a TOML file.

    Args:
        path: Path to the config file. If None, uses the default config path.

    Returns:
        Validated ServerConfig object.

    Raises:
        ConfigNotFoundError: If the config file doesn't exist.
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the content doesn't match the schema.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        raise ConfigNotFoundError(f"Config not found: {config_path}")

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config: {e}") from e

    try:
        return ServerConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config content: {e}") from e


def load_config_or_default(path: Path | None = None) -> ServerConfig:
    """Load configuration, falling back to defaults when no file exists.

    Args:
        path: Path to the config file. If None, uses the default config path.

    Returns:
        Loaded ServerConfig, or the default ServerConfig.

    Raises:
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the content doesn't match the schema.
    """
    try:
        return load_config(path)
    except ConfigNotFoundError:
        return ServerConfig()


def save_config(config: ServerConfig, path: Path | None = None) -> Path:
    """Save configuration to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        config: The ServerConfig object to save.
        path: Path to save the config. If None, uses the default config path.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    data = config_to_dict(config)

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config: {e}") from e

    return config_path


def config_to_dict(config: ServerConfig) -> dict[str, object]:
    """Convert ServerConfig to a dictionary for TOML serialization.

    Args:
        config: The ServerConfig to convert.

    Returns:
        Dictionary ready for TOML serialization.
    """
    return {
        "directory_path": str(config.directory_path),
        "retention": config.retention.model_dump(),
        "upload": {
            "enable_upload": config.upload.enable_upload,
            "max_file_size_bytes": config.upload.max_file_size_bytes,
            "allowed_extensions": list(config.upload.allowed_extensions),
        },
    }
