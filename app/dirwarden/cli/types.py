"""Shared types and utilities for CLI commands.

This module provides common enums and helper functions used across
multiple CLI command modules to avoid code duplication.
"""

from enum import Enum
from pathlib import Path

import typer

from dirwarden.core.config import ConfigError, ServerConfig, load_config_or_default
from dirwarden.core.paths import get_config_path
from dirwarden.utils.formatting import print_error


class OutputFormat(str, Enum):
    """Output format options."""

    TABLE = "table"
    JSON = "json"


def get_config_file(ctx: typer.Context) -> Path:
    """Get the config file path selected by the global --config option.

    Args:
        ctx: Typer context of the running command.

    Returns:
        Path to the config file.
    """
    obj = ctx.obj if isinstance(ctx.obj, dict) else {}
    config_path = obj.get("config_path")
    return config_path if config_path is not None else get_config_path()


def get_settings(ctx: typer.Context, root: Path | None = None) -> ServerConfig:
    """Load the effective configuration for a command.

    Missing config files fall back to defaults. Invalid files abort the
    command with exit code 1.

    Args:
        ctx: Typer context of the running command.
        root: Optional --root override of the configured directory.

    Returns:
        ServerConfig with the root override applied.
    """
    try:
        config = load_config_or_default(get_config_file(ctx))
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    return config.with_root(root)
