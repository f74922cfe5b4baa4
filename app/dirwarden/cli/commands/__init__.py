"""CLI commands for dirwarden.

This package contains all subcommand implementations.
"""

from dirwarden.cli.commands import clean, config, ls, upload, watch

__all__ = ["clean", "config", "ls", "upload", "watch"]
