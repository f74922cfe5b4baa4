"""CLI package for dirwarden.

This package contains the Typer application and all subcommands.
"""

from dirwarden.cli.main import app

__all__ = ["app"]
