"""Upload command implementation.

Copies a local file into the root directory, subject to the upload
restrictions.
"""

from pathlib import Path
from typing import Annotated

import typer

from dirwarden.cli.types import get_settings
from dirwarden.filesystem.errors import DirwardenError
from dirwarden.filesystem.uploads import store_upload
from dirwarden.utils.formatting import print_error, print_success


def upload(
    ctx: typer.Context,
    file: Annotated[
        Path,
        typer.Argument(help="Local file to copy into the root directory."),
    ],
    to: Annotated[
        str,
        typer.Option("--to", "-t", help="Target directory, relative to the root."),
    ] = "",
    root: Annotated[
        Path | None,
        typer.Option("--root", "-r", help="Override the configured root directory."),
    ] = None,
) -> None:
    """Store a file in the root directory without overwriting existing files."""
    settings = get_settings(ctx, root)

    try:
        stored = store_upload(file, settings.directory_path, settings.upload, to)
    except DirwardenError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(f"Stored {file.name} as {stored}")
