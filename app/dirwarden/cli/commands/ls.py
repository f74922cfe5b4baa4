"""Listing command implementation.

Lists one directory under the root, ordered by name, size or date with
directories first.
"""

import json
from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape

from dirwarden.cli.display import create_listing_table, entry_to_dict
from dirwarden.cli.types import OutputFormat, get_settings
from dirwarden.filesystem.errors import ScanError
from dirwarden.filesystem.scanner import DirectoryScanner
from dirwarden.filesystem.sorter import parse_sort, sort_entries
from dirwarden.utils.formatting import console, print_error


def list_directory(
    ctx: typer.Context,
    path: Annotated[
        str,
        typer.Argument(help="Directory to list, relative to the root."),
    ] = "",
    sort: Annotated[
        str,
        typer.Option(
            "--sort",
            "-s",
            help="Sort key: name, size or date. Unknown keys fall back to name.",
        ),
    ] = "name",
    order: Annotated[
        str,
        typer.Option("--order", "-o", help="Sort order: asc or desc."),
    ] = "asc",
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            "-f",
            help="Output format: table or json.",
            case_sensitive=False,
        ),
    ] = OutputFormat.TABLE,
    root: Annotated[
        Path | None,
        typer.Option("--root", "-r", help="Override the configured root directory."),
    ] = None,
) -> None:
    """List a directory, directories first.

    Examples:
        dirwarden ls                          # List the root by name
        dirwarden ls photos --sort date       # Oldest first in photos/
        dirwarden ls --sort size --order desc # Largest files first
        dirwarden ls --format json            # Output as JSON
    """
    settings = get_settings(ctx, root)
    scanner = DirectoryScanner(settings.directory_path)

    try:
        entries = scanner.list_directory(path)
    except ScanError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    key, direction = parse_sort(sort, order)
    ordered = sort_entries(entries, key, direction)

    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps([entry_to_dict(e, scanner.root) for e in ordered]))
        return

    title = escape("Index of /" + path.strip("/"))
    console.print(create_listing_table(ordered, title))

    dir_count = sum(1 for e in ordered if e.is_directory)
    console.print(
        f"\n[dim]{dir_count} directories, {len(ordered) - dir_count} files "
        f"(sorted by {key.value}, {direction.value})[/dim]"
    )
