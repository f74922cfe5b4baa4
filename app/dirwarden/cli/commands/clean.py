"""Cleanup command implementation.

Runs a single retention pass against the root directory.
"""

from pathlib import Path
from typing import Annotated

import typer

from dirwarden.cli.display import create_plan_table, create_results_table, print_cleanup_summary
from dirwarden.cli.types import get_settings
from dirwarden.filesystem.operator import FileDeleter
from dirwarden.retention.scheduler import CleanupScheduler
from dirwarden.utils.formatting import console, print_error, print_success


def clean(
    ctx: typer.Context,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Show what would be deleted."),
    ] = False,
    root: Annotated[
        Path | None,
        typer.Option("--root", "-r", help="Override the configured root directory."),
    ] = None,
) -> None:
    """Delete files that exceed the configured age or size limits."""
    settings = get_settings(ctx, root)
    scheduler = CleanupScheduler(
        settings.directory_path,
        settings.retention,
        deleter=FileDeleter(dry_run=dry_run),
    )

    report = scheduler.run_once()
    if report is None:
        print_error("Another cleanup pass is already running.")
        raise typer.Exit(code=1)

    if report.skipped:
        print_error(f"Root directory does not exist: {settings.directory_path}")
        raise typer.Exit(code=1)

    if report.plan.is_empty:
        print_success("Nothing to clean. All files are within the retention limits.")
        return

    display_root = settings.directory_path.resolve()
    console.print(create_plan_table(report.plan, display_root, dry_run=dry_run))
    if not dry_run:
        console.print(create_results_table(report.results, display_root))
    print_cleanup_summary(report)

    if report.failed_count:
        raise typer.Exit(code=1)
