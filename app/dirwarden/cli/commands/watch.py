"""Watch command implementation.

Runs the cleanup scheduler in the foreground until interrupted.
"""

from pathlib import Path
from typing import Annotated

import typer

from dirwarden.cli.types import get_settings
from dirwarden.retention.scheduler import CleanupScheduler
from dirwarden.utils.formatting import print_info, print_warning

# Seconds between liveness checks while waiting for Ctrl+C
_POLL_SECONDS = 1.0


def watch(
    ctx: typer.Context,
    root: Annotated[
        Path | None,
        typer.Option("--root", "-r", help="Override the configured root directory."),
    ] = None,
) -> None:
    """Enforce retention limits periodically until interrupted."""
    settings = get_settings(ctx, root)
    retention = settings.retention
    scheduler = CleanupScheduler(settings.directory_path, retention)

    if not scheduler.start():
        print_warning("Periodic cleanup is disabled (cleanup_interval_hours = 0).")
        raise typer.Exit(code=1)

    print_info(
        f"Cleaning {settings.directory_path} every {retention.cleanup_interval_hours} hour(s). "
        "Press Ctrl+C to stop."
    )
    try:
        while scheduler.is_running:
            scheduler.join(timeout=_POLL_SECONDS)
    except KeyboardInterrupt:
        print_info("Stopping after the current pass...")
    finally:
        scheduler.stop()
