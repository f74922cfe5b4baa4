"""Shared Rich display functions for listings and cleanup passes.

Provides table builders and summary printers used by the ls and clean
commands.
"""

from pathlib import Path

from rich.markup import escape
from rich.table import Table

from dirwarden.filesystem.models import DirectoryEntry
from dirwarden.filesystem.operator import DeletionResult
from dirwarden.retention.models import CleanupReport, RetentionPlan
from dirwarden.utils.formatting import console, format_size, print_success, print_warning

_DATE_FORMAT = "%Y-%m-%d %H:%M"


def relative_to_root(path: Path, root: Path) -> str:
    """Display a path relative to the root, with a leading slash."""
    try:
        return "/" + path.relative_to(root).as_posix()
    except ValueError:
        return str(path)


def create_listing_table(entries: list[DirectoryEntry], title: str) -> Table:
    """Create a Rich table for an ordered directory listing.

    Directories are marked with a trailing slash and have no size.

    Args:
        entries: Entries in display order.
        title: Table title.

    Returns:
        Rich Table configured for listing display.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
        row_styles=["", "on grey7"],
    )
    table.add_column("Name", no_wrap=True)
    table.add_column("Size", style="info", justify="right")
    table.add_column("Modified", style="muted")

    for entry in entries:
        if entry.is_directory:
            name = f"[directory]{escape(entry.name)}/[/]"
            size = ""
        else:
            name = escape(entry.name)
            size = format_size(entry.size)
        table.add_row(name, size, entry.last_modified.strftime(_DATE_FORMAT))

    return table


def entry_to_dict(entry: DirectoryEntry, root: Path) -> dict[str, object]:
    """Serialize an entry for JSON output."""
    return {
        "name": entry.name,
        "path": relative_to_root(entry.full_path, root),
        "size": None if entry.is_directory else entry.size,
        "last_modified": entry.last_modified.isoformat(),
        "is_directory": entry.is_directory,
    }


def create_plan_table(plan: RetentionPlan, root: Path, dry_run: bool = False) -> Table:
    """Create a Rich table of the files a retention pass selected.

    Args:
        plan: Deletion plan.
        root: Root directory, for relative display paths.
        dry_run: Whether this is a dry-run (changes table title).

    Returns:
        Rich Table configured for plan display.
    """
    title = "Planned Deletions (dry-run)" if dry_run else "Planned Deletions"
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Path", no_wrap=True)
    table.add_column("Size", style="info", justify="right")
    table.add_column("Age", justify="right")
    table.add_column("Reason", style="muted")

    for reason, candidates in (("age", plan.age_expired), ("size", plan.over_budget)):
        for candidate in candidates:
            table.add_row(
                escape(relative_to_root(candidate.entry.full_path, root)),
                format_size(candidate.size),
                f"{candidate.age.days}d",
                reason,
            )

    return table


def create_results_table(results: tuple[DeletionResult, ...], root: Path) -> Table:
    """Create a Rich table of per-file deletion results."""
    table = Table(
        title="Deletion Results",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Path", no_wrap=True)
    table.add_column("Status", width=10)
    table.add_column("Details", style="muted")

    for r in results:
        if r.dry_run:
            status = "[info]dry-run[/]"
            detail = "Would delete"
        elif r.success:
            status = "[success]deleted[/]"
            detail = ""
        else:
            status = "[error]failed[/]"
            detail = escape(r.error or "Unknown error")
        table.add_row(escape(relative_to_root(r.path, root)), status, detail)

    return table


def print_cleanup_summary(report: CleanupReport) -> None:
    """Print counts and freed bytes of a cleanup pass."""
    plan = report.plan
    console.print(
        f"\n[dim]{len(plan.age_expired)} expired by age, "
        f"{len(plan.over_budget)} evicted for size; "
        f"{format_size(plan.remaining_bytes)} of {format_size(plan.total_bytes)} remain[/dim]"
    )

    if report.dry_run:
        print_success(f"Dry-run: {report.deleted_count} file(s) would be deleted.")
    elif report.failed_count:
        print_warning(f"{report.deleted_count} deleted, {report.failed_count} failed")
    else:
        print_success(
            f"Deleted {report.deleted_count} file(s), freed {format_size(report.freed_bytes)}."
        )
