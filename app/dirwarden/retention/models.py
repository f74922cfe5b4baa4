"""Retention domain models.

This module defines the per-pass records used while deciding and
applying a cleanup: candidates with their derived age, the deletion
plan produced by the policy engine, and the report of a completed pass.
"""

from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum

from dirwarden.filesystem.models import DirectoryEntry
from dirwarden.filesystem.operator import DeletionResult


class SchedulerState(str, Enum):
    """Phase of the cleanup scheduler.

    Attributes:
        IDLE: Waiting for the next tick.
        SCANNING: Collecting the recursive file inventory.
        DECIDING: Running the retention policy.
        DELETING: Deleting the selected files.
    """

    IDLE = "idle"
    SCANNING = "scanning"
    DECIDING = "deciding"
    DELETING = "deleting"


@dataclass(frozen=True, slots=True)
class RetentionCandidate:
    """A file considered during one retention pass.

    Attributes:
        entry: The scanned file.
        age: Time since last modification, relative to the pass's "now".
    """

    entry: DirectoryEntry
    age: timedelta

    def __post_init__(self) -> None:
        """Validate candidate data after initialization."""
        if not isinstance(self.entry, DirectoryEntry):
            msg = f"Entry must be a DirectoryEntry, got {type(self.entry).__name__}"
            raise ValueError(msg)
        if self.entry.is_directory:
            msg = f"Directories cannot be retention candidates: {self.entry.full_path}"
            raise ValueError(msg)
        if not isinstance(self.age, timedelta):
            msg = f"Age must be a timedelta, got {type(self.age).__name__}"
            raise ValueError(msg)

    @property
    def size(self) -> int:
        """File size in bytes."""
        return self.entry.size


@dataclass(frozen=True, slots=True)
class RetentionPlan:
    """Files selected for deletion by one retention pass.

    Attributes:
        age_expired: Files older than the age limit, in scan order.
        over_budget: Files evicted to meet the size budget, oldest first.
        total_bytes: Size of the whole inventory.
        remaining_bytes: Size left after both phases.
        overage_bytes: Bytes the size phase had to free (0 if not triggered).
    """

    age_expired: tuple[RetentionCandidate, ...] = ()
    over_budget: tuple[RetentionCandidate, ...] = ()
    total_bytes: int = 0
    remaining_bytes: int = 0
    overage_bytes: int = 0

    @property
    def deletions(self) -> tuple[DirectoryEntry, ...]:
        """Entries to delete: age phase first, then size phase."""
        return tuple(c.entry for c in (*self.age_expired, *self.over_budget))

    @property
    def is_empty(self) -> bool:
        """Check if nothing was selected."""
        return not self.age_expired and not self.over_budget

    @property
    def over_budget_bytes(self) -> int:
        """Total size of the files selected by the size phase."""
        return sum(c.size for c in self.over_budget)


@dataclass(frozen=True, slots=True)
class CleanupReport:
    """Outcome of one cleanup pass.

    Attributes:
        plan: Deletion plan the pass executed (empty if skipped).
        results: Per-file deletion results, in plan order.
        skipped: Whether the pass was skipped (root missing).
        dry_run: Whether deletions were simulated.
    """

    plan: RetentionPlan = field(default_factory=RetentionPlan)
    results: tuple[DeletionResult, ...] = ()
    skipped: bool = False
    dry_run: bool = False

    @property
    def deleted_count(self) -> int:
        """Number of files deleted (or that would be, in dry-run)."""
        return sum(1 for r in self.results if r.success)

    @property
    def failed_count(self) -> int:
        """Number of deletions that failed."""
        return sum(1 for r in self.results if r.failed)

    @property
    def freed_bytes(self) -> int:
        """Bytes freed by successful deletions."""
        sizes = {e.full_path: e.size for e in self.plan.deletions}
        return sum(sizes.get(r.path, 0) for r in self.results if r.success)
