"""Periodic cleanup scheduler.

Runs scan, decide and delete on a fixed interval in a background thread.
At most one pass runs at a time: a tick that arrives while a pass is in
flight is dropped, never queued. Shutdown is observed between ticks; a
pass that has already started runs to completion.
"""

import logging
import threading
from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path

from dirwarden.core.config import RetentionConfig
from dirwarden.core.events import (
    CLEANUP_TICK_DROPPED,
    FILES_DELETED_AGE,
    FILES_DELETED_SIZE,
    MISSING_ROOT,
    log_event,
)
from dirwarden.filesystem.errors import MissingRootError
from dirwarden.filesystem.operator import DeletionResult, FileDeleter
from dirwarden.filesystem.scanner import DirectoryScanner
from dirwarden.retention.models import CleanupReport, RetentionCandidate, SchedulerState
from dirwarden.retention.policy import plan_retention

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(tz=UTC)


class CleanupScheduler:
    """Applies the retention policy to a root directory, once or periodically.

    Args:
        root: Root directory to clean.
        config: Retention limits, read-only for the scheduler's lifetime.
        deleter: Deletion operator. Defaults to a real FileDeleter.
        scanner: Directory scanner. Defaults to a scanner on root.
        clock: Source of "now" for each pass. Defaults to utc_now.
    """

    def __init__(
        self,
        root: Path,
        config: RetentionConfig,
        *,
        deleter: FileDeleter | None = None,
        scanner: DirectoryScanner | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._root = Path(root)
        self._config = config
        self._deleter = deleter if deleter is not None else FileDeleter()
        self._scanner = scanner if scanner is not None else DirectoryScanner(self._root)
        self._clock = clock if clock is not None else utc_now

        self._state = SchedulerState.IDLE
        self._pass_lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def state(self) -> SchedulerState:
        """Current phase of the scheduler."""
        return self._state

    @property
    def is_running(self) -> bool:
        """Check if the background loop is alive."""
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> bool:
        """Start the background loop.

        The first pass runs immediately, then one every
        ``cleanup_interval_hours``.

        Returns:
            True if a loop was started, False if periodic cleanup is
            disabled or the loop is already running.
        """
        if self._config.interval is None:
            logger.info("Periodic cleanup disabled (cleanup_interval_hours = 0)")
            return False
        if self.is_running:
            return False

        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name="cleanup-scheduler", daemon=True)
        self._thread.start()
        return True

    def stop(self, wait: bool = True, timeout: float | None = None) -> None:
        """Request shutdown of the background loop.

        Args:
            wait: Block until the loop has exited.
            timeout: Maximum seconds to wait.
        """
        self._stop_event.set()
        if wait and self.is_running and self._thread is not threading.current_thread():
            self._thread.join(timeout)

    def join(self, timeout: float | None = None) -> None:
        """Block until the background loop exits or timeout elapses."""
        if self._thread is not None:
            self._thread.join(timeout)

    def run_once(self) -> CleanupReport | None:
        """Run a single cleanup pass unless one is already in flight.

        Returns:
            CleanupReport for the pass, or None if the call was dropped
            because another pass is running.
        """
        if not self._pass_lock.acquire(blocking=False):
            log_event(logger, CLEANUP_TICK_DROPPED, level=logging.WARNING, root=str(self._root))
            return None
        try:
            return self._run_pass()
        finally:
            self._state = SchedulerState.IDLE
            self._pass_lock.release()

    def _run(self) -> None:
        interval = self._config.interval
        seconds = interval.total_seconds() if interval is not None else 0.0

        while not self._stop_event.is_set():
            try:
                self.run_once()
            except Exception:
                logger.exception("Cleanup pass failed for %s", self._root)
            if self._stop_event.wait(seconds):
                break

    def _run_pass(self) -> CleanupReport:
        dry_run = self._deleter.dry_run

        self._state = SchedulerState.SCANNING
        try:
            inventory = self._scanner.inventory()
        except MissingRootError:
            log_event(logger, MISSING_ROOT, level=logging.WARNING, path=str(self._root))
            return CleanupReport(skipped=True, dry_run=dry_run)

        self._state = SchedulerState.DECIDING
        plan = plan_retention(inventory, self._config, self._clock())

        self._state = SchedulerState.DELETING
        age_results = self._delete(plan.age_expired)
        size_results = self._delete(plan.over_budget)

        if not dry_run:
            self._report_deletions(age_results, plan.over_budget, size_results)

        return CleanupReport(
            plan=plan,
            results=(*age_results, *size_results),
            dry_run=dry_run,
        )

    def _delete(self, candidates: tuple[RetentionCandidate, ...]) -> list[DeletionResult]:
        if not candidates:
            return []
        return self._deleter.delete([c.entry.full_path for c in candidates])

    @staticmethod
    def _report_deletions(
        age_results: list[DeletionResult],
        size_candidates: tuple[RetentionCandidate, ...],
        size_results: list[DeletionResult],
    ) -> None:
        age_count = sum(1 for r in age_results if r.success)
        if age_count:
            log_event(logger, FILES_DELETED_AGE, count=age_count)

        size_bytes = sum(
            c.size for c, r in zip(size_candidates, size_results, strict=True) if r.success
        )
        size_count = sum(1 for r in size_results if r.success)
        if size_count:
            log_event(logger, FILES_DELETED_SIZE, count=size_count, bytes=size_bytes)
