"""Retention policy and cleanup scheduling module.

This module provides the pure two-phase retention policy, the records
it produces, and the scheduler that applies it to the root directory.
"""

from dirwarden.retention.models import (
    CleanupReport,
    RetentionCandidate,
    RetentionPlan,
    SchedulerState,
)
from dirwarden.retention.policy import plan_retention
from dirwarden.retention.scheduler import CleanupScheduler, utc_now

__all__ = [
    "CleanupReport",
    "CleanupScheduler",
    "RetentionCandidate",
    "RetentionPlan",
    "SchedulerState",
    "plan_retention",
    "utc_now",
]
