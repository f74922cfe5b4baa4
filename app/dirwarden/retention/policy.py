"""Two-phase retention policy.

Decides which files to delete from a recursive inventory, without
touching the filesystem or the clock:

1. Age phase: every file strictly older than ``max_age_days``.
2. Size phase: if the files surviving phase 1 still exceed the size
   budget, evict the oldest of them (by modification time) until the
   overage is covered, and no further.

A limit of 0 disables its phase.
"""

from collections.abc import Sequence
from datetime import datetime

from dirwarden.core.config import RetentionConfig
from dirwarden.filesystem.models import DirectoryEntry
from dirwarden.retention.models import RetentionCandidate, RetentionPlan


def plan_retention(
    inventory: Sequence[DirectoryEntry],
    config: RetentionConfig,
    now: datetime,
) -> RetentionPlan:
    """Compute the files to delete for one retention pass.

    The result depends only on the arguments: identical inventory,
    config and ``now`` always yield an identical plan.

    Args:
        inventory: Files under the root, in scan order.
        config: Retention limits.
        now: Timezone-aware reference time for ages.

    Returns:
        RetentionPlan with disjoint age and size selections.

    Raises:
        ValueError: If the inventory contains a directory or now is naive.
    """
    if now.tzinfo is None:
        msg = "now must be a timezone-aware datetime"
        raise ValueError(msg)

    candidates = [RetentionCandidate(entry=e, age=now - e.last_modified) for e in inventory]
    total_bytes = sum(c.size for c in candidates)

    age_limit = config.age_limit
    if age_limit is None:
        age_expired: list[RetentionCandidate] = []
        survivors = candidates
    else:
        age_expired = [c for c in candidates if c.age > age_limit]
        survivors = [c for c in candidates if c.age <= age_limit]

    remaining_bytes = sum(c.size for c in survivors)

    budget = config.size_limit_bytes
    over_budget: list[RetentionCandidate] = []
    overage = 0
    if budget is not None and remaining_bytes > budget:
        overage = remaining_bytes - budget
        removed = 0
        for candidate in sorted(survivors, key=lambda c: c.entry.last_modified):
            if removed >= overage:
                break
            over_budget.append(candidate)
            removed += candidate.size
        remaining_bytes -= removed

    return RetentionPlan(
        age_expired=tuple(age_expired),
        over_budget=tuple(over_budget),
        total_bytes=total_bytes,
        remaining_bytes=remaining_bytes,
        overage_bytes=overage,
    )
