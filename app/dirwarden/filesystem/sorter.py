"""Ordering of directory listings.

Entries are ordered by the requested key and direction, then grouped so
that directories always precede files. Both passes use Python's stable
sort, so entries that compare equal keep their scan order.
"""

from collections.abc import Callable, Iterable
from typing import Any

from dirwarden.filesystem.models import DirectoryEntry, SortKey, SortOrder

_SORT_KEYS: dict[SortKey, Callable[[DirectoryEntry], Any]] = {
    SortKey.NAME: lambda e: e.name.casefold(),
    SortKey.SIZE: lambda e: e.size,
    SortKey.DATE: lambda e: e.last_modified,
}


def parse_sort(
    sort: str | SortKey | None = None,
    order: str | SortOrder | None = None,
) -> tuple[SortKey, SortOrder]:
    """Normalize raw sort parameters.

    An unrecognized sort key falls back to name ascending. An
    unrecognized order falls back to ascending.

    Args:
        sort: Requested sort key (name, size or date), case-insensitive.
        order: Requested direction (asc or desc), case-insensitive.

    Returns:
        Tuple of (SortKey, SortOrder).
    """
    try:
        key = SortKey(sort.lower()) if isinstance(sort, str) else SortKey.NAME
    except ValueError:
        return SortKey.NAME, SortOrder.ASC

    try:
        direction = SortOrder(order.lower()) if isinstance(order, str) else SortOrder.ASC
    except ValueError:
        direction = SortOrder.ASC

    return key, direction


def sort_entries(
    entries: Iterable[DirectoryEntry],
    sort: str | SortKey | None = None,
    order: str | SortOrder | None = None,
) -> list[DirectoryEntry]:
    """Order entries by key and direction, directories first.

    Args:
        entries: Entries in scan order.
        sort: Sort key (name, size or date). Defaults to name.
        order: Direction (asc or desc). Defaults to asc.

    Returns:
        New list: directories ordered by the key, then files ordered by the key.
    """
    key, direction = parse_sort(sort, order)

    ordered = sorted(entries, key=_SORT_KEYS[key], reverse=direction == SortOrder.DESC)
    ordered.sort(key=lambda e: not e.is_directory)
    return ordered
