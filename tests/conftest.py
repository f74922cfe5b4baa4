"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import logging
import os
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

import pytest

# Fixed reference time for deterministic ages
NOW = datetime(2025, 6, 1, 12, 0, tzinfo=UTC)

MB = 1024 * 1024


@pytest.fixture
def now() -> datetime:
    """Fixed timezone-aware reference time."""
    return NOW


@pytest.fixture
def make_file() -> Callable[..., Path]:
    """Factory creating a file of a given size and modification time.

    Files are created sparse, so large sizes cost no disk space.
    """

    def _make(path: Path, size: int = 0, mtime: datetime | None = None) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("wb") as f:
            f.truncate(size)
        if mtime is not None:
            ts = mtime.timestamp()
            os.utime(path, (ts, ts))
        return path

    return _make


@pytest.fixture
def events(caplog: pytest.LogCaptureFixture) -> Callable[..., list[tuple[str, dict[str, Any]]]]:
    """Return structured events logged by dirwarden, optionally filtered by name."""
    caplog.set_level(logging.DEBUG, logger="dirwarden")

    def _events(name: str | None = None) -> list[tuple[str, dict[str, Any]]]:
        found: list[tuple[str, dict[str, Any]]] = []
        for record in caplog.records:
            event = getattr(record, "event", None)
            if event is None or (name is not None and event != name):
                continue
            found.append((event, getattr(record, "fields", {})))
        return found

    return _events


@pytest.fixture
def days_ago(now: datetime) -> Callable[[float], datetime]:
    """Return a datetime the given number of days before the fixed now."""

    def _days_ago(days: float) -> datetime:
        return now - timedelta(days=days)

    return _days_ago
