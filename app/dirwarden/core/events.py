"""Structured diagnostic events.

The core never formats human-readable log lines for its diagnostics.
Each event is logged with its name as the message and the event payload
attached to the ``LogRecord`` as the ``event`` and ``fields`` extras, so
any handler can route or serialize it.
"""

import logging
from typing import Any

FILES_DELETED_AGE = "files_deleted_age"
FILES_DELETED_SIZE = "files_deleted_size"
SCAN_ERROR = "scan_error"
MISSING_ROOT = "missing_root"
DELETION_FAILED = "deletion_failed"
CLEANUP_TICK_DROPPED = "cleanup_tick_dropped"


def log_event(
    logger: logging.Logger,
    event: str,
    *,
    level: int = logging.INFO,
    **fields: Any,
) -> None:
    """Emit a structured event on the given logger.

    Args:
        logger: Logger of the emitting module.
        event: Event name, used as the log message.
        level: Logging level for the record.
        **fields: Event payload.
    """
    logger.log(level, event, extra={"event": event, "fields": fields})
