"""Logging setup for the dirwarden CLI.

Routes log records to stderr through Rich, appending structured event
fields to the rendered message.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler


class EventFormatter(logging.Formatter):
    """Render structured event fields as ``key=value`` pairs after the message."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        fields = getattr(record, "fields", None)
        if not fields:
            return message
        rendered = " ".join(f"{key}={value}" for key, value in fields.items())
        return f"{message} {rendered}"


def setup_logging(
    *,
    verbose: bool = False,
    quiet: bool = False,
    console: Console | None = None,
) -> None:
    """Configure the ``dirwarden`` logger.

    Replaces any handler installed by a previous call, so repeated CLI
    invocations in one process do not duplicate output.

    Args:
        verbose: Log DEBUG and above.
        quiet: Log ERROR and above only. Ignored when verbose is set.
        console: Console to render to. Defaults to a stderr console.
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(EventFormatter("%(message)s"))

    logger = logging.getLogger("dirwarden")
    for existing in list(logger.handlers):
        if isinstance(existing, RichHandler):
            logger.removeHandler(existing)
    logger.addHandler(handler)
    logger.setLevel(level)
