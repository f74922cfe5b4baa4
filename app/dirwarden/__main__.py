"""Allow running dirwarden as ``python -m dirwarden``."""

from dirwarden.cli.main import app

app()
