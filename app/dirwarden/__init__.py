"""dirwarden - directory listing and retention for a single root directory."""

__version__ = "0.1.0"
