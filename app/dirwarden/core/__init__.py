"""Core infrastructure for dirwarden.

Configuration, XDG paths, logging setup and structured diagnostic events.
"""
