"""CLI command implementations."""

from . import demo, export, reset, search, status, toggle, validate

__all__ = ["demo", "export", "reset", "search", "status", "toggle", "validate"]
