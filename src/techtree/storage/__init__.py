"""
State backends for techtree.

Provides pluggable named-slot persistence:
- JsonFileBackend: a single JSON file of slots, the default
- SQLiteBackend: local SQLite key/value table
- MemoryBackend: ephemeral storage for tests and demos
"""

from .base import StateBackend
from .json_file import JsonFileBackend
from .memory import MemoryBackend
from .sqlite import SQLiteBackend

__all__ = ["StateBackend", "JsonFileBackend", "MemoryBackend", "SQLiteBackend", "create_backend"]


def create_backend(kind: str, path=None) -> StateBackend:
    """Instantiate a backend by name (`json`, `sqlite` or `memory`)."""
    if kind == "memory":
        return MemoryBackend()
    if path is None:
        raise ValueError(f"Backend '{kind}' needs a path")
    if kind == "json":
        return JsonFileBackend(path)
    if kind == "sqlite":
        return SQLiteBackend(path)
    raise ValueError(f"Unknown state backend: {kind}")
