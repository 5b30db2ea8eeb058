"""
Abstract named-slot storage.

A backend is a durable key/value store of strings, shaped like browser
localStorage. Implementations raise StorageError on I/O failure.
"""

from abc import ABC, abstractmethod
from typing import Optional


class StateBackend(ABC):
    """Durable string slots addressed by name."""

    @abstractmethod
    def read(self, slot: str) -> Optional[str]:
        """Return the slot's value, or None if it was never written."""

    @abstractmethod
    def write(self, slot: str, value: str) -> None:
        """Replace the slot's value."""

    @abstractmethod
    def delete(self, slot: str) -> None:
        """Remove the slot if present."""
