"""In-memory state backend."""

from typing import Dict, Optional

from .base import StateBackend


class MemoryBackend(StateBackend):
    """Ephemeral slots held in a dict. Nothing survives the process."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._slots: Dict[str, str] = dict(initial or {})

    def read(self, slot: str) -> Optional[str]:
        return self._slots.get(slot)

    def write(self, slot: str, value: str) -> None:
        self._slots[slot] = value

    def delete(self, slot: str) -> None:
        self._slots.pop(slot, None)
