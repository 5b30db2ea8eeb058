"""
JSON file state backend.

All slots live in one JSON object on disk. Writes go to a temporary file
that is then renamed over the original, so a crash mid-write leaves the
previous contents intact.
"""

import json
import logging
import os
from pathlib import Path
from typing import Dict, Optional

from ..core.errors import StorageError
from .base import StateBackend

logger = logging.getLogger(__name__)


class JsonFileBackend(StateBackend):
    """Named slots stored as string values of a JSON object file."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def read(self, slot: str) -> Optional[str]:
        value = self._read_all().get(slot)
        if value is None or isinstance(value, str):
            return value
        # Written by hand or by another tool; hand back the JSON text.
        return json.dumps(value)

    def write(self, slot: str, value: str) -> None:
        slots = self._read_all()
        slots[slot] = value
        self._write_all(slots)

    def delete(self, slot: str) -> None:
        slots = self._read_all()
        if slot in slots:
            del slots[slot]
            self._write_all(slots)

    def _read_all(self) -> Dict[str, object]:
        if not self.path.exists():
            return {}
        try:
            content = self.path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            logger.warning(f"State file {self.path} is not UTF-8 text, treating as empty: {e}")
            return {}
        except OSError as e:
            raise StorageError(f"Cannot read state file {self.path}: {e}") from e

        if not content.strip():
            return {}
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            logger.warning(f"State file {self.path} is not valid JSON, treating as empty: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"State file {self.path} does not hold an object, treating as empty")
            return {}
        return data

    def _write_all(self, slots: Dict[str, object]) -> None:
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(slots, indent=2), encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise StorageError(f"Cannot write state file {self.path}: {e}") from e
