"""
SQLite state backend.

Features:
- Schema versioning with automatic migrations, applied on first use
- Connection handling via a context manager (commit or rollback)
- Single key/value table of named slots
"""

import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from ..core.errors import StorageError
from .base import StateBackend

SCHEMA_VERSION = 1


class SQLiteBackend(StateBackend):
    """Named slots persisted in a local SQLite file."""

    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)
        self._schema_ready = False

    @contextmanager
    def _connection(self):
        """Context manager for database connections."""
        try:
            conn = sqlite3.connect(self.db_path)
        except sqlite3.Error as e:
            raise StorageError(f"Cannot open {self.db_path}: {e}") from e

        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise StorageError(f"SQLite error on {self.db_path}: {e}") from e
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _ensure_schema(self) -> None:
        """Create or migrate the schema on first use."""
        if not self._schema_ready:
            self._init_db()
            self._schema_ready = True

    def _init_db(self) -> None:
        """Initialize database schema with versioning."""
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Cannot create {self.db_path.parent}: {e}") from e

        with self._connection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS schema_version (
                    version INTEGER PRIMARY KEY,
                    applied_at TEXT NOT NULL,
                    description TEXT
                )
            """)
            row = conn.execute("SELECT MAX(version) AS v FROM schema_version").fetchone()
            current_version = row["v"] if row and row["v"] else 0
            if current_version < SCHEMA_VERSION:
                self._migrate(conn, current_version)

    def _migrate(self, conn: sqlite3.Connection, from_version: int) -> None:
        """Run schema migrations."""
        if from_version < 1:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS slots (
                    name TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)
            conn.execute(
                "INSERT INTO schema_version (version, applied_at, description) VALUES (?, ?, ?)",
                (1, datetime.now(timezone.utc).isoformat(), "Initial slots table"),
            )

    def read(self, slot: str) -> Optional[str]:
        self._ensure_schema()
        with self._connection() as conn:
            row = conn.execute("SELECT value FROM slots WHERE name = ?", (slot,)).fetchone()
        return row["value"] if row else None

    def write(self, slot: str, value: str) -> None:
        self._ensure_schema()
        with self._connection() as conn:
            conn.execute(
                """
                INSERT INTO slots (name, value, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(name) DO UPDATE SET value = excluded.value,
                                                updated_at = excluded.updated_at
                """,
                (slot, value, datetime.now(timezone.utc).isoformat()),
            )

    def delete(self, slot: str) -> None:
        self._ensure_schema()
        with self._connection() as conn:
            conn.execute("DELETE FROM slots WHERE name = ?", (slot,))
