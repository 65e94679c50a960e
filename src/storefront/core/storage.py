"""SQLite-backed key/value storage for client state."""

from __future__ import annotations

import sqlite3
from pathlib import Path

import structlog

log = structlog.get_logger()

USER_ID_KEY = "currentUserId"


class ClientStorage:
    """Persist string-keyed client state in a local SQLite database."""

    def __init__(self, db_path: Path | str = ":memory:"):
        if isinstance(db_path, Path):
            db_path.parent.mkdir(parents=True, exist_ok=True)
        self.db_path = db_path
        self._conn = sqlite3.connect(str(db_path), check_same_thread=False)
        self._conn.execute(
            """CREATE TABLE IF NOT EXISTS items (
                key TEXT PRIMARY KEY,
                value TEXT
            )"""
        )
        self._conn.commit()

    @classmethod
    def in_dir(cls, state_dir: Path) -> ClientStorage:
        return cls(state_dir / "storage.db")

    def get_item(self, key: str) -> str | None:
        row = self._conn.execute("SELECT value FROM items WHERE key = ?", (key,)).fetchone()
        return None if row is None else row[0]

    def set_item(self, key: str, value: str) -> None:
        self._conn.execute(
            "INSERT OR REPLACE INTO items (key, value) VALUES (?, ?)", (key, value)
        )
        self._conn.commit()
        log.debug("storage_set", key=key)

    def remove_item(self, key: str) -> None:
        self._conn.execute("DELETE FROM items WHERE key = ?", (key,))
        self._conn.commit()
        log.debug("storage_removed", key=key)

    def close(self) -> None:
        self._conn.close()


def current_user_id(storage: ClientStorage, default: str) -> str:
    """Return the stored user identifier, or ``default`` when none is stored."""
    return storage.get_item(USER_ID_KEY) or default
