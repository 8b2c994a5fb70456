"""SQLite-backed set of usernames that have been reported on."""

import sqlite3
from datetime import UTC, datetime
from pathlib import Path
from typing import Protocol

_CREATE_TABLES_SQL = """
CREATE TABLE IF NOT EXISTS usernames (
    username TEXT PRIMARY KEY,
    first_seen_at TEXT NOT NULL
);
"""


class DedupStore(Protocol):
    def contains_and_insert(self, key: str) -> bool: ...


class SqliteUserStore:
    """Persistent username set.

    `contains_and_insert` is a single INSERT OR IGNORE, so concurrent report
    runs cannot both see the same user as new.
    """

    def __init__(self, db_file: Path):
        self.db_file = db_file

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self.db_file))
        conn.row_factory = sqlite3.Row
        return conn

    def ensure_db(self) -> None:
        """Create the database and table if they don't exist."""
        self.db_file.parent.mkdir(parents=True, exist_ok=True)
        conn = self._connect()
        conn.executescript(_CREATE_TABLES_SQL)
        conn.close()

    def contains_and_insert(self, key: str) -> bool:
        """Add `key` to the set. Returns True if it was not there before."""
        self.ensure_db()
        conn = self._connect()
        cursor = conn.execute(
            "INSERT OR IGNORE INTO usernames (username, first_seen_at) VALUES (?, ?)",
            (key, datetime.now(UTC).isoformat()),
        )
        conn.commit()
        inserted = cursor.rowcount == 1
        conn.close()
        return inserted

    def list_users(self) -> list[str]:
        self.ensure_db()
        conn = self._connect()
        rows = conn.execute(
            "SELECT username FROM usernames ORDER BY first_seen_at, rowid"
        ).fetchall()
        conn.close()
        return [row["username"] for row in rows]
