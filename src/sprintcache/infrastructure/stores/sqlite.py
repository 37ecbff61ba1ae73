"""SQLite durable store implementation."""

import logging
import sqlite3
import time
from pathlib import Path

from sprintcache.core.interfaces.durable_store import DurableStoreError

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS cache_store (
    key TEXT PRIMARY KEY,
    data TEXT NOT NULL,
    updated_at REAL NOT NULL
)
"""


class SQLiteDurableStore:
    """File-backed durable store using a single SQLite table.

    Gives a desktop or server process the same "survives a restart"
    property browser local storage gives the storefront. Runs in
    autocommit mode with WAL journaling so every write is persisted
    as soon as it returns.

    Example:
        >>> store = SQLiteDurableStore(Path("~/.sprintsaas/cache.db").expanduser())
        >>> cache = ReadThroughCache(store=store)
        >>> store.close()
    """

    def __init__(self, db_path: Path | str) -> None:
        """Open (and create if needed) the database file.

        Args:
            db_path: Path to the SQLite database file, or ``":memory:"``.

        Raises:
            DurableStoreError: If the database cannot be opened.
        """
        self.db_path = db_path if db_path == ":memory:" else Path(db_path)
        self.conn: sqlite3.Connection | None = None

        try:
            if isinstance(self.db_path, Path):
                self.db_path.parent.mkdir(parents=True, exist_ok=True)

            self.conn = sqlite3.connect(
                str(self.db_path),
                check_same_thread=False,
                isolation_level=None,  # Auto-commit mode
            )
            self.conn.execute("PRAGMA journal_mode=WAL")
            self.conn.execute("PRAGMA synchronous=NORMAL")
            self.conn.execute(_SCHEMA)
        except (sqlite3.Error, OSError) as e:
            raise DurableStoreError(
                f"Failed to open SQLite store at {self.db_path}: {e!s}"
            ) from e

        logger.debug("Opened SQLite durable store at %s", self.db_path)

    def read(self, key: str) -> str | None:
        row = self._execute(
            "SELECT data FROM cache_store WHERE key = ?", (key,)
        ).fetchone()
        return row[0] if row else None

    def write(self, key: str, data: str) -> None:
        self._execute(
            "INSERT INTO cache_store (key, data, updated_at) VALUES (?, ?, ?) "
            "ON CONFLICT(key) DO UPDATE SET "
            "data = excluded.data, updated_at = excluded.updated_at",
            (key, data, time.time()),
        )

    def remove(self, key: str) -> None:
        self._execute("DELETE FROM cache_store WHERE key = ?", (key,))

    def list_keys(self) -> list[str]:
        rows = self._execute("SELECT key FROM cache_store").fetchall()
        return [row[0] for row in rows]

    def _execute(self, sql: str, params: tuple = ()) -> sqlite3.Cursor:
        if self.conn is None:
            raise DurableStoreError("SQLite store is closed")
        try:
            return self.conn.execute(sql, params)
        except sqlite3.Error as e:
            raise DurableStoreError(f"SQLite store operation failed: {e!s}") from e

    def close(self) -> None:
        """Close the database connection."""
        if self.conn is not None:
            self.conn.close()
            self.conn = None

    def __enter__(self) -> "SQLiteDurableStore":
        return self

    def __exit__(self, exc_type: type, exc_val: Exception, exc_tb: object) -> None:
        self.close()
