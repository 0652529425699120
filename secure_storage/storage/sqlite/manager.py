"""SQLite storage medium implementation."""
import logging
import os
import sqlite3
from pathlib import Path
from typing import List, Optional
from urllib.parse import urlparse

from ..base import StorageMedium
from .connection import IN_MEMORY_PATH, SQLiteConnection
from .schema import initialize_schema
from ...exceptions import MediumError, QuotaExceededError

logger = logging.getLogger(__name__)


class SQLiteMedium(StorageMedium):
    """Durable medium keeping one row per key in a SQLite database."""

    def __init__(self, db_path: str, quota: Optional[int] = None):
        """
        Initialize the medium and create its schema.

        Args:
            db_path: Database file path, or ":memory:"
            quota: Optional limit on total key plus value characters
        """
        self.db_path = db_path
        self.quota = quota
        self.connection = SQLiteConnection(db_path)
        self._initialized = False

    @classmethod
    def from_url(cls, database_url: str, quota: Optional[int] = None) -> "SQLiteMedium":
        """Create a medium from a sqlite:///path URL."""
        parsed_url = urlparse(database_url)
        if not parsed_url.scheme:
            return cls(database_url, quota=quota)
        if parsed_url.scheme != "sqlite":
            raise ValueError(f"Unsupported database URL scheme: {parsed_url.scheme}")
        if not parsed_url.path:
            raise ValueError("Database path not specified in URL")

        path = parsed_url.path
        if path == f"/{IN_MEMORY_PATH}":
            return cls(IN_MEMORY_PATH, quota=quota)

        # sqlite:///relative.db -> relative, sqlite:////abs/path.db -> absolute
        if path.startswith("//"):
            db_path = path[1:]
        else:
            relative = path.lstrip("/")
            if "/" in relative:
                db_path = str(Path(relative).absolute())
                os.makedirs(os.path.dirname(db_path), exist_ok=True)
            else:
                db_path = relative
        return cls(db_path, quota=quota)

    def _conn(self) -> sqlite3.Connection:
        conn = self.connection.get_connection()
        if not self._initialized:
            try:
                with self.connection.transaction():
                    initialize_schema(conn)
            except sqlite3.Error as e:
                raise MediumError(f"Schema initialization failed: {e}") from e
            self._initialized = True
        return conn

    def get_item(self, key: str) -> Optional[str]:
        conn = self._conn()
        try:
            row = conn.execute(
                "SELECT value FROM storage_records WHERE key = ?",
                (key,)
            ).fetchone()
        except sqlite3.Error as e:
            logger.error(f"Read failed for {key}: {e}")
            raise MediumError(f"Read failed for '{key}': {e}") from e
        return row["value"] if row is not None else None

    def set_item(self, key: str, value: str) -> None:
        conn = self._conn()
        try:
            with self.connection.transaction():
                if self.quota is not None:
                    required = self._usage_without(conn, key) + len(key) + len(value)
                    if required > self.quota:
                        raise QuotaExceededError(key, required, self.quota)
                conn.execute(
                    """
                    INSERT INTO storage_records (key, value, updated_at)
                    VALUES (?, ?, CURRENT_TIMESTAMP)
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value,
                        updated_at = excluded.updated_at
                    """,
                    (key, value)
                )
        except sqlite3.Error as e:
            logger.error(f"Write failed for {key}: {e}")
            raise MediumError(f"Write failed for '{key}': {e}") from e

    def remove_item(self, key: str) -> None:
        conn = self._conn()
        try:
            with self.connection.transaction():
                conn.execute("DELETE FROM storage_records WHERE key = ?", (key,))
        except sqlite3.Error as e:
            logger.error(f"Delete failed for {key}: {e}")
            raise MediumError(f"Delete failed for '{key}': {e}") from e

    def keys(self) -> List[str]:
        conn = self._conn()
        try:
            rows = conn.execute("SELECT key FROM storage_records ORDER BY key").fetchall()
        except sqlite3.Error as e:
            raise MediumError(f"Listing keys failed: {e}") from e
        return [row["key"] for row in rows]

    def _usage_without(self, conn: sqlite3.Connection, key: str) -> int:
        row = conn.execute(
            """
            SELECT COALESCE(SUM(LENGTH(key) + LENGTH(value)), 0) AS usage
            FROM storage_records WHERE key != ?
            """,
            (key,)
        ).fetchone()
        return row["usage"]

    def close(self) -> None:
        """Close the underlying connection."""
        self.connection.close()
