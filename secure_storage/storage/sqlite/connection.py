import logging
import sqlite3
from contextlib import contextmanager
from typing import Iterator, Optional

from ...exceptions import MediumError, MediumUnavailableError

logger = logging.getLogger(__name__)

IN_MEMORY_PATH = ":memory:"


class SQLiteConnection:
    """Lazily opened sqlite3 connection with WAL journaling."""

    def __init__(self, db_path: str, timeout: float = 5.0) -> None:
        self.db_path: str = db_path
        self.timeout: float = timeout
        self._conn: Optional[sqlite3.Connection] = None
        self._closed: bool = False

    def _open(self) -> sqlite3.Connection:
        conn = sqlite3.connect(
            self.db_path,
            timeout=self.timeout,
            isolation_level=None,  # explicit BEGIN/COMMIT in transaction()
            check_same_thread=False,
        )
        if self.db_path != IN_MEMORY_PATH:
            conn.execute("PRAGMA journal_mode=WAL")
            conn.execute("PRAGMA synchronous=NORMAL")
        conn.row_factory = sqlite3.Row
        return conn

    def get_connection(self) -> sqlite3.Connection:
        """Return the open connection, creating it on first use."""
        if self._closed:
            raise MediumUnavailableError(f"SQLite connection to {self.db_path} is closed")
        if self._conn is None:
            try:
                self._conn = self._open()
            except sqlite3.Error as e:
                logger.error(f"Database connection error: {e}")
                raise MediumError(f"Could not open {self.db_path}: {e}") from e
        return self._conn

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Run statements in a single transaction, rolling back on error."""
        conn = self.get_connection()
        try:
            conn.execute("BEGIN")
            yield conn
            conn.execute("COMMIT")
        except Exception:
            if conn.in_transaction:
                conn.execute("ROLLBACK")
            raise

    def close(self) -> None:
        """Close the connection; further use raises MediumUnavailableError."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None
        self._closed = True
