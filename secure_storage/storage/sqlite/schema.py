"""SQLite database schema definitions."""
import logging
import sqlite3

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1

RECORDS_TABLE = """
CREATE TABLE IF NOT EXISTS storage_records (
    key TEXT PRIMARY KEY NOT NULL,
    value TEXT NOT NULL,
    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
)
"""

SCHEMA_VERSION_TABLE = """
CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER PRIMARY KEY,
    applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
)
"""


def initialize_schema(conn: sqlite3.Connection) -> None:
    """Create tables if they are missing and record the schema version."""
    conn.execute(RECORDS_TABLE)
    conn.execute(SCHEMA_VERSION_TABLE)
    conn.execute(
        "INSERT OR IGNORE INTO schema_version (version) VALUES (?)",
        (SCHEMA_VERSION,)
    )
    logger.debug(f"Storage schema initialized at version {SCHEMA_VERSION}")
