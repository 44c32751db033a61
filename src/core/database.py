"""
SQLite database operations: local key-value cache and request log tables.
"""

import sqlite3
from datetime import datetime, timezone
from pathlib import Path

from core.config import DB_PATH


def get_connection(db_path: Path | None = None) -> sqlite3.Connection:
    """Get a database connection, creating the parent directory if needed."""
    path = Path(db_path or DB_PATH)
    path.parent.mkdir(parents=True, exist_ok=True)
    return sqlite3.connect(path)


def init_db(db_path: Path | None = None):
    """Create the cache and request logging tables if they don't exist."""
    conn = get_connection(db_path)
    try:
        cursor = conn.cursor()

        # Key-value cache, one namespace per linked account
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS cache_entries (
                namespace TEXT NOT NULL,
                key TEXT NOT NULL,
                value TEXT NOT NULL,
                updated_at TEXT NOT NULL,
                PRIMARY KEY (namespace, key)
            )
        """)

        # API request logging table
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS api_requests (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                request_id TEXT UNIQUE NOT NULL,
                timestamp TEXT NOT NULL,
                endpoint TEXT NOT NULL,
                method TEXT NOT NULL,
                client_ip TEXT,
                user_email TEXT,
                status_code INTEGER NOT NULL,
                error_code TEXT,
                error_message TEXT,
                processing_time_ms INTEGER NOT NULL,
                event_count INTEGER
            )
        """)
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_api_requests_timestamp ON api_requests(timestamp)"
        )
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_api_requests_status ON api_requests(status_code)"
        )

        conn.commit()
    finally:
        conn.close()


def get_cache_values(conn: sqlite3.Connection, namespace: str, keys: list[str]) -> dict[str, str]:
    """Return the stored values for the given keys; missing keys are omitted."""
    placeholders = ", ".join("?" for _ in keys)
    cursor = conn.cursor()
    cursor.execute(
        f"SELECT key, value FROM cache_entries WHERE namespace = ? AND key IN ({placeholders})",
        (namespace, *keys),
    )
    return dict(cursor.fetchall())


def set_cache_values(conn: sqlite3.Connection, namespace: str, values: dict[str, str]):
    """Write all values in a single transaction."""
    updated_at = datetime.now(timezone.utc).isoformat()
    with conn:
        conn.executemany(
            """
            INSERT INTO cache_entries (namespace, key, value, updated_at)
            VALUES (?, ?, ?, ?)
            ON CONFLICT(namespace, key) DO UPDATE SET
                value = excluded.value,
                updated_at = excluded.updated_at
            """,
            [(namespace, key, value, updated_at) for key, value in values.items()],
        )


def delete_cache_values(conn: sqlite3.Connection, namespace: str, keys: list[str]):
    """Remove the given keys from a namespace."""
    with conn:
        conn.executemany(
            "DELETE FROM cache_entries WHERE namespace = ? AND key = ?",
            [(namespace, key) for key in keys],
        )


class SqliteStorage:
    """
    Browser-style local storage backed by the cache_entries table.

    Each instance is scoped to one namespace, so two users never see each
    other's keys.
    """

    def __init__(self, namespace: str, db_path: Path | None = None):
        self.namespace = namespace
        self.db_path = db_path
        init_db(db_path)

    def get_many(self, keys: list[str]) -> dict[str, str]:
        conn = get_connection(self.db_path)
        try:
            return get_cache_values(conn, self.namespace, keys)
        finally:
            conn.close()

    def set_many(self, values: dict[str, str]):
        conn = get_connection(self.db_path)
        try:
            set_cache_values(conn, self.namespace, values)
        finally:
            conn.close()

    def remove_many(self, keys: list[str]):
        conn = get_connection(self.db_path)
        try:
            delete_cache_values(conn, self.namespace, keys)
        finally:
            conn.close()
