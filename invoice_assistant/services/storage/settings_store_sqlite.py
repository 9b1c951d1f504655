"""
SQLite-backed settings store.

Keeps the credential and theme across application restarts for a
single-instance deployment.
"""

import sqlite3
from datetime import datetime, UTC
from typing import Optional

from .settings_store_base import SettingsStoreBase


class SQLiteSettingsStore(SettingsStoreBase):
    """
    Key/value settings persisted in one SQLite table.

    Each call opens its own connection, so the store is safe to share
    between request handlers.
    """

    def __init__(self, db_path: str = "invoice_assistant_settings.db"):
        """
        Initialize store with database path.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = db_path
        self._init_database()

    def _init_database(self):
        """Create settings table if it doesn't exist"""
        conn = sqlite3.connect(self.db_path)
        cursor = conn.cursor()

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS settings (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)

        conn.commit()
        conn.close()

    def _get_connection(self) -> sqlite3.Connection:
        """Get database connection with row factory"""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def get(self, key: str) -> Optional[str]:
        conn = self._get_connection()
        cursor = conn.cursor()

        cursor.execute("SELECT value FROM settings WHERE key = ?", (key,))

        row = cursor.fetchone()
        conn.close()

        if row is None:
            return None
        return row["value"]

    def set(self, key: str, value: str) -> None:
        conn = self._get_connection()
        cursor = conn.cursor()

        cursor.execute("""
            INSERT INTO settings (key, value, updated_at)
            VALUES (?, ?, ?)
            ON CONFLICT(key) DO UPDATE SET
                value = excluded.value,
                updated_at = excluded.updated_at
        """, (key, value, datetime.now(UTC).isoformat()))

        conn.commit()
        conn.close()

    def delete(self, key: str) -> bool:
        conn = self._get_connection()
        cursor = conn.cursor()

        cursor.execute("DELETE FROM settings WHERE key = ?", (key,))

        rows_affected = cursor.rowcount
        conn.commit()
        conn.close()

        return rows_affected > 0
