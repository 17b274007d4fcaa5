"""Key-value store over the kv_store table."""

import sqlite3
from typing import Optional

from errors import StorageError


class KeyValueStore:
    """Text values addressed by string keys.

    No atomicity is promised across keys; each call is its own transaction.

    Args:
        db_manager: Database manager providing connections.
    """

    def __init__(self, db_manager):
        self.db_manager = db_manager

    def get(self, key: str) -> Optional[str]:
        """Read a value, or None if the key is absent.

        Raises:
            StorageError: If the database cannot be read.
        """
        try:
            with self.db_manager.connect() as conn:
                row = conn.execute(
                    "SELECT value FROM kv_store WHERE key = ?", (key,)
                ).fetchone()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to read '{key}': {e}") from e
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        """Insert or replace a value.

        Raises:
            StorageError: If the write fails.
        """
        try:
            with self.db_manager.connect() as conn:
                conn.execute(
                    """
                    INSERT INTO kv_store (key, value, updated_at)
                    VALUES (?, ?, CURRENT_TIMESTAMP)
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value,
                        updated_at = excluded.updated_at
                    """,
                    (key, value),
                )
                conn.commit()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to write '{key}': {e}") from e

    def remove(self, key: str) -> None:
        """Delete a key; missing keys are ignored.

        Raises:
            StorageError: If the delete fails.
        """
        try:
            with self.db_manager.connect() as conn:
                conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
                conn.commit()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to remove '{key}': {e}") from e
