"""SQLite file management for the key-value store."""

import sqlite3
from contextlib import contextmanager
from typing import List

from config import Config, get_migrations_dir
from db.migrator import apply_pending_migrations
from logger import get_logger

logger = get_logger()


class DatabaseManager:
    """Opens connections to the SQLite file that backs the key-value store.

    Args:
        config: Application configuration object.
        timeout: Seconds to wait for a lock held by another process.
    """

    def __init__(self, config: Config, timeout: float = 5.0):
        self.config = config
        self.timeout = timeout

    @contextmanager
    def connect(self):
        """Get a database connection with automatic cleanup.

        The data directory is created on first use.

        Yields:
            sqlite3.Connection: Database connection.
        """
        db_path = self.config.db_path
        db_path.parent.mkdir(parents=True, exist_ok=True)

        conn = sqlite3.connect(db_path, timeout=self.timeout)
        try:
            yield conn
        finally:
            conn.close()

    def initialize(self) -> List[str]:
        """Bring the schema up to date.

        Returns:
            Names of the migrations that were applied (empty when current).
        """
        with self.connect() as conn:
            applied = apply_pending_migrations(conn, self.get_migrations_dir())
        if applied:
            logger.debug(f"Initialized database at {self.get_db_path()}")
        return applied

    def get_db_path(self):
        """Get the current database path."""
        return self.config.db_path

    def get_migrations_dir(self):
        """Get the migrations directory path."""
        return get_migrations_dir()
