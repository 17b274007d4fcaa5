"""SQL migration runner shared by the CLI and the test fixtures."""

from pathlib import Path
from typing import List, Set

from logger import get_logger

logger = get_logger()


def init_schema_migrations_table(conn) -> None:
    conn.execute("""
        CREATE TABLE IF NOT EXISTS schema_migrations (
            migration_file TEXT PRIMARY KEY,
            applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """)
    conn.commit()


def get_applied_migrations(conn) -> Set[str]:
    cursor = conn.execute(
        "SELECT migration_file FROM schema_migrations ORDER BY migration_file"
    )
    return {row[0] for row in cursor.fetchall()}


def get_available_migrations(migrations_dir: Path) -> List[str]:
    if not migrations_dir.exists():
        return []
    return sorted(path.name for path in migrations_dir.glob("*.sql"))


def apply_pending_migrations(conn, migrations_dir: Path) -> List[str]:
    """Apply every migration not recorded in schema_migrations yet.

    Args:
        conn: SQLite connection.
        migrations_dir: Directory of ordered .sql files.

    Returns:
        Names of the migrations that were applied.

    Raises:
        sqlite3.Error: If a migration fails; that migration is rolled back.
    """
    init_schema_migrations_table(conn)
    applied = get_applied_migrations(conn)
    pending = [
        m for m in get_available_migrations(migrations_dir) if m not in applied
    ]

    for migration_file in pending:
        sql = (migrations_dir / migration_file).read_text()
        try:
            conn.executescript(sql)
            conn.execute(
                "INSERT INTO schema_migrations (migration_file) VALUES (?)",
                (migration_file,),
            )
            conn.commit()
            logger.info(f"Applied migration: {migration_file}")
        except Exception as e:
            conn.rollback()
            logger.error(f"Error applying migration {migration_file}: {e}")
            raise

    return pending
