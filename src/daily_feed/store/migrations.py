"""SQLite schema migrations for the feed state store."""

import sqlite3
from dataclasses import dataclass
from datetime import UTC, datetime

import structlog

from daily_feed.store.errors import MigrationError


logger = structlog.get_logger()

# Current schema version
CURRENT_VERSION = 2


@dataclass(frozen=True)
class Migration:
    """A database migration.

    Attributes:
        version: Target version after applying this migration.
        description: Human-readable description.
        up_sql: SQL to apply the migration.
    """

    version: int
    description: str
    up_sql: str


# All migrations in order
MIGRATIONS: list[Migration] = [
    Migration(
        version=1,
        description="Initial schema with per-day items table",
        up_sql="""
CREATE TABLE IF NOT EXISTS items (
    date TEXT NOT NULL,
    hn_id INTEGER NOT NULL,
    title TEXT NOT NULL,
    url TEXT,
    domain TEXT,
    "by" TEXT,
    hn_score INTEGER,
    descendants INTEGER,
    hn_time INTEGER,
    fetched_at TEXT NOT NULL,
    summary_short TEXT,
    summary_long TEXT,
    global_score INTEGER,
    tags TEXT,
    status TEXT NOT NULL CHECK (status IN ('ok', 'error')),
    error_reason TEXT,
    updated_at TEXT NOT NULL,
    PRIMARY KEY (date, hn_id)
);
CREATE INDEX IF NOT EXISTS idx_items_date_score ON items(date, global_score);
""",
    ),
    Migration(
        version=2,
        description="Add recommendation text and token usage counters",
        up_sql="""
ALTER TABLE items ADD COLUMN recommend_reason TEXT;
ALTER TABLE items ADD COLUMN usage_prompt_tokens INTEGER;
ALTER TABLE items ADD COLUMN usage_completion_tokens INTEGER;
ALTER TABLE items ADD COLUMN usage_total_tokens INTEGER;
""",
    ),
]


def get_migrations_to_apply(current_version: int) -> list[Migration]:
    """Get migrations that need to be applied.

    Args:
        current_version: The current schema version.

    Returns:
        List of migrations to apply in order.
    """
    return [m for m in MIGRATIONS if m.version > current_version]


class MigrationManager:
    """Manages SQLite schema migrations."""

    VERSION_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER PRIMARY KEY,
    applied_at TEXT NOT NULL,
    description TEXT
);
"""

    def __init__(self, connection: sqlite3.Connection) -> None:
        """Initialize the migration manager.

        Args:
            connection: SQLite connection to manage.
        """
        self._conn = connection
        self._log = logger.bind(component="store", operation="migration")

    def ensure_version_table(self) -> None:
        """Ensure the schema_version table exists."""
        self._conn.execute(self.VERSION_TABLE_SQL)
        self._conn.commit()

    def get_current_version(self) -> int:
        """Get the current schema version.

        Returns:
            Current version number, or 0 if no migrations applied.
        """
        self.ensure_version_table()
        row = self._conn.execute("SELECT MAX(version) FROM schema_version").fetchone()
        return row[0] if row[0] is not None else 0

    def apply_migrations(self) -> list[int]:
        """Apply all pending migrations.

        Returns:
            List of version numbers that were applied.

        Raises:
            MigrationError: If a migration cannot be applied.
        """
        current = self.get_current_version()
        pending = get_migrations_to_apply(current)

        if not pending:
            self._log.debug("no_migrations_pending", current_version=current)
            return []

        applied: list[int] = []
        for migration in pending:
            self._log.info(
                "applying_migration",
                version=migration.version,
                description=migration.description,
            )
            try:
                self._conn.executescript(migration.up_sql)
                self._conn.execute(
                    """
                    INSERT INTO schema_version (version, applied_at, description)
                    VALUES (?, ?, ?)
                    """,
                    (
                        migration.version,
                        datetime.now(UTC).isoformat(),
                        migration.description,
                    ),
                )
                self._conn.commit()
            except sqlite3.Error as exc:
                self._conn.rollback()
                raise MigrationError(migration.version, str(exc)) from exc
            applied.append(migration.version)

        return applied
