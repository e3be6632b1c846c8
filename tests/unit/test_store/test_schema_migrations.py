"""Unit tests for feed store schema migrations."""

import sqlite3
from pathlib import Path

import pytest

from daily_feed.store.errors import MigrationError
from daily_feed.store.migrations import (
    CURRENT_VERSION,
    MIGRATIONS,
    MigrationManager,
    get_migrations_to_apply,
)


class TestMigrationList:
    """Tests for migration ordering."""

    def test_versions_sequential(self) -> None:
        """Migrations are numbered 1..CURRENT_VERSION."""
        assert [m.version for m in MIGRATIONS] == list(range(1, CURRENT_VERSION + 1))

    def test_pending_from_version(self) -> None:
        """Only newer migrations are pending."""
        assert [m.version for m in get_migrations_to_apply(1)] == [2]
        assert get_migrations_to_apply(CURRENT_VERSION) == []


class TestMigrationManager:
    """Tests for applying migrations."""

    def test_fresh_database(self, tmp_path: Path) -> None:
        """All migrations apply to an empty database."""
        conn = sqlite3.connect(tmp_path / "db.sqlite")
        manager = MigrationManager(conn)

        assert manager.apply_migrations() == [1, 2]
        assert manager.get_current_version() == CURRENT_VERSION

        columns = {row[1] for row in conn.execute("PRAGMA table_info(items)")}
        assert {"by", "recommend_reason", "usage_total_tokens", "tags"} <= columns
        conn.close()

    def test_idempotent(self, tmp_path: Path) -> None:
        """A second pass applies nothing."""
        conn = sqlite3.connect(tmp_path / "db.sqlite")
        manager = MigrationManager(conn)
        manager.apply_migrations()

        assert manager.apply_migrations() == []
        conn.close()

    def test_upgrade_from_v1(self, tmp_path: Path) -> None:
        """A version 1 database gains the version 2 columns."""
        conn = sqlite3.connect(tmp_path / "db.sqlite")
        manager = MigrationManager(conn)
        manager.ensure_version_table()
        conn.executescript(MIGRATIONS[0].up_sql)
        conn.execute(
            "INSERT INTO schema_version (version, applied_at, description) VALUES (1, 'x', 'v1')"
        )
        conn.commit()

        assert manager.apply_migrations() == [2]
        conn.close()

    def test_broken_migration_raises(self, tmp_path: Path) -> None:
        """A failing migration raises MigrationError with its version."""
        conn = sqlite3.connect(tmp_path / "db.sqlite")
        manager = MigrationManager(conn)
        manager.ensure_version_table()
        # recommend_reason already exists, so the v2 ALTER fails
        conn.execute("CREATE TABLE items (recommend_reason TEXT)")
        conn.execute(
            "INSERT INTO schema_version (version, applied_at, description) VALUES (1, 'x', 'v1')"
        )
        conn.commit()

        with pytest.raises(MigrationError) as exc_info:
            manager.apply_migrations()

        assert exc_info.value.version == 2
        conn.close()
