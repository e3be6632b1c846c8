"""SQLite state store for per-day feed items."""

import json
import sqlite3
import time
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import structlog

from daily_feed.store.errors import StoreConnectionError
from daily_feed.store.metrics import StoreMetrics, TransactionContext
from daily_feed.store.migrations import CURRENT_VERSION, MigrationManager
from daily_feed.store.models import CalibrationItem, ItemStatus, ProcessingState


logger = structlog.get_logger()

# Stay well below SQLite's bound-parameter limit for IN (...) lookups
_MAX_IDS_PER_QUERY = 500

_ITEM_COLUMNS = (
    "date",
    "hn_id",
    "title",
    "url",
    "domain",
    "by",
    "hn_score",
    "descendants",
    "hn_time",
    "fetched_at",
    "summary_short",
    "summary_long",
    "recommend_reason",
    "global_score",
    "usage_prompt_tokens",
    "usage_completion_tokens",
    "usage_total_tokens",
    "tags",
    "status",
    "error_reason",
    "updated_at",
)


class FeedStore:
    """SQLite store of processing states keyed by (date, hn_id).

    The public data operations are coroutines so the orchestrator treats
    every store access as a suspension point; the connection itself is a
    single sqlite3 connection used from the event loop thread.
    """

    def __init__(self, db_path: Path | str, run_id: str | None = None) -> None:
        """Initialize the store.

        Args:
            db_path: Path to SQLite database file.
            run_id: Optional run ID for logging context.
        """
        self._db_path = Path(db_path)
        self._run_id = run_id or str(uuid.uuid4())
        self._conn: sqlite3.Connection | None = None
        self._metrics = StoreMetrics.get_instance()
        self._log = logger.bind(
            component="store",
            run_id=self._run_id,
            db_path=str(self._db_path),
        )

    @property
    def db_path(self) -> Path:
        """Get the database path."""
        return self._db_path

    @property
    def is_connected(self) -> bool:
        """Check if connected to database."""
        return self._conn is not None

    def connect(self) -> None:
        """Open the database and apply pending migrations.

        Creates the database file and parent directories if missing and
        enables WAL mode.
        """
        if self._conn is not None:
            return

        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(str(self._db_path))
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.execute("PRAGMA synchronous=NORMAL")

        migration_mgr = MigrationManager(self._conn)
        old_version = migration_mgr.get_current_version()
        applied = migration_mgr.apply_migrations()

        self._log.info(
            "database_connected",
            old_version=old_version,
            new_version=CURRENT_VERSION,
            migrations_applied=applied,
        )

    def close(self) -> None:
        """Close the database connection."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None
            self._log.debug("database_closed")

    def __enter__(self) -> "FeedStore":
        """Context manager entry."""
        self.connect()
        return self

    def __exit__(
        self,
        exc_type: type | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Context manager exit."""
        self.close()

    def _ensure_connected(self) -> sqlite3.Connection:
        """Return the open connection.

        Raises:
            StoreConnectionError: If not connected.
        """
        if self._conn is None:
            raise StoreConnectionError("Database not connected. Call connect() first.")
        return self._conn

    @contextmanager
    def _transaction(self, operation: str) -> Iterator[TransactionContext]:
        """Run a block in a transaction with timing and logging.

        Args:
            operation: Name of the operation for logging.

        Yields:
            Transaction context collecting affected rows.
        """
        conn = self._ensure_connected()
        start_ns = time.perf_counter_ns()
        ctx = TransactionContext(
            tx_id=str(uuid.uuid4())[:8], start_time_ns=start_ns, operation=operation
        )

        try:
            yield ctx
            conn.commit()
        except Exception:
            conn.rollback()
            self._metrics.record_tx_failure()
            self._log.error("transaction_failed", tx_id=ctx.tx_id, op=operation)
            raise

        duration_ms = (time.perf_counter_ns() - start_ns) / 1_000_000
        self._metrics.record_tx_duration(duration_ms)
        self._log.debug(
            "transaction_complete",
            tx_id=ctx.tx_id,
            op=operation,
            affected_rows=ctx.affected_rows,
            duration_ms=round(duration_ms, 2),
        )

    # ===== Processing state =====

    async def get_states(
        self, date: str, hn_ids: list[int]
    ) -> dict[int, ProcessingState]:
        """Look up existing states for a set of ids on a date.

        Args:
            date: Feed date (YYYY-MM-DD).
            hn_ids: Item ids to look up.

        Returns:
            Mapping of id to state for the ids that have a record.
        """
        conn = self._ensure_connected()
        unique_ids = list(dict.fromkeys(hn_ids))
        states: dict[int, ProcessingState] = {}

        for start in range(0, len(unique_ids), _MAX_IDS_PER_QUERY):
            chunk = unique_ids[start : start + _MAX_IDS_PER_QUERY]
            placeholders = ", ".join("?" for _ in chunk)
            cursor = conn.execute(
                f"SELECT * FROM items WHERE date = ? AND hn_id IN ({placeholders})",  # noqa: S608
                (date, *chunk),
            )
            for row in cursor.fetchall():
                state = _row_to_state(row)
                states[state.hn_id] = state

        return states

    async def upsert(self, record: ProcessingState) -> None:
        """Insert or overwrite the record for (date, hn_id).

        Args:
            record: The processing state to persist.
        """
        values = _state_to_params(record)
        columns = ", ".join(f'"{col}"' for col in _ITEM_COLUMNS)
        placeholders = ", ".join("?" for _ in _ITEM_COLUMNS)
        updates = ", ".join(
            f'"{col}" = excluded."{col}"'
            for col in _ITEM_COLUMNS
            if col not in ("date", "hn_id")
        )

        with self._transaction("upsert_item") as ctx:
            conn = self._ensure_connected()
            conn.execute(
                f"""
                INSERT INTO items ({columns}) VALUES ({placeholders})
                ON CONFLICT(date, hn_id) DO UPDATE SET {updates}
                """,  # noqa: S608
                values,
            )
            ctx.add_affected_rows(1)

        self._metrics.record_upsert()

    async def get_calibration_items(self, date: str) -> list[CalibrationItem]:
        """Get every scored record of a date for calibration.

        Args:
            date: Feed date (YYYY-MM-DD).

        Returns:
            Calibration projections ordered by id.
        """
        conn = self._ensure_connected()
        cursor = conn.execute(
            """
            SELECT hn_id, global_score, hn_score, descendants FROM items
            WHERE date = ? AND global_score IS NOT NULL
            ORDER BY hn_id
            """,
            (date,),
        )
        return [
            CalibrationItem(
                hn_id=row["hn_id"],
                global_score=row["global_score"],
                hn_score=row["hn_score"],
                descendants=row["descendants"],
            )
            for row in cursor.fetchall()
        ]

    async def update_score(
        self, date: str, hn_id: int, score: int, updated_at: str
    ) -> bool:
        """Overwrite the score of an existing record.

        Never creates a record.

        Args:
            date: Feed date (YYYY-MM-DD).
            hn_id: Item id.
            score: New score in [0, 100].
            updated_at: Update timestamp (ISO 8601).

        Returns:
            True if a record was updated.
        """
        with self._transaction("update_score") as ctx:
            conn = self._ensure_connected()
            cursor = conn.execute(
                """
                UPDATE items SET global_score = ?, updated_at = ?
                WHERE date = ? AND hn_id = ?
                """,
                (score, updated_at, date, hn_id),
            )
            ctx.add_affected_rows(cursor.rowcount)

        self._metrics.record_score_update()
        return cursor.rowcount > 0

    async def get_items_by_date(self, date: str) -> list[ProcessingState]:
        """Get a day's items ordered by descending score.

        Unscored items come last; ties are ordered by id.

        Args:
            date: Feed date (YYYY-MM-DD).

        Returns:
            Processing states for the date.
        """
        conn = self._ensure_connected()
        cursor = conn.execute(
            """
            SELECT * FROM items WHERE date = ?
            ORDER BY global_score IS NULL, global_score DESC, hn_id
            """,
            (date,),
        )
        return [_row_to_state(row) for row in cursor.fetchall()]

    # ===== Stats =====

    def get_stats(self) -> dict[str, int]:
        """Get item counts overall and per status.

        Returns:
            Dictionary with ``items``, ``dates``, ``ok`` and ``error`` counts.
        """
        conn = self._ensure_connected()
        row = conn.execute(
            """
            SELECT
                COUNT(*) AS items,
                COUNT(DISTINCT date) AS dates,
                COALESCE(SUM(status = 'ok'), 0) AS ok,
                COALESCE(SUM(status = 'error'), 0) AS error
            FROM items
            """
        ).fetchone()
        return {key: int(row[key]) for key in ("items", "dates", "ok", "error")}

    def get_schema_version(self) -> int:
        """Get current schema version."""
        return MigrationManager(self._ensure_connected()).get_current_version()


def _state_to_params(record: ProcessingState) -> tuple[object, ...]:
    """Serialize a state into column order, encoding tags as JSON."""
    data = record.model_dump(mode="json")
    data["tags"] = json.dumps(record.tags, ensure_ascii=False)
    return tuple(data[col] for col in _ITEM_COLUMNS)


def _decode_tags(raw: str | None) -> list[str]:
    """Decode the JSON tags column, tolerating legacy or corrupt values."""
    if not raw:
        return []
    try:
        tags = json.loads(raw)
    except json.JSONDecodeError:
        return []
    if not isinstance(tags, list):
        return []
    return [str(tag) for tag in tags]


def _row_to_state(row: sqlite3.Row) -> ProcessingState:
    """Convert a database row to a ProcessingState."""
    data = {col: row[col] for col in _ITEM_COLUMNS}
    data["tags"] = _decode_tags(row["tags"])
    data["status"] = ItemStatus(row["status"])
    return ProcessingState.model_validate(data)
