"""Metrics collection for the feed state store."""

from dataclasses import dataclass
from typing import ClassVar


@dataclass
class TransactionContext:
    """Context for a store transaction.

    Attributes:
        tx_id: Short transaction id for log correlation.
        start_time_ns: perf_counter_ns at transaction start.
        operation: Name of the store operation.
        affected_rows: Rows written so far.
    """

    tx_id: str
    start_time_ns: int
    operation: str
    affected_rows: int = 0

    def add_affected_rows(self, count: int) -> None:
        """Add to the affected row count."""
        self.affected_rows += count


@dataclass
class StoreMetrics:
    """Metrics for state store operations.

    Attributes:
        upserts_total: Total processing-state upserts.
        score_updates_total: Total calibrated score updates.
        tx_duration_ms: Cumulative transaction duration in milliseconds.
        tx_count: Number of committed transactions.
        tx_failures_total: Number of rolled back transactions.
    """

    upserts_total: int = 0
    score_updates_total: int = 0
    tx_duration_ms: float = 0.0
    tx_count: int = 0
    tx_failures_total: int = 0

    _instance: ClassVar["StoreMetrics | None"] = None

    @classmethod
    def get_instance(cls) -> "StoreMetrics":
        """Get singleton metrics instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset metrics (primarily for testing)."""
        cls._instance = None

    def record_upsert(self) -> None:
        """Record a processing-state upsert."""
        self.upserts_total += 1

    def record_score_update(self) -> None:
        """Record a calibrated score update."""
        self.score_updates_total += 1

    def record_tx_duration(self, duration_ms: float) -> None:
        """Record a committed transaction's duration."""
        self.tx_duration_ms += duration_ms
        self.tx_count += 1

    def record_tx_failure(self) -> None:
        """Record a rolled back transaction."""
        self.tx_failures_total += 1
