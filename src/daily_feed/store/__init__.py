"""SQLite state store for per-day processing records."""

from daily_feed.store.errors import MigrationError, StateStoreError, StoreConnectionError
from daily_feed.store.metrics import StoreMetrics
from daily_feed.store.models import CalibrationItem, ItemStatus, ProcessingState
from daily_feed.store.protocols import StateStore
from daily_feed.store.store import FeedStore


__all__ = [
    "CalibrationItem",
    "FeedStore",
    "ItemStatus",
    "MigrationError",
    "ProcessingState",
    "StateStore",
    "StateStoreError",
    "StoreConnectionError",
    "StoreMetrics",
]
