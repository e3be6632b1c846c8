"""Read-side feed operations."""

from daily_feed.feed.errors import (
    FeedServiceError,
    InvalidDateError,
    RefreshIncompleteError,
)
from daily_feed.feed.models import (
    FeedResponse,
    FeedStats,
    HealthResponse,
    RefreshLoopResult,
    RefreshResponse,
)
from daily_feed.feed.service import FeedService


__all__ = [
    "FeedResponse",
    "FeedService",
    "FeedServiceError",
    "FeedStats",
    "HealthResponse",
    "InvalidDateError",
    "RefreshIncompleteError",
    "RefreshLoopResult",
    "RefreshResponse",
]
