"""Article content extraction through a reader proxy."""

from daily_feed.reader.reader import ContentFetcher, ContentResult


__all__ = ["ContentFetcher", "ContentResult"]
