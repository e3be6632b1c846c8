"""Async HTTP helpers shared by the source, reader and summarizer clients."""

from daily_feed.fetch.client import build_http_client
from daily_feed.fetch.models import (
    FetchError,
    FetchErrorClass,
    classify_status,
    is_success_status,
)
from daily_feed.fetch.redact import redact_headers, redact_url_credentials


__all__ = [
    "FetchError",
    "FetchErrorClass",
    "build_http_client",
    "classify_status",
    "is_success_status",
    "redact_headers",
    "redact_url_credentials",
]
