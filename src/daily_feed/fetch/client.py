"""Shared async HTTP client construction."""

import httpx

from daily_feed.config.models import SourceConfig


def build_http_client(config: SourceConfig) -> httpx.AsyncClient:
    """Create the async HTTP client shared by one ingest run.

    Individual calls pass their own timeout; the client default is the
    generic fetch timeout.

    Args:
        config: Source configuration with user agent and default timeout.

    Returns:
        Configured httpx.AsyncClient. The caller owns closing it.
    """
    return httpx.AsyncClient(
        timeout=config.fetch_timeout_seconds,
        follow_redirects=True,
        headers={"User-Agent": config.user_agent},
    )
