"""Hacker News Firebase API client."""

import asyncio

import httpx
import structlog
from pydantic import ValidationError

from daily_feed.config.models import SourceConfig
from daily_feed.fetch.models import (
    FetchError,
    FetchErrorClass,
    classify_status,
    is_success_status,
)
from daily_feed.sources.models import CandidateItem


logger = structlog.get_logger()


class HackerNewsClient:
    """Fetches ranked story ids and item details from Hacker News."""

    def __init__(self, http: httpx.AsyncClient, config: SourceConfig) -> None:
        """Initialize the client.

        Args:
            http: Shared async HTTP client.
            config: Source endpoints, timeouts and batching.
        """
        self._http = http
        self._config = config
        self._base = config.hn_api_base.rstrip("/")
        self._log = logger.bind(component="source", subcomponent="hn")

    async def list_top_ids(self, limit: int) -> list[int]:
        """Get the top-ranked story ids.

        Args:
            limit: Maximum number of ids to return.

        Returns:
            Story ids in rank order.

        Raises:
            FetchError: If the list cannot be fetched or is not a JSON array.
        """
        url = f"{self._base}/topstories.json"
        try:
            response = await self._http.get(
                url, timeout=self._config.fetch_timeout_seconds
            )
        except httpx.TimeoutException as exc:
            msg = f"Timed out fetching top stories: {exc}"
            raise FetchError(msg, FetchErrorClass.NETWORK_TIMEOUT) from exc
        except httpx.HTTPError as exc:
            msg = f"Failed to fetch top stories: {exc}"
            raise FetchError(msg, FetchErrorClass.CONNECTION_ERROR) from exc

        error_class = classify_status(response.status_code)
        if error_class is not None:
            msg = f"Failed to fetch top stories: {response.status_code}"
            raise FetchError(msg, error_class, status_code=response.status_code)

        try:
            ids = response.json()
        except ValueError as exc:
            msg = "Top stories response is not valid JSON"
            raise FetchError(msg, FetchErrorClass.INVALID_PAYLOAD) from exc
        if not isinstance(ids, list):
            msg = f"Expected JSON array of ids, got {type(ids).__name__}"
            raise FetchError(msg, FetchErrorClass.INVALID_PAYLOAD)

        return [i for i in ids[:limit] if isinstance(i, int)]

    async def get_item(self, item_id: int) -> CandidateItem | None:
        """Get one item's details.

        Never raises: deleted items, non-2xx responses, transport errors
        and unparsable payloads all yield None.

        Args:
            item_id: Hacker News item id.

        Returns:
            The parsed item, or None if it is unavailable.
        """
        url = f"{self._base}/item/{item_id}.json"
        try:
            response = await self._http.get(
                url, timeout=self._config.fetch_timeout_seconds
            )
            if not is_success_status(response.status_code):
                self._log.debug(
                    "item_unavailable", item_id=item_id, status=response.status_code
                )
                return None
            data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            self._log.debug("item_fetch_failed", item_id=item_id, error=str(exc))
            return None

        if not isinstance(data, dict):
            return None
        try:
            return CandidateItem.model_validate(data)
        except ValidationError:
            self._log.debug("item_payload_invalid", item_id=item_id)
            return None

    async def get_items(self, ids: list[int]) -> list[CandidateItem]:
        """Get details for many items, dropping unavailable ones.

        Fetches all ids in parallel unless ``item_fetch_batch_size`` is
        configured, in which case batches run one after another.

        Args:
            ids: Item ids in rank order.

        Returns:
            Available items, preserving the order of ``ids``.
        """
        batch_size = self._config.item_fetch_batch_size or max(len(ids), 1)
        items: list[CandidateItem] = []

        for start in range(0, len(ids), batch_size):
            batch = ids[start : start + batch_size]
            results = await asyncio.gather(*(self.get_item(i) for i in batch))
            items.extend(item for item in results if item is not None)

        dropped = len(ids) - len(items)
        if dropped:
            self._log.info("items_unavailable", requested=len(ids), dropped=dropped)
        return items


def filter_valid_items(items: list[CandidateItem]) -> list[CandidateItem]:
    """Keep stories with a URL and a title (drops Ask HN, jobs, polls)."""
    return [item for item in items if item.is_eligible]
