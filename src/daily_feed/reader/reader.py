"""Article text retrieval via the Jina reader proxy."""

from dataclasses import dataclass

import httpx
import structlog

from daily_feed.config.models import SourceConfig
from daily_feed.fetch.models import is_success_status
from daily_feed.fetch.redact import redact_url_credentials
from daily_feed.utils.text import truncate_text


logger = structlog.get_logger()


@dataclass(frozen=True)
class ContentResult:
    """Outcome of a content fetch.

    Attributes:
        content: Extracted text, truncated; empty when the fetch failed.
        success: Whether the reader returned a 2xx response.
    """

    content: str
    success: bool


class ContentFetcher:
    """Fetches plain-text article content through a reader proxy.

    The proxy is addressed as ``{reader_base}/{article_url}`` and returns
    the readable text of the page.
    """

    def __init__(self, http: httpx.AsyncClient, config: SourceConfig) -> None:
        """Initialize the fetcher.

        Args:
            http: Shared async HTTP client.
            config: Reader endpoint and content timeout.
        """
        self._http = http
        self._base = config.reader_base.rstrip("/")
        self._timeout = config.content_timeout_seconds
        self._log = logger.bind(component="reader")

    async def fetch(self, url: str, max_chars: int) -> ContentResult:
        """Fetch an article's text.

        Never raises; any failure is reported through ``success=False``.

        Args:
            url: Article URL.
            max_chars: Character cap applied to the returned text.

        Returns:
            ContentResult with the (truncated) text.
        """
        reader_url = f"{self._base}/{url}"
        try:
            response = await self._http.get(
                reader_url,
                headers={"Accept": "text/plain"},
                timeout=self._timeout,
            )
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            self._log.info(
                "content_fetch_failed",
                url=redact_url_credentials(url),
                error=type(exc).__name__,
            )
            return ContentResult(content="", success=False)

        if not is_success_status(response.status_code):
            self._log.info(
                "content_fetch_failed",
                url=redact_url_credentials(url),
                status=response.status_code,
            )
            return ContentResult(content="", success=False)

        text = response.text
        return ContentResult(content=truncate_text(text, max_chars), success=True)
