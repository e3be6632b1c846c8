"""Read-side feed operations and the refresh driver."""

import asyncio
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime

import structlog

from daily_feed import __version__
from daily_feed.config.models import PipelineConfig
from daily_feed.feed.errors import InvalidDateError, RefreshIncompleteError
from daily_feed.feed.models import (
    FeedResponse,
    FeedStats,
    HealthResponse,
    RefreshLoopResult,
    RefreshResponse,
)
from daily_feed.ingest import IngestResult, create_orchestrator
from daily_feed.ingest.retry import SleepFn
from daily_feed.store.protocols import StateStore
from daily_feed.utils.dates import feed_date_iso, is_valid_date, iso_timestamp


logger = structlog.get_logger()

DEFAULT_REFRESH_MAX_ATTEMPTS = 20
DEFAULT_REFRESH_SLEEP_SECONDS = 15.0

RefreshRunner = Callable[[int | None, bool], Awaitable[IngestResult]]
StatusReporter = Callable[[int, FeedStats], None]


class FeedService:
    """Serves daily feeds and triggers ingestion.

    The ingestion step is pluggable through ``runner`` so callers and tests
    can drive refreshes without network access; by default each refresh
    builds a fresh orchestrator with its own HTTP client.
    """

    def __init__(  # noqa: PLR0913
        self,
        store: StateStore,
        config: PipelineConfig,
        runner: RefreshRunner | None = None,
        sleep: SleepFn = asyncio.sleep,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            store: Processing state store.
            config: Pipeline configuration.
            runner: Runs one ingestion; defaults to a live orchestrator.
            sleep: Async delay used between refresh attempts.
            clock: Returns the current instant; decides today's date.
        """
        self._store = store
        self._config = config
        self._runner = runner or self._run_ingest
        self._sleep = sleep
        self._clock = clock or (lambda: datetime.now(UTC))
        self._log = logger.bind(component="feed")

    def today(self) -> str:
        """Current feed date in the configured timezone."""
        return feed_date_iso(self._config.timezone, self._clock())

    async def get_feed(self, date: str) -> FeedResponse:
        """Get one day's feed.

        Args:
            date: Feed date (YYYY-MM-DD).

        Returns:
            FeedResponse with items by descending score, unscored last.

        Raises:
            InvalidDateError: If the date is not a valid YYYY-MM-DD date.
        """
        if not is_valid_date(date):
            raise InvalidDateError(date)

        items = await self._store.get_items_by_date(date)
        return FeedResponse(date=date, count=len(items), items=items)

    async def get_today(self) -> FeedResponse:
        """Get the feed for today's date."""
        return await self.get_feed(self.today())

    def health(self) -> HealthResponse:
        """Report version and current time."""
        return HealthResponse(version=__version__, timestamp=iso_timestamp())

    async def refresh(
        self, limit: int | None = None, force: bool = False
    ) -> RefreshResponse:
        """Run one ingestion for today.

        Args:
            limit: Number of top stories to consider.
            force: Reprocess complete items too.

        Returns:
            RefreshResponse; ``ok`` is true when no item failed.
        """
        result = await self._runner(limit, force)
        self._log.info(
            "refresh_completed",
            feed_date=result.date,
            ingested=result.ingested,
            failed=result.failed,
        )
        return RefreshResponse(
            ok=result.failed == 0,
            date=result.date,
            ingested=result.ingested,
            failed=result.failed,
            errors=result.errors,
        )

    async def get_stats(self, date: str) -> FeedStats:
        """Count a day's records by status and completeness."""
        return FeedStats.from_feed(await self.get_feed(date))

    async def refresh_until_complete(  # noqa: PLR0913
        self,
        max_attempts: int = DEFAULT_REFRESH_MAX_ATTEMPTS,
        sleep_seconds: float = DEFAULT_REFRESH_SLEEP_SECONDS,
        limit: int | None = None,
        force: bool = False,
        dry_run: bool = False,
        date: str | None = None,
        on_status: StatusReporter | None = None,
    ) -> RefreshLoopResult:
        """Refresh repeatedly until every record of the day is complete.

        Each attempt reads the day's stats first and stops as soon as the
        day has records and all of them are complete. With ``dry_run`` the
        first status is reported and no refresh is triggered.

        Args:
            max_attempts: Maximum status checks.
            sleep_seconds: Delay after each refresh except the last.
            limit: Number of top stories per refresh.
            force: Reprocess complete items on each refresh.
            dry_run: Only report the current status.
            date: Feed date to check; defaults to today.
            on_status: Called with (attempt, stats) after each check.

        Returns:
            RefreshLoopResult describing the last check.

        Raises:
            ValueError: If max_attempts < 1 or sleep_seconds < 0.
            InvalidDateError: If ``date`` is malformed.
            RefreshIncompleteError: If the feed is still incomplete after
                the last attempt.
        """
        if max_attempts < 1:
            msg = "max_attempts must be a positive number"
            raise ValueError(msg)
        if sleep_seconds < 0:
            msg = "sleep_seconds must be >= 0"
            raise ValueError(msg)

        target = date or self.today()
        log = self._log.bind(feed_date=target)
        stats = FeedStats()

        for attempt in range(1, max_attempts + 1):
            stats = await self.get_stats(target)
            log.info(
                "refresh_status",
                attempt=attempt,
                max_attempts=max_attempts,
                total=stats.total,
                ok=stats.ok,
                complete=stats.complete,
                errors=stats.errors,
            )
            if on_status is not None:
                on_status(attempt, stats)

            if stats.is_complete:
                return RefreshLoopResult(
                    date=target, attempts=attempt, stats=stats, complete=True
                )
            if dry_run:
                return RefreshLoopResult(
                    date=target, attempts=attempt, stats=stats, complete=False
                )

            await self.refresh(limit=limit, force=force)

            if attempt < max_attempts and sleep_seconds > 0:
                await self._sleep(sleep_seconds)

        raise RefreshIncompleteError(target, max_attempts, stats.complete, stats.total)

    async def _run_ingest(self, limit: int | None, force: bool) -> IngestResult:
        """Run a live ingestion with a per-run HTTP client."""
        async with create_orchestrator(self._config, self._store) as orchestrator:
            return await orchestrator.run(limit=limit, force=force)
