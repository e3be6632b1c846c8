"""Ingestion orchestrator: source list to summarized, scored records."""

import asyncio
from collections.abc import Callable
from datetime import UTC, datetime

import structlog

from daily_feed.config.models import PipelineConfig
from daily_feed.fetch.models import FetchError
from daily_feed.ingest.metrics import IngestMetrics
from daily_feed.ingest.models import IngestResult
from daily_feed.ingest.retry import SleepFn, summarize_with_retry
from daily_feed.llm.errors import SummarizerFailure
from daily_feed.llm.protocols import Summarizer
from daily_feed.ranker import recalibrate, should_recalibrate
from daily_feed.reader import ContentFetcher
from daily_feed.sources import CandidateItem, HackerNewsClient, filter_valid_items
from daily_feed.store.models import ItemStatus, ProcessingState
from daily_feed.store.protocols import StateStore
from daily_feed.utils.dates import feed_date_iso, iso_timestamp
from daily_feed.utils.text import extract_domain


logger = structlog.get_logger()


class IngestOrchestrator:
    """Drives one day's ingestion.

    Provides:
    - Candidate selection from the ranked story list
    - Skipping of items whose record is already complete
    - Grouped concurrent processing with per-item failure isolation
    - Summarizer retries with exponential backoff
    - Post-run score calibration
    """

    def __init__(  # noqa: PLR0913
        self,
        source: HackerNewsClient,
        reader: ContentFetcher,
        summarizer: Summarizer,
        store: StateStore,
        config: PipelineConfig,
        sleep: SleepFn = asyncio.sleep,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            source: Story list and item detail client.
            reader: Article content fetcher.
            summarizer: Summarizer used for every item.
            store: Processing state store.
            config: Pipeline configuration.
            sleep: Async delay used between summarizer retries.
            clock: Returns the current instant; decides the feed date.
        """
        self._source = source
        self._reader = reader
        self._summarizer = summarizer
        self._store = store
        self._config = config
        self._sleep = sleep
        self._clock = clock or (lambda: datetime.now(UTC))
        self._metrics = IngestMetrics.get_instance()
        self._log = logger.bind(component="ingest")

    def current_date(self) -> str:
        """Feed date of the current instant in the configured timezone."""
        return feed_date_iso(self._config.timezone, self._clock())

    async def run(self, limit: int | None = None, force: bool = False) -> IngestResult:
        """Ingest the current top stories into today's feed.

        Args:
            limit: Number of top stories to consider; defaults to hn_limit.
            force: Reprocess items even when their record is complete.

        Returns:
            IngestResult with per-run counts and error messages.
        """
        date = self.current_date()
        result = IngestResult(date=date)
        limit = self._config.hn_limit if limit is None else limit
        log = self._log.bind(feed_date=date)
        log.info("ingest_started", limit=limit, force=force)

        try:
            ids = await self._source.list_top_ids(limit)
        except FetchError as exc:
            self._metrics.record_run_aborted()
            result.aborted = True
            result.errors.append(f"Failed to fetch top stories: {exc}")
            log.error(
                "ingest_aborted",
                error=str(exc),
                error_class=exc.error_class.value,
            )
            return result

        items = filter_valid_items(await self._source.get_items(ids))
        log.info("candidates_selected", ids=len(ids), candidates=len(items))

        if not force:
            items = await self._drop_complete(date, items, result)

        width = min(self._config.concurrency, len(items))
        for start in range(0, len(items), max(width, 1)):
            group = items[start : start + width]
            await asyncio.gather(
                *(self._process_item(item, date, result) for item in group)
            )

        await self._calibrate(date, result)

        log.info(
            "ingest_completed",
            ingested=result.ingested,
            failed=result.failed,
            skipped=result.skipped,
            recalibrated=result.recalibrated,
        )
        return result

    async def _drop_complete(
        self,
        date: str,
        items: list[CandidateItem],
        result: IngestResult,
    ) -> list[CandidateItem]:
        """Remove candidates whose record for the date is complete."""
        states = await self._store.get_states(date, [item.id for item in items])
        pending = [
            item
            for item in items
            if not (item.id in states and states[item.id].is_complete)
        ]
        result.skipped = len(items) - len(pending)
        if result.skipped:
            self._log.info("complete_items_skipped", count=result.skipped)
        return pending

    async def _process_item(
        self,
        item: CandidateItem,
        date: str,
        result: IngestResult,
    ) -> None:
        """Process one candidate and write its record.

        Never raises; every outcome is reflected in ``result``.
        """
        log = self._log.bind(hn_id=item.id)
        record = self._new_record(item, date)

        try:
            record = await self._summarize(item, record)
        except Exception as exc:  # noqa: BLE001
            log.error("story_processing_error", error=str(exc))
            record = record.model_copy(
                update={
                    "status": ItemStatus.ERROR,
                    "error_reason": f"Unexpected error: {exc}",
                    "updated_at": iso_timestamp(),
                }
            )

        try:
            await self._store.upsert(record)
        except Exception as exc:  # noqa: BLE001
            log.error("story_write_failed", error=str(exc))
            self._metrics.record_story(ok=False)
            result.failed += 1
            result.errors.append(f"Failed to save story {item.id}: {exc}")
            return

        ok = record.status == ItemStatus.OK
        self._metrics.record_story(ok=ok)
        if ok:
            result.ingested += 1
        else:
            result.failed += 1
            result.errors.append(f"Story {item.id} failed: {record.error_reason}")
        log.info("story_processed", status=record.status.value)

    def _new_record(self, item: CandidateItem, date: str) -> ProcessingState:
        """Build the initial record from candidate metadata."""
        now = iso_timestamp()
        return ProcessingState(
            hn_id=item.id,
            date=date,
            title=item.title or "",
            url=item.url,
            domain=extract_domain(item.url) if item.url else None,
            by=item.by,
            hn_score=item.score,
            descendants=item.descendants,
            hn_time=item.time,
            fetched_at=now,
            updated_at=now,
        )

    async def _summarize(
        self, item: CandidateItem, record: ProcessingState
    ) -> ProcessingState:
        """Fetch content, summarize with retries and fold the outcome in."""
        title = item.title or ""
        url = item.url or ""

        content = await self._reader.fetch(url, self._config.max_article_chars)
        text = content.content
        if not content.success or not text.strip():
            self._metrics.record_content_fallback()
            self._log.info("content_fallback_to_title", hn_id=item.id)
            text = title

        outcome = await summarize_with_retry(
            self._summarizer,
            title,
            url,
            text,
            self._config.retry,
            sleep=self._sleep,
            hn_id=item.id,
        )

        if isinstance(outcome, SummarizerFailure):
            return record.model_copy(
                update={
                    "status": ItemStatus.ERROR,
                    "error_reason": str(outcome),
                    "updated_at": iso_timestamp(),
                }
            )

        return record.model_copy(
            update={
                "status": ItemStatus.OK,
                "summary_short": outcome.summary_short,
                "summary_long": outcome.summary_long,
                "recommend_reason": outcome.recommend_reason,
                "global_score": outcome.global_score,
                "tags": list(outcome.tags),
                "usage_prompt_tokens": outcome.usage.prompt_tokens,
                "usage_completion_tokens": outcome.usage.completion_tokens,
                "usage_total_tokens": outcome.usage.total_tokens,
                "error_reason": None,
                "updated_at": iso_timestamp(),
            }
        )

    async def _calibrate(self, date: str, result: IngestResult) -> None:
        """Redistribute the day's scores if they collapsed.

        Failures are logged and leave the run counts unchanged.
        """
        try:
            items = await self._store.get_calibration_items(date)
            if not should_recalibrate(items):
                self._log.debug("recalibration_not_needed", items=len(items))
                return

            mapping = recalibrate(items)
            updated_at = iso_timestamp()
            await asyncio.gather(
                *(
                    self._store.update_score(date, hn_id, score, updated_at)
                    for hn_id, score in mapping.items()
                )
            )
        except Exception as exc:  # noqa: BLE001
            self._log.error("recalibration_failed", feed_date=date, error=str(exc))
            return

        result.recalibrated = True
        self._metrics.record_recalibration()
        self._log.info("scores_recalibrated", feed_date=date, items=len(mapping))
