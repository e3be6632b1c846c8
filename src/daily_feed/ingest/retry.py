"""Retry loop around summarizer calls."""

import asyncio
from collections.abc import Awaitable, Callable

import structlog

from daily_feed.config.models import RetryPolicy
from daily_feed.ingest.metrics import IngestMetrics
from daily_feed.llm.errors import SummarizerFailure
from daily_feed.llm.models import SummaryResult
from daily_feed.llm.protocols import Summarizer


logger = structlog.get_logger()

SleepFn = Callable[[float], Awaitable[None]]


async def summarize_with_retry(  # noqa: PLR0913
    summarizer: Summarizer,
    title: str,
    url: str,
    content: str,
    policy: RetryPolicy,
    sleep: SleepFn = asyncio.sleep,
    hn_id: int | None = None,
) -> SummaryResult | SummarizerFailure:
    """Call the summarizer until it succeeds or the attempt budget is spent.

    Every failure kind consumes an attempt, including malformed output.
    Between attempts the loop waits ``policy.get_delay_ms(retry)``
    milliseconds through ``sleep``; no wait follows the last attempt.

    Args:
        summarizer: Summarizer to call.
        title: Story title.
        url: Story URL.
        content: Article text or title fallback.
        policy: Attempt budget and backoff.
        sleep: Async delay function taking seconds.
        hn_id: Item id for log context.

    Returns:
        The first SummaryResult, or the last SummarizerFailure.
    """
    metrics = IngestMetrics.get_instance()
    log = logger.bind(component="ingest", subcomponent="retry", hn_id=hn_id)

    attempt = 0
    while True:
        metrics.record_llm_attempt(retry=attempt > 0)
        outcome = await summarizer.summarize(title, url, content)
        if isinstance(outcome, SummaryResult):
            if attempt > 0:
                log.info("llm_succeeded_after_retry", attempts=attempt + 1)
            return outcome

        remaining = policy.max_attempts - attempt - 1
        if remaining <= 0:
            log.warning(
                "llm_attempts_exhausted",
                error_kind=outcome.kind.value,
                attempts=policy.max_attempts,
            )
            return outcome

        delay_ms = policy.get_delay_ms(attempt)
        log.warning(
            "llm_retry_scheduled",
            error_kind=outcome.kind.value,
            error=outcome.message,
            attempts_left=remaining,
            delay_ms=delay_ms,
        )
        await sleep(delay_ms / 1000)
        attempt += 1
