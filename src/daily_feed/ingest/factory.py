"""Factory wiring an orchestrator to live HTTP clients."""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog

from daily_feed.config.models import PipelineConfig
from daily_feed.fetch.client import build_http_client
from daily_feed.ingest.orchestrator import IngestOrchestrator
from daily_feed.ingest.retry import SleepFn
from daily_feed.llm.client import SummarizerClient
from daily_feed.reader import ContentFetcher
from daily_feed.sources import HackerNewsClient
from daily_feed.store.protocols import StateStore


logger = structlog.get_logger()


@asynccontextmanager
async def create_orchestrator(
    config: PipelineConfig,
    store: StateStore,
    sleep: SleepFn = asyncio.sleep,
) -> AsyncIterator[IngestOrchestrator]:
    """Create an orchestrator sharing one HTTP client for a run.

    The HTTP client is closed when the context exits.

    Args:
        config: Pipeline configuration.
        store: Processing state store.
        sleep: Async delay used between summarizer retries.

    Yields:
        A ready IngestOrchestrator.
    """
    if not config.summarizer.api_key:
        logger.warning(
            "llm_credentials_missing",
            component="ingest",
            subcomponent="factory",
        )

    async with build_http_client(config.source) as http:
        yield IngestOrchestrator(
            source=HackerNewsClient(http, config.source),
            reader=ContentFetcher(http, config.source),
            summarizer=SummarizerClient(http, config.summarizer),
            store=store,
            config=config,
            sleep=sleep,
        )
