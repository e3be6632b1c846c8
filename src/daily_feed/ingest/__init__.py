"""Ingestion pipeline: top stories to summarized, scored daily records."""

from daily_feed.ingest.factory import create_orchestrator
from daily_feed.ingest.metrics import IngestMetrics
from daily_feed.ingest.models import IngestResult
from daily_feed.ingest.orchestrator import IngestOrchestrator
from daily_feed.ingest.retry import summarize_with_retry


__all__ = [
    "IngestMetrics",
    "IngestOrchestrator",
    "IngestResult",
    "create_orchestrator",
    "summarize_with_retry",
]
