"""Metrics collection for ingestion runs."""

from dataclasses import dataclass
from typing import ClassVar


@dataclass
class IngestMetrics:
    """Counters for the ingestion pipeline.

    Attributes:
        stories_processed_total: Items that entered per-item processing.
        stories_ok_total: Items written with status ok.
        stories_error_total: Items that ended in error or failed to write.
        llm_attempts_total: Summarizer calls made.
        llm_retries_total: Summarizer calls that were retries.
        content_fallbacks_total: Items summarized from their title only.
        recalibrations_total: Runs whose scores were redistributed.
        runs_aborted_total: Runs stopped by a source list failure.
    """

    stories_processed_total: int = 0
    stories_ok_total: int = 0
    stories_error_total: int = 0
    llm_attempts_total: int = 0
    llm_retries_total: int = 0
    content_fallbacks_total: int = 0
    recalibrations_total: int = 0
    runs_aborted_total: int = 0

    _instance: ClassVar["IngestMetrics | None"] = None

    @classmethod
    def get_instance(cls) -> "IngestMetrics":
        """Get singleton metrics instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset metrics (primarily for testing)."""
        cls._instance = None

    def record_story(self, *, ok: bool) -> None:
        """Record the terminal outcome of one item."""
        self.stories_processed_total += 1
        if ok:
            self.stories_ok_total += 1
        else:
            self.stories_error_total += 1

    def record_llm_attempt(self, *, retry: bool) -> None:
        """Record a summarizer call."""
        self.llm_attempts_total += 1
        if retry:
            self.llm_retries_total += 1

    def record_content_fallback(self) -> None:
        """Record an item summarized from its title."""
        self.content_fallbacks_total += 1

    def record_recalibration(self) -> None:
        """Record a score redistribution."""
        self.recalibrations_total += 1

    def record_run_aborted(self) -> None:
        """Record a run stopped before processing items."""
        self.runs_aborted_total += 1

    def to_dict(self) -> dict[str, int]:
        """Export counters for logging."""
        return {
            "stories_processed_total": self.stories_processed_total,
            "stories_ok_total": self.stories_ok_total,
            "stories_error_total": self.stories_error_total,
            "llm_attempts_total": self.llm_attempts_total,
            "llm_retries_total": self.llm_retries_total,
            "content_fallbacks_total": self.content_fallbacks_total,
            "recalibrations_total": self.recalibrations_total,
            "runs_aborted_total": self.runs_aborted_total,
        }
