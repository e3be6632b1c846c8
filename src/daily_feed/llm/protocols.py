"""Protocol interface for summarizers."""

from typing import Protocol, runtime_checkable

from daily_feed.llm.errors import SummarizerFailure
from daily_feed.llm.models import SummaryResult


@runtime_checkable
class Summarizer(Protocol):
    """Protocol for article summarizers.

    Any object implementing ``summarize`` with the matching signature can
    drive the ingestion orchestrator, which lets tests substitute scripted
    summarizers for the HTTP client.
    """

    async def summarize(
        self,
        title: str,
        url: str,
        content: str,
    ) -> SummaryResult | SummarizerFailure:
        """Summarize and score an article.

        Args:
            title: Story title.
            url: Story URL.
            content: Article text.

        Returns:
            SummaryResult on success, otherwise a SummarizerFailure.
        """
        ...
