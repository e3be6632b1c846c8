"""Protocol interface for processing-state stores."""

from typing import Protocol, runtime_checkable

from daily_feed.store.models import CalibrationItem, ProcessingState


@runtime_checkable
class StateStore(Protocol):
    """Key-value store of processing states keyed by (date, hn_id).

    ``FeedStore`` is the SQLite implementation; the orchestrator and the
    feed service depend only on this protocol.
    """

    async def get_states(
        self, date: str, hn_ids: list[int]
    ) -> dict[int, ProcessingState]:
        """Batched point lookup of states for ids on a date."""
        ...

    async def upsert(self, record: ProcessingState) -> None:
        """Insert or overwrite one record."""
        ...

    async def get_calibration_items(self, date: str) -> list[CalibrationItem]:
        """Scored records of a date, projected for calibration."""
        ...

    async def update_score(
        self, date: str, hn_id: int, score: int, updated_at: str
    ) -> bool:
        """Overwrite the score of an existing record."""
        ...

    async def get_items_by_date(self, date: str) -> list[ProcessingState]:
        """A day's records ordered by descending score."""
        ...
