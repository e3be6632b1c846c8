"""Response models for the feed service."""

from pydantic import BaseModel, ConfigDict, Field

from daily_feed.store.models import ItemStatus, ProcessingState


class FeedResponse(BaseModel):
    """One day's feed, ordered by descending score."""

    model_config = ConfigDict(frozen=True)

    date: str
    count: int
    items: list[ProcessingState] = Field(default_factory=list)


class FeedStats(BaseModel):
    """Completion counts for one day's feed.

    Attributes:
        total: Records for the date.
        ok: Records with status ok.
        complete: Records satisfying the completeness rule.
        errors: Records with any other status.
    """

    model_config = ConfigDict(frozen=True)

    total: int = 0
    ok: int = 0
    complete: int = 0
    errors: int = 0

    @classmethod
    def from_feed(cls, feed: FeedResponse) -> "FeedStats":
        """Count a feed's records by status and completeness."""
        ok = sum(1 for item in feed.items if item.status == ItemStatus.OK)
        return cls(
            total=len(feed.items),
            ok=ok,
            complete=sum(1 for item in feed.items if item.is_complete),
            errors=len(feed.items) - ok,
        )

    @property
    def is_complete(self) -> bool:
        """Whether the day has records and all of them are complete."""
        return self.total > 0 and self.complete == self.total


class RefreshResponse(BaseModel):
    """Summary of an administrative refresh."""

    model_config = ConfigDict(frozen=True)

    ok: bool
    date: str
    ingested: int
    failed: int
    errors: list[str] = Field(default_factory=list)


class HealthResponse(BaseModel):
    """Liveness payload."""

    model_config = ConfigDict(frozen=True)

    version: str
    timestamp: str


class RefreshLoopResult(BaseModel):
    """Final state of a refresh-until-complete loop.

    Attributes:
        date: Feed date that was checked.
        attempts: Status checks performed.
        stats: Counts from the last status check.
        complete: Whether the loop stopped because the feed was complete.
    """

    model_config = ConfigDict(frozen=True)

    date: str
    attempts: int
    stats: FeedStats
    complete: bool
