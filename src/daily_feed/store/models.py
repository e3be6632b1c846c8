"""Data models for the feed state store."""

import math
from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field


class ItemStatus(str, Enum):
    """Processing status of a feed item.

    - OK: Summarized and scored
    - ERROR: Processing failed; see error_reason
    """

    OK = "ok"
    ERROR = "error"


class ProcessingState(BaseModel):
    """One feed item's processing record, keyed by (date, hn_id).

    Records are overwritten on every processing attempt and never deleted.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    hn_id: int = Field(description="Hacker News item id")
    date: Annotated[str, Field(min_length=10, max_length=10, description="Feed date")]
    title: str = Field(default="", description="Story title")
    url: str | None = Field(default=None, description="Story URL")
    domain: str | None = Field(default=None, description="Host name of the URL")
    by: str | None = Field(default=None, description="Author username")
    hn_score: int | None = Field(default=None, description="Upvotes at fetch time")
    descendants: int | None = Field(default=None, description="Comments at fetch time")
    hn_time: int | None = Field(default=None, description="Story unix time")
    fetched_at: str = Field(description="When the candidate was fetched (ISO 8601)")
    summary_short: str | None = None
    summary_long: str | None = None
    recommend_reason: str | None = None
    global_score: int | None = Field(default=None, description="Score in [0, 100]")
    usage_prompt_tokens: int | None = None
    usage_completion_tokens: int | None = None
    usage_total_tokens: int | None = None
    tags: list[str] = Field(default_factory=list, description="Topic tags")
    status: ItemStatus = ItemStatus.OK
    error_reason: str | None = None
    updated_at: str = Field(description="Last write time (ISO 8601)")

    @property
    def is_complete(self) -> bool:
        """Whether the record needs no further processing.

        Complete means status ok, non-empty short and long summaries and
        recommendation, and a finite score within [0, 100].
        """
        if self.status != ItemStatus.OK:
            return False
        if not (self.summary_short and self.summary_long and self.recommend_reason):
            return False
        if self.global_score is None:
            return False
        return math.isfinite(self.global_score) and 0 <= self.global_score <= 100


class CalibrationItem(BaseModel):
    """Projection of a scored record used by the score calibrator."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    hn_id: int
    global_score: float
    hn_score: int | None = None
    descendants: int | None = None
