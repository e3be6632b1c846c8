"""Data models for feed source items."""

from pydantic import BaseModel, ConfigDict, Field


STORY_TYPE = "story"


class CandidateItem(BaseModel):
    """Snapshot of a Hacker News item fetched once per run.

    Unknown fields of the upstream payload (kids, text, parts) are ignored.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int = Field(description="Hacker News item id")
    type: str = Field(default="", description="Item kind (story, job, poll...)")
    title: str | None = Field(default=None, description="Story title")
    url: str | None = Field(default=None, description="Linked article URL")
    by: str | None = Field(default=None, description="Author username")
    score: int | None = Field(default=None, description="Upvote count")
    descendants: int | None = Field(default=None, description="Comment count")
    time: int | None = Field(default=None, description="Creation unix time")

    @property
    def is_eligible(self) -> bool:
        """Whether the item is a story with both a title and a URL."""
        return bool(self.url) and bool(self.title) and self.type == STORY_TYPE
