"""Data models for summarizer requests and responses."""

import math
from dataclasses import dataclass, field
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    StrictFloat,
    StrictInt,
    StrictStr,
    ValidationError,
    field_validator,
)

from daily_feed.llm.errors import SummarizerErrorKind, SummaryValidationError
from daily_feed.utils.numbers import clamp_score, round_half_up


@dataclass(frozen=True)
class TokenUsage:
    """Token accounting reported by the model endpoint."""

    prompt_tokens: int | None = None
    completion_tokens: int | None = None
    total_tokens: int | None = None

    @classmethod
    def from_response(cls, data: object) -> "TokenUsage":
        """Read the ``usage`` block of a completion, tolerating its absence."""
        if not isinstance(data, dict):
            return cls()

        def _count(key: str) -> int | None:
            value = data.get(key)
            if isinstance(value, int) and not isinstance(value, bool):
                return value
            return None

        return cls(
            prompt_tokens=_count("prompt_tokens"),
            completion_tokens=_count("completion_tokens"),
            total_tokens=_count("total_tokens"),
        )


@dataclass(frozen=True)
class SummaryResult:
    """Validated summarizer output for one article.

    Attributes:
        summary_short: One-sentence summary.
        summary_long: Detailed bullet-style summary.
        recommend_reason: Why the article is worth reading.
        global_score: Integer quality score in [0, 100].
        tags: Topic tags in model order.
        usage: Token usage of the call.
    """

    summary_short: str
    summary_long: str
    recommend_reason: str
    global_score: int
    tags: list[str] = field(default_factory=list)
    usage: TokenUsage = field(default_factory=TokenUsage)


class SummaryPayload(BaseModel):
    """Structural contract of the model's JSON answer.

    Strict types: a score given as a string or a summary given as a number
    is a contract violation, not something to coerce.
    """

    model_config = ConfigDict(extra="ignore")

    summary_short: StrictStr
    summary_long: StrictStr
    recommend_reason: StrictStr
    global_score: StrictInt | StrictFloat
    tags: list[Any]

    @field_validator("global_score")
    @classmethod
    def validate_finite(cls, v: float) -> float:
        """Reject NaN and infinities; pin oversized integers just outside [0, 100]."""
        if isinstance(v, int):
            return float(min(max(v, -1), 101))
        if not math.isfinite(v):
            msg = "global_score must be finite"
            raise ValueError(msg)
        return v

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, v: list[Any]) -> list[str]:
        """Stringify tags and drop blank ones."""
        tags: list[str] = []
        for tag in v:
            text = str(tag).strip()
            if text:
                tags.append(text)
        return tags


def parse_summary_payload(data: dict[str, object], usage: TokenUsage) -> SummaryResult:
    """Validate a parsed model answer and normalize its score.

    The score is clamped to [0, 100] and rounded half-up, so a raw 142.7
    becomes 100 and a raw -5 becomes 0.

    Args:
        data: JSON object returned by the model.
        usage: Token usage of the call.

    Returns:
        SummaryResult ready to persist.

    Raises:
        SummaryValidationError: If required fields are missing or mistyped.
    """
    try:
        payload = SummaryPayload.model_validate(data)
    except ValidationError as exc:
        fields = sorted({str(err["loc"][0]) for err in exc.errors() if err["loc"]})
        msg = f"Invalid LLM response structure: {', '.join(fields) or 'payload'}"
        raise SummaryValidationError(SummarizerErrorKind.INVALID_STRUCTURE, msg) from exc

    return SummaryResult(
        summary_short=payload.summary_short,
        summary_long=payload.summary_long,
        recommend_reason=payload.recommend_reason,
        global_score=round_half_up(clamp_score(float(payload.global_score))),
        tags=payload.tags,
        usage=usage,
    )
