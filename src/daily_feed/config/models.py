"""Configuration models for the ingestion pipeline.

All values are resolved once at process start (see
``daily_feed.settings.AppSettings.to_pipeline_config``) and passed down to
the orchestrator and clients as frozen models.
"""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from daily_feed.config.constants import (
    CONTENT_FETCH_TIMEOUT_SECONDS,
    DEFAULT_CONCURRENCY,
    DEFAULT_FETCH_TIMEOUT_SECONDS,
    DEFAULT_HN_LIMIT,
    DEFAULT_LLM_BACKOFF_MULTIPLIER,
    DEFAULT_LLM_BASE_DELAY_MS,
    DEFAULT_LLM_BASE_URL,
    DEFAULT_LLM_MAX_ATTEMPTS,
    DEFAULT_LLM_MODEL,
    DEFAULT_MAX_ARTICLE_CHARS,
    DEFAULT_MAX_OUTPUT_TOKENS,
    DEFAULT_OUTPUT_LANGUAGE,
    DEFAULT_PROMPT_CONTENT_CHARS,
    DEFAULT_TEMPERATURE,
    DEFAULT_TIMEZONE,
    HN_API_BASE,
    JINA_READER_BASE,
    SUMMARIZER_TIMEOUT_SECONDS,
    USER_AGENT,
)
from daily_feed.llm.prompts import SYSTEM_PROMPT


class RetryPolicy(BaseModel):
    """Retry budget for summarizer calls.

    Uses exponential backoff: delay = base_delay_ms * (multiplier ^ retry)
    where ``retry`` is the 0-indexed number of the retry being scheduled.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_attempts: Annotated[int, Field(ge=1, le=10)] = DEFAULT_LLM_MAX_ATTEMPTS
    base_delay_ms: Annotated[int, Field(ge=0, le=60000)] = DEFAULT_LLM_BASE_DELAY_MS
    multiplier: Annotated[float, Field(ge=1.0, le=5.0)] = (
        DEFAULT_LLM_BACKOFF_MULTIPLIER
    )

    def get_delay_ms(self, retry: int) -> int:
        """Calculate the delay before a retry.

        Args:
            retry: Retry number (0 for the first retry).

        Returns:
            Delay in milliseconds.
        """
        return int(self.base_delay_ms * (self.multiplier**retry))


class SummarizerConfig(BaseModel):
    """Settings for the language model summarizer."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    api_key: str | None = Field(default=None, repr=False)
    base_url: Annotated[str, Field(min_length=1)] = DEFAULT_LLM_BASE_URL
    model: Annotated[str, Field(min_length=1)] = DEFAULT_LLM_MODEL
    max_output_tokens: Annotated[int, Field(ge=1, le=32000)] = (
        DEFAULT_MAX_OUTPUT_TOKENS
    )
    temperature: Annotated[float, Field(ge=0.0, le=2.0)] = DEFAULT_TEMPERATURE
    timeout_seconds: Annotated[float, Field(gt=0.0, le=600.0)] = (
        SUMMARIZER_TIMEOUT_SECONDS
    )
    prompt_content_chars: Annotated[int, Field(ge=100)] = DEFAULT_PROMPT_CONTENT_CHARS
    system_prompt: Annotated[str, Field(min_length=1)] = SYSTEM_PROMPT
    output_language: Annotated[str, Field(min_length=1)] = DEFAULT_OUTPUT_LANGUAGE

    @property
    def completions_url(self) -> str:
        """Full URL of the chat completions endpoint."""
        return f"{self.base_url.rstrip('/')}/chat/completions"


class SourceConfig(BaseModel):
    """Endpoints and timeouts for the feed source and content reader."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    hn_api_base: Annotated[str, Field(min_length=1)] = HN_API_BASE
    reader_base: Annotated[str, Field(min_length=1)] = JINA_READER_BASE
    fetch_timeout_seconds: Annotated[float, Field(gt=0.0, le=300.0)] = (
        DEFAULT_FETCH_TIMEOUT_SECONDS
    )
    content_timeout_seconds: Annotated[float, Field(gt=0.0, le=300.0)] = (
        CONTENT_FETCH_TIMEOUT_SECONDS
    )
    user_agent: Annotated[str, Field(min_length=1, max_length=500)] = USER_AGENT
    item_fetch_batch_size: Annotated[int, Field(ge=1)] | None = Field(
        default=None,
        description="Batch candidate detail fetches; None fetches all in parallel",
    )


class PipelineConfig(BaseModel):
    """Complete configuration for one ingestion pipeline instance."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    summarizer: SummarizerConfig = Field(default_factory=SummarizerConfig)
    retry: RetryPolicy = Field(default_factory=RetryPolicy)
    source: SourceConfig = Field(default_factory=SourceConfig)
    hn_limit: Annotated[int, Field(ge=1, le=500)] = DEFAULT_HN_LIMIT
    max_article_chars: Annotated[int, Field(ge=100)] = DEFAULT_MAX_ARTICLE_CHARS
    concurrency: Annotated[int, Field(ge=1, le=50)] = DEFAULT_CONCURRENCY
    timezone: Annotated[str, Field(min_length=1)] = DEFAULT_TIMEZONE
