"""Application settings powered by Pydantic BaseSettings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from daily_feed.config.constants import (
    DEFAULT_DB_PATH,
    DEFAULT_HN_LIMIT,
    DEFAULT_LLM_BASE_URL,
    DEFAULT_LLM_MODEL,
    DEFAULT_MAX_ARTICLE_CHARS,
    DEFAULT_MAX_OUTPUT_TOKENS,
    DEFAULT_TEMPERATURE,
    DEFAULT_TIMEZONE,
)
from daily_feed.config.models import PipelineConfig, SummarizerConfig


class AppSettings(BaseSettings):
    """Centralized environment configuration."""

    model_config = SettingsConfigDict(
        env_prefix="", case_sensitive=False, env_file=".env", env_file_encoding="utf-8"
    )

    llm_api_key: str | None = Field(default=None, validation_alias="LLM_API_KEY")
    llm_base_url: str = Field(
        default=DEFAULT_LLM_BASE_URL, validation_alias="LLM_BASE_URL"
    )
    llm_model: str = Field(default=DEFAULT_LLM_MODEL, validation_alias="LLM_MODEL")
    hn_limit: int = Field(default=DEFAULT_HN_LIMIT, validation_alias="HN_LIMIT")
    max_article_chars: int = Field(
        default=DEFAULT_MAX_ARTICLE_CHARS, validation_alias="MAX_ARTICLE_CHARS"
    )
    max_output_tokens: int = Field(
        default=DEFAULT_MAX_OUTPUT_TOKENS, validation_alias="MAX_OUTPUT_TOKENS"
    )
    temperature: float = Field(
        default=DEFAULT_TEMPERATURE, validation_alias="TEMPERATURE"
    )
    db_path: str = Field(default=DEFAULT_DB_PATH, validation_alias="FEED_DB_PATH")
    timezone: str = Field(default=DEFAULT_TIMEZONE, validation_alias="FEED_TIMEZONE")

    def to_pipeline_config(self, timezone: str | None = None) -> PipelineConfig:
        """Build the immutable pipeline configuration.

        Args:
            timezone: Optional override for the feed date timezone.

        Returns:
            Frozen PipelineConfig for the orchestrator and summarizer.
        """
        summarizer = SummarizerConfig(
            api_key=self.llm_api_key or None,
            base_url=self.llm_base_url,
            model=self.llm_model,
            max_output_tokens=self.max_output_tokens,
            temperature=self.temperature,
        )
        return PipelineConfig(
            summarizer=summarizer,
            hn_limit=self.hn_limit,
            max_article_chars=self.max_article_chars,
            timezone=timezone or self.timezone,
        )


def get_settings() -> AppSettings:
    """Get a settings instance."""
    return AppSettings()
