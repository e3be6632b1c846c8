"""Immutable pipeline configuration."""

from daily_feed.config.models import (
    PipelineConfig,
    RetryPolicy,
    SourceConfig,
    SummarizerConfig,
)


__all__ = [
    "PipelineConfig",
    "RetryPolicy",
    "SourceConfig",
    "SummarizerConfig",
]
