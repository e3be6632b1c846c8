"""Daily Hacker News feed with LLM summaries and calibrated scores."""

__version__ = "1.0.0"
