"""Defaults for the ingestion pipeline."""

# Language model endpoint (OpenAI-compatible chat completions)
DEFAULT_LLM_BASE_URL = "https://api.deepseek.com/v1"
DEFAULT_LLM_MODEL = "deepseek-chat"
DEFAULT_MAX_OUTPUT_TOKENS = 350
DEFAULT_TEMPERATURE = 0.1
DEFAULT_OUTPUT_LANGUAGE = "Simplified Chinese"

# Source and content extraction endpoints
HN_API_BASE = "https://hacker-news.firebaseio.com/v0"
JINA_READER_BASE = "https://r.jina.ai"

# Run sizing
DEFAULT_HN_LIMIT = 30
DEFAULT_MAX_ARTICLE_CHARS = 12000
DEFAULT_PROMPT_CONTENT_CHARS = 12000
DEFAULT_CONCURRENCY = 5

# Timeouts (seconds)
DEFAULT_FETCH_TIMEOUT_SECONDS = 30.0
CONTENT_FETCH_TIMEOUT_SECONDS = 30.0
SUMMARIZER_TIMEOUT_SECONDS = 60.0

# Summarizer retry budget
DEFAULT_LLM_MAX_ATTEMPTS = 3
DEFAULT_LLM_BASE_DELAY_MS = 2000
DEFAULT_LLM_BACKOFF_MULTIPLIER = 2.0

# Storage and dates
DEFAULT_DB_PATH = "state/daily_feed.sqlite"
DEFAULT_TIMEZONE = "Asia/Shanghai"

USER_AGENT = "daily-feed/1.0"
