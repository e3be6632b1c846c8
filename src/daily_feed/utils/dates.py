"""Date helpers for feed partitioning."""

import re
import zoneinfo
from datetime import UTC, datetime


DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def feed_date_iso(timezone: str, now: datetime | None = None) -> str:
    """Get the feed date (YYYY-MM-DD) in a timezone.

    Args:
        timezone: IANA timezone name, e.g. Asia/Shanghai.
        now: Reference instant; defaults to the current time.

    Returns:
        Calendar date of the instant in that timezone.
    """
    instant = now or datetime.now(UTC)
    return instant.astimezone(zoneinfo.ZoneInfo(timezone)).date().isoformat()


def iso_timestamp() -> str:
    """Get the current UTC time as an ISO 8601 string."""
    return datetime.now(UTC).isoformat()


def is_valid_date(value: str) -> bool:
    """Check that a string is a real calendar date in YYYY-MM-DD form."""
    if not DATE_PATTERN.match(value):
        return False
    try:
        datetime.strptime(value, "%Y-%m-%d")  # noqa: DTZ007
    except ValueError:
        return False
    return True
