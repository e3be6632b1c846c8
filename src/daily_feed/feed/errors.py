"""Errors raised by the feed service."""


class FeedServiceError(Exception):
    """Base exception for feed service operations."""


class InvalidDateError(FeedServiceError):
    """Raised when a feed date is not a valid YYYY-MM-DD calendar date."""

    def __init__(self, value: str) -> None:
        super().__init__(f"Invalid date format, expected YYYY-MM-DD: {value!r}")
        self.value = value


class RefreshIncompleteError(FeedServiceError):
    """Raised when a day's feed is still incomplete after every attempt."""

    def __init__(self, date: str, attempts: int, complete: int, total: int) -> None:
        super().__init__(
            f"Feed for {date} still incomplete after {attempts} attempts "
            f"({complete}/{total} complete)"
        )
        self.date = date
        self.attempts = attempts
        self.complete = complete
        self.total = total
