"""Error types for the HTTP fetch layer."""

from enum import Enum

from daily_feed.fetch.constants import (
    HTTP_STATUS_BAD_REQUEST,
    HTTP_STATUS_OK_MAX,
    HTTP_STATUS_OK_MIN,
    HTTP_STATUS_SERVER_ERROR_MIN,
    HTTP_STATUS_TOO_MANY_REQUESTS,
)


class FetchErrorClass(str, Enum):
    """Classification of fetch errors for logging and reporting.

    - NETWORK_TIMEOUT: Request timed out
    - CONNECTION_ERROR: Could not establish connection or transport failed
    - HTTP_4XX: 4xx client error (except 429)
    - HTTP_5XX: 5xx server error
    - RATE_LIMITED: 429 Too Many Requests
    - INVALID_PAYLOAD: Response body was not the expected JSON shape
    """

    NETWORK_TIMEOUT = "NETWORK_TIMEOUT"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    HTTP_4XX = "HTTP_4XX"
    HTTP_5XX = "HTTP_5XX"
    RATE_LIMITED = "RATE_LIMITED"
    INVALID_PAYLOAD = "INVALID_PAYLOAD"


class FetchError(Exception):
    """Raised when a required upstream fetch fails.

    Attributes:
        error_class: Classification of the failure.
        status_code: HTTP status code, if a response was received.
    """

    def __init__(
        self,
        message: str,
        error_class: FetchErrorClass,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.error_class = error_class
        self.status_code = status_code


def is_success_status(status_code: int) -> bool:
    """Check whether a status code is 2xx."""
    return HTTP_STATUS_OK_MIN <= status_code < HTTP_STATUS_OK_MAX


def classify_status(status_code: int) -> FetchErrorClass | None:
    """Classify an HTTP status code.

    Args:
        status_code: HTTP status code.

    Returns:
        Error class for non-2xx codes, None for success.
    """
    if is_success_status(status_code):
        return None
    if status_code == HTTP_STATUS_TOO_MANY_REQUESTS:
        return FetchErrorClass.RATE_LIMITED
    if HTTP_STATUS_BAD_REQUEST <= status_code < HTTP_STATUS_SERVER_ERROR_MIN:
        return FetchErrorClass.HTTP_4XX
    return FetchErrorClass.HTTP_5XX
