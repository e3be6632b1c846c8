"""Unit tests for HTTP status classification."""

import pytest

from daily_feed.fetch.models import (
    FetchError,
    FetchErrorClass,
    classify_status,
    is_success_status,
)


class TestClassifyStatus:
    """Tests for classify_status."""

    @pytest.mark.parametrize("status", [200, 204, 299])
    def test_success_is_none(self, status: int) -> None:
        """2xx codes are not errors."""
        assert is_success_status(status)
        assert classify_status(status) is None

    @pytest.mark.parametrize(
        ("status", "expected"),
        [
            (404, FetchErrorClass.HTTP_4XX),
            (400, FetchErrorClass.HTTP_4XX),
            (429, FetchErrorClass.RATE_LIMITED),
            (500, FetchErrorClass.HTTP_5XX),
            (503, FetchErrorClass.HTTP_5XX),
        ],
    )
    def test_error_classes(self, status: int, expected: FetchErrorClass) -> None:
        """Non-2xx codes map to their error class."""
        assert not is_success_status(status)
        assert classify_status(status) == expected


class TestFetchError:
    """Tests for FetchError."""

    def test_carries_class_and_status(self) -> None:
        """The error keeps its classification and status code."""
        error = FetchError("boom", FetchErrorClass.HTTP_5XX, status_code=502)

        assert str(error) == "boom"
        assert error.error_class == FetchErrorClass.HTTP_5XX
        assert error.status_code == 502
