"""Tests for score rounding and clamping."""

import math

from daily_feed.utils.numbers import clamp_score, round_half_up


class TestRoundHalfUp:
    """Tests for round_half_up."""

    def test_half_rounds_up(self) -> None:
        """72.5 rounds to 73, unlike banker's rounding."""
        assert round_half_up(72.5) == 73
        assert round_half_up(72.4) == 72

    def test_even_half(self) -> None:
        """Even halves round up too."""
        assert round_half_up(0.5) == 1
        assert round_half_up(2.5) == 3


class TestClampScore:
    """Tests for clamp_score."""

    def test_above_range(self) -> None:
        """142.7 clamps to 100."""
        assert clamp_score(142.7) == 100.0

    def test_below_range(self) -> None:
        """-5 clamps to 0."""
        assert clamp_score(-5) == 0.0

    def test_in_range_unchanged(self) -> None:
        """In-range values pass through."""
        assert clamp_score(42.25) == 42.25

    def test_non_finite(self) -> None:
        """NaN and infinities become 0."""
        assert clamp_score(math.nan) == 0.0
        assert clamp_score(math.inf) == 0.0
        assert clamp_score(-math.inf) == 0.0
