"""Numeric helpers shared by the summarizer and score calibrator."""

import math


SCORE_MIN = 0.0
SCORE_MAX = 100.0


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from negative infinity.

    Python's round() uses banker's rounding; scores use the conventional
    rule so 72.5 becomes 73.
    """
    return math.floor(value + 0.5)


def clamp_score(value: float) -> float:
    """Clamp a score to [0, 100]; non-finite values become 0."""
    if not math.isfinite(value):
        return SCORE_MIN
    return max(SCORE_MIN, min(SCORE_MAX, value))
