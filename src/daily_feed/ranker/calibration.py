"""Score calibration for batches whose LLM scores collapse.

Independently scored articles tend to cluster (a model may rate most of
a day's stories 75-85), which defeats ranking. When a batch shows too few
distinct values or too little spread, every score of the day is replaced
by a rank-based score:

    popularity = 14 * ln(1 + points) + 11 * ln(1 + comments)   (clamped to [0, 100])
    key        = 0.65 * llm_score + 0.35 * popularity
    t          = 1 - rank / (n - 1)                            (t = 1 when n = 1)
    score      = round(min + (max - min) * t ** 0.85)

Ranks are ordered by descending key with ties broken by ascending id, so
the mapping is a pure function of the batch.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from daily_feed.ranker.constants import (
    COMMENTS_LOG_WEIGHT,
    CURVE_EXPONENT,
    DEFAULT_MAX_SCORE,
    DEFAULT_MIN_SCORE,
    DISTINCT_SCORE_RATIO,
    MIN_DISTINCT_SCORES,
    MIN_ITEMS_FOR_CALIBRATION,
    MIN_SCORE_STD,
    POINTS_LOG_WEIGHT,
    POPULARITY_WEIGHT,
    QUALITY_WEIGHT,
)
from daily_feed.store.models import CalibrationItem
from daily_feed.utils.numbers import clamp_score, round_half_up


@dataclass(frozen=True)
class ScoreStats:
    """Spread statistics of a batch of scores.

    Attributes:
        mean: Arithmetic mean.
        std: Population standard deviation.
        unique_count: Number of distinct values after rounding.
    """

    mean: float
    std: float
    unique_count: int


def popularity_score(hn_score: int | None, descendants: int | None) -> float:
    """Compute the engagement-based popularity signal.

    Args:
        hn_score: Upvotes; missing or negative counts as 0.
        descendants: Comment count; missing or negative counts as 0.

    Returns:
        Popularity in [0, 100].
    """
    points = max(0, hn_score or 0)
    comments = max(0, descendants or 0)
    raw = math.log1p(points) * POINTS_LOG_WEIGHT + math.log1p(comments) * COMMENTS_LOG_WEIGHT
    return clamp_score(raw)


def score_stats(scores: list[float]) -> ScoreStats:
    """Compute mean, population std and distinct rounded count."""
    if not scores:
        return ScoreStats(mean=0.0, std=0.0, unique_count=0)

    unique_count = len({round_half_up(s) for s in scores})
    mean = sum(scores) / len(scores)
    variance = sum((s - mean) ** 2 for s in scores) / len(scores)
    return ScoreStats(mean=mean, std=math.sqrt(variance), unique_count=unique_count)


def should_recalibrate(items: list[CalibrationItem]) -> bool:
    """Detect a collapsed score distribution.

    Args:
        items: The day's scored items.

    Returns:
        True if the batch has at least 8 items and either too few
        distinct scores or a standard deviation below 7.
    """
    if len(items) < MIN_ITEMS_FOR_CALIBRATION:
        return False

    stats = score_stats([clamp_score(item.global_score) for item in items])
    distinct_limit = max(MIN_DISTINCT_SCORES, math.floor(len(items) * DISTINCT_SCORE_RATIO))
    if stats.unique_count <= distinct_limit:
        return True
    return stats.std < MIN_SCORE_STD


def _ranking_key(item: CalibrationItem) -> float:
    """Blend the LLM score with popularity."""
    quality = clamp_score(item.global_score)
    popularity = popularity_score(item.hn_score, item.descendants)
    return quality * QUALITY_WEIGHT + popularity * POPULARITY_WEIGHT


def recalibrate(
    items: list[CalibrationItem],
    min_score: int = DEFAULT_MIN_SCORE,
    max_score: int = DEFAULT_MAX_SCORE,
) -> dict[int, int]:
    """Redistribute a batch's scores by blended rank.

    Args:
        items: The day's scored items.
        min_score: Score given to the lowest-ranked item.
        max_score: Score given to the highest-ranked item.

    Returns:
        Mapping of hn_id to its new integer score in [0, 100], with one
        entry per input item.
    """
    n = len(items)
    ranked = sorted(items, key=lambda item: (-_ranking_key(item), item.hn_id))

    mapping: dict[int, int] = {}
    for index, item in enumerate(ranked):
        t = 1.0 if n == 1 else 1 - index / (n - 1)
        curved = t**CURVE_EXPONENT
        score = round_half_up(min_score + (max_score - min_score) * curved)
        mapping[item.hn_id] = int(clamp_score(score))
    return mapping
