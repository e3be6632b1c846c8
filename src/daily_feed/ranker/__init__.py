"""Score calibration for a day's batch of summarized items."""

from daily_feed.ranker.calibration import (
    ScoreStats,
    popularity_score,
    recalibrate,
    score_stats,
    should_recalibrate,
)


__all__ = [
    "ScoreStats",
    "popularity_score",
    "recalibrate",
    "score_stats",
    "should_recalibrate",
]
