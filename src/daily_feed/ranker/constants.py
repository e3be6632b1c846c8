"""Constants for score calibration."""

# Collapse detection
MIN_ITEMS_FOR_CALIBRATION: int = 8
MIN_DISTINCT_SCORES: int = 3
DISTINCT_SCORE_RATIO: float = 0.25
MIN_SCORE_STD: float = 7.0

# Popularity signal: weight * ln(1 + count)
POINTS_LOG_WEIGHT: float = 14.0
COMMENTS_LOG_WEIGHT: float = 11.0

# Blended ranking key
QUALITY_WEIGHT: float = 0.65
POPULARITY_WEIGHT: float = 0.35

# Output range and curve; exponent < 1 spreads out the top of the ranking
DEFAULT_MIN_SCORE: int = 30
DEFAULT_MAX_SCORE: int = 98
CURVE_EXPONENT: float = 0.85
