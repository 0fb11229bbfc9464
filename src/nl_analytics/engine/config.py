"""Execution configuration for the analytics engine.

This module defines:
- Column keyword lists used by the name-based column heuristics
- Window function parameters
- Aggregate output keys
- Fixed log and error messages
"""

from __future__ import annotations

# ============================================================================
# COLUMN HEURISTICS
# ============================================================================

# A column is "the rating column" if its lowercased name contains any of these
RATING_COLUMN_KEYWORDS = ("rating", "score", "stars", "rate", "value")

# A column is "the date column" if its lowercased name contains any of these
DATE_COLUMN_KEYWORDS = ("date", "created", "timestamp", "created_at", "time")

# Leading rows inspected when looking for a numeric column
NUMERIC_SAMPLE_ROWS = 10

# ============================================================================
# STEP PARAMETERS
# ============================================================================

DEFAULT_DIRECTION = "DESC"
ROLLING_WINDOW_SIZE = 7
LAG_LEAD_OFFSET = 1
NTILE_BUCKETS = 4
DEFAULT_TIME_AGGREGATE = "count"

# Output key per aggregate function
AGGREGATE_OUTPUT_KEYS = {
    "AVG": "average",
    "SUM": "sum",
    "COUNT": "count",
    "MAX": "max",
    "MIN": "min",
    "MEDIAN": "median",
    "MODE": "mode",
    "STDEV": "stdev",
    "VARIANCE": "variance",
    "CORRELATION": "correlation",
    "COVARIANCE": "covariance",
}

# ============================================================================
# MESSAGES
# ============================================================================

CLEANING_STEP = "Data Cleaning"
NO_DATA_ERROR = "No data provided"
NO_DATA_INSIGHT = "No data available for analysis"


def get_aggregate_output_key(function: str) -> str:
    """Return the result key for an aggregate function.

    Raises:
        ValueError: If the function is unknown.

    Examples:
        >>> get_aggregate_output_key("AVG")
        'average'
    """
    try:
        return AGGREGATE_OUTPUT_KEYS[function.upper()]
    except KeyError as e:
        raise ValueError(f"Unknown aggregate function: {function}") from e


__all__ = [
    "RATING_COLUMN_KEYWORDS",
    "DATE_COLUMN_KEYWORDS",
    "NUMERIC_SAMPLE_ROWS",
    "DEFAULT_DIRECTION",
    "ROLLING_WINDOW_SIZE",
    "LAG_LEAD_OFFSET",
    "NTILE_BUCKETS",
    "DEFAULT_TIME_AGGREGATE",
    "AGGREGATE_OUTPUT_KEYS",
    "CLEANING_STEP",
    "NO_DATA_ERROR",
    "NO_DATA_INSIGHT",
    "get_aggregate_output_key",
]
