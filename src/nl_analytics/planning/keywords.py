"""Keyword tables driving question parsing.

Table order is significant: the window-function and time-pattern scans keep
only the first phrase found in the question, in the order listed here.
Phrases match whole words only ("var" does not match inside "various").
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Optional

from nl_analytics.core.enums import TimeInterval

# ============================================================================
# AGGREGATIONS
# ============================================================================

AGGREGATION_KEYWORDS: Dict[str, str] = {
    "average": "AVG",
    "avg": "AVG",
    "mean": "AVG",
    "sum": "SUM",
    "total": "SUM",
    "count": "COUNT",
    "number of": "COUNT",
    "how many": "COUNT",
    "maximum": "MAX",
    "max": "MAX",
    "highest": "MAX",
    "largest": "MAX",
    "minimum": "MIN",
    "min": "MIN",
    "lowest": "MIN",
    "smallest": "MIN",
    "median": "MEDIAN",
    "mode": "MODE",
    "stdev": "STDEV",
    "standard deviation": "STDEV",
    "sd": "STDEV",
    "std": "STDEV",
    "variance": "VARIANCE",
    "var": "VARIANCE",
    "correlation": "CORRELATION",
    "correlate": "CORRELATION",
    "covariance": "COVARIANCE",
}

AGGREGATION_FUNCTIONS = tuple(dict.fromkeys(AGGREGATION_KEYWORDS.values()))

# ============================================================================
# WINDOW FUNCTIONS (first match wins)
# ============================================================================

WINDOW_KEYWORDS: Dict[str, str] = {
    "rank": "RANK",
    "ranking": "RANK",
    "dense rank": "DENSE_RANK",
    "row number": "ROW_NUMBER",
    "running total": "RUNNING_TOTAL",
    "cumulative sum": "RUNNING_TOTAL",
    "running average": "RUNNING_AVG",
    "cumulative average": "RUNNING_AVG",
    "moving average": "ROLLING_AVG",
    "rolling average": "ROLLING_AVG",
    "previous": "LAG",
    "lag": "LAG",
    "next": "LEAD",
    "lead": "LEAD",
    "percentile": "PERCENTILE",
    "percent rank": "PERCENT_RANK",
    "ntile": "NTILE",
    "quartile": "NTILE",
}

WINDOW_FUNCTIONS = tuple(dict.fromkeys(WINDOW_KEYWORDS.values()))

# ============================================================================
# TIME PATTERNS (first match wins)
# ============================================================================


@dataclass(frozen=True)
class TimePattern:
    """What a time phrase asks for."""

    interval: Optional[TimeInterval] = None
    group_by: bool = False
    time_series: bool = False
    show_trend: bool = False


TIME_PATTERNS: Dict[str, TimePattern] = {
    "per month": TimePattern(TimeInterval.MONTH, group_by=True),
    "monthly": TimePattern(TimeInterval.MONTH, group_by=True),
    "per year": TimePattern(TimeInterval.YEAR, group_by=True),
    "yearly": TimePattern(TimeInterval.YEAR, group_by=True),
    "annually": TimePattern(TimeInterval.YEAR, group_by=True),
    "per week": TimePattern(TimeInterval.WEEK, group_by=True),
    "weekly": TimePattern(TimeInterval.WEEK, group_by=True),
    "per day": TimePattern(TimeInterval.DAY, group_by=True),
    "daily": TimePattern(TimeInterval.DAY, group_by=True),
    "per quarter": TimePattern(TimeInterval.QUARTER, group_by=True),
    "quarterly": TimePattern(TimeInterval.QUARTER, group_by=True),
    "over time": TimePattern(time_series=True),
    "trend": TimePattern(time_series=True, show_trend=True),
}

# ============================================================================
# ORDERING, LIMITS, GROUPING
# ============================================================================

TOP_N_RE = re.compile(r"\b(?:top|first|best|highest)\s+(\d+)")
BOTTOM_N_RE = re.compile(r"\b(?:bottom|last|worst|lowest)\s+(\d+)")
PERCENT_RE = re.compile(r"\b(?:top|bottom)\s+(\d+)\s*%")
GROUP_BY_RE = re.compile(r"\b(?:group by|grouped by|for each|by|per)\s+(\w+)")

ASCENDING_PHRASES = ("ascending", "asc", "lowest first")
DESCENDING_PHRASES = ("descending", "desc", "highest first")

# ============================================================================
# COMPARISONS
# ============================================================================

COMPARISON_OPERATORS: Dict[str, str] = {
    "greater than": ">",
    "more than": ">",
    "above": ">",
    "over": ">",
    "at least": ">=",
    "less than": "<",
    "below": "<",
    "under": "<",
    "at most": "<=",
    ">=": ">=",
    "<=": "<=",
    ">": ">",
    "<": "<",
    "=": "=",
}

_OPERATOR_ALTERNATION = "|".join(
    re.escape(phrase) for phrase in sorted(COMPARISON_OPERATORS, key=len, reverse=True)
)
COMPARISON_RE = re.compile(
    rf"\b(\w+)\s+(?:is\s+)?({_OPERATOR_ALTERNATION})\s*(-?\d+(?:\.\d+)?)\b"
)

CLARIFICATION_PROMPT = "Could you please specify which columns or metrics you'd like to analyze?"


def get_comparison_operator(phrase: str) -> str:
    """Return the symbolic operator for a comparison phrase.

    Raises:
        ValueError: If the phrase is not a known comparison.

    Examples:
        >>> get_comparison_operator("at least")
        '>='
    """
    try:
        return COMPARISON_OPERATORS[phrase.lower()]
    except KeyError as e:
        raise ValueError(f"Unknown comparison phrase: {phrase}") from e


__all__ = [
    "AGGREGATION_KEYWORDS",
    "AGGREGATION_FUNCTIONS",
    "WINDOW_KEYWORDS",
    "WINDOW_FUNCTIONS",
    "TimePattern",
    "TIME_PATTERNS",
    "TOP_N_RE",
    "BOTTOM_N_RE",
    "PERCENT_RE",
    "GROUP_BY_RE",
    "ASCENDING_PHRASES",
    "DESCENDING_PHRASES",
    "COMPARISON_OPERATORS",
    "COMPARISON_RE",
    "CLARIFICATION_PROMPT",
    "get_comparison_operator",
]
