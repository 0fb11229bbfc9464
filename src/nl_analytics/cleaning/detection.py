"""Heuristic column type inference.

Each sampled value is run through every recognizer; the fraction of matches
per candidate type is compared against the thresholds in
:mod:`nl_analytics.cleaning.config`, in fixed order.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Sequence

from nl_analytics.core.enums import ColumnType
from .config import (
    BOOLEAN_TOKENS,
    CATEGORY_MAX_UNIQUE_RATIO,
    CATEGORY_MIN_SAMPLE,
    DEFAULT_SAMPLE_SIZE,
    EMAIL_RE,
    OBJECT_ID_RE,
    TEXT_CONFIDENCE,
    TYPE_THRESHOLDS,
    URL_RE,
    UUID_LIKE_RE,
)
from .converters import clean_numeric_string, is_date_like, is_null_value, parse_numeric_string
from .models import ColumnTypeInfo


def _hashable(value: Any) -> Any:
    try:
        hash(value)
    except TypeError:
        return repr(value)
    return value


def score_sample(sample: Sequence[Any]) -> Dict[ColumnType, float]:
    """Return the fraction of sample values matching each recognizer."""
    counts = {
        ColumnType.NUMBER: 0,
        ColumnType.INTEGER: 0,
        ColumnType.FLOAT: 0,
        ColumnType.DATE: 0,
        ColumnType.BOOLEAN: 0,
        ColumnType.ID: 0,
        ColumnType.EMAIL: 0,
        ColumnType.URL: 0,
    }
    for val in sample:
        text = str(val).strip()

        number = parse_numeric_string(clean_numeric_string(text))
        if number is not None:
            counts[ColumnType.NUMBER] += 1
            if number.is_integer():
                counts[ColumnType.INTEGER] += 1
            else:
                counts[ColumnType.FLOAT] += 1

        if is_date_like(val if not isinstance(val, str) else text):
            counts[ColumnType.DATE] += 1
        if text.lower() in BOOLEAN_TOKENS:
            counts[ColumnType.BOOLEAN] += 1
        if EMAIL_RE.match(text):
            counts[ColumnType.EMAIL] += 1
        if URL_RE.match(text):
            counts[ColumnType.URL] += 1
        if OBJECT_ID_RE.match(text) or UUID_LIKE_RE.match(text):
            counts[ColumnType.ID] += 1

    total = len(sample)
    return {ctype: count / total for ctype, count in counts.items()}


def detect_column_type(
    values: Iterable[Any],
    *,
    sample_size: int = DEFAULT_SAMPLE_SIZE,
    null_values: Optional[Iterable[str]] = None,
) -> ColumnTypeInfo:
    """Infer the type of a column from its values.

    Null-like values are dropped, then at most ``sample_size`` of the
    remaining values are scored. The result is deterministic for a given
    input.

    Args:
        values: Column values in row order.
        sample_size: Maximum number of non-null values to inspect.
        null_values: Override for the null token list.

    Returns:
        ColumnTypeInfo. Empty input yields ``unknown`` with confidence 0; an
        all-null column yields ``null`` with confidence 1.

    Examples:
        >>> detect_column_type(["1", "2", "3"]).type
        <ColumnType.INTEGER: 'integer'>
    """
    values = list(values)
    if not values:
        return ColumnTypeInfo(ColumnType.UNKNOWN, 0.0)

    nulls = list(null_values) if null_values is not None else None
    non_null: List[Any] = [v for v in values if not is_null_value(v, nulls)]
    if not non_null:
        return ColumnTypeInfo(ColumnType.NULL, 1.0)

    sample = non_null[:sample_size]
    scores = score_sample(sample)

    for ctype, threshold in TYPE_THRESHOLDS:
        if scores[ctype] > threshold:
            return ColumnTypeInfo(ctype, scores[ctype])

    unique_ratio = len({_hashable(v) for v in sample}) / len(sample)
    if unique_ratio < CATEGORY_MAX_UNIQUE_RATIO and len(sample) >= CATEGORY_MIN_SAMPLE:
        return ColumnTypeInfo(ColumnType.CATEGORY, 1.0 - unique_ratio)

    return ColumnTypeInfo(ColumnType.TEXT, TEXT_CONFIDENCE)


__all__ = ["score_sample", "detect_column_type"]
