"""Name- and value-based column heuristics used during execution.

These run on cleaned rows after planning and deliberately do not use the
semantic matcher: each picks the first qualifying column in row order.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Optional, Sequence

from nl_analytics.cleaning.cleaner import collect_columns
from nl_analytics.core.utils import is_number, to_float
from nl_analytics.planning.models import Intent
from .config import DATE_COLUMN_KEYWORDS, NUMERIC_SAMPLE_ROWS, RATING_COLUMN_KEYWORDS


def _first_with_keyword(columns: Iterable[str], keywords: Sequence[str]) -> Optional[str]:
    for col in columns:
        lowered = col.lower()
        if any(k in lowered for k in keywords):
            return col
    return None


def find_rating_column(columns: Iterable[str]) -> Optional[str]:
    """First column named like a rating (``rating``, ``score``, ``stars``, ...)."""
    return _first_with_keyword(columns, RATING_COLUMN_KEYWORDS)


def find_date_column(columns: Iterable[str]) -> Optional[str]:
    """First column named like a date (``date``, ``created``, ``timestamp``, ...)."""
    return _first_with_keyword(columns, DATE_COLUMN_KEYWORDS)


def find_numeric_column(
    rows: Sequence[Mapping[str, Any]], columns: Optional[Sequence[str]] = None
) -> Optional[str]:
    """First column whose leading values include a number or numeric string."""
    sample = rows[:NUMERIC_SAMPLE_ROWS]
    for col in columns if columns is not None else collect_columns(rows):
        if any(to_float(r.get(col)) is not None for r in sample):
            return col
    return None


def find_numeric_columns(rows: Sequence[Mapping[str, Any]]) -> List[str]:
    """All columns whose leading values include a number or numeric string."""
    sample = rows[:NUMERIC_SAMPLE_ROWS]
    return [
        col
        for col in collect_columns(rows)
        if any(to_float(r.get(col)) is not None for r in sample)
    ]


def find_number_column(rows: Sequence[Mapping[str, Any]]) -> Optional[str]:
    """First column whose leading values include a real number (not a numeric string)."""
    sample = rows[:NUMERIC_SAMPLE_ROWS]
    for col in collect_columns(rows):
        if any(is_number(r.get(col)) for r in sample):
            return col
    return None


def resolve_order_column(rows: Sequence[Mapping[str, Any]], intent: Intent) -> Optional[str]:
    """Column to sort or rank on.

    The first column referenced by the question, else the first column
    holding a real number, else the first column.
    """
    if intent.columns:
        return intent.columns[0].column
    found = find_number_column(rows)
    if found is not None:
        return found
    columns = collect_columns(rows)
    return columns[0] if columns else None


def resolve_value_column(rows: Sequence[Mapping[str, Any]], intent: Intent) -> Optional[str]:
    """Column a percentile filter applies to: referenced column, else first real-number column."""
    if intent.columns:
        return intent.columns[0].column
    return find_number_column(rows)


__all__ = [
    "find_rating_column",
    "find_date_column",
    "find_numeric_column",
    "find_numeric_columns",
    "find_number_column",
    "resolve_order_column",
    "resolve_value_column",
]
