"""Window functions over row sequences.

Every function returns new row dicts (inputs are never mutated) with one
added column. Rows are ordered by a stable sort on ``order_by``: equal values
keep their input order, nulls sort last in either direction.
Mixed-type columns order numbers before dates before text.

Public API:
- row_number(), rank(), dense_rank(), percent_rank(), ntile()
- lag(), lead()
- running_total(), running_average(), rolling_average()
"""

from __future__ import annotations

import math
from datetime import date, datetime
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from nl_analytics.core.utils import is_number, to_float_or_zero

Row = Dict[str, Any]

ASC = "ASC"
DESC = "DESC"


def _normalize_direction(direction: str) -> str:
    value = (direction or ASC).upper()
    if value not in (ASC, DESC):
        raise ValueError(f"Unknown sort direction: {direction}. Expected ASC or DESC.")
    return value


def sort_key(value: Any) -> Tuple[bool, int, Any]:
    """Key placing nulls after every value and grouping values by kind."""
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return (True, 0, 0)
    if is_number(value):
        return (False, 0, float(value))
    if isinstance(value, bool):
        return (False, 0, float(value))
    if isinstance(value, datetime):
        return (False, 1, value)
    if isinstance(value, date):
        return (False, 1, datetime(value.year, value.month, value.day))
    if isinstance(value, str):
        return (False, 2, value)
    return (False, 3, str(value))


def sort_rows(
    data: Sequence[Mapping[str, Any]], order_by: Optional[str], direction: str = ASC
) -> List[Row]:
    """Stable-sort copies of ``data`` by ``order_by``; no column keeps input order."""
    rows = [dict(row) for row in data]
    if not order_by:
        return rows
    descending = _normalize_direction(direction) == DESC
    present, missing = [], []
    for row in rows:
        (missing if sort_key(row.get(order_by))[0] else present).append(row)
    present.sort(key=lambda r: sort_key(r.get(order_by)), reverse=descending)
    return present + missing


def row_number(
    data: Sequence[Mapping[str, Any]], order_by: str, direction: str = ASC
) -> List[Row]:
    rows = sort_rows(data, order_by, direction)
    for idx, row in enumerate(rows):
        row["row_number"] = idx + 1
    return rows


def rank(data: Sequence[Mapping[str, Any]], order_by: str, direction: str = ASC) -> List[Row]:
    """SQL ``RANK()``: ties share a rank, the next distinct value skips ahead.

    Examples:
        >>> [r["rank"] for r in rank([{"v": 10}, {"v": 10}, {"v": 5}], "v", "DESC")]
        [1, 1, 3]
    """
    rows = sort_rows(data, order_by, direction)
    current = 1
    for idx, row in enumerate(rows):
        if idx > 0 and sort_key(row.get(order_by)) != sort_key(rows[idx - 1].get(order_by)):
            current = idx + 1
        row["rank"] = current
    return rows


def dense_rank(
    data: Sequence[Mapping[str, Any]], order_by: str, direction: str = ASC
) -> List[Row]:
    """SQL ``DENSE_RANK()``: ties share a rank, no gaps."""
    rows = sort_rows(data, order_by, direction)
    current = 1
    for idx, row in enumerate(rows):
        if idx > 0 and sort_key(row.get(order_by)) != sort_key(rows[idx - 1].get(order_by)):
            current += 1
        row["dense_rank"] = current
    return rows


def percent_rank(
    data: Sequence[Mapping[str, Any]], order_by: str, direction: str = ASC
) -> List[Row]:
    """``(rank - 1) / (n - 1)``, or 0 for a single row. Rows keep their ``rank``."""
    rows = rank(data, order_by, direction)
    n = len(rows)
    for row in rows:
        row["percent_rank"] = (row["rank"] - 1) / (n - 1) if n > 1 else 0
    return rows


def lag(
    data: Sequence[Mapping[str, Any]],
    column: str,
    offset: int = 1,
    default: Any = None,
    order_by: Optional[str] = None,
    direction: str = ASC,
) -> List[Row]:
    """Add ``lag_<column>``: the value ``offset`` rows earlier, else ``default``."""
    rows = sort_rows(data, order_by, direction)
    values = [row.get(column) for row in rows]
    for idx, row in enumerate(rows):
        row[f"lag_{column}"] = values[idx - offset] if idx >= offset else default
    return rows


def lead(
    data: Sequence[Mapping[str, Any]],
    column: str,
    offset: int = 1,
    default: Any = None,
    order_by: Optional[str] = None,
    direction: str = ASC,
) -> List[Row]:
    """Add ``lead_<column>``: the value ``offset`` rows later, else ``default``."""
    rows = sort_rows(data, order_by, direction)
    values = [row.get(column) for row in rows]
    for idx, row in enumerate(rows):
        row[f"lead_{column}"] = values[idx + offset] if idx + offset < len(rows) else default
    return rows


def running_total(
    data: Sequence[Mapping[str, Any]],
    column: str,
    order_by: Optional[str] = None,
    direction: str = ASC,
) -> List[Row]:
    rows = sort_rows(data, order_by, direction)
    total = 0.0
    for row in rows:
        total += to_float_or_zero(row.get(column))
        row["running_total"] = total
    return rows


def running_average(
    data: Sequence[Mapping[str, Any]],
    column: str,
    order_by: Optional[str] = None,
    direction: str = ASC,
) -> List[Row]:
    rows = sort_rows(data, order_by, direction)
    total = 0.0
    for idx, row in enumerate(rows):
        total += to_float_or_zero(row.get(column))
        row["running_avg"] = total / (idx + 1)
    return rows


def rolling_average(
    data: Sequence[Mapping[str, Any]],
    column: str,
    window_size: int,
    order_by: Optional[str] = None,
    direction: str = ASC,
) -> List[Row]:
    """Add ``rolling_avg_<window_size>``: mean of the trailing window.

    The window shrinks at the start of the sequence instead of padding.

    Raises:
        ValueError: If ``window_size`` is smaller than 1.
    """
    if window_size < 1:
        raise ValueError(f"Invalid window size: {window_size}. Must be >= 1.")
    rows = sort_rows(data, order_by, direction)
    values = [to_float_or_zero(row.get(column)) for row in rows]
    key = f"rolling_avg_{window_size}"
    for idx, row in enumerate(rows):
        window = values[max(0, idx - window_size + 1) : idx + 1]
        row[key] = sum(window) / len(window)
    return rows


def ntile(
    data: Sequence[Mapping[str, Any]], n: int, order_by: str, direction: str = ASC
) -> List[Row]:
    """Split sorted rows into ``n`` buckets of size ``ceil(len / n)``.

    Raises:
        ValueError: If ``n`` is smaller than 1.

    Examples:
        >>> [r["ntile"] for r in ntile([{"v": i} for i in range(5)], 2, "v")]
        [1, 1, 1, 2, 2]
    """
    if n < 1:
        raise ValueError(f"Invalid bucket count: {n}. Must be >= 1.")
    rows = sort_rows(data, order_by, direction)
    if not rows:
        return rows
    bucket_size = math.ceil(len(rows) / n)
    for idx, row in enumerate(rows):
        row["ntile"] = idx // bucket_size + 1
    return rows


__all__ = [
    "ASC",
    "DESC",
    "sort_key",
    "sort_rows",
    "row_number",
    "rank",
    "dense_rank",
    "percent_rank",
    "lag",
    "lead",
    "running_total",
    "running_average",
    "rolling_average",
    "ntile",
]
