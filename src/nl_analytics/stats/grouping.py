"""Time bucketing, grouped statistics and frequency tables.

Bucket keys are zero-padded and most-significant-first, so sorting them
lexicographically sorts them chronologically:

    year     "2024"
    quarter  "2024-Q1"
    month    "2024-03"
    week     "2024-W09"
    day      "2024-03-01"

Values that cannot be read as dates fall into the ``"unknown"`` bucket.
"""

from __future__ import annotations

import logging
import math
import warnings
from datetime import date, datetime
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

import pandas as pd

from nl_analytics.core.enums import TimeInterval
from nl_analytics.core.utils import group_key, to_float
from .descriptive import correlation, mean, median, percentile, standard_deviation, variance

logger = logging.getLogger(__name__)

UNKNOWN_BUCKET = "unknown"
ALL_BUCKET = "_all_"
DEFAULT_PERCENTILE = 50

ALL_STATS = ("count", "sum", "mean", "median", "stdev", "variance", "min", "max", "percentile")

# Aliases accepted by group_by_time_interval / grouped_statistics.
_STAT_ALIASES = {
    "avg": "mean",
    "average": "mean",
    "mean": "mean",
    "std": "stdev",
    "sd": "stdev",
    "stdev": "stdev",
    "standarddeviation": "stdev",
    "var": "variance",
    "variance": "variance",
}


def _canonical_stat(name: str) -> str:
    key = str(name).lower()
    return _STAT_ALIASES.get(key, key)


def to_datetime(value: Any) -> Optional[datetime]:
    """Read a bucketable date from a datetime, date or date string."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not isinstance(value, str) or not value.strip():
        return None
    with warnings.catch_warnings():
        warnings.simplefilter("ignore")
        try:
            ts = pd.to_datetime(value.strip(), errors="coerce")
        except (ValueError, TypeError, OverflowError):
            return None
    if ts is None or pd.isna(ts):
        return None
    return ts.to_pydatetime()


def week_of_year(moment: datetime) -> int:
    """Week number counted from the Sunday-aligned week containing January 1st."""
    jan1 = datetime(moment.year, 1, 1)
    jan1_weekday = (jan1.weekday() + 1) % 7  # Sunday = 0
    day_of_year = moment.timetuple().tm_yday
    return math.ceil((day_of_year + jan1_weekday) / 7)


def time_bucket_key(value: Any, interval: Union[TimeInterval, str]) -> str:
    """Return the bucket key of a date value for an interval.

    Raises:
        ValueError: If the interval is unknown.

    Examples:
        >>> time_bucket_key("2024-03-15", "month")
        '2024-03'
        >>> time_bucket_key("2024-05-01", TimeInterval.QUARTER)
        '2024-Q2'
        >>> time_bucket_key("not a date", "year")
        'unknown'
    """
    try:
        unit = TimeInterval(str(getattr(interval, "value", interval)).lower())
    except ValueError as e:
        raise ValueError(f"Unknown time interval: {interval}") from e

    moment = to_datetime(value)
    if moment is None:
        return UNKNOWN_BUCKET

    if unit == TimeInterval.YEAR:
        return f"{moment.year:04d}"
    if unit == TimeInterval.QUARTER:
        return f"{moment.year:04d}-Q{(moment.month - 1) // 3 + 1}"
    if unit == TimeInterval.MONTH:
        return f"{moment.year:04d}-{moment.month:02d}"
    if unit == TimeInterval.WEEK:
        return f"{moment.year:04d}-W{week_of_year(moment):02d}"
    return f"{moment.year:04d}-{moment.month:02d}-{moment.day:02d}"


def _numbers(rows: Sequence[Mapping[str, Any]], column: Optional[str]) -> List[float]:
    if not column:
        return []
    out = []
    for row in rows:
        val = to_float(row.get(column))
        if val is not None:
            out.append(val)
    return out


def compute_stat(
    stat: str, values: Sequence[float], percentile_value: float = DEFAULT_PERCENTILE
) -> Any:
    """Compute one named statistic over raw numeric values.

    Raises:
        ValueError: If the statistic is unknown.
    """
    name = _canonical_stat(stat)
    if name == "count":
        return len(values)
    if name == "sum":
        return float(sum(values))
    if name == "mean":
        return mean(values)
    if name == "median":
        return median(values)
    if name == "stdev":
        return standard_deviation(values)
    if name == "variance":
        return variance(values)
    if name == "min":
        return min(values) if values else None
    if name == "max":
        return max(values) if values else None
    if name == "percentile":
        return percentile(values, percentile_value)
    raise ValueError(f"Unknown statistic: {stat}")


def group_by_time_interval(
    data: Sequence[Mapping[str, Any]],
    date_column: str,
    interval: Union[TimeInterval, str],
    aggregate_column: Optional[str] = None,
    aggregate_func: str = "count",
    percentile_value: float = DEFAULT_PERCENTILE,
) -> List[Dict[str, Any]]:
    """Bucket rows by time interval and aggregate one column per bucket.

    Result rows look like ``{"month": "2024-03", "avg": 4.2}``; the output
    key is ``avg`` for mean aliases and the canonical stat name otherwise.
    Unknown functions fall back to ``count``.

    Args:
        data: Rows to bucket.
        date_column: Column holding the date values.
        interval: Bucket interval.
        aggregate_column: Column aggregated per bucket (unused for count).
        aggregate_func: Aggregation function name.
        percentile_value: Percentile used by ``percentile``.

    Returns:
        One row per bucket, sorted by bucket key.
    """
    unit = getattr(interval, "value", interval)
    buckets: Dict[str, List[Mapping[str, Any]]] = {}
    for row in data:
        buckets.setdefault(time_bucket_key(row.get(date_column), unit), []).append(row)

    func = _canonical_stat(aggregate_func)
    if func not in ALL_STATS:
        logger.debug("Unknown aggregate function %r, counting rows instead", aggregate_func)
        func = "count"
    out_key = "avg" if func == "mean" else func

    results = []
    for key in sorted(buckets):
        rows = buckets[key]
        if func == "count":
            value: Any = len(rows)
        else:
            value = compute_stat(func, _numbers(rows, aggregate_column), percentile_value)
        results.append({unit: key, out_key: value})
    return results


def grouped_statistics(
    data: Sequence[Mapping[str, Any]],
    value_column: str,
    group_column: Optional[str] = None,
    time_interval: Optional[Union[TimeInterval, str]] = None,
    stats: Union[str, Sequence[str]] = "all",
    percentile_value: float = DEFAULT_PERCENTILE,
) -> List[Dict[str, Any]]:
    """Compute statistics per group from raw values.

    Grouping is by time bucket of ``group_column`` when ``time_interval`` is
    given, by the stringified value of ``group_column`` otherwise, or into a
    single ``_all_`` bucket when no column is given. The percentile result is
    keyed ``p<N>``. Unknown statistic names are skipped.

    Examples:
        >>> rows = [{"team": "a", "v": 1}, {"team": "a", "v": 3}, {"team": "b", "v": 5}]
        >>> grouped_statistics(rows, "v", group_column="team", stats=["count", "mean"])
        [{'team': 'a', 'count': 2, 'mean': 2.0}, {'team': 'b', 'count': 1, 'mean': 5.0}]
    """
    if not data:
        return []

    unit = getattr(time_interval, "value", time_interval)
    groups: Dict[str, List[float]] = {}
    for row in data:
        if unit and group_column:
            key = time_bucket_key(row.get(group_column), unit)
        elif group_column:
            raw = row.get(group_column)
            key = UNKNOWN_BUCKET if raw is None else str(raw)
        else:
            key = ALL_BUCKET
        values = groups.setdefault(key, [])
        val = to_float(row.get(value_column))
        if val is not None:
            values.append(val)

    if stats == "all":
        compute_list = list(ALL_STATS)
    elif isinstance(stats, str):
        compute_list = [stats.lower()]
    else:
        compute_list = [s.lower() for s in stats]

    unknown = [s for s in compute_list if _canonical_stat(s) not in ALL_STATS]
    if unknown:
        logger.debug("Skipping unknown statistics: %s", unknown)
        compute_list = [s for s in compute_list if s not in unknown]

    results = []
    for key in sorted(groups):
        values = groups[key]
        result: Dict[str, Any] = {}
        if unit:
            result[unit] = key
        elif group_column:
            result[group_column] = key
        for stat in compute_list:
            name = _canonical_stat(stat)
            if name == "percentile":
                result[f"p{percentile_value:g}"] = percentile(values, percentile_value)
            else:
                result[name] = compute_stat(name, values, percentile_value)
        results.append(result)
    return results


def filter_by_percentile(
    data: Sequence[Mapping[str, Any]], column: str, pct: float, kind: str = "top"
) -> List[Dict[str, Any]]:
    """Keep the top or bottom ``pct`` percent of rows by ``column``.

    ``top`` keeps rows at or above the ``100 - pct`` percentile, ``bottom``
    keeps rows at or below the ``pct`` percentile. Rows without a numeric
    value are dropped; no numeric values at all yields ``[]``.

    Raises:
        ValueError: If ``kind`` is neither ``top`` nor ``bottom``.
    """
    if kind not in ("top", "bottom"):
        raise ValueError(f"Unknown percentile filter kind: {kind}. Expected top or bottom.")
    nums = _numbers(data, column)
    threshold = percentile(nums, 100 - pct if kind == "top" else pct)
    if threshold is None:
        return []

    out = []
    for row in data:
        val = to_float(row.get(column))
        if val is None:
            continue
        if (kind == "top" and val >= threshold) or (kind == "bottom" and val <= threshold):
            out.append(dict(row))
    return out


def compute_correlation(
    data: Sequence[Mapping[str, Any]], column1: str, column2: str
) -> Dict[str, Any]:
    """Pearson correlation between two columns over rows where both are numeric."""
    if not data or len(data) < 2:
        return {"correlation": None, "error": "Insufficient data"}

    pairs = []
    for row in data:
        a, b = to_float(row.get(column1)), to_float(row.get(column2))
        if a is not None and b is not None:
            pairs.append((a, b))
    if len(pairs) < 2:
        return {"correlation": None, "error": "Insufficient numeric pairs"}

    return {
        "correlation": correlation([p[0] for p in pairs], [p[1] for p in pairs]),
        "column1": column1,
        "column2": column2,
        "sample_size": len(pairs),
    }


def value_counts(
    data: Sequence[Mapping[str, Any]], column: str, normalize: bool = False
) -> List[Dict[str, Any]]:
    """Frequency table of non-null values, most frequent first.

    Booleans are counted apart from equal numbers; ties keep first-seen
    order. With ``normalize`` each entry carries a
    ``percentage`` string such as ``"33.33%"``.
    """
    counts: Dict[Any, List[Any]] = {}
    total = 0
    for row in data:
        val = row.get(column)
        if val is None:
            continue
        counts.setdefault(group_key(val), [val, 0])[1] += 1
        total += 1

    results = []
    for val, count in sorted(counts.values(), key=lambda item: -item[1]):
        entry: Dict[str, Any] = {"value": val, "count": count}
        if normalize:
            entry["percentage"] = f"{count / total * 100:.2f}%"
        results.append(entry)
    return results


__all__ = [
    "UNKNOWN_BUCKET",
    "ALL_BUCKET",
    "ALL_STATS",
    "to_datetime",
    "week_of_year",
    "time_bucket_key",
    "compute_stat",
    "group_by_time_interval",
    "grouped_statistics",
    "filter_by_percentile",
    "compute_correlation",
    "value_counts",
]
