"""Insight summaries for execution results and rule-based approach hints."""

from __future__ import annotations

from typing import Any, List, Mapping, Optional, Sequence

from nl_analytics.cleaning.cleaner import collect_columns
from nl_analytics.core.utils import is_number, to_float
from nl_analytics.planning.models import Intent
from nl_analytics.stats.descriptive import describe, detect_outliers
from .config import NO_DATA_INSIGHT

MIN_TREND_ROWS = 3


def _fmt(value: float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _first_number(row: Mapping[str, Any]) -> Optional[float]:
    for value in row.values():
        if is_number(value):
            return float(value)
    return None


def generate_insights(rows: Sequence[Mapping[str, Any]], intent: Intent) -> List[str]:
    """Summarize a result.

    Emits a row count, then a mean/min/max summary and outlier count for the
    first column holding numeric values, then (for time analyses with at least
    three rows) the percent change between the first numbers of the first and
    last rows.

    Examples:
        >>> generate_insights([{"rating": 1}, {"rating": 2}, {"rating": 9}], intent)
        ['Found 3 results', 'rating: avg=4.00, min=1, max=9']
    """
    if not rows:
        return [NO_DATA_INSIGHT]

    insights = [f"Found {len(rows)} results"]

    for col in collect_columns(rows):
        values = [v for v in (to_float(r.get(col)) for r in rows) if v is not None]
        if not values:
            continue
        stats = describe(values)
        insights.append(
            f"{col}: avg={stats['mean']:.2f}, min={_fmt(stats['min'])}, max={_fmt(stats['max'])}"
        )
        outliers = detect_outliers(values).outliers
        if outliers:
            insights.append(f"{len(outliers)} potential outliers detected in {col}")
        break

    if intent.time_analysis is not None and len(rows) >= MIN_TREND_ROWS:
        first = _first_number(rows[0])
        last = _first_number(rows[-1])
        if first and last:
            change = (last - first) / first * 100
            sign = "+" if round(change, 1) > 0 else ""
            insights.append(f"Trend: {sign}{change:.1f}% change from first to last period")

    return insights


def suggested_approach(intent: Intent) -> List[str]:
    """Rule-based list of techniques the question calls for."""
    approaches: List[str] = []
    if intent.aggregations:
        approaches.append("Use aggregation functions")
    if intent.group_by:
        approaches.append("Group results by category")
    if intent.window is not None:
        approaches.append(f"Apply {intent.window.function} window function")
    if intent.time_analysis is not None:
        interval = intent.time_analysis.interval
        approaches.append(f"Analyze by {interval.value if interval else 'time'}")
    if intent.semantic_filter is not None:
        approaches.append(f"Filter for {intent.semantic_filter.polarity} sentiment")
    if intent.percentile_filter is not None:
        pf = intent.percentile_filter
        approaches.append(f"Get {pf.kind} {pf.value}%")
    return approaches


__all__ = ["generate_insights", "suggested_approach"]
