"""Step executors.

Each executor takes the current rows, its operation config and the shared
:class:`ExecutionContext`, and returns the rows for the next step. Executors
are dispatched on the config type; structural faults (a referenced group or
filter column missing from the data) raise ``ValueError``.
"""

from __future__ import annotations

import logging
import operator
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Type

from nl_analytics.cleaning.cleaner import collect_columns
from nl_analytics.core.utils import group_key, to_float
from nl_analytics.planning.models import (
    AggregateConfig,
    FilterConfig,
    GroupConfig,
    Intent,
    LimitConfig,
    OrderConfig,
    SelectConfig,
    StatisticalConfig,
    Step,
    StepConfig,
    WindowConfig,
)
from nl_analytics.stats import descriptive, grouping, window
from .columns import (
    find_date_column,
    find_numeric_column,
    find_numeric_columns,
    find_rating_column,
    resolve_order_column,
    resolve_value_column,
)
from .config import (
    DEFAULT_DIRECTION,
    DEFAULT_TIME_AGGREGATE,
    LAG_LEAD_OFFSET,
    NTILE_BUCKETS,
    ROLLING_WINDOW_SIZE,
    get_aggregate_output_key,
)

logger = logging.getLogger(__name__)

Row = Dict[str, Any]

_COMPARATORS: Dict[str, Callable[[float, float], bool]] = {
    ">": operator.gt,
    ">=": operator.ge,
    "<": operator.lt,
    "<=": operator.le,
    "=": operator.eq,
}


@dataclass
class ExecutionContext:
    """State shared by the steps of one plan run.

    Attributes:
        intent: Intent the plan was compiled from.
        groups: Group key row and member rows per group, set by the group step.
        group_source: Rows the group step ran on.
    """

    intent: Intent
    groups: Optional[List[Tuple[Row, List[Row]]]] = None
    group_source: List[Row] = field(default_factory=list)


def _columns(rows: Sequence[Mapping[str, Any]]) -> List[str]:
    return collect_columns(rows)


def _require_columns(rows: Sequence[Mapping[str, Any]], required: Sequence[str], what: str) -> None:
    if not rows:
        return
    present = set(_columns(rows))
    missing = [c for c in required if c not in present]
    if missing:
        raise ValueError(f"{what} column not found in data: {', '.join(missing)}")


def _compare(rows: Sequence[Row], column: str, op: str, threshold: float) -> List[Row]:
    test = _COMPARATORS[op]
    kept = []
    for row in rows:
        val = to_float(row.get(column))
        if val is not None and test(val, threshold):
            kept.append(row)
    return kept


# ============================================================================
# EXECUTORS
# ============================================================================


def execute_select(rows: List[Row], config: SelectConfig, ctx: ExecutionContext) -> List[Row]:
    return rows


def execute_filter(rows: List[Row], config: FilterConfig, ctx: ExecutionContext) -> List[Row]:
    """Apply the sentiment threshold to the rating column, then comparisons.

    Without a rating column the sentiment part is skipped. Rows whose value is
    not numeric are dropped.
    """
    out = rows
    if config.semantic is not None:
        rating_col = find_rating_column(_columns(out))
        if rating_col is None:
            logger.debug("No rating column found; sentiment filter skipped")
        else:
            out = _compare(out, rating_col, config.semantic.operator, config.semantic.threshold)

    if config.comparisons:
        _require_columns(out, [c.column for c in config.comparisons], "Filter")
        for comp in config.comparisons:
            out = _compare(out, comp.column, comp.operator, comp.value)
    return out


def _time_group(
    rows: List[Row], config: GroupConfig, ctx: ExecutionContext, date_col: str
) -> List[Row]:
    interval = config.time_interval.value
    numeric_col = find_numeric_column(rows)
    agg = (
        ctx.intent.aggregations[0].function.lower()
        if ctx.intent.aggregations
        else DEFAULT_TIME_AGGREGATE
    )

    buckets: Dict[str, List[Row]] = {}
    for row in rows:
        buckets.setdefault(grouping.time_bucket_key(row.get(date_col), interval), []).append(row)
    ctx.groups = [({interval: key}, buckets[key]) for key in sorted(buckets)]
    ctx.group_source = rows

    return grouping.group_by_time_interval(
        rows, date_col, interval, numeric_col or date_col, agg
    )


def execute_group(rows: List[Row], config: GroupConfig, ctx: ExecutionContext) -> List[Row]:
    """Bucket rows by time interval or by the tuple of group column values.

    Time bucketing applies when an interval is set and a date column exists;
    otherwise explicit group columns are used, and with neither the rows pass
    through. Output rows carry the group keys and a ``count``.
    """
    if config.time_interval is not None:
        date_col = find_date_column(_columns(rows))
        if date_col is not None:
            return _time_group(rows, config, ctx, date_col)
        logger.debug("No date column found; time grouping skipped")

    if not config.columns:
        return rows
    _require_columns(rows, config.columns, "Group")

    groups: Dict[Tuple[Any, ...], List[Row]] = {}
    for row in rows:
        key = tuple(group_key(row.get(c)) for c in config.columns)
        groups.setdefault(key, []).append(row)

    # key rows carry the values of each group's first member
    ctx.groups = [
        ({c: members[0].get(c) for c in config.columns}, members) for members in groups.values()
    ]
    ctx.group_source = rows
    return [{**key_row, "count": len(members)} for key_row, members in ctx.groups]


def _aggregate_values(
    functions: Sequence[str], values: List[float], pair: Optional[List[Tuple[Any, Any]]]
) -> Row:
    result: Row = {}
    for func in functions:
        key = get_aggregate_output_key(func)
        if func == "AVG":
            result[key] = descriptive.mean(values)
        elif func == "SUM":
            result[key] = float(sum(values))
        elif func == "COUNT":
            result[key] = len(values)
        elif func == "MAX":
            result[key] = max(values) if values else None
        elif func == "MIN":
            result[key] = min(values) if values else None
        elif func == "MEDIAN":
            result[key] = descriptive.median(values)
        elif func == "MODE":
            result[key] = descriptive.mode(values)
        elif func == "STDEV":
            result[key] = descriptive.standard_deviation(values)
        elif func == "VARIANCE":
            result[key] = descriptive.variance(values)
        elif func == "CORRELATION":
            result[key] = descriptive.correlation(*zip(*pair)) if pair else None
        elif func == "COVARIANCE":
            result[key] = descriptive.covariance(*zip(*pair)) if pair else None
    return result


def _numbers(rows: Sequence[Mapping[str, Any]], column: str) -> List[float]:
    return [v for v in (to_float(r.get(column)) for r in rows) if v is not None]


def _pairs(rows: Sequence[Mapping[str, Any]], columns: Sequence[str]) -> Optional[List[Tuple[Any, Any]]]:
    if len(columns) < 2:
        return None
    return [(r.get(columns[0]), r.get(columns[1])) for r in rows] or None


def execute_aggregate(rows: List[Row], config: AggregateConfig, ctx: ExecutionContext) -> List[Row]:
    """Compute the requested functions over the first numeric column.

    After a group step the functions are computed per group from the grouped
    raw rows; otherwise the rows collapse into one summary row. Correlation
    and covariance pair the first two numeric columns.
    """
    if ctx.groups is not None:
        key_columns = set(ctx.groups[0][0]) if ctx.groups else set()
        numeric = [c for c in find_numeric_columns(ctx.group_source) if c not in key_columns]
        if not numeric:
            return rows
        target = numeric[0]
        out = []
        for key_row, members in ctx.groups:
            result = {**key_row}
            result.update(
                _aggregate_values(config.functions, _numbers(members, target), _pairs(members, numeric))
            )
            result.setdefault("count", len(members))
            out.append(result)
        return out

    if not rows:
        return []
    numeric = find_numeric_columns(rows)
    if not numeric:
        return rows
    target = numeric[0]
    result = _aggregate_values(config.functions, _numbers(rows, target), _pairs(rows, numeric))
    result["column"] = target
    return [result]


def execute_window(rows: List[Row], config: WindowConfig, ctx: ExecutionContext) -> List[Row]:
    """Dispatch a window function on the resolved order column."""
    col = resolve_order_column(rows, ctx.intent)
    if col is None:
        return rows
    direction = ctx.intent.order_direction or DEFAULT_DIRECTION
    func = config.function

    if func == "RANK":
        return window.rank(rows, col, direction)
    if func == "DENSE_RANK":
        return window.dense_rank(rows, col, direction)
    if func == "ROW_NUMBER":
        return window.row_number(rows, col, direction)
    if func in ("PERCENT_RANK", "PERCENTILE"):
        return window.percent_rank(rows, col, direction)
    if func == "RUNNING_TOTAL":
        return window.running_total(rows, col)
    if func == "RUNNING_AVG":
        return window.running_average(rows, col)
    if func == "ROLLING_AVG":
        return window.rolling_average(rows, col, ROLLING_WINDOW_SIZE)
    if func == "LAG":
        return window.lag(rows, col, LAG_LEAD_OFFSET, None, col, direction)
    if func == "LEAD":
        return window.lead(rows, col, LAG_LEAD_OFFSET, None, col, direction)
    if func == "NTILE":
        return window.ntile(rows, NTILE_BUCKETS, col, direction)
    raise ValueError(f"Unknown window function: {func}")


def execute_statistical(
    rows: List[Row], config: StatisticalConfig, ctx: ExecutionContext
) -> List[Row]:
    if config.name != "percentile_filter":
        raise ValueError(f"Unknown statistical operation: {config.name}")
    col = resolve_value_column(rows, ctx.intent)
    if col is None:
        return rows
    return grouping.filter_by_percentile(rows, col, config.value, config.direction)


def execute_order(rows: List[Row], config: OrderConfig, ctx: ExecutionContext) -> List[Row]:
    col = resolve_order_column(rows, ctx.intent)
    return window.sort_rows(rows, col, config.direction or DEFAULT_DIRECTION)


def execute_limit(rows: List[Row], config: LimitConfig, ctx: ExecutionContext) -> List[Row]:
    return rows[: config.value]


EXECUTORS: Dict[Type[Any], Callable[[List[Row], Any, ExecutionContext], List[Row]]] = {
    SelectConfig: execute_select,
    FilterConfig: execute_filter,
    GroupConfig: execute_group,
    AggregateConfig: execute_aggregate,
    WindowConfig: execute_window,
    StatisticalConfig: execute_statistical,
    OrderConfig: execute_order,
    LimitConfig: execute_limit,
}


def execute_step(rows: List[Row], step: Step, ctx: ExecutionContext) -> List[Row]:
    """Run one plan step.

    Raises:
        ValueError: If the step's config type has no executor, or the step
            hits a structural fault.
    """
    config: StepConfig = step.config
    executor = EXECUTORS.get(type(config))
    if executor is None:
        raise ValueError(f"No executor for operation config: {type(config).__name__}")
    return executor(rows, config, ctx)


__all__ = [
    "ExecutionContext",
    "EXECUTORS",
    "execute_step",
    "execute_select",
    "execute_filter",
    "execute_group",
    "execute_aggregate",
    "execute_window",
    "execute_statistical",
    "execute_order",
    "execute_limit",
]
