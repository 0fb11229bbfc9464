"""Query planning data models.

This module defines the structures produced by the planner:
- Intent: Parsed meaning of one question
- AggregationRequest, WindowRequest, TimeAnalysis, PercentileFilter,
  ComparisonFilter: Parts of an Intent
- SelectConfig ... LimitConfig: One configuration type per plan operation
- Step, ExecutionPlan: Compiled plan
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, ClassVar, Dict, Optional, Tuple, Union

from nl_analytics.core.enums import Complexity, Operation, TimeInterval, get_priority
from nl_analytics.matching.intent import SentimentFilter
from nl_analytics.matching.matcher import ColumnReference

_DIRECTIONS = ("ASC", "DESC")
_PERCENTILE_KINDS = ("top", "bottom")
_COMPARISON_OPERATORS = (">", ">=", "<", "<=", "=")


def _plain(value: Any) -> Any:
    """Convert nested model values into JSON-friendly structures."""
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, TimeInterval):
        return value.value
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value


# ============================================================================
# INTENT PARTS
# ============================================================================


@dataclass(frozen=True)
class AggregationRequest:
    """An aggregation keyword found in the question and its function."""

    keyword: str
    function: str

    def to_dict(self) -> Dict[str, Any]:
        return {"keyword": self.keyword, "function": self.function}


@dataclass(frozen=True)
class WindowRequest:
    """The window-function keyword found in the question and its function."""

    keyword: str
    function: str

    def to_dict(self) -> Dict[str, Any]:
        return {"keyword": self.keyword, "function": self.function}


@dataclass(frozen=True)
class TimeAnalysis:
    """A time-grouping or time-series request.

    Attributes:
        pattern: Phrase that triggered the request (e.g., "per month").
        interval: Bucket interval; None for plain time-series requests.
        group_by: True when rows should be bucketed by ``interval``.
        time_series: True for "over time" style requests.
        show_trend: True when a trend summary was asked for.
    """

    pattern: str
    interval: Optional[TimeInterval] = None
    group_by: bool = False
    time_series: bool = False
    show_trend: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pattern": self.pattern,
            "interval": _plain(self.interval),
            "group_by": self.group_by,
            "time_series": self.time_series,
            "show_trend": self.show_trend,
        }


@dataclass(frozen=True)
class PercentileFilter:
    """Keep the top or bottom ``value`` percent of rows."""

    value: int
    kind: str  # "top" | "bottom"

    def __post_init__(self) -> None:
        """Validate field constraints."""
        if self.kind not in _PERCENTILE_KINDS:
            raise ValueError(f"Invalid percentile filter kind: {self.kind}. Must be 'top' or 'bottom'.")

    def to_dict(self) -> Dict[str, Any]:
        return {"value": self.value, "kind": self.kind}


@dataclass(frozen=True)
class ComparisonFilter:
    """A numeric comparison such as ``rating > 3``."""

    column: str
    operator: str
    value: float

    def __post_init__(self) -> None:
        """Validate field constraints."""
        if self.operator not in _COMPARISON_OPERATORS:
            raise ValueError(f"Invalid comparison operator: {self.operator}")

    def to_dict(self) -> Dict[str, Any]:
        return {"column": self.column, "operator": self.operator, "value": self.value}


# ============================================================================
# OPERATION CONFIGS
# ============================================================================


@dataclass(frozen=True)
class OperationConfig:
    """Base of the per-operation configuration types."""

    operation: ClassVar[Operation]

    @property
    def priority(self) -> int:
        return get_priority(self.operation)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": self.operation.value}
        for f in fields(self):
            data[f.name] = _plain(getattr(self, f.name))
        data["priority"] = self.priority
        return data


@dataclass(frozen=True)
class SelectConfig(OperationConfig):
    operation: ClassVar[Operation] = Operation.SELECT
    columns: Tuple[str, ...] = ()


@dataclass(frozen=True)
class FilterConfig(OperationConfig):
    operation: ClassVar[Operation] = Operation.FILTER
    semantic: Optional[SentimentFilter] = None
    comparisons: Tuple[ComparisonFilter, ...] = ()


@dataclass(frozen=True)
class GroupConfig(OperationConfig):
    operation: ClassVar[Operation] = Operation.GROUP
    columns: Tuple[str, ...] = ()
    time_interval: Optional[TimeInterval] = None


@dataclass(frozen=True)
class AggregateConfig(OperationConfig):
    operation: ClassVar[Operation] = Operation.AGGREGATE
    functions: Tuple[str, ...] = ()


@dataclass(frozen=True)
class WindowConfig(OperationConfig):
    operation: ClassVar[Operation] = Operation.WINDOW
    function: str = "RANK"


@dataclass(frozen=True)
class StatisticalConfig(OperationConfig):
    operation: ClassVar[Operation] = Operation.STATISTICAL
    name: str = "percentile_filter"
    value: float = 0
    direction: str = "top"

    def __post_init__(self) -> None:
        """Validate field constraints."""
        if self.direction not in _PERCENTILE_KINDS:
            raise ValueError(f"Invalid direction: {self.direction}. Must be 'top' or 'bottom'.")


@dataclass(frozen=True)
class OrderConfig(OperationConfig):
    operation: ClassVar[Operation] = Operation.ORDER
    direction: str = "DESC"

    def __post_init__(self) -> None:
        """Validate field constraints."""
        if self.direction not in _DIRECTIONS:
            raise ValueError(f"Invalid direction: {self.direction}. Must be 'ASC' or 'DESC'.")


@dataclass(frozen=True)
class LimitConfig(OperationConfig):
    operation: ClassVar[Operation] = Operation.LIMIT
    value: int = 0

    def __post_init__(self) -> None:
        """Validate field constraints."""
        if self.value < 0:
            raise ValueError(f"Invalid limit: {self.value}. Must be >= 0.")


StepConfig = Union[
    SelectConfig,
    FilterConfig,
    GroupConfig,
    AggregateConfig,
    WindowConfig,
    StatisticalConfig,
    OrderConfig,
    LimitConfig,
]


# ============================================================================
# INTENT AND PLAN
# ============================================================================


@dataclass(frozen=True)
class Intent:
    """Parsed meaning of a question.

    Collections are tuples; an Intent is never mutated once built. Follow-up
    turns derive a new Intent with :func:`dataclasses.replace`.

    Attributes:
        original_query: Question text as received.
        columns: Column references resolved from the question.
        aggregations: Aggregation requests, one per distinct function.
        filters: Numeric comparison filters.
        group_by: Columns to group by.
        window: At most one window-function request.
        time_analysis: Time bucketing or time-series request.
        order_direction: "ASC", "DESC" or None.
        limit: Row limit, or None.
        percentile_filter: Top/bottom percent request.
        semantic_filter: Rating threshold implied by sentiment words.
        operations: Compiled operation configs, sorted by priority.
        clarification_needed: True when the question is too vague to plan.
        suggested_clarification: Question to ask back when clarification is needed.
        inherited_context: True when columns were carried over from the previous turn.
    """

    original_query: str
    columns: Tuple[ColumnReference, ...] = ()
    aggregations: Tuple[AggregationRequest, ...] = ()
    filters: Tuple[ComparisonFilter, ...] = ()
    group_by: Tuple[str, ...] = ()
    window: Optional[WindowRequest] = None
    time_analysis: Optional[TimeAnalysis] = None
    order_direction: Optional[str] = None
    limit: Optional[int] = None
    percentile_filter: Optional[PercentileFilter] = None
    semantic_filter: Optional[SentimentFilter] = None
    operations: Tuple[StepConfig, ...] = ()
    clarification_needed: bool = False
    suggested_clarification: Optional[str] = None
    inherited_context: bool = False

    def __post_init__(self) -> None:
        """Validate field constraints."""
        if self.order_direction is not None and self.order_direction not in _DIRECTIONS:
            raise ValueError(
                f"Invalid order direction: {self.order_direction}. Must be 'ASC' or 'DESC'."
            )

    @property
    def column_names(self) -> Tuple[str, ...]:
        return tuple(ref.column for ref in self.columns)

    @property
    def aggregation_functions(self) -> Tuple[str, ...]:
        return tuple(a.function for a in self.aggregations)

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: _plain(getattr(self, f.name)) for f in fields(self)}


@dataclass(frozen=True)
class Step:
    """One operation of an execution plan."""

    config: StepConfig
    description: str

    @property
    def operation(self) -> Operation:
        return self.config.operation

    def to_dict(self) -> Dict[str, Any]:
        return {
            "operation": self.operation.value,
            "description": self.description,
            "config": self.config.to_dict(),
        }


@dataclass(frozen=True)
class ExecutionPlan:
    """Steps sorted by operation priority, plus the Intent they came from.

    Attributes:
        db_type: Opaque tag of the data source, carried for collaborators.
        intent: The Intent the plan was compiled from.
        steps: Steps in execution order.
        estimated_complexity: Complexity tier.
    """

    db_type: Optional[str]
    intent: Intent
    steps: Tuple[Step, ...] = field(default_factory=tuple)
    estimated_complexity: Complexity = Complexity.SIMPLE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "db_type": self.db_type,
            "intent": self.intent.to_dict(),
            "steps": [s.to_dict() for s in self.steps],
            "estimated_complexity": self.estimated_complexity.value,
        }


__all__ = [
    "AggregationRequest",
    "WindowRequest",
    "TimeAnalysis",
    "PercentileFilter",
    "ComparisonFilter",
    "OperationConfig",
    "SelectConfig",
    "FilterConfig",
    "GroupConfig",
    "AggregateConfig",
    "WindowConfig",
    "StatisticalConfig",
    "OrderConfig",
    "LimitConfig",
    "StepConfig",
    "Intent",
    "Step",
    "ExecutionPlan",
]
