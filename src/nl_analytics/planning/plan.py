"""Compile an Intent into an ordered execution plan."""

from __future__ import annotations

import logging
from typing import List, Optional

from nl_analytics.core.enums import Complexity
from .models import (
    AggregateConfig,
    ExecutionPlan,
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

logger = logging.getLogger(__name__)

COMPLEX_THRESHOLD = 4
MODERATE_THRESHOLD = 2


def build_operations_list(intent: Intent) -> List[StepConfig]:
    """Emit one config per feature present in the intent, sorted by priority.

    A select config is always emitted. Group is emitted for explicit group
    columns or a bucketing time request; order is emitted whenever a
    direction or a limit is set (defaulting to DESC).
    """
    ops: List[StepConfig] = [SelectConfig(columns=intent.column_names)]

    if intent.semantic_filter is not None or intent.filters:
        ops.append(FilterConfig(semantic=intent.semantic_filter, comparisons=intent.filters))

    time = intent.time_analysis
    if intent.group_by or (time is not None and time.group_by):
        ops.append(
            GroupConfig(
                columns=intent.group_by,
                time_interval=time.interval if time is not None else None,
            )
        )

    if intent.aggregations:
        ops.append(AggregateConfig(functions=intent.aggregation_functions))

    if intent.window is not None:
        ops.append(WindowConfig(function=intent.window.function))

    if intent.percentile_filter is not None:
        ops.append(
            StatisticalConfig(
                value=intent.percentile_filter.value,
                direction=intent.percentile_filter.kind,
            )
        )

    if intent.order_direction or intent.limit:
        ops.append(OrderConfig(direction=intent.order_direction or "DESC"))

    if intent.limit:
        ops.append(LimitConfig(value=intent.limit))

    return sorted(ops, key=lambda op: op.priority)


def estimate_complexity(intent: Intent) -> Complexity:
    """Score present features: window counts 2, every other feature 1."""
    score = 0
    if intent.aggregations:
        score += 1
    if intent.group_by:
        score += 1
    if intent.window is not None:
        score += 2
    if intent.time_analysis is not None:
        score += 1
    if intent.percentile_filter is not None:
        score += 1
    if intent.semantic_filter is not None:
        score += 1

    if score >= COMPLEX_THRESHOLD:
        return Complexity.COMPLEX
    if score >= MODERATE_THRESHOLD:
        return Complexity.MODERATE
    return Complexity.SIMPLE


def describe_operation(config: StepConfig) -> str:
    """Human-readable description of one operation.

    Examples:
        >>> describe_operation(LimitConfig(value=5))
        'Limit to 5 results'
    """
    if isinstance(config, SelectConfig):
        if config.columns:
            return f"Select columns: {', '.join(config.columns)}"
        return "Select all columns"
    if isinstance(config, FilterConfig):
        parts = []
        if config.semantic is not None:
            parts.append(f"Apply semantic filter: {config.semantic.polarity} ({config.semantic.term})")
        for comp in config.comparisons:
            parts.append(f"Filter {comp.column} {comp.operator} {comp.value:g}")
        return "; ".join(parts) if parts else "Apply filters"
    if isinstance(config, GroupConfig):
        if config.time_interval is not None:
            return f"Group by time interval: {config.time_interval.value}"
        return f"Group by: {', '.join(config.columns)}"
    if isinstance(config, AggregateConfig):
        return f"Calculate: {', '.join(config.functions)}"
    if isinstance(config, WindowConfig):
        return f"Apply window function: {config.function}"
    if isinstance(config, StatisticalConfig):
        return f"Filter {config.direction} {config.value:g}%"
    if isinstance(config, OrderConfig):
        return f"Order by {config.direction}"
    if isinstance(config, LimitConfig):
        return f"Limit to {config.value} results"
    raise ValueError(f"Unknown operation config: {type(config).__name__}")


def create_execution_plan(intent: Intent, db_type: Optional[str] = None) -> ExecutionPlan:
    """Compile an intent into a plan of described steps.

    Args:
        intent: Parsed (and possibly context-merged) intent.
        db_type: Opaque data-source tag, carried on the plan unchanged.

    Returns:
        ExecutionPlan with one step per compiled operation.
    """
    operations = intent.operations or tuple(build_operations_list(intent))
    steps = tuple(Step(config=op, description=describe_operation(op)) for op in operations)
    complexity = estimate_complexity(intent)
    logger.debug(
        "Planned %d steps (%s): %s",
        len(steps),
        complexity.value,
        [s.operation.value for s in steps],
    )
    return ExecutionPlan(
        db_type=db_type, intent=intent, steps=steps, estimated_complexity=complexity
    )


__all__ = [
    "build_operations_list",
    "estimate_complexity",
    "describe_operation",
    "create_execution_plan",
]
