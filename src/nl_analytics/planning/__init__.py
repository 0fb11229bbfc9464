"""Query planning: question parsing, context carry-over and plan compilation.

Public API:
    extract_columns_from_schema: Schema descriptor -> column names
    parse_query_intent: Question + schema -> Intent
    merge_conversation_context: Inherit columns/group-by from the previous turn
    build_operations_list: Intent -> operation configs sorted by priority
    create_execution_plan: Intent -> ExecutionPlan
    describe_operation: Human-readable step description
    generate_clarifying_questions, suggest_related_queries: Follow-up helpers

Usage:
    >>> from nl_analytics.planning import create_execution_plan, parse_query_intent
    >>> schema = {"tables": [{"name": "reviews", "columns": ["rating", "created_at"]}]}
    >>> plan = create_execution_plan(parse_query_intent("average rating per month", schema))
    >>> [step.operation.value for step in plan.steps]
    ['select', 'group', 'aggregate']
"""

from __future__ import annotations

from nl_analytics.core.schemas import extract_columns_from_schema

from .clarify import generate_clarifying_questions, suggest_related_queries
from .models import (
    AggregateConfig,
    AggregationRequest,
    ComparisonFilter,
    ExecutionPlan,
    FilterConfig,
    GroupConfig,
    Intent,
    LimitConfig,
    OrderConfig,
    PercentileFilter,
    SelectConfig,
    StatisticalConfig,
    Step,
    StepConfig,
    TimeAnalysis,
    WindowConfig,
    WindowRequest,
)
from .parser import merge_conversation_context, parse_query_intent
from .plan import build_operations_list, create_execution_plan, describe_operation, estimate_complexity

__all__ = [
    # Entry points
    "parse_query_intent",
    "merge_conversation_context",
    "build_operations_list",
    "create_execution_plan",
    "describe_operation",
    "estimate_complexity",
    "extract_columns_from_schema",
    "generate_clarifying_questions",
    "suggest_related_queries",
    # Models
    "AggregateConfig",
    "AggregationRequest",
    "ComparisonFilter",
    "ExecutionPlan",
    "FilterConfig",
    "GroupConfig",
    "Intent",
    "LimitConfig",
    "OrderConfig",
    "PercentileFilter",
    "SelectConfig",
    "StatisticalConfig",
    "Step",
    "StepConfig",
    "TimeAnalysis",
    "WindowConfig",
    "WindowRequest",
]
