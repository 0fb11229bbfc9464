"""Analytics orchestration.

Public API:
    AnalyticsEngine: analyze_query(), execute_analytics(), get_enhanced_prompt_data()
    SessionStore, SessionState: Caller-owned conversation memory
    ExecutionResult, ExecutionLogEntry, AnalysisResult: Result models
    generate_insights, suggested_approach: Result and intent summaries

Usage:
    >>> from nl_analytics.engine import AnalyticsEngine, SessionStore
    >>> engine, store = AnalyticsEngine(), SessionStore()
    >>> analysis = engine.analyze_query("average rating", schema, "file", session=store.get("s1"))
    >>> engine.execute_analytics(rows, analysis.plan).to_dict()["success"]
    True
"""

from __future__ import annotations

from .engine import AnalyticsEngine
from .insights import generate_insights, suggested_approach
from .models import (
    AnalysisResult,
    ExecutionLogEntry,
    ExecutionResult,
    SessionState,
    SessionStore,
)
from .steps import ExecutionContext, execute_step

__all__ = [
    "AnalyticsEngine",
    "AnalysisResult",
    "ExecutionContext",
    "ExecutionLogEntry",
    "ExecutionResult",
    "SessionState",
    "SessionStore",
    "execute_step",
    "generate_insights",
    "suggested_approach",
]
