"""Analytics engine data models.

This module defines:
- ExecutionLogEntry: One line of the execution log
- ExecutionResult: Outcome of running a plan on a dataset
- AnalysisResult: Outcome of analyzing a question
- SessionState, SessionStore: Caller-owned conversation memory
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple

from nl_analytics.core.enums import Complexity
from nl_analytics.planning.models import ExecutionPlan, Intent

logger = logging.getLogger(__name__)

Row = Dict[str, Any]


def _jsonable(value: Any) -> Any:
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return value


@dataclass(frozen=True)
class ExecutionLogEntry:
    """One executed step.

    Attributes:
        step: Step description (or "Data Cleaning" for the cleaning pass).
        row_count: Rows after the step; None for the cleaning entry.
        details: Extra information, e.g. the cleaning report.
    """

    step: str
    row_count: Optional[int] = None
    details: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"step": self.step}
        if self.row_count is not None:
            data["row_count"] = self.row_count
        if self.details is not None:
            data["result"] = self.details
        return data


@dataclass
class ExecutionResult:
    """Outcome of :meth:`AnalyticsEngine.execute_analytics`.

    On failure ``error`` is set, ``data`` holds the rows as of the last
    successful step and ``insights`` is empty.

    Examples:
        >>> result = engine.execute_analytics([], plan)
        >>> result.success, result.error, result.data
        (False, 'No data provided', [])
    """

    success: bool
    data: List[Row] = field(default_factory=list)
    execution_log: List[ExecutionLogEntry] = field(default_factory=list)
    insights: List[str] = field(default_factory=list)
    complexity: Optional[Complexity] = None
    error: Optional[str] = None

    @property
    def row_count(self) -> int:
        return len(self.data)

    @classmethod
    def failure(
        cls,
        error: str,
        data: Optional[List[Row]] = None,
        execution_log: Optional[List[ExecutionLogEntry]] = None,
    ) -> "ExecutionResult":
        return cls(
            success=False,
            data=list(data or []),
            execution_log=list(execution_log or []),
            error=error,
        )

    def to_dict(self) -> Dict[str, Any]:
        rows = [{k: _jsonable(v) for k, v in row.items()} for row in self.data]
        log = [entry.to_dict() for entry in self.execution_log]
        if not self.success:
            return {"success": False, "error": self.error, "data": rows, "execution_log": log}
        return {
            "success": True,
            "data": rows,
            "row_count": self.row_count,
            "execution_log": log,
            "insights": list(self.insights),
            "complexity": self.complexity.value if self.complexity else None,
        }


@dataclass(frozen=True)
class AnalysisResult:
    """Outcome of :meth:`AnalyticsEngine.analyze_query`."""

    intent: Intent
    plan: ExecutionPlan
    semantic_hints: str

    @property
    def clarification_needed(self) -> bool:
        return self.intent.clarification_needed

    @property
    def suggested_clarification(self) -> Optional[str]:
        return self.intent.suggested_clarification

    def to_dict(self) -> Dict[str, Any]:
        return {
            "intent": self.intent.to_dict(),
            "plan": self.plan.to_dict(),
            "semantic_hints": self.semantic_hints,
            "clarification_needed": self.clarification_needed,
            "suggested_clarification": self.suggested_clarification,
        }


@dataclass
class SessionState:
    """Conversation memory of one session.

    Attributes:
        history: ``(question, intent)`` turns, oldest first.
        previous_intent: Intent of the last turn, used for context carry-over.
    """

    history: List[Tuple[str, Intent]] = field(default_factory=list)
    previous_intent: Optional[Intent] = None

    def record(self, question: str, intent: Intent) -> None:
        self.history.append((question, intent))
        self.previous_intent = intent

    def clear(self) -> None:
        self.history.clear()
        self.previous_intent = None


class SessionStore:
    """Session id to :class:`SessionState` mapping owned by the caller.

    The engine never holds session state itself; callers fetch a state from
    the store and pass it to :meth:`AnalyticsEngine.analyze_query`. Callers
    must not run two questions of the same session concurrently.

    Examples:
        >>> store = SessionStore()
        >>> state = store.get("user-1")
        >>> engine.analyze_query("average rating", schema, "sql", session=state)
        >>> store.clear("user-1")
    """

    def __init__(self) -> None:
        self._sessions: Dict[str, SessionState] = {}

    def get(self, session_id: str) -> SessionState:
        """Return the state of a session, creating it on first use."""
        state = self._sessions.get(session_id)
        if state is None:
            state = SessionState()
            self._sessions[session_id] = state
            logger.debug("Created session %s", session_id)
        return state

    def clear(self, session_id: str) -> None:
        """Forget the history of a session but keep it registered."""
        state = self._sessions.get(session_id)
        if state is not None:
            state.clear()

    def drop(self, session_id: str) -> None:
        """Remove a session entirely."""
        self._sessions.pop(session_id, None)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)

    def __iter__(self) -> Iterator[str]:
        return iter(self._sessions)


__all__ = [
    "ExecutionLogEntry",
    "ExecutionResult",
    "AnalysisResult",
    "SessionState",
    "SessionStore",
]
