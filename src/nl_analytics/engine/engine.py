"""Analytics orchestrator.

Ties planning, cleaning and the statistics library together:

    question + schema -> analyze_query() -> AnalysisResult (intent, plan, hints)
    rows + plan       -> execute_analytics() -> ExecutionResult

The engine holds no per-session state. Conversation memory lives in a
:class:`SessionState` owned by the caller and passed to ``analyze_query``,
so one engine instance can serve many sessions.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

from nl_analytics.cleaning.cleaner import clean_dataset
from nl_analytics.cleaning.models import CleaningOptions
from nl_analytics.matching.intent import detect_analytics_intent, generate_semantic_hints
from nl_analytics.matching.synonyms import SynonymTable
from nl_analytics.planning.models import ExecutionPlan
from nl_analytics.planning.parser import merge_conversation_context, parse_query_intent
from nl_analytics.planning.plan import create_execution_plan
from .config import CLEANING_STEP, NO_DATA_ERROR
from .insights import generate_insights, suggested_approach
from .models import AnalysisResult, ExecutionLogEntry, ExecutionResult, Row, SessionState
from .steps import ExecutionContext, execute_step

logger = logging.getLogger(__name__)


class AnalyticsEngine:
    """Plan questions and execute plans against in-memory rows.

    Args:
        synonyms: Synonym table used for column resolution; defaults to the
            built-in table.
        cleaning_options: Options for the cleaning pass run before every plan.

    Examples:
        >>> engine = AnalyticsEngine()
        >>> analysis = engine.analyze_query("average rating per month", schema, "file")
        >>> result = engine.execute_analytics(rows, analysis.plan)
        >>> result.success
        True
    """

    def __init__(
        self,
        synonyms: Optional[SynonymTable] = None,
        cleaning_options: Optional[CleaningOptions] = None,
    ) -> None:
        self.synonyms = synonyms
        self.cleaning_options = cleaning_options or CleaningOptions()

    def analyze_query(
        self,
        question: str,
        schema: Any,
        db_type: Optional[str] = None,
        session: Optional[SessionState] = None,
    ) -> AnalysisResult:
        """Parse a question, merge session context and compile a plan.

        Args:
            question: Raw question text.
            schema: Schema descriptor.
            db_type: Opaque data-source tag carried on the plan.
            session: Conversation memory; the turn is recorded into it.

        Returns:
            AnalysisResult with intent, plan and semantic hints.
        """
        intent = parse_query_intent(question, schema, synonyms=self.synonyms)
        previous = session.previous_intent if session is not None else None
        merged = merge_conversation_context(intent, previous)
        hints = generate_semantic_hints(question, schema, synonyms=self.synonyms)
        plan = create_execution_plan(merged, db_type)

        if session is not None:
            session.record(question, merged)
        if merged.clarification_needed:
            logger.info("Clarification needed for %r", question)
        return AnalysisResult(intent=merged, plan=plan, semantic_hints=hints)

    def execute_analytics(
        self, data: Optional[Sequence[Mapping[str, Any]]], plan: ExecutionPlan
    ) -> ExecutionResult:
        """Clean the rows, then run every plan step in order.

        Never raises: any exception from cleaning or a step stops the run and
        is returned as a failure carrying the rows of the last successful
        step and the log so far.
        """
        if not data:
            return ExecutionResult.failure(NO_DATA_ERROR)

        rows: List[Row] = [dict(r) for r in data]
        log: List[ExecutionLogEntry] = []
        ctx = ExecutionContext(intent=plan.intent)

        try:
            cleaned = clean_dataset(rows, self.cleaning_options)
            rows = cleaned.cleaned_rows
            log.append(ExecutionLogEntry(step=CLEANING_STEP, details=cleaned.report.to_dict()))

            for step in plan.steps:
                rows = execute_step(rows, step, ctx)
                log.append(ExecutionLogEntry(step=step.description, row_count=len(rows)))
                logger.debug("%s -> %d rows", step.description, len(rows))

            insights = generate_insights(rows, plan.intent)
        except Exception as e:
            logger.warning("Execution aborted after %d steps: %s", len(log), e, exc_info=True)
            return ExecutionResult.failure(str(e), data=rows, execution_log=log)

        logger.info(
            "Executed %d steps (%s): %d rows",
            len(plan.steps),
            plan.estimated_complexity.value,
            len(rows),
        )
        return ExecutionResult(
            success=True,
            data=rows,
            execution_log=log,
            insights=insights,
            complexity=plan.estimated_complexity,
        )

    def get_enhanced_prompt_data(
        self, question: str, schema: Any, db_type: Optional[str] = None
    ) -> Dict[str, Any]:
        """Descriptive summary of a question for prompt-building collaborators.

        Has no effect on any session state.
        """
        intent = parse_query_intent(question, schema, synonyms=self.synonyms)
        return {
            "original_question": question,
            "parsed_intent": intent,
            "semantic_hints": generate_semantic_hints(question, schema, synonyms=self.synonyms),
            "analytics_intents": detect_analytics_intent(question),
            "suggested_approach": suggested_approach(intent),
            "required_operations": [op.operation.value for op in intent.operations],
            "db_type": db_type,
        }


__all__ = ["AnalyticsEngine"]
