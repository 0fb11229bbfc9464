"""Parse a natural-language question into an Intent."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, List, Optional, Sequence, Tuple

from nl_analytics.core.schemas import extract_columns_from_schema
from nl_analytics.matching.intent import infer_sentiment_filter
from nl_analytics.matching.matcher import extract_column_references, find_best_column_match
from nl_analytics.matching.synonyms import SynonymTable
from nl_analytics.matching.text import contains_phrase
from .keywords import (
    AGGREGATION_KEYWORDS,
    ASCENDING_PHRASES,
    BOTTOM_N_RE,
    CLARIFICATION_PROMPT,
    COMPARISON_RE,
    DESCENDING_PHRASES,
    GROUP_BY_RE,
    PERCENT_RE,
    TIME_PATTERNS,
    TOP_N_RE,
    WINDOW_KEYWORDS,
    get_comparison_operator,
)
from .models import (
    AggregationRequest,
    ComparisonFilter,
    Intent,
    PercentileFilter,
    TimeAnalysis,
    WindowRequest,
)
from .plan import build_operations_list

logger = logging.getLogger(__name__)


def _detect_aggregations(lower: str) -> Tuple[AggregationRequest, ...]:
    found: List[AggregationRequest] = []
    seen = set()
    for keyword, function in AGGREGATION_KEYWORDS.items():
        if function in seen or not contains_phrase(lower, keyword):
            continue
        seen.add(function)
        found.append(AggregationRequest(keyword=keyword, function=function))
    return tuple(found)


def _detect_window(lower: str) -> Optional[WindowRequest]:
    for keyword, function in WINDOW_KEYWORDS.items():
        if contains_phrase(lower, keyword):
            return WindowRequest(keyword=keyword, function=function)
    return None


def _detect_time_analysis(lower: str) -> Optional[TimeAnalysis]:
    for phrase, pattern in TIME_PATTERNS.items():
        if contains_phrase(lower, phrase):
            return TimeAnalysis(
                pattern=phrase,
                interval=pattern.interval,
                group_by=pattern.group_by,
                time_series=pattern.time_series,
                show_trend=pattern.show_trend,
            )
    return None


def _detect_limits(
    lower: str,
) -> Tuple[Optional[int], Optional[str], Optional[PercentileFilter]]:
    """Return ``(limit, direction, percentile_filter)``; a percentage wins over a count."""
    percent = PERCENT_RE.search(lower)
    if percent:
        kind = "bottom" if contains_phrase(lower, "bottom") else "top"
        return None, None, PercentileFilter(value=int(percent.group(1)), kind=kind)

    top = TOP_N_RE.search(lower)
    if top and int(top.group(1)) > 0:
        return int(top.group(1)), "DESC", None

    bottom = BOTTOM_N_RE.search(lower)
    if bottom and int(bottom.group(1)) > 0:
        return int(bottom.group(1)), "ASC", None

    return None, None, None


def _detect_direction(lower: str, current: Optional[str]) -> Optional[str]:
    direction = current
    if any(contains_phrase(lower, p) for p in ASCENDING_PHRASES):
        direction = "ASC"
    if any(contains_phrase(lower, p) for p in DESCENDING_PHRASES):
        direction = "DESC"
    return direction


def _detect_group_by(
    lower: str, columns: Sequence[str], synonyms: Optional[SynonymTable]
) -> Tuple[str, ...]:
    match = GROUP_BY_RE.search(lower)
    if not match:
        return ()
    resolved = find_best_column_match(match.group(1), columns, synonyms=synonyms)
    if resolved.match is None:
        logger.debug("Group-by term %r did not resolve to a column", match.group(1))
        return ()
    return (resolved.match,)


def _detect_comparisons(
    lower: str, columns: Sequence[str], synonyms: Optional[SynonymTable]
) -> Tuple[ComparisonFilter, ...]:
    found: List[ComparisonFilter] = []
    for term, phrase, number in COMPARISON_RE.findall(lower):
        resolved = find_best_column_match(term, columns, synonyms=synonyms)
        if resolved.match is None:
            continue
        found.append(
            ComparisonFilter(
                column=resolved.match,
                operator=get_comparison_operator(phrase),
                value=float(number),
            )
        )
    return tuple(found)


def parse_query_intent(
    question: str, schema: Any, *, synonyms: Optional[SynonymTable] = None
) -> Intent:
    """Parse a question against a schema.

    Args:
        question: Raw question text.
        schema: Schema descriptor (tables/columns or collections/fields).
        synonyms: Synonym table override for column resolution.

    Returns:
        Intent with compiled operations. ``clarification_needed`` is set when
        neither a column nor an aggregation could be found.

    Examples:
        >>> schema = {"tables": [{"name": "reviews", "columns": ["rating", "created_at"]}]}
        >>> intent = parse_query_intent("average rating per month", schema)
        >>> intent.aggregation_functions, intent.time_analysis.interval.value
        (('AVG',), 'month')
    """
    question = question or ""
    lower = question.lower()
    available = extract_columns_from_schema(schema)

    references = tuple(extract_column_references(question, available, synonyms=synonyms))
    aggregations = _detect_aggregations(lower)
    limit, direction, percentile_filter = _detect_limits(lower)
    clarify = not references and not aggregations

    intent = Intent(
        original_query=question,
        columns=references,
        aggregations=aggregations,
        filters=_detect_comparisons(lower, available, synonyms),
        group_by=_detect_group_by(lower, available, synonyms),
        window=_detect_window(lower),
        time_analysis=_detect_time_analysis(lower),
        order_direction=_detect_direction(lower, direction),
        limit=limit,
        percentile_filter=percentile_filter,
        semantic_filter=infer_sentiment_filter(question),
        clarification_needed=clarify,
        suggested_clarification=CLARIFICATION_PROMPT if clarify else None,
    )
    intent = replace(intent, operations=tuple(build_operations_list(intent)))
    logger.debug(
        "Parsed %r: columns=%s aggregations=%s window=%s time=%s",
        question,
        intent.column_names,
        intent.aggregation_functions,
        intent.window.function if intent.window else None,
        intent.time_analysis.pattern if intent.time_analysis else None,
    )
    return intent


def merge_conversation_context(current: Intent, previous: Optional[Intent]) -> Intent:
    """Carry columns and group-by over from the previous turn when unset.

    Only these two fields are inherited. When columns are carried over,
    ``inherited_context`` is set and the clarification request is dropped.
    Operations are recompiled so the plan reflects the inherited values.
    """
    if previous is None:
        return current

    changes: dict = {}
    if not current.columns and previous.columns:
        changes["columns"] = previous.columns
        changes["inherited_context"] = True
        changes["clarification_needed"] = False
        changes["suggested_clarification"] = None
    if not current.group_by and previous.group_by:
        changes["group_by"] = previous.group_by
    if not changes:
        return current

    merged = replace(current, **changes)
    logger.debug("Inherited context from previous turn: %s", sorted(changes))
    return replace(merged, operations=tuple(build_operations_list(merged)))


__all__ = ["parse_query_intent", "merge_conversation_context"]
