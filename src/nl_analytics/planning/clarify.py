"""Follow-up helpers: clarifying questions and related-query suggestions."""

from __future__ import annotations

from typing import Any, Dict, List

from nl_analytics.core.schemas import extract_columns_from_schema
from .models import Intent

MAX_SUGGESTIONS = 3
MAX_COLUMN_OPTIONS = 10
MAX_GROUPING_OPTIONS = 5

AGGREGATION_OPTIONS = ["Show all values", "Count", "Average", "Sum", "Min/Max"]
_NUMERIC_NAME_HINTS = ("rating", "score", "amount", "price")


def generate_clarifying_questions(intent: Intent, schema: Any) -> List[Dict[str, Any]]:
    """Questions to ask back when an intent leaves choices open.

    Each entry has ``type`` (``column_selection``, ``grouping`` or
    ``aggregation``), ``question`` and ``options``.
    """
    questions: List[Dict[str, Any]] = []
    columns = extract_columns_from_schema(schema)

    if not intent.columns:
        questions.append(
            {
                "type": "column_selection",
                "question": "Which column(s) would you like to analyze?",
                "options": columns[:MAX_COLUMN_OPTIONS],
            }
        )

    if intent.aggregations and not intent.group_by:
        categorical = [
            c for c in columns if "id" not in c.lower() and "date" not in c.lower()
        ]
        if categorical:
            questions.append(
                {
                    "type": "grouping",
                    "question": "Would you like to group the results by any category?",
                    "options": ["No grouping", *categorical[:MAX_GROUPING_OPTIONS]],
                }
            )

    if not intent.aggregations and intent.columns:
        questions.append(
            {
                "type": "aggregation",
                "question": "What calculation would you like to perform?",
                "options": list(AGGREGATION_OPTIONS),
            }
        )

    return questions


def suggest_related_queries(intent: Intent, schema: Any) -> List[str]:
    """Up to three follow-up questions related to the current intent."""
    suggestions: List[str] = []
    columns = extract_columns_from_schema(schema)

    if intent.aggregations:
        first = intent.aggregations[0].function
        if first == "AVG":
            suggestions.append("What is the median value?")
            suggestions.append("Show the distribution of values")
        if first == "COUNT":
            suggestions.append("What percentage does each group represent?")

    if intent.group_by:
        suggestions.append("Show this as a trend over time")
        suggestions.append(f"What are the top 5 {intent.group_by[0]} by count?")

    if intent.columns:
        numeric = [c for c in columns if any(h in c.lower() for h in _NUMERIC_NAME_HINTS)]
        if numeric:
            suggestions.append(f"Are there any outliers in {numeric[0]}?")
            suggestions.append("Show the correlation between columns")

    return suggestions[:MAX_SUGGESTIONS]


__all__ = ["generate_clarifying_questions", "suggest_related_queries"]
