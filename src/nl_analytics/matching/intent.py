"""Coarse question classification: analytics buckets, sentiment, prompt hints."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional
import re

from nl_analytics.core.schemas import extract_columns_from_schema
from .matcher import extract_column_references
from .synonyms import SynonymTable
from .text import contains_phrase

ANALYTICS_KEYWORDS: Dict[str, List[str]] = {
    "aggregation": ["average", "avg", "mean", "sum", "total", "count", "max", "min", "median", "mode"],
    "ranking": ["top", "bottom", "best", "worst", "highest", "lowest", "rank", "first", "last"],
    "percentile": ["percentile", "percent", "top 5%", "top 10%", "bottom 10%", "quartile"],
    "trend": ["trend", "over time", "monthly", "yearly", "weekly", "daily", "growth", "decline"],
    "comparison": ["compare", "versus", "vs", "than", "more than", "less than", "between"],
    "grouping": ["by", "per", "each", "group", "grouped", "breakdown"],
    "filtering": ["where", "with", "having", "only", "just", "filter", "contains", "includes"],
}

# Checked in order; the first term found decides the polarity.
NEGATIVE_TERMS = ["harsh", "harshest", "negative", "bad", "worst", "low", "lowest", "poor", "terrible"]
POSITIVE_TERMS = ["positive", "good", "best", "high", "highest", "great", "excellent", "top"]

NEGATIVE_THRESHOLD = 2
POSITIVE_THRESHOLD = 4

_TOP_N_RE = re.compile(r"top\s+(\d+)(%)?", re.IGNORECASE)
_BOTTOM_N_RE = re.compile(r"bottom\s+(\d+)(%)?", re.IGNORECASE)
_TIME_GROUPING_RE = re.compile(r"per\s+(month|year|week|day)", re.IGNORECASE)
_OVER_TIME_RE = re.compile(r"over\s+time", re.IGNORECASE)


@dataclass(frozen=True)
class SentimentFilter:
    """Rating threshold implied by sentiment words in a question."""

    polarity: str  # "negative" | "positive"
    term: str
    operator: str  # "<=" | ">="
    threshold: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.polarity,
            "term": self.term,
            "suggested_filter": {"operator": self.operator, "threshold": self.threshold},
        }


def detect_analytics_intent(question: str) -> Dict[str, Any]:
    """Classify a question into keyword buckets.

    Returns:
        Mapping of bucket name to the keywords found, plus optional
        ``top_n``/``bottom_n`` (``{"value": int, "percent": bool}``),
        ``time_grouping`` (interval name) and ``time_series`` (True).

    Examples:
        >>> detect_analytics_intent("average rating per month")["aggregation"]
        ['average']
    """
    lower = (question or "").lower()
    intents: Dict[str, Any] = {}

    for category, keywords in ANALYTICS_KEYWORDS.items():
        matched = [kw for kw in keywords if contains_phrase(lower, kw)]
        if matched:
            intents[category] = matched

    top = _TOP_N_RE.search(question or "")
    if top:
        intents["top_n"] = {"value": int(top.group(1)), "percent": bool(top.group(2))}
    bottom = _BOTTOM_N_RE.search(question or "")
    if bottom:
        intents["bottom_n"] = {"value": int(bottom.group(1)), "percent": bool(bottom.group(2))}
    grouping = _TIME_GROUPING_RE.search(question or "")
    if grouping:
        intents["time_grouping"] = grouping.group(1).lower()
    if _OVER_TIME_RE.search(question or ""):
        intents["time_series"] = True

    return intents


def infer_sentiment_filter(question: str) -> Optional[SentimentFilter]:
    """Map sentiment words to a rating filter; negative terms are checked first."""
    lower = (question or "").lower()
    for term in NEGATIVE_TERMS:
        if contains_phrase(lower, term):
            return SentimentFilter("negative", term, "<=", NEGATIVE_THRESHOLD)
    for term in POSITIVE_TERMS:
        if contains_phrase(lower, term):
            return SentimentFilter("positive", term, ">=", POSITIVE_THRESHOLD)
    return None


def generate_semantic_hints(
    question: str, schema: Any, *, synonyms: Optional[SynonymTable] = None
) -> str:
    """Render column mappings, intent buckets and sentiment as plain text."""
    columns = extract_columns_from_schema(schema)
    references = extract_column_references(question, columns, synonyms=synonyms)
    intents = detect_analytics_intent(question)
    sentiment = infer_sentiment_filter(question)

    lines = ["SEMANTIC ANALYSIS:"]
    if references:
        lines.append("Column Mappings:")
        for ref in references:
            lines.append(
                f'  - "{ref.term}" -> "{ref.column}" ({ref.kind.value}, confidence: {ref.score * 100:.0f}%)'
            )
    if intents:
        lines.append("")
        lines.append("Analytics Intents:")
        for name, value in intents.items():
            if isinstance(value, list):
                lines.append(f"  - {name}: [{', '.join(value)}]")
            else:
                lines.append(f"  - {name}: {value}")
    if sentiment:
        lines.append("")
        lines.append("Sentiment Filter Detected:")
        lines.append(f"  - Type: {sentiment.polarity}")
        lines.append(f'  - Term: "{sentiment.term}"')
        lines.append(f"  - Suggested: rating/score {sentiment.operator} {sentiment.threshold}")

    return "\n".join(lines) + "\n"


__all__ = [
    "ANALYTICS_KEYWORDS",
    "NEGATIVE_TERMS",
    "POSITIVE_TERMS",
    "SentimentFilter",
    "detect_analytics_intent",
    "infer_sentiment_filter",
    "generate_semantic_hints",
]
