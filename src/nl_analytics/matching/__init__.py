"""Semantic matching of user vocabulary to dataset columns.

Public API:
    find_best_column_match: Best column for a single term
    extract_column_references: Column references found in a whole question
    detect_analytics_intent: Coarse analytics keyword buckets
    infer_sentiment_filter: Rating threshold implied by sentiment words
    generate_semantic_hints: Text summary for prompt-building collaborators
    load_synonyms: Extend the synonym table from YAML
"""

from __future__ import annotations

from .intent import (
    ANALYTICS_KEYWORDS,
    SentimentFilter,
    detect_analytics_intent,
    generate_semantic_hints,
    infer_sentiment_filter,
)
from .matcher import (
    ColumnMatch,
    ColumnReference,
    extract_column_references,
    find_best_column_match,
)
from .synonyms import SEMANTIC_SYNONYMS, load_synonyms, merge_synonyms
from .text import (
    levenshtein_distance,
    normalize,
    pluralize,
    similarity_score,
    singularize,
    tokenize,
)

__all__ = [
    "ANALYTICS_KEYWORDS",
    "SentimentFilter",
    "detect_analytics_intent",
    "generate_semantic_hints",
    "infer_sentiment_filter",
    "ColumnMatch",
    "ColumnReference",
    "extract_column_references",
    "find_best_column_match",
    "SEMANTIC_SYNONYMS",
    "load_synonyms",
    "merge_synonyms",
    "levenshtein_distance",
    "normalize",
    "pluralize",
    "similarity_score",
    "singularize",
    "tokenize",
]
