"""Column matching: resolve user vocabulary to real column names.

Rules are tried per candidate column in priority order:

1. exact    - normalized (or singularized) strings are equal, score 1.0,
              returned immediately
2. synonym  - a synonym of the term equals or overlaps the column, score 0.95
3. contains - term is a substring of the column or vice versa, score 0.85
4. fuzzy    - Levenshtein similarity, accepted when >= threshold

The best score over all candidates wins; ties keep the first-seen column.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from nl_analytics.core.enums import MatchKind
from .synonyms import SEMANTIC_SYNONYMS, SynonymTable
from .text import normalize, similarity_score, singularize, tokenize

EXACT_SCORE = 1.0
SYNONYM_SCORE = 0.95
CONTAINS_SCORE = 0.85
DEFAULT_THRESHOLD = 0.5
REFERENCE_MIN_SCORE = 0.5

STOP_WORDS = frozenset(
    {
        "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for",
        "of", "with", "by", "from", "as", "is", "was", "are", "were", "been",
        "be", "have", "has", "had", "do", "does", "did", "will", "would", "could",
        "should", "may", "might", "must", "shall", "can", "need", "dare", "ought",
        "show", "display", "list", "get", "find", "give", "me", "all", "each",
        "every", "any", "some", "many", "much", "more", "most", "other", "another",
        "which", "what", "who", "whom", "whose", "where", "when", "why", "how",
        "this", "that", "these", "those", "i", "you", "he", "she", "it", "we", "they",
    }
)


@dataclass(frozen=True)
class ColumnMatch:
    """Outcome of matching one term against candidate columns."""

    match: Optional[str]
    score: float
    kind: MatchKind


@dataclass(frozen=True)
class ColumnReference:
    """A question token resolved to a column.

    Attributes:
        term: Original token from the question.
        column: Resolved column name.
        score: Match score in ``[0, 1]``.
        kind: Which matching rule produced the score.
    """

    term: str
    column: str
    score: float
    kind: MatchKind

    def to_dict(self) -> dict:
        return {
            "term": self.term,
            "column": self.column,
            "score": self.score,
            "kind": self.kind.value,
        }


NO_MATCH = ColumnMatch(match=None, score=0.0, kind=MatchKind.NONE)


def _synonyms_for(term: str, synonyms: SynonymTable) -> Sequence[str]:
    found = synonyms.get(term)
    if found is not None:
        return found
    # Table keys such as "thumbs_up" are stored unnormalized
    for key, values in synonyms.items():
        if normalize(key) == term:
            return values
    return ()


def find_best_column_match(
    term: str,
    columns: Iterable[str],
    threshold: float = DEFAULT_THRESHOLD,
    *,
    synonyms: Optional[SynonymTable] = None,
) -> ColumnMatch:
    """Find the column that best matches a user term.

    Args:
        term: Word or phrase from the user's question.
        columns: Candidate column names, in schema order.
        threshold: Minimum similarity accepted by the fuzzy rule.
        synonyms: Synonym table; defaults to :data:`SEMANTIC_SYNONYMS`.

    Returns:
        ColumnMatch with the winning column, or ``match=None`` and kind
        ``none`` when nothing qualifies.

    Examples:
        >>> find_best_column_match("Rating", ["rating", "score"])
        ColumnMatch(match='rating', score=1.0, kind=<MatchKind.EXACT: 'exact'>)
    """
    table = SEMANTIC_SYNONYMS if synonyms is None else synonyms
    norm_term = normalize(term)
    if not norm_term:
        return NO_MATCH
    singular_term = singularize(norm_term)
    term_synonyms = [normalize(s) for s in _synonyms_for(singular_term, table)]

    best_match: Optional[str] = None
    best_score = 0.0
    best_kind = MatchKind.NONE

    for column in columns:
        norm_col = normalize(column)
        if not norm_col:
            continue

        if norm_col == norm_term or singularize(norm_col) == singular_term:
            return ColumnMatch(match=column, score=EXACT_SCORE, kind=MatchKind.EXACT)

        for syn in term_synonyms:
            if not syn:
                continue
            if norm_col == syn or syn in norm_col or norm_col in syn:
                if SYNONYM_SCORE > best_score:
                    best_score = SYNONYM_SCORE
                    best_match = column
                    best_kind = MatchKind.SYNONYM
                break

        if norm_term in norm_col or norm_col in norm_term:
            if CONTAINS_SCORE > best_score:
                best_score = CONTAINS_SCORE
                best_match = column
                best_kind = MatchKind.CONTAINS

        sim = similarity_score(norm_term, norm_col)
        if sim > best_score and sim >= threshold:
            best_score = sim
            best_match = column
            best_kind = MatchKind.FUZZY

    if best_match is None:
        return NO_MATCH
    return ColumnMatch(match=best_match, score=best_score, kind=best_kind)


def extract_column_references(
    question: str,
    columns: Sequence[str],
    *,
    synonyms: Optional[SynonymTable] = None,
) -> List[ColumnReference]:
    """Resolve every meaningful token of a question to a column.

    Stop words and one-letter tokens are skipped. Only matches scoring at
    least 0.5 are kept, and each column is reported once (first token wins).
    """
    references: List[ColumnReference] = []
    seen = set()
    for token in tokenize(question):
        if token in STOP_WORDS or len(token) < 2:
            continue
        result = find_best_column_match(token, columns, synonyms=synonyms)
        if result.match and result.score >= REFERENCE_MIN_SCORE and result.match not in seen:
            references.append(
                ColumnReference(
                    term=token,
                    column=result.match,
                    score=result.score,
                    kind=result.kind,
                )
            )
            seen.add(result.match)
    return references


__all__ = [
    "ColumnMatch",
    "ColumnReference",
    "STOP_WORDS",
    "find_best_column_match",
    "extract_column_references",
]
