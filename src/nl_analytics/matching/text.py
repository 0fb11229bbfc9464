"""Text normalization and edit-distance helpers for column matching."""

from __future__ import annotations

from functools import lru_cache
from typing import List
import re


_SEPARATORS_RE = re.compile(r"[_\-\s]+")
_NON_ALNUM_RE = re.compile(r"[^a-z0-9]")
_PUNCT_RE = re.compile(r"[^\w\s]")


def normalize(text: str) -> str:
    """Lowercase and strip separators and punctuation.

    Examples:
        >>> normalize("Created_At")
        'createdat'
        >>> normalize("thumbs-up count!")
        'thumbsupcount'
    """
    if text is None:
        return ""
    t = str(text).lower()
    t = _SEPARATORS_RE.sub("", t)
    return _NON_ALNUM_RE.sub("", t)


def singularize(word: str) -> str:
    """Crude English singular form: ``ies→y``, ``es→""``, trailing ``s`` dropped.

    Examples:
        >>> singularize("categories"), singularize("boxes"), singularize("ratings")
        ('category', 'box', 'rating')
        >>> singularize("address")
        'address'
    """
    if word.endswith("ies"):
        return word[:-3] + "y"
    if word.endswith("es"):
        return word[:-2]
    if word.endswith("s") and not word.endswith("ss"):
        return word[:-1]
    return word


def pluralize(word: str) -> str:
    """Crude English plural form, the inverse of :func:`singularize`."""
    if word.endswith("y"):
        return word[:-1] + "ies"
    if word.endswith(("s", "x", "ch", "sh")):
        return word + "es"
    return word + "s"


def tokenize(text: str) -> List[str]:
    """Split a question into lowercase word tokens longer than one character."""
    t = _PUNCT_RE.sub(" ", str(text or "").lower())
    return [w for w in t.split() if len(w) > 1]


def levenshtein_distance(a: str, b: str) -> int:
    """Case-insensitive Levenshtein edit distance."""
    a = a.lower()
    b = b.lower()
    m, n = len(a), len(b)
    prev = list(range(n + 1))
    for i in range(1, m + 1):
        curr = [i] + [0] * n
        for j in range(1, n + 1):
            if a[i - 1] == b[j - 1]:
                curr[j] = prev[j - 1]
            else:
                curr[j] = 1 + min(prev[j], curr[j - 1], prev[j - 1])
        prev = curr
    return prev[n]


def similarity_score(a: str, b: str) -> float:
    """Similarity in ``[0, 1]``: ``1 - distance / max(len(a), len(b))``."""
    max_len = max(len(a), len(b))
    if max_len == 0:
        return 1.0
    return 1.0 - levenshtein_distance(a, b) / max_len


@lru_cache(maxsize=512)
def _phrase_re(phrase: str) -> re.Pattern:
    return re.compile(r"(?<!\w)" + re.escape(phrase) + r"(?!\w)")


def contains_phrase(text: str, phrase: str) -> bool:
    """True when ``phrase`` occurs in ``text`` as whole words.

    Keywords such as ``"sd"`` or ``"min"`` must not fire inside ``"used"`` or
    ``"minute"``.

    Examples:
        >>> contains_phrase("average rating per month", "per month")
        True
        >>> contains_phrase("how many minutes", "min")
        False
    """
    return _phrase_re(phrase).search(text) is not None


__all__ = [
    "normalize",
    "singularize",
    "pluralize",
    "tokenize",
    "levenshtein_distance",
    "similarity_score",
    "contains_phrase",
]
