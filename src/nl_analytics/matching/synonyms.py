"""Curated synonym table for analytics vocabulary.

Keys are normalized singular user terms; values list column-name fragments
that the term may refer to. Deployments can extend the table from YAML:

```yaml
synonyms:
  revenue: [revenue, sales, income]
  rating: [stars_given]   # appended to the built-in list
```
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence
import logging

import yaml

logger = logging.getLogger(__name__)

SynonymTable = Mapping[str, Sequence[str]]

SEMANTIC_SYNONYMS: Dict[str, List[str]] = {
    # Rating / score
    "rating": ["rating", "score", "stars", "rate", "points", "grade", "rank", "value"],
    "score": ["score", "rating", "points", "grade", "value", "marks"],
    # Sentiment
    "harsh": ["low", "bad", "negative", "poor", "worst", "terrible", "awful"],
    "positive": ["high", "good", "great", "excellent", "best", "top"],
    "negative": ["low", "bad", "poor", "worst", "harsh", "terrible"],
    # People
    "user": ["user", "customer", "client", "person", "member", "account", "reviewer", "author"],
    "reviewer": ["reviewer", "user", "author", "commenter", "rater", "customer"],
    "customer": ["customer", "client", "user", "buyer", "shopper", "consumer"],
    "author": ["author", "writer", "creator", "user", "reviewer"],
    # Names
    "name": ["name", "fullname", "full_name", "username", "title", "label"],
    "username": ["username", "user_name", "login", "handle", "nickname"],
    "fullname": ["fullname", "full_name", "name", "display_name"],
    # Identifiers
    "id": ["id", "_id", "user_id", "userid", "identifier", "key"],
    # Date / time
    "date": ["date", "time", "timestamp", "created", "created_at", "datetime", "day"],
    "month": ["month", "date", "period", "time"],
    "year": ["year", "date", "period", "annual"],
    "created": ["created", "created_at", "date_created", "timestamp", "date"],
    "updated": ["updated", "updated_at", "modified", "last_modified"],
    # Review / feedback
    "review": ["review", "feedback", "comment", "text", "content", "description", "body"],
    "comment": ["comment", "review", "feedback", "text", "note", "remarks"],
    "feedback": ["feedback", "review", "response", "comment"],
    # Engagement
    "thumbs_up": ["thumbs_up", "likes", "upvotes", "helpful", "positive_votes"],
    "thumbs_down": ["thumbs_down", "dislikes", "downvotes", "negative_votes"],
    "likes": ["likes", "thumbs_up", "upvotes", "favorites", "hearts"],
    "views": ["views", "impressions", "visits", "hits", "seen"],
    # Location
    "country": ["country", "nation", "region", "location", "geo", "place"],
    "city": ["city", "town", "location", "place"],
    "location": ["location", "place", "address", "geo", "region"],
    # Category / type
    "category": ["category", "type", "class", "group", "kind", "tag"],
    "type": ["type", "category", "kind", "class", "genre"],
    "status": ["status", "state", "condition", "active"],
    # Quantity
    "count": ["count", "number", "total", "quantity", "amount"],
    "amount": ["amount", "total", "sum", "value", "price", "cost"],
    "price": ["price", "cost", "amount", "value", "rate"],
    # Product
    "product": ["product", "item", "goods", "article", "merchandise"],
    "app": ["app", "application", "software", "program", "product"],
    "version": ["version", "ver", "release", "build"],
}


def merge_synonyms(base: SynonymTable, extra: SynonymTable) -> Dict[str, List[str]]:
    """Return a new table with ``extra`` entries appended to ``base``.

    Existing terms keep their built-in order; new fragments are appended once.
    """
    merged: Dict[str, List[str]] = {k: list(v) for k, v in base.items()}
    for term, fragments in extra.items():
        key = str(term).strip().lower()
        bucket = merged.setdefault(key, [])
        for frag in fragments:
            frag_s = str(frag)
            if frag_s not in bucket:
                bucket.append(frag_s)
    return merged


def load_synonyms(path: Path, base: Optional[SynonymTable] = None) -> Dict[str, List[str]]:
    """Load synonym extensions from YAML and merge them over ``base``.

    Args:
        path: YAML file with a top-level ``synonyms`` mapping.
        base: Table to extend. Defaults to :data:`SEMANTIC_SYNONYMS`.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the ``synonyms`` entry is not a mapping of lists.
    """
    if not path.exists():
        raise FileNotFoundError(f"Synonyms file not found: {path}")
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    entries = data.get("synonyms", {}) or {}
    if not isinstance(entries, dict):
        raise ValueError(f"'synonyms' in {path} must be a mapping, got {type(entries).__name__}")

    extra: Dict[str, List[str]] = {}
    for term, fragments in entries.items():
        if isinstance(fragments, str):
            fragments = [fragments]
        if not isinstance(fragments, list):
            raise ValueError(f"Synonyms for '{term}' must be a list")
        extra[str(term)] = [str(f) for f in fragments]

    logger.debug("Loaded %d synonym entries from %s", len(extra), path)
    return merge_synonyms(base if base is not None else SEMANTIC_SYNONYMS, extra)


__all__ = ["SEMANTIC_SYNONYMS", "SynonymTable", "merge_synonyms", "load_synonyms"]
