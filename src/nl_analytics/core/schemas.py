"""Schema descriptor helpers.

Collaborators hand the core a schema in one of two shapes:

- SQL/file sources: ``{"tables": [{"name": ..., "columns": [...]}]}``
- Document sources: ``{"collections": [{"name": ..., "fields": [...]}]}``

Column entries may be bare names or ``{"name": ..., "type": ...}`` mappings.
A JSON string of either shape is accepted as well.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Iterator, List, Optional

logger = logging.getLogger(__name__)


def _column_name(entry: Any) -> Optional[str]:
    if isinstance(entry, dict):
        name = entry.get("name")
        return str(name) if name is not None else None
    if entry is None:
        return None
    return str(entry)


def _load(schema: Any) -> Optional[Dict[str, Any]]:
    if isinstance(schema, str):
        try:
            schema = json.loads(schema)
        except json.JSONDecodeError:
            logger.debug("Schema string is not valid JSON; ignoring it")
            return None
    return schema if isinstance(schema, dict) else None


def _iter_entries(schema: Dict[str, Any]) -> Iterator[Any]:
    """Yield column entries of every table and collection.

    Containers that are not mappings, and entry lists that are not lists,
    are skipped.
    """
    for group, key in (("tables", "columns"), ("collections", "fields")):
        containers = schema.get(group)
        if not isinstance(containers, (list, tuple)):
            continue
        for container in containers:
            if not isinstance(container, dict):
                logger.debug("Skipping %s entry that is not a mapping: %r", group, container)
                continue
            entries = container.get(key)
            if isinstance(entries, (list, tuple)):
                yield from entries


def extract_columns_from_schema(schema: Any) -> List[str]:
    """Return the flat, de-duplicated list of column names in a schema.

    Order follows the schema (tables first, then collections); the first
    occurrence of a name wins.

    Args:
        schema: Schema mapping, JSON string, or None.

    Returns:
        List of column names. Unparseable input yields an empty list.

    Examples:
        >>> extract_columns_from_schema(
        ...     {"tables": [{"name": "reviews", "columns": ["rating", {"name": "created_at"}]}]}
        ... )
        ['rating', 'created_at']
    """
    loaded = _load(schema) if schema else None
    if loaded is None:
        return []

    names: List[str] = []
    for entry in _iter_entries(loaded):
        name = _column_name(entry)
        if name is not None:
            names.append(name)

    # dict.fromkeys keeps first-seen order
    return list(dict.fromkeys(names))


def get_declared_types(schema: Any) -> Dict[str, str]:
    """Return ``{column: declared_type}`` for columns that declare a type."""
    loaded = _load(schema)
    if loaded is None:
        return {}

    declared: Dict[str, str] = {}
    for entry in _iter_entries(loaded):
        if isinstance(entry, dict) and entry.get("name") and entry.get("type"):
            declared.setdefault(str(entry["name"]), str(entry["type"]))
    return declared


__all__ = ["extract_columns_from_schema", "get_declared_types"]
