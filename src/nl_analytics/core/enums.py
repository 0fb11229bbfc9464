"""Core enumerations used across the package."""

from __future__ import annotations

from enum import Enum


class Operation(str, Enum):
    """Kinds of execution plan steps.

    Values are strings to ease serialization in plans and logs.
    """

    SELECT = "select"
    FILTER = "filter"
    GROUP = "group"
    AGGREGATE = "aggregate"
    WINDOW = "window"
    STATISTICAL = "statistical"
    ORDER = "order"
    LIMIT = "limit"


# Fixed execution priority; every operation has a distinct slot.
OPERATION_PRIORITY = {
    Operation.SELECT: 1,
    Operation.FILTER: 2,
    Operation.GROUP: 3,
    Operation.AGGREGATE: 4,
    Operation.WINDOW: 5,
    Operation.STATISTICAL: 6,
    Operation.ORDER: 7,
    Operation.LIMIT: 8,
}


class MatchKind(str, Enum):
    """How a user term was resolved to a column."""

    EXACT = "exact"
    SYNONYM = "synonym"
    CONTAINS = "contains"
    FUZZY = "fuzzy"
    NONE = "none"


class ColumnType(str, Enum):
    """Inferred semantic type of a dataset column."""

    NUMBER = "number"
    INTEGER = "integer"
    FLOAT = "float"
    DATE = "date"
    BOOLEAN = "boolean"
    ID = "id"
    EMAIL = "email"
    URL = "url"
    TEXT = "text"
    CATEGORY = "category"
    UNKNOWN = "unknown"
    NULL = "null"


class Complexity(str, Enum):
    """Estimated complexity tier of an execution plan."""

    SIMPLE = "simple"
    MODERATE = "moderate"
    COMPLEX = "complex"


class TimeInterval(str, Enum):
    """Supported time bucketing intervals."""

    YEAR = "year"
    QUARTER = "quarter"
    MONTH = "month"
    WEEK = "week"
    DAY = "day"


def get_priority(operation: Operation | str) -> int:
    """Return the fixed execution priority of an operation.

    Raises:
        ValueError: If the operation name is unknown.

    Examples:
        >>> get_priority(Operation.GROUP)
        3
        >>> get_priority("limit")
        8
    """
    try:
        op = Operation(operation)
    except ValueError as e:
        raise ValueError(f"Unknown operation: {operation}") from e
    return OPERATION_PRIORITY[op]


__all__ = [
    "Operation",
    "OPERATION_PRIORITY",
    "MatchKind",
    "ColumnType",
    "Complexity",
    "TimeInterval",
    "get_priority",
]
