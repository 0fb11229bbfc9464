"""Core enums, schema helpers and coercion utilities."""

from .enums import (
    ColumnType,
    Complexity,
    MatchKind,
    Operation,
    OPERATION_PRIORITY,
    TimeInterval,
    get_priority,
)
from .schemas import extract_columns_from_schema, get_declared_types
from .utils import is_number, numeric_values, to_float, to_float_or_zero

__all__ = [
    "ColumnType",
    "Complexity",
    "MatchKind",
    "Operation",
    "OPERATION_PRIORITY",
    "TimeInterval",
    "get_priority",
    "extract_columns_from_schema",
    "get_declared_types",
    "is_number",
    "numeric_values",
    "to_float",
    "to_float_or_zero",
]
