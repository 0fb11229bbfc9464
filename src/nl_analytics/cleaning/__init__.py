"""Data cleaning for raw row-sets.

This module provides type inference and normalization for datasets handed
over by connectors:

- **Models**: ColumnTypeInfo, CleaningOptions, CleaningReport, CleanResult, QualityReport
- **Detection**: detect_column_type() - heuristic per-column type inference
- **Converters**: null detection and number/date/boolean/text parsers
- **Config**: Null tokens, recognizer patterns and thresholds (import from .config)

Usage:
    >>> from nl_analytics.cleaning import clean_dataset
    >>> result = clean_dataset([{"rating": "4"}, {"rating": "N/A"}])
    >>> result.cleaned_rows
    [{'rating': 4}, {'rating': None}]
"""

from __future__ import annotations

from .cleaner import clean_dataset, collect_columns, generate_quality_report, handle_missing_values
from .converters import (
    clean_numeric_string,
    clean_text,
    is_date_like,
    is_null_value,
    parse_boolean,
    parse_date,
    parse_number,
)
from .detection import detect_column_type
from .models import (
    CleaningOptions,
    CleaningReport,
    CleanResult,
    ColumnQuality,
    ColumnTypeInfo,
    QualityReport,
)

__all__ = [
    # Entry points
    "clean_dataset",
    "collect_columns",
    "generate_quality_report",
    "handle_missing_values",
    "detect_column_type",
    # Converters
    "clean_numeric_string",
    "clean_text",
    "is_date_like",
    "is_null_value",
    "parse_boolean",
    "parse_date",
    "parse_number",
    # Models
    "CleaningOptions",
    "CleaningReport",
    "CleanResult",
    "ColumnQuality",
    "ColumnTypeInfo",
    "QualityReport",
]
