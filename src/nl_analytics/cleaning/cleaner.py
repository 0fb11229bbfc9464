"""Dataset cleaning: type inference, null normalization and value conversion."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

from nl_analytics.core.enums import ColumnType
from nl_analytics.stats.descriptive import mean, median, mode
from nl_analytics.core.utils import numeric_values
from .config import (
    QUALITY_CONFIDENCE_PENALTY,
    QUALITY_MIN_CONFIDENCE,
    QUALITY_NULL_PENALTY,
    QUALITY_NULL_PERCENT_LIMIT,
)
from .converters import clean_text, is_null_value, parse_boolean, parse_date, parse_number
from .detection import detect_column_type
from .models import (
    CleaningOptions,
    CleaningReport,
    CleanResult,
    ColumnQuality,
    ColumnTypeInfo,
    QualityReport,
    Row,
)

logger = logging.getLogger(__name__)

_NUMERIC_TYPES = (ColumnType.NUMBER, ColumnType.INTEGER, ColumnType.FLOAT)
_TEXT_TYPES = (ColumnType.TEXT, ColumnType.CATEGORY)


def collect_columns(rows: Sequence[Mapping[str, Any]]) -> List[str]:
    """Return the union of row keys in first-seen order."""
    seen: Dict[str, None] = {}
    for row in rows:
        for key in row.keys():
            if key not in seen:
                seen[key] = None
    return list(seen)


def _convert(value: Any, column_type: ColumnType) -> Any:
    if column_type in _NUMERIC_TYPES:
        number = parse_number(value)
        if number is None:
            return value
        if column_type == ColumnType.INTEGER and isinstance(number, float) and number.is_integer():
            return int(number)
        return number
    if column_type == ColumnType.DATE:
        parsed = parse_date(value)
        return value if parsed is None else parsed
    if column_type == ColumnType.BOOLEAN:
        flag = parse_boolean(value)
        return value if flag is None else flag
    return value


def _prepare(value: Any, opts: CleaningOptions) -> Any:
    if opts.clean_strings and isinstance(value, str):
        return clean_text(value)
    return value


def clean_dataset(
    rows: Sequence[Mapping[str, Any]], options: Optional[CleaningOptions] = None
) -> CleanResult:
    """Infer column types and normalize every cell of a dataset.

    Every output row carries the union of input keys (missing keys become
    None). Null-like cells become None; other cells are converted according to
    the inferred column type, and text/category values are normalized.

    Strings are text-normalized before types are inferred, so markup around
    a value (``"<b>5</b>"``) does not hide its type. A conversion is counted
    only when a cell's Python type changes, so running the cleaner on its own
    output reports zero conversions.

    Args:
        rows: Input rows.
        options: Cleaning switches; defaults to everything enabled.

    Returns:
        CleanResult with cleaned rows, per-column types and a report.
    """
    opts = options or CleaningOptions()
    if not rows:
        return CleanResult(cleaned_rows=[], column_types={}, report=CleaningReport())

    columns = collect_columns(rows)
    report = CleaningReport(rows=len(rows), columns=len(columns))
    column_types: Dict[str, ColumnTypeInfo] = {}

    if opts.infer_types:
        for col in columns:
            info = detect_column_type(
                (_prepare(row.get(col), opts) for row in rows),
                sample_size=opts.sample_size,
                null_values=opts.null_values,
            )
            column_types[col] = info
            report.columns_analyzed[col] = info
        logger.debug(
            "Inferred column types: %s",
            {c: t.type.value for c, t in column_types.items()},
        )

    cleaned: List[Row] = []
    for row in rows:
        out: Row = {}
        for col in columns:
            raw = row.get(col)

            if opts.normalize_nulls and is_null_value(raw, opts.null_values):
                out[col] = None
                report.nulls_found += 1
                continue

            value = _prepare(raw, opts)
            info = column_types.get(col)
            if opts.convert_types and info is not None and info.type not in _TEXT_TYPES:
                converted = _convert(value, info.type)
                if type(converted) is not type(raw):
                    report.type_conversions += 1
                value = converted

            out[col] = value
        cleaned.append(out)

    logger.debug(
        "Cleaned %d rows x %d columns: %d nulls, %d conversions",
        report.rows,
        report.columns,
        report.nulls_found,
        report.type_conversions,
    )
    return CleanResult(cleaned_rows=cleaned, column_types=column_types, report=report)


def handle_missing_values(
    rows: Sequence[Mapping[str, Any]], strategies: Mapping[str, Any]
) -> List[Row]:
    """Impute or drop missing values column by column.

    Args:
        rows: Input rows.
        strategies: ``{column: strategy}`` where strategy is ``"mean"``,
            ``"median"``, ``"mode"``, ``"drop"`` or a literal fill value.

    Returns:
        New rows; rows with a null in a ``"drop"`` column are removed.
    """
    if not rows:
        return []

    columns = collect_columns(rows)
    col_stats: Dict[str, Dict[str, Any]] = {}
    for col in strategies:
        if col not in columns:
            raise KeyError(f"Cannot impute unknown column: {col}")
        present = [r.get(col) for r in rows if not is_null_value(r.get(col))]
        nums = numeric_values(present)
        col_stats[col] = {"mean": mean(nums), "median": median(nums), "mode": mode(present)}

    result: List[Row] = []
    for row in rows:
        new_row = dict(row)
        drop = False
        for col, strategy in strategies.items():
            if not is_null_value(row.get(col)):
                continue
            if strategy == "drop":
                drop = True
            elif strategy in ("mean", "median", "mode"):
                new_row[col] = col_stats[col][strategy]
            else:
                new_row[col] = strategy
        if not drop:
            result.append(new_row)
    return result


def generate_quality_report(rows: Sequence[Mapping[str, Any]]) -> QualityReport:
    """Profile nulls, uniqueness and type consistency per column."""
    if not rows:
        return QualityReport(
            total_rows=0, total_columns=0, overall_quality=0, issues=["Dataset is empty"]
        )

    columns = collect_columns(rows)
    report = QualityReport(total_rows=len(rows), total_columns=len(columns))

    for col in columns:
        values = [row.get(col) for row in rows]
        present = [v for v in values if not is_null_value(v)]
        null_count = len(values) - len(present)
        null_percent = null_count / len(values) * 100
        unique = len({repr(v) for v in present})
        type_info = detect_column_type(values)

        report.columns[col] = ColumnQuality(
            type=type_info.type,
            type_confidence=type_info.confidence,
            null_count=null_count,
            null_percent=null_percent,
            unique_values=unique,
            unique_ratio=unique / len(present) if present else None,
        )

        if null_percent > QUALITY_NULL_PERCENT_LIMIT:
            report.issues.append(f'Column "{col}" has {null_percent:.0f}% missing values')
            report.overall_quality -= QUALITY_NULL_PENALTY
        if type_info.confidence < QUALITY_MIN_CONFIDENCE:
            report.issues.append(f'Column "{col}" has inconsistent data types')
            report.overall_quality -= QUALITY_CONFIDENCE_PENALTY

    report.overall_quality = max(0, report.overall_quality)
    return report


__all__ = [
    "collect_columns",
    "clean_dataset",
    "handle_missing_values",
    "generate_quality_report",
]
