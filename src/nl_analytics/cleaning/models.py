"""Data cleaning models.

This module defines the structures produced by a cleaning pass:
- ColumnTypeInfo: Inferred type of one column
- CleaningOptions: Switches for a cleaning pass
- CleaningReport: Tallies of what the pass did
- CleanResult: Cleaned rows plus types and report
- ColumnQuality, QualityReport: Data quality profile
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from nl_analytics.core.enums import ColumnType
from .config import DEFAULT_SAMPLE_SIZE, NULL_VALUES

Row = Dict[str, Any]


@dataclass(frozen=True)
class ColumnTypeInfo:
    """Inferred type of a column.

    Attributes:
        type: Winning column type.
        confidence: Fraction of the sample that matched the winning recognizer.
    """

    type: ColumnType
    confidence: float

    def __post_init__(self) -> None:
        """Validate field constraints."""
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"Invalid confidence: {self.confidence}. Must be within [0, 1].")

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type.value, "confidence": self.confidence}


@dataclass(frozen=True)
class CleaningOptions:
    """Switches for :func:`nl_analytics.cleaning.clean_dataset`."""

    infer_types: bool = True
    normalize_nulls: bool = True
    clean_strings: bool = True
    convert_types: bool = True
    sample_size: int = DEFAULT_SAMPLE_SIZE
    null_values: Sequence[str] = NULL_VALUES


@dataclass
class CleaningReport:
    """What a cleaning pass found and changed.

    Attributes:
        rows: Number of input rows.
        columns: Number of distinct columns across all rows.
        nulls_found: Cells recognized as null-like.
        type_conversions: Cells whose Python type changed during conversion.
        columns_analyzed: Inferred type per column.
    """

    rows: int = 0
    columns: int = 0
    nulls_found: int = 0
    type_conversions: int = 0
    columns_analyzed: Dict[str, ColumnTypeInfo] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rows": self.rows,
            "columns": self.columns,
            "nulls_found": self.nulls_found,
            "type_conversions": self.type_conversions,
            "columns_analyzed": {k: v.to_dict() for k, v in self.columns_analyzed.items()},
        }


@dataclass
class CleanResult:
    """Output of a cleaning pass."""

    cleaned_rows: List[Row]
    column_types: Dict[str, ColumnTypeInfo]
    report: CleaningReport


@dataclass(frozen=True)
class ColumnQuality:
    """Quality profile of one column."""

    type: ColumnType
    type_confidence: float
    null_count: int
    null_percent: float
    unique_values: int
    unique_ratio: Optional[float]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "type_confidence": self.type_confidence,
            "null_count": self.null_count,
            "null_percent": f"{self.null_percent:.2f}%",
            "unique_values": self.unique_values,
            "unique_ratio": None if self.unique_ratio is None else round(self.unique_ratio, 2),
        }


@dataclass
class QualityReport:
    """Dataset-level data quality summary.

    Attributes:
        total_rows: Number of rows profiled.
        total_columns: Number of distinct columns.
        columns: Per-column quality profile.
        overall_quality: Score out of 100, reduced for each issue found.
        issues: Human-readable issue descriptions.

    Examples:
        >>> report = generate_quality_report(rows)
        >>> report.overall_quality
        95
        >>> report.issues
        ['Column "comment" has 60% missing values']
    """

    total_rows: int
    total_columns: int
    columns: Dict[str, ColumnQuality] = field(default_factory=dict)
    overall_quality: int = 100
    issues: List[str] = field(default_factory=list)

    def is_empty(self) -> bool:
        return self.total_rows == 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_rows": self.total_rows,
            "total_columns": self.total_columns,
            "columns": {k: v.to_dict() for k, v in self.columns.items()},
            "overall_quality": self.overall_quality,
            "issues": list(self.issues),
        }
