"""Data cleaning configuration constants.

This module centralizes the null tokens, recognizer patterns and type
decision thresholds used by the cleaner. Adjust these constants to tune type
inference based on real data patterns.

Decision order (first satisfied wins):
    date > email > url > boolean > id > integer > number > category > text
"""

from __future__ import annotations

import re

from nl_analytics.core.enums import ColumnType

# ============================================================================
# NULL TOKENS
# ============================================================================

# Compared case-insensitively after trimming
NULL_VALUES = (
    "",
    "null",
    "none",
    "n/a",
    "na",
    "nan",
    "-",
    "--",
    "undefined",
    "missing",
    "#n/a",
    "#ref!",
    "#value!",
)


# ============================================================================
# RECOGNIZERS
# ============================================================================

CURRENCY_SYMBOLS = ("$", "€", "£", "¥", "₹", "₽", "USD", "EUR", "GBP")

DATE_PATTERNS = (
    (re.compile(r"^\d{4}-\d{2}-\d{2}$"), "YYYY-MM-DD"),
    (re.compile(r"^\d{4}/\d{2}/\d{2}$"), "YYYY/MM/DD"),
    (re.compile(r"^\d{2}-\d{2}-\d{4}$"), "DD-MM-YYYY"),
    (re.compile(r"^\d{2}/\d{2}/\d{4}$"), "DD/MM/YYYY"),
    (re.compile(r"^\d{1,2}/\d{1,2}/\d{2,4}$"), "M/D/YYYY"),
    (re.compile(r"^[A-Za-z]{3}\s+\d{1,2},?\s+\d{4}$"), "Mon DD, YYYY"),
    (re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}"), "ISO"),
)

BOOLEAN_TOKENS = ("true", "false", "yes", "no", "1", "0", "y", "n")
TRUE_TOKENS = ("true", "yes", "1", "y", "on")
FALSE_TOKENS = ("false", "no", "0", "n", "off")

EMAIL_RE = re.compile(r"^[\w.-]+@[\w.-]+\.\w+$")
URL_RE = re.compile(r"^https?://", re.IGNORECASE)
OBJECT_ID_RE = re.compile(r"^[a-f0-9]{24}$", re.IGNORECASE)
UUID_LIKE_RE = re.compile(r"^[a-f0-9-]{36}$", re.IGNORECASE)


# ============================================================================
# TYPE THRESHOLDS
# ============================================================================

DEFAULT_SAMPLE_SIZE = 100

# Fraction of the sample that must match; checked in this order
TYPE_THRESHOLDS = (
    (ColumnType.DATE, 0.8),
    (ColumnType.EMAIL, 0.8),
    (ColumnType.URL, 0.8),
    (ColumnType.BOOLEAN, 0.8),
    (ColumnType.ID, 0.8),
    (ColumnType.INTEGER, 0.8),
    (ColumnType.NUMBER, 0.7),
)

CATEGORY_MAX_UNIQUE_RATIO = 0.3
CATEGORY_MIN_SAMPLE = 10
TEXT_CONFIDENCE = 0.5


# ============================================================================
# TEXT NORMALIZATION
# ============================================================================

HTML_ENTITIES = (
    ("&amp;", "&"),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&#39;", "'"),
    ("&nbsp;", " "),
)

EMOJI_TOKENS = (
    ("👍", "[thumbs_up]"),
    ("👎", "[thumbs_down]"),
    ("❤️", "[heart]"),
    ("⭐", "[star]"),
    ("😀", "[happy]"),
    ("😢", "[sad]"),
    ("😡", "[angry]"),
)


# ============================================================================
# QUALITY REPORT
# ============================================================================

QUALITY_NULL_PERCENT_LIMIT = 50.0
QUALITY_NULL_PENALTY = 5
QUALITY_MIN_CONFIDENCE = 0.5
QUALITY_CONFIDENCE_PENALTY = 3


def get_type_threshold(column_type: ColumnType) -> float:
    """Get the sample fraction a recognizer must reach for a column type.

    Raises:
        ValueError: If the type is not decided by a recognizer threshold.

    Examples:
        >>> get_type_threshold(ColumnType.NUMBER)
        0.7
    """
    for ctype, threshold in TYPE_THRESHOLDS:
        if ctype == column_type:
            return threshold
    raise ValueError(f"No threshold configured for column type: {column_type}")
