"""Value recognizers and parsers used by the cleaner."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, Iterable, Optional
import math
import re
import warnings

import pandas as pd

from .config import (
    CURRENCY_SYMBOLS,
    DATE_PATTERNS,
    EMOJI_TOKENS,
    FALSE_TOKENS,
    HTML_ENTITIES,
    NULL_VALUES,
    TRUE_TOKENS,
)

_NULL_SET = frozenset(NULL_VALUES)
_WHITESPACE_RE = re.compile(r"\s+")
_TAG_RE = re.compile(r"<[^>]*>")
_DIGITS_ONLY_RE = re.compile(r"^\d+$")
_HAS_DIGIT_RE = re.compile(r"\d")
_YMD_SLASH_RE = re.compile(r"^(\d{4})/(\d{1,2})/(\d{1,2})$")
_MDY_RE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{2,4})$")
_DMY_RE = re.compile(r"^(\d{1,2})-(\d{1,2})-(\d{4})$")
_MON_DD_YYYY_FORMATS = ("%b %d, %Y", "%b %d %Y")


def is_null_value(value: Any, null_values: Optional[Iterable[str]] = None) -> bool:
    """Return True if a value represents missing data.

    None, float NaN, and strings matching a null token (case-insensitive,
    trimmed) are null-like.

    Examples:
        >>> is_null_value(" N/A "), is_null_value("#N/A"), is_null_value(0)
        (True, True, False)
    """
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    if isinstance(value, str):
        tokens = _NULL_SET if null_values is None else {str(n).lower() for n in null_values}
        return value.strip().lower() in tokens
    return False


def clean_numeric_string(text: str) -> str:
    """Strip currency symbols, thousands separators and a trailing ``%``.

    Parenthesized numbers become negative.

    Examples:
        >>> clean_numeric_string("$1,234.50")
        '1234.50'
        >>> clean_numeric_string("(42)")
        '-42'
    """
    cleaned = str(text).strip()
    for symbol in CURRENCY_SYMBOLS:
        cleaned = cleaned.replace(symbol, "")
    cleaned = cleaned.replace(",", "")
    cleaned = cleaned.strip()
    if cleaned.endswith("%"):
        cleaned = cleaned[:-1]
    if cleaned.startswith("(") and cleaned.endswith(")"):
        cleaned = "-" + cleaned[1:-1]
    return cleaned.strip()


def parse_numeric_string(text: str) -> Optional[float]:
    """Parse an already-cleaned numeric string; None unless it is a finite number."""
    if not text or "_" in text:
        return None
    try:
        parsed = float(text)
    except ValueError:
        return None
    return parsed if math.isfinite(parsed) else None


def _to_naive(dt: datetime) -> datetime:
    if dt.tzinfo is not None:
        return dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


def _parse_with_pandas(text: str) -> Optional[datetime]:
    """Generic date parsing fallback for free-form strings."""
    with warnings.catch_warnings():
        warnings.simplefilter("ignore")
        try:
            ts = pd.to_datetime(text, errors="coerce")
        except (ValueError, TypeError, OverflowError):
            return None
    if ts is None or pd.isna(ts):
        return None
    return _to_naive(ts.to_pydatetime())


def _accepts_generic_parse(text: str) -> bool:
    # Bare numbers such as "2024" or "4.5" are not dates
    if _DIGITS_ONLY_RE.match(text):
        return False
    if parse_numeric_string(clean_numeric_string(text)) is not None:
        return False
    return bool(_HAS_DIGIT_RE.search(text))


def is_date_like(value: Any) -> bool:
    """Return True if a value is a date or a string that looks like one."""
    if isinstance(value, (datetime, date)):
        return True
    if not isinstance(value, str):
        return False
    text = value.strip()
    for pattern, _fmt in DATE_PATTERNS:
        if pattern.match(text):
            return True
    if not _accepts_generic_parse(text):
        return False
    return _parse_with_pandas(text) is not None


def parse_date(value: Any) -> Optional[datetime]:
    """Parse a date value into a naive ``datetime``.

    Tries ISO-8601 first, then ``YYYY/MM/DD``, ``M/D/YYYY`` (two-digit years
    pivot at 50), ``DD-MM-YYYY``, ``Mon DD, YYYY`` and finally a generic
    parser that rejects bare numbers.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not isinstance(value, str):
        return None

    text = value.strip()
    iso_text = text[:-1] + "+00:00" if text.endswith("Z") else text
    try:
        return _to_naive(datetime.fromisoformat(iso_text))
    except ValueError:
        pass

    try:
        m = _YMD_SLASH_RE.match(text)
        if m:
            return datetime(int(m.group(1)), int(m.group(2)), int(m.group(3)))
        m = _MDY_RE.match(text)
        if m:
            year = int(m.group(3))
            if year < 100:
                year += 1900 if year > 50 else 2000
            return datetime(year, int(m.group(1)), int(m.group(2)))
        m = _DMY_RE.match(text)
        if m:
            return datetime(int(m.group(3)), int(m.group(2)), int(m.group(1)))
    except ValueError:
        # Out-of-range components; let the generic parser have a go
        pass

    for fmt in _MON_DD_YYYY_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue

    if not _accepts_generic_parse(text):
        return None
    return _parse_with_pandas(text)


def parse_number(value: Any) -> Optional[float]:
    """Parse a number, tolerating currency, separators, ``%`` and ``(neg)``."""
    if value is None or value == "" or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return None if isinstance(value, float) and math.isnan(value) else value
    if isinstance(value, (datetime, date)):
        return None
    return parse_numeric_string(clean_numeric_string(str(value)))


def parse_boolean(value: Any) -> Optional[bool]:
    """Parse ``true/false/yes/no/1/0/y/n/on/off`` (case-insensitive)."""
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return value
    token = str(value).strip().lower()
    if token in TRUE_TOKENS:
        return True
    if token in FALSE_TOKENS:
        return False
    return None


def clean_text(value: Any) -> Optional[str]:
    """Normalize free text.

    - Collapse whitespace runs and trim
    - Decode a small set of HTML entities
    - Strip HTML tags
    - Replace a handful of emoji with bracketed tokens

    Returns None when nothing is left.
    """
    if value is None:
        return None
    text = _WHITESPACE_RE.sub(" ", str(value)).strip()
    for entity, replacement in HTML_ENTITIES:
        text = text.replace(entity, replacement)
    text = _TAG_RE.sub("", text)
    for emoji, token in EMOJI_TOKENS:
        text = text.replace(emoji, token)
    return text or None


__all__ = [
    "is_null_value",
    "clean_numeric_string",
    "parse_numeric_string",
    "is_date_like",
    "parse_date",
    "parse_number",
    "parse_boolean",
    "clean_text",
]
