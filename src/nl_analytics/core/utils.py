"""Core utility functions shared by the cleaner, statistics and engine layers."""

from __future__ import annotations

import math
from typing import Any, Iterable, List, Optional, Tuple


def is_number(value: Any) -> bool:
    """Return True for real, finite-or-infinite numbers that are not booleans or NaN.

    Examples:
        >>> is_number(3), is_number(2.5), is_number(True), is_number("3")
        (True, True, False, False)
    """
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return not (isinstance(value, float) and math.isnan(value))
    return False


def to_float(value: Any) -> Optional[float]:
    """Coerce a value to float, returning None when it is not numeric.

    Numbers pass through, numeric strings are parsed, everything else
    (booleans, dates, None, free text) yields None.

    Examples:
        >>> to_float("4.5")
        4.5
        >>> to_float("four") is None
        True
    """
    if is_number(value):
        return float(value)
    if isinstance(value, str):
        try:
            parsed = float(value.strip())
        except ValueError:
            return None
        return None if math.isnan(parsed) else parsed
    return None


def to_float_or_zero(value: Any) -> float:
    """Like :func:`to_float`, but non-numeric values count as 0."""
    parsed = to_float(value)
    return 0.0 if parsed is None else parsed


def group_key(value: Any) -> Tuple[bool, Any]:
    """Hashable bucket key that keeps booleans apart from equal numbers.

    ``True`` and ``1`` land in different buckets; ``1`` and ``1.0`` share one.

    Examples:
        >>> group_key(True) == group_key(1), group_key(1) == group_key(1.0)
        (False, True)
    """
    return (isinstance(value, bool), value)


def numeric_values(values: Iterable[Any]) -> List[float]:
    """Keep only real numbers (see :func:`is_number`) from an iterable."""
    return [float(v) for v in values if is_number(v)]


__all__ = ["is_number", "to_float", "to_float_or_zero", "group_key", "numeric_values"]
