"""Descriptive statistics over value sequences.

Non-numeric entries (None, text, booleans, dates, NaN) are ignored. Math
edge cases never raise: empty input yields None, a single value has zero
spread, and zero-variance series correlate at 0.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from nl_analytics.core.utils import numeric_values, to_float

DEFAULT_OUTLIER_MULTIPLIER = 1.5


@dataclass(frozen=True)
class Quartiles:
    """First, second and third quartiles plus the interquartile range."""

    q1: Optional[float]
    q2: Optional[float]
    q3: Optional[float]
    iqr: Optional[float]


@dataclass(frozen=True)
class OutlierReport:
    """Values outside ``[Q1 - k*IQR, Q3 + k*IQR]``."""

    outliers: List[float]
    lower: Optional[float] = None
    upper: Optional[float] = None
    quartiles: Optional[Quartiles] = None

    @property
    def bounds(self) -> Optional[Dict[str, float]]:
        if self.lower is None or self.upper is None:
            return None
        return {"lower": self.lower, "upper": self.upper}


def mean(values: Sequence[Any]) -> Optional[float]:
    nums = numeric_values(values or [])
    if not nums:
        return None
    return float(np.mean(nums))


def median(values: Sequence[Any]) -> Optional[float]:
    nums = numeric_values(values or [])
    if not nums:
        return None
    return float(np.median(nums))


def mode(values: Sequence[Any]) -> Any:
    """Most frequent non-null value; the first value to reach the top count wins."""
    counts: Dict[Any, int] = {}
    best = None
    best_count = 0
    for val in values or []:
        if val is None:
            continue
        counts[val] = counts.get(val, 0) + 1
        if counts[val] > best_count:
            best_count = counts[val]
            best = val
    return best


def standard_deviation(values: Sequence[Any], population: bool = False) -> Optional[float]:
    """Standard deviation with the sample (n-1) divisor unless ``population``.

    Fewer than two numeric values give 0; empty input gives None.
    """
    if not values:
        return None
    nums = numeric_values(values)
    if len(nums) < 2:
        return 0.0
    return float(np.std(nums, ddof=0 if population else 1))


def variance(values: Sequence[Any], population: bool = False) -> Optional[float]:
    if not values:
        return None
    nums = numeric_values(values)
    if len(nums) < 2:
        return 0.0
    return float(np.var(nums, ddof=0 if population else 1))


def percentile(values: Sequence[Any], p: float) -> Optional[float]:
    """Linear-interpolation percentile at rank ``p/100 * (n-1)``.

    Returns None for empty input or ``p`` outside ``[0, 100]``.

    Examples:
        >>> percentile([1, 3, 5], 50)
        3.0
        >>> percentile([1, 2, 3, 4], 25)
        1.75
    """
    if not values or p < 0 or p > 100:
        return None
    nums = numeric_values(values)
    if not nums:
        return None
    return float(np.percentile(nums, p))


def quartiles(values: Sequence[Any]) -> Quartiles:
    q1 = percentile(values, 25)
    q3 = percentile(values, 75)
    iqr = q3 - q1 if q1 is not None and q3 is not None else None
    return Quartiles(q1=q1, q2=percentile(values, 50), q3=q3, iqr=iqr)


def detect_outliers(
    values: Sequence[Any], multiplier: float = DEFAULT_OUTLIER_MULTIPLIER
) -> OutlierReport:
    """Flag values outside the IQR fences.

    Examples:
        >>> detect_outliers([1, 2, 9, 2, 1]).outliers
        [9.0]
    """
    nums = numeric_values(values or [])
    if not nums:
        return OutlierReport(outliers=[])
    q = quartiles(nums)
    lower = q.q1 - multiplier * q.iqr
    upper = q.q3 + multiplier * q.iqr
    return OutlierReport(
        outliers=[v for v in nums if v < lower or v > upper],
        lower=lower,
        upper=upper,
        quartiles=q,
    )


def _paired(values1: Sequence[Any], values2: Sequence[Any]) -> Optional[np.ndarray]:
    if values1 is None or values2 is None or len(values1) != len(values2) or len(values1) < 2:
        return None
    pairs = []
    for a, b in zip(values1, values2):
        fa, fb = to_float(a), to_float(b)
        if fa is not None and fb is not None:
            pairs.append((fa, fb))
    if len(pairs) < 2:
        return None
    return np.array(pairs, dtype=float)


def correlation(values1: Sequence[Any], values2: Sequence[Any]) -> Optional[float]:
    """Pearson correlation coefficient.

    None when lengths differ or fewer than two pairs exist; 0 when either
    series has zero variance.
    """
    arr = _paired(values1, values2)
    if arr is None:
        return None
    d1 = arr[:, 0] - arr[:, 0].mean()
    d2 = arr[:, 1] - arr[:, 1].mean()
    denom1 = float(np.sum(d1 * d1))
    denom2 = float(np.sum(d2 * d2))
    if denom1 == 0 or denom2 == 0:
        return 0.0
    return float(np.sum(d1 * d2) / np.sqrt(denom1 * denom2))


def covariance(values1: Sequence[Any], values2: Sequence[Any]) -> Optional[float]:
    """Sample covariance (n-1 divisor); same pairing rules as :func:`correlation`."""
    arr = _paired(values1, values2)
    if arr is None:
        return None
    return float(np.cov(arr[:, 0], arr[:, 1], ddof=1)[0, 1])


def describe(values: Sequence[Any]) -> Dict[str, Any]:
    """Summary statistics of a column's values."""
    values = list(values or [])
    nums = numeric_values(values)
    unique = len({repr(v) for v in values})
    if not nums:
        return {"count": len(values), "numeric_count": 0, "unique": unique}

    q = quartiles(nums)
    lo, hi = min(nums), max(nums)
    return {
        "count": len(values),
        "numeric_count": len(nums),
        "unique": unique,
        "min": lo,
        "max": hi,
        "range": hi - lo,
        "sum": float(sum(nums)),
        "mean": mean(nums),
        "median": median(nums),
        "mode": mode(nums),
        "std": standard_deviation(nums),
        "variance": variance(nums),
        "q1": q.q1,
        "q3": q.q3,
        "iqr": q.iqr,
    }


__all__ = [
    "DEFAULT_OUTLIER_MULTIPLIER",
    "Quartiles",
    "OutlierReport",
    "mean",
    "median",
    "mode",
    "standard_deviation",
    "variance",
    "percentile",
    "quartiles",
    "detect_outliers",
    "correlation",
    "covariance",
    "describe",
]
