"""Statistics and window-function library.

Pure functions over value sequences and row sequences:

- **Descriptive**: mean, median, mode, standard_deviation, variance,
  percentile, quartiles, detect_outliers, correlation, covariance, describe
- **Window**: row_number, rank, dense_rank, percent_rank, lag, lead,
  running_total, running_average, rolling_average, ntile
- **Grouping**: time_bucket_key, group_by_time_interval, grouped_statistics,
  filter_by_percentile, compute_correlation, value_counts

Math edge cases return None/0 sentinels instead of raising.

Usage:
    >>> from nl_analytics.stats import median, percentile
    >>> median([1, 3, 5]), percentile([1, 3, 5], 50)
    (3.0, 3.0)
"""

from __future__ import annotations

from .descriptive import (
    OutlierReport,
    Quartiles,
    correlation,
    covariance,
    describe,
    detect_outliers,
    mean,
    median,
    mode,
    percentile,
    quartiles,
    standard_deviation,
    variance,
)
from .grouping import (
    compute_correlation,
    compute_stat,
    filter_by_percentile,
    group_by_time_interval,
    grouped_statistics,
    time_bucket_key,
    value_counts,
)
from .window import (
    dense_rank,
    lag,
    lead,
    ntile,
    percent_rank,
    rank,
    rolling_average,
    row_number,
    running_average,
    running_total,
    sort_rows,
)

__all__ = [
    # Descriptive
    "OutlierReport",
    "Quartiles",
    "correlation",
    "covariance",
    "describe",
    "detect_outliers",
    "mean",
    "median",
    "mode",
    "percentile",
    "quartiles",
    "standard_deviation",
    "variance",
    # Window
    "dense_rank",
    "lag",
    "lead",
    "ntile",
    "percent_rank",
    "rank",
    "rolling_average",
    "row_number",
    "running_average",
    "running_total",
    "sort_rows",
    # Grouping
    "compute_correlation",
    "compute_stat",
    "filter_by_percentile",
    "group_by_time_interval",
    "grouped_statistics",
    "time_bucket_key",
    "value_counts",
]
