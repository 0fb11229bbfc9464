"""Tests for descriptive statistics."""

import math

import pytest

from nl_analytics.stats.descriptive import (
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


class TestCentralTendency:
    def test_mean_ignores_non_numeric(self):
        assert mean([1, 2, 3, "x", None, True]) == 2.0

    def test_median_odd_and_even(self):
        assert median([5, 1, 3]) == 3.0
        assert median([1, 2, 3, 4]) == 2.5

    @pytest.mark.parametrize("func", [mean, median, mode])
    def test_empty_input_yields_none(self, func):
        assert func([]) is None

    def test_mode_first_to_reach_top_count_wins(self):
        assert mode(["x", "y", "y", "x"]) == "y"
        assert mode([None, None, "a"]) == "a"


class TestSpread:
    values = [2, 4, 4, 4, 5, 5, 7, 9]

    def test_sample_and_population_standard_deviation(self):
        assert standard_deviation(self.values) == pytest.approx(math.sqrt(32 / 7))
        assert standard_deviation(self.values, population=True) == pytest.approx(2.0)

    def test_variance(self):
        assert variance(self.values) == pytest.approx(32 / 7)
        assert variance(self.values, population=True) == pytest.approx(4.0)

    def test_single_value_has_zero_spread(self):
        assert standard_deviation([5]) == 0.0
        assert variance([5]) == 0.0

    def test_empty_spread_is_none(self):
        assert standard_deviation([]) is None
        assert variance([]) is None


class TestPercentile:
    def test_linear_interpolation(self):
        assert percentile([1, 3, 5], 50) == 3.0
        assert percentile([1, 2, 3, 4], 25) == 1.75
        assert percentile([10, 20], 0) == 10.0
        assert percentile([10, 20], 100) == 20.0

    def test_median_agrees_with_fiftieth_percentile(self):
        values = [7, 1, 9, 4, 4, 12]
        assert median(values) == percentile(values, 50)

    def test_monotonic_in_p(self):
        values = [3, 1, 4, 1, 5, 9, 2, 6]
        results = [percentile(values, p) for p in range(0, 101, 10)]
        assert results == sorted(results)

    @pytest.mark.parametrize("p", [-1, 101])
    def test_out_of_range(self, p):
        assert percentile([1, 2, 3], p) is None

    def test_empty(self):
        assert percentile([], 50) is None
        assert percentile(["a", None], 50) is None


def test_quartiles():
    q = quartiles([1, 2, 3, 4, 5])
    assert (q.q1, q.q2, q.q3, q.iqr) == (2.0, 3.0, 4.0, 2.0)


class TestOutliers:
    def test_iqr_fences(self):
        report = detect_outliers([1, 2, 9, 2, 1])
        assert report.outliers == [9.0]
        assert report.bounds == {"lower": -0.5, "upper": 3.5}

    def test_custom_multiplier(self):
        assert detect_outliers([1, 2, 9, 2, 1], multiplier=10).outliers == []

    def test_no_numbers(self):
        report = detect_outliers(["a", None])
        assert report.outliers == []
        assert report.bounds is None


class TestCorrelation:
    def test_perfect_positive_and_negative(self):
        assert correlation([1, 2, 3], [2, 4, 6]) == pytest.approx(1.0)
        assert correlation([1, 2, 3], [6, 4, 2]) == pytest.approx(-1.0)

    def test_zero_variance_is_zero(self):
        assert correlation([1, 1, 1], [1, 2, 3]) == 0.0

    @pytest.mark.parametrize(
        "a,b",
        [([1, 2, 3], [1, 2]), ([1], [1]), ([1, "x", None], [1, 2, 3])],
        ids=["length-mismatch", "single-pair", "one-numeric-pair"],
    )
    def test_insufficient_pairs(self, a, b):
        assert correlation(a, b) is None
        assert covariance(a, b) is None

    def test_non_numeric_pairs_are_skipped(self):
        assert correlation([1, "x", 3], [1, 2, 3]) == pytest.approx(1.0)

    def test_sample_covariance(self):
        assert covariance([1, 2, 3], [2, 4, 6]) == pytest.approx(2.0)


def test_describe():
    summary = describe([1, 2, 3, 4, "x", None])
    assert summary["count"] == 6
    assert summary["numeric_count"] == 4
    assert summary["unique"] == 6
    assert summary["min"] == 1.0
    assert summary["max"] == 4.0
    assert summary["range"] == 3.0
    assert summary["sum"] == 10.0
    assert summary["mean"] == 2.5
    assert summary["iqr"] == pytest.approx(1.5)


def test_describe_without_numbers():
    assert describe(["a", "a"]) == {"count": 2, "numeric_count": 0, "unique": 1}
