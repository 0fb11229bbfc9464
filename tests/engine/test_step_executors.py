"""Tests for the per-operation step executors."""

import pytest

from nl_analytics.core.enums import TimeInterval
from nl_analytics.engine.steps import (
    ExecutionContext,
    execute_aggregate,
    execute_filter,
    execute_group,
    execute_limit,
    execute_order,
    execute_statistical,
    execute_step,
    execute_window,
)
from nl_analytics.matching.intent import SentimentFilter
from nl_analytics.planning.models import (
    AggregateConfig,
    AggregationRequest,
    ComparisonFilter,
    FilterConfig,
    GroupConfig,
    Intent,
    LimitConfig,
    OrderConfig,
    StatisticalConfig,
    Step,
    WindowConfig,
)


@pytest.fixture
def ctx():
    return ExecutionContext(intent=Intent(original_query="test"))


@pytest.fixture
def rows():
    return [
        {"name": "a", "team": "red", "v": 3},
        {"name": "b", "team": "blue", "v": 1},
        {"name": "c", "team": "red", "v": 2},
    ]


class TestFilter:
    def test_semantic_filter_without_rating_column_is_skipped(self, rows, ctx):
        config = FilterConfig(semantic=SentimentFilter("negative", "bad", "<=", 2))
        assert execute_filter(rows, config, ctx) == rows

    def test_semantic_filter_on_score_column(self, ctx):
        data = [{"score": 5}, {"score": 1}, {"score": "n/a"}]
        config = FilterConfig(semantic=SentimentFilter("positive", "good", ">=", 4))
        assert execute_filter(data, config, ctx) == [{"score": 5}]

    def test_comparisons_drop_non_numeric_rows(self, ctx):
        data = [{"v": 5}, {"v": "x"}, {"v": "4"}, {"v": 1}]
        config = FilterConfig(comparisons=(ComparisonFilter("v", ">=", 4.0),))
        assert execute_filter(data, config, ctx) == [{"v": 5}, {"v": "4"}]

    def test_missing_filter_column(self, rows, ctx):
        config = FilterConfig(comparisons=(ComparisonFilter("price", ">", 1.0),))
        with pytest.raises(ValueError, match="Filter column not found in data: price"):
            execute_filter(rows, config, ctx)

    def test_missing_column_on_empty_rows_is_not_an_error(self, ctx):
        config = FilterConfig(comparisons=(ComparisonFilter("price", ">", 1.0),))
        assert execute_filter([], config, ctx) == []


class TestGroup:
    def test_tuple_keys_keep_original_values(self, ctx):
        data = [{"a": 1, "b": "x"}, {"a": 1, "b": "x"}, {"a": 2, "b": "x"}]
        out = execute_group(data, GroupConfig(columns=("a", "b")), ctx)
        assert out == [{"a": 1, "b": "x", "count": 2}, {"a": 2, "b": "x", "count": 1}]
        assert ctx.group_source == data

    def test_no_group_columns_pass_through(self, rows, ctx):
        assert execute_group(rows, GroupConfig(), ctx) == rows
        assert ctx.groups is None

    def test_time_interval_without_date_column_pass_through(self, rows, ctx):
        assert execute_group(rows, GroupConfig(time_interval=TimeInterval.MONTH), ctx) == rows

    def test_missing_group_column(self, rows, ctx):
        with pytest.raises(ValueError, match="Group column not found in data: region"):
            execute_group(rows, GroupConfig(columns=("region",)), ctx)

    def test_time_grouping_uses_first_aggregation(self):
        ctx = ExecutionContext(
            intent=Intent(original_query="x", aggregations=(AggregationRequest("max", "MAX"),))
        )
        data = [
            {"rating": 2, "review_date": "2024-01-03"},
            {"rating": 5, "review_date": "2024-01-09"},
            {"rating": 4, "review_date": "2024-02-11"},
        ]
        out = execute_group(data, GroupConfig(time_interval=TimeInterval.MONTH), ctx)
        assert out == [{"month": "2024-01", "max": 5.0}, {"month": "2024-02", "max": 4.0}]
        assert [key for key, _ in ctx.groups] == [{"month": "2024-01"}, {"month": "2024-02"}]


class TestAggregate:
    def test_summary_row(self, rows, ctx):
        out = execute_aggregate(rows, AggregateConfig(functions=("AVG", "SUM", "MAX", "MEDIAN")), ctx)
        assert out == [{"average": 2.0, "sum": 6.0, "max": 3.0, "median": 2.0, "column": "v"}]

    def test_per_group_after_group_step(self, rows, ctx):
        execute_group(rows, GroupConfig(columns=("team",)), ctx)
        out = execute_aggregate([], AggregateConfig(functions=("AVG",)), ctx)
        assert out == [
            {"team": "red", "average": 2.5, "count": 2},
            {"team": "blue", "average": 1.0, "count": 1},
        ]

    def test_mode_and_variance(self, ctx):
        data = [{"v": 2}, {"v": 2}, {"v": 4}]
        out = execute_aggregate(data, AggregateConfig(functions=("MODE", "VARIANCE")), ctx)
        assert out[0]["mode"] == 2.0
        assert out[0]["variance"] == pytest.approx(4 / 3)

    def test_correlation_pairs_first_two_numeric_columns(self, ctx):
        data = [{"x": 1, "y": 2}, {"x": 2, "y": 4}, {"x": 3, "y": 6}]
        out = execute_aggregate(data, AggregateConfig(functions=("CORRELATION", "COVARIANCE")), ctx)
        assert out[0]["correlation"] == pytest.approx(1.0)
        assert out[0]["covariance"] == pytest.approx(2.0)
        assert out[0]["column"] == "x"

    def test_correlation_needs_two_numeric_columns(self, rows, ctx):
        out = execute_aggregate(rows, AggregateConfig(functions=("CORRELATION",)), ctx)
        assert out[0]["correlation"] is None

    def test_empty_rows(self, ctx):
        assert execute_aggregate([], AggregateConfig(functions=("AVG",)), ctx) == []

    def test_no_numeric_column_pass_through(self, ctx):
        data = [{"name": "a"}, {"name": "b"}]
        assert execute_aggregate(data, AggregateConfig(functions=("AVG",)), ctx) == data


class TestWindow:
    @pytest.mark.parametrize(
        "function,key,expected",
        [
            ("RANK", "rank", [1, 2, 3]),
            ("DENSE_RANK", "dense_rank", [1, 2, 3]),
            ("ROW_NUMBER", "row_number", [1, 2, 3]),
            ("PERCENTILE", "percent_rank", [0.0, 0.5, 1.0]),
            ("PERCENT_RANK", "percent_rank", [0.0, 0.5, 1.0]),
            ("NTILE", "ntile", [1, 2, 3]),
            ("LAG", "lag_v", [None, 3, 2]),
            ("LEAD", "lead_v", [2, 1, None]),
        ],
    )
    def test_ranked_functions_order_descending_by_default(self, rows, ctx, function, key, expected):
        out = execute_window(rows, WindowConfig(function=function), ctx)
        assert [r["v"] for r in out] == [3, 2, 1]
        assert [r[key] for r in out] == expected

    def test_cumulative_functions_keep_input_order(self, rows, ctx):
        out = execute_window(rows, WindowConfig(function="RUNNING_TOTAL"), ctx)
        assert [r["running_total"] for r in out] == [3.0, 4.0, 6.0]
        out = execute_window(rows, WindowConfig(function="RUNNING_AVG"), ctx)
        assert [r["running_avg"] for r in out] == [3.0, 2.0, 2.0]
        out = execute_window(rows, WindowConfig(function="ROLLING_AVG"), ctx)
        assert [r["rolling_avg_7"] for r in out] == [3.0, 2.0, 2.0]

    def test_order_direction_from_intent(self, rows):
        ctx = ExecutionContext(intent=Intent(original_query="x", order_direction="ASC"))
        out = execute_window(rows, WindowConfig(function="RANK"), ctx)
        assert [r["v"] for r in out] == [1, 2, 3]

    def test_unknown_function(self, rows, ctx):
        with pytest.raises(ValueError, match="Unknown window function: MEDIAN_RANK"):
            execute_window(rows, WindowConfig(function="MEDIAN_RANK"), ctx)

    def test_empty_rows(self, ctx):
        assert execute_window([], WindowConfig(function="RANK"), ctx) == []


def test_statistical_percentile_filter(ctx):
    data = [{"v": i} for i in range(1, 11)]
    out = execute_statistical(data, StatisticalConfig(value=20, direction="top"), ctx)
    assert [r["v"] for r in out] == [9, 10]


def test_statistical_unknown_operation(rows, ctx):
    with pytest.raises(ValueError, match="Unknown statistical operation: zscore"):
        execute_statistical(rows, StatisticalConfig(name="zscore"), ctx)


def test_order_and_limit(rows, ctx):
    ordered = execute_order(rows, OrderConfig(direction="ASC"), ctx)
    assert [r["name"] for r in ordered] == ["b", "c", "a"]
    assert execute_limit(ordered, LimitConfig(value=2), ctx) == ordered[:2]


def test_execute_step_dispatches_on_config_type(rows, ctx):
    out = execute_step(rows, Step(config=LimitConfig(value=1), description="Limit to 1 results"), ctx)
    assert out == rows[:1]


def test_execute_step_unknown_config(rows, ctx):
    with pytest.raises(ValueError, match="No executor for operation config: str"):
        execute_step(rows, Step(config="bogus", description="?"), ctx)


def test_group_keeps_booleans_apart_from_numbers(ctx):
    data = [{"flag": True}, {"flag": 1}, {"flag": True}, {"flag": 0}, {"flag": False}]
    out = execute_group(data, GroupConfig(columns=("flag",)), ctx)
    assert out == [
        {"flag": True, "count": 2},
        {"flag": 1, "count": 1},
        {"flag": 0, "count": 1},
        {"flag": False, "count": 1},
    ]
    assert [type(r["flag"]) for r in out] == [bool, int, int, bool]
