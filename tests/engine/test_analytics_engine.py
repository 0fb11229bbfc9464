"""End-to-end tests for the analytics orchestrator."""

from datetime import datetime

import pytest

from nl_analytics.core.enums import Complexity
from nl_analytics.engine import AnalyticsEngine, SessionStore
from nl_analytics.planning.models import ExecutionPlan, Intent, Step, WindowConfig
from nl_analytics.planning.plan import create_execution_plan


def _steps(result):
    return [entry.step for entry in result.execution_log]


class TestExecuteAnalytics:
    @pytest.mark.parametrize("data", [[], None])
    def test_no_data(self, engine, reviews_schema, data):
        plan = engine.analyze_query("average rating", reviews_schema).plan
        result = engine.execute_analytics(data, plan)
        assert result.to_dict() == {
            "success": False,
            "error": "No data provided",
            "data": [],
            "execution_log": [],
        }

    def test_average_rating_per_month(self, engine, reviews_schema, review_rows):
        analysis = engine.analyze_query("average rating per month", reviews_schema, "file")
        result = engine.execute_analytics(review_rows, analysis.plan)

        assert result.success
        assert result.data == [
            {"month": "2023-12", "average": 3.0, "count": 2},
            {"month": "2024-01", "average": 5.0, "count": 1},
            {"month": "2024-02", "average": 4.0, "count": 2},
        ]
        assert _steps(result) == [
            "Data Cleaning",
            "Select columns: rating",
            "Group by time interval: month",
            "Calculate: AVG",
        ]
        assert [e.row_count for e in result.execution_log] == [None, 5, 3, 3]
        assert result.insights == [
            "Found 3 results",
            "average: avg=4.00, min=3, max=5",
            "Trend: +33.3% change from first to last period",
        ]
        assert result.complexity == Complexity.MODERATE

    def test_cleaning_entry_carries_report(self, engine, reviews_schema, review_rows):
        plan = engine.analyze_query("show ratings", reviews_schema).plan
        result = engine.execute_analytics(review_rows, plan)

        cleaning = result.execution_log[0].to_dict()
        assert cleaning["step"] == "Data Cleaning"
        assert cleaning["result"]["rows"] == 5
        assert cleaning["result"]["type_conversions"] == 10
        assert result.data[0]["created_at"] == datetime(2023, 12, 5)

    def test_input_rows_are_not_modified(self, engine, reviews_schema, review_rows):
        plan = engine.analyze_query("rank ratings", reviews_schema).plan
        engine.execute_analytics(review_rows, plan)
        assert review_rows[0] == {
            "rating": "4",
            "created_at": "2023-12-05",
            "author": "ann",
            "content": "Works well",
        }

    def test_comparison_filter(self, engine, reviews_schema, review_rows):
        plan = engine.analyze_query("rating above 3", reviews_schema).plan
        result = engine.execute_analytics(review_rows, plan)
        assert [r["rating"] for r in result.data] == [4, 5, 5]
        assert _steps(result)[-1] == "Filter rating > 3"

    def test_sentiment_filter_uses_rating_column(self, engine, reviews_schema, review_rows):
        plan = engine.analyze_query("harsh reviews", reviews_schema).plan
        result = engine.execute_analytics(review_rows, plan)
        assert [r["author"] for r in result.data] == ["bob"]

    def test_top_n(self, engine, reviews_schema, review_rows):
        plan = engine.analyze_query("top 2 ratings", reviews_schema).plan
        result = engine.execute_analytics(review_rows, plan)
        assert [r["author"] for r in result.data] == ["cid", "eve"]
        assert _steps(result)[-2:] == ["Order by DESC", "Limit to 2 results"]

    def test_rank_window(self, engine, reviews_schema, review_rows):
        plan = engine.analyze_query("rank ratings", reviews_schema).plan
        result = engine.execute_analytics(review_rows, plan)
        assert [(r["rating"], r["rank"]) for r in result.data] == [
            (5, 1),
            (5, 1),
            (4, 3),
            (3, 4),
            (2, 5),
        ]

    def test_percentile_filter(self, engine, reviews_schema, review_rows):
        plan = engine.analyze_query("top 40% of ratings", reviews_schema).plan
        result = engine.execute_analytics(review_rows, plan)
        assert [r["author"] for r in result.data] == ["cid", "eve"]

    def test_group_by_column_and_count(self, engine, reviews_schema, review_rows):
        rows = review_rows + [
            {"rating": "1", "created_at": "2024-03-01", "author": "ann", "content": "Broke"}
        ]
        plan = engine.analyze_query("count reviews by author", reviews_schema).plan
        result = engine.execute_analytics(rows, plan)
        assert result.data[0] == {"author": "ann", "count": 2}
        assert len(result.data) == 5

    def test_missing_group_column_fails_with_partial_results(self, engine, review_rows):
        plan = create_execution_plan(Intent(original_query="by region", group_by=("region",)))
        result = engine.execute_analytics(review_rows, plan)

        assert result.success is False
        assert result.error == "Group column not found in data: region"
        assert _steps(result) == ["Data Cleaning", "Select all columns"]
        assert len(result.data) == 5
        assert result.data[0]["rating"] == 4
        assert result.insights == []

    def test_unknown_window_function_fails(self, engine, review_rows):
        intent = Intent(original_query="x")
        plan = ExecutionPlan(
            db_type=None,
            intent=intent,
            steps=(Step(config=WindowConfig(function="BOGUS"), description="Apply window function: BOGUS"),),
        )
        result = engine.execute_analytics(review_rows, plan)
        assert result.success is False
        assert result.error == "Unknown window function: BOGUS"
        assert _steps(result) == ["Data Cleaning"]

    def test_success_to_dict_serializes_dates(self, engine, reviews_schema, review_rows):
        plan = engine.analyze_query("show ratings", reviews_schema).plan
        data = engine.execute_analytics(review_rows, plan).to_dict()
        assert data["success"] is True
        assert data["row_count"] == 5
        assert data["complexity"] == "simple"
        assert data["data"][0]["created_at"] == "2023-12-05T00:00:00"


class TestAnalyzeQuery:
    def test_analysis_result(self, engine, reviews_schema):
        analysis = engine.analyze_query("average rating per month", reviews_schema, "sql")
        assert analysis.plan.db_type == "sql"
        assert analysis.clarification_needed is False
        assert analysis.semantic_hints.startswith("SEMANTIC ANALYSIS:")
        assert [s.operation.value for s in analysis.plan.steps] == ["select", "group", "aggregate"]

    def test_clarification(self, engine, reviews_schema):
        analysis = engine.analyze_query("hello world", reviews_schema)
        data = analysis.to_dict()
        assert data["clarification_needed"] is True
        assert data["suggested_clarification"].startswith("Could you please specify")

    def test_session_context_carry_over(self, engine, reviews_schema):
        store = SessionStore()
        session = store.get("s1")

        engine.analyze_query("average rating per month", reviews_schema, session=session)
        follow_up = engine.analyze_query("hello world", reviews_schema, session=session)

        assert follow_up.intent.inherited_context is True
        assert follow_up.clarification_needed is False
        assert follow_up.plan.steps[0].description == "Select columns: rating"
        assert [q for q, _ in session.history] == ["average rating per month", "hello world"]

    def test_sessions_are_isolated(self, engine, reviews_schema):
        store = SessionStore()
        engine.analyze_query("average rating", reviews_schema, session=store.get("a"))
        other = engine.analyze_query("hello world", reviews_schema, session=store.get("b"))
        assert other.clarification_needed is True

    def test_without_session_nothing_is_remembered(self, engine, reviews_schema):
        engine.analyze_query("average rating", reviews_schema)
        assert engine.analyze_query("hello world", reviews_schema).clarification_needed is True


def test_get_enhanced_prompt_data(engine, reviews_schema):
    data = engine.get_enhanced_prompt_data("average rating per month", reviews_schema, "sql")
    assert data["original_question"] == "average rating per month"
    assert data["parsed_intent"].aggregation_functions == ("AVG",)
    assert data["analytics_intents"]["time_grouping"] == "month"
    assert data["suggested_approach"] == ["Use aggregation functions", "Analyze by month"]
    assert data["required_operations"] == ["select", "group", "aggregate"]
    assert data["db_type"] == "sql"


def test_custom_synonyms_drive_column_resolution():
    engine = AnalyticsEngine(synonyms={"revenue": ["sales"]})
    schema = {"tables": [{"name": "orders", "columns": ["sales_total"]}]}
    analysis = engine.analyze_query("show revenue", schema)
    assert analysis.intent.column_names == ("sales_total",)


def test_default_synonyms_do_not_know_custom_terms():
    schema = {"tables": [{"name": "orders", "columns": ["sales_total"]}]}
    analysis = AnalyticsEngine().analyze_query("show revenue", schema)
    assert analysis.intent.column_names == ()


def test_top_n_skips_missing_ratings(engine, reviews_schema):
    rows = [
        {"rating": "5", "author": "ann"},
        {"rating": "", "author": "bob"},
        {"rating": "3", "author": "cid"},
        {"rating": "N/A", "author": "dee"},
    ]
    plan = engine.analyze_query("first 2 rating", reviews_schema).plan
    result = engine.execute_analytics(rows, plan)

    assert result.success
    assert [r["rating"] for r in result.data] == [5, 3]


def test_malformed_schema_entries_do_not_raise(engine):
    schema = {"tables": ["reviews"]}
    analysis = engine.analyze_query("average rating", schema, "sql")
    assert analysis.intent.column_names == ()
    assert analysis.intent.aggregation_functions == ("AVG",)

    data = engine.get_enhanced_prompt_data("average rating", schema, "sql")
    assert data["required_operations"] == ["select", "aggregate"]
