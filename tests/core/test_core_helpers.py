"""Tests for core enums, schema helpers and numeric coercion."""

import json

import pytest

from nl_analytics.core.enums import OPERATION_PRIORITY, Operation, get_priority
from nl_analytics.core.schemas import extract_columns_from_schema, get_declared_types
from nl_analytics.core.utils import is_number, numeric_values, to_float, to_float_or_zero


def test_operation_priorities_are_distinct_and_ordered():
    priorities = [get_priority(op) for op in Operation]
    assert priorities == sorted(priorities)
    assert len(set(OPERATION_PRIORITY.values())) == len(Operation)
    assert get_priority(Operation.SELECT) < get_priority(Operation.FILTER)
    assert get_priority(Operation.ORDER) < get_priority(Operation.LIMIT)


def test_get_priority_accepts_string_names():
    assert get_priority("aggregate") == get_priority(Operation.AGGREGATE)


def test_get_priority_unknown_operation():
    with pytest.raises(ValueError, match="Unknown operation: join"):
        get_priority("join")


class TestExtractColumns:
    def test_tables_and_collections_are_flattened_in_order(self):
        schema = {
            "tables": [{"name": "reviews", "columns": ["rating", {"name": "created_at"}]}],
            "collections": [{"name": "users", "fields": [{"name": "country"}, "rating"]}],
        }
        assert extract_columns_from_schema(schema) == ["rating", "created_at", "country"]

    def test_json_string_schema(self):
        schema = json.dumps({"tables": [{"name": "t", "columns": ["a", "b"]}]})
        assert extract_columns_from_schema(schema) == ["a", "b"]

    @pytest.mark.parametrize("schema", [None, "", "not json", 42, {"tables": None}])
    def test_unusable_schema_yields_no_columns(self, schema):
        assert extract_columns_from_schema(schema) == []

    @pytest.mark.parametrize(
        "schema",
        [
            {"tables": ["reviews", None, {"name": "t", "columns": ["rating"]}]},
            {"tables": "reviews", "collections": [{"name": "c", "fields": ["rating"]}]},
            {"tables": [{"name": "t", "columns": "rating"}, {"columns": ["rating"]}]},
        ],
        ids=["non-mapping-tables", "tables-not-a-list", "columns-not-a-list"],
    )
    def test_malformed_containers_are_skipped(self, schema):
        assert extract_columns_from_schema(schema) == ["rating"]

    def test_declared_types_skip_malformed_tables(self):
        schema = {"tables": ["reviews", {"name": "t", "columns": [{"name": "rating", "type": "integer"}]}]}
        assert get_declared_types(schema) == {"rating": "integer"}

    def test_declared_types_first_occurrence_wins(self):
        schema = {
            "tables": [
                {"name": "a", "columns": [{"name": "rating", "type": "integer"}, "author"]},
                {"name": "b", "columns": [{"name": "rating", "type": "text"}]},
            ]
        }
        assert get_declared_types(schema) == {"rating": "integer"}


@pytest.mark.parametrize(
    "value,expected",
    [
        (3, True),
        (2.5, True),
        (True, False),
        (float("nan"), False),
        ("3", False),
        (None, False),
    ],
    ids=["int", "float", "bool", "nan", "numeric-string", "none"],
)
def test_is_number(value, expected):
    assert is_number(value) is expected


def test_to_float_coercion():
    assert to_float("4.5") == 4.5
    assert to_float(" 7 ") == 7.0
    assert to_float("four") is None
    assert to_float(False) is None
    assert to_float("nan") is None
    assert to_float_or_zero("n/a") == 0.0


def test_numeric_values_keeps_real_numbers_only():
    assert numeric_values([1, "2", None, 3.5, True]) == [1.0, 3.5]
