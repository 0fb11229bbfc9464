"""Tests for the plan, run and profile CLI commands."""

from __future__ import annotations

import argparse
import json

import pandas as pd
import pytest
import yaml

from nl_analytics.interfaces.cli.main import (
    build_parser,
    cmd_plan,
    cmd_profile,
    cmd_run,
    load_rows,
    main,
)


@pytest.fixture
def schema_file(tmp_path, reviews_schema):
    path = tmp_path / "schema.yaml"
    path.write_text(yaml.safe_dump(reviews_schema), encoding="utf-8")
    return path


@pytest.fixture
def csv_file(tmp_path, review_rows):
    path = tmp_path / "reviews.csv"
    pd.DataFrame(review_rows).to_csv(path, index=False)
    return path


def _args(**kwargs) -> argparse.Namespace:
    defaults = {"question": "", "schema": None, "data": None, "db_type": "file", "synonyms": None}
    defaults.update(kwargs)
    return argparse.Namespace(**defaults)


class TestCmdPlan:
    def test_prints_intent_and_plan(self, schema_file, capsys):
        result = cmd_plan(_args(question="average rating per month", schema=str(schema_file)))
        assert result == 0

        out = json.loads(capsys.readouterr().out)
        assert out["intent"]["original_query"] == "average rating per month"
        assert out["plan"]["db_type"] == "file"
        assert out["plan"]["estimated_complexity"] == "moderate"
        assert out["clarification_needed"] is False
        assert out["semantic_hints"]

    def test_vague_question_still_succeeds(self, schema_file, capsys):
        result = cmd_plan(_args(question="hello there", schema=str(schema_file)))
        assert result == 0
        out = json.loads(capsys.readouterr().out)
        assert out["clarification_needed"] is True
        assert out["suggested_clarification"]

    def test_missing_schema(self, tmp_path):
        result = cmd_plan(_args(question="average rating", schema=str(tmp_path / "nope.yaml")))
        assert result == 2

    def test_schema_must_be_mapping(self, tmp_path):
        path = tmp_path / "schema.yaml"
        path.write_text("- rating\n- author\n", encoding="utf-8")
        assert cmd_plan(_args(question="average rating", schema=str(path))) == 2

    def test_missing_synonyms_file(self, schema_file, tmp_path):
        args = _args(
            question="average rating", schema=str(schema_file), synonyms=str(tmp_path / "syn.yaml")
        )
        assert cmd_plan(args) == 2


class TestCmdRun:
    def test_csv_run(self, schema_file, csv_file, capsys):
        args = _args(question="average rating per month", schema=str(schema_file), data=str(csv_file))
        assert cmd_run(args) == 0

        out = json.loads(capsys.readouterr().out)
        assert out["success"] is True
        assert out["row_count"] == 3
        assert out["data"][0] == {"month": "2023-12", "average": 3.0, "count": 2}
        assert out["execution_log"][0]["step"] == "Data Cleaning"

    def test_json_run(self, schema_file, tmp_path, capsys):
        data = tmp_path / "rows.json"
        data.write_text(json.dumps([{"rating": 5}, {"rating": 3}]), encoding="utf-8")
        args = _args(question="average rating", schema=str(schema_file), data=str(data))
        assert cmd_run(args) == 0
        out = json.loads(capsys.readouterr().out)
        assert out["data"] == [{"average": 4.0, "column": "rating"}]

    def test_failed_analysis(self, tmp_path, capsys):
        schema = tmp_path / "schema.yaml"
        schema.write_text(
            yaml.safe_dump({"tables": [{"name": "t", "columns": ["rating", "region"]}]}),
            encoding="utf-8",
        )
        data = tmp_path / "rows.json"
        data.write_text(json.dumps([{"rating": 4}, {"rating": 2}]), encoding="utf-8")

        args = _args(question="count by region", schema=str(schema), data=str(data))
        assert cmd_run(args) == 1
        out = json.loads(capsys.readouterr().out)
        assert out["success"] is False
        assert out["error"] == "Group column not found in data: region"

    def test_unsupported_data_format(self, schema_file, tmp_path):
        data = tmp_path / "rows.txt"
        data.write_text("rating\n4\n", encoding="utf-8")
        args = _args(question="average rating", schema=str(schema_file), data=str(data))
        assert cmd_run(args) == 2

    def test_missing_data_file(self, schema_file, tmp_path):
        args = _args(question="average rating", schema=str(schema_file), data=str(tmp_path / "x.csv"))
        assert cmd_run(args) == 2


class TestCmdProfile:
    def test_profile_csv(self, csv_file, capsys):
        assert cmd_profile(_args(data=str(csv_file))) == 0
        out = json.loads(capsys.readouterr().out)
        assert out["total_rows"] == 5
        assert out["total_columns"] == 4
        assert out["issues"] == []

    def test_empty_dataset(self, tmp_path, capsys):
        data = tmp_path / "rows.json"
        data.write_text("[]", encoding="utf-8")
        assert cmd_profile(_args(data=str(data))) == 1

    def test_json_must_be_list_of_objects(self, tmp_path):
        data = tmp_path / "rows.json"
        data.write_text(json.dumps({"rating": 4}), encoding="utf-8")
        assert cmd_profile(_args(data=str(data))) == 2


def test_load_rows_keeps_csv_cells_as_strings(csv_file):
    rows = load_rows(csv_file)
    assert rows[0] == {
        "rating": "4",
        "created_at": "2023-12-05",
        "author": "ann",
        "content": "Works well",
    }


def test_parser_requires_command():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_main_runs_plan(schema_file, capsys):
    assert main(["--errors-only", "plan", "top 3 authors", "--schema", str(schema_file)]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out["intent"]["limit"] == 3
