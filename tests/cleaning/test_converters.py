"""Tests for null detection and value converters."""

from datetime import datetime

import pytest

from nl_analytics.cleaning.converters import (
    clean_numeric_string,
    clean_text,
    is_date_like,
    is_null_value,
    parse_boolean,
    parse_date,
    parse_number,
)


@pytest.mark.parametrize(
    "value,expected",
    [
        (None, True),
        (float("nan"), True),
        (" N/A ", True),
        ("#N/A", True),
        ("undefined", True),
        ("", True),
        (0, False),
        ("0", False),
        ("none at all", False),
    ],
)
def test_is_null_value(value, expected):
    assert is_null_value(value) is expected


def test_is_null_value_custom_tokens():
    assert is_null_value("?", ["?"]) is True
    assert is_null_value("n/a", ["?"]) is False


@pytest.mark.parametrize(
    "raw,expected",
    [("$1,234.50", "1234.50"), ("(42)", "-42"), ("15%", "15"), (" EUR 7 ", "7")],
)
def test_clean_numeric_string(raw, expected):
    assert clean_numeric_string(raw) == expected


class TestParseNumber:
    def test_formatted_strings(self):
        assert parse_number("$1,234.50") == 1234.5
        assert parse_number("(3)") == -3.0
        assert parse_number("12%") == 12.0

    def test_numbers_pass_through(self):
        assert parse_number(3) == 3
        assert parse_number(2.5) == 2.5

    @pytest.mark.parametrize("value", [None, "", True, "abc", "1_000", "inf", datetime(2024, 1, 1)])
    def test_not_numbers(self, value):
        assert parse_number(value) is None


class TestParseDate:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("2024-03-15", datetime(2024, 3, 15)),
            ("2024-03-15T10:30:00Z", datetime(2024, 3, 15, 10, 30)),
            ("2024-03-15T10:30:00+02:00", datetime(2024, 3, 15, 8, 30)),
            ("2024/03/15", datetime(2024, 3, 15)),
            ("03/15/2024", datetime(2024, 3, 15)),
            ("3/5/99", datetime(1999, 3, 5)),
            ("3/5/07", datetime(2007, 3, 5)),
            ("15-03-2024", datetime(2024, 3, 15)),
            ("Mar 15, 2024", datetime(2024, 3, 15)),
        ],
    )
    def test_supported_formats(self, raw, expected):
        assert parse_date(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "hello", "4.5", 20240315])
    def test_rejects_non_dates(self, raw):
        assert parse_date(raw) is None

    def test_datetime_passes_through(self):
        moment = datetime(2024, 1, 2, 3, 4)
        assert parse_date(moment) is moment


def test_is_date_like():
    assert is_date_like("2024-03-15")
    assert is_date_like(datetime(2024, 3, 15))
    assert not is_date_like("2024")
    assert not is_date_like(2024)
    assert not is_date_like("great app")


@pytest.mark.parametrize(
    "value,expected",
    [("Yes", True), ("y", True), ("1", True), ("on", True), ("off", False), ("N", False), ("maybe", None), (None, None)],
)
def test_parse_boolean(value, expected):
    assert parse_boolean(value) is expected


def test_clean_text_normalizes_markup_and_emoji():
    assert clean_text("  Great&amp;<b>fast</b>   \U0001F44D ") == "Great&fast [thumbs_up]"


def test_clean_text_empty_becomes_none():
    assert clean_text("   ") is None
    assert clean_text(None) is None
