"""Shared pytest fixtures for the analytics engine tests."""

from typing import Any, Dict, List

import pytest

from nl_analytics.engine import AnalyticsEngine


@pytest.fixture
def reviews_schema() -> Dict[str, Any]:
    """Schema of a small app-review table."""
    return {
        "tables": [
            {
                "name": "reviews",
                "columns": [
                    {"name": "rating", "type": "integer"},
                    {"name": "created_at", "type": "timestamp"},
                    "author",
                    "content",
                ],
            }
        ]
    }


@pytest.fixture
def review_rows() -> List[Dict[str, Any]]:
    """Raw review rows as they would arrive from a CSV export (all strings)."""
    return [
        {"rating": "4", "created_at": "2023-12-05", "author": "ann", "content": "Works well"},
        {"rating": "2", "created_at": "2023-12-20", "author": "bob", "content": "Crashes  a lot"},
        {"rating": "5", "created_at": "2024-01-10", "author": "cid", "content": "Love it"},
        {"rating": "3", "created_at": "2024-02-14", "author": "dee", "content": "It is fine"},
        {"rating": "5", "created_at": "2024-02-28", "author": "eve", "content": "Great &amp; fast"},
    ]


@pytest.fixture
def engine() -> AnalyticsEngine:
    return AnalyticsEngine()
