from datetime import date, datetime

import pytest

from evaltrack.models import PerformanceScore
from evaltrack.services.analytics_service import bucket_for, evaluation_distribution, performance_trends


@pytest.fixture
def add_score(db, employee, supervisor, make_criteria):
    criteria = make_criteria()

    def _add(score, evaluated_at):
        db.add(PerformanceScore(
            employee_id=employee.id,
            criteria_id=criteria.id,
            evaluator_id=supervisor.id,
            score=score,
            evaluation_date=evaluated_at,
        ))
        db.commit()
    return _add


@pytest.mark.parametrize("score, bucket", [
    (5, "Outstanding"),
    (4, "Exceeds Expectations"),
    (3, "Meets Expectations"),
    (2, "Below Expectations"),
    (1, "Below Expectations"),
])
def test_bucket_for(score, bucket):
    assert bucket_for(score) == bucket


def test_distribution_empty(db):
    assert evaluation_distribution(db) == []


def test_distribution_counts(db, add_score):
    for value in (5, 5, 4, 2, 1):
        add_score(value, datetime(2026, 5, 1))

    assert evaluation_distribution(db) == [
        {"name": "Outstanding", "value": 2},
        {"name": "Exceeds Expectations", "value": 1},
        {"name": "Meets Expectations", "value": 0},
        {"name": "Below Expectations", "value": 2},
    ]


def test_trends_cover_six_months_with_gaps(db, add_score):
    add_score(4, datetime(2026, 10, 3))
    add_score(2, datetime(2026, 10, 20))
    add_score(5, datetime(2026, 7, 1))
    add_score(1, datetime(2025, 12, 1))  # outside the window

    trend = performance_trends(db, today=date(2026, 10, 16))

    assert [point["name"] for point in trend] == ["May", "Jun", "Jul", "Aug", "Sep", "Oct"]
    assert [point["avgScore"] for point in trend] == [None, None, 5.0, None, None, 3.0]


def test_trend_window_crosses_year_boundary(db, add_score):
    add_score(3, datetime(2025, 11, 15))

    trend = performance_trends(db, today=date(2026, 2, 1))

    assert [point["name"] for point in trend] == ["Sep", "Oct", "Nov", "Dec", "Jan", "Feb"]
    assert trend[2]["avgScore"] == 3.0


def test_endpoints_are_open(client):
    assert client.get("/api/v1/analytics/evaluation-distribution").json() == []
    assert client.get("/api/v1/analytics/performance-trends").json() == []
