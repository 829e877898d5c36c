from datetime import datetime, timezone

import pytest

from taskboard.schema import Task
from taskboard.trends import completion_trend, on_time_rate

NOW = datetime.fromisoformat("2025-06-15T12:00:00+00:00")


def ts(value: str) -> datetime:
    return datetime.fromisoformat(value + "+00:00")


def completed(task_id, finished, deadline):
    return Task(task_id, "u1", "completed", ts(deadline), finish_time=ts(finished))


def sample_tasks():
    return [
        completed("a", "2025-06-15T08:00:00", "2025-06-16T00:00:00"),
        completed("b", "2025-06-15T09:00:00", "2025-06-14T00:00:00"),
        completed("c", "2025-06-10T09:00:00", "2025-06-12T00:00:00"),
        completed("d", "2025-06-01T09:00:00", "2025-06-02T00:00:00"),
        completed("e", "2025-02-03T09:00:00", "2025-02-01T00:00:00"),
        Task("f", "u1", "in_review", ts("2025-06-20T00:00:00"), finish_time=ts("2025-06-14T00:00:00")),
    ]


def test_daily_trend():
    trend = completion_trend(sample_tasks(), "7d", timezone.utc, now=NOW)
    assert len(trend) == 7
    assert trend[0]["bucket"] == "2025-06-09"
    assert trend[-1]["bucket"] == "2025-06-15"
    assert trend[-1]["label"] == "Jun 15"
    assert [point["completed"] for point in trend] == [0, 1, 0, 0, 0, 0, 2]


def test_monthly_trend():
    trend = completion_trend(sample_tasks(), "6m", timezone.utc, now=NOW)
    assert [point["bucket"] for point in trend] == [
        "2025-01",
        "2025-02",
        "2025-03",
        "2025-04",
        "2025-05",
        "2025-06",
    ]
    assert [point["completed"] for point in trend] == [0, 1, 0, 0, 0, 4]
    assert trend[1]["label"] == "Feb"


def test_empty_trend_has_all_buckets():
    trend = completion_trend([], "30d", timezone.utc, now=NOW)
    assert len(trend) == 30
    assert all(point["completed"] == 0 for point in trend)


def test_on_time_rate():
    assert on_time_rate(sample_tasks(), "7d", now=NOW) == {"on_time_rate": 67, "total_completed": 3}
    assert on_time_rate(sample_tasks(), "6m", now=NOW) == {"on_time_rate": 60, "total_completed": 5}
    assert on_time_rate([], "1y", now=NOW) == {"on_time_rate": 0, "total_completed": 0}


def test_unknown_range():
    with pytest.raises(ValueError):
        completion_trend(sample_tasks(), "2w", timezone.utc, now=NOW)
    with pytest.raises(ValueError):
        on_time_rate(sample_tasks(), "2w", now=NOW)
