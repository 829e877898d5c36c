from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from taskboard.deadlines import (
    completed_late,
    count_states,
    dashboard_stats,
    deadline_state,
    split_deadlines,
)
from taskboard.schema import Task

KOLKATA = ZoneInfo("Asia/Kolkata")
# 17:30 on June 1 in Kolkata
NOW = datetime.fromisoformat("2025-06-01T12:00:00+00:00")


def ts(value: str) -> datetime:
    return datetime.fromisoformat(value + "+00:00")


def sample_tasks():
    return [
        Task("late-night", "u1", "todo", ts("2025-05-31T20:00:00")),
        Task("yesterday", "u1", "in_progress", ts("2025-05-31T17:00:00"), pending_approval=True),
        Task("tomorrow", "u1", "todo", ts("2025-06-02T12:00:00")),
        Task("next-week", "u1", "in_review", ts("2025-06-10T12:00:00")),
        Task("done-late", "u1", "completed", ts("2025-05-20T12:00:00"), finish_time=ts("2025-05-21T12:00:00")),
        Task("done-early", "u1", "completed", ts("2025-05-20T12:00:00"), finish_time=ts("2025-05-19T12:00:00")),
    ]


def test_deadline_states_use_reference_timezone():
    states = {task.task_id: deadline_state(task, KOLKATA, NOW) for task in sample_tasks()}
    assert states == {
        "late-night": "due_today",
        "yesterday": "overdue",
        "tomorrow": "due_soon",
        "next-week": "upcoming",
        "done-late": "completed",
        "done-early": "completed",
    }


def test_same_deadline_is_overdue_in_utc():
    task = sample_tasks()[0]
    assert deadline_state(task, timezone.utc, NOW) == "overdue"


def test_due_soon_window_is_configurable():
    task = sample_tasks()[2]
    assert deadline_state(task, KOLKATA, NOW, due_soon_hours=12) == "upcoming"


def test_completed_late():
    flags = {task.task_id: completed_late(task) for task in sample_tasks()}
    assert flags["done-late"] is True
    assert flags["done-early"] is False
    assert flags["tomorrow"] is False


def test_split_deadlines():
    today, upcoming = split_deadlines(sample_tasks(), KOLKATA, NOW)
    assert [task.task_id for task in today] == ["late-night"]
    assert [task.task_id for task in upcoming] == ["tomorrow", "next-week"]


def test_count_states():
    counts = count_states(sample_tasks(), KOLKATA, NOW, due_soon_hours=12)
    assert counts == {"completed": 2, "overdue": 1, "due_today": 1, "due_soon": 0, "upcoming": 2}


def test_dashboard_stats():
    assert dashboard_stats(sample_tasks(), KOLKATA, NOW) == {
        "total": 6,
        "pending": 1,
        "overdue": 1,
        "completed": 2,
        "completed_late": 1,
    }
