"""Deadline urgency and dashboard counters.

Calendar-day checks are made in an explicit reference timezone; callers pass
``Settings.zone()`` rather than relying on the host clock's zone.
"""

from __future__ import annotations

from datetime import date, datetime, timezone, tzinfo
from typing import Iterable, Optional

from taskboard.schema import Task, parse_timestamp

DEADLINE_STATES = ("completed", "overdue", "due_today", "due_soon", "upcoming")


def _now(now: Optional[datetime]) -> datetime:
    return parse_timestamp(now) or datetime.now(timezone.utc)


def _local_day(value: datetime, tz: tzinfo) -> date:
    return parse_timestamp(value).astimezone(tz).date()


def deadline_state(
    task: Task,
    tz: tzinfo,
    now: Optional[datetime] = None,
    due_soon_hours: float = 48.0,
) -> str:
    """Classify a task's deadline relative to ``now``."""

    if task.status == "completed":
        return "completed"

    now = _now(now)
    today = _local_day(now, tz)
    due_day = _local_day(task.deadline, tz)
    if due_day < today:
        return "overdue"
    if due_day == today:
        return "due_today"

    hours_left = (parse_timestamp(task.deadline) - now).total_seconds() / 3600.0
    if 0 < hours_left <= due_soon_hours:
        return "due_soon"
    return "upcoming"


def completed_late(task: Task) -> bool:
    if task.status != "completed" or task.finish_time is None:
        return False
    return parse_timestamp(task.finish_time) > parse_timestamp(task.deadline)


def split_deadlines(
    tasks: Iterable[Task],
    tz: tzinfo,
    now: Optional[datetime] = None,
) -> tuple[list[Task], list[Task]]:
    """Split tasks into (due today, due on a later day); past days are dropped."""

    today = _local_day(_now(now), tz)
    due_today: list[Task] = []
    upcoming: list[Task] = []
    for task in tasks:
        due_day = _local_day(task.deadline, tz)
        if due_day == today:
            due_today.append(task)
        elif due_day > today:
            upcoming.append(task)
    return due_today, upcoming


def count_states(
    tasks: Iterable[Task],
    tz: tzinfo,
    now: Optional[datetime] = None,
    due_soon_hours: float = 48.0,
) -> dict[str, int]:
    counts = {state: 0 for state in DEADLINE_STATES}
    now = _now(now)
    for task in tasks:
        counts[deadline_state(task, tz, now, due_soon_hours)] += 1
    return counts


def dashboard_stats(tasks: Iterable[Task], tz: tzinfo, now: Optional[datetime] = None) -> dict:
    """Headline counters for the admin dashboard."""

    tasks = list(tasks)
    now = _now(now)
    return {
        "total": len(tasks),
        "pending": sum(1 for task in tasks if task.pending_approval),
        "overdue": sum(1 for task in tasks if deadline_state(task, tz, now) == "overdue"),
        "completed": sum(1 for task in tasks if task.status == "completed"),
        "completed_late": sum(1 for task in tasks if completed_late(task)),
    }
