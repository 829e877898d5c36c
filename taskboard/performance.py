"""Employee performance scoring."""

from __future__ import annotations

from collections import Counter
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

import numpy as np

from taskboard.schema import Profile, Task, parse_timestamp

RATINGS = ("excellent", "good", "average", "needs_improvement")

_WEIGHTS = {
    "completion_rate": 0.30,
    "punctuality_rate": 0.25,
    "efficiency": 0.20,
    "time_efficiency": 0.15,
    "cancellation_score": 0.10,
}


@dataclass
class PerformanceRecord:
    """Derived scoring report for one employee."""

    employee_id: str
    name: str
    avatar_url: Optional[str]
    total_tasks: int
    completed_tasks: int
    in_progress_tasks: int
    todo_tasks: int
    review_tasks: int
    cancelled_tasks: int
    overdue_tasks: int
    tasks_completed_on_time: int
    efficiency: float
    completion_rate: float
    punctuality_rate: float
    avg_completion_time: float
    score: float
    rating: str

    def to_dict(self) -> dict:
        return asdict(self)


def rate_score(score: float) -> str:
    """Map a composite score onto its rating band."""

    if score >= 85:
        return "excellent"
    if score >= 70:
        return "good"
    if score >= 50:
        return "average"
    return "needs_improvement"


def _pct(part: int, whole: int) -> float:
    return part / whole * 100.0 if whole else 0.0


def _round1(value: float) -> float:
    """One decimal place, halves rounded up."""

    return float(Decimal(value).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def _moment(value) -> Optional[datetime]:
    # unparseable timestamps never satisfy a comparison
    try:
        return parse_timestamp(value)
    except (TypeError, ValueError):
        return None


def is_overdue(task: Task, now: datetime) -> bool:
    """Completed late, or still open past its deadline."""

    deadline = _moment(task.deadline)
    if deadline is None:
        return False
    if task.status == "completed":
        finish = _moment(task.finish_time)
        return finish is not None and finish > deadline
    return now > deadline


def _completed_on_time(task: Task) -> bool:
    if task.status != "completed":
        return False
    finish = _moment(task.finish_time)
    deadline = _moment(task.deadline)
    return finish is not None and deadline is not None and finish <= deadline


def _avg_completion_hours(tasks: list[Task]) -> float:
    durations = []
    for task in tasks:
        start = _moment(task.start_time)
        finish = _moment(task.finish_time)
        if start and finish:
            # finish before start counts as zero time
            durations.append(max(0.0, (finish - start).total_seconds() / 3600.0))
    return sum(durations) / len(durations) if durations else 0.0


def _score_employee(profile: Profile, tasks: list[Task], now: datetime) -> PerformanceRecord:
    statuses = Counter(task.status for task in tasks)
    total = len(tasks)
    completed = statuses["completed"]
    in_progress = statuses["in_progress"]
    todo = statuses["todo"]
    review = statuses["in_review"] + statuses["done"]
    cancelled = max(0, total - (completed + in_progress + todo + review))

    overdue = sum(1 for task in tasks if is_overdue(task, now))
    on_time = sum(1 for task in tasks if _completed_on_time(task))

    efficiency = _pct(on_time, total)
    completion_rate = _pct(completed, total)
    punctuality_rate = _pct(on_time, completed)
    avg_hours = _avg_completion_hours(tasks)

    time_efficiency = max(0.0, 100.0 - avg_hours * 5) if avg_hours > 0 else 100.0
    cancellation_score = max(0.0, 100.0 - _pct(cancelled, total))

    terms = {
        "completion_rate": completion_rate,
        "punctuality_rate": punctuality_rate,
        "efficiency": efficiency,
        "time_efficiency": time_efficiency,
        "cancellation_score": cancellation_score,
    }
    score = sum(weight * max(0.0, terms[name]) for name, weight in _WEIGHTS.items())

    return PerformanceRecord(
        employee_id=profile.profile_id,
        name=profile.display_name,
        avatar_url=profile.avatar_url,
        total_tasks=total,
        completed_tasks=completed,
        in_progress_tasks=in_progress,
        todo_tasks=todo,
        review_tasks=review,
        cancelled_tasks=cancelled,
        overdue_tasks=overdue,
        tasks_completed_on_time=on_time,
        efficiency=_round1(efficiency),
        completion_rate=_round1(completion_rate),
        punctuality_rate=_round1(punctuality_rate),
        avg_completion_time=_round1(avg_hours),
        score=_round1(score),
        rating=rate_score(score),
    )


def compute_performance(
    tasks: Iterable[Task],
    profiles: Iterable[Profile],
    now: Optional[datetime] = None,
) -> list[PerformanceRecord]:
    """Score every employee that has at least one task, best first.

    Tasks assigned to users without a profile are skipped. Ties keep the
    order in which employees were first encountered in ``tasks``.
    """

    now = parse_timestamp(now) or datetime.now(timezone.utc)
    by_id = {profile.profile_id: profile for profile in profiles}

    by_user: dict[str, list[Task]] = {}
    for task in tasks:
        by_user.setdefault(task.assigned_user_id, []).append(task)

    records = [
        _score_employee(by_id[user_id], user_tasks, now)
        for user_id, user_tasks in by_user.items()
        if user_id in by_id
    ]
    return sorted(records, key=lambda record: record.score, reverse=True)


def summarize_team(records: list[PerformanceRecord]) -> dict:
    """Aggregate a performance report into team-level figures."""

    distribution = {rating: 0 for rating in RATINGS}
    for record in records:
        distribution[record.rating] += 1

    if not records:
        return {
            "members": 0,
            "mean_score": 0.0,
            "median_score": 0.0,
            "total_tasks": 0,
            "completed_tasks": 0,
            "overdue_tasks": 0,
            "rating_distribution": distribution,
        }

    scores = np.asarray([record.score for record in records], dtype=float)
    return {
        "members": len(records),
        "mean_score": _round1(float(np.mean(scores))),
        "median_score": _round1(float(np.median(scores))),
        "total_tasks": sum(record.total_tasks for record in records),
        "completed_tasks": sum(record.completed_tasks for record in records),
        "overdue_tasks": sum(record.overdue_tasks for record in records),
        "rating_distribution": distribution,
    }
