"""Completion trend over a rolling window."""

from __future__ import annotations

from calendar import monthrange
from datetime import datetime, timedelta, timezone, tzinfo
from math import floor
from typing import Iterable, Optional

import numpy as np

from taskboard.schema import Task, parse_timestamp

RANGES = ("7d", "30d", "6m", "1y")

_BUCKETS = {
    "7d": ("D", 7),
    "30d": ("D", 30),
    "6m": ("M", 6),
    "1y": ("M", 12),
}


def _check_range(time_range: str) -> None:
    if time_range not in _BUCKETS:
        raise ValueError(f"Unknown time range '{time_range}', expected one of {RANGES}")


def _finished(tasks: Iterable[Task]) -> list[datetime]:
    return [
        parse_timestamp(task.finish_time)
        for task in tasks
        if task.status == "completed" and task.finish_time is not None
    ]


def _to_unit(moments: list[datetime], tz: tzinfo, unit: str) -> np.ndarray:
    # numpy datetime64 is zone-naive: convert to wall-clock time first
    naive = [moment.astimezone(tz).replace(tzinfo=None) for moment in moments]
    return np.array(naive, dtype="datetime64[us]").astype(f"datetime64[{unit}]")


def completion_trend(
    tasks: Iterable[Task],
    time_range: str,
    tz: tzinfo,
    now: Optional[datetime] = None,
) -> list[dict]:
    """Completed-task counts per day or month, oldest bucket first."""

    _check_range(time_range)
    unit, count = _BUCKETS[time_range]
    now = parse_timestamp(now) or datetime.now(timezone.utc)

    current = _to_unit([now], tz, unit)[0]
    buckets = current - np.arange(count - 1, -1, -1)

    finished = _finished(tasks)
    counts = np.zeros(count, dtype=int)
    if finished:
        stamps = _to_unit(finished, tz, unit)
        positions = np.searchsorted(buckets, stamps)
        hits = (positions < count) & (buckets[np.minimum(positions, count - 1)] == stamps)
        np.add.at(counts, positions[hits], 1)

    label_format = "%b %d" if unit == "D" else "%b"
    return [
        {
            "bucket": str(bucket),
            "label": bucket.astype("datetime64[D]").item().strftime(label_format),
            "completed": int(total),
        }
        for bucket, total in zip(buckets, counts)
    ]


def on_time_rate(tasks: Iterable[Task], time_range: str, now: Optional[datetime] = None) -> dict:
    """Share of tasks completed since the range start that met their deadline."""

    _check_range(time_range)
    now = parse_timestamp(now) or datetime.now(timezone.utc)
    unit, count = _BUCKETS[time_range]
    if unit == "D":
        start = now - timedelta(days=count)
    else:
        year, month = divmod(now.year * 12 + (now.month - 1) - count, 12)
        month += 1
        start = now.replace(year=year, month=month, day=min(now.day, monthrange(year, month)[1]))

    recent = [
        task
        for task in tasks
        if task.status == "completed"
        and task.finish_time is not None
        and parse_timestamp(task.finish_time) >= start
    ]
    if not recent:
        return {"on_time_rate": 0, "total_completed": 0}

    on_time = sum(1 for task in recent if parse_timestamp(task.finish_time) <= parse_timestamp(task.deadline))
    return {
        "on_time_rate": floor(on_time / len(recent) * 100 + 0.5),
        "total_completed": len(recent),
    }
