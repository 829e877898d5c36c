"""Team roster rows for the admin team page."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, Optional

from taskboard.performance import is_overdue
from taskboard.schema import Profile, Task, parse_timestamp


def member_summaries(
    tasks: Iterable[Task],
    profiles: Iterable[Profile],
    now: Optional[datetime] = None,
) -> list[dict]:
    """One row per profile with task counts, including members with no tasks."""

    now = parse_timestamp(now) or datetime.now(timezone.utc)
    tasks = list(tasks)

    rows = []
    for profile in profiles:
        own = [task for task in tasks if task.assigned_user_id == profile.profile_id]
        rows.append(
            {
                "id": profile.profile_id,
                "name": profile.display_name,
                "email": profile.email,
                "is_approved": bool(profile.is_approved),
                "total_tasks": len(own),
                "completed_tasks": sum(1 for task in own if task.status == "completed"),
                "overdue_tasks": sum(1 for task in own if is_overdue(task, now)),
            }
        )
    return rows


def pending_registrants(profiles: Iterable[Profile]) -> list[Profile]:
    return [profile for profile in profiles if not profile.is_approved]
