"""Core data schema for tasks, profiles and deadline requests."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

TASK_STATUSES = ("todo", "in_progress", "in_review", "done", "completed")
REQUEST_STATUSES = ("pending", "approved", "rejected")


def parse_timestamp(value) -> Optional[datetime]:
    """Parse an ISO-8601 value into an aware datetime; naive values are UTC."""

    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass
class Task:
    """Task snapshot as stored by the backend."""

    task_id: str
    assigned_user_id: str
    status: str
    deadline: datetime
    start_time: Optional[datetime] = None
    finish_time: Optional[datetime] = None
    pending_approval: bool = False
    task_name: str = ""
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass
class Profile:
    """Team member profile."""

    profile_id: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    is_approved: bool = False
    created_at: Optional[datetime] = None

    @property
    def display_name(self) -> str:
        return self.full_name or self.email or "Unknown User"


@dataclass
class DeadlineRequest:
    """A member's request to move a task deadline."""

    request_id: str
    task_id: str
    requested_by: str
    current_deadline: datetime
    requested_deadline: datetime
    reason: str
    status: str = "pending"
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
