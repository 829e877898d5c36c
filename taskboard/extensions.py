"""Deadline extension requests and their review."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Iterable, Optional

from taskboard.schema import DeadlineRequest, Task, parse_timestamp

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeadlineChange:
    """Task update applied when an extension is approved."""

    task_id: str
    deadline: datetime

    def fields(self) -> dict:
        return {"deadline": self.deadline.isoformat()}


@dataclass
class ReviewOutcome:
    request: DeadlineRequest
    task_update: Optional[DeadlineChange]


def can_request_extension(task: Task, is_admin: bool = False, already_requested: bool = False) -> bool:
    """Members may ask for more time on open tasks that are not awaiting sign-off."""

    return not (is_admin or already_requested or task.pending_approval or task.status == "completed")


def open_request(
    task: Task,
    requested_by: str,
    requested_deadline,
    reason: str,
    now: Optional[datetime] = None,
) -> DeadlineRequest:
    """Build a pending extension request for ``task``."""

    if not reason or not reason.strip():
        raise ValueError("A reason is required for a deadline change")

    new_deadline = parse_timestamp(requested_deadline)
    current = parse_timestamp(task.deadline)
    if new_deadline is None or new_deadline <= current:
        raise ValueError("Requested deadline must be later than the current deadline")

    return DeadlineRequest(
        request_id=str(uuid.uuid4()),
        task_id=task.task_id,
        requested_by=requested_by,
        current_deadline=current,
        requested_deadline=new_deadline,
        reason=reason.strip(),
        created_at=parse_timestamp(now) or datetime.now(timezone.utc),
    )


def review_request(
    request: DeadlineRequest,
    approve: bool,
    reviewer_id: str,
    now: Optional[datetime] = None,
) -> ReviewOutcome:
    """Approve or reject a pending request."""

    if request.status != "pending":
        raise ValueError(f"Request {request.request_id} was already {request.status}")

    reviewed = replace(
        request,
        status="approved" if approve else "rejected",
        reviewed_by=reviewer_id,
        reviewed_at=parse_timestamp(now) or datetime.now(timezone.utc),
    )
    logger.info("Deadline request %s %s by %s", request.request_id, reviewed.status, reviewer_id)

    change = DeadlineChange(request.task_id, parse_timestamp(request.requested_deadline)) if approve else None
    return ReviewOutcome(request=reviewed, task_update=change)


def split_requests(requests: Iterable[DeadlineRequest]) -> tuple[list[DeadlineRequest], list[DeadlineRequest]]:
    pending: list[DeadlineRequest] = []
    processed: list[DeadlineRequest] = []
    for request in requests:
        (pending if request.status == "pending" else processed).append(request)
    return pending, processed
