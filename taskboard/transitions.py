"""Status workflow and task update intents."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, ClassVar, Iterable, Optional, Union

from taskboard.schema import TASK_STATUSES, Task, parse_timestamp

logger = logging.getLogger(__name__)


def next_status(status: str, is_admin: bool = False) -> Optional[str]:
    """Status reached by the single-step action button, if any."""

    flow = {
        "todo": "in_progress",
        "in_progress": "in_review",
        "in_review": "completed" if is_admin else None,
    }
    return flow.get(status)


def _stamp(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


class _Intent(ABC):
    kind: ClassVar[str]

    @abstractmethod
    def _payload(self) -> dict:
        """Fields specific to this intent."""

    def fields(self) -> dict:
        """Render the partial update the persistence layer applies."""

        payload = self._payload()
        if getattr(self, "clear_pending_approval", False):
            payload["pending_approval"] = False
        return payload


@dataclass(frozen=True)
class StartWork(_Intent):
    started_at: Optional[datetime] = None
    clear_pending_approval: bool = False

    kind: ClassVar[str] = "start_work"

    def _payload(self) -> dict:
        payload = {"status": "in_progress"}
        if self.started_at is not None:
            payload["start_time"] = _stamp(self.started_at)
        return payload


@dataclass(frozen=True)
class ReturnToTodo(_Intent):
    clear_pending_approval: bool = False

    kind: ClassVar[str] = "return_to_todo"

    def _payload(self) -> dict:
        return {"status": "todo", "start_time": None}


@dataclass(frozen=True)
class SubmitForReview(_Intent):
    finished_at: Optional[datetime] = None
    clear_pending_approval: bool = False

    kind: ClassVar[str] = "submit_for_review"

    def _payload(self) -> dict:
        payload = {"status": "in_review"}
        if self.finished_at is not None:
            payload["finish_time"] = _stamp(self.finished_at)
        return payload


@dataclass(frozen=True)
class MarkComplete(_Intent):
    finished_at: Optional[datetime] = None

    kind: ClassVar[str] = "mark_complete"

    def _payload(self) -> dict:
        payload = {"status": "completed", "pending_approval": False}
        if self.finished_at is not None:
            payload["finish_time"] = _stamp(self.finished_at)
        return payload


@dataclass(frozen=True)
class Reopen(_Intent):
    status: str
    started_at: Optional[datetime] = None
    clear_pending_approval: bool = False

    kind: ClassVar[str] = "reopen"

    def _payload(self) -> dict:
        payload = {"status": self.status, "finish_time": None}
        if self.started_at is not None:
            payload["start_time"] = _stamp(self.started_at)
        return payload


@dataclass(frozen=True)
class ChangeStatus(_Intent):
    status: str
    clear_pending_approval: bool = False

    kind: ClassVar[str] = "change_status"

    def _payload(self) -> dict:
        return {"status": self.status}


UpdateIntent = Union[StartWork, ReturnToTodo, SubmitForReview, MarkComplete, Reopen, ChangeStatus]


def plan_status_change(
    task: Task,
    new_status: str,
    is_admin: bool = False,
    now: Optional[datetime] = None,
) -> UpdateIntent:
    """Choose the update intent for moving ``task`` to ``new_status``."""

    if new_status not in TASK_STATUSES:
        raise ValueError(f"Unknown task status '{new_status}'")

    now = parse_timestamp(now) or datetime.now(timezone.utc)

    if is_admin:
        if new_status == "completed":
            return MarkComplete(finished_at=now)
        return ChangeStatus(status=new_status)

    clear = task.pending_approval and new_status != "completed"

    if task.status == "completed" and new_status != "completed":
        started = now if new_status == "in_progress" and task.start_time is None else None
        return Reopen(status=new_status, started_at=started, clear_pending_approval=clear)
    if new_status == "in_progress":
        return StartWork(started_at=None if task.start_time else now, clear_pending_approval=clear)
    if new_status == "todo" and task.status == "in_progress":
        return ReturnToTodo(clear_pending_approval=clear)
    if new_status == "in_review":
        return SubmitForReview(finished_at=None if task.finish_time else now, clear_pending_approval=clear)
    if new_status == "completed":
        return MarkComplete(finished_at=None if task.finish_time else now)
    return ChangeStatus(status=new_status, clear_pending_approval=clear)


def approve_completion(now: Optional[datetime] = None) -> MarkComplete:
    """Admin sign-off on a task waiting for approval."""

    return MarkComplete(finished_at=parse_timestamp(now) or datetime.now(timezone.utc))


class StatusCommitter:
    """Kanban commit callback that turns status changes into update intents.

    ``persist`` receives ``(task_id, intent)`` and owns the remote write;
    its failures propagate to the caller unchanged. Intents are planned from
    the last snapshot passed to ``sync``, so resync it together with the
    board after every persisted change.
    """

    def __init__(
        self,
        tasks: Iterable[Task],
        persist: Callable[[str, UpdateIntent], None],
        is_admin: bool = False,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._tasks: dict[str, Task] = {}
        self.persist = persist
        self.is_admin = is_admin
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.sync(tasks)

    def sync(self, tasks: Iterable[Task]) -> None:
        self._tasks = {task.task_id: task for task in tasks}

    def __call__(self, task_id: str, new_status: str) -> UpdateIntent:
        task = self._tasks.get(task_id)
        if task is None:
            raise KeyError(task_id)
        intent = plan_status_change(task, new_status, is_admin=self.is_admin, now=self.clock())
        logger.info("Committing %s for task %s", intent.kind, task_id)
        self.persist(task_id, intent)
        return intent
