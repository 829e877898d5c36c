"""Kanban board drag-and-drop controller.

The board keeps an optimistic local copy of the task list while a card is
being dragged. A finished gesture either commits one status change through
the injected callback or falls back to the last external snapshot.

Column rules:
  * ``done`` is a legacy status shown in the ``completed`` column.
  * Nothing leaves the ``completed`` column.
  * Only admins may drop a card onto ``completed``.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, Iterable, Optional

from taskboard.schema import Task

logger = logging.getLogger(__name__)

COLUMNS = ("todo", "in_progress", "in_review", "completed")

CommitCallback = Callable[[str, str], None]


def column_for(status: str) -> Optional[str]:
    """Return the column a status is shown in, or None if unrecognized."""

    if status in ("completed", "done"):
        return "completed"
    if status in COLUMNS:
        return status
    return None


def group_by_column(tasks: Iterable[Task]) -> dict[str, list[Task]]:
    grouped: dict[str, list[Task]] = {column: [] for column in COLUMNS}
    for task in tasks:
        column = column_for(task.status)
        if column is not None:
            grouped[column].append(task)
    return grouped


class KanbanBoard:
    """Event handlers for one board: begin_drag, drag_over, end_drag."""

    def __init__(self, tasks: Iterable[Task], commit: CommitCallback, is_admin: bool = False):
        self.commit = commit
        self.is_admin = is_admin
        self.active_id: Optional[str] = None
        self._source: list[Task] = []
        self._local: list[Task] = []
        self.sync(tasks)

    def sync(self, tasks: Iterable[Task]) -> None:
        """Adopt a fresh external snapshot, dropping any optimistic state.

        A commit callback with its own ``sync`` receives the same snapshot.
        """

        self._source = list(tasks)
        self._revert()
        forward = getattr(self.commit, "sync", None)
        if forward is not None:
            forward(self._source)

    def _revert(self) -> None:
        self._local = list(self._source)

    def columns(self) -> dict[str, list[Task]]:
        return group_by_column(self._local)

    def local_status(self, task_id: str) -> Optional[str]:
        task = self._find(self._local, task_id)
        return task.status if task else None

    @staticmethod
    def _find(tasks: list[Task], task_id: str) -> Optional[Task]:
        return next((task for task in tasks if task.task_id == task_id), None)

    def _container(self, item_id: Optional[str]) -> Optional[str]:
        if item_id is None:
            return None
        if item_id in COLUMNS:
            return item_id
        task = self._find(self._local, item_id)
        return column_for(task.status) if task else None

    def _refusal(self, source: Optional[str], target: Optional[str]) -> Optional[str]:
        if source is None or target is None:
            return "unresolved column"
        if source == "completed" and target != "completed":
            return "completed tasks are locked"
        if not self.is_admin and target == "completed":
            return "only admins may complete by drag"
        return None

    def begin_drag(self, task_id: str) -> None:
        self.active_id = task_id

    def drag_over(self, task_id: str, over_id: Optional[str]) -> bool:
        """Move the card optimistically if the hovered column accepts it."""

        source = self._container(task_id)
        target = self._container(over_id)
        if source is not None and source == target:
            return False

        reason = self._refusal(source, target)
        if reason:
            logger.debug("Refused move of %s from %s to %s: %s", task_id, source, target, reason)
            return False

        for index, task in enumerate(self._local):
            if task.task_id == task_id:
                logger.debug("Moving task %s from %s to %s", task_id, source, target)
                self._local[index] = replace(task, status=target)
                return True
        return False

    def end_drag(self, task_id: str, over_id: Optional[str]) -> bool:
        """Finish the gesture; returns True if a status change was committed."""

        self.active_id = None
        source = self._container(task_id)
        target = self._container(over_id)

        reason = self._refusal(source, target)
        if reason:
            logger.debug("Dropped %s without commit: %s", task_id, reason)
            self._revert()
            return False

        final = self._find(self._local, task_id)
        original = self._find(self._source, task_id)
        if final is None or original is None or final.status == original.status:
            return False

        logger.debug("Persisting status change for %s to %s", task_id, final.status)
        self.commit(task_id, final.status)
        return True

    def cancel_drag(self) -> None:
        self.active_id = None
        self._revert()
