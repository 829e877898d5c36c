from datetime import datetime

import pytest

from taskboard.kanban import COLUMNS, KanbanBoard, column_for, group_by_column
from taskboard.schema import Task

DEADLINE = datetime.fromisoformat("2025-07-01T18:00:00+00:00")


def sample_tasks():
    return [
        Task("t1", "u1", "todo", DEADLINE),
        Task("t2", "u1", "in_progress", DEADLINE),
        Task("t3", "u1", "in_review", DEADLINE),
        Task("t4", "u1", "completed", DEADLINE),
        Task("t5", "u1", "done", DEADLINE),
        Task("t6", "u1", "archived", DEADLINE),
    ]


class Recorder:
    def __init__(self):
        self.calls = []

    def __call__(self, task_id, status):
        self.calls.append((task_id, status))


def make_board(is_admin=False):
    commit = Recorder()
    return KanbanBoard(sample_tasks(), commit=commit, is_admin=is_admin), commit


def test_column_for_folds_done_into_completed():
    assert column_for("done") == "completed"
    assert column_for("completed") == "completed"
    assert column_for("in_review") == "in_review"
    assert column_for("archived") is None


def test_grouping_keeps_stored_status_and_skips_unknown():
    grouped = group_by_column(sample_tasks())
    assert set(grouped) == set(COLUMNS)
    assert [task.task_id for task in grouped["completed"]] == ["t4", "t5"]
    assert grouped["completed"][1].status == "done"
    all_ids = {task.task_id for column in grouped.values() for task in column}
    assert "t6" not in all_ids


def test_member_moves_todo_to_in_progress():
    board, commit = make_board()
    board.begin_drag("t1")
    assert board.drag_over("t1", "in_progress") is True
    assert board.local_status("t1") == "in_progress"
    assert board.end_drag("t1", "in_progress") is True
    assert commit.calls == [("t1", "in_progress")]
    assert board.active_id is None


def test_drop_on_a_card_resolves_to_its_column():
    board, commit = make_board()
    board.begin_drag("t1")
    board.drag_over("t1", "t3")
    board.end_drag("t1", "t3")
    assert commit.calls == [("t1", "in_review")]


def test_member_cannot_drag_to_completed():
    board, commit = make_board()
    board.begin_drag("t1")
    assert board.drag_over("t1", "completed") is False
    assert board.end_drag("t1", "completed") is False
    assert board.local_status("t1") == "todo"
    assert commit.calls == []


def test_admin_can_drag_to_completed():
    board, commit = make_board(is_admin=True)
    board.begin_drag("t3")
    assert board.drag_over("t3", "completed") is True
    assert board.end_drag("t3", "completed") is True
    assert commit.calls == [("t3", "completed")]


@pytest.mark.parametrize("is_admin", [False, True])
@pytest.mark.parametrize("target", ["todo", "in_progress", "in_review", "completed", "t1"])
def test_completed_tasks_never_leave_their_column(is_admin, target):
    board, commit = make_board(is_admin=is_admin)
    for task_id in ("t4", "t5"):
        before = board.local_status(task_id)
        board.begin_drag(task_id)
        board.drag_over(task_id, target)
        board.end_drag(task_id, target)
        assert board.local_status(task_id) == before
        assert column_for(board.local_status(task_id)) == "completed"
    assert commit.calls == []


def test_unknown_status_is_not_draggable():
    board, commit = make_board(is_admin=True)
    board.begin_drag("t6")
    assert board.drag_over("t6", "todo") is False
    assert board.end_drag("t6", "todo") is False
    assert board.local_status("t6") == "archived"
    assert commit.calls == []


def test_drop_outside_any_target_reverts():
    board, commit = make_board()
    board.begin_drag("t1")
    board.drag_over("t1", "in_review")
    assert board.end_drag("t1", None) is False
    assert board.local_status("t1") == "todo"
    assert commit.calls == []


def test_drop_back_on_original_column_does_not_commit():
    board, commit = make_board()
    board.begin_drag("t2")
    board.drag_over("t2", "in_review")
    board.drag_over("t2", "in_progress")
    assert board.end_drag("t2", "in_progress") is False
    assert commit.calls == []


def test_cancel_drag_reverts_local_copy():
    board, _ = make_board()
    board.begin_drag("t1")
    board.drag_over("t1", "in_review")
    board.cancel_drag()
    assert board.local_status("t1") == "todo"
    assert board.active_id is None


def test_sync_replaces_optimistic_state():
    board, _ = make_board()
    board.begin_drag("t1")
    board.drag_over("t1", "in_review")
    refreshed = sample_tasks()
    refreshed[0] = Task("t1", "u1", "in_progress", DEADLINE)
    board.sync(refreshed)
    assert board.local_status("t1") == "in_progress"
    assert [task.task_id for task in board.columns()["in_progress"]] == ["t1", "t2"]


def test_commit_failure_propagates_and_clears_gesture():
    def failing(task_id, status):
        raise RuntimeError("backend unavailable")

    board = KanbanBoard(sample_tasks(), commit=failing)
    board.begin_drag("t1")
    board.drag_over("t1", "in_progress")
    with pytest.raises(RuntimeError):
        board.end_drag("t1", "in_progress")
    assert board.active_id is None
