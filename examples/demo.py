"""Demo script for taskboard."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from taskboard.adapters import csv_adapter, json_adapter
from taskboard.kanban import KanbanBoard
from taskboard.performance import compute_performance, summarize_team


def main() -> None:
    tasks = json_adapter.parse_tasks("examples/sample_tasks.json")
    profiles = csv_adapter.parse_profiles("examples/sample_profiles.csv")

    records = compute_performance(tasks, profiles)
    for record in records:
        print(f"{record.name}: {record.score} ({record.rating})")
    print("Team:", summarize_team(records))

    board = KanbanBoard(tasks, commit=lambda task_id, status: print("Commit:", task_id, status))
    board.begin_drag("t3")
    board.drag_over("t3", "in_review")
    board.end_drag("t3", "in_review")


if __name__ == "__main__":
    main()
