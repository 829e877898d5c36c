"""Streamlit admin dashboard for taskboard."""

from __future__ import annotations

import tempfile
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from taskboard.adapters import csv_adapter, json_adapter
from taskboard.config import Settings
from taskboard.deadlines import count_states, dashboard_stats, split_deadlines
from taskboard.extensions import review_request, split_requests
from taskboard.kanban import COLUMNS, KanbanBoard
from taskboard.performance import compute_performance, summarize_team
from taskboard.team import member_summaries, pending_registrants
from taskboard.transitions import StatusCommitter, next_status
from taskboard.trends import RANGES, completion_trend, on_time_rate

DEMO_TASKS = "examples/sample_tasks.json"
DEMO_PROFILES = "examples/sample_profiles.csv"
DEMO_REQUESTS = "examples/sample_requests.json"


def _parse_from_path(file_path: str, kind: str) -> list:
    suffix = Path(file_path).suffix.lower()
    if suffix == ".csv":
        return getattr(csv_adapter, f"parse_{kind}")(file_path)
    if suffix == ".json":
        return getattr(json_adapter, f"parse_{kind}")(file_path)
    raise ValueError("Unsupported file type. Please use .csv or .json")


def _parse_uploaded(uploaded_file, kind: str) -> list:
    suffix = Path(uploaded_file.name).suffix.lower()
    with tempfile.NamedTemporaryFile(delete=False, suffix=suffix) as handle:
        handle.write(uploaded_file.getbuffer())
        temp_path = handle.name
    return _parse_from_path(temp_path, kind)


def run_engine(
    tasks: list,
    profiles: list,
    settings: Settings,
    time_range: str = "7d",
    now: Optional[datetime] = None,
    requests: Optional[list] = None,
) -> dict[str, Any]:
    """Run every dashboard computation and return a UI-friendly payload."""

    tz = settings.zone()
    records = compute_performance(tasks, profiles, now=now)
    due_today, upcoming = split_deadlines(tasks, tz, now=now)
    pending_requests, processed_requests = split_requests(requests or [])
    return {
        "stats": dashboard_stats(tasks, tz, now=now),
        "deadline_states": count_states(tasks, tz, now=now, due_soon_hours=settings.due_soon_hours),
        "performance": [record.to_dict() for record in records],
        "team": summarize_team(records),
        "members": member_summaries(tasks, profiles, now=now),
        "pending_registrants": [profile.display_name for profile in pending_registrants(profiles)],
        "due_today": [task.task_name or task.task_id for task in due_today],
        "upcoming": [task.task_name or task.task_id for task in upcoming],
        "trend": completion_trend(tasks, time_range, tz, now=now),
        "on_time": on_time_rate(tasks, time_range, now=now),
        "pending_requests": pending_requests,
        "processed_requests": processed_requests,
    }


def simulate_drag(
    tasks: list,
    task_id: str,
    target: str,
    is_admin: bool,
    now: Optional[datetime] = None,
) -> dict[str, Any]:
    """Replay one drag gesture and report what the board would commit."""

    commits: list[tuple[str, str]] = []
    updates: list[dict] = []
    committer = StatusCommitter(
        tasks,
        lambda tid, intent: updates.append(intent.fields()),
        is_admin=is_admin,
        clock=(lambda: now) if now is not None else None,
    )

    def commit(tid: str, status: str) -> None:
        commits.append((tid, status))
        committer(tid, status)

    board = KanbanBoard(tasks, commit=commit, is_admin=is_admin)
    board.begin_drag(task_id)
    moved = board.drag_over(task_id, target)
    board.end_drag(task_id, target)
    return {"moved": moved, "commits": commits, "updates": updates, "status": board.local_status(task_id)}


def simulate_review(
    requests: list,
    request_id: str,
    approve: bool,
    reviewer_id: str,
    now: Optional[datetime] = None,
) -> dict[str, Any]:
    """Review one pending request and report the resulting updates."""

    request = next((item for item in requests if item.request_id == request_id), None)
    if request is None:
        raise ValueError(f"Unknown deadline request '{request_id}'")
    outcome = review_request(request, approve, reviewer_id, now=now)
    change = outcome.task_update
    return {
        "status": outcome.request.status,
        "task_id": change.task_id if change else None,
        "task_update": change.fields() if change else None,
    }


def main() -> None:
    import streamlit as st

    st.set_page_config(page_title="Taskboard Dashboard", layout="wide")
    st.title("Taskboard Admin Dashboard")

    with st.sidebar:
        st.header("Data")
        uploaded_tasks = st.file_uploader("Tasks export", type=["csv", "json"])
        uploaded_profiles = st.file_uploader("Profiles export", type=["csv", "json"])
        uploaded_requests = st.file_uploader("Deadline requests export (optional)", type=["csv", "json"])
        use_demo = st.checkbox("Load demo dataset", value=True)
        config_path = st.text_input("Settings YAML (optional)", value="")
        time_range = st.selectbox("Trend range", options=list(RANGES), index=0)

    try:
        settings = Settings.load(config_path or None)
        if use_demo:
            tasks = _parse_from_path(DEMO_TASKS, "tasks")
            profiles = _parse_from_path(DEMO_PROFILES, "profiles")
            requests = _parse_from_path(DEMO_REQUESTS, "requests")
        elif uploaded_tasks is not None and uploaded_profiles is not None:
            tasks = _parse_uploaded(uploaded_tasks, "tasks")
            profiles = _parse_uploaded(uploaded_profiles, "profiles")
            requests = _parse_uploaded(uploaded_requests, "requests") if uploaded_requests is not None else []
        else:
            st.info("Upload task and profile exports, or enable 'Load demo dataset'.")
            return

        result = run_engine(tasks, profiles, settings, time_range=time_range, requests=requests)

        st.subheader("A) Overview")
        stats = result["stats"]
        c1, c2, c3, c4, c5 = st.columns(5)
        c1.metric("Total tasks", stats["total"])
        c2.metric("Awaiting approval", stats["pending"])
        c3.metric("Overdue", stats["overdue"])
        c4.metric("Completed", stats["completed"])
        c5.metric("Completed late", stats["completed_late"])

        st.subheader("B) Employee Performance")
        if result["performance"]:
            st.dataframe(result["performance"], use_container_width=True)
        else:
            st.write("No performance data available.")
        st.table([{k: v for k, v in result["team"].items() if k != "rating_distribution"}])
        ratings = [{"rating": k, "members": v} for k, v in result["team"]["rating_distribution"].items()]
        st.bar_chart(ratings, x="rating", y="members")

        st.subheader("C) Deadlines")
        d1, d2 = st.columns(2)
        d1.write("**Today**")
        d1.write(result["due_today"] or "Nothing due today.")
        d2.write("**Upcoming**")
        d2.write(result["upcoming"] or "Nothing upcoming.")
        st.table([result["deadline_states"]])

        st.subheader("D) Completion Trend")
        st.bar_chart(result["trend"], x="bucket", y="completed")
        st.metric("On-time completion rate", f"{result['on_time']['on_time_rate']}%")

        st.subheader("E) Team")
        st.table(result["members"])
        if result["pending_registrants"]:
            st.warning("Awaiting approval: " + ", ".join(result["pending_registrants"]))

        st.subheader("F) Kanban Move")
        k1, k2, k3 = st.columns(3)
        task_id = k1.selectbox("Task", options=[task.task_id for task in tasks])
        target = k2.selectbox("Drop on column", options=list(COLUMNS))
        is_admin = k3.checkbox("Act as admin", value=False)
        current = next(task for task in tasks if task.task_id == task_id)
        st.caption(f"Next step from {current.status}: {next_status(current.status, is_admin) or 'none'}")
        if st.button("Drag", type="primary"):
            outcome = simulate_drag(tasks, task_id, target, is_admin)
            if outcome["commits"]:
                st.success(f"Would commit {outcome['commits'][0][1]} for {task_id}.")
                st.json(outcome["updates"][0])
            else:
                st.info(f"Move refused; {task_id} stays {outcome['status']}.")

        st.subheader("G) Deadline Requests")
        pending = result["pending_requests"]
        if pending:
            st.table([
                {
                    "request": item.request_id,
                    "task": item.task_id,
                    "requested_by": item.requested_by,
                    "requested_deadline": str(item.requested_deadline),
                    "reason": item.reason,
                }
                for item in pending
            ])
            r1, r2 = st.columns(2)
            request_id = r1.selectbox("Request", options=[item.request_id for item in pending])
            decision = r2.radio("Decision", options=["approve", "reject"], horizontal=True)
            if st.button("Review"):
                review = simulate_review(pending, request_id, decision == "approve", reviewer_id="admin")
                st.success(f"Request {request_id} {review['status']}.")
                if review["task_update"]:
                    st.json(review["task_update"])
        else:
            st.write("No pending deadline requests.")
        st.caption(f"{len(result['processed_requests'])} request(s) already processed.")

    except ValueError as exc:
        st.error(f"Input error: {exc}")


if __name__ == "__main__":
    main()
