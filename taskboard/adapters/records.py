"""Row conversion shared by the CSV and JSON adapters."""

from __future__ import annotations

from taskboard.schema import REQUEST_STATUSES, DeadlineRequest, Profile, Task, parse_timestamp

TASK_FIELDS = {"id", "assigned_user_id", "status", "deadline"}
PROFILE_FIELDS = {"id"}
REQUEST_FIELDS = {"id", "task_id", "requested_by", "current_deadline", "requested_deadline"}

_TRUE = {"true", "t", "1", "yes", "y"}
_FALSE = {"false", "f", "0", "no", "n", ""}


def _require(row: dict, required: set, where: str) -> None:
    missing = sorted(field for field in required if row.get(field) in (None, ""))
    if missing:
        raise ValueError(f"{where}: missing required fields {missing}")


def _timestamp(row: dict, field: str, where: str):
    try:
        return parse_timestamp(row.get(field))
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{where}: malformed {field}") from exc


def _flag(row: dict, field: str, where: str) -> bool:
    value = row.get(field)
    if value is None or isinstance(value, bool):
        return bool(value)
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ValueError(f"{where}: invalid boolean for {field}")


def _text(row: dict, field: str):
    value = row.get(field)
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def to_task(row: dict, where: str) -> Task:
    _require(row, TASK_FIELDS, where)
    return Task(
        task_id=str(row["id"]).strip(),
        assigned_user_id=str(row["assigned_user_id"]).strip(),
        # unknown statuses are kept; the engines decide how to treat them
        status=str(row["status"]).strip(),
        deadline=_timestamp(row, "deadline", where),
        start_time=_timestamp(row, "start_time", where),
        finish_time=_timestamp(row, "finish_time", where),
        pending_approval=_flag(row, "pending_approval", where),
        task_name=_text(row, "task_name") or "",
        created_by=_text(row, "created_by"),
        created_at=_timestamp(row, "created_at", where),
    )


def to_profile(row: dict, where: str) -> Profile:
    _require(row, PROFILE_FIELDS, where)
    return Profile(
        profile_id=str(row["id"]).strip(),
        email=_text(row, "email"),
        full_name=_text(row, "full_name"),
        avatar_url=_text(row, "avatar_url"),
        is_approved=_flag(row, "is_approved", where),
        created_at=_timestamp(row, "created_at", where),
    )


def to_request(row: dict, where: str) -> DeadlineRequest:
    _require(row, REQUEST_FIELDS, where)
    status = _text(row, "status") or "pending"
    if status not in REQUEST_STATUSES:
        raise ValueError(f"{where}: invalid request status '{status}'")
    return DeadlineRequest(
        request_id=str(row["id"]).strip(),
        task_id=str(row["task_id"]).strip(),
        requested_by=str(row["requested_by"]).strip(),
        current_deadline=_timestamp(row, "current_deadline", where),
        requested_deadline=_timestamp(row, "requested_deadline", where),
        reason=_text(row, "reason") or "",
        status=status,
        reviewed_by=_text(row, "reviewed_by"),
        reviewed_at=_timestamp(row, "reviewed_at", where),
        created_at=_timestamp(row, "created_at", where),
    )
