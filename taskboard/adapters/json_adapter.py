"""JSON adapter for exported task, profile and request tables."""

from __future__ import annotations

import json
from typing import Callable, TypeVar

from taskboard.adapters.records import to_profile, to_request, to_task
from taskboard.schema import DeadlineRequest, Profile, Task

T = TypeVar("T")


def _parse(file_path: str, convert: Callable[[dict, str], T]) -> list[T]:
    with open(file_path, encoding="utf-8") as handle:
        payload = json.load(handle)

    if not isinstance(payload, list):
        raise ValueError("JSON payload must be a list of objects")

    items = []
    for index, item in enumerate(payload, start=1):
        if not isinstance(item, dict):
            raise ValueError(f"Item {index}: expected an object")
        items.append(convert(item, f"Item {index}"))
    return items


def parse_tasks(file_path: str) -> list[Task]:
    return _parse(file_path, to_task)


def parse_profiles(file_path: str) -> list[Profile]:
    return _parse(file_path, to_profile)


def parse_requests(file_path: str) -> list[DeadlineRequest]:
    """Parse a deadline_requests JSON export."""

    return _parse(file_path, to_request)
