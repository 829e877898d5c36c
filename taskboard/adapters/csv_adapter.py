"""CSV adapter for exported task and profile tables."""

from __future__ import annotations

import csv
from typing import Callable, TypeVar

from taskboard.adapters.records import to_profile, to_task
from taskboard.schema import Profile, Task

T = TypeVar("T")


def _parse(file_path: str, convert: Callable[[dict, str], T]) -> list[T]:
    with open(file_path, newline="", encoding="utf-8") as handle:
        reader = csv.DictReader(handle)
        if not reader.fieldnames:
            return []
        return [convert(row, f"Row {row_number}") for row_number, row in enumerate(reader, start=2)]


def parse_tasks(file_path: str) -> list[Task]:
    """Parse a tasks CSV export."""

    return _parse(file_path, to_task)


def parse_profiles(file_path: str) -> list[Profile]:
    """Parse a profiles CSV export."""

    return _parse(file_path, to_profile)
