"""Build the employee performance report from exported tables."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from taskboard.adapters import csv_adapter, json_adapter
from taskboard.config import Settings
from taskboard.deadlines import count_states, dashboard_stats
from taskboard.performance import compute_performance, summarize_team

logger = logging.getLogger("taskboard.report")


def _loader(path: Path, kind: str):
    suffix = path.suffix.lower()
    if suffix == ".csv":
        return getattr(csv_adapter, f"parse_{kind}")
    if suffix == ".json":
        return getattr(json_adapter, f"parse_{kind}")
    raise ValueError("Unsupported input format, expected .csv or .json")


def build_report(tasks_path: Path, profiles_path: Path, settings: Settings) -> dict:
    tasks = _loader(tasks_path, "tasks")(str(tasks_path))
    profiles = _loader(profiles_path, "profiles")(str(profiles_path))
    logger.info("Loaded %d tasks and %d profiles", len(tasks), len(profiles))

    records = compute_performance(tasks, profiles)
    return {
        "employees": [record.to_dict() for record in records],
        "team": summarize_team(records),
        "dashboard": dashboard_stats(tasks, settings.zone()),
        "deadlines": count_states(tasks, settings.zone(), due_soon_hours=settings.due_soon_hours),
        "timezone": settings.timezone,
    }


def main() -> None:
    parser = argparse.ArgumentParser(description="Rank employees by task performance")
    parser.add_argument("--tasks", required=True, help="Path to tasks CSV/JSON export")
    parser.add_argument("--profiles", required=True, help="Path to profiles CSV/JSON export")
    parser.add_argument("--config", default=None, help="Optional YAML settings file")
    parser.add_argument("--output", default="outputs/performance_report.json", help="Where to save the report")
    args = parser.parse_args()

    settings = Settings.load(args.config)
    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    try:
        report = build_report(Path(args.tasks), Path(args.profiles), settings)
    except ValueError as exc:
        logger.error("Could not build report: %s", exc)
        raise SystemExit(2) from exc

    print(json.dumps(report, indent=2))

    out_path = Path(args.output)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(json.dumps(report, indent=2), encoding="utf-8")
    logger.info("Saved performance report to %s", out_path)


if __name__ == "__main__":
    main()
