"""Runtime settings loaded from YAML."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml

logger = logging.getLogger(__name__)

CONFIG_ENV = "TASKBOARD_CONFIG"


@dataclass
class Settings:
    """Business-rule settings shared by the dashboards and the CLI."""

    # Calendar-day comparisons ("due today", "overdue") happen in this zone
    timezone: str = "Asia/Kolkata"
    due_soon_hours: float = 48.0
    log_level: str = "INFO"

    def zone(self) -> ZoneInfo:
        try:
            return ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown timezone '{self.timezone}'") from exc

    @classmethod
    def load(cls, path: Optional[str] = None) -> "Settings":
        """Load settings from YAML, falling back to defaults if absent."""

        raw_path = path or os.environ.get(CONFIG_ENV)
        if not raw_path:
            return cls()

        cfg_path = Path(raw_path).expanduser()
        if not cfg_path.exists():
            logger.warning("Config file %s not found, using defaults", cfg_path)
            return cls()

        with open(cfg_path, encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
        if not isinstance(data, dict):
            raise ValueError(f"{cfg_path}: config must be a mapping")

        known = {f.name for f in fields(cls)}
        settings = cls(**{key: value for key, value in data.items() if key in known})
        settings.zone()
        return settings
