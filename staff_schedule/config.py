"""Configuration loading (JSON, or YAML by file extension)."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields
from datetime import date
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from staff_schedule.services.timeplan import parse_hhmm


@dataclass
class DayWindow:
    """Visible range of the day timeline track."""

    start: str = "08:00"
    end: str = "20:00"

    @property
    def start_minute(self) -> int:
        return parse_hhmm(self.start, allow_end_of_day=False)

    @property
    def end_minute(self) -> int:
        return parse_hhmm(self.end)


@dataclass
class SchedulerConfig:
    db_url: str = "sqlite:///schedule.db"
    timezone: str = "Asia/Ho_Chi_Minh"
    day_window: DayWindow = field(default_factory=DayWindow)
    undo_window_seconds: float = 8.0
    default_event_minutes: int = 30
    slot_minutes: int = 30

    def validate(self) -> "SchedulerConfig":
        if self.day_window.start_minute >= self.day_window.end_minute:
            raise ValueError(
                f"day_window start {self.day_window.start} must be before end {self.day_window.end}"
            )
        if self.undo_window_seconds <= 0:
            raise ValueError("undo_window_seconds must be positive")
        if self.default_event_minutes <= 0:
            raise ValueError("default_event_minutes must be positive")
        if self.slot_minutes <= 0:
            raise ValueError("slot_minutes must be positive")
        return self


@dataclass(frozen=True)
class ViewContext:
    """Staff member and date a screen is looking at."""

    staff_id: int
    date: date


def _known(cls, data: Dict[str, Any], where: str) -> Dict[str, Any]:
    names = {f.name for f in fields(cls)}
    unknown = sorted(set(data) - names)
    if unknown:
        raise ValueError(f"Unknown {where} keys: {', '.join(unknown)}")
    return data


def config_from_dict(data: Dict[str, Any]) -> SchedulerConfig:
    data = dict(_known(SchedulerConfig, data or {}, "config"))
    window = data.pop("day_window", None) or {}
    cfg = SchedulerConfig(**data, day_window=DayWindow(**_known(DayWindow, window, "day_window")))
    return cfg.validate()


def load_config(path: Optional[str | Path] = None) -> SchedulerConfig:
    """
    Load configuration from a JSON or YAML file.

    Args:
        path: ``.json``, ``.yaml`` or ``.yml`` file; ``None`` returns defaults

    Returns:
        Validated SchedulerConfig
    """
    if path is None:
        return SchedulerConfig().validate()
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in (".yaml", ".yml"):
        data = yaml.safe_load(text) or {}
    else:
        data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError(f"Config {path} must contain a mapping")
    return config_from_dict(data)
