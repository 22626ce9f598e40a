"""Human-oriented summaries of weekly patterns."""

from __future__ import annotations

from typing import List, Tuple

import pandas as pd

from staff_schedule.domain.entities import WEEKDAYS, WeeklyPattern

from .timeplan import format_minutes

NO_SHIFTS = "-"


def _day_key(pattern: WeeklyPattern, weekday) -> str:
    shifts = pattern.get(weekday, ())
    if not shifts:
        return NO_SHIFTS
    return ",".join(f"{format_minutes(s.start)}-{format_minutes(s.end)}" for s in shifts)


def summarize_compact(pattern: WeeklyPattern) -> List[Tuple[str, str, str]]:
    """
    Collapse consecutive weekdays with identical shifts.

    Returns:
        ``(first_day, last_day, shifts)`` groups in Monday..Sunday order,
        where ``shifts`` is ``"HH:MM-HH:MM,..."`` or ``"-"``
    """
    groups: List[Tuple[str, str, str]] = []
    for weekday in WEEKDAYS:
        key = _day_key(pattern, weekday)
        if groups and groups[-1][2] == key:
            first, _, shifts = groups[-1]
            groups[-1] = (first, weekday.value, shifts)
        else:
            groups.append((weekday.value, weekday.value, key))
    return groups


def format_compact(pattern: WeeklyPattern) -> str:
    lines = []
    for first, last, shifts in summarize_compact(pattern):
        days = first if first == last else f"{first} - {last}"
        lines.append(f"{days}: {'no shifts' if shifts == NO_SHIFTS else shifts}")
    return "\n".join(lines)


def weekly_minutes(pattern: WeeklyPattern) -> int:
    """Total scheduled minutes in one week of the pattern."""
    return sum(s.minutes for shifts in pattern.values() for s in shifts)


def pattern_frame(pattern: WeeklyPattern) -> pd.DataFrame:
    """One row per shift with ``weekday``, ``start``, ``end`` and ``minutes``."""
    rows = [
        {
            "weekday": weekday.value,
            "start": format_minutes(s.start),
            "end": format_minutes(s.end),
            "minutes": s.minutes,
        }
        for weekday in WEEKDAYS
        for s in pattern.get(weekday, ())
    ]
    return pd.DataFrame(rows, columns=["weekday", "start", "end", "minutes"])
