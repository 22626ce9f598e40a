"""Time-of-day and calendar helpers."""

from __future__ import annotations

import calendar
import re
from datetime import date, timedelta

from staff_schedule.domain.entities import MINUTES_PER_DAY

# Strict 24-hour, zero-padded clock; "24:00" is only meaningful as an end.
_HHMM = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")
END_OF_DAY = "24:00"


def parse_hhmm(text: str, allow_end_of_day: bool = True) -> int:
    """
    Parse an ``HH:MM`` string into minutes since midnight.

    Args:
        text: Clock time such as ``"07:30"``
        allow_end_of_day: Accept ``"24:00"`` (1440) as the end of the day

    Returns:
        Minute of day

    Raises:
        ValueError: If the text is not a zero-padded 24-hour time
    """
    if not isinstance(text, str):
        raise ValueError(f"Expected HH:MM string, got {text!r}")
    if allow_end_of_day and text == END_OF_DAY:
        return MINUTES_PER_DAY
    m = _HHMM.match(text)
    if not m:
        raise ValueError(f"Invalid HH:MM time: {text!r}")
    return int(m.group(1)) * 60 + int(m.group(2))


def format_minutes(minutes: int) -> str:
    """Format a minute of day as ``HH:MM``."""
    if not 0 <= minutes <= MINUTES_PER_DAY:
        raise ValueError(f"Minute of day out of range: {minutes}")
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def week_start(day: date) -> date:
    """Monday of the week containing ``day``."""
    return day - timedelta(days=day.weekday())


def end_of_month(day: date) -> date:
    """Last calendar day of ``day``'s month."""
    return day.replace(day=calendar.monthrange(day.year, day.month)[1])


def duration_label(start: str, end: str) -> str:
    """
    Human readable length of a shift.

    An end earlier than the start wraps past midnight. Returns an empty
    string when the duration is zero or either time does not parse.
    """
    try:
        start_min = parse_hhmm(start)
        end_min = parse_hhmm(end)
    except ValueError:
        return ""
    if end_min < start_min:
        end_min += MINUTES_PER_DAY
    diff = end_min - start_min
    if diff <= 0:
        return ""
    if diff < 60:
        return f"{diff} min"
    hours, minutes = divmod(diff, 60)
    return f"{hours} h" if minutes == 0 else f"{hours} h {minutes} min"
