"""Pure scheduling services: validation, window resolution and timeline composition."""

from .slots import TimeSlot, available_slots
from .summary import format_compact, pattern_frame, summarize_compact, weekly_minutes
from .timeline import compose, find_gaps, render_track, to_percent, width
from .timeplan import duration_label, end_of_month, format_minutes, parse_hhmm, week_start
from .validator import validate_pattern
from .windows import has_assignment_on, month_calendar, resolve, shifts_on, upcoming, window_for

__all__ = [
    "TimeSlot",
    "available_slots",
    "format_compact",
    "pattern_frame",
    "summarize_compact",
    "weekly_minutes",
    "compose",
    "find_gaps",
    "render_track",
    "to_percent",
    "width",
    "duration_label",
    "end_of_month",
    "format_minutes",
    "parse_hhmm",
    "week_start",
    "validate_pattern",
    "has_assignment_on",
    "month_calendar",
    "resolve",
    "shifts_on",
    "upcoming",
    "window_for",
]
