"""Validation and normalisation of weekly shift patterns."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Tuple

from staff_schedule.domain.entities import WEEKDAYS, ShiftInterval, Weekday, WeeklyPattern
from staff_schedule.errors import BadFormat, Empty, InvertedInterval, Overlap

from .timeplan import parse_hhmm


def _raw_bounds(raw: Any) -> Tuple[Any, Any]:
    if isinstance(raw, Mapping):
        return raw.get("start"), raw.get("end")
    if isinstance(raw, (tuple, list)) and len(raw) == 2:
        return raw[0], raw[1]
    return getattr(raw, "start", None), getattr(raw, "end", None)


def _parse_day(weekday: Weekday, raw_intervals: Iterable[Any]) -> Tuple[ShiftInterval, ...]:
    parsed: List[Tuple[int, int]] = []
    for raw in raw_intervals:
        start_text, end_text = _raw_bounds(raw)
        try:
            start = parse_hhmm(start_text, allow_end_of_day=False)
            end = parse_hhmm(end_text)
        except ValueError as e:
            raise BadFormat(weekday.value, str(e)) from e
        if start >= end:
            raise InvertedInterval(weekday.value, f"{start_text} is not before {end_text}")
        parsed.append((start, end))

    parsed.sort()
    for prev, nxt in zip(parsed, parsed[1:]):
        if nxt[0] < prev[1]:
            raise Overlap(weekday.value, "shifts overlap")
    return tuple(ShiftInterval(start, end) for start, end in parsed)


def validate_pattern(pattern: Mapping[Any, Iterable[Any]]) -> WeeklyPattern:
    """
    Validate a raw weekly pattern and return its normalised form.

    Args:
        pattern: Weekday (enum or name such as ``"MONDAY"``) -> list of raw
            intervals, each a ``{"start": "HH:MM", "end": "HH:MM"}`` mapping or
            a ``(start, end)`` pair

    Returns:
        Weekday -> intervals sorted by start; weekdays without shifts are omitted

    Raises:
        BadFormat: Unknown weekday or a time that is not strict ``HH:MM``
        InvertedInterval: An interval whose start is not before its end
        Overlap: Two intervals of the same weekday overlap
        Empty: No weekday carries any interval
    """
    by_day: Dict[Weekday, List[Any]] = {}
    for key, intervals in pattern.items():
        try:
            weekday = Weekday.parse(key)
        except ValueError as e:
            raise BadFormat(str(key), "unknown weekday") from e
        # Keys naming the same weekday are merged, not overwritten.
        by_day.setdefault(weekday, []).extend(intervals or ())

    normalized: WeeklyPattern = {}
    for weekday in WEEKDAYS:
        if weekday not in by_day:
            continue
        shifts = _parse_day(weekday, by_day[weekday])
        if shifts:
            normalized[weekday] = shifts

    if not normalized:
        raise Empty()
    return normalized

