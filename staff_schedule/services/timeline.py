"""Composition of a single day's timeline from shifts and booked events."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional, Sequence, Tuple

from staff_schedule.domain.entities import (
    MINUTES_PER_DAY,
    BookedEvent,
    Provenance,
    SegmentKind,
    ShiftInterval,
    TimelineSegment,
)

# Work before booked when two segments start together.
_KIND_ORDER = {SegmentKind.WORK: 0, SegmentKind.BOOKED: 1, SegmentKind.GAP: 2}


def minute_of(ts: datetime) -> int:
    return ts.hour * 60 + ts.minute


def event_span(event: BookedEvent) -> Tuple[int, int]:
    """Project an event onto minutes of its start day.

    An event running past midnight ends at the end of the day.
    """
    start = minute_of(event.start_at)
    if event.end_at.date() > event.start_at.date():
        return start, MINUTES_PER_DAY
    return start, max(start, minute_of(event.end_at))


def _check_bounds(day_start: int, day_end: int) -> None:
    if not 0 <= day_start < day_end <= MINUTES_PER_DAY:
        raise ValueError(f"Invalid day bounds {day_start}-{day_end}")


def _clamp(start: int, end: int, day_start: int, day_end: int) -> Optional[Tuple[int, int]]:
    start, end = max(start, day_start), min(end, day_end)
    if start >= end:
        return None
    return start, end


def _booked(event: BookedEvent, day_start: int, day_end: int, provenance: Provenance) -> Optional[TimelineSegment]:
    span = _clamp(*event_span(event), day_start, day_end)
    if span is None:
        return None
    return TimelineSegment(SegmentKind.BOOKED, span[0], span[1], event.label or None, provenance)


def _sort_key(seg: TimelineSegment):
    return (seg.start, _KIND_ORDER[seg.kind], seg.end)


def compose(
    shifts: Sequence[ShiftInterval],
    events: Iterable[BookedEvent],
    day_start: int,
    day_end: int,
) -> List[TimelineSegment]:
    """
    Merge shifts and booked events into an ordered list of segments.

    With shifts, every shift becomes an assigned work segment and every event
    a booked segment; overlaps between the two are kept. Without shifts, work
    segments are inferred for the time between events so that, for events
    that do not overlap one another, the result tiles ``[day_start, day_end)``.

    Args:
        shifts: Validated shifts for the date (may be empty)
        events: Booked events of the same staff member and date
        day_start: First minute of the rendered day
        day_end: Minute at which the rendered day ends

    Returns:
        Segments sorted by start
    """
    _check_bounds(day_start, day_end)

    if shifts:
        segments: List[TimelineSegment] = []
        for shift in shifts:
            span = _clamp(shift.start, shift.end, day_start, day_end)
            if span is not None:
                segments.append(TimelineSegment(SegmentKind.WORK, span[0], span[1], None, Provenance.ASSIGNED))
        for event in events:
            seg = _booked(event, day_start, day_end, Provenance.ASSIGNED)
            if seg is not None:
                segments.append(seg)
        return sorted(segments, key=_sort_key)

    booked = [
        seg
        for seg in (_booked(e, day_start, day_end, Provenance.INFERRED) for e in events)
        if seg is not None
    ]
    booked.sort(key=_sort_key)

    segments = []
    cursor = day_start
    for seg in booked:
        if seg.start > cursor:
            segments.append(TimelineSegment(SegmentKind.WORK, cursor, seg.start, None, Provenance.INFERRED))
        segments.append(seg)
        cursor = max(cursor, seg.end)
    if cursor < day_end:
        segments.append(TimelineSegment(SegmentKind.WORK, cursor, day_end, None, Provenance.INFERRED))
    return segments


def find_gaps(segments: Iterable[TimelineSegment], day_start: int, day_end: int) -> List[TimelineSegment]:
    """Gap segments for the parts of ``[day_start, day_end)`` no segment covers."""
    gaps: List[TimelineSegment] = []
    cursor = day_start
    for seg in sorted(segments, key=_sort_key):
        if seg.start > cursor:
            gaps.append(TimelineSegment(SegmentKind.GAP, cursor, min(seg.start, day_end), None, Provenance.ASSIGNED))
        cursor = max(cursor, seg.end)
        if cursor >= day_end:
            break
    if cursor < day_end:
        gaps.append(TimelineSegment(SegmentKind.GAP, cursor, day_end, None, Provenance.ASSIGNED))
    return gaps


def to_percent(t: float, day_start: int, day_end: int) -> float:
    """Position of minute ``t`` on the day track, clamped to 0..100.

    Raises:
        ValueError: The bounds do not describe a non-empty day
    """
    _check_bounds(day_start, day_end)
    pct = (t - day_start) / (day_end - day_start) * 100
    return max(0.0, min(100.0, pct))


def width(start: float, end: float, day_start: int, day_end: int) -> float:
    """Track width of ``[start, end)`` that never overflows past 100%."""
    left = to_percent(start, day_start, day_end)
    raw = to_percent(end, day_start, day_end) - left
    return max(0.0, min(raw, 100.0 - left))


@dataclass(frozen=True)
class Placement:
    segment: TimelineSegment
    left: float
    width: float


def render_track(segments: Iterable[TimelineSegment], day_start: int, day_end: int) -> List[Placement]:
    """Proportional placements of segments on a ``[day_start, day_end]`` track."""
    return [
        Placement(
            segment=seg,
            left=to_percent(seg.start, day_start, day_end),
            width=width(seg.start, seg.end, day_start, day_end),
        )
        for seg in segments
    ]
