"""Fixed-length booking slots within working hours."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, List, Optional

from staff_schedule.domain.entities import BookedEvent

from .timeline import event_span, minute_of
from .timeplan import format_minutes


@dataclass(frozen=True)
class TimeSlot:
    start: int
    end: int
    available: bool
    event: Optional[BookedEvent] = None
    is_past: bool = False

    @property
    def label(self) -> str:
        return format_minutes(self.start)


def _is_past(day: date, slot_start: int, now: Optional[datetime]) -> bool:
    if now is None:
        return False
    today = now.date()
    if day != today:
        return day < today
    return slot_start <= minute_of(now)


def available_slots(
    events: Iterable[BookedEvent],
    day: date,
    work_start: int,
    work_end: int,
    slot_minutes: int = 30,
    now: Optional[datetime] = None,
) -> List[TimeSlot]:
    """
    Split ``[work_start, work_end)`` into slots and mark the booked ones.

    A slot is occupied when it overlaps an event
    (``slot.start < event.end and slot.end > event.start``).

    Args:
        events: Booked events for the staff member on ``day``
        day: Date the slots belong to
        work_start: First minute of working hours
        work_end: Minute at which working hours end
        slot_minutes: Slot length
        now: Reference time for ``is_past``; ``None`` flags nothing as past

    Returns:
        Slots in chronological order; a slot is available when it is neither
        occupied nor in the past
    """
    if slot_minutes <= 0:
        raise ValueError("slot_minutes must be positive")
    spans = [(event_span(e), e) for e in events]

    slots: List[TimeSlot] = []
    for start in range(work_start, work_end, slot_minutes):
        end = start + slot_minutes
        hit = next((e for (s, en), e in spans if start < en and end > s), None)
        past = _is_past(day, start, now)
        slots.append(TimeSlot(start, end, available=hit is None and not past, event=hit, is_past=past))
    return slots
