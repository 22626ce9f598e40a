"""Value types shared by the resolver, the timeline composer and the store."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Dict, Optional, Tuple


class Weekday(str, Enum):
    MONDAY = "MONDAY"
    TUESDAY = "TUESDAY"
    WEDNESDAY = "WEDNESDAY"
    THURSDAY = "THURSDAY"
    FRIDAY = "FRIDAY"
    SATURDAY = "SATURDAY"
    SUNDAY = "SUNDAY"

    @classmethod
    def of(cls, day: date) -> "Weekday":
        return WEEKDAYS[day.weekday()]

    @classmethod
    def parse(cls, value) -> "Weekday":
        if isinstance(value, Weekday):
            return value
        return cls(str(value).strip().upper())


WEEKDAYS: Tuple[Weekday, ...] = tuple(Weekday)

MINUTES_PER_DAY = 24 * 60


@dataclass(frozen=True, order=True)
class ShiftInterval:
    """Half-open ``[start, end)`` time-of-day range in minutes."""

    start: int
    end: int

    def __post_init__(self):
        if not (0 <= self.start < self.end <= MINUTES_PER_DAY):
            raise ValueError(f"Invalid shift interval {self.start}-{self.end}")

    @property
    def minutes(self) -> int:
        return self.end - self.start


@dataclass(frozen=True)
class WeekdayShift:
    weekday: Weekday
    start: int
    end: int


WeeklyPattern = Dict[Weekday, Tuple[ShiftInterval, ...]]


@dataclass(frozen=True)
class StaffMember:
    id: int
    name: str
    active: bool = True


@dataclass(frozen=True)
class RecurringAssignment:
    """A weekly pattern taking effect from ``anchor_date`` for one staff member."""

    id: int
    staff_id: int
    anchor_date: date
    weekly_pattern: WeeklyPattern = field(default_factory=dict, hash=False)
    service_id: Optional[int] = None
    branch_id: Optional[int] = None
    notes: Optional[str] = None

    def shifts_for(self, weekday: Weekday) -> Tuple[ShiftInterval, ...]:
        return tuple(self.weekly_pattern.get(weekday, ()))

    def is_empty(self) -> bool:
        return not any(self.weekly_pattern.values())

    def weekday_shifts(self) -> Tuple[WeekdayShift, ...]:
        return tuple(
            WeekdayShift(day, s.start, s.end)
            for day in WEEKDAYS
            for s in self.shifts_for(day)
        )


@dataclass(frozen=True)
class BookedEvent:
    id: int
    staff_id: int
    start_at: datetime
    end_at: datetime
    label: str = ""


@dataclass(frozen=True)
class ResolvedWindow:
    """Inclusive ``[active_from, active_until]`` range in which ``assignment`` applies."""

    assignment: RecurringAssignment
    active_from: date
    active_until: date

    def covers(self, day: date) -> bool:
        return self.active_from <= day <= self.active_until


class SegmentKind(str, Enum):
    WORK = "work"
    BOOKED = "booked"
    GAP = "gap"


class Provenance(str, Enum):
    ASSIGNED = "assigned"
    INFERRED = "inferred"


@dataclass(frozen=True)
class TimelineSegment:
    kind: SegmentKind
    start: int
    end: int
    label: Optional[str] = None
    provenance: Provenance = Provenance.ASSIGNED

    @property
    def minutes(self) -> int:
        return self.end - self.start
