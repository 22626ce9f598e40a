"""Domain values and SQLAlchemy models.

Repositories live in ``staff_schedule.domain.repositories``.
"""

from .entities import (
    BookedEvent,
    Provenance,
    RecurringAssignment,
    ResolvedWindow,
    SegmentKind,
    ShiftInterval,
    StaffMember,
    TimelineSegment,
    Weekday,
    WeekdayShift,
)
from .models import AssignmentRecord, Base, BookedEventRecord, StaffRecord

__all__ = [
    "BookedEvent",
    "Provenance",
    "RecurringAssignment",
    "ResolvedWindow",
    "SegmentKind",
    "ShiftInterval",
    "StaffMember",
    "TimelineSegment",
    "Weekday",
    "WeekdayShift",
    "AssignmentRecord",
    "Base",
    "BookedEventRecord",
    "StaffRecord",
]
