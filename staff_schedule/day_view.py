"""Day timeline for one staff member: store lookup, resolution and composition."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from staff_schedule.config import SchedulerConfig, ViewContext
from staff_schedule.domain.entities import ResolvedWindow, TimelineSegment, Weekday
from staff_schedule.services.timeline import Placement, compose, render_track
from staff_schedule.services.windows import resolve
from staff_schedule.store import ScheduleStore


@dataclass(frozen=True)
class DayTimeline:
    context: ViewContext
    window: Optional[ResolvedWindow]
    segments: List[TimelineSegment]
    day_start: int
    day_end: int

    @property
    def has_assignment(self) -> bool:
        """False when the segments are inferred and the caller should warn."""
        return bool(self.window and self.window.assignment.shifts_for(Weekday.of(self.context.date)))

    def placements(self) -> List[Placement]:
        return render_track(self.segments, self.day_start, self.day_end)


def compose_day(store: ScheduleStore, context: ViewContext, config: Optional[SchedulerConfig] = None) -> DayTimeline:
    """
    Build the timeline shown for ``context.staff_id`` on ``context.date``.

    Inferred work segments only exist in the returned value; nothing is
    written back to the store.
    """
    config = config or SchedulerConfig()
    day_start = config.day_window.start_minute
    day_end = config.day_window.end_minute

    window = resolve(store.assignments_for(context.staff_id), context.staff_id, context.date)
    shifts = window.assignment.shifts_for(Weekday.of(context.date)) if window else ()
    events = store.events_for(context.staff_id, context.date)

    return DayTimeline(
        context=context,
        window=window,
        segments=compose(shifts, events, day_start, day_end),
        day_start=day_start,
        day_end=day_end,
    )
