"""Resolution of the recurring assignment in effect for a staff member and date.

A recurring assignment applies from its anchor date to the end of the
anchor's month, unless another assignment for the same staff member is
anchored earlier than that, in which case it ends the day before.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable, List, Optional, Sequence, Tuple

import pandas as pd

from staff_schedule.domain.entities import (
    RecurringAssignment,
    ResolvedWindow,
    ShiftInterval,
    Weekday,
)

from .timeplan import end_of_month


def _for_staff(assignments: Iterable[RecurringAssignment], staff_id) -> List[RecurringAssignment]:
    return [a for a in assignments if a.staff_id == staff_id]


def _precedence(a: RecurringAssignment) -> Tuple[date, int]:
    # Same-anchor ties go to the most recently created record (highest id).
    return (a.anchor_date, a.id)


def window_for(
    assignment: RecurringAssignment,
    assignments: Iterable[RecurringAssignment],
) -> ResolvedWindow:
    """
    Compute the active window of one assignment.

    Args:
        assignment: Assignment whose window is wanted
        assignments: All known assignments (other staff are ignored)

    Returns:
        ResolvedWindow; ``active_until`` is the earlier of the anchor month's
        last day and the day before the next later anchor for the same staff
    """
    active_until = end_of_month(assignment.anchor_date)
    later = [
        a.anchor_date
        for a in _for_staff(assignments, assignment.staff_id)
        if a.anchor_date > assignment.anchor_date
    ]
    if later:
        active_until = min(active_until, min(later) - timedelta(days=1))
    return ResolvedWindow(
        assignment=assignment,
        active_from=assignment.anchor_date,
        active_until=active_until,
    )


def resolve(
    assignments: Sequence[RecurringAssignment],
    staff_id,
    day: date,
) -> Optional[ResolvedWindow]:
    """
    Find the assignment in effect for ``staff_id`` on ``day``.

    The most recent anchor not after ``day`` wins. Returns ``None`` when no
    assignment is anchored on or before the date, or when the winning
    assignment's window has already lapsed.
    """
    staff_assignments = _for_staff(assignments, staff_id)
    candidates = [a for a in staff_assignments if a.anchor_date <= day]
    if not candidates:
        return None

    chosen = max(candidates, key=_precedence)
    window = window_for(chosen, staff_assignments)
    if day > window.active_until:
        return None
    return window


def shifts_on(
    assignments: Sequence[RecurringAssignment],
    staff_id,
    day: date,
) -> Tuple[ShiftInterval, ...]:
    """Shift intervals scheduled for ``day``; empty when nothing applies."""
    window = resolve(assignments, staff_id, day)
    if window is None:
        return ()
    return window.assignment.shifts_for(Weekday.of(day))


def has_assignment_on(
    assignments: Sequence[RecurringAssignment],
    staff_id,
    day: date,
) -> bool:
    """True when an active assignment schedules at least one shift on ``day``."""
    return bool(shifts_on(assignments, staff_id, day))


def upcoming(
    assignments: Iterable[RecurringAssignment],
    staff_id,
    day: date,
) -> List[RecurringAssignment]:
    """Assignments for ``staff_id`` anchored strictly after ``day``, earliest first."""
    later = [a for a in _for_staff(assignments, staff_id) if a.anchor_date > day]
    return sorted(later, key=_precedence)


def month_calendar(
    assignments: Sequence[RecurringAssignment],
    staff_id,
    year: int,
    month: int,
) -> pd.DataFrame:
    """
    Per-day view of one month for the assignment calendar.

    Returns:
        DataFrame with columns ``date``, ``weekday``, ``assignment_id``
        (``<NA>`` where unresolved), ``shift_count`` and ``work_minutes``
    """
    first = pd.Timestamp(year=year, month=month, day=1)
    days = pd.date_range(first, first + pd.offsets.MonthEnd(0), freq="D")

    rows = []
    for ts in days:
        day = ts.date()
        window = resolve(assignments, staff_id, day)
        shifts = window.assignment.shifts_for(Weekday.of(day)) if window else ()
        rows.append(
            {
                "date": day,
                "weekday": Weekday.of(day).value,
                "assignment_id": window.assignment.id if window else None,
                "shift_count": len(shifts),
                "work_minutes": sum(s.minutes for s in shifts),
            }
        )
    frame = pd.DataFrame(rows, columns=["date", "weekday", "assignment_id", "shift_count", "work_minutes"])
    return frame.astype({"assignment_id": "Int64"})
