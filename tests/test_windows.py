"""Tests for recurring assignment window resolution."""

from datetime import date

import pandas as pd

from staff_schedule.domain.entities import ShiftInterval, Weekday
from staff_schedule.services.windows import (
    has_assignment_on,
    month_calendar,
    resolve,
    shifts_on,
    upcoming,
    window_for,
)

from conftest import make_assignment


def test_later_anchor_supersedes_earlier():
    a = make_assignment(1, 10, "2025-01-01")
    b = make_assignment(2, 10, "2025-01-15")
    assignments = [b, a]

    window = resolve(assignments, 10, date(2025, 1, 10))
    assert window.assignment is a
    assert window.active_from == date(2025, 1, 1)
    assert window.active_until == date(2025, 1, 14)

    window = resolve(assignments, 10, date(2025, 1, 15))
    assert window.assignment is b
    assert window.active_until == date(2025, 1, 31)


def test_window_lapses_at_month_end():
    a = make_assignment(1, 10, "2025-01-01")
    assert resolve([a], 10, date(2025, 1, 31)).active_until == date(2025, 1, 31)
    assert resolve([a], 10, date(2025, 2, 1)) is None


def test_date_before_any_anchor_has_no_resolution():
    a = make_assignment(1, 10, "2025-03-03")
    assert resolve([a], 10, date(2025, 3, 2)) is None
    assert resolve([], 10, date(2025, 3, 2)) is None


def test_other_staff_are_ignored():
    mine = make_assignment(1, 10, "2025-01-06")
    theirs = make_assignment(2, 11, "2025-01-13")
    window = resolve([mine, theirs], 10, date(2025, 1, 20))
    assert window.assignment is mine
    assert window.active_until == date(2025, 1, 31)
    assert resolve([mine, theirs], 12, date(2025, 1, 20)) is None


def test_resolution_is_deterministic():
    assignments = [
        make_assignment(3, 10, "2025-02-03"),
        make_assignment(1, 10, "2025-01-06"),
        make_assignment(2, 10, "2025-01-20"),
    ]
    for day in pd.date_range("2025-01-01", "2025-03-05", freq="D"):
        first = resolve(assignments, 10, day.date())
        assert all(resolve(assignments, 10, day.date()) == first for _ in range(3))
        assert resolve(list(reversed(assignments)), 10, day.date()) == first


def test_same_anchor_tie_goes_to_highest_id():
    older = make_assignment(4, 10, "2025-01-06")
    newer = make_assignment(9, 10, "2025-01-06")
    assert resolve([newer, older], 10, date(2025, 1, 8)).assignment is newer


def test_window_for_any_assignment():
    a = make_assignment(1, 10, "2025-01-27")
    b = make_assignment(2, 10, "2025-02-10")
    assert window_for(a, [a, b]).active_until == date(2025, 1, 31)
    assert window_for(b, [a, b]).active_until == date(2025, 2, 28)


def test_shifts_on_uses_weekday_of_date():
    pattern = {Weekday.WEDNESDAY: (ShiftInterval(540, 600),)}
    a = make_assignment(1, 10, "2025-01-06", pattern=pattern)
    assert shifts_on([a], 10, date(2025, 1, 8)) == (ShiftInterval(540, 600),)
    assert shifts_on([a], 10, date(2025, 1, 9)) == ()
    assert has_assignment_on([a], 10, date(2025, 1, 8))
    assert not has_assignment_on([a], 10, date(2025, 1, 9))
    assert not has_assignment_on([a], 10, date(2025, 2, 5))


def test_upcoming_lists_later_anchors_in_order():
    a = make_assignment(1, 10, "2025-01-06")
    b = make_assignment(2, 10, "2025-02-03")
    c = make_assignment(3, 10, "2025-01-20")
    other = make_assignment(4, 11, "2025-03-03")
    assert upcoming([a, b, c, other], 10, date(2025, 1, 6)) == [c, b]
    assert upcoming([a, b, c], 10, date(2025, 2, 3)) == []


def test_month_calendar_marks_covered_days():
    a = make_assignment(1, 10, "2025-01-06")
    frame = month_calendar([a], 10, 2025, 1)

    assert len(frame) == 31
    assert list(frame.columns) == ["date", "weekday", "assignment_id", "shift_count", "work_minutes"]

    by_day = frame.set_index("date")
    assert pd.isna(by_day.loc[date(2025, 1, 3), "assignment_id"])
    assert by_day.loc[date(2025, 1, 6), "assignment_id"] == 1
    assert by_day.loc[date(2025, 1, 6), "work_minutes"] == 240
    # Saturday inside the window has no shifts
    assert by_day.loc[date(2025, 1, 11), "assignment_id"] == 1
    assert by_day.loc[date(2025, 1, 11), "shift_count"] == 0
    assert frame["work_minutes"].sum() == 240 * 20
