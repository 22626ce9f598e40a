"""Tests for time-plan helpers."""

from datetime import date

import pytest

from staff_schedule.services.timeplan import duration_label, end_of_month, format_minutes, parse_hhmm, week_start


def test_parse_and_format():
    assert parse_hhmm("07:30") == 450
    assert parse_hhmm("00:00") == 0
    assert parse_hhmm("24:00") == 1440
    assert format_minutes(450) == "07:30"
    assert format_minutes(1440) == "24:00"
    with pytest.raises(ValueError):
        parse_hhmm("24:00", allow_end_of_day=False)


def test_week_start_and_month_end():
    assert week_start(date(2025, 1, 1)) == date(2024, 12, 30)
    assert week_start(date(2025, 1, 6)) == date(2025, 1, 6)
    assert week_start(date(2025, 1, 12)) == date(2025, 1, 6)
    assert end_of_month(date(2024, 2, 10)) == date(2024, 2, 29)
    assert end_of_month(date(2025, 12, 1)) == date(2025, 12, 31)


@pytest.mark.parametrize(
    "start,end,label",
    [
        ("08:00", "08:45", "45 min"),
        ("08:00", "10:00", "2 h"),
        ("08:00", "09:30", "1 h 30 min"),
        ("22:00", "02:00", "4 h"),
        ("08:00", "08:00", ""),
        ("8:00", "09:00", ""),
    ],
)
def test_duration_label(start, end, label):
    assert duration_label(start, end) == label
