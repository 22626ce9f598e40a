"""Tests for weekly pattern validation."""

import pytest

from staff_schedule.domain.entities import ShiftInterval, Weekday
from staff_schedule.errors import BadFormat, Empty, InvertedInterval, Overlap, ValidationError
from staff_schedule.services.validator import validate_pattern


def test_valid_pattern_is_sorted_and_normalized():
    """Intervals come back sorted by start with weekday enum keys."""
    pattern = validate_pattern(
        {
            "monday": [{"start": "13:00", "end": "17:00"}, {"start": "08:00", "end": "12:00"}],
            Weekday.FRIDAY: [("09:30", "11:00")],
            "SUNDAY": [],
        }
    )
    assert list(pattern) == [Weekday.MONDAY, Weekday.FRIDAY]
    assert pattern[Weekday.MONDAY] == (ShiftInterval(480, 720), ShiftInterval(780, 1020))
    assert pattern[Weekday.FRIDAY] == (ShiftInterval(570, 660),)


def test_inverted_interval_names_weekday():
    with pytest.raises(InvertedInterval) as exc:
        validate_pattern({"MONDAY": [{"start": "09:00", "end": "08:00"}]})
    assert exc.value.weekday == "MONDAY"
    assert exc.value == InvertedInterval("MONDAY")


def test_equal_start_and_end_is_inverted():
    with pytest.raises(InvertedInterval):
        validate_pattern({"TUESDAY": [{"start": "09:00", "end": "09:00"}]})


def test_overlap_names_weekday():
    with pytest.raises(Overlap) as exc:
        validate_pattern(
            {"MONDAY": [{"start": "08:00", "end": "12:00"}, {"start": "11:00", "end": "13:00"}]}
        )
    assert exc.value.weekday == "MONDAY"


def test_touching_intervals_do_not_overlap():
    pattern = validate_pattern(
        {"WEDNESDAY": [{"start": "12:00", "end": "13:00"}, {"start": "08:00", "end": "12:00"}]}
    )
    assert len(pattern[Weekday.WEDNESDAY]) == 2


@pytest.mark.parametrize("start", ["9:00", "09:0", "24:30", "09:60", "0900", "", None, "ab:cd"])
def test_bad_format(start):
    with pytest.raises(BadFormat) as exc:
        validate_pattern({"THURSDAY": [{"start": start, "end": "10:00"}]})
    assert exc.value.weekday == "THURSDAY"


def test_end_of_day_allowed_only_as_end():
    pattern = validate_pattern({"SATURDAY": [{"start": "20:00", "end": "24:00"}]})
    assert pattern[Weekday.SATURDAY] == (ShiftInterval(1200, 1440),)
    with pytest.raises(BadFormat):
        validate_pattern({"SATURDAY": [{"start": "24:00", "end": "24:00"}]})


def test_unknown_weekday_is_bad_format():
    with pytest.raises(BadFormat) as exc:
        validate_pattern({"FUNDAY": [{"start": "08:00", "end": "09:00"}]})
    assert exc.value.weekday == "FUNDAY"


def test_empty_pattern_rejected():
    with pytest.raises(Empty):
        validate_pattern({})
    with pytest.raises(Empty):
        validate_pattern({"MONDAY": [], "TUESDAY": []})


def test_validation_errors_are_value_errors():
    """Callers that only know ValueError still catch validation failures."""
    with pytest.raises(ValueError):
        validate_pattern({"MONDAY": [{"start": "10:00", "end": "09:00"}]})
    assert issubclass(Empty, ValidationError)


def test_first_bad_weekday_in_week_order_is_reported():
    with pytest.raises(ValidationError) as exc:
        validate_pattern(
            {
                "FRIDAY": [{"start": "10:00", "end": "09:00"}],
                "TUESDAY": [{"start": "08:00", "end": "12:00"}, {"start": "09:00", "end": "10:00"}],
            }
        )
    assert isinstance(exc.value, Overlap)
    assert exc.value.weekday == "TUESDAY"


def test_keys_for_the_same_weekday_are_merged():
    with pytest.raises(Overlap) as exc:
        validate_pattern(
            {
                "monday": [{"start": "08:00", "end": "12:00"}],
                Weekday.MONDAY: [{"start": "11:00", "end": "13:00"}],
            }
        )
    assert exc.value.weekday == "MONDAY"

    merged = validate_pattern(
        {
            "MONDAY": [{"start": "13:00", "end": "17:00"}],
            Weekday.MONDAY: [{"start": "08:00", "end": "12:00"}],
        }
    )
    assert merged[Weekday.MONDAY] == (ShiftInterval(480, 720), ShiftInterval(780, 1020))
