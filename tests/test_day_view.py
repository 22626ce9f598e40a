"""End-to-end tests for the day timeline pipeline."""

from datetime import date

import pytest

from staff_schedule.config import SchedulerConfig, ViewContext
from staff_schedule.day_view import compose_day
from staff_schedule.domain.entities import Provenance, SegmentKind
from staff_schedule.store import ScheduleStore

PATTERN = '[{"day":"MONDAY","shifts":[{"start":"08:00","end":"12:00"},{"start":"13:00","end":"17:00"}]}]'


@pytest.fixture
def store():
    store = ScheduleStore()
    store.load(
        lambda: {
            "assignments": [{"id": 1, "staffId": 10, "weekStart": "2025-01-06", "scheduleJson": PATTERN}],
            "events": [
                {"id": 100, "staffId": 10, "scheduledTime": "2025-01-06T09:00:00", "estimatedMinutes": 60},
                {"id": 101, "staffId": 10, "scheduledTime": "2025-01-07T10:00:00", "endTime": "2025-01-07T11:00:00"},
            ],
        }
    )
    return store


def test_assigned_day(store):
    day = compose_day(store, ViewContext(staff_id=10, date=date(2025, 1, 13)))
    assert day.has_assignment
    assert day.window.assignment.id == 1
    assert [(s.kind, s.provenance) for s in day.segments] == [
        (SegmentKind.WORK, Provenance.ASSIGNED),
        (SegmentKind.WORK, Provenance.ASSIGNED),
    ]


def test_assigned_day_with_booking(store):
    day = compose_day(store, ViewContext(staff_id=10, date=date(2025, 1, 6)))
    kinds = [(s.kind, s.start, s.end) for s in day.segments]
    assert kinds == [
        (SegmentKind.WORK, 480, 720),
        (SegmentKind.BOOKED, 540, 600),
        (SegmentKind.WORK, 780, 1020),
    ]


def test_weekday_without_shifts_is_inferred(store):
    day = compose_day(store, ViewContext(staff_id=10, date=date(2025, 1, 7)))
    assert day.window is not None
    assert not day.has_assignment
    assert [(s.kind, s.start, s.end) for s in day.segments] == [
        (SegmentKind.WORK, 480, 600),
        (SegmentKind.BOOKED, 600, 660),
        (SegmentKind.WORK, 660, 1200),
    ]
    assert all(s.provenance is Provenance.INFERRED for s in day.segments)


def test_inferred_segments_are_not_written_back(store):
    before = store.snapshot
    compose_day(store, ViewContext(staff_id=10, date=date(2025, 2, 3)))
    assert store.snapshot is before


def test_custom_day_window(store):
    cfg = SchedulerConfig()
    cfg.day_window.start = "12:00"
    cfg.day_window.end = "16:00"
    day = compose_day(store, ViewContext(staff_id=10, date=date(2025, 1, 13)), cfg)
    assert [(s.start, s.end) for s in day.segments] == [(780, 960)]
    placements = day.placements()
    assert placements[0].left == 25.0
    assert placements[0].width == 75.0
