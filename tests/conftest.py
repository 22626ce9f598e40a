"""Pytest configuration and shared fixtures."""

from datetime import date

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from staff_schedule.domain.entities import RecurringAssignment, ShiftInterval, Weekday
from staff_schedule.domain.models import Base


def pytest_configure(config):
    """Configure pytest."""
    # Add custom markers
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests (deselect with '-m \"not integration\"')"
    )


class _Handle:
    def __init__(self, due, callback):
        self.due = due
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class ManualScheduler:
    """Deterministic stand-in for an event loop's ``call_later``."""

    def __init__(self):
        self.now = 0.0
        self.handles = []

    def call_later(self, delay, callback):
        handle = _Handle(self.now + delay, callback)
        self.handles.append(handle)
        return handle

    def advance(self, seconds):
        self.now += seconds
        due = [h for h in self.handles if not h.cancelled and h.due <= self.now]
        for handle in sorted(due, key=lambda h: h.due):
            self.handles.remove(handle)
            handle.callback()


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def db_session():
    """Create in-memory database session for testing."""
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    SessionLocal = sessionmaker(bind=engine)
    session = SessionLocal()
    yield session
    session.close()


def make_assignment(assignment_id, staff_id, anchor, pattern=None):
    """Assignment with a Monday-to-Friday 08:00-12:00 pattern unless given."""
    if pattern is None:
        pattern = {
            day: (ShiftInterval(8 * 60, 12 * 60),)
            for day in (Weekday.MONDAY, Weekday.TUESDAY, Weekday.WEDNESDAY, Weekday.THURSDAY, Weekday.FRIDAY)
        }
    if isinstance(anchor, str):
        anchor = date.fromisoformat(anchor)
    return RecurringAssignment(id=assignment_id, staff_id=staff_id, anchor_date=anchor, weekly_pattern=pattern)
