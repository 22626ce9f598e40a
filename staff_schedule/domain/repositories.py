"""Repository classes for data access."""

from __future__ import annotations

from contextlib import contextmanager
from datetime import date, datetime, time, timedelta
from typing import Any, Dict, Iterator, List, Mapping, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from staff_schedule.domain.entities import WeeklyPattern
from staff_schedule.errors import NotFound, PersistenceError
from staff_schedule.io.wire import decode_pattern, encode_pattern
from staff_schedule.services.timeplan import week_start
from staff_schedule.services.validator import validate_pattern

from .models import AssignmentRecord, BookedEventRecord, StaffRecord


@contextmanager
def _persisting(session: Session, action: str) -> Iterator[None]:
    """Roll back and raise ``PersistenceError`` when SQLAlchemy fails."""
    try:
        yield
    except SQLAlchemyError as e:
        session.rollback()
        raise PersistenceError(f"Failed to {action}: {e}") from e


def _pattern_from_payload(payload: Mapping[str, Any]) -> WeeklyPattern:
    if payload.get("pattern") is not None:
        return validate_pattern(payload["pattern"])
    return decode_pattern(payload.get("scheduleJson"))


def _anchor_from_payload(payload: Mapping[str, Any]) -> date:
    value = payload.get("weekStart") or payload.get("date")
    if value is None:
        raise ValueError("Assignment payload needs a weekStart or date")
    if isinstance(value, datetime):
        value = value.date()
    elif not isinstance(value, date):
        value = date.fromisoformat(str(value)[:10])
    return week_start(value)


class StaffRepository:
    """Repository for staff data access."""

    @staticmethod
    def get_all(session: Session) -> List[StaffRecord]:
        """Get all staff members."""
        return session.query(StaffRecord).order_by(StaffRecord.id).all()

    @staticmethod
    def get_active(session: Session) -> List[StaffRecord]:
        """Get staff members that can be scheduled."""
        return session.query(StaffRecord).filter(StaffRecord.active.is_(True)).order_by(StaffRecord.id).all()

    @staticmethod
    def get_by_id(session: Session, staff_id: int) -> Optional[StaffRecord]:
        """Get staff member by ID."""
        return session.query(StaffRecord).filter(StaffRecord.id == staff_id).first()

    @staticmethod
    def create(session: Session, staff: StaffRecord) -> StaffRecord:
        """Create a new staff member."""
        with _persisting(session, "create staff member"):
            session.add(staff)
            session.commit()
            session.refresh(staff)
        return staff


class AssignmentRepository:
    """
    Repository for recurring assignments.

    Payloads carry ``staffId``, ``weekStart`` (or any ``date`` inside the
    week), either ``pattern`` (weekday -> raw intervals) or ``scheduleJson``,
    and optional ``serviceId``, ``branchId`` and ``notes``. Patterns are
    validated before anything is written and anchors are moved to Monday.
    """

    @staticmethod
    def list(session: Session, staff_id: Optional[int] = None) -> List[AssignmentRecord]:
        """Get assignments, optionally for one staff member, oldest anchor first."""
        with _persisting(session, "list assignments"):
            query = session.query(AssignmentRecord)
            if staff_id is not None:
                query = query.filter(AssignmentRecord.staff_id == staff_id)
            return query.order_by(AssignmentRecord.week_start, AssignmentRecord.id).all()

    @staticmethod
    def get(session: Session, assignment_id: int) -> AssignmentRecord:
        """Get assignment by ID."""
        with _persisting(session, f"load assignment {assignment_id}"):
            record = session.get(AssignmentRecord, assignment_id)
        if record is None:
            raise NotFound(f"Assignment {assignment_id} not found")
        return record

    @staticmethod
    def create(session: Session, payload: Mapping[str, Any]) -> AssignmentRecord:
        """
        Validate and create a new assignment.

        Raises:
            ValidationError: The pattern is rejected; nothing is written
            PersistenceError: The database write failed
        """
        pattern = _pattern_from_payload(payload)
        record = AssignmentRecord(
            staff_id=int(payload["staffId"]),
            week_start=_anchor_from_payload(payload),
            schedule_json=encode_pattern(pattern),
            service_id=payload.get("serviceId"),
            branch_id=payload.get("branchId"),
            notes=payload.get("notes"),
        )
        with _persisting(session, "create assignment"):
            session.add(record)
            session.commit()
            session.refresh(record)
        return record

    @staticmethod
    def update(session: Session, assignment_id: int, payload: Mapping[str, Any]) -> AssignmentRecord:
        """Validate and update an existing assignment; omitted fields are kept."""
        record = AssignmentRepository.get(session, assignment_id)
        changes: Dict[str, Any] = {}
        if payload.get("pattern") is not None or payload.get("scheduleJson") is not None:
            changes["schedule_json"] = encode_pattern(_pattern_from_payload(payload))
        if payload.get("weekStart") or payload.get("date"):
            changes["week_start"] = _anchor_from_payload(payload)
        if payload.get("staffId") is not None:
            changes["staff_id"] = int(payload["staffId"])
        for key, column in (("serviceId", "service_id"), ("branchId", "branch_id"), ("notes", "notes")):
            if key in payload:
                changes[column] = payload[key]

        with _persisting(session, f"update assignment {assignment_id}"):
            for column, value in changes.items():
                setattr(record, column, value)
            session.commit()
            session.refresh(record)
        return record

    @staticmethod
    def delete(session: Session, assignment_id: int) -> None:
        """Delete an assignment by ID."""
        record = AssignmentRepository.get(session, assignment_id)
        with _persisting(session, f"delete assignment {assignment_id}"):
            session.delete(record)
            session.commit()


class BookedEventRepository:
    """Repository for booked events (read-mostly; appointments are owned elsewhere)."""

    @staticmethod
    def list_all(session: Session) -> List[BookedEventRecord]:
        with _persisting(session, "list booked events"):
            return session.query(BookedEventRecord).order_by(BookedEventRecord.scheduled_time).all()

    @staticmethod
    def list_for_day(session: Session, staff_id: int, day: date) -> List[BookedEventRecord]:
        """Get one staff member's events starting on ``day``."""
        start = datetime.combine(day, time.min)
        end = start + timedelta(days=1)
        with _persisting(session, "list booked events"):
            return (
                session.query(BookedEventRecord)
                .filter(BookedEventRecord.staff_id == staff_id)
                .filter(BookedEventRecord.scheduled_time >= start)
                .filter(BookedEventRecord.scheduled_time < end)
                .order_by(BookedEventRecord.scheduled_time)
                .all()
            )

    @staticmethod
    def create(session: Session, event: BookedEventRecord) -> BookedEventRecord:
        with _persisting(session, "create booked event"):
            session.add(event)
            session.commit()
            session.refresh(event)
        return event


def load_snapshot(session: Session, staff_id: Optional[int] = None) -> Dict[str, List[dict]]:
    """Raw ``{"assignments", "events"}`` payload for ``ScheduleStore.load``."""
    events = BookedEventRepository.list_all(session)
    if staff_id is not None:
        events = [e for e in events if e.staff_id == staff_id]
    return {
        "assignments": [r.to_wire() for r in AssignmentRepository.list(session, staff_id)],
        "events": [e.to_wire() for e in events],
    }


def repository_deleter(session: Session):
    """Delete callable for ``DeferredDeleteCoordinator`` backed by the repository."""

    def delete(assignment_id: int) -> None:
        AssignmentRepository.delete(session, assignment_id)

    return delete
