"""Create and update assignments through the repository and keep the store in step."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from sqlalchemy.orm import Session

from staff_schedule.domain.entities import RecurringAssignment
from staff_schedule.domain.repositories import AssignmentRepository
from staff_schedule.io.wire import assignment_from_wire
from staff_schedule.store import ScheduleStore

logger = logging.getLogger(__name__)


def save_assignment(
    session: Session,
    store: ScheduleStore,
    payload: Mapping[str, Any],
    assignment_id: Optional[int] = None,
) -> RecurringAssignment:
    """
    Create (``assignment_id is None``) or update an assignment.

    The store only changes after the write succeeds. ``ValidationError`` and
    ``PersistenceError`` propagate with the store untouched.
    """
    if assignment_id is None:
        record = AssignmentRepository.create(session, payload)
    else:
        record = AssignmentRepository.update(session, assignment_id, payload)

    assignment = assignment_from_wire(record.to_wire())
    store.with_assignment(assignment)
    logger.info("Saved assignment %s for staff %s from %s", assignment.id, assignment.staff_id, assignment.anchor_date)
    return assignment
