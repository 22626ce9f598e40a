"""In-memory cache of assignments and booked events, one snapshot at a time."""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from staff_schedule.domain.entities import BookedEvent, RecurringAssignment
from staff_schedule.errors import MalformedStoredPattern, PersistenceError
from staff_schedule.io.wire import (
    DEFAULT_EVENT_MINUTES,
    assignment_from_wire,
    event_from_wire,
    normalize_response,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Snapshot:
    """Immutable index of one successful load."""

    assignments: Mapping[int, Tuple[RecurringAssignment, ...]] = field(default_factory=dict)
    events: Mapping[int, Tuple[BookedEvent, ...]] = field(default_factory=dict)
    malformed: Tuple[MalformedStoredPattern, ...] = ()
    rejected: Tuple[str, ...] = ()

    @classmethod
    def build(
        cls,
        assignments: Iterable[RecurringAssignment],
        events: Iterable[BookedEvent],
        malformed: Iterable[MalformedStoredPattern] = (),
        rejected: Iterable[str] = (),
    ) -> "Snapshot":
        by_staff: Dict[int, List[RecurringAssignment]] = defaultdict(list)
        for a in assignments:
            by_staff[a.staff_id].append(a)
        events_by_staff: Dict[int, List[BookedEvent]] = defaultdict(list)
        for e in events:
            events_by_staff[e.staff_id].append(e)
        return cls(
            assignments={
                k: tuple(sorted(v, key=lambda a: (a.anchor_date, a.id))) for k, v in by_staff.items()
            },
            events={k: tuple(sorted(v, key=lambda e: (e.start_at, e.id))) for k, v in events_by_staff.items()},
            malformed=tuple(malformed),
            rejected=tuple(rejected),
        )

    def all_assignments(self) -> List[RecurringAssignment]:
        return [a for group in self.assignments.values() for a in group]

    def all_events(self) -> List[BookedEvent]:
        return [e for group in self.events.values() for e in group]


class ScheduleStore:
    """
    Holds the last successfully loaded snapshot.

    A failed load keeps the previous snapshot and sets ``last_error``.
    Snapshots are replaced wholesale, never mutated.
    """

    def __init__(self, tz: Optional[str] = None, default_event_minutes: int = DEFAULT_EVENT_MINUTES):
        self.tz = tz
        self.default_event_minutes = default_event_minutes
        self._snapshot = Snapshot()
        self.last_error: Optional[PersistenceError] = None

    @property
    def snapshot(self) -> Snapshot:
        return self._snapshot

    @property
    def has_error(self) -> bool:
        return self.last_error is not None

    def assignments_for(self, staff_id) -> List[RecurringAssignment]:
        return list(self._snapshot.assignments.get(staff_id, ()))

    def events_for(self, staff_id, day: date) -> List[BookedEvent]:
        return [e for e in self._snapshot.events.get(staff_id, ()) if e.start_at.date() == day]

    def install(self, snapshot: Snapshot) -> Snapshot:
        self._snapshot = snapshot
        self.last_error = None
        return snapshot

    def load(self, fetch: Callable[[], Mapping[str, Any]]) -> bool:
        """
        Replace the snapshot with freshly fetched raw data.

        Args:
            fetch: Returns ``{"assignments": payload, "events": payload}``
                where each payload is any shape accepted by
                ``normalize_response``

        Returns:
            True on success; False if ``fetch`` raised ``PersistenceError``
        """
        try:
            raw = fetch()
        except PersistenceError as e:
            return self._fail(e)
        return self._apply(raw)

    async def load_async(self, fetch: Callable[[], Awaitable[Mapping[str, Any]]]) -> bool:
        try:
            raw = await fetch()
        except PersistenceError as e:
            return self._fail(e)
        return self._apply(raw)

    def _fail(self, error: PersistenceError) -> bool:
        logger.warning("Schedule load failed, keeping previous snapshot: %s", error)
        self.last_error = error
        return False

    def _apply(self, raw: Mapping[str, Any]) -> bool:
        try:
            assignment_records = normalize_response(raw.get("assignments"))
            event_records = normalize_response(raw.get("events"))
        except PersistenceError as e:
            return self._fail(e)
        self.install(self._decode(assignment_records, event_records))
        return True

    def _decode(self, assignment_records, event_records) -> Snapshot:
        assignments: List[RecurringAssignment] = []
        events: List[BookedEvent] = []
        malformed: List[MalformedStoredPattern] = []
        rejected: List[str] = []

        for record in assignment_records:
            try:
                assignments.append(assignment_from_wire(record))
            except MalformedStoredPattern as e:
                logger.warning("%s; treating it as an empty pattern", e)
                malformed.append(e)
                assignments.append(assignment_from_wire(record, pattern={}))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Skipping assignment record %s: %s", record.get("id"), e)
                rejected.append(f"assignment {record.get('id')}: {e}")

        for record in event_records:
            try:
                events.append(event_from_wire(record, self.tz, self.default_event_minutes))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Skipping event record %s: %s", record.get("id"), e)
                rejected.append(f"event {record.get('id')}: {e}")

        return Snapshot.build(assignments, events, malformed, rejected)

    def with_assignment(self, assignment: RecurringAssignment) -> Snapshot:
        """Install a snapshot where ``assignment`` replaces any record with its id."""
        others = [a for a in self._snapshot.all_assignments() if a.id != assignment.id]
        malformed = [m for m in self._snapshot.malformed if m.assignment_id != assignment.id]
        return self._replace_assignments(others + [assignment], malformed)

    def without_assignment(self, assignment_id) -> Snapshot:
        others = [a for a in self._snapshot.all_assignments() if a.id != assignment_id]
        malformed = [m for m in self._snapshot.malformed if m.assignment_id != assignment_id]
        return self._replace_assignments(others, malformed)

    def _replace_assignments(self, assignments, malformed) -> Snapshot:
        current = self._snapshot
        self._snapshot = Snapshot.build(assignments, current.all_events(), malformed, current.rejected)
        return self._snapshot
