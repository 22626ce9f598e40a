"""Conversion between wire records and the typed schedule entities.

Every payload that crosses the data-access boundary goes through this module,
so the rest of the package only ever sees ``RecurringAssignment`` and
``BookedEvent`` values.
"""

from __future__ import annotations

import json
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Mapping, Optional

import pandas as pd

from staff_schedule.domain.entities import (
    WEEKDAYS,
    BookedEvent,
    RecurringAssignment,
    WeeklyPattern,
)
from staff_schedule.errors import MalformedStoredPattern, PersistenceError
from staff_schedule.services.timeplan import format_minutes
from staff_schedule.services.validator import validate_pattern

DEFAULT_EVENT_MINUTES = 30


def decode_pattern(text: Any) -> WeeklyPattern:
    """
    Parse and validate a ``[{"day": ..., "shifts": [...]}, ...]`` JSON array.

    An already decoded list is accepted as well.

    Raises:
        ValueError: Invalid JSON, unexpected shape, or any ``ValidationError``
    """
    if isinstance(text, list):
        entries = text
    elif text is None or not str(text).strip():
        raise ValueError("no schedule stored")
    else:
        entries = json.loads(str(text))
    if not isinstance(entries, list):
        raise ValueError("schedule must be a JSON array")

    raw: Dict[str, List[Any]] = {}
    for entry in entries:
        if not isinstance(entry, Mapping) or "day" not in entry:
            raise ValueError(f"schedule entry without a day: {entry!r}")
        shifts = entry.get("shifts") or []
        if not isinstance(shifts, list):
            raise ValueError(f"shifts for {entry['day']} must be a list")
        raw.setdefault(entry["day"], []).extend(shifts)
    return validate_pattern(raw)


def encode_pattern(pattern: WeeklyPattern) -> str:
    """Serialise a pattern in weekday order, omitting days without shifts."""
    entries = [
        {
            "day": weekday.value,
            "shifts": [
                {"start": format_minutes(s.start), "end": format_minutes(s.end)}
                for s in pattern[weekday]
            ],
        }
        for weekday in WEEKDAYS
        if pattern.get(weekday)
    ]
    return json.dumps(entries, separators=(",", ":"))


def normalize_response(payload: Any) -> List[Dict[str, Any]]:
    """
    Reduce an API response to a list of records.

    Accepts a bare list, a single record, or a ``{"success", "data",
    "message"}`` envelope whose ``data`` is a list, a record or null.

    Raises:
        PersistenceError: The envelope reports ``success: false`` or the
            shape is not recognised
    """
    if payload is None:
        return []
    if isinstance(payload, list):
        return [dict(r) for r in payload]
    if not isinstance(payload, Mapping):
        raise PersistenceError(f"Unexpected response shape: {type(payload).__name__}")

    if "success" in payload or "data" in payload:
        if payload.get("success") is False:
            raise PersistenceError(payload.get("message") or "Request failed")
        data = payload.get("data")
        if data is None:
            return []
        if isinstance(data, list):
            return [dict(r) for r in data]
        if isinstance(data, Mapping):
            return [dict(data)]
        raise PersistenceError(f"Unexpected data shape: {type(data).__name__}")
    return [dict(payload)]


def _parse_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def _staff_id(record: Mapping[str, Any]):
    staff_id = record.get("staffId", record.get("dentistId"))
    if staff_id is None:
        raise ValueError(f"Record {record.get('id')} has no staff id")
    return int(staff_id)


def assignment_from_wire(
    record: Mapping[str, Any],
    pattern: Optional[WeeklyPattern] = None,
) -> RecurringAssignment:
    """
    Build a ``RecurringAssignment`` from a stored record.

    The anchor is ``weekStart``, falling back to the date part of
    ``createdAt``. When ``pattern`` is given it is used instead of decoding
    ``scheduleJson``.

    Raises:
        MalformedStoredPattern: ``scheduleJson`` does not decode or validate
        ValueError: The record has no staff id or anchor date
    """
    anchor = record.get("weekStart") or record.get("createdAt")
    if not anchor:
        raise ValueError(f"Record {record.get('id')} has no anchor date")
    assignment_id = int(record["id"])
    staff_id = _staff_id(record)
    anchor_date = _parse_date(anchor)

    if pattern is None:
        try:
            pattern = decode_pattern(record.get("scheduleJson"))
        except ValueError as e:
            raise MalformedStoredPattern(record.get("id"), str(e)) from e

    return RecurringAssignment(
        id=assignment_id,
        staff_id=staff_id,
        anchor_date=anchor_date,
        weekly_pattern=pattern,
        service_id=record.get("serviceId"),
        branch_id=record.get("branchId"),
        notes=record.get("notes"),
    )


def assignment_to_wire(assignment: RecurringAssignment) -> Dict[str, Any]:
    return {
        "id": assignment.id,
        "staffId": assignment.staff_id,
        "weekStart": assignment.anchor_date.isoformat(),
        "scheduleJson": encode_pattern(assignment.weekly_pattern),
        "serviceId": assignment.service_id,
        "branchId": assignment.branch_id,
        "notes": assignment.notes,
    }


def _timestamp(value: Any, tz: Optional[str]) -> datetime:
    """Naive local wall-clock time, so naive and offset-aware inputs compare."""
    ts = pd.Timestamp(value)
    if ts.tzinfo is not None:
        if tz is not None:
            ts = ts.tz_convert(tz)
        ts = ts.tz_localize(None)
    return ts.to_pydatetime()


def event_from_wire(
    record: Mapping[str, Any],
    tz: Optional[str] = None,
    default_minutes: int = DEFAULT_EVENT_MINUTES,
) -> BookedEvent:
    """
    Build a ``BookedEvent`` from an appointment record.

    ``endTime`` is optional; without it the event lasts ``estimatedMinutes``
    (or ``default_minutes``). Offset-aware timestamps are converted to ``tz``
    and stored as naive wall-clock times; naive inputs are taken as already
    local.
    """
    if not record.get("scheduledTime"):
        raise ValueError(f"Event {record.get('id')} has no scheduledTime")
    start_at = _timestamp(record["scheduledTime"], tz)
    if record.get("endTime"):
        end_at = _timestamp(record["endTime"], tz)
    else:
        minutes = record.get("estimatedMinutes") or default_minutes
        end_at = start_at + timedelta(minutes=int(minutes))

    label = (
        record.get("label")
        or record.get("customerUsername")
        or record.get("customerName")
        or record.get("serviceName")
        or ""
    )
    return BookedEvent(
        id=int(record["id"]),
        staff_id=_staff_id(record),
        start_at=start_at,
        end_at=end_at,
        label=str(label),
    )
