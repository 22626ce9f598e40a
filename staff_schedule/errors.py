"""Error taxonomy for schedule validation, stored data and persistence."""

from __future__ import annotations

from typing import Optional


class ValidationError(ValueError):
    """A weekly pattern was rejected before reaching the store.

    ``weekday`` names the offending day (``None`` for pattern-wide rules) and
    ``rule`` is a short machine-readable reason.
    """

    rule = "invalid"

    def __init__(self, weekday: Optional[str] = None, detail: str = ""):
        self.weekday = weekday
        self.detail = detail
        super().__init__(self._message())

    def _message(self) -> str:
        where = f" on {self.weekday}" if self.weekday else ""
        extra = f": {self.detail}" if self.detail else ""
        return f"{self.rule}{where}{extra}"

    def __eq__(self, other: object) -> bool:
        return (
            type(self) is type(other)
            and self.weekday == other.weekday  # type: ignore[attr-defined]
        )

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.weekday))


class BadFormat(ValidationError):
    rule = "bad_format"


class InvertedInterval(ValidationError):
    rule = "inverted_interval"


class Overlap(ValidationError):
    rule = "overlap"


class Empty(ValidationError):
    rule = "empty"

    def __init__(self, detail: str = "pattern has no shifts"):
        super().__init__(None, detail)


class MalformedStoredPattern(ValueError):
    """A stored assignment pattern failed to decode or validate on read."""

    def __init__(self, assignment_id, reason: str):
        self.assignment_id = assignment_id
        self.reason = reason
        super().__init__(f"Assignment {assignment_id} has a malformed pattern: {reason}")


class PersistenceError(RuntimeError):
    """The backing store failed to list, create, update or delete a record."""


class NotFound(PersistenceError):
    """The referenced record does not exist in the backing store."""
