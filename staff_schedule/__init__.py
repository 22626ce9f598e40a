"""Recurring staff schedule resolution and day timeline composition.

Modules:
- config: load and validate configuration (JSON or YAML)
- errors: validation, stored-data and persistence exceptions
- domain: value types, SQLAlchemy models and repositories
- io: wire codec for assignment and appointment payloads
- services: pattern validation, window resolution, timeline composition,
  booking slots and summaries
- store: in-memory snapshot of assignments and booked events
- day_view: per staff member and date timeline pipeline
- deferred_delete: optimistic delete with undo window
"""

__all__ = [
    "config",
    "errors",
    "domain",
    "io",
    "services",
    "store",
    "day_view",
    "deferred_delete",
]
