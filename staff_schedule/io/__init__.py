"""Wire codec for assignment and appointment payloads."""

from .wire import (
    assignment_from_wire,
    assignment_to_wire,
    decode_pattern,
    encode_pattern,
    event_from_wire,
    normalize_response,
)

__all__ = [
    "assignment_from_wire",
    "assignment_to_wire",
    "decode_pattern",
    "encode_pattern",
    "event_from_wire",
    "normalize_response",
]
