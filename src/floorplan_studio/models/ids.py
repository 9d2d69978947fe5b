"""Identifier generation.

Every floor, room, opening and staircase carries a UUID4 string id so the
same identity appears in the project JSON and the vertices export.
"""

from __future__ import annotations

import uuid


def generate_id() -> str:
    """Generate a new UUID4 identifier string."""
    return str(uuid.uuid4())


def is_valid_id(value: str) -> bool:
    """Check if a string parses as a UUID."""
    if not isinstance(value, str):
        return False
    try:
        uuid.UUID(value)
    except ValueError:
        return False
    return True
