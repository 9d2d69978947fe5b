"""Vertices-only JSON: a lossy quick export of room outlines.

Shape: ``[{"id": ..., "name": ..., "rooms": [[{"x": .., "y": ..}, ...], ...]}]``
with pretty-printing and sorted keys. Openings, stairs and wall types are
not included.
"""

from __future__ import annotations

import json
from collections.abc import Sequence

from floorplan_studio.models.rooms import Floor


def vertices_payload(floors: Sequence[Floor]) -> list[dict]:
    return [
        {
            "id": floor.id,
            "name": floor.name,
            "rooms": [
                [{"x": v.x, "y": v.y} for v in room.vertices]
                for room in floor.rooms
            ],
        }
        for floor in floors
    ]


def vertices_data(floors: Sequence[Floor]) -> bytes:
    """Encode room outlines of all floors as JSON bytes."""
    return json.dumps(vertices_payload(floors), indent=2, sort_keys=True).encode("utf-8")
