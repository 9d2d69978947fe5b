"""Minimal DXF writer.

Emits only an ENTITIES section with one closed LWPOLYLINE per room
(rooms under 3 vertices are skipped). The layer is the floor name and
coordinates are written verbatim, so one drawing unit is one meter.
"""

from __future__ import annotations

from collections.abc import Sequence

from floorplan_studio.models.rooms import Floor


def _layer(name: str) -> str:
    # Group-code values are line-delimited.
    return " ".join(name.splitlines()) or "0"


def _pair(code: int, value: object) -> list[str]:
    return [str(code), str(value)]


def make_dxf(floors: Sequence[Floor]) -> bytes:
    """Render all floors as ASCII DXF bytes."""
    lines = _pair(0, "SECTION") + _pair(2, "ENTITIES")
    for floor in floors:
        for room in floor.rooms:
            if len(room.vertices) < 3:
                continue
            lines += _pair(0, "LWPOLYLINE")
            lines += _pair(8, _layer(floor.name))
            lines += _pair(90, len(room.vertices))
            lines += _pair(70, 1)  # closed
            for v in room.vertices:
                lines += _pair(10, float(v.x)) + _pair(20, float(v.y))
    lines += _pair(0, "ENDSEC") + _pair(0, "EOF")
    return ("\n".join(lines) + "\n").encode("utf-8")
