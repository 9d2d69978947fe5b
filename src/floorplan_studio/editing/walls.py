"""Automatic internal/external wall classification.

An edge is internal when the point just outside its midpoint lies inside
some other room; otherwise it is external.
"""

from __future__ import annotations

from collections.abc import Sequence

from floorplan_studio.models.elements import WallType
from floorplan_studio.models.geometry import Point2D, unit_normal
from floorplan_studio.models.rooms import Floor, Room


def classify_room_walls(
    room: Room,
    others: Sequence[Room],
    sample_distance: float = 0.1,
) -> list[WallType]:
    """Wall type for every edge of ``room`` against the ``others`` rooms.

    Samples both sides of each edge midpoint along its normal. The side the
    room itself contains is the interior; the other sample is tested against
    every other room. Zero-length edges are external.
    """
    n = len(room.vertices)
    types: list[WallType] = []
    for i in range(n):
        a, b = room.edge(i)
        normal = unit_normal(a, b)
        if normal is None:
            types.append(WallType.EXTERNAL)
            continue
        nx, ny = normal
        mid_x = (a.x + b.x) / 2
        mid_y = (a.y + b.y) / 2
        s1 = Point2D(x=mid_x + nx * sample_distance, y=mid_y + ny * sample_distance)
        s2 = Point2D(x=mid_x - nx * sample_distance, y=mid_y - ny * sample_distance)
        exterior = s2 if room.contains(s1) else s1
        shared = any(other.contains(exterior) for other in others)
        types.append(WallType.INTERNAL if shared else WallType.EXTERNAL)
    return types


def update_wall_types(
    floors: Sequence[Floor],
    sample_distance: float = 0.1,
    cross_floor: bool = False,
) -> bool:
    """Reclassify every edge of every room in place.

    By default only rooms on the same floor are compared. With
    ``cross_floor`` a room on any floor can make a wall internal.
    Returns True if any wall type changed.
    """
    changed = False
    for floor in floors:
        for room in floor.rooms:
            if cross_floor:
                others = [r for f in floors for r in f.rooms if r is not room]
            else:
                others = [r for r in floor.rooms if r is not room]
            types = classify_room_walls(room, others, sample_distance)
            if types != room.wall_types:
                room.wall_types = types
                changed = True
    return changed
