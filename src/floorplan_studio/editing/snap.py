"""Grid snapping.

Soft snap pulls a coordinate onto the grid only inside a tolerance band;
hard snap always rounds. Room moves use a single translation-consistent
correction so the room's shape never distorts.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from floorplan_studio.models.geometry import Point2D

GRID_STEP = 1.0
SNAP_TOLERANCE = 0.2


def _round_half_away(value: float) -> float:
    """Round to the nearest integer, halves away from zero."""
    return math.copysign(math.floor(abs(value) + 0.5), value)


def grid_value(value: float, step: float = GRID_STEP) -> float:
    """Nearest grid multiple of ``value``."""
    if step <= 0:
        return value
    return _round_half_away(value / step) * step


def soft_snap_value(
    value: float,
    step: float = GRID_STEP,
    tolerance: float = SNAP_TOLERANCE,
) -> float:
    """Snap to the nearest grid line only if it lies within ``tolerance``."""
    target = grid_value(value, step)
    return target if abs(target - value) <= tolerance else value


def soft_snap_point(
    point: Point2D,
    step: float = GRID_STEP,
    tolerance: float = SNAP_TOLERANCE,
) -> Point2D:
    """Per-axis soft snap of a point."""
    return Point2D(
        x=soft_snap_value(point.x, step, tolerance),
        y=soft_snap_value(point.y, step, tolerance),
    )


def hard_snap_point(point: Point2D, step: float = GRID_STEP) -> Point2D:
    """Round both coordinates to the nearest grid multiple."""
    return Point2D(x=grid_value(point.x, step), y=grid_value(point.y, step))


def _axis_correction(values: Sequence[float], step: float, tolerance: float) -> float:
    best: float | None = None
    for v in values:
        correction = grid_value(v, step) - v
        if abs(correction) <= tolerance and (best is None or abs(correction) < abs(best)):
            best = correction
    return best if best is not None else 0.0


def room_snap_offset(
    vertices: Sequence[Point2D],
    step: float = GRID_STEP,
    tolerance: float = SNAP_TOLERANCE,
) -> tuple[float, float]:
    """Single (dx, dy) correction that soft-snaps a room as a rigid body.

    Per axis, every vertex proposes the correction onto its nearest grid
    line; the smallest one within tolerance wins. An axis with no vertex in
    range gets 0.
    """
    return (
        _axis_correction([v.x for v in vertices], step, tolerance),
        _axis_correction([v.y for v in vertices], step, tolerance),
    )


def snap_room_vertices(
    vertices: Sequence[Point2D],
    step: float = GRID_STEP,
    tolerance: float = SNAP_TOLERANCE,
) -> list[Point2D]:
    """Translate all vertices by the room-consistent snap correction."""
    dx, dy = room_snap_offset(vertices, step, tolerance)
    return [v.offset(dx, dy) for v in vertices]
