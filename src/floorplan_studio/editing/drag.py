"""Drag gestures: parallel wall moves and whole-room moves.

The math lives in ``parallel_wall_offset``. ``WallDrag`` and ``RoomDrag``
are per-gesture sessions an interaction layer can hold between drag events:
they freeze the starting geometry, record one history snapshot at the first
real motion, and either finish (snap) or cancel (restore).
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from floorplan_studio.editing.history import HistoryToken
from floorplan_studio.models.geometry import Point2D, edge, unit_normal

if TYPE_CHECKING:
    from floorplan_studio.editing.floorplan import Floorplan

# Screen-space movement below this is still a tap, not a drag.
TAP_SLOP = 2.0


def parallel_wall_offset(
    start_vertices: Sequence[Point2D],
    wall_index: int,
    dx: float,
    dy: float,
) -> tuple[float, float] | None:
    """Project a model-space drag onto the wall normal.

    The normal comes from the wall's *starting* endpoints, so it does not
    drift while the wall moves. Returns the (x, y) offset to apply to both
    endpoints, or None for a zero-length wall.
    """
    a, b = edge(start_vertices, wall_index)
    normal = unit_normal(a, b)
    if normal is None:
        return None
    nx, ny = normal
    d = dx * nx + dy * ny
    return (nx * d, ny * d)

class WallDrag:
    """One parallel-wall drag on a room of the current floor."""

    def __init__(
        self,
        floorplan: Floorplan,
        room_id: str,
        wall_index: int,
        view_scale: float = 1.0,
    ) -> None:
        self.floorplan = floorplan
        self.room_id = room_id
        self.wall_index = wall_index
        self.view_scale = view_scale
        room = floorplan.get_room(room_id)
        self.start_vertices: list[Point2D] = list(room.vertices) if room else []
        self._token: HistoryToken | None = None

    @property
    def valid(self) -> bool:
        n = len(self.start_vertices)
        if n < 2 or not 0 <= self.wall_index < n:
            return False
        a, b = edge(self.start_vertices, self.wall_index)
        return unit_normal(a, b) is not None

    @property
    def recorded(self) -> bool:
        """True while the drag holds an uncommitted history entry."""
        return self._token is not None

    def update(self, dx: float, dy: float) -> bool:
        """Apply the total screen-space translation since the drag began."""
        if not self.valid:
            return False
        if self._token is None:
            self._token = self.floorplan.history.begin(self.floorplan.floors)
        return self.floorplan.drag_wall(
            self.room_id, self.wall_index, self.start_vertices, (dx, dy), self.view_scale
        )

    def finish(self, snap: bool = True) -> bool:
        """End the drag; hard-snaps the wall when ``snap`` is set."""
        if self._token is None:
            return False
        self.floorplan.finish_wall_drag(self.room_id, self.wall_index, snap)
        self._token = None
        return True

    def cancel(self) -> None:
        """Abandon the drag, put the wall back and restore both history stacks."""
        if self._token is not None:
            self.floorplan.restore_vertices(self.room_id, self.start_vertices)
            self.floorplan.history.rollback(self._token)
            self._token = None


class RoomDrag:
    """One whole-room drag. Movements within TAP_SLOP count as a tap."""

    def __init__(
        self,
        floorplan: Floorplan,
        room_id: str,
        view_scale: float = 1.0,
        tap_slop: float = TAP_SLOP,
    ) -> None:
        self.floorplan = floorplan
        self.room_id = room_id
        self.view_scale = view_scale
        self.tap_slop = tap_slop
        room = floorplan.get_room(room_id)
        self.start_vertices: list[Point2D] = list(room.vertices) if room else []
        self._token: HistoryToken | None = None

    @property
    def moved(self) -> bool:
        return self._token is not None

    def update(self, dx: float, dy: float) -> bool:
        if not self.start_vertices:
            return False
        if self._token is None:
            if abs(dx) <= self.tap_slop and abs(dy) <= self.tap_slop:
                return False
            self._token = self.floorplan.history.begin(self.floorplan.floors)
        return self.floorplan.drag_room(
            self.room_id, self.start_vertices, (dx, dy), self.view_scale
        )

    def finish(self, snap: bool = True) -> bool:
        """End the drag. Returns False if it never moved (the caller treats it as a tap)."""
        if self._token is None:
            return False
        self.floorplan.finish_room_drag(self.room_id, snap)
        self._token = None
        return True

    def cancel(self) -> None:
        if self._token is not None:
            self.floorplan.restore_vertices(self.room_id, self.start_vertices)
            self.floorplan.history.rollback(self._token)
            self._token = None
