"""Floorplan: the editing engine.

Owns the floor list, the current floor, selection and undo history. Every
mutating method records a history snapshot before it changes anything and
returns True if it did change something. Unmet preconditions (nothing
selected, unknown ids, bad indices, degenerate geometry) are no-ops that
return False; they never raise.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence

from floorplan_studio.editing.drag import parallel_wall_offset
from floorplan_studio.editing.history import History
from floorplan_studio.editing.settings import EditorSettings
from floorplan_studio.editing.snap import hard_snap_point, snap_room_vertices
from floorplan_studio.editing.walls import update_wall_types
from floorplan_studio.models.elements import (
    DOOR_LENGTHS,
    WINDOW_LENGTHS,
    Door,
    DoorType,
    Stairs,
    WallType,
    Window,
    WindowType,
)
from floorplan_studio.models.geometry import Point2D, projection_factor
from floorplan_studio.models.ids import generate_id
from floorplan_studio.models.rooms import Floor, Room

logger = logging.getLogger(__name__)

DEFAULT_FLOOR_NAME = "Ground Floor"
NEW_FLOOR_NAME = "New Floor"


def _points(vertices: Sequence[Point2D | tuple[float, float]]) -> list[Point2D]:
    """Accept Point2D or (x, y) tuples."""
    return [
        v if isinstance(v, Point2D) else Point2D(x=v[0], y=v[1])
        for v in vertices
    ]


class Floorplan:
    """Editable multi-floor plan with selection and linear undo/redo."""

    def __init__(
        self,
        floors: list[Floor] | None = None,
        settings: EditorSettings | None = None,
    ) -> None:
        self.settings = settings or EditorSettings()
        self.floors: list[Floor] = floors or [Floor(name=DEFAULT_FLOOR_NAME)]
        self.current_floor_index = 0
        self.selected_room_id: str | None = None
        self.selected_room_ids: set[str] = set()
        self.selected_wall_index: int | None = None
        self.history = History(limit=self.settings.history_limit)

    # ── State accessors ───────────────────────────────────────────────

    @property
    def current_floor(self) -> Floor:
        return self.floors[self.current_floor_index]

    @property
    def rooms(self) -> list[Room]:
        """Rooms on the current floor, in z-order."""
        return self.current_floor.rooms

    @property
    def active_room_id(self) -> str | None:
        """Room targeted by single-room actions.

        The single selection wins; otherwise an arbitrary member of the
        multi-selection.
        """
        if self.selected_room_id is not None:
            return self.selected_room_id
        return next(iter(self.selected_room_ids), None)

    @property
    def active_room(self) -> Room | None:
        room_id = self.active_room_id
        return self.get_room(room_id) if room_id is not None else None

    def get_room(self, room_id: str) -> Room | None:
        """Find a room on the current floor by id."""
        return self.current_floor.get_room(room_id)

    def get_floor(self, floor_id: str) -> Floor | None:
        return next((f for f in self.floors if f.id == floor_id), None)

    # ── Selection ─────────────────────────────────────────────────────

    def select_only(self, room_id: str | None) -> None:
        """Make ``room_id`` the sole selection (None clears)."""
        self.selected_room_id = room_id
        self.selected_room_ids = {room_id} if room_id is not None else set()
        self.selected_wall_index = None

    def toggle_select(self, room_id: str) -> None:
        """Add or remove a room from the multi-selection."""
        if room_id in self.selected_room_ids:
            self.selected_room_ids.discard(room_id)
        else:
            self.selected_room_ids.add(room_id)
        self.selected_room_id = None
        self.selected_wall_index = None

    def clear_selection(self) -> None:
        self.selected_room_id = None
        self.selected_room_ids = set()
        self.selected_wall_index = None

    def select_room_at(self, point: Point2D) -> Room | None:
        """Select the topmost room containing ``point``; clear selection if none."""
        for room in reversed(self.rooms):
            if room.contains(point):
                self.select_only(room.id)
                return room
        self.clear_selection()
        return None

    def select_wall_near(self, point: Point2D, threshold: float | None = None) -> int | None:
        """Pick the active room's wall nearest to ``point``.

        Clears the wall selection when there is no active room or no wall
        within ``threshold`` (default: settings.wall_pick_threshold).
        """
        room = self.active_room
        if room is None:
            self.selected_wall_index = None
            return None
        if threshold is None:
            threshold = self.settings.wall_pick_threshold
        self.selected_wall_index = room.index_of_wall(point, threshold)
        return self.selected_wall_index

    def _selected_wall(self) -> tuple[Room, int] | None:
        room = self.active_room
        index = self.selected_wall_index
        if room is None or index is None or not room.has_wall(index):
            logger.debug("No active room/wall selected")
            return None
        return room, index

    # ── History ───────────────────────────────────────────────────────

    def save_to_history(self) -> None:
        """Snapshot all floors onto the undo stack and drop the redo stack."""
        self.history.push(self.floors)

    def undo(self) -> bool:
        previous = self.history.undo(self.floors)
        if previous is None:
            return False
        self._restore(previous)
        return True

    def redo(self) -> bool:
        following = self.history.redo(self.floors)
        if following is None:
            return False
        self._restore(following)
        return True

    @property
    def can_undo(self) -> bool:
        return self.history.can_undo

    @property
    def can_redo(self) -> bool:
        return self.history.can_redo

    def _restore(self, floors: list[Floor]) -> None:
        self.floors = floors
        self.current_floor_index = min(self.current_floor_index, len(floors) - 1)
        self.clear_selection()

    # ── Floors ────────────────────────────────────────────────────────

    def add_floor(self, name: str = NEW_FLOOR_NAME) -> Floor:
        """Append a floor and make it current."""
        self.save_to_history()
        floor = Floor(name=name)
        self.floors.append(floor)
        self.current_floor_index = len(self.floors) - 1
        self.clear_selection()
        logger.info("Added floor %r (%d floors)", name, len(self.floors))
        return floor

    def delete_current_floor(self) -> bool:
        """Delete the current floor. The last remaining floor is never deleted."""
        if len(self.floors) <= 1:
            logger.debug("Refusing to delete the only floor")
            return False
        self.save_to_history()
        removed = self.floors.pop(self.current_floor_index)
        self.current_floor_index = max(0, self.current_floor_index - 1)
        self.clear_selection()
        logger.info("Deleted floor %r", removed.name)
        return True

    def switch_to_floor(self, floor_id: str) -> bool:
        index = next((i for i, f in enumerate(self.floors) if f.id == floor_id), None)
        if index is None:
            logger.debug("Unknown floor %s", floor_id)
            return False
        self.current_floor_index = index
        self.clear_selection()
        return True

    def rename_current_floor(self, name: str) -> bool:
        if name == self.current_floor.name:
            return False
        self.save_to_history()
        self.current_floor.name = name
        return True

    def reset_project(self) -> None:
        """Replace everything with one empty floor. Undoable."""
        self.save_to_history()
        self.floors = [Floor(name=DEFAULT_FLOOR_NAME)]
        self.current_floor_index = 0
        self.clear_selection()
        logger.info("Project reset")

    # ── Rooms ─────────────────────────────────────────────────────────

    def add_room(
        self,
        vertices: Sequence[Point2D | tuple[float, float]],
        name: str = "",
    ) -> Room:
        """Append a room (all walls external, random pastel fill) to the current floor."""
        self.save_to_history()
        room = Room(name=name, vertices=_points(vertices))
        self.rooms.append(room)
        return room

    def add_rect_room(
        self,
        center: Point2D,
        size: tuple[float, float],
        name: str = "",
    ) -> Room:
        """Add an axis-aligned width x height rectangle centered on ``center``."""
        w, h = size
        min_x, min_y = center.x - w / 2, center.y - h / 2
        max_x, max_y = center.x + w / 2, center.y + h / 2
        return self.add_room(
            [(min_x, min_y), (max_x, min_y), (max_x, max_y), (min_x, max_y)],
            name=name,
        )

    def delete_selected_rooms(self) -> bool:
        """Delete every selected room (single and multi selection)."""
        ids = set(self.selected_room_ids)
        if self.selected_room_id is not None:
            ids.add(self.selected_room_id)
        if not ids:
            return False
        self.save_to_history()
        self.current_floor.rooms = [r for r in self.rooms if r.id not in ids]
        self.clear_selection()
        return True

    def delete_selected_room(self) -> bool:
        """Delete the single-selected room."""
        room_id = self.selected_room_id
        if room_id is None or self.get_room(room_id) is None:
            return False
        self.save_to_history()
        self.current_floor.rooms = [r for r in self.rooms if r.id != room_id]
        self.clear_selection()
        return True

    def rename_selected_room(self, name: str) -> bool:
        room = self.active_room
        if room is None:
            logger.debug("rename: no active room")
            return False
        self.save_to_history()
        room.name = name
        return True

    def set_selected_wall_type(self, wall_type: WallType) -> bool:
        selected = self._selected_wall()
        if selected is None:
            return False
        room, index = selected
        self.save_to_history()
        room.ensure_wall_types()
        room.wall_types[index] = wall_type
        return True

    def duplicate_selected_room(self) -> Room | None:
        """Copy the active room, offset it, and select the copy.

        Openings, stairs and wall types are carried over; the copy and all of
        its openings and stairs get fresh ids.
        """
        original = self.active_room
        if original is None:
            return None
        self.save_to_history()
        d = self.settings.duplicate_offset
        copy = original.model_copy(deep=True)
        copy.id = generate_id()
        copy.name = f"{original.name} Copy" if original.name else ""
        copy.vertices = [v.offset(d, d) for v in original.vertices]
        for item in [*copy.doors, *copy.windows, *copy.stairs]:
            item.id = generate_id()
        for stairs in copy.stairs:
            stairs.translate(d, d)
        self.rooms.append(copy)
        self.select_only(copy.id)
        return copy

    def rotate_selected_room(self) -> bool:
        """Rotate the active room 90° counter-clockwise about its vertex mean."""
        room = self.active_room
        if room is None or not room.vertices:
            return False
        self.save_to_history()
        c = room.centroid

        def turn(p: Point2D) -> Point2D:
            return Point2D(x=c.x - (p.y - c.y), y=c.y + (p.x - c.x))

        room.vertices = [turn(v) for v in room.vertices]
        for stairs in room.stairs:
            stairs.center = turn(stairs.center)
            stairs.rotate(math.pi / 2)
        return True

    def set_wall_length(
        self,
        room_id: str,
        wall_index: int,
        new_length: float,
        anchor_at_start: bool = True,
    ) -> bool:
        """Stretch or shrink one edge along its current direction.

        The anchored endpoint stays; the other moves to hit ``new_length``.
        """
        room = self.get_room(room_id)
        if room is None or not room.has_wall(wall_index):
            return False
        if not math.isfinite(new_length) or new_length <= 0:
            return False
        start, end = room.edge(wall_index)
        dx = end.x - start.x
        dy = end.y - start.y
        length = math.hypot(dx, dy)
        if length == 0:
            logger.debug("set_wall_length: zero-length wall %d", wall_index)
            return False
        ux, uy = dx / length, dy / length
        self.save_to_history()
        n = len(room.vertices)
        if anchor_at_start:
            room.vertices[(wall_index + 1) % n] = Point2D(
                x=start.x + ux * new_length, y=start.y + uy * new_length
            )
        else:
            room.vertices[wall_index] = Point2D(
                x=end.x - ux * new_length, y=end.y - uy * new_length
            )
        return True

    # ── Openings ──────────────────────────────────────────────────────

    def _opening_slot(self, offset: float) -> tuple[Room, int, float] | None:
        """Selected wall plus the offset clamped into [0, 1]; None if unusable."""
        if not math.isfinite(offset):
            logger.debug("Rejecting non-finite opening offset %r", offset)
            return None
        selected = self._selected_wall()
        if selected is None:
            return None
        room, index = selected
        return room, index, min(max(offset, 0.0), 1.0)

    def add_door(self, offset: float, door_type: DoorType = DoorType.SINGLE) -> Door | None:
        """Add a door to the selected wall of the active room."""
        slot = self._opening_slot(offset)
        if slot is None:
            return None
        room, index, offset = slot
        door = Door(
            wall_index=index,
            offset=offset,
            length=DOOR_LENGTHS[door_type],
            type=door_type,
        )
        self.save_to_history()
        room.doors.append(door)
        return door

    def add_window(
        self, offset: float, window_type: WindowType = WindowType.SINGLE
    ) -> Window | None:
        """Add a window to the selected wall of the active room."""
        slot = self._opening_slot(offset)
        if slot is None:
            return None
        room, index, offset = slot
        window = Window(
            wall_index=index,
            offset=offset,
            length=WINDOW_LENGTHS[window_type],
            type=window_type,
        )
        self.save_to_history()
        room.windows.append(window)
        return window

    def _pick_wall_offset(self, point: Point2D, threshold: float | None) -> float | None:
        """Select the active room's wall nearest ``point`` and return where it was hit."""
        index = self.select_wall_near(point, threshold)
        if index is None:
            return None
        start, end = self.active_room.edge(index)
        return projection_factor(point, start, end)

    def add_door_at(
        self,
        point: Point2D,
        door_type: DoorType = DoorType.SINGLE,
        threshold: float | None = None,
    ) -> Door | None:
        """Tap-to-place: put a door on the active room's wall nearest ``point``."""
        offset = self._pick_wall_offset(point, threshold)
        return self.add_door(offset, door_type) if offset is not None else None

    def add_window_at(
        self,
        point: Point2D,
        window_type: WindowType = WindowType.SINGLE,
        threshold: float | None = None,
    ) -> Window | None:
        """Tap-to-place: put a window on the active room's wall nearest ``point``."""
        offset = self._pick_wall_offset(point, threshold)
        return self.add_window(offset, window_type) if offset is not None else None

    def remove_door(self, room_id: str, door_id: str) -> bool:
        room = self.get_room(room_id)
        if room is None or room.get_door(door_id) is None:
            return False
        self.save_to_history()
        room.doors = [d for d in room.doors if d.id != door_id]
        return True

    def remove_window(self, room_id: str, window_id: str) -> bool:
        room = self.get_room(room_id)
        if room is None or room.get_window(window_id) is None:
            return False
        self.save_to_history()
        room.windows = [w for w in room.windows if w.id != window_id]
        return True

    # ── Stairs ────────────────────────────────────────────────────────

    def add_stairs(self, room_id: str, point: Point2D) -> Stairs | None:
        """Place default stairs at ``point``, which must lie inside the room."""
        room = self.get_room(room_id)
        if room is None or not room.contains(point):
            return None
        self.save_to_history()
        stairs = Stairs(center=point)
        room.stairs.append(stairs)
        return stairs

    def remove_stairs(self, room_id: str, stairs_id: str) -> bool:
        room = self.get_room(room_id)
        if room is None or room.get_stairs(stairs_id) is None:
            return False
        self.save_to_history()
        room.stairs = [s for s in room.stairs if s.id != stairs_id]
        return True

    def update_stairs(
        self,
        room_id: str,
        stairs_id: str,
        delta: tuple[float, float] | None = None,
        rotation: float | None = None,
        scale: float | None = None,
        record_history: bool = True,
    ) -> bool:
        """Apply a relative move, rotation (radians) and/or scale to stairs.

        Continuous gestures pass ``record_history=False`` after their first
        update so a whole gesture undoes in one step.
        """
        room = self.get_room(room_id)
        stairs = room.get_stairs(stairs_id) if room is not None else None
        if stairs is None or (delta is None and rotation is None and scale is None):
            return False
        values = [*(delta or ()), rotation or 0.0, scale or 0.0]
        if not all(math.isfinite(v) for v in values):
            logger.debug("update_stairs: non-finite input %r", values)
            return False
        if record_history:
            self.save_to_history()
        if delta is not None:
            stairs.translate(*delta)
        if rotation is not None:
            stairs.rotate(rotation)
        if scale is not None:
            stairs.scale(scale)
        return True

    # ── Drag gestures ─────────────────────────────────────────────────

    def drag_wall(
        self,
        room_id: str,
        wall_index: int,
        start_vertices: Sequence[Point2D],
        delta: tuple[float, float],
        view_scale: float = 1.0,
    ) -> bool:
        """Move one wall parallel to itself.

        ``delta`` is the total drag since the gesture began, in screen units;
        ``view_scale`` is screen units per meter. Only the component along the
        wall normal of ``start_vertices`` is applied, to both endpoints of the
        wall. History is the caller's job (see WallDrag).
        """
        room = self.get_room(room_id)
        if room is None or len(start_vertices) != len(room.vertices) or view_scale <= 0:
            return False
        if not room.has_wall(wall_index):
            return False
        offset = parallel_wall_offset(
            start_vertices, wall_index, delta[0] / view_scale, delta[1] / view_scale
        )
        if offset is None:
            return False
        ox, oy = offset
        n = len(room.vertices)
        for i in (wall_index, (wall_index + 1) % n):
            room.vertices[i] = start_vertices[i].offset(ox, oy)
        return True

    def finish_wall_drag(self, room_id: str, wall_index: int, snap: bool = True) -> bool:
        """Hard-snap the dragged wall's endpoints to the grid."""
        room = self.get_room(room_id)
        if not snap or room is None or not room.has_wall(wall_index):
            return False
        n = len(room.vertices)
        step = self.settings.grid_step
        for i in (wall_index, (wall_index + 1) % n):
            room.vertices[i] = hard_snap_point(room.vertices[i], step)
        return True

    def drag_room(
        self,
        room_id: str,
        start_vertices: Sequence[Point2D],
        delta: tuple[float, float],
        view_scale: float = 1.0,
    ) -> bool:
        """Translate a whole room by a screen-space drag delta."""
        room = self.get_room(room_id)
        if room is None or len(start_vertices) != len(room.vertices) or view_scale <= 0:
            return False
        dx, dy = delta[0] / view_scale, delta[1] / view_scale
        room.vertices = [v.offset(dx, dy) for v in start_vertices]
        return True

    def finish_room_drag(self, room_id: str, snap: bool = True) -> bool:
        """Soft-snap a moved room as a rigid body."""
        room = self.get_room(room_id)
        if not snap or room is None or not room.vertices:
            return False
        room.vertices = snap_room_vertices(
            room.vertices, self.settings.grid_step, self.settings.snap_tolerance
        )
        return True

    def restore_vertices(self, room_id: str, vertices: Sequence[Point2D]) -> bool:
        """Put back a room's vertices, e.g. when a gesture is cancelled."""
        room = self.get_room(room_id)
        if room is None:
            return False
        room.vertices = list(vertices)
        return True

    # ── Derived data ──────────────────────────────────────────────────

    def update_wall_types(self) -> bool:
        """Reclassify internal/external walls on every floor."""
        return update_wall_types(
            self.floors,
            sample_distance=self.settings.wall_sample_distance,
            cross_floor=self.settings.cross_floor_classification,
        )

    # ── Export / load ─────────────────────────────────────────────────

    def export_data(self) -> bytes:
        """Geometry-only vertices JSON."""
        from floorplan_studio.export.vertices import vertices_data

        return vertices_data(self.floors)

    def project_data(self) -> bytes:
        """Full round-trippable project JSON."""
        from floorplan_studio.export.project import project_data

        return project_data(self.floors)

    def load_project(self, data: bytes | str) -> None:
        """Replace all floors from project JSON.

        All-or-nothing: on a decode error ProjectLoadError is raised and the
        current state is untouched. On success history and selection are cleared.
        """
        from floorplan_studio.export.project import load_project_data

        floors = load_project_data(data)
        self.floors = floors
        self.current_floor_index = min(self.current_floor_index, len(floors) - 1)
        self.clear_selection()
        self.history.clear()
        logger.info("Loaded project with %d floor(s)", len(floors))

    def export_png(self, size: tuple[float, float], options=None) -> bytes:
        """Rasterize all floors to PNG bytes."""
        from floorplan_studio.export.png import render_png

        return render_png(self.floors, size, options)

    def export_dxf(self) -> bytes:
        from floorplan_studio.export.dxf import make_dxf

        return make_dxf(self.floors)
