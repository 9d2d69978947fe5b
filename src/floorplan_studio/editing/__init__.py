"""Editing engine: floorplan controller, history, snapping, wall classification."""

from floorplan_studio.editing.settings import EditorSettings
from floorplan_studio.editing.history import History, snapshot
from floorplan_studio.editing.snap import (
    hard_snap_point,
    room_snap_offset,
    snap_room_vertices,
    soft_snap_point,
    soft_snap_value,
)
from floorplan_studio.editing.walls import classify_room_walls, update_wall_types
from floorplan_studio.editing.drag import RoomDrag, WallDrag, parallel_wall_offset
from floorplan_studio.editing.floorplan import Floorplan

__all__ = [
    "EditorSettings",
    "History",
    "snapshot",
    "hard_snap_point",
    "room_snap_offset",
    "snap_room_vertices",
    "soft_snap_point",
    "soft_snap_value",
    "classify_room_walls",
    "update_wall_types",
    "RoomDrag",
    "WallDrag",
    "parallel_wall_offset",
    "Floorplan",
]
