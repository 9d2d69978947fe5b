"""Floor-plan data models."""

from floorplan_studio.models.ids import generate_id
from floorplan_studio.models.geometry import Point2D
from floorplan_studio.models.elements import (
    DOOR_LENGTHS,
    WINDOW_LENGTHS,
    Door,
    DoorType,
    Stairs,
    WallAttachment,
    WallType,
    Window,
    WindowType,
)
from floorplan_studio.models.rooms import Floor, Room

__all__ = [
    "generate_id",
    "Point2D",
    "DOOR_LENGTHS",
    "WINDOW_LENGTHS",
    "Door",
    "DoorType",
    "Stairs",
    "WallAttachment",
    "WallType",
    "Window",
    "WindowType",
    "Floor",
    "Room",
]
