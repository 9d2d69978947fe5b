"""Room elements: wall types, doors, windows and stairs.

Doors and windows are wall attachments: they reference an edge of their
owning room by index and sit at a fractional offset along it. Field aliases
match the project JSON format (camelCase keys).
"""

from __future__ import annotations

from enum import Enum
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

from floorplan_studio.models.geometry import Point2D
from floorplan_studio.models.ids import generate_id


class WallType(str, Enum):
    """Per-edge wall classification.

    INTERNAL: partition shared with another room
    EXTERNAL: exterior boundary
    """

    INTERNAL = "internalWall"
    EXTERNAL = "externalWall"


class DoorType(str, Enum):
    """Door style. Affects default length and drawing only."""

    SINGLE = "single"
    DOUBLE = "double"
    SIDE_LIGHT = "sideLight"


class WindowType(str, Enum):
    """Window style. Affects default length and drawing only."""

    SINGLE = "single"
    DOUBLE = "double"
    TRIPLE = "triple"
    PICTURE = "picture"


# Default physical widths (meters) used when an opening is placed.
DOOR_LENGTHS: dict[DoorType, float] = {
    DoorType.SINGLE: 0.9,
    DoorType.DOUBLE: 1.8,
    DoorType.SIDE_LIGHT: 1.4,
}

WINDOW_LENGTHS: dict[WindowType, float] = {
    WindowType.SINGLE: 1.0,
    WindowType.DOUBLE: 2.0,
    WindowType.TRIPLE: 3.0,
    WindowType.PICTURE: 2.0,
}

# Window panel count, used by the PNG exporter to draw mullions.
WINDOW_PANELS: dict[WindowType, int] = {
    WindowType.SINGLE: 1,
    WindowType.DOUBLE: 2,
    WindowType.TRIPLE: 3,
    WindowType.PICTURE: 1,
}


@runtime_checkable
class WallAttachment(Protocol):
    """Anything anchored to a room edge at a fractional offset."""

    wall_index: int
    offset: float
    length: float


class Door(BaseModel):
    """A door on one edge of a room.

    ``offset`` is the fractional position of the door's center along the
    edge, measured from the edge's start vertex. ``length`` is its width
    along the wall in meters.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=generate_id)
    wall_index: int = Field(alias="wallIndex", ge=0)
    offset: float = Field(ge=0, le=1, description="Center position along the edge, 0..1")
    length: float = Field(default=DOOR_LENGTHS[DoorType.SINGLE], gt=0)
    type: DoorType = DoorType.SINGLE


class Window(BaseModel):
    """A window on one edge of a room. Same placement semantics as Door."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=generate_id)
    wall_index: int = Field(alias="wallIndex", ge=0)
    offset: float = Field(ge=0, le=1, description="Center position along the edge, 0..1")
    length: float = Field(default=WINDOW_LENGTHS[WindowType.SINGLE], gt=0)
    type: WindowType = WindowType.SINGLE


# Staircase defaults and the floor applied to scale factors.
STAIRS_LENGTH = 3.0
STAIRS_WIDTH = 1.0
STAIRS_STEPS = 12
MIN_STAIRS_SCALE = 0.01


class Stairs(BaseModel):
    """A staircase owned by a room.

    Drawn as a ``length`` x ``width`` rectangle centered on ``center`` and
    rotated by ``rotation`` radians, with ``steps`` treads across the run.
    """

    id: str = Field(default_factory=generate_id)
    center: Point2D
    length: float = Field(default=STAIRS_LENGTH, gt=0)
    width: float = Field(default=STAIRS_WIDTH, gt=0)
    steps: int = Field(default=STAIRS_STEPS, ge=1)
    up: bool = True
    rotation: float = Field(default=0.0, description="Radians")

    def translate(self, dx: float, dy: float) -> None:
        self.center = self.center.offset(dx, dy)

    def rotate(self, delta: float) -> None:
        self.rotation += delta

    def scale(self, factor: float) -> None:
        """Scale length and width; factors below MIN_STAIRS_SCALE are clamped."""
        factor = max(factor, MIN_STAIRS_SCALE)
        self.length *= factor
        self.width *= factor
