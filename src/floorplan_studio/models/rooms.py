"""Room and Floor models.

A Room is a closed polygon with one wall type per edge plus the openings and
stairs it owns. A Floor is a named, ordered list of rooms; a project is an
ordered list of floors.
"""

from __future__ import annotations

import math
import random

from pydantic import BaseModel, ConfigDict, Field, model_validator

from floorplan_studio.models.elements import Door, Stairs, WallAttachment, WallType, Window
from floorplan_studio.models.geometry import (
    Point2D,
    centroid,
    contains,
    edge,
    index_of_wall,
    polygon_area,
    polygon_perimeter,
)
from floorplan_studio.models.ids import generate_id


def random_pastel_hsba() -> tuple[float, float, float, float]:
    """Random soft pastel (hue, saturation, brightness, alpha) for room fills."""
    return (
        random.uniform(0.0, 1.0),
        random.uniform(0.35, 0.55),
        random.uniform(0.92, 1.0),
        0.10,
    )


class Room(BaseModel):
    """A polygonal room (model space, meters).

    ``wall_types[i]`` classifies edge i. The lists should be the same length;
    code that edits vertices directly must call ``ensure_wall_types`` before
    indexing wall types. The fill color is chosen once at creation and then
    persists with the room.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=generate_id)
    name: str = ""
    vertices: list[Point2D] = Field(default_factory=list)
    wall_types: list[WallType] = Field(default_factory=list, alias="wallTypes")
    windows: list[Window] = Field(default_factory=list)
    doors: list[Door] = Field(default_factory=list)
    stairs: list[Stairs] = Field(default_factory=list)
    hue: float = Field(default=0.0, alias="_h")
    saturation: float = Field(default=0.0, alias="_s")
    brightness: float = Field(default=0.0, alias="_b")
    alpha: float = Field(default=0.0, alias="_a")

    @model_validator(mode="before")
    @classmethod
    def pick_fill_color(cls, data):
        if isinstance(data, dict):
            keys = ("_h", "_s", "_b", "_a")
            names = ("hue", "saturation", "brightness", "alpha")
            if not any(k in data for k in keys + names):
                data = dict(data)
                data.update(zip(keys, random_pastel_hsba()))
        return data

    @model_validator(mode="after")
    def default_wall_types(self) -> Room:
        if not self.wall_types and self.vertices:
            self.wall_types = [WallType.EXTERNAL] * len(self.vertices)
        return self

    # ── Wall types ────────────────────────────────────────────────────

    def ensure_wall_types(self) -> bool:
        """Reset wall types to all-external if their count drifted from the vertex count.

        Returns True if the list was rebuilt.
        """
        if len(self.wall_types) == len(self.vertices):
            return False
        self.wall_types = [WallType.EXTERNAL] * len(self.vertices)
        return True

    def wall_type(self, index: int) -> WallType:
        """Wall type of edge ``index``; external when the list is out of sync."""
        if 0 <= index < len(self.wall_types):
            return self.wall_types[index]
        return WallType.EXTERNAL

    # ── Geometry ──────────────────────────────────────────────────────

    @property
    def area(self) -> float:
        return polygon_area(self.vertices)

    @property
    def perimeter(self) -> float:
        return polygon_perimeter(self.vertices)

    @property
    def centroid(self) -> Point2D | None:
        return centroid(self.vertices)

    @property
    def fill_hsba(self) -> tuple[float, float, float, float]:
        return (self.hue, self.saturation, self.brightness, self.alpha)

    def contains(self, point: Point2D) -> bool:
        return contains(point, self.vertices)

    def index_of_wall(self, point: Point2D, threshold: float) -> int | None:
        return index_of_wall(self.vertices, point, threshold)

    def has_wall(self, index: int) -> bool:
        return len(self.vertices) >= 2 and 0 <= index < len(self.vertices)

    def edge(self, index: int) -> tuple[Point2D, Point2D]:
        return edge(self.vertices, index)

    def opening_segment(self, attachment: WallAttachment) -> tuple[Point2D, Point2D] | None:
        """Model-space endpoints of a door or window on its edge.

        The opening is centered at ``offset`` along the edge and spans
        ``length`` meters. Returns None if the edge no longer exists; a
        zero-length edge collapses both endpoints onto its start.
        """
        if not self.vertices:
            return None
        n = len(self.vertices)
        start, end = self.edge(attachment.wall_index % n)
        dx = end.x - start.x
        dy = end.y - start.y
        length = math.hypot(dx, dy)
        if length == 0:
            return (start, start)
        ux, uy = dx / length, dy / length
        cx = start.x + dx * attachment.offset
        cy = start.y + dy * attachment.offset
        half = attachment.length / 2
        return (
            Point2D(x=cx - ux * half, y=cy - uy * half),
            Point2D(x=cx + ux * half, y=cy + uy * half),
        )

    # ── Lookups ───────────────────────────────────────────────────────

    def get_door(self, door_id: str) -> Door | None:
        return next((d for d in self.doors if d.id == door_id), None)

    def get_window(self, window_id: str) -> Window | None:
        return next((w for w in self.windows if w.id == window_id), None)

    def get_stairs(self, stairs_id: str) -> Stairs | None:
        return next((s for s in self.stairs if s.id == stairs_id), None)


class Floor(BaseModel):
    """A named floor level holding rooms in z-order (last is topmost)."""

    id: str = Field(default_factory=generate_id)
    name: str
    rooms: list[Room] = Field(default_factory=list)

    def get_room(self, room_id: str) -> Room | None:
        """Find a room by id."""
        return next((r for r in self.rooms if r.id == room_id), None)

    def room_index(self, room_id: str) -> int | None:
        return next((i for i, r in enumerate(self.rooms) if r.id == room_id), None)

    @property
    def area(self) -> float:
        """Sum of room areas (overlaps are counted twice)."""
        return sum(r.area for r in self.rooms)
