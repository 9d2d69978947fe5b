"""Geometric primitives and pure polygon utilities (model space, meters).

Polygons are plain vertex sequences. They are implicitly closed: edge ``i``
runs from ``vertices[i]`` to ``vertices[(i + 1) % n]``.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from pydantic import BaseModel

# Stands in for a zero denominator on horizontal edges in the ray-casting test.
_TINY = math.ulp(0.0)


class Point2D(BaseModel):
    """2D point in the XY plane (meters)."""

    x: float
    y: float

    def distance_to(self, other: Point2D) -> float:
        """Euclidean distance to another point."""
        return math.hypot(self.x - other.x, self.y - other.y)

    def offset(self, dx: float, dy: float) -> Point2D:
        """A new point translated by (dx, dy)."""
        return Point2D(x=self.x + dx, y=self.y + dy)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Point2D):
            return NotImplemented
        return math.isclose(self.x, other.x, abs_tol=1e-6) and math.isclose(
            self.y, other.y, abs_tol=1e-6
        )

    def __hash__(self) -> int:
        return hash((round(self.x, 6), round(self.y, 6)))


def contains(point: Point2D, vertices: Sequence[Point2D]) -> bool:
    """Even-odd point-in-polygon test.

    Casts a horizontal ray from ``point`` and toggles on every edge it crosses.
    Boundary convention: the test is half-open, so points on a left or bottom
    edge count as inside and points on a right or top edge as outside (for the
    unit square, (0, 0) is inside and (1, 1) is not).

    Polygons with fewer than 3 vertices contain nothing.
    """
    n = len(vertices)
    if n < 3:
        return False
    inside = False
    for i in range(n):
        j = (i + n - 1) % n
        xi, yi = vertices[i].x, vertices[i].y
        xj, yj = vertices[j].x, vertices[j].y
        denom = yj - yi
        if denom == 0:
            denom = _TINY
        if (yi > point.y) != (yj > point.y) and point.x < (xj - xi) * (point.y - yi) / denom + xi:
            inside = not inside
    return inside


def projection_factor(point: Point2D, start: Point2D, end: Point2D) -> float:
    """Parameter t of the closest point to ``point`` on the infinite line start→end.

    Not clamped. A degenerate segment yields 0.
    """
    dx = end.x - start.x
    dy = end.y - start.y
    denom = dx * dx + dy * dy
    if denom == 0:
        return 0.0
    return ((point.x - start.x) * dx + (point.y - start.y) * dy) / denom


def distance_to_segment(point: Point2D, a: Point2D, b: Point2D) -> float:
    """Distance from ``point`` to the closed segment a-b."""
    if a.x == b.x and a.y == b.y:
        return point.distance_to(a)
    t = max(0.0, min(1.0, projection_factor(point, a, b)))
    px = a.x + (b.x - a.x) * t
    py = a.y + (b.y - a.y) * t
    return math.hypot(point.x - px, point.y - py)


def index_of_wall(
    vertices: Sequence[Point2D],
    point: Point2D,
    threshold: float,
) -> int | None:
    """Index of the edge nearest to ``point`` within ``threshold``, or None.

    Edges are scanned in vertex order; a later edge only wins with a strictly
    smaller distance.
    """
    n = len(vertices)
    if n < 2:
        return None
    best_index: int | None = None
    best_distance = math.inf
    for i in range(n):
        d = distance_to_segment(point, vertices[i], vertices[(i + 1) % n])
        if d <= threshold and d < best_distance:
            best_index = i
            best_distance = d
    return best_index


def edge(vertices: Sequence[Point2D], index: int) -> tuple[Point2D, Point2D]:
    """Start and end points of edge ``index``."""
    n = len(vertices)
    return vertices[index], vertices[(index + 1) % n]


def unit_normal(a: Point2D, b: Point2D) -> tuple[float, float] | None:
    """Left-hand unit normal of the direction a→b, or None for a zero-length edge."""
    dx = b.x - a.x
    dy = b.y - a.y
    length = math.hypot(dx, dy)
    if length == 0:
        return None
    return (-dy / length, dx / length)


def bounding_box(
    vertices: Sequence[Point2D],
) -> tuple[float, float, float, float] | None:
    """(min_x, min_y, max_x, max_y) of the vertices, or None when empty."""
    if not vertices:
        return None
    xs = [v.x for v in vertices]
    ys = [v.y for v in vertices]
    return (min(xs), min(ys), max(xs), max(ys))


def centroid(vertices: Sequence[Point2D]) -> Point2D | None:
    """Arithmetic mean of the vertices (not the area centroid)."""
    if not vertices:
        return None
    n = len(vertices)
    return Point2D(
        x=sum(v.x for v in vertices) / n,
        y=sum(v.y for v in vertices) / n,
    )


def polygon_area(vertices: Sequence[Point2D]) -> float:
    """Area by the shoelace formula. Absolute value; 0 below 3 vertices."""
    n = len(vertices)
    if n < 3:
        return 0.0
    area = 0.0
    for i in range(n):
        j = (i + 1) % n
        area += vertices[i].x * vertices[j].y
        area -= vertices[j].x * vertices[i].y
    return abs(area) / 2.0


def polygon_perimeter(vertices: Sequence[Point2D]) -> float:
    """Total length of all edges; 0 below 2 vertices."""
    n = len(vertices)
    if n < 2:
        return 0.0
    return sum(vertices[i].distance_to(vertices[(i + 1) % n]) for i in range(n))
