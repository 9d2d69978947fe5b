"""Tests for automatic internal/external wall classification."""

from floorplan_studio.editing.walls import classify_room_walls, update_wall_types
from floorplan_studio.models import Floor, Point2D, Room, WallType

INTERNAL = WallType.INTERNAL
EXTERNAL = WallType.EXTERNAL


def _square(x0: float, y0: float, size: float = 1.0) -> Room:
    return Room(
        vertices=[
            Point2D(x=x0, y=y0),
            Point2D(x=x0 + size, y=y0),
            Point2D(x=x0 + size, y=y0 + size),
            Point2D(x=x0, y=y0 + size),
        ]
    )


class TestClassifyRoomWalls:
    def test_isolated_room_is_all_external(self):
        room = _square(0, 0)
        assert classify_room_walls(room, []) == [EXTERNAL] * 4

    def test_shared_edge_is_internal(self):
        left, right = _square(0, 0), _square(1, 0)
        assert classify_room_walls(left, [right]) == [EXTERNAL, INTERNAL, EXTERNAL, EXTERNAL]
        assert classify_room_walls(right, [left]) == [EXTERNAL, EXTERNAL, EXTERNAL, INTERNAL]

    def test_clockwise_winding(self):
        left = Room(vertices=list(reversed(_square(0, 0).vertices)))
        right = _square(1, 0)
        # Reversed order: edge 0 runs (0,1)->(1,1), edge 1 runs (1,1)->(1,0).
        assert classify_room_walls(left, [right]) == [EXTERNAL, INTERNAL, EXTERNAL, EXTERNAL]

    def test_zero_length_edge_is_external(self):
        room = Room(
            vertices=[
                Point2D(x=0, y=0),
                Point2D(x=1, y=0),
                Point2D(x=1, y=0),
                Point2D(x=1, y=1),
                Point2D(x=0, y=1),
            ]
        )
        neighbour = _square(1, 0)
        types = classify_room_walls(room, [neighbour])
        assert types[1] is EXTERNAL
        assert types[2] is INTERNAL


class TestUpdateWallTypes:
    def test_updates_in_place_and_reports_change(self):
        left, right = _square(0, 0), _square(1, 0)
        floors = [Floor(name="Ground Floor", rooms=[left, right])]
        assert update_wall_types(floors) is True
        assert left.wall_types[1] is INTERNAL
        assert right.wall_types[3] is INTERNAL
        assert update_wall_types(floors) is False

    def test_same_floor_only_by_default(self):
        ground = Floor(name="Ground Floor", rooms=[_square(0, 0)])
        upper = Floor(name="First Floor", rooms=[_square(1, 0)])
        assert update_wall_types([ground, upper]) is False
        assert ground.rooms[0].wall_types == [EXTERNAL] * 4

    def test_cross_floor(self):
        ground = Floor(name="Ground Floor", rooms=[_square(0, 0)])
        upper = Floor(name="First Floor", rooms=[_square(1, 0)])
        assert update_wall_types([ground, upper], cross_floor=True) is True
        assert ground.rooms[0].wall_types[1] is INTERNAL
        assert upper.rooms[0].wall_types[3] is INTERNAL

    def test_reverts_to_external_when_neighbour_moves(self):
        left, right = _square(0, 0), _square(1, 0)
        floors = [Floor(name="Ground Floor", rooms=[left, right])]
        update_wall_types(floors)
        right.vertices = [v.offset(5, 0) for v in right.vertices]
        assert update_wall_types(floors) is True
        assert left.wall_types == [EXTERNAL] * 4
