"""Tests for vertices JSON, project JSON, DXF and PNG export."""

import io
import json

import matplotlib.image as mpimg
import numpy as np
import pytest

from floorplan_studio.editing import Floorplan
from floorplan_studio.export import (
    ProjectLoadError,
    load_project_data,
    make_dxf,
    project_data,
    vertices_data,
)
from floorplan_studio.export.png import PNGExportOptions, fit_transform, format_length, render_png
from floorplan_studio.models import DoorType, Floor, Point2D, Room, WindowType

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


def _rect(x0: float, y0: float, w: float, h: float, name: str = "") -> Room:
    return Room(
        name=name,
        vertices=[
            Point2D(x=x0, y=y0),
            Point2D(x=x0 + w, y=y0),
            Point2D(x=x0 + w, y=y0 + h),
            Point2D(x=x0, y=y0 + h),
        ],
    )


def _furnished_plan() -> Floorplan:
    """Two adjacent rooms with a door, a window and stairs."""
    plan = Floorplan()
    living = plan.add_room(_rect(0, 0, 4, 3).vertices, name="Living")
    plan.add_room(_rect(4, 0, 3, 3).vertices, name="Kitchen")
    plan.select_only(living.id)
    plan.select_wall_near(Point2D(x=2, y=0))
    plan.add_door(0.5, DoorType.DOUBLE)
    plan.add_window(0.25, WindowType.TRIPLE)
    plan.add_stairs(living.id, Point2D(x=2, y=1.5))
    plan.update_wall_types()
    return plan


def _decode_png(data: bytes) -> np.ndarray:
    return mpimg.imread(io.BytesIO(data), format="png")


class TestVerticesJSON:
    def test_shape(self):
        plan = Floorplan()
        room = plan.add_room([(0, 0), (4, 0), (4, 3), (0, 3)])
        payload = json.loads(plan.export_data())
        assert isinstance(payload, list)
        assert payload[0]["id"] == plan.current_floor.id
        assert payload[0]["name"] == "Ground Floor"
        assert payload[0]["rooms"] == [[{"x": v.x, "y": v.y} for v in room.vertices]]

    def test_four_vertices_round_trip_exactly(self):
        plan = Floorplan()
        plan.add_room([(0, 0), (4, 0), (4, 3), (0, 3)])
        plan.select_only(plan.rooms[0].id)
        plan.select_wall_near(Point2D(x=2, y=0))
        plan.add_door(0.5)
        rooms = json.loads(plan.export_data())[0]["rooms"]
        assert rooms == [[
            {"x": 0.0, "y": 0.0},
            {"x": 4.0, "y": 0.0},
            {"x": 4.0, "y": 3.0},
            {"x": 0.0, "y": 3.0},
        ]]

    def test_pretty_and_sorted(self):
        text = vertices_data([Floor(name="A")]).decode("utf-8")
        assert "\n  " in text
        assert text.index('"id"') < text.index('"name"') < text.index('"rooms"')

    def test_geometry_only(self):
        payload = json.loads(_furnished_plan().export_data())
        assert set(payload[0]) == {"id", "name", "rooms"}
        assert "doors" not in json.dumps(payload)


class TestProjectJSON:
    def test_keys(self):
        doc = json.loads(_furnished_plan().project_data())
        room = doc[0]["rooms"][0]
        assert room["wallTypes"][1] == "internalWall"
        assert room["doors"][0]["wallIndex"] == 0
        assert room["doors"][0]["type"] == "double"
        assert room["windows"][0]["type"] == "triple"
        assert room["stairs"][0]["steps"] == 12
        assert {"_h", "_s", "_b", "_a"} <= set(room)

    def test_round_trip(self):
        plan = _furnished_plan()
        floors = load_project_data(project_data(plan.floors))
        assert [f.model_dump() for f in floors] == [f.model_dump() for f in plan.floors]

    def test_accepts_text(self):
        data = project_data([Floor(name="Ground Floor")]).decode("utf-8")
        assert load_project_data(data)[0].name == "Ground Floor"

    def test_empty_project_rejected(self):
        with pytest.raises(ProjectLoadError, match="at least one floor"):
            load_project_data(b"[]")

    def test_invalid_is_value_error(self):
        with pytest.raises(ValueError):
            load_project_data(b'[{"name": "F", "rooms": [{"vertices": [{"x": "a"}]}]}]')


class TestDXF:
    def test_single_room(self):
        floors = [Floor(name="Ground Floor", rooms=[_rect(0, 0, 4, 3)])]
        expected = "\n".join([
            "0", "SECTION", "2", "ENTITIES",
            "0", "LWPOLYLINE", "8", "Ground Floor", "90", "4", "70", "1",
            "10", "0.0", "20", "0.0",
            "10", "4.0", "20", "0.0",
            "10", "4.0", "20", "3.0",
            "10", "0.0", "20", "3.0",
            "0", "ENDSEC", "0", "EOF",
        ]) + "\n"
        assert make_dxf(floors).decode("ascii") == expected

    def test_empty(self):
        assert make_dxf([Floor(name="Ground Floor")]) == b"0\nSECTION\n2\nENTITIES\n0\nENDSEC\n0\nEOF\n"

    def test_skips_degenerate_rooms(self):
        line = Room(vertices=[Point2D(x=0, y=0), Point2D(x=1, y=0)])
        floors = [Floor(name="F", rooms=[line, _rect(0, 0, 1, 1)])]
        assert make_dxf(floors).decode().count("LWPOLYLINE") == 1

    def test_layer_per_floor(self):
        floors = [
            Floor(name="Ground Floor", rooms=[_rect(0, 0, 1, 1)]),
            Floor(name="First\nFloor", rooms=[_rect(0, 0, 1, 1)]),
            Floor(name="", rooms=[_rect(0, 0, 1, 1)]),
        ]
        lines = make_dxf(floors).decode().split("\n")
        layers = [lines[i + 1] for i, code in enumerate(lines[:-1]) if code == "8"]
        assert layers == ["Ground Floor", "First Floor", "0"]

    def test_coordinates_verbatim(self):
        floors = [Floor(name="F", rooms=[_rect(1.25, -2.5, 2, 2)])]
        text = make_dxf(floors).decode()
        assert "10\n1.25\n20\n-2.5\n" in text


class TestPNG:
    def test_signature_and_size(self):
        data = _furnished_plan().export_png((200, 150))
        assert data.startswith(PNG_SIGNATURE)
        image = _decode_png(data)
        assert image.shape == (300, 400, 4)

    def test_image_scale(self):
        options = PNGExportOptions(image_scale=1.0)
        image = _decode_png(render_png(_furnished_plan().floors, (120, 90), options))
        assert image.shape == (90, 120, 4)

    def test_opaque(self):
        image = _decode_png(_furnished_plan().export_png((160, 120)))
        assert np.all(image[..., 3] == 1.0)

    def test_draws_something(self):
        image = _decode_png(_furnished_plan().export_png((160, 120)))
        assert (image[..., :3] < 0.5).any()

    def test_empty_is_blank_background(self):
        image = _decode_png(render_png([Floor(name="Ground Floor")], (64, 48)))
        assert image.shape == (96, 128, 4)
        assert np.allclose(image, 1.0)

    def test_custom_background(self):
        options = PNGExportOptions(background="#000000", image_scale=1.0)
        image = _decode_png(render_png([Floor(name="Ground Floor")], (32, 32), options))
        assert np.allclose(image[..., :3], 0.0)
        assert np.allclose(image[..., 3], 1.0)

    def test_all_layers_enabled(self):
        options = PNGExportOptions(show_grid=True, image_scale=1.0)
        data = render_png(_furnished_plan().floors, (300, 200), options)
        assert data.startswith(PNG_SIGNATURE)

    def test_dollar_signs_in_names_render_literally(self):
        floors = [
            Floor(
                name="Ground Floor",
                rooms=[
                    _rect(0, 0, 4, 3, name="Tile $^$ Bath"),
                    _rect(4, 0, 3, 3, name="Room $2 and $3"),
                ],
            )
        ]
        data = render_png(floors, (200, 150))
        assert data.startswith(PNG_SIGNATURE)


class TestPNGHelpers:
    @pytest.mark.parametrize(
        "meters, label",
        [(4.0, "4.00 m"), (9.994, "9.99 m"), (10.0, "10.0 m"), (12.345, "12.3 m")],
    )
    def test_format_length(self, meters, label):
        assert format_length(meters) == label

    def test_fit_is_uniform_and_centered_in_margin(self):
        floors = [Floor(name="F", rooms=[_rect(0, 0, 4, 2)])]
        fit = fit_transform(floors, 464, 464, 32)
        assert fit.scale == pytest.approx(100.0)
        assert fit.to_px(Point2D(x=0, y=0)) == (32.0, 32.0)
        assert fit.to_px(Point2D(x=4, y=2)) == (432.0, 232.0)

    def test_fit_without_vertices(self):
        assert fit_transform([Floor(name="F")], 100, 100, 10) is None
