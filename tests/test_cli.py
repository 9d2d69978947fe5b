"""Tests for the CLI interface."""
import json
import os
import subprocess
import sys
from pathlib import Path

import pytest

from floorplan_studio.editing import Floorplan
from floorplan_studio.models import Point2D

CLI = [sys.executable, "-m", "floorplan_studio"]
ROOT = Path(__file__).parent.parent
ENV = {**os.environ, "PYTHONPATH": str(ROOT / "src")}


def _run(*args: str) -> subprocess.CompletedProcess:
    return subprocess.run(
        [*CLI, *args],
        capture_output=True, text=True, cwd=str(ROOT), env=ENV,
    )


def run_cli(*args: str) -> dict:
    """Run CLI command and return parsed JSON output."""
    result = _run(*args)
    assert result.returncode == 0, f"CLI failed: {result.stderr}\n{result.stdout}"
    return json.loads(result.stdout)


def run_cli_expect_fail(*args: str) -> dict:
    """Run CLI command expecting failure, return parsed JSON output."""
    result = _run(*args)
    assert result.returncode != 0
    return json.loads(result.stdout)


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """Two adjacent rooms on the ground floor, an empty upper floor."""
    plan = Floorplan()
    hall = plan.add_room([(0, 0), (4, 0), (4, 3), (0, 3)], name="Hall")
    plan.add_room([(4, 0), (7, 0), (7, 3), (4, 3)], name="Kitchen")
    plan.select_only(hall.id)
    plan.select_wall_near(Point2D(x=2, y=0))
    plan.add_door(0.5)
    plan.add_floor("First Floor")
    path = tmp_path / "house.json"
    path.write_bytes(plan.project_data())
    return path


class TestVersion:
    def test_version(self):
        data = run_cli("version")
        assert data["ok"] is True
        assert data["version"]


class TestInfo:
    def test_info(self, project):
        data = run_cli("info", str(project))
        assert data["ok"] is True
        assert [f["name"] for f in data["floors"]] == ["Ground Floor", "First Floor"]
        rooms = data["floors"][0]["rooms"]
        assert [r["name"] for r in rooms] == ["Hall", "Kitchen"]
        assert rooms[0]["area"] == 12.0
        assert rooms[0]["doors"] == 1
        assert data["floors"][0]["area"] == 21.0

    def test_missing_project(self, tmp_path):
        data = run_cli_expect_fail("info", str(tmp_path / "nope.json"))
        assert data["ok"] is False
        assert "not found" in data["error"]

    def test_directory_is_not_a_project(self, tmp_path):
        data = run_cli_expect_fail("info", str(tmp_path))
        assert data["ok"] is False
        assert "not found" in data["error"]

    def test_invalid_project(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("[]")
        data = run_cli_expect_fail("info", str(path))
        assert data["ok"] is False


class TestExport:
    def test_dxf(self, project, tmp_path):
        out = tmp_path / "house.dxf"
        data = run_cli("export", str(project), "--format", "dxf", "-o", str(out))
        assert data["ok"] is True
        text = out.read_text()
        assert text.startswith("0\nSECTION\n2\nENTITIES\n")
        assert text.endswith("0\nENDSEC\n0\nEOF\n")
        assert text.count("LWPOLYLINE") == 2

    def test_png(self, project, tmp_path):
        out = tmp_path / "house.png"
        data = run_cli(
            "export", str(project), "--format", "png", "-o", str(out),
            "--width", "160", "--height", "120", "--scale", "1",
        )
        assert data["bytes"] == out.stat().st_size
        assert out.read_bytes().startswith(b"\x89PNG\r\n\x1a\n")

    def test_vertices_json_default_output(self, project):
        data = run_cli("export", str(project), "--format", "json")
        out = Path(data["output"])
        assert out.name == "house.vertices.json"
        payload = json.loads(out.read_text())
        assert len(payload[0]["rooms"]) == 2

    def test_unknown_format(self, project):
        data = run_cli_expect_fail("export", str(project), "--format", "svg")
        assert "Unknown format" in data["error"]


class TestClassify:
    def test_marks_shared_walls(self, project):
        data = run_cli("classify", str(project))
        assert data == {"ok": True, "changed": True, "internal_walls": 2}
        doc = json.loads(project.read_text())
        assert doc[0]["rooms"][0]["wallTypes"][1] == "internalWall"

    def test_second_run_is_stable(self, project):
        run_cli("classify", str(project))
        data = run_cli("classify", str(project))
        assert data["changed"] is False

    def test_verbose_logs_to_stderr(self, project):
        result = _run("--verbose", "classify", str(project))
        assert result.returncode == 0
        assert "Loaded project" in result.stderr
