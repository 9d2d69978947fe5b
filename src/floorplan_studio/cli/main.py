"""Floorplan Studio CLI.

Usage:
    python -m floorplan_studio <command> PROJECT.json [options]

Inspects and converts saved project JSON files. Every command prints a JSON
object with an ``ok`` flag; failures exit with code 1.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import NoReturn, Optional

import typer

from floorplan_studio.editing.floorplan import Floorplan
from floorplan_studio.editing.settings import EditorSettings
from floorplan_studio.export.project import ProjectLoadError
from floorplan_studio.models.elements import WallType

app = typer.Typer(
    name="floorplan_studio",
    help="Floorplan Studio: inspect and export floor-plan projects.",
    no_args_is_help=True,
)

EXPORT_FORMATS = ("png", "dxf", "json")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _fail(message: str) -> NoReturn:
    typer.echo(json.dumps({"ok": False, "error": message}))
    raise typer.Exit(1)


def _load_floorplan(path: Path, settings: EditorSettings | None = None) -> Floorplan:
    """Load a project file into a Floorplan."""
    if not path.is_file():
        _fail(f"Project not found: {path}")
    floorplan = Floorplan(settings=settings)
    try:
        floorplan.load_project(path.read_bytes())
    except ProjectLoadError as exc:
        _fail(str(exc))
    return floorplan


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log to stderr"),
) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

@app.command()
def version() -> None:
    """Show version."""
    from floorplan_studio import __version__

    typer.echo(json.dumps({"ok": True, "version": __version__}))


@app.command()
def info(project: Path = typer.Argument(..., help="Project JSON file")) -> None:
    """Summarize floors and rooms."""
    floorplan = _load_floorplan(project)
    floors = []
    for floor in floorplan.floors:
        floors.append({
            "id": floor.id,
            "name": floor.name,
            "rooms": [
                {
                    "id": room.id,
                    "name": room.name,
                    "vertices": len(room.vertices),
                    "area": round(room.area, 3),
                    "doors": len(room.doors),
                    "windows": len(room.windows),
                    "stairs": len(room.stairs),
                }
                for room in floor.rooms
            ],
            "area": round(floor.area, 3),
        })
    typer.echo(json.dumps({"ok": True, "floors": floors}, indent=2, ensure_ascii=False))


@app.command()
def export(
    project: Path = typer.Argument(..., help="Project JSON file"),
    format: str = typer.Option("png", "--format", "-f", help="png, dxf or json"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output file"),
    width: float = typer.Option(1024, "--width", help="PNG logical width"),
    height: float = typer.Option(768, "--height", help="PNG logical height"),
    scale: float = typer.Option(2.0, "--scale", help="PNG pixels per logical point"),
    no_dimensions: bool = typer.Option(False, "--no-dimensions", help="PNG: omit dimension lines"),
) -> None:
    """Export a project to PNG, DXF or vertices JSON."""
    fmt = format.lower()
    if fmt not in EXPORT_FORMATS:
        _fail(f"Unknown format '{format}'. Choose from: {', '.join(EXPORT_FORMATS)}")
    floorplan = _load_floorplan(project)

    if fmt == "png":
        from floorplan_studio.export.png import PNGExportOptions

        options = PNGExportOptions(image_scale=scale, show_dimensions=not no_dimensions)
        data = floorplan.export_png((width, height), options)
    elif fmt == "dxf":
        data = floorplan.export_dxf()
    else:
        data = floorplan.export_data()

    out = output or project.with_suffix(f".{fmt}" if fmt != "json" else ".vertices.json")
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_bytes(data)
    typer.echo(json.dumps({"ok": True, "format": fmt, "output": str(out), "bytes": len(data)}))


@app.command()
def classify(
    project: Path = typer.Argument(..., help="Project JSON file"),
    cross_floor: bool = typer.Option(
        False, "--cross-floor", help="Let rooms on other floors make walls internal"
    ),
) -> None:
    """Recompute internal/external wall types and save the project in place."""
    floorplan = _load_floorplan(project, EditorSettings(cross_floor_classification=cross_floor))
    changed = floorplan.update_wall_types()
    if changed:
        project.write_bytes(floorplan.project_data())
    internal = sum(
        1
        for floor in floorplan.floors
        for room in floor.rooms
        for wall_type in room.wall_types
        if wall_type is WallType.INTERNAL
    )
    typer.echo(json.dumps({"ok": True, "changed": changed, "internal_walls": internal}))


if __name__ == "__main__":
    app()
