"""Full project JSON: the round-trippable save format.

The document is a JSON array of floors. Rooms carry their wall types
(``"internalWall"`` / ``"externalWall"``), openings, stairs and fill color
as ``_h``/``_s``/``_b``/``_a``.
"""

from __future__ import annotations

from collections.abc import Sequence

from pydantic import TypeAdapter, ValidationError

from floorplan_studio.models.rooms import Floor

_FLOORS = TypeAdapter(list[Floor])


class ProjectLoadError(ValueError):
    """Project JSON could not be decoded into a valid floor list."""


def project_data(floors: Sequence[Floor]) -> bytes:
    """Encode floors as pretty-printed project JSON."""
    return _FLOORS.dump_json(list(floors), indent=2, by_alias=True)


def load_project_data(data: bytes | str) -> list[Floor]:
    """Decode project JSON. Raises ProjectLoadError on any failure."""
    try:
        floors = _FLOORS.validate_json(data)
    except ValidationError as exc:
        raise ProjectLoadError(
            f"Invalid project data ({exc.error_count()} error(s)): {exc.errors()[0]['msg']}"
        ) from exc
    if not floors:
        raise ProjectLoadError("Project must contain at least one floor")
    return floors
