"""Editor configuration passed in by the interaction layer."""

from __future__ import annotations

from pydantic import BaseModel, Field


class EditorSettings(BaseModel):
    """Tunable values for snapping, picking and history.

    None of these are read from the environment; the host application owns
    them and hands an instance to the Floorplan.
    """

    grid_step: float = Field(default=1.0, gt=0, description="Grid spacing in meters")
    snap_tolerance: float = Field(
        default=0.2, ge=0, description="Soft-snap pull distance in meters"
    )
    wall_pick_threshold: float = Field(
        default=0.3, gt=0, description="Max distance for picking a wall, meters"
    )
    duplicate_offset: float = Field(
        default=2.0, description="Offset applied on both axes to duplicated rooms"
    )
    wall_sample_distance: float = Field(
        default=0.1, gt=0, description="Normal offset of wall classification samples"
    )
    cross_floor_classification: bool = Field(
        default=False,
        description="Let rooms on other floors make a wall internal",
    )
    history_limit: int | None = Field(
        default=None, ge=1, description="Max undo depth; None = unbounded"
    )
