"""Exporters: vertices JSON, project JSON, PNG and DXF."""

from floorplan_studio.export.vertices import vertices_data, vertices_payload
from floorplan_studio.export.project import ProjectLoadError, load_project_data, project_data
from floorplan_studio.export.dxf import make_dxf

__all__ = [
    "vertices_data",
    "vertices_payload",
    "ProjectLoadError",
    "load_project_data",
    "project_data",
    "make_dxf",
]
