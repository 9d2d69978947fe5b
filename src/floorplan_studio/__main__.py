"""Entry point for ``python -m floorplan_studio``."""

from floorplan_studio.cli.main import app

app()
