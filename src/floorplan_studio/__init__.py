"""Floor-plan editing core: rooms, walls, openings, history and export."""

__version__ = "0.1.0"
