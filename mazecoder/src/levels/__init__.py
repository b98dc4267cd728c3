"""
Levels Module - Static level definitions

Maze layouts, start/goal cells, optimal step counts, starter programs
and hints, loaded from data/levels.json.
"""

from .catalog import Level, LevelCatalog, LevelHints, get_level

__all__ = [
    "Level",
    "LevelCatalog",
    "LevelHints",
    "get_level",
]
