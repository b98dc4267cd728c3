"""
Level Catalog - Static level definitions.

Loads maze layouts, start/goal cells, optimal step counts, starter
programs and hints from a JSON file. The catalog only describes levels;
it never runs a search to find the optimal count.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..config import DEFAULT_LEVELS_PATH
from ..simulation.maze import Maze, MazeConfigurationError, Position
from ..simulation.simulator import Heading

logger = logging.getLogger(__name__)


FALLBACK_LEVEL_ID = 1


@dataclass
class LevelHints:
    """Hint panel content for a level."""
    title: str
    real_world: str = ""
    tips: List[str] = field(default_factory=list)


@dataclass
class Level:
    """
    A playable level.

    Attributes:
        level_id: Numeric identifier
        name: Display name
        algorithm: Algorithm the level is themed on
        maze: The maze grid
        start: Start cell
        start_heading: Facing at the start of every run
        goal: Goal cell
        optimal: Reference step count used for scoring
        starter_code: Program pre-filled in the editor
        hints: Hint panel content
    """
    level_id: int
    name: str
    algorithm: str
    maze: Maze
    start: Position
    goal: Position
    optimal: int
    start_heading: Heading = Heading.EAST
    starter_code: str = ""
    hints: Optional[LevelHints] = None

    def __str__(self) -> str:
        return f"Level {self.level_id}: {self.name} ({self.algorithm}, optimal {self.optimal})"


class LevelCatalog:
    """
    The set of available levels.

    Expected JSON format:
    {
        "metadata": {"size": 15, "start": [1, 1], "goal": [13, 13], ...},
        "levels": {
            "1": {
                "name": "...",
                "algorithm": "...",
                "optimal": 28,
                "walls": {"cells": [...], "segments": [...], "grid": {...}, "layout": "..."},
                "starter_code": ["line", ...],
                "hints": {"title": "...", "real_world": "...", "tips": [...]}
            }
        },
        "layouts": {"name": [[row, col], ...]}
    }
    """

    def __init__(self, levels_path: Optional[str] = None):
        """
        Initialize the catalog.

        Args:
            levels_path: Path to a level definitions JSON file (defaults to
                the packaged levels)
        """
        self._levels: Dict[int, Level] = {}
        self._metadata: Dict[str, Any] = {}
        self._layouts: Dict[str, List[Position]] = {}
        self.load_from_file(levels_path or str(DEFAULT_LEVELS_PATH))

    def load_from_file(self, path: str) -> None:
        """
        Load level definitions from a JSON file.

        Raises:
            MazeConfigurationError: If a level definition is malformed
        """
        with open(path, "r") as f:
            data = json.load(f)
        self.load_from_dict(data)
        logger.info(f"Loaded {len(self._levels)} levels from {path}")

    def load_from_dict(self, data: Dict[str, Any]) -> None:
        """Load level definitions from an already parsed dictionary."""
        self._metadata = data.get("metadata", {})
        self._layouts = {
            name: [tuple(cell) for cell in cells]
            for name, cells in data.get("layouts", {}).items()
        }
        self._levels = {}

        for key, entry in data.get("levels", {}).items():
            try:
                level_id = int(key)
            except ValueError:
                raise MazeConfigurationError(f"Level id must be an integer, got '{key}'") from None
            self._levels[level_id] = self._build_level(level_id, entry)

        if not self._levels:
            raise MazeConfigurationError("Level catalog contains no levels")

    def _build_level(self, level_id: int, entry: Dict[str, Any]) -> Level:
        """Build one Level from its JSON entry."""
        meta = self._metadata
        size = entry.get("size", meta.get("size", 15))
        start = tuple(entry.get("start", meta.get("start", [1, 1])))
        goal = tuple(entry.get("goal", meta.get("goal", [size - 2, size - 2])))

        try:
            optimal = int(entry.get("optimal", meta.get("optimal", 0)))
            heading = Heading.from_name(entry.get("start_heading", meta.get("start_heading", "EAST")))
        except (TypeError, ValueError) as e:
            raise MazeConfigurationError(f"Level {level_id}: {e}") from e

        walls = self._expand_walls(level_id, entry.get("walls", {}))
        maze = Maze.bordered(size=size, walls=walls, goal=goal)
        maze.validate(start, goal)

        hints_data = entry.get("hints")
        hints = None
        if hints_data:
            hints = LevelHints(
                title=hints_data.get("title", entry.get("name", "")),
                real_world=hints_data.get("real_world", ""),
                tips=list(hints_data.get("tips", [])),
            )

        return Level(
            level_id=level_id,
            name=entry.get("name", f"Level {level_id}"),
            algorithm=entry.get("algorithm", ""),
            maze=maze,
            start=start,
            goal=goal,
            optimal=optimal,
            start_heading=heading,
            starter_code="\n".join(entry.get("starter_code", [])),
            hints=hints,
        )

    def _expand_walls(self, level_id: int, wall_def: Dict[str, Any]) -> List[Position]:
        """
        Turn a wall description into a list of cells.

        Supports explicit cells, inclusive straight segments, a regular
        pillar grid and named shared layouts.
        """
        walls: List[Position] = [tuple(cell) for cell in wall_def.get("cells", [])]

        for segment in wall_def.get("segments", []):
            (r1, c1), (r2, c2) = segment["from"], segment["to"]
            if r1 != r2 and c1 != c2:
                raise MazeConfigurationError(
                    f"Level {level_id}: wall segment {segment} is not horizontal or vertical",
                    position=(r1, c1),
                )
            for row in range(min(r1, r2), max(r1, r2) + 1):
                for col in range(min(c1, c2), max(c1, c2) + 1):
                    walls.append((row, col))

        grid = wall_def.get("grid")
        if grid:
            coords = range(grid["start"], grid["stop"], grid["step"])
            walls.extend((row, col) for row in coords for col in coords)

        layout = wall_def.get("layout")
        if layout:
            if layout not in self._layouts:
                raise MazeConfigurationError(f"Level {level_id}: unknown wall layout '{layout}'")
            walls.extend(self._layouts[layout])

        return walls

    def get(self, level_id: int) -> Level:
        """
        Get a level by id.

        Unknown ids fall back to level 1.
        """
        if level_id not in self._levels:
            logger.warning(f"Unknown level {level_id}, falling back to level {FALLBACK_LEVEL_ID}")
            fallback = FALLBACK_LEVEL_ID if FALLBACK_LEVEL_ID in self._levels else min(self._levels)
            return self._levels[fallback]
        return self._levels[level_id]

    def ids(self) -> List[int]:
        """All level ids in ascending order."""
        return sorted(self._levels)

    def levels(self) -> List[Level]:
        return [self._levels[i] for i in self.ids()]

    @property
    def metadata(self) -> Dict[str, Any]:
        return dict(self._metadata)

    def __len__(self) -> int:
        return len(self._levels)

    def __contains__(self, level_id: int) -> bool:
        return level_id in self._levels

    def __iter__(self):
        return iter(self.levels())


_default_catalog: Optional[LevelCatalog] = None


def get_level(level_id: int, levels_path: Optional[str] = None) -> Level:
    """Get a level from the packaged catalog (or the given file)."""
    global _default_catalog
    if levels_path:
        return LevelCatalog(levels_path).get(level_id)
    if _default_catalog is None:
        _default_catalog = LevelCatalog()
    return _default_catalog.get(level_id)
