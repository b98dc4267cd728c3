"""
Maze Grid

The static world the robot moves through: a rectangular grid of tiles
with exactly one goal. Rows grow downward and columns grow to the right,
so (0, 0) is the top-left corner.
"""

import logging
from enum import Enum
from typing import Iterable, List, Optional, Tuple

import numpy as np

logger = logging.getLogger(__name__)


Position = Tuple[int, int]


class Tile(Enum):
    """Static classification of a grid cell."""
    EMPTY = 0
    WALL = 1
    GOAL = 2

    @property
    def symbol(self) -> str:
        return {Tile.EMPTY: ".", Tile.WALL: "#", Tile.GOAL: "G"}[self]


class MazeConfigurationError(ValueError):
    """
    Raised when maze or level data violates the grid contract.

    This signals a broken level definition, not a mistake in the
    learner's program.
    """

    def __init__(self, message: str, position: Optional[Position] = None):
        super().__init__(message)
        self.position = position


class Maze:
    """
    A read-only grid of tiles.

    The underlying numpy array is flagged non-writeable, so one maze can
    be shared by any number of simulation runs.
    """

    def __init__(self, grid: np.ndarray):
        """
        Initialize the maze.

        Args:
            grid: 2D integer array of Tile values

        Raises:
            MazeConfigurationError: If the grid is empty, not 2D, holds
                unknown tile codes, or does not have exactly one goal
        """
        grid = np.array(grid, dtype=np.int8)
        if grid.ndim != 2 or grid.size == 0:
            raise MazeConfigurationError(f"Maze grid must be a non-empty 2D array, got shape {grid.shape}")

        known = {tile.value for tile in Tile}
        unknown = set(np.unique(grid).tolist()) - known
        if unknown:
            raise MazeConfigurationError(f"Unknown tile codes in maze: {sorted(unknown)}")

        goals = np.argwhere(grid == Tile.GOAL.value)
        if len(goals) != 1:
            raise MazeConfigurationError(f"Maze must contain exactly one goal tile, found {len(goals)}")

        grid.setflags(write=False)
        self._grid = grid
        self._goal: Position = (int(goals[0][0]), int(goals[0][1]))

    @property
    def rows(self) -> int:
        return self._grid.shape[0]

    @property
    def cols(self) -> int:
        return self._grid.shape[1]

    @property
    def shape(self) -> Tuple[int, int]:
        return (self.rows, self.cols)

    @property
    def grid(self) -> np.ndarray:
        """Read-only view of the tile codes."""
        return self._grid

    @property
    def goal_position(self) -> Position:
        return self._goal

    def in_bounds(self, row: int, col: int) -> bool:
        """Check if a cell lies inside the grid."""
        return 0 <= row < self.rows and 0 <= col < self.cols

    def tile_at(self, row: int, col: int) -> Tile:
        """
        Get the tile at a cell.

        Raises:
            MazeConfigurationError: If the cell is outside the grid
        """
        if not self.in_bounds(row, col):
            raise MazeConfigurationError(
                f"No tile at ({row}, {col}) in a {self.rows}x{self.cols} maze",
                position=(row, col),
            )
        return Tile(int(self._grid[row, col]))

    def is_wall(self, row: int, col: int) -> bool:
        return self.tile_at(row, col) is Tile.WALL

    def walls(self) -> List[Position]:
        """All wall cells, in row-major order."""
        return [(int(r), int(c)) for r, c in np.argwhere(self._grid == Tile.WALL.value)]

    def has_solid_border(self) -> bool:
        """Check that every edge cell is a wall."""
        wall = Tile.WALL.value
        return bool(
            np.all(self._grid[0, :] == wall)
            and np.all(self._grid[-1, :] == wall)
            and np.all(self._grid[:, 0] == wall)
            and np.all(self._grid[:, -1] == wall)
        )

    def validate(self, start: Position, goal: Position) -> None:
        """
        Check a start and goal against this maze.

        Raises:
            MazeConfigurationError: If start or goal has no tile, the start
                is a wall, or the goal is not this maze's goal tile
        """
        for label, (row, col) in (("start", start), ("goal", goal)):
            if not self.in_bounds(row, col):
                raise MazeConfigurationError(
                    f"No tile at {label} position ({row}, {col}) in a {self.rows}x{self.cols} maze",
                    position=(row, col),
                )

        if self.is_wall(*start):
            raise MazeConfigurationError(f"Start position {tuple(start)} is a wall", position=tuple(start))

        if tuple(goal) != self._goal:
            raise MazeConfigurationError(
                f"Goal position {tuple(goal)} does not match the maze goal tile at {self._goal}",
                position=tuple(goal),
            )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Maze):
            return NotImplemented
        return np.array_equal(self._grid, other._grid)

    def __repr__(self) -> str:
        return f"Maze({self.rows}x{self.cols}, walls={len(self.walls())}, goal={self._goal})"

    @classmethod
    def bordered(
        cls,
        size: int = 15,
        walls: Iterable[Position] = (),
        goal: Position = (13, 13),
    ) -> "Maze":
        """
        Build a square maze surrounded by walls.

        Args:
            size: Number of rows and columns
            walls: Interior wall cells; cells outside the grid are ignored
            goal: Goal cell

        Returns:
            A new Maze
        """
        if size < 3:
            raise MazeConfigurationError(f"A bordered maze needs at least 3 cells per side, got {size}")

        grid = np.full((size, size), Tile.EMPTY.value, dtype=np.int8)
        grid[0, :] = Tile.WALL.value
        grid[-1, :] = Tile.WALL.value
        grid[:, 0] = Tile.WALL.value
        grid[:, -1] = Tile.WALL.value

        for row, col in walls:
            if 0 <= row < size and 0 <= col < size:
                grid[row, col] = Tile.WALL.value

        row, col = goal
        if not (0 <= row < size and 0 <= col < size):
            raise MazeConfigurationError(f"Goal {tuple(goal)} lies outside a {size}x{size} maze", position=tuple(goal))
        grid[row, col] = Tile.GOAL.value

        return cls(grid)

    @classmethod
    def from_ascii(cls, ascii_map: str) -> "Maze":
        """
        Create a maze from ASCII art.

        Legend:
        - '.' = empty
        - '#' = wall
        - 'G' = goal
        - 'S' = robot start (empty for the maze)
        """
        lines = [line.strip() for line in ascii_map.strip().split("\n") if line.strip()]
        if not lines:
            raise MazeConfigurationError("ASCII maze is empty")

        width = len(lines[0])
        if any(len(line) != width for line in lines):
            raise MazeConfigurationError("ASCII maze rows must all have the same length")

        codes = {".": Tile.EMPTY.value, "S": Tile.EMPTY.value, "#": Tile.WALL.value, "G": Tile.GOAL.value}
        grid = np.zeros((len(lines), width), dtype=np.int8)
        for row, line in enumerate(lines):
            for col, char in enumerate(line):
                if char not in codes:
                    raise MazeConfigurationError(f"Unknown maze symbol '{char}'", position=(row, col))
                grid[row, col] = codes[char]

        return cls(grid)

    @staticmethod
    def find_marker(ascii_map: str, marker: str = "S") -> Optional[Position]:
        """Locate a marker character (such as the start 'S') in ASCII art."""
        lines = [line.strip() for line in ascii_map.strip().split("\n") if line.strip()]
        for row, line in enumerate(lines):
            col = line.find(marker)
            if col >= 0:
                return (row, col)
        return None
