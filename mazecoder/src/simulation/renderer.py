"""
ASCII Maze Renderer

Text view of a maze, the robot and the cells it has visited.
"""

from typing import Iterable, Optional

from .maze import Maze, Position, Tile
from .simulator import Pose

TRAIL_SYMBOL = "·"


def render_maze(
    maze: Maze,
    pose: Optional[Pose] = None,
    trail: Optional[Iterable[Position]] = None,
    show_coordinates: bool = False,
) -> str:
    """
    Get an ASCII visualization of a maze.

    Args:
        maze: The maze to draw
        pose: Robot pose, drawn as a heading arrow
        trail: Visited cells, drawn as dots
        show_coordinates: Add column indices below the grid

    Returns:
        String with one text line per maze row
    """
    visited = set(trail or ())
    lines = []

    for row in range(maze.rows):
        line = []
        for col in range(maze.cols):
            tile = maze.tile_at(row, col)
            if pose is not None and (row, col) == pose.position:
                line.append(pose.heading.arrow)
            elif tile is not Tile.EMPTY:
                line.append(tile.symbol)
            elif (row, col) in visited:
                line.append(TRAIL_SYMBOL)
            else:
                line.append(Tile.EMPTY.symbol)
        lines.append(" ".join(line))

    if show_coordinates:
        lines.append("-" * (maze.cols * 2 - 1))
        lines.append(" ".join(str(i % 10) for i in range(maze.cols)))

    return "\n".join(lines)
