"""
Simulation Module - Maze, Robot Pose and Trajectory Simulation

This module runs parsed instruction sequences against a maze and
reports the terminal outcome, with optional paced playback and an
ASCII view of the result.
"""

from .maze import Maze, MazeConfigurationError, Tile
from .simulator import (
    Heading,
    OutcomeStatus,
    Pose,
    SimulationOutcome,
    StepResult,
    TrajectorySimulator,
    run,
)
from .playback import PlaybackDriver
from .renderer import render_maze

__all__ = [
    "Maze",
    "MazeConfigurationError",
    "Tile",
    "Heading",
    "OutcomeStatus",
    "Pose",
    "SimulationOutcome",
    "StepResult",
    "TrajectorySimulator",
    "run",
    "PlaybackDriver",
    "render_maze",
]
