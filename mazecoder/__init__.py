"""
MazeCoder - Program a robot through a grid maze

An educational sandbox: learners write a small program of forward(n),
left() and right() statements, the program is parsed into primitive
instructions, simulated against a maze, and scored against the level's
optimal step count.
"""

from .src.parsing import (
    Instruction,
    InstructionParser,
    ParseResult,
    parse,
    parse_program,
)
from .src.simulation import (
    Heading,
    Maze,
    MazeConfigurationError,
    OutcomeStatus,
    PlaybackDriver,
    Pose,
    SimulationOutcome,
    Tile,
    TrajectorySimulator,
    render_maze,
    run,
)
from .src.levels import Level, LevelCatalog, get_level
from .src.review import (
    CodeReview,
    EfficiencyRating,
    HeuristicCodeReviewer,
    LLMCodeReviewer,
    rate_efficiency,
)
from .src.session import GameSession, SessionResult, create_session
from .src.config import GameConfig, create_config, configure_logging

__version__ = "0.1.0"
__author__ = "MazeCoder Team"

__all__ = [
    # Parsing
    "Instruction",
    "InstructionParser",
    "ParseResult",
    "parse",
    "parse_program",
    # Simulation
    "Heading",
    "Maze",
    "MazeConfigurationError",
    "OutcomeStatus",
    "PlaybackDriver",
    "Pose",
    "SimulationOutcome",
    "Tile",
    "TrajectorySimulator",
    "render_maze",
    "run",
    # Levels
    "Level",
    "LevelCatalog",
    "get_level",
    # Review
    "CodeReview",
    "EfficiencyRating",
    "HeuristicCodeReviewer",
    "LLMCodeReviewer",
    "rate_efficiency",
    # Session
    "GameSession",
    "SessionResult",
    "create_session",
    # Config
    "GameConfig",
    "create_config",
    "configure_logging",
]
