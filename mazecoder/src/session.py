"""
MazeCoder Session - Main Orchestrator

This module ties the stages together for one level:
1. Parsing: program text to instructions
2. Simulation: instructions to a terminal outcome
3. Rating: outcome steps against the level's optimal count

Every run starts from a freshly built pose; nothing from a previous run
is carried over.
"""

import time
import logging
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List

from .config import GameConfig, get_default_config
from .levels.catalog import Level, LevelCatalog
from .parsing.parser import InstructionParser, ParseResult
from .review.reviewer import BaseCodeReviewer, CodeReview, create_reviewer
from .review.scoring import EfficiencyRating, rate_efficiency
from .simulation.playback import PlaybackDriver
from .simulation.renderer import render_maze
from .simulation.simulator import (
    Heading,
    Pose,
    SimulationOutcome,
    StepObserver,
    TrajectorySimulator,
)


logger = logging.getLogger(__name__)


@dataclass
class SessionResult:
    """
    Complete result of running a program on a level.
    """
    # Input
    code: str
    level_id: int

    # Stage results
    parse_result: Optional[ParseResult] = None
    outcome: Optional[SimulationOutcome] = None
    rating: EfficiencyRating = EfficiencyRating.READY

    # Metadata
    optimal: int = 0
    total_time: float = 0.0

    @property
    def success(self) -> bool:
        return self.outcome is not None and self.outcome.success

    @property
    def steps(self) -> int:
        return self.outcome.total_steps if self.outcome else 0

    @property
    def log(self) -> List[str]:
        return list(self.outcome.log) if self.outcome else []

    def to_dict(self) -> Dict[str, Any]:
        """Export result to dictionary."""
        return {
            "level_id": self.level_id,
            "status": self.outcome.status.value if self.outcome else None,
            "message": self.outcome.terminal_message if self.outcome else "",
            "steps": self.steps,
            "optimal": self.optimal,
            "rating": self.rating.value,
            "log": self.log,
            "skipped_lines": [str(s) for s in self.parse_result.skipped] if self.parse_result else [],
            "total_time": self.total_time,
        }


class GameSession:
    """
    One learner playing one level.

    Example:
        session = create_session(level_id=2)
        result = session.run("forward(12)\\nright()\\nforward(12)")
        print(result.rating, result.log)
    """

    def __init__(
        self,
        level: Level,
        config: Optional[GameConfig] = None,
        reviewer: Optional[BaseCodeReviewer] = None,
        parser: Optional[InstructionParser] = None,
    ):
        """
        Initialize the session.

        Args:
            level: Level to play
            config: Game configuration (defaults to environment); its
                start_heading, when set, replaces the level's heading
            reviewer: Code reviewer (defaults to LLM if configured, else heuristic)
            parser: Instruction parser
        """
        self.level = level
        self.config = config or get_default_config()
        self.config.validate()
        self.parser = parser or InstructionParser()
        self.reviewer = reviewer or create_reviewer(self.config.openai)

        self.simulator = TrajectorySimulator(
            level.maze,
            goal=level.goal,
            step_limit=self.config.simulation.step_limit,
        )
        # The level's own facing, unless the configuration overrides it
        override = self.config.simulation.start_heading
        self.heading = Heading.from_name(override) if override else level.start_heading
        self.last_result: Optional[SessionResult] = None

    def start_pose(self) -> Pose:
        """A fresh pose at the level's start."""
        return self.simulator.initial_pose(self.level.start, self.heading)

    @property
    def pose(self) -> Pose:
        """Robot pose to display: the last run's final pose, or the start."""
        if self.last_result and self.last_result.outcome:
            return self.last_result.outcome.final_pose.snapshot()
        return self.start_pose()

    @property
    def rating(self) -> EfficiencyRating:
        return self.last_result.rating if self.last_result else EfficiencyRating.READY

    def run(
        self,
        code: str,
        observer: Optional[StepObserver] = None,
        animate: bool = False,
    ) -> SessionResult:
        """
        Parse and run a program from the level's start.

        Args:
            code: Program text
            observer: Called with the pose after every executed instruction
            animate: Replay the observer frames with the configured delay

        Returns:
            SessionResult with outcome and rating
        """
        start_time = time.time()
        result = SessionResult(code=code, level_id=self.level.level_id, optimal=self.level.optimal)

        # Stage 1: Parsing
        parse_result = self.parser.parse_program(code)
        result.parse_result = parse_result
        logger.info(f"Parsed {len(parse_result.instructions)} instructions for level {self.level.level_id}")
        if parse_result.skipped:
            logger.info(f"  Ignored lines: {[str(s) for s in parse_result.skipped]}")

        # Stage 2: Simulation
        if animate:
            driver = PlaybackDriver(self.simulator, delay=self.config.simulation.playback_delay)
            outcome = driver.play(parse_result.instructions, self.level.start, observer, heading=self.heading)
        else:
            outcome = self.simulator.run(
                parse_result.instructions,
                self.level.start,
                heading=self.heading,
                observer=observer,
            )
        result.outcome = outcome

        # Stage 3: Rating
        result.rating = rate_efficiency(outcome.success, outcome.total_steps, self.level.optimal)
        result.total_time = time.time() - start_time
        logger.info(f"Level {self.level.level_id}: {outcome.terminal_message} ({outcome.total_steps} steps, {result.rating.value})")

        self.last_result = result
        return result

    def reset(self) -> Pose:
        """Discard the last run and return a fresh start pose."""
        self.last_result = None
        return self.start_pose()

    def review(self, code: Optional[str] = None) -> CodeReview:
        """
        Review a program using the last run's step count.

        Args:
            code: Program text (defaults to the last run's program)
        """
        steps = self.last_result.steps if self.last_result else 0
        if code is None:
            code = self.last_result.code if self.last_result else ""
        return self.reviewer.review(code, self.level.level_id, steps, self.level.optimal)

    def render(self, show_trail: bool = True) -> str:
        """ASCII view of the maze with the robot and its last trajectory."""
        trail = None
        if show_trail and self.last_result and self.last_result.outcome:
            trail = [self.level.start] + [p.position for p in self.last_result.outcome.trajectory]
        return render_maze(self.level.maze, pose=self.pose, trail=trail)


def create_session(
    level_id: int = 1,
    config: Optional[GameConfig] = None,
    reviewer: Optional[BaseCodeReviewer] = None,
) -> GameSession:
    """
    Convenience function to create a session for a catalog level.

    Args:
        level_id: Level to play (unknown ids fall back to level 1)
        config: Game configuration
        reviewer: Code reviewer

    Returns:
        Configured GameSession
    """
    config = config or get_default_config()
    catalog = LevelCatalog(config.levels.levels_path)
    return GameSession(catalog.get(level_id), config=config, reviewer=reviewer)
