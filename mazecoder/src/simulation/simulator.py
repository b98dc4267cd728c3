"""
Trajectory Simulator

Executes a flat instruction sequence against a maze, one instruction at
a time, and reports how the run ended. Wall hits, boundary hits, the
step limit and running out of instructions are all ordinary outcomes,
never exceptions.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Callable, List, Optional, Sequence, Tuple, Union
from enum import Enum

from ..parsing.instructions import Instruction
from .maze import Maze, MazeConfigurationError, Position, Tile

logger = logging.getLogger(__name__)


DEFAULT_STEP_LIMIT = 100

GOAL_REACHED_MESSAGE = "Goal reached!"
WALL_HIT_MESSAGE = "Error: Hit wall!"
BOUNDARY_HIT_MESSAGE = "Error: Hit boundary!"
STEP_LIMIT_MESSAGE = "Maximum steps exceeded!"
EXHAUSTED_MESSAGE = "Code completed but goal not reached"


class Heading(Enum):
    """Robot facing, in clockwise order."""
    NORTH = (-1, 0)
    EAST = (0, 1)
    SOUTH = (1, 0)
    WEST = (0, -1)

    @property
    def delta(self) -> Tuple[int, int]:
        """Unit (row, col) displacement of one forward move."""
        return self.value

    def turned_right(self) -> "Heading":
        """Next heading clockwise."""
        order = list(Heading)
        return order[(order.index(self) + 1) % len(order)]

    def turned_left(self) -> "Heading":
        """Next heading counter-clockwise."""
        order = list(Heading)
        return order[(order.index(self) - 1) % len(order)]

    @property
    def arrow(self) -> str:
        return {
            Heading.NORTH: "^",
            Heading.EAST: ">",
            Heading.SOUTH: "v",
            Heading.WEST: "<",
        }[self]

    @classmethod
    def from_name(cls, name: str) -> "Heading":
        """Look up a heading by name, case-insensitively."""
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown heading '{name}'. Available: {[h.name for h in cls]}") from None


@dataclass
class Pose:
    """
    Dynamic state of the robot during one run.
    """
    row: int
    col: int
    heading: Heading = Heading.EAST
    total_steps: int = 0

    @property
    def position(self) -> Position:
        return (self.row, self.col)

    def target_cell(self) -> Position:
        """Cell one move ahead in the current heading."""
        d_row, d_col = self.heading.delta
        return (self.row + d_row, self.col + d_col)

    def move_to(self, row: int, col: int) -> "Pose":
        """Move to a cell, counting one step."""
        self.row = row
        self.col = col
        self.total_steps += 1
        return self

    def turn_left(self) -> "Pose":
        """Turn 90 degrees left."""
        self.heading = self.heading.turned_left()
        return self

    def turn_right(self) -> "Pose":
        """Turn 90 degrees right."""
        self.heading = self.heading.turned_right()
        return self

    def snapshot(self) -> "Pose":
        """Independent copy of this pose."""
        return replace(self)

    def __str__(self) -> str:
        return f"({self.row}, {self.col}) facing {self.heading.name}, {self.total_steps} steps"


class OutcomeStatus(Enum):
    """How a run ended."""
    GOAL_REACHED = "goal-reached"
    BLOCKED = "blocked"
    STEP_LIMIT_EXCEEDED = "step-limit-exceeded"
    EXHAUSTED_WITHOUT_GOAL = "exhausted-without-goal"


@dataclass
class StepResult:
    """
    Result of applying one instruction to a pose.

    `pose` is the post-instruction pose; for a blocked move it equals the
    input pose and `blocked_by` names what stopped it.
    """
    instruction: Instruction
    pose: Pose
    message: str
    blocked_by: Optional[str] = None        # "wall" or "boundary"
    target: Optional[Position] = None

    @property
    def blocked(self) -> bool:
        return self.blocked_by is not None


@dataclass
class SimulationOutcome:
    """
    Terminal result of one simulation run.
    """
    status: OutcomeStatus
    total_steps: int
    log: List[str]
    final_pose: Pose
    trajectory: List[Pose] = field(default_factory=list)
    executed_instructions: int = 0
    blocked_at: Optional[Position] = None

    @property
    def success(self) -> bool:
        return self.status is OutcomeStatus.GOAL_REACHED

    @property
    def terminal_message(self) -> str:
        return self.log[-1] if self.log else ""

    def __str__(self) -> str:
        status = "✅ SUCCESS" if self.success else f"❌ {self.status.value.upper()}"
        return f"{status} - {self.total_steps} steps, {self.executed_instructions} instructions executed"


StepObserver = Callable[[Pose], None]


class TrajectorySimulator:
    """
    Runs instruction sequences against a fixed maze and goal.

    The maze is only read, so a simulator (and its maze) can be reused
    for any number of runs. Each run starts from a freshly built Pose.
    """

    def __init__(
        self,
        maze: Maze,
        goal: Optional[Position] = None,
        step_limit: int = DEFAULT_STEP_LIMIT,
    ):
        """
        Initialize the simulator.

        Args:
            maze: The maze to run in
            goal: Goal cell (defaults to the maze's goal tile)
            step_limit: Number of moves after which a run is cut off

        Raises:
            MazeConfigurationError: If the goal has no tile or is not the goal tile
            ValueError: If step_limit is negative
        """
        if step_limit < 0:
            raise ValueError(f"step_limit must be non-negative, got {step_limit}")

        self.maze = maze
        self.goal: Position = tuple(goal) if goal is not None else maze.goal_position
        self.step_limit = step_limit

        row, col = self.goal
        if not maze.in_bounds(row, col):
            raise MazeConfigurationError(f"No tile at goal position {self.goal}", position=self.goal)
        if maze.tile_at(row, col) is not Tile.GOAL:
            raise MazeConfigurationError(
                f"Goal position {self.goal} is {maze.tile_at(row, col).name}, expected GOAL",
                position=self.goal,
            )

    def initial_pose(
        self,
        start: Union[Pose, Position],
        heading: Optional[Heading] = None,
    ) -> Pose:
        """
        Build the fresh pose a run starts from.

        Args:
            start: A Pose (its steps are discarded) or a (row, col) pair
            heading: Facing override (defaults to the pose's heading, or EAST)

        Raises:
            MazeConfigurationError: If the start has no tile or is a wall
        """
        if isinstance(start, Pose):
            row, col = start.position
            heading = heading or start.heading
        else:
            row, col = start
        pose = Pose(row=row, col=col, heading=heading or Heading.EAST, total_steps=0)
        self.maze.validate(pose.position, self.goal)
        return pose

    def step(self, pose: Pose, instruction: Instruction) -> StepResult:
        """
        Apply one instruction without touching the given pose.

        Args:
            pose: Current pose
            instruction: Instruction to apply

        Returns:
            StepResult with the post-instruction pose
        """
        new_pose = pose.snapshot()

        if instruction is Instruction.MOVE_FORWARD:
            row, col = new_pose.target_cell()
            if not self.maze.in_bounds(row, col):
                return StepResult(instruction, new_pose, BOUNDARY_HIT_MESSAGE, blocked_by="boundary", target=(row, col))
            if self.maze.is_wall(row, col):
                return StepResult(instruction, new_pose, WALL_HIT_MESSAGE, blocked_by="wall", target=(row, col))
            new_pose.move_to(row, col)
            return StepResult(instruction, new_pose, f"Moved forward to ({row}, {col})", target=(row, col))

        elif instruction is Instruction.TURN_LEFT:
            new_pose.turn_left()
            return StepResult(instruction, new_pose, f"Turned left, now facing {new_pose.heading.name}")

        elif instruction is Instruction.TURN_RIGHT:
            new_pose.turn_right()
            return StepResult(instruction, new_pose, f"Turned right, now facing {new_pose.heading.name}")

        raise ValueError(f"Unknown instruction: {instruction}")

    def is_at_goal(self, pose: Pose) -> bool:
        return pose.position == self.goal

    def run(
        self,
        instructions: Sequence[Instruction],
        start: Union[Pose, Position],
        heading: Optional[Heading] = None,
        observer: Optional[StepObserver] = None,
    ) -> SimulationOutcome:
        """
        Run an instruction sequence to a terminal outcome.

        Args:
            instructions: Instructions to execute, in order
            start: Start pose or (row, col) cell
            heading: Initial facing override
            observer: Called with a snapshot of the pose after every
                executed instruction

        Returns:
            SimulationOutcome with status, step count, log and trajectory
        """
        pose = self.initial_pose(start, heading)
        log: List[str] = []
        trajectory: List[Pose] = []
        executed = 0

        logger.info(
            f"Running {len(instructions)} instructions from {pose.position} "
            f"facing {pose.heading.name} (goal {self.goal}, limit {self.step_limit})"
        )

        def finish(status: OutcomeStatus, message: str, blocked_at: Optional[Position] = None) -> SimulationOutcome:
            log.append(message)
            outcome = SimulationOutcome(
                status=status,
                total_steps=pose.total_steps,
                log=log,
                final_pose=pose.snapshot(),
                trajectory=trajectory,
                executed_instructions=executed,
                blocked_at=blocked_at,
            )
            logger.info(f"Run finished: {outcome}")
            return outcome

        for instruction in instructions:
            if pose.total_steps >= self.step_limit:
                logger.warning(f"Step limit {self.step_limit} reached at {pose.position}")
                return finish(OutcomeStatus.STEP_LIMIT_EXCEEDED, STEP_LIMIT_MESSAGE)

            result = self.step(pose, instruction)
            if result.blocked:
                logger.warning(f"Cannot move to {result.target} - blocked by {result.blocked_by}")
                return finish(OutcomeStatus.BLOCKED, result.message, blocked_at=result.target)

            pose = result.pose
            executed += 1
            log.append(result.message)
            trajectory.append(pose.snapshot())
            logger.debug(f"Step {executed}: {instruction.name} -> {pose}")

            if observer is not None:
                observer(pose.snapshot())

            if self.is_at_goal(pose):
                return finish(OutcomeStatus.GOAL_REACHED, GOAL_REACHED_MESSAGE)

        if self.is_at_goal(pose):
            return finish(OutcomeStatus.GOAL_REACHED, GOAL_REACHED_MESSAGE)

        return finish(OutcomeStatus.EXHAUSTED_WITHOUT_GOAL, EXHAUSTED_MESSAGE)


def run(
    instructions: Sequence[Instruction],
    maze: Maze,
    start: Union[Pose, Position],
    goal: Optional[Position] = None,
    step_limit: int = DEFAULT_STEP_LIMIT,
    heading: Optional[Heading] = None,
    observer: Optional[StepObserver] = None,
) -> SimulationOutcome:
    """
    Run instructions against a maze in one call.

    Example:
        maze = Maze.bordered(size=15, goal=(13, 13))
        outcome = run(parse("forward(12)\\nright()\\nforward(12)"), maze, (1, 1))
        assert outcome.success and outcome.total_steps == 24
    """
    simulator = TrajectorySimulator(maze, goal=goal, step_limit=step_limit)
    return simulator.run(instructions, start, heading=heading, observer=observer)
