"""
Tests for the Simulation Module.
"""

import pytest
import numpy as np

from src.parsing.instructions import Instruction
from src.parsing.parser import parse
from src.simulation.maze import Maze, MazeConfigurationError, Tile
from src.simulation.simulator import (
    BOUNDARY_HIT_MESSAGE,
    EXHAUSTED_MESSAGE,
    GOAL_REACHED_MESSAGE,
    STEP_LIMIT_MESSAGE,
    WALL_HIT_MESSAGE,
    Heading,
    OutcomeStatus,
    Pose,
    SimulationOutcome,
    TrajectorySimulator,
    run,
)
from src.simulation.playback import PlaybackDriver
from src.simulation.renderer import render_maze


F = Instruction.MOVE_FORWARD
L = Instruction.TURN_LEFT
R = Instruction.TURN_RIGHT


@pytest.fixture
def open_maze():
    """15x15 bordered maze, empty interior, goal at (13, 13)."""
    return Maze.bordered(size=15, goal=(13, 13))


@pytest.fixture
def simulator(open_maze):
    return TrajectorySimulator(open_maze)


class TestHeading:
    """Tests for the Heading enum."""

    def test_turn_right_cycle(self):
        assert Heading.NORTH.turned_right() is Heading.EAST
        assert Heading.EAST.turned_right() is Heading.SOUTH
        assert Heading.SOUTH.turned_right() is Heading.WEST
        assert Heading.WEST.turned_right() is Heading.NORTH

    def test_turn_left_cycle(self):
        assert Heading.NORTH.turned_left() is Heading.WEST
        assert Heading.WEST.turned_left() is Heading.SOUTH
        assert Heading.SOUTH.turned_left() is Heading.EAST
        assert Heading.EAST.turned_left() is Heading.NORTH

    def test_deltas(self):
        assert Heading.NORTH.delta == (-1, 0)
        assert Heading.EAST.delta == (0, 1)
        assert Heading.SOUTH.delta == (1, 0)
        assert Heading.WEST.delta == (0, -1)

    def test_from_name(self):
        assert Heading.from_name("east") is Heading.EAST
        assert Heading.from_name(" North ") is Heading.NORTH

    def test_from_unknown_name_raises(self):
        with pytest.raises(ValueError):
            Heading.from_name("up")


class TestPose:
    """Tests for Pose."""

    def test_defaults(self):
        pose = Pose(row=1, col=1)
        assert pose.heading is Heading.EAST
        assert pose.total_steps == 0
        assert pose.position == (1, 1)

    def test_target_cell(self):
        assert Pose(row=5, col=5, heading=Heading.NORTH).target_cell() == (4, 5)
        assert Pose(row=5, col=5, heading=Heading.WEST).target_cell() == (5, 4)

    def test_move_counts_step(self):
        pose = Pose(row=1, col=1)
        pose.move_to(1, 2)
        assert pose.position == (1, 2)
        assert pose.total_steps == 1

    def test_four_turns_restore_heading(self):
        pose = Pose(row=3, col=3, heading=Heading.SOUTH)
        for _ in range(4):
            pose.turn_left()
        assert pose.heading is Heading.SOUTH
        for _ in range(4):
            pose.turn_right()
        assert pose.heading is Heading.SOUTH
        assert pose.position == (3, 3)
        assert pose.total_steps == 0

    def test_snapshot_is_independent(self):
        pose = Pose(row=1, col=1)
        copy = pose.snapshot()
        pose.move_to(1, 2)
        assert copy.position == (1, 1)
        assert copy.total_steps == 0


class TestMaze:
    """Tests for Maze."""

    def test_bordered_maze(self, open_maze):
        assert open_maze.shape == (15, 15)
        assert open_maze.has_solid_border()
        assert open_maze.goal_position == (13, 13)
        assert open_maze.tile_at(13, 13) is Tile.GOAL
        assert open_maze.tile_at(1, 1) is Tile.EMPTY
        assert len(open_maze.walls()) == 56

    def test_bordered_with_walls(self):
        maze = Maze.bordered(size=15, walls=[(3, 3), (20, 20)], goal=(13, 13))
        assert maze.is_wall(3, 3)
        assert len(maze.walls()) == 57

    def test_in_bounds(self, open_maze):
        assert open_maze.in_bounds(0, 0)
        assert open_maze.in_bounds(14, 14)
        assert not open_maze.in_bounds(-1, 0)
        assert not open_maze.in_bounds(0, 15)

    def test_tile_outside_grid_raises(self, open_maze):
        with pytest.raises(MazeConfigurationError) as exc_info:
            open_maze.tile_at(15, 3)
        assert exc_info.value.position == (15, 3)

    def test_grid_is_read_only(self, open_maze):
        with pytest.raises(ValueError):
            open_maze.grid[5, 5] = Tile.WALL.value

    def test_missing_goal_raises(self):
        with pytest.raises(MazeConfigurationError):
            Maze(np.zeros((3, 3), dtype=np.int8))

    def test_two_goals_raise(self):
        with pytest.raises(MazeConfigurationError):
            Maze.from_ascii("G.G")

    def test_unknown_tile_code_raises(self):
        with pytest.raises(MazeConfigurationError):
            Maze(np.array([[2, 7]]))

    def test_from_ascii(self):
        ascii_map = """
        #####
        #S#.#
        #...#
        #..G#
        #####
        """
        maze = Maze.from_ascii(ascii_map)
        assert maze.shape == (5, 5)
        assert maze.is_wall(1, 2)
        assert maze.tile_at(1, 1) is Tile.EMPTY
        assert maze.goal_position == (3, 3)
        assert Maze.find_marker(ascii_map, "S") == (1, 1)

    def test_from_ascii_ragged_raises(self):
        with pytest.raises(MazeConfigurationError):
            Maze.from_ascii("###\n#G\n###")

    def test_from_ascii_unknown_symbol_raises(self):
        with pytest.raises(MazeConfigurationError):
            Maze.from_ascii("#X#\n#G#")

    def test_validate_start_out_of_bounds(self, open_maze):
        with pytest.raises(MazeConfigurationError):
            open_maze.validate((20, 1), (13, 13))

    def test_validate_start_on_wall(self, open_maze):
        with pytest.raises(MazeConfigurationError):
            open_maze.validate((0, 0), (13, 13))

    def test_validate_goal_mismatch(self, open_maze):
        with pytest.raises(MazeConfigurationError):
            open_maze.validate((1, 1), (5, 5))

    def test_equality(self):
        assert Maze.bordered(size=5, goal=(3, 3)) == Maze.bordered(size=5, goal=(3, 3))
        assert Maze.bordered(size=5, goal=(3, 3)) != Maze.bordered(size=5, goal=(2, 3))


class TestSimulatorSetup:
    """Tests for simulator construction and start poses."""

    def test_goal_defaults_to_maze_goal(self, open_maze):
        assert TrajectorySimulator(open_maze).goal == (13, 13)

    def test_negative_step_limit_raises(self, open_maze):
        with pytest.raises(ValueError):
            TrajectorySimulator(open_maze, step_limit=-1)

    def test_goal_not_on_goal_tile_raises(self, open_maze):
        with pytest.raises(MazeConfigurationError):
            TrajectorySimulator(open_maze, goal=(5, 5))

    def test_goal_outside_grid_raises(self, open_maze):
        with pytest.raises(MazeConfigurationError):
            TrajectorySimulator(open_maze, goal=(30, 30))

    def test_start_outside_grid_raises(self, simulator):
        with pytest.raises(MazeConfigurationError):
            simulator.run([F], (15, 15))

    def test_start_on_wall_raises(self, simulator):
        with pytest.raises(MazeConfigurationError):
            simulator.run([F], (0, 3))

    def test_initial_pose_is_fresh(self, simulator):
        used = Pose(row=2, col=2, heading=Heading.SOUTH, total_steps=7)
        pose = simulator.initial_pose(used)
        assert pose is not used
        assert pose.position == (2, 2)
        assert pose.heading is Heading.SOUTH
        assert pose.total_steps == 0

    def test_heading_override(self, simulator):
        pose = simulator.initial_pose((1, 1), Heading.NORTH)
        assert pose.heading is Heading.NORTH

    def test_default_heading_is_east(self, simulator):
        assert simulator.initial_pose((1, 1)).heading is Heading.EAST


class TestStep:
    """Tests for the single-instruction transition."""

    def test_step_does_not_mutate_input(self, simulator):
        pose = Pose(row=1, col=1)
        result = simulator.step(pose, F)
        assert pose.position == (1, 1)
        assert pose.total_steps == 0
        assert result.pose.position == (1, 2)
        assert result.pose.total_steps == 1
        assert not result.blocked

    def test_step_turn(self, simulator):
        result = simulator.step(Pose(row=1, col=1), L)
        assert result.pose.heading is Heading.NORTH
        assert result.pose.total_steps == 0

    def test_step_into_wall(self, simulator):
        result = simulator.step(Pose(row=1, col=1, heading=Heading.NORTH), F)
        assert result.blocked
        assert result.blocked_by == "wall"
        assert result.target == (0, 1)
        assert result.pose.position == (1, 1)


class TestRun:
    """Tests for full simulation runs."""

    def test_end_to_end_scenario(self, simulator):
        instructions = parse("forward(12)\nright()\nforward(12)")
        outcome = simulator.run(instructions, (1, 1), Heading.EAST)

        assert isinstance(outcome, SimulationOutcome)
        assert outcome.status is OutcomeStatus.GOAL_REACHED
        assert outcome.success
        assert outcome.total_steps == 24
        assert outcome.log[-1] == GOAL_REACHED_MESSAGE
        assert outcome.final_pose.position == (13, 13)
        assert outcome.executed_instructions == 25
        assert len(outcome.trajectory) == 25

    def test_module_level_run(self, open_maze):
        outcome = run(parse("forward(12)\nright()\nforward(12)"), open_maze, (1, 1), goal=(13, 13))
        assert outcome.status is OutcomeStatus.GOAL_REACHED
        assert outcome.total_steps == 24

    def test_wall_hit_blocks(self):
        maze = Maze.from_ascii("""
            #####
            #S#.#
            #...#
            #..G#
            #####
        """)
        sim = TrajectorySimulator(maze)
        outcome = sim.run([F, R, F], (1, 1), Heading.EAST)

        assert outcome.status is OutcomeStatus.BLOCKED
        assert outcome.log == [WALL_HIT_MESSAGE]
        assert outcome.terminal_message == WALL_HIT_MESSAGE
        assert outcome.final_pose.position == (1, 1)
        assert outcome.final_pose.heading is Heading.EAST
        assert outcome.total_steps == 0
        assert outcome.executed_instructions == 0
        assert outcome.blocked_at == (1, 2)

    def test_boundary_hit_blocks(self):
        maze = Maze.from_ascii("S..\n...\n..G")
        sim = TrajectorySimulator(maze)
        outcome = sim.run([F, F], (0, 0), Heading.WEST)

        assert outcome.status is OutcomeStatus.BLOCKED
        assert outcome.log == [BOUNDARY_HIT_MESSAGE]
        assert outcome.final_pose.position == (0, 0)
        assert outcome.blocked_at == (0, -1)

    def test_blocked_move_stops_remaining_instructions(self, simulator):
        outcome = simulator.run(parse("forward(2)\nleft()\nforward(3)\nright()"), (1, 1), Heading.EAST)

        assert outcome.status is OutcomeStatus.BLOCKED
        assert outcome.total_steps == 2
        assert outcome.final_pose.position == (1, 3)
        assert outcome.final_pose.heading is Heading.NORTH
        assert outcome.executed_instructions == 3
        assert outcome.log[-1] == WALL_HIT_MESSAGE

    def test_goal_terminates_run_immediately(self):
        maze = Maze.bordered(size=15, goal=(5, 5))
        sim = TrajectorySimulator(maze)
        instructions = parse("forward(1)\nforward(5)\nleft()")
        outcome = sim.run(instructions, (6, 5), Heading.NORTH)

        assert outcome.status is OutcomeStatus.GOAL_REACHED
        assert outcome.total_steps == 1
        assert outcome.executed_instructions == 1
        assert outcome.log == ["Moved forward to (5, 5)", GOAL_REACHED_MESSAGE]
        assert outcome.final_pose.heading is Heading.NORTH

    def test_turns_do_not_count_as_steps(self, simulator):
        program = "forward(3)\n" + "left()\n" * 10
        outcome = simulator.run(parse(program), (1, 1), Heading.EAST)

        assert outcome.total_steps == 3
        assert outcome.final_pose.position == (1, 4)
        assert outcome.final_pose.heading is Heading.WEST
        assert outcome.status is OutcomeStatus.EXHAUSTED_WITHOUT_GOAL

    def test_four_turns_restore_heading_in_run(self, simulator):
        outcome = simulator.run([R, R, R, R], (4, 4), Heading.SOUTH)
        assert outcome.final_pose.heading is Heading.SOUTH
        assert outcome.final_pose.position == (4, 4)
        assert outcome.total_steps == 0

    def test_step_limit_exceeded(self, open_maze):
        sim = TrajectorySimulator(open_maze, step_limit=5)
        outcome = sim.run(parse("forward(6)"), (1, 1), Heading.EAST)

        assert outcome.status is OutcomeStatus.STEP_LIMIT_EXCEEDED
        assert outcome.total_steps == 5
        assert outcome.final_pose.position == (1, 6)
        assert outcome.log[-1] == STEP_LIMIT_MESSAGE

    def test_goal_on_exactly_the_limit_succeeds(self):
        maze = Maze.bordered(size=15, goal=(1, 6))
        sim = TrajectorySimulator(maze, step_limit=5)
        outcome = sim.run(parse("forward(5)"), (1, 1), Heading.EAST)

        assert outcome.status is OutcomeStatus.GOAL_REACHED
        assert outcome.total_steps == 5

    def test_step_limit_checked_before_turns(self, open_maze):
        sim = TrajectorySimulator(open_maze, step_limit=2)
        outcome = sim.run(parse("forward(2)\nleft()"), (1, 1), Heading.EAST)

        assert outcome.status is OutcomeStatus.STEP_LIMIT_EXCEEDED
        assert outcome.total_steps == 2
        assert outcome.final_pose.heading is Heading.EAST

    def test_zero_step_limit_allows_no_instructions(self, open_maze):
        sim = TrajectorySimulator(open_maze, step_limit=0)
        outcome = sim.run([R], (1, 1))
        assert outcome.status is OutcomeStatus.STEP_LIMIT_EXCEEDED
        assert outcome.executed_instructions == 0

    def test_no_instructions_is_exhausted(self, simulator):
        outcome = simulator.run([], (1, 1))
        assert outcome.status is OutcomeStatus.EXHAUSTED_WITHOUT_GOAL
        assert outcome.log == [EXHAUSTED_MESSAGE]
        assert outcome.total_steps == 0

    def test_forward_zero_is_exhausted(self, simulator):
        outcome = simulator.run(parse("forward(0)"), (1, 1))
        assert outcome.status is OutcomeStatus.EXHAUSTED_WITHOUT_GOAL

    def test_no_instructions_at_goal_is_success(self, simulator):
        outcome = simulator.run([], (13, 13))
        assert outcome.status is OutcomeStatus.GOAL_REACHED
        assert outcome.log == [GOAL_REACHED_MESSAGE]
        assert outcome.total_steps == 0

    def test_goal_checked_after_turns(self, simulator):
        outcome = simulator.run([L, F], (13, 13), Heading.EAST)
        assert outcome.status is OutcomeStatus.GOAL_REACHED
        assert outcome.executed_instructions == 1
        assert outcome.final_pose.heading is Heading.NORTH

    def test_exhausted_without_goal(self, simulator):
        outcome = simulator.run(parse("forward(3)"), (1, 1))
        assert outcome.status is OutcomeStatus.EXHAUSTED_WITHOUT_GOAL
        assert not outcome.success
        assert outcome.total_steps == 3
        assert len(outcome.log) == 4
        assert outcome.log[-1] == EXHAUSTED_MESSAGE

    def test_single_terminal_message_last(self, simulator):
        outcome = simulator.run(parse("forward(2)\nright()"), (1, 1))
        terminal = {GOAL_REACHED_MESSAGE, WALL_HIT_MESSAGE, BOUNDARY_HIT_MESSAGE, STEP_LIMIT_MESSAGE, EXHAUSTED_MESSAGE}
        assert sum(1 for line in outcome.log if line in terminal) == 1
        assert outcome.terminal_message == EXHAUSTED_MESSAGE

    def test_start_pose_not_mutated(self, simulator):
        start = Pose(row=1, col=1, heading=Heading.EAST)
        simulator.run(parse("forward(4)\nright()"), start)
        assert start.position == (1, 1)
        assert start.heading is Heading.EAST
        assert start.total_steps == 0

    def test_runs_do_not_share_state(self, simulator):
        first = simulator.run(parse("forward(5)"), (1, 1))
        second = simulator.run(parse("forward(5)"), (1, 1))
        assert first.final_pose.position == second.final_pose.position == (1, 6)
        assert second.total_steps == 5

    def test_outcome_str(self, simulator):
        assert "SUCCESS" in str(simulator.run([], (13, 13)))
        assert "BLOCKED" in str(simulator.run([L, F], (1, 1)))


class TestObserver:
    """Tests for the per-step observer hook."""

    def test_observer_called_once_per_executed_instruction(self, simulator):
        frames = []
        outcome = simulator.run(parse("forward(3)\nright()\nforward(2)"), (1, 1), observer=frames.append)

        assert len(frames) == outcome.executed_instructions == 6
        assert frames[0].position == (1, 2)
        assert frames[3].heading is Heading.SOUTH
        assert frames[-1].position == (3, 4)

    def test_observer_not_called_for_blocked_move(self, simulator):
        frames = []
        simulator.run([L, F], (1, 1), observer=frames.append)
        assert len(frames) == 1

    def test_observer_cannot_alter_run(self, simulator):
        def meddle(pose):
            pose.row = 9
            pose.total_steps = 99

        watched = simulator.run(parse("forward(12)\nright()\nforward(12)"), (1, 1), observer=meddle)
        assert watched.total_steps == 24
        assert watched.status is OutcomeStatus.GOAL_REACHED

    def test_runs_are_deterministic_with_and_without_observer(self, simulator):
        program = parse("forward(4)\nright()\nforward(3)\nleft()\nforward(20)")
        plain = simulator.run(program, (1, 1))
        again = simulator.run(program, (1, 1))
        watched = simulator.run(program, (1, 1), observer=lambda pose: None)

        for other in (again, watched):
            assert other.status is plain.status
            assert other.total_steps == plain.total_steps
            assert other.log == plain.log


class TestPlayback:
    """Tests for paced playback."""

    def test_playback_matches_plain_run(self, simulator):
        program = parse("forward(12)\nright()\nforward(12)")
        driver = PlaybackDriver(simulator, delay=0.0, sleep=lambda s: None)

        frames = []
        animated = driver.play(program, (1, 1), observer=frames.append)
        plain = simulator.run(program, (1, 1))

        assert animated.status is plain.status
        assert animated.total_steps == plain.total_steps == 24
        assert animated.log == plain.log
        assert [f.position for f in frames] == [p.position for p in plain.trajectory]

    def test_sleep_called_between_frames(self, simulator):
        delays = []
        driver = PlaybackDriver(simulator, delay=0.15, sleep=delays.append)
        driver.play(parse("forward(2)\nleft()"), (2, 2), observer=lambda pose: None)
        assert delays == [0.15, 0.15, 0.15]

    def test_no_observer_skips_pacing(self, simulator):
        delays = []
        driver = PlaybackDriver(simulator, delay=0.15, sleep=delays.append)
        outcome = driver.play(parse("forward(2)"), (2, 2))
        assert delays == []
        assert outcome.total_steps == 2

    def test_cancel_stops_frames_but_keeps_outcome(self, simulator):
        driver = PlaybackDriver(simulator, delay=0.0, sleep=lambda s: None)
        frames = []

        def observer(pose):
            frames.append(pose)
            if len(frames) == 3:
                driver.cancel()

        outcome = driver.play(parse("forward(12)\nright()\nforward(12)"), (1, 1), observer=observer)

        assert len(frames) == 3
        assert driver.cancelled
        assert driver.frames_delivered == 3
        assert outcome.status is OutcomeStatus.GOAL_REACHED
        assert outcome.total_steps == 24

    def test_negative_delay_raises(self, simulator):
        with pytest.raises(ValueError):
            PlaybackDriver(simulator, delay=-1)


class TestRenderer:
    """Tests for the ASCII renderer."""

    def test_render_maze(self, open_maze):
        view = render_maze(open_maze, pose=Pose(row=1, col=1, heading=Heading.EAST))
        lines = view.split("\n")

        assert len(lines) == 15
        assert lines[0] == " ".join(["#"] * 15)
        assert lines[1].startswith("# >")
        assert "G" in lines[13]

    def test_render_trail(self, open_maze):
        view = render_maze(open_maze, pose=Pose(row=1, col=3, heading=Heading.SOUTH), trail=[(1, 1), (1, 2), (1, 3)])
        assert view.split("\n")[1].startswith("# · · v")

    def test_render_coordinates(self, open_maze):
        view = render_maze(open_maze, show_coordinates=True)
        assert view.split("\n")[-1].startswith("0 1 2")
