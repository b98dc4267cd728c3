"""
Playback Driver

Paces a finished run for animation. The outcome is computed first by the
synchronous simulator; the driver then replays the recorded poses to an
observer with a delay between frames. Pacing and cancellation therefore
never change what the run computed.
"""

import time
import logging
from typing import Callable, Optional, Sequence, Union

from ..parsing.instructions import Instruction
from .maze import Position
from .simulator import Heading, Pose, SimulationOutcome, StepObserver, TrajectorySimulator

logger = logging.getLogger(__name__)


class PlaybackDriver:
    """
    Replays a run frame by frame.

    Example:
        driver = PlaybackDriver(simulator, delay=0.15)
        outcome = driver.play(instructions, (1, 1), observer=draw_frame)
    """

    def __init__(
        self,
        simulator: TrajectorySimulator,
        delay: float = 0.15,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize the driver.

        Args:
            simulator: Simulator that computes the run
            delay: Seconds to wait after each frame
            sleep: Delay hook (inject a no-op for tests)
        """
        if delay < 0:
            raise ValueError(f"delay must be non-negative, got {delay}")
        self.simulator = simulator
        self.delay = delay
        self.sleep = sleep
        self._cancelled = False
        self.frames_delivered = 0

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        """Stop delivering the remaining frames of the current playback."""
        self._cancelled = True

    def play(
        self,
        instructions: Sequence[Instruction],
        start: Union[Pose, Position],
        observer: Optional[StepObserver] = None,
        heading: Optional[Heading] = None,
    ) -> SimulationOutcome:
        """
        Compute a run and replay its poses to the observer.

        Returns:
            The full SimulationOutcome, even if playback was cancelled
        """
        self._cancelled = False
        self.frames_delivered = 0

        outcome = self.simulator.run(instructions, start, heading=heading)
        if observer is None:
            return outcome

        for frame in outcome.trajectory:
            if self._cancelled:
                logger.info(f"Playback cancelled after {self.frames_delivered} of {len(outcome.trajectory)} frames")
                break
            observer(frame.snapshot())
            self.frames_delivered += 1
            self.sleep(self.delay)

        return outcome
