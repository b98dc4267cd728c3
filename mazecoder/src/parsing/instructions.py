"""
Instructions - The primitive opcodes of the robot's motion language.

A learner program is flattened into a sequence of these opcodes.
`forward(N)` becomes N consecutive MOVE_FORWARD instructions, so the
simulator only ever sees single-step actions.
"""

from enum import Enum


class Instruction(Enum):
    """Primitive motion instructions."""
    MOVE_FORWARD = "forward"
    TURN_LEFT = "left"
    TURN_RIGHT = "right"

    @classmethod
    def from_token(cls, token: str) -> "Instruction":
        """
        Look up an instruction by its command name.

        Args:
            token: Command name as written in a program (forward, left, right)

        Returns:
            The matching Instruction

        Raises:
            KeyError: If the token is not a known command
        """
        for instruction in cls:
            if instruction.value == token:
                return instruction
        raise KeyError(f"Unknown command: '{token}'. Available: {[i.value for i in cls]}")

    @property
    def is_turn(self) -> bool:
        return self in (Instruction.TURN_LEFT, Instruction.TURN_RIGHT)
