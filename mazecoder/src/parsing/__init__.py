"""
Parsing Module - Program text to motion instructions

This module turns the learner's program into a flat list of primitive
instructions consumed by the simulator.

Statements:
- forward(N): N x MOVE_FORWARD
- left(): TURN_LEFT
- right(): TURN_RIGHT
"""

from .instructions import Instruction
from .parser import (
    InstructionParser,
    ParseResult,
    SkippedLine,
    parse,
    parse_program,
)

__all__ = [
    "Instruction",
    "InstructionParser",
    "ParseResult",
    "SkippedLine",
    "parse",
    "parse_program",
]
