"""
Instruction Parser - Learner program text to motion instructions.

The command language has three statements, one per line:

    forward(N)   move N cells ahead (N is a non-negative integer)
    left()       turn 90 degrees left
    right()      turn 90 degrees right

Blank lines and lines starting with '#' are ignored. Parsing is
permissive: a line that matches none of the statements is dropped
without raising. The dropped lines are available as diagnostics through
parse_program() for callers that want to show them.
"""

import re
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .instructions import Instruction

logger = logging.getLogger(__name__)


COMMENT_MARKER = "#"

# forward(N) counts above this are logged; no run can take more moves
# than its step limit
LARGE_FORWARD_COUNT = 1000

# Checked in this order; each must match the whole trimmed line.
# Counts are ASCII digits only.
STATEMENT_PATTERNS: List[Tuple[str, "re.Pattern"]] = [
    ("forward", re.compile(r"forward\(([0-9]+)\)")),
    ("left", re.compile(r"left\(\)")),
    ("right", re.compile(r"right\(\)")),
]


@dataclass
class SkippedLine:
    """A non-blank, non-comment line that matched no statement."""
    line_number: int        # 1-based
    text: str               # Trimmed line content

    def __str__(self) -> str:
        return f"line {self.line_number}: '{self.text}'"


@dataclass
class ParseResult:
    """
    Result of parsing a learner program.

    Contains the flat instruction sequence plus the lines that were
    ignored because they matched no statement.
    """
    instructions: List[Instruction]
    skipped: List[SkippedLine] = field(default_factory=list)
    statement_count: int = 0
    source: str = ""

    @property
    def move_count(self) -> int:
        return sum(1 for i in self.instructions if i is Instruction.MOVE_FORWARD)

    @property
    def turn_count(self) -> int:
        return sum(1 for i in self.instructions if i.is_turn)

    @property
    def has_skipped_lines(self) -> bool:
        return bool(self.skipped)


class InstructionParser:
    """
    Parser for the maze command language.

    Each line is trimmed, filtered for blanks and comments, and then
    matched as a whole against forward(N), left() and right(), in that
    order. Unrecognized lines contribute nothing.
    """

    def __init__(self, patterns: Optional[List[Tuple[str, "re.Pattern"]]] = None):
        self.patterns = patterns or STATEMENT_PATTERNS

    def parse_line(self, line: str) -> Optional[List[Instruction]]:
        """
        Parse a single trimmed line.

        Args:
            line: Program line with surrounding whitespace removed

        Returns:
            List of instructions for the line (possibly empty, for
            forward(0)), or None if the line is not a statement
        """
        for name, pattern in self.patterns:
            match = pattern.fullmatch(line)
            if not match:
                continue

            instruction = Instruction.from_token(name)
            if instruction is Instruction.MOVE_FORWARD:
                count = int(match.group(1))
                if count > LARGE_FORWARD_COUNT:
                    logger.warning(f"'{line}' expands to {count} moves, far beyond any step limit")
                return [instruction] * count
            return [instruction]

        return None

    def parse_program(self, source_text: str) -> ParseResult:
        """
        Parse a full program, keeping diagnostics for ignored lines.

        Args:
            source_text: Learner-authored program text

        Returns:
            ParseResult with the instruction sequence in line order
        """
        result = ParseResult(instructions=[], source=source_text)

        for line_number, raw_line in enumerate(source_text.split("\n"), start=1):
            line = raw_line.strip()
            if not line or line.startswith(COMMENT_MARKER):
                continue

            parsed = self.parse_line(line)
            if parsed is None:
                logger.debug(f"Ignoring unrecognized line {line_number}: '{line}'")
                result.skipped.append(SkippedLine(line_number=line_number, text=line))
                continue

            logger.debug(f"Line {line_number}: '{line}' -> {len(parsed)} instruction(s)")
            result.instructions.extend(parsed)
            result.statement_count += 1

        logger.debug(
            f"Parsed {len(result.instructions)} instructions "
            f"({result.statement_count} statements, {len(result.skipped)} skipped)"
        )
        return result

    def parse(self, source_text: str) -> List[Instruction]:
        """Parse a program into its flat instruction sequence."""
        return self.parse_program(source_text).instructions


_default_parser = InstructionParser()


def parse(source_text: str) -> List[Instruction]:
    """
    Parse learner program text into an ordered list of instructions.

    Example:
        >>> parse("forward(2)\\nright()")
        [<Instruction.MOVE_FORWARD: 'forward'>, <Instruction.MOVE_FORWARD: 'forward'>, <Instruction.TURN_RIGHT: 'right'>]
    """
    return _default_parser.parse(source_text)


def parse_program(source_text: str) -> ParseResult:
    """Parse learner program text, keeping diagnostics for ignored lines."""
    return _default_parser.parse_program(source_text)
