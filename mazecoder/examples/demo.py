#!/usr/bin/env python3
"""
MazeCoder Demo

Runs each level's starter program, shows the maze, the run log, the
efficiency rating and the code review. No API key is needed; the
heuristic reviewer is used unless OPENAI_API_KEY is set.
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from src.config import configure_logging, get_default_config
from src.levels.catalog import LevelCatalog
from src.parsing.parser import parse_program
from src.session import GameSession


def print_separator(title: str = ""):
    """Print a visual separator."""
    print("\n" + "=" * 60)
    if title:
        print(f"  {title}")
        print("=" * 60)


def demo_level(session: GameSession):
    """Run a level's starter program and print the result."""
    level = session.level
    print_separator(str(level))

    result = session.run(level.starter_code)

    print(f"\n🧭 Start: {level.start} facing {session.heading.name}, goal: {level.goal}")
    print(f"\n📜 Log:")
    for line in result.log:
        print(f"   {line}")

    print(f"\n{session.render()}")

    status = "✅ SUCCESS" if result.success else "❌ FAILED"
    print(f"\n{status}: {result.outcome.terminal_message}")
    print(f"   {result.steps} steps (optimal {level.optimal}) - {result.rating.value}")

    review = session.review()
    print(f"\n🤖 Review: {review}")
    for item in review.feedback:
        print(f"   + {item}")
    for item in review.suggestions:
        print(f"   • {item}")


def demo_parsing():
    """Show how unrecognized lines are reported but ignored."""
    print_separator("PARSING DEMO")

    program = "\n".join([
        "# comments are ignored",
        "forward(3)",
        "jump()",
        "forward( 2 )",
        "left()",
        "forward(-1)",
    ])
    result = parse_program(program)
    print(f"\nInstructions: {[i.name for i in result.instructions]}")
    print(f"Ignored: {[str(s) for s in result.skipped]}")


def main():
    """Run all demos."""
    config = get_default_config()
    configure_logging(config)

    demo_parsing()

    catalog = LevelCatalog(config.levels.levels_path)
    for level in catalog:
        demo_level(GameSession(level, config=config))

    print_separator("DEMO COMPLETE")


if __name__ == "__main__":
    main()
