"""
Efficiency Scoring

Compares the steps a run took against a level's optimal step count.
"""

from enum import Enum
from typing import Optional

# A successful run within this factor of the optimal count rates GOOD
GOOD_RATIO = 1.2


class EfficiencyRating(Enum):
    """Qualitative efficiency of a run."""
    READY = "Ready"          # No run yet
    OPTIMAL = "Optimal"
    GOOD = "Good"
    POOR = "Poor"
    FAILED = "Failed"


def rate_efficiency(success: Optional[bool], steps: int, optimal: int) -> EfficiencyRating:
    """
    Rate a run against the optimal step count.

    Args:
        success: Whether the run reached the goal (None if nothing ran yet)
        steps: Steps the run took
        optimal: Level's optimal step count

    Returns:
        EfficiencyRating
    """
    if success is None:
        return EfficiencyRating.READY
    if not success:
        return EfficiencyRating.FAILED
    if steps <= optimal:
        return EfficiencyRating.OPTIMAL
    if steps <= optimal * GOOD_RATIO:
        return EfficiencyRating.GOOD
    return EfficiencyRating.POOR


def efficiency_score(steps: int, optimal: int) -> int:
    """
    Percentage score: 100 at or under the optimal count, proportionally
    lower above it.
    """
    if steps <= optimal or steps <= 0:
        return 100
    # Round half up
    return int(optimal * 100 / steps + 0.5)
