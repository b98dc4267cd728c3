"""
Review Module - Scoring and feedback for finished runs

Compares a run's step count with the level's optimal count and
produces learner-facing feedback.
"""

from .scoring import EfficiencyRating, efficiency_score, rate_efficiency
from .reviewer import (
    BaseCodeReviewer,
    CodeReview,
    HeuristicCodeReviewer,
    LLMCodeReviewer,
    create_reviewer,
)

__all__ = [
    "EfficiencyRating",
    "efficiency_score",
    "rate_efficiency",
    "BaseCodeReviewer",
    "CodeReview",
    "HeuristicCodeReviewer",
    "LLMCodeReviewer",
    "create_reviewer",
]
