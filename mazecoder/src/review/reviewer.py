"""
Code Reviewer - Feedback on a learner's program.

Two reviewers share one interface:
- HeuristicCodeReviewer: rule-based feedback from step efficiency and
  simple code statistics (works offline)
- LLMCodeReviewer: asks an OpenAI-compatible model for the same review
  structure, falling back to the heuristic review on any failure
"""

import json
import re
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from abc import ABC, abstractmethod

from .scoring import efficiency_score

logger = logging.getLogger(__name__)


# Ratio thresholds (steps / optimal) for feedback text
EXCELLENT_RATIO = 1.1
GOOD_FEEDBACK_RATIO = 1.3
GOOD_COMPLEXITY_RATIO = 1.5

CONCISE_LINE_COUNT = 5
VERBOSE_LINE_COUNT = 15

ALGORITHM_TIPS = {
    2: "Dijkstra Tip: Think about exploring all neighbors systematically.",
    3: "A* Tip: Use Manhattan distance heuristic to guide your path.",
    4: "MST Tip: Focus on connecting nodes with minimum total edge weight.",
}


@dataclass
class CodeReview:
    """
    Review of a learner's program.
    """
    score: int                          # 0-100
    feedback: List[str] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)
    complexity: str = ""
    source: str = "heuristic"           # Which reviewer produced it

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "feedback": list(self.feedback),
            "suggestions": list(self.suggestions),
            "complexity": self.complexity,
            "source": self.source,
        }

    def __str__(self) -> str:
        return f"Score: {self.score}% ({self.complexity})"


class BaseCodeReviewer(ABC):
    """Abstract base class for code reviewers."""

    @abstractmethod
    def review(self, code: str, level_id: int, steps: int, optimal: int) -> CodeReview:
        """
        Review a program.

        Args:
            code: Program text
            level_id: Level the program was written for
            steps: Steps the last run took
            optimal: Level's optimal step count

        Returns:
            CodeReview
        """
        pass


def count_code_lines(code: str) -> int:
    """Number of non-blank, non-comment lines."""
    return sum(1 for line in code.split("\n") if line.strip() and not line.strip().startswith("#"))


def complexity_label(steps: int, optimal: int) -> str:
    """Pseudo complexity class shown to the learner."""
    if steps <= optimal * EXCELLENT_RATIO:
        return "O(n) - Optimal"
    if steps <= optimal * GOOD_COMPLEXITY_RATIO:
        return "O(n log n) - Good"
    return "O(n²) - Needs Optimization"


class HeuristicCodeReviewer(BaseCodeReviewer):
    """
    Rule-based reviewer.

    Looks at how far the step count is from optimal, whether the program
    has comments, how many statements it uses, and adds a tip for the
    algorithm the level is themed on.
    """

    def review(self, code: str, level_id: int, steps: int, optimal: int) -> CodeReview:
        feedback: List[str] = []
        suggestions: List[str] = []

        # Efficiency analysis
        if steps == optimal:
            feedback.append("Perfect! You found the optimal path.")
        elif steps <= optimal * EXCELLENT_RATIO:
            feedback.append("Excellent! Very close to optimal solution.")
            suggestions.append("Try reducing unnecessary turns to reach optimal.")
        elif steps <= optimal * GOOD_FEEDBACK_RATIO:
            feedback.append("Good solution, but there's room for improvement.")
            suggestions.append("Analyze the maze structure to find shorter paths.")
            suggestions.append("Consider using diagonal thinking to reduce steps.")
        else:
            feedback.append("Solution works but is inefficient.")
            suggestions.append("Your path has significant redundancy.")
            suggestions.append("Try planning the entire route before coding.")

        # Code quality analysis
        if "#" in code:
            feedback.append("Good documentation with comments!")
        else:
            suggestions.append("Add comments to explain your algorithm strategy.")

        line_count = count_code_lines(code)
        if line_count < CONCISE_LINE_COUNT:
            feedback.append("Clean, concise code!")
        elif line_count > VERBOSE_LINE_COUNT:
            suggestions.append("Consider combining forward() calls to simplify code.")

        if level_id in ALGORITHM_TIPS:
            suggestions.append(ALGORITHM_TIPS[level_id])

        return CodeReview(
            score=efficiency_score(steps, optimal),
            feedback=feedback,
            suggestions=suggestions,
            complexity=complexity_label(steps, optimal),
            source="heuristic",
        )


class LLMCodeReviewer(BaseCodeReviewer):
    """
    LLM-based reviewer using an OpenAI-compatible API.

    The model is asked for the same fields the heuristic reviewer
    produces. The score is always recomputed from the step counts so the
    model cannot misreport efficiency.
    """

    SYSTEM_PROMPT = """You are a friendly programming tutor reviewing a beginner's maze robot program.

The robot language has three commands, one per line:
- forward(n): move forward n cells
- left(): turn left 90 degrees
- right(): turn right 90 degrees
Lines starting with # are comments.

You receive the program, the number of steps it took, and the optimal number of steps.
Give short, encouraging feedback and concrete suggestions. Do not write a full solution.

OUTPUT FORMAT (JSON):
{
    "feedback": ["<what went well>", ...],
    "suggestions": ["<how to improve>", ...],
    "complexity": "<one short label, e.g. O(n) - Optimal>"
}"""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        base_url: str = "https://api.openai.com/v1",
        temperature: float = 0.0,
        max_tokens: Optional[int] = None,
        timeout: float = 30.0,
        fallback: Optional[BaseCodeReviewer] = None,
    ):
        """
        Initialize the reviewer with an OpenAI-compatible API.

        Args:
            api_key: API key for authentication
            model: Model to use
            base_url: API endpoint URL (OpenAI, Ollama, vLLM, etc.)
            temperature: Sampling temperature (0 for deterministic)
            max_tokens: Maximum tokens in response (None for model default)
            timeout: Request timeout in seconds
            fallback: Reviewer used when the LLM call fails
        """
        from openai import OpenAI

        self.client = OpenAI(api_key=api_key, base_url=base_url, timeout=timeout)
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.fallback = fallback or HeuristicCodeReviewer()

    @classmethod
    def from_config(cls, config: "OpenAIConfig") -> "LLMCodeReviewer":
        """
        Create a reviewer from an OpenAIConfig object.

        Raises:
            ValueError: If the config has no API key
        """
        config.validate()
        return cls(
            api_key=config.api_key,
            model=config.model,
            base_url=config.base_url,
            temperature=config.temperature,
            max_tokens=config.max_tokens,
            timeout=config.timeout,
        )

    def _call_llm(self, code: str, level_id: int, steps: int, optimal: int) -> Dict:
        """Call the LLM and parse its JSON response."""
        request_kwargs = {
            "model": self.model,
            "temperature": self.temperature,
            "messages": [
                {"role": "system", "content": self.SYSTEM_PROMPT},
                {
                    "role": "user",
                    "content": (
                        f"Level {level_id}. Steps taken: {steps}. Optimal steps: {optimal}.\n"
                        f"Program:\n{code}"
                    ),
                },
            ],
            "response_format": {"type": "json_object"},
        }
        if self.max_tokens:
            request_kwargs["max_tokens"] = self.max_tokens

        response = self.client.chat.completions.create(**request_kwargs)
        if not response or not response.choices:
            raise ValueError("LLM returned no response choices")

        content = response.choices[0].message.content or ""

        # Handle markdown code blocks
        match = re.search(r"```(?:json)?\s*(.*?)\s*```", content, re.DOTALL)
        if match:
            content = match.group(1)

        content = content.strip()
        if not content:
            raise ValueError("LLM returned an empty review")
        return json.loads(content)

    def review(self, code: str, level_id: int, steps: int, optimal: int) -> CodeReview:
        try:
            data = self._call_llm(code, level_id, steps, optimal)
        except Exception as e:
            logger.error(f"LLM review failed: {e}")
            return self.fallback.review(code, level_id, steps, optimal)

        return CodeReview(
            score=efficiency_score(steps, optimal),
            feedback=[str(item) for item in data.get("feedback", [])],
            suggestions=[str(item) for item in data.get("suggestions", [])],
            complexity=data.get("complexity") or complexity_label(steps, optimal),
            source="llm",
        )


def create_reviewer(config: Optional["OpenAIConfig"] = None) -> BaseCodeReviewer:
    """
    Pick a reviewer: the LLM reviewer when an API key is configured,
    otherwise the heuristic one.
    """
    if config is not None and config.is_configured():
        logger.info(f"Using LLM code reviewer: {config.model} @ {config.base_url}")
        return LLMCodeReviewer.from_config(config)
    return HeuristicCodeReviewer()
