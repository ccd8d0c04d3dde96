"""Structural INVEST scoring for stories.

This is a quick sanity check computed from the shape of a story (counts of
criteria, dependencies, open questions). The assistant's own review in chat
is the qualitative counterpart.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from onep.storage.models import Story

PASSING_SCORE = 7
MAX_SMALL_CRITERIA = 7
MIN_ESTIMABLE_CRITERIA = 3

SUGGESTIONS: dict[str, str] = {
    "independent": "Consider reducing dependencies on other stories",
    "negotiable": "Add open questions to leave room for negotiation",
    "valuable": 'Clarify the business value with a stronger "so that" clause',
    "estimable": "Add more specific acceptance criteria",
    "small": "Consider breaking this story into smaller pieces",
    "testable": "Add measurable acceptance criteria",
}


@dataclass(frozen=True)
class DimensionScore:
    score: int
    feedback: str


@dataclass
class InvestAnalysis:
    independent: DimensionScore
    negotiable: DimensionScore
    valuable: DimensionScore
    estimable: DimensionScore
    small: DimensionScore
    testable: DimensionScore
    overall_score: int = 0
    suggestions: list[str] = field(default_factory=list)

    @property
    def dimensions(self) -> dict[str, DimensionScore]:
        return {name: getattr(self, name) for name in SUGGESTIONS}

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["overallScore"] = data.pop("overall_score")
        return data


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def analyze_invest(story: Story) -> InvestAnalysis:
    """Score a story on the six INVEST dimensions. Pure and deterministic."""
    deps = len(story.dependencies)
    criteria = len(story.acceptance_criteria)
    has_questions = bool(story.open_questions)

    analysis = InvestAnalysis(
        independent=DimensionScore(
            10 if deps == 0 else 5,
            "Story has no dependencies" if deps == 0 else f"Story has {deps} dependencies",
        ),
        negotiable=DimensionScore(
            8 if has_questions else 6,
            "Open questions indicate room for negotiation"
            if has_questions
            else "Consider adding open questions for flexibility",
        ),
        valuable=DimensionScore(
            8 if story.so_that else 4,
            "Value proposition is defined" if story.so_that else 'Missing "so that" clause',
        ),
        estimable=DimensionScore(
            8 if criteria >= MIN_ESTIMABLE_CRITERIA else 5,
            "Sufficient acceptance criteria for estimation"
            if criteria >= MIN_ESTIMABLE_CRITERIA
            else "Add more acceptance criteria for better estimation",
        ),
        small=DimensionScore(
            8 if criteria <= MAX_SMALL_CRITERIA else 4,
            "Story appears to be appropriately sized"
            if criteria <= MAX_SMALL_CRITERIA
            else "Consider splitting - too many acceptance criteria",
        ),
        testable=DimensionScore(
            8 if criteria > 0 else 2,
            "Acceptance criteria provide testability"
            if criteria > 0
            else "Add acceptance criteria for testability",
        ),
    )

    scores = [d.score for d in analysis.dimensions.values()]
    analysis.overall_score = _round_half_up(sum(scores) / len(scores))
    analysis.suggestions = [
        SUGGESTIONS[name]
        for name, dim in analysis.dimensions.items()
        if dim.score < PASSING_SCORE
    ]
    return analysis
