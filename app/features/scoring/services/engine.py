"""
Scoring Engine

Runs the four dimension evaluators over one page and combines them into an
overall score and letter grade. Pure and synchronous: no I/O, no clock.
"""
from typing import List, Optional

from pydantic import BaseModel, model_validator

from app.features.scoring.schemas.page_data import PageData
from app.features.scoring.schemas.result import SEVERITY_ORDER, IssueDraft, ScoringResult
from app.features.scoring.services.dimensions.ai_readiness import score_ai_readiness
from app.features.scoring.services.dimensions.content import score_content
from app.features.scoring.services.dimensions.performance import score_performance
from app.features.scoring.services.dimensions.technical import score_technical
from app.platform.config import settings


class ScoreWeights(BaseModel):
    """Relative weight of each dimension in the overall score."""
    technical: float = 0.25
    content: float = 0.30
    ai_readiness: float = 0.30
    performance: float = 0.15

    @model_validator(mode="after")
    def _check_weights(self):
        values = (self.technical, self.content, self.ai_readiness, self.performance)
        if any(v < 0 for v in values):
            raise ValueError("Score weights must not be negative")
        if sum(values) <= 0:
            raise ValueError("At least one score weight must be positive")
        return self

    @classmethod
    def from_settings(cls) -> "ScoreWeights":
        return cls(
            technical=settings.SCORE_WEIGHT_TECHNICAL,
            content=settings.SCORE_WEIGHT_CONTENT,
            ai_readiness=settings.SCORE_WEIGHT_AI_READINESS,
            performance=settings.SCORE_WEIGHT_PERFORMANCE,
        )


def letter_grade(score: int) -> str:
    if score >= 90:
        return "A"
    if score >= 80:
        return "B"
    if score >= 70:
        return "C"
    if score >= 60:
        return "D"
    return "F"


def overall_score(
    technical: int,
    content: int,
    ai_readiness: int,
    performance: int,
    weights: ScoreWeights,
) -> int:
    total = weights.technical + weights.content + weights.ai_readiness + weights.performance
    weighted = (
        technical * weights.technical
        + content * weights.content
        + ai_readiness * weights.ai_readiness
        + performance * weights.performance
    ) / total
    return max(0, min(100, int(weighted + 0.5)))


def sort_issues(issues: List[IssueDraft]) -> List[IssueDraft]:
    # sorted() is stable, so rule order survives within a severity
    return sorted(issues, key=lambda issue: SEVERITY_ORDER[issue.severity])


def score_page(page: PageData, weights: Optional[ScoreWeights] = None) -> ScoringResult:
    """
    Score one page across all dimensions.

    Args:
        page: Signals for the page, including the shared site context
        weights: Dimension weights, defaults to the configured weights

    Returns:
        ScoringResult with per-dimension scores, overall score, grade and
        issues ordered critical, warning, info
    """
    weights = weights or ScoreWeights.from_settings()

    technical = score_technical(page)
    content = score_content(page)
    ai_readiness = score_ai_readiness(page)
    performance = score_performance(page)

    overall = overall_score(
        technical.score, content.score, ai_readiness.score, performance.score, weights
    )

    return ScoringResult(
        overall_score=overall,
        technical_score=technical.score,
        content_score=content.score,
        ai_readiness_score=ai_readiness.score,
        performance_score=performance.score,
        letter_grade=letter_grade(overall),
        issues=sort_issues(
            technical.issues + content.issues + ai_readiness.issues + performance.issues
        ),
    )
