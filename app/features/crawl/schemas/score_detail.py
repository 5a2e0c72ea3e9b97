from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from app.features.scoring.schemas import (
    ExtractedSignals,
    LighthouseScores,
    LLMContentScores,
    RedirectHop,
)


class ScoreDetail(BaseModel):
    """
    Structured contents of PageScore.detail.

    Rule-derived fields are rewritten on every (re)score. Model-derived
    fields are owned by the content-quality scorer and survive rescoring.
    """
    # Rule-derived
    performance_score: Optional[int] = None
    letter_grade: Optional[str] = None
    extracted: ExtractedSignals = Field(default_factory=ExtractedSignals)
    lighthouse: Optional[LighthouseScores] = None
    redirect_chain: List[RedirectHop] = Field(default_factory=list)
    page_size_bytes: Optional[int] = None

    # Model-derived
    llm_content_scores: Optional[LLMContentScores] = None
    llm_scored_at: Optional[datetime] = None

    @classmethod
    def load(cls, raw: Optional[dict]) -> "ScoreDetail":
        return cls.model_validate(raw or {})

    def dump(self) -> dict:
        return self.model_dump(mode="json")
