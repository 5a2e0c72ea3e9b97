import enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class IssueCategory(str, enum.Enum):
    """Scoring dimension an issue belongs to"""
    technical = "technical"
    content = "content"
    ai_readiness = "ai_readiness"
    performance = "performance"


class IssueSeverity(str, enum.Enum):
    """Issue severity levels"""
    critical = "critical"
    warning = "warning"
    info = "info"


SEVERITY_ORDER = {
    IssueSeverity.critical: 0,
    IssueSeverity.warning: 1,
    IssueSeverity.info: 2,
}


class IssueDraft(BaseModel):
    """A rule violation produced by the engine, not yet tied to a stored page."""
    code: str
    category: IssueCategory
    severity: IssueSeverity
    message: str
    recommendation: str
    data: Optional[Dict[str, Any]] = None


class DimensionResult(BaseModel):
    score: int = Field(ge=0, le=100)
    issues: List[IssueDraft] = Field(default_factory=list)


class ScoringResult(BaseModel):
    overall_score: int = Field(ge=0, le=100)
    technical_score: int = Field(ge=0, le=100)
    content_score: int = Field(ge=0, le=100)
    ai_readiness_score: int = Field(ge=0, le=100)
    performance_score: int = Field(ge=0, le=100)
    letter_grade: str
    issues: List[IssueDraft] = Field(default_factory=list)
