from app.features.scoring.schemas.page_data import (
    ExtractedSignals,
    LighthouseScores,
    LLMContentScores,
    PageData,
    RedirectHop,
    SiteContext,
    SitemapAnalysis,
)
from app.features.scoring.schemas.result import (
    DimensionResult,
    IssueCategory,
    IssueDraft,
    IssueSeverity,
    ScoringResult,
)

__all__ = [
    "ExtractedSignals",
    "LighthouseScores",
    "LLMContentScores",
    "PageData",
    "RedirectHop",
    "SiteContext",
    "SitemapAnalysis",
    "DimensionResult",
    "IssueCategory",
    "IssueDraft",
    "IssueSeverity",
    "ScoringResult",
]
