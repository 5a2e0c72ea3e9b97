from pydantic import BaseModel


class ContentScoringSummary(BaseModel):
    """Outcome of one content-quality pass over a set of pages."""
    eligible: int = 0
    scored: int = 0
    cache_hits: int = 0
    skipped: int = 0
    failed: int = 0
