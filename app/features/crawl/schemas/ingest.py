"""
Ingest Schemas

Request and response models for the crawler-facing ingestion endpoints.
"""
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from app.features.scoring.schemas import (
    ExtractedSignals,
    LighthouseScores,
    RedirectHop,
    SiteContext,
)


class CrawlPageResult(BaseModel):
    """One crawled page as delivered by the crawler."""
    url: str = Field(min_length=1, max_length=2048)
    status_code: int = Field(ge=100, le=599)
    title: Optional[str] = None
    meta_description: Optional[str] = None
    canonical_url: Optional[str] = None
    word_count: int = Field(default=0, ge=0)
    content_hash: Optional[str] = None
    html_key: Optional[str] = None  # Object-store key of the raw HTML
    extracted: ExtractedSignals = Field(default_factory=ExtractedSignals)
    lighthouse: Optional[LighthouseScores] = None
    redirect_chain: List[RedirectHop] = Field(default_factory=list)
    page_size_bytes: Optional[int] = Field(default=None, ge=0)


class CrawlStats(BaseModel):
    pages_found: int = Field(ge=0)
    pages_crawled: int = Field(ge=0)


class CrawlResultBatch(BaseModel):
    """Request body for POST /ingest/batch."""
    job_id: str = Field(min_length=1)
    batch_index: int = Field(ge=0)
    is_final: bool = False
    pages: List[CrawlPageResult]
    stats: CrawlStats
    site_context: Optional[SiteContext] = None

    @model_validator(mode="after")
    def _unique_urls(self):
        urls = [page.url for page in self.pages]
        if len(urls) != len(set(urls)):
            raise ValueError("Batch contains duplicate page URLs")
        return self

    class Config:
        json_schema_extra = {
            "example": {
                "job_id": "0190f1c2-7d1e-7b3a-9c55-2f0e4b8d1a11",
                "batch_index": 0,
                "is_final": False,
                "pages": [
                    {
                        "url": "https://example.com/",
                        "status_code": 200,
                        "title": "Example Domain - Home of the Example Company",
                        "word_count": 640,
                        "content_hash": "9f2c...",
                        "html_key": "crawls/0190f1c2/home.html",
                    }
                ],
                "stats": {"pages_found": 25, "pages_crawled": 1},
            }
        }


class BatchIngestResult(BaseModel):
    """Response data for an accepted batch."""
    job_id: str
    batch_index: int
    pages_processed: int
    is_final: bool
    status: str
    page_ids: List[str] = Field(default_factory=list)


class RescoreRequest(BaseModel):
    """Request body for the rescore endpoints."""
    job_id: str = Field(min_length=1)


class RescoreResult(BaseModel):
    job_id: str
    pages_rescored: int
    issues_created: int
