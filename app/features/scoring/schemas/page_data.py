"""
Scoring Schemas

Signals the scoring engine reads: per-page DOM extraction, the optional
Lighthouse audit, the site-wide context shared by every page of a crawl, and
model-derived content scores.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ExtractedSignals(BaseModel):
    """DOM signals extracted by the crawler for one page."""
    h1: List[str] = Field(default_factory=list)
    h2: List[str] = Field(default_factory=list)
    h3: List[str] = Field(default_factory=list)
    h4: List[str] = Field(default_factory=list)
    h5: List[str] = Field(default_factory=list)
    h6: List[str] = Field(default_factory=list)
    schema_types: List[str] = Field(default_factory=list)
    internal_links: List[str] = Field(default_factory=list)
    external_links: List[str] = Field(default_factory=list)
    images_without_alt: int = 0
    has_robots_meta: bool = False
    robots_directives: List[str] = Field(default_factory=list)
    og_tags: Optional[Dict[str, str]] = None
    structured_data: Optional[List[Dict[str, Any]]] = None
    pdf_links: List[str] = Field(default_factory=list)
    cors_unsafe_blank_links: int = 0
    cors_mixed_content: int = 0
    cors_has_issues: bool = False
    flesch_score: Optional[float] = None
    flesch_classification: Optional[str] = None
    text_html_ratio: Optional[float] = None
    sentence_length_variance: Optional[float] = None
    top_transition_words: List[str] = Field(default_factory=list)


class LighthouseScores(BaseModel):
    """Lighthouse category scores in the 0.0-1.0 range."""
    performance: float = Field(ge=0, le=1)
    seo: float = Field(ge=0, le=1)
    accessibility: float = Field(ge=0, le=1)
    best_practices: float = Field(ge=0, le=1)
    lh_r2_key: Optional[str] = None


class RedirectHop(BaseModel):
    url: str
    status_code: int


class SitemapAnalysis(BaseModel):
    is_valid: bool = True
    url_count: int = 0
    stale_url_count: int = 0
    discovered_page_count: int = 0


class SiteContext(BaseModel):
    """Site-level facts; every page sharing a context gets the same site checks."""
    has_llms_txt: bool = True
    ai_crawlers_blocked: List[str] = Field(default_factory=list)
    has_sitemap: bool = True
    sitemap_analysis: Optional[SitemapAnalysis] = None
    llms_txt_content: Optional[str] = None
    response_time_ms: Optional[int] = None
    # content hash -> first URL seen with it, built per batch by the coordinator
    content_hashes: Dict[str, str] = Field(default_factory=dict)


class LLMContentScores(BaseModel):
    """Model judgment of content quality, each axis 0-100."""
    clarity: int = Field(ge=0, le=100)
    authority: int = Field(ge=0, le=100)
    comprehensiveness: int = Field(ge=0, le=100)
    structure: int = Field(ge=0, le=100)
    citation_worthiness: int = Field(ge=0, le=100)


class PageData(BaseModel):
    """Everything the engine needs to score one page."""
    url: str
    status_code: int
    title: Optional[str] = None
    meta_description: Optional[str] = None
    canonical_url: Optional[str] = None
    word_count: int = 0
    content_hash: Optional[str] = None
    extracted: ExtractedSignals = Field(default_factory=ExtractedSignals)
    lighthouse: Optional[LighthouseScores] = None
    redirect_chain: List[RedirectHop] = Field(default_factory=list)
    page_size_bytes: Optional[int] = None
    llm_scores: Optional[LLMContentScores] = None
    site_context: Optional[SiteContext] = None
