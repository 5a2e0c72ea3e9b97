from typing import Any, Dict, List

import httpx
from pydantic import BaseModel, ConfigDict, Field

from app.features.enrichment.models.integration import IntegrationProvider


class FetcherContext(BaseModel):
    """Everything a provider fetcher needs for one run."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    domain: str
    page_urls: List[str]
    credentials: Dict[str, str] = Field(default_factory=dict)
    config: Dict[str, Any] = Field(default_factory=dict)
    http: httpx.AsyncClient


class EnrichmentRecord(BaseModel):
    """Provider metrics for one crawled URL."""
    provider: IntegrationProvider
    page_url: str
    data: Dict[str, Any]


class EnrichmentSummary(BaseModel):
    integrations: int = 0
    succeeded: int = 0
    failed: int = 0
    rows: int = 0
