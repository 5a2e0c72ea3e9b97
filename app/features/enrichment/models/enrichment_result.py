from sqlalchemy import JSON, Column, Enum, ForeignKey, String

from app.features.enrichment.models.integration import IntegrationProvider
from app.platform.db.base import BaseModel


class EnrichmentResult(BaseModel):
    """
    Provider metrics for one page from one enrichment run.

    Not unique per (page, provider): every run appends new rows.
    """
    __tablename__ = "enrichment_results"

    page_id = Column(String, ForeignKey("pages.id", ondelete="CASCADE"), nullable=False, index=True)
    job_id = Column(String, ForeignKey("crawl_jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    provider = Column(Enum(IntegrationProvider), nullable=False, index=True)
    data = Column(JSON, nullable=False)

    def __repr__(self):
        return f"<EnrichmentResult(page_id={self.page_id}, provider={self.provider.value})>"
