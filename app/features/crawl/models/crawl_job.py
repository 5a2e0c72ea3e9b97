import enum

from sqlalchemy import JSON, Column, DateTime, Enum, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship

from app.platform.db.base import BaseModel


class CrawlJobStatus(enum.Enum):
    """Crawl job status state machine"""
    pending = "pending"
    crawling = "crawling"
    scoring = "scoring"
    complete = "complete"
    failed = "failed"
    cancelled = "cancelled"


class CrawlJob(BaseModel):
    """
    One crawl of a project, fed by the crawler in ordered batches.

    `version` is bumped on every row update; writers compare-and-set on it so
    two batches racing on the same job cannot both win.
    """
    __tablename__ = "crawl_jobs"

    project_id = Column(String, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)

    status = Column(Enum(CrawlJobStatus), default=CrawlJobStatus.pending, nullable=False, index=True)

    # Progress counters
    pages_found = Column(Integer, default=0, nullable=False)
    pages_crawled = Column(Integer, default=0, nullable=False)
    pages_scored = Column(Integer, default=0, nullable=False)

    started_at = Column(DateTime(timezone=True), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    error_message = Column(Text, nullable=True)

    # Latest site-level context delivered with a batch (llms.txt, sitemap, robots)
    site_context = Column(JSON, nullable=True)

    last_batch_index = Column(Integer, default=-1, nullable=False)
    version = Column(Integer, default=0, nullable=False)

    project = relationship("Project", back_populates="crawl_jobs", lazy="select")
    pages = relationship("Page", back_populates="job", cascade="all, delete-orphan", lazy="select")

    __table_args__ = (
        Index("idx_crawl_jobs_project_status", "project_id", "status"),
    )

    def __repr__(self):
        return f"<CrawlJob(id={self.id}, status={self.status.value if self.status else None})>"
