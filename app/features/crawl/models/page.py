from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship

from app.platform.db.base import BaseModel


class Page(BaseModel):
    """
    A single crawled URL within a job.

    Raw HTML and the Lighthouse report live in the object store; only their
    keys are kept here.
    """
    __tablename__ = "pages"

    job_id = Column(String, ForeignKey("crawl_jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    project_id = Column(String, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)

    url = Column(String(2048), nullable=False)
    canonical_url = Column(String(2048), nullable=True)
    status_code = Column(Integer, nullable=False)
    title = Column(Text, nullable=True)
    meta_description = Column(Text, nullable=True)
    word_count = Column(Integer, default=0, nullable=False)
    content_hash = Column(String(128), nullable=True, index=True)

    raw_html_key = Column(String(1024), nullable=True)
    performance_audit_key = Column(String(1024), nullable=True)

    # batch_index then position gives the order the crawler delivered pages in
    batch_index = Column(Integer, default=0, nullable=False)
    position = Column(Integer, default=0, nullable=False)
    crawled_at = Column(DateTime(timezone=True), nullable=True)

    job = relationship("CrawlJob", back_populates="pages", lazy="select")
    score = relationship("PageScore", back_populates="page", uselist=False, cascade="all, delete-orphan", lazy="select")
    issues = relationship("Issue", back_populates="page", cascade="all, delete-orphan", lazy="select")

    __table_args__ = (
        Index("uq_pages_job_url", "job_id", "url", unique=True),
        Index("idx_pages_job_order", "job_id", "batch_index", "position"),
    )

    def __repr__(self):
        return f"<Page(id={self.id}, url={self.url})>"
