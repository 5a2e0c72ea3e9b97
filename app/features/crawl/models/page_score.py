from sqlalchemy import JSON, Column, Float, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from app.platform.db.base import BaseModel


class PageScore(BaseModel):
    """
    Rule-based scores for one page.

    `detail` holds a serialised ScoreDetail: the signals the rules were run
    on plus any model-derived content scores merged in later.
    """
    __tablename__ = "page_scores"

    page_id = Column(String, ForeignKey("pages.id", ondelete="CASCADE"), nullable=False, unique=True, index=True)
    job_id = Column(String, ForeignKey("crawl_jobs.id", ondelete="CASCADE"), nullable=False, index=True)

    overall_score = Column(Integer, nullable=False)  # 0-100
    technical_score = Column(Integer, nullable=False)
    content_score = Column(Integer, nullable=False)
    ai_readiness_score = Column(Integer, nullable=False)
    performance_score = Column(Integer, nullable=False)
    letter_grade = Column(String(1), nullable=False)

    lighthouse_perf = Column(Float, nullable=True)  # 0.0-1.0
    lighthouse_seo = Column(Float, nullable=True)

    detail = Column(JSON, nullable=True)

    page = relationship("Page", back_populates="score", lazy="select")

    def __repr__(self):
        return f"<PageScore(page_id={self.page_id}, overall={self.overall_score})>"
