from sqlalchemy import JSON, Column, Enum, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from app.features.scoring.schemas.result import IssueCategory, IssueSeverity
from app.platform.db.base import BaseModel


class Issue(BaseModel):
    """
    A rule violation found on a page.

    Each row is one triggered check (e.g. "Title tag is missing").
    """
    __tablename__ = "issues"

    page_id = Column(String, ForeignKey("pages.id", ondelete="CASCADE"), nullable=False, index=True)
    job_id = Column(String, ForeignKey("crawl_jobs.id", ondelete="CASCADE"), nullable=False, index=True)

    category = Column(Enum(IssueCategory), nullable=False, index=True)
    severity = Column(Enum(IssueSeverity), nullable=False, index=True)
    code = Column(String(64), nullable=False, index=True)

    message = Column(Text, nullable=False)
    recommendation = Column(Text, nullable=True)
    data = Column(JSON, nullable=True)

    page = relationship("Page", back_populates="issues", lazy="select")

    def __repr__(self):
        return f"<Issue(code={self.code}, severity={self.severity.value if self.severity else None})>"
