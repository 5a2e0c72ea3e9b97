from sqlalchemy import Column, String
from sqlalchemy.orm import relationship

from app.platform.db.base import BaseModel


class Project(BaseModel):
    """A crawled site. Owns its crawl jobs and analytics integrations."""
    __tablename__ = "projects"

    name = Column(String(255), nullable=False)
    domain = Column(String(255), nullable=False, index=True)

    crawl_jobs = relationship("CrawlJob", back_populates="project", cascade="all, delete-orphan", lazy="select")
    integrations = relationship(
        "ProjectIntegration", back_populates="project", cascade="all, delete-orphan", lazy="select"
    )

    def __repr__(self):
        return f"<Project(id={self.id}, domain={self.domain})>"
