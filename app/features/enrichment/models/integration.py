import enum

from sqlalchemy import JSON, Boolean, Column, DateTime, Enum, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from app.platform.db.base import BaseModel


class IntegrationProvider(str, enum.Enum):
    """Analytics providers a project can connect"""
    gsc = "gsc"          # Google Search Console
    psi = "psi"          # PageSpeed Insights
    ga4 = "ga4"          # Google Analytics 4
    clarity = "clarity"  # Microsoft Clarity


OAUTH_PROVIDERS = frozenset({IntegrationProvider.gsc, IntegrationProvider.ga4})


class ProjectIntegration(BaseModel):
    """
    A project's connection to one analytics provider.

    Credentials are kept as a JWE token (see app.platform.utils.crypto); the
    plaintext is a flat dict such as {"access_token", "refresh_token"} for
    OAuth providers or {"api_key"} for key-based ones.
    """
    __tablename__ = "project_integrations"

    project_id = Column(String, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    provider = Column(Enum(IntegrationProvider), nullable=False)
    enabled = Column(Boolean, default=True, nullable=False)

    encrypted_credentials = Column(Text, nullable=True)
    config = Column(JSON, nullable=True)  # provider-specific, e.g. {"property_id": "123"} for GA4

    token_expires_at = Column(DateTime(timezone=True), nullable=True)
    last_synced_at = Column(DateTime(timezone=True), nullable=True)
    last_error = Column(Text, nullable=True)

    project = relationship("Project", back_populates="integrations", lazy="select")

    __table_args__ = (
        UniqueConstraint("project_id", "provider", name="uq_project_integration_provider"),
    )

    def __repr__(self):
        return f"<ProjectIntegration(project_id={self.project_id}, provider={self.provider.value})>"
