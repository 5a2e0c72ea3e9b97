"""
Enrichment models package.
"""
from app.features.enrichment.models.integration import (
    OAUTH_PROVIDERS,
    IntegrationProvider,
    ProjectIntegration,
)
from app.features.enrichment.models.enrichment_result import EnrichmentResult

__all__ = ["OAUTH_PROVIDERS", "IntegrationProvider", "ProjectIntegration", "EnrichmentResult"]
