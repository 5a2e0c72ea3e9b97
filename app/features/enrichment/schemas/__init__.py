from app.features.enrichment.schemas.enrichment import (
    EnrichmentRecord,
    EnrichmentSummary,
    FetcherContext,
)

__all__ = ["EnrichmentRecord", "EnrichmentSummary", "FetcherContext"]
