"""
Provider fetcher registry, keyed by IntegrationProvider.
"""
from typing import Dict

from app.features.enrichment.fetchers.base import IntegrationFetcher
from app.features.enrichment.fetchers.clarity import ClarityFetcher
from app.features.enrichment.fetchers.ga4 import AnalyticsFetcher
from app.features.enrichment.fetchers.gsc import SearchConsoleFetcher
from app.features.enrichment.fetchers.psi import PageSpeedFetcher
from app.features.enrichment.models.integration import IntegrationProvider


def default_fetchers() -> Dict[IntegrationProvider, IntegrationFetcher]:
    return {
        IntegrationProvider.gsc: SearchConsoleFetcher(),
        IntegrationProvider.psi: PageSpeedFetcher(),
        IntegrationProvider.ga4: AnalyticsFetcher(),
        IntegrationProvider.clarity: ClarityFetcher(),
    }


__all__ = [
    "IntegrationFetcher",
    "SearchConsoleFetcher",
    "PageSpeedFetcher",
    "AnalyticsFetcher",
    "ClarityFetcher",
    "default_fetchers",
]
