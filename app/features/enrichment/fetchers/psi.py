import logging
from typing import Any, Dict, List, Optional

from app.features.enrichment.fetchers.base import IntegrationFetcher
from app.features.enrichment.models.integration import IntegrationProvider
from app.features.enrichment.schemas.enrichment import EnrichmentRecord, FetcherContext
from app.platform.config import settings
from app.platform.exceptions import IntegrationAuthError
from app.platform.utils.concurrency import map_bounded

logger = logging.getLogger(__name__)

PSI_API = "https://www.googleapis.com/pagespeedonline/v5/runPagespeed"


def _field_metric(metrics: Dict[str, Any], *names: str) -> Dict[str, Any]:
    for name in names:
        metric = metrics.get(name)
        if metric:
            return {"value": metric.get("percentile"), "category": metric.get("category")}
    return {"value": None, "category": None}


class PageSpeedFetcher(IntegrationFetcher):
    """Core Web Vitals field data and lab scores from PageSpeed Insights, one call per URL."""

    provider = IntegrationProvider.psi

    def __init__(self, concurrency: Optional[int] = None):
        self.concurrency = concurrency or settings.PSI_CONCURRENCY

    async def fetch(self, ctx: FetcherContext) -> List[EnrichmentRecord]:
        api_key = ctx.credentials.get("api_key")
        if not api_key:
            raise IntegrationAuthError("PageSpeed Insights API key is missing")
        strategy = ctx.config.get("strategy", "mobile")

        async def run(url: str) -> EnrichmentRecord:
            response = await ctx.http.get(
                PSI_API,
                params={"url": url, "key": api_key, "category": "performance", "strategy": strategy},
            )
            self.check_response(response, f"PSI API for {url}")
            data = response.json()

            experience = data.get("loadingExperience") or {}
            crux = experience.get("metrics") or {}
            lighthouse = data.get("lighthouseResult") or {}
            audits = lighthouse.get("audits") or {}
            performance = (lighthouse.get("categories") or {}).get("performance") or {}

            return self.record(url, {
                "crux_overall": experience.get("overall_category"),
                "lcp": _field_metric(crux, "LARGEST_CONTENTFUL_PAINT_MS"),
                "fid": _field_metric(crux, "FIRST_INPUT_DELAY_MS", "INTERACTION_TO_NEXT_PAINT"),
                "cls": _field_metric(crux, "CUMULATIVE_LAYOUT_SHIFT_SCORE"),
                "fcp": _field_metric(crux, "FIRST_CONTENTFUL_PAINT_MS"),
                "ttfb": _field_metric(crux, "EXPERIMENTAL_TIME_TO_FIRST_BYTE"),
                "lab_performance_score": performance.get("score"),
                "lab_speed_index": (audits.get("speed-index") or {}).get("numericValue"),
                "lab_tbt": (audits.get("total-blocking-time") or {}).get("numericValue"),
            })

        # A URL PSI cannot analyse is dropped, the rest still count
        results = await map_bounded(ctx.page_urls, run, concurrency=self.concurrency, settle=True)
        return [record for record in results if record is not None]
