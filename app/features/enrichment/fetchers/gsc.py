import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from app.features.enrichment.fetchers.base import IntegrationFetcher, bearer
from app.features.enrichment.models.integration import IntegrationProvider
from app.features.enrichment.schemas.enrichment import EnrichmentRecord, FetcherContext
from app.platform.exceptions import IntegrationAuthError
from app.platform.utils.concurrency import map_bounded

logger = logging.getLogger(__name__)

GSC_API = "https://www.googleapis.com/webmasters/v3"
LOOKBACK_DAYS = 28
ROW_LIMIT = 5000
TOP_QUERIES = 20
INSPECT_CONCURRENCY = 5


class SearchConsoleFetcher(IntegrationFetcher):
    """Search queries, clicks and index coverage from Google Search Console."""

    provider = IntegrationProvider.gsc

    async def fetch(self, ctx: FetcherContext) -> List[EnrichmentRecord]:
        access_token = ctx.credentials.get("access_token")
        if not access_token:
            raise IntegrationAuthError("Search Console access token is missing")

        site_url = f"sc-domain:{ctx.domain}"
        encoded_site = quote(site_url, safe="")
        end = datetime.now(timezone.utc).date()
        start = end - timedelta(days=LOOKBACK_DAYS)

        response = await ctx.http.post(
            f"{GSC_API}/sites/{encoded_site}/searchAnalytics/query",
            headers=bearer(access_token),
            json={
                "startDate": start.isoformat(),
                "endDate": end.isoformat(),
                "dimensions": ["page", "query"],
                "rowLimit": ROW_LIMIT,
            },
        )
        self.check_response(response, "GSC Search Analytics API")

        by_page: Dict[str, Dict[str, Any]] = {}
        for row in response.json().get("rows") or []:
            keys = row.get("keys") or []
            if len(keys) < 2:
                continue
            entry = by_page.setdefault(keys[0], {"queries": [], "total_clicks": 0, "total_impressions": 0})
            entry["queries"].append({
                "query": keys[1],
                "clicks": row.get("clicks", 0),
                "impressions": row.get("impressions", 0),
                "position": row.get("position"),
            })
            entry["total_clicks"] += row.get("clicks", 0)
            entry["total_impressions"] += row.get("impressions", 0)

        async def inspect(url: str) -> Optional[str]:
            try:
                res = await ctx.http.post(
                    f"{GSC_API}/urlInspection/index:inspect",
                    headers=bearer(access_token),
                    json={"inspectionUrl": url, "siteUrl": site_url},
                )
            except Exception as e:
                logger.debug(f"URL inspection unavailable for {url}: {e}")
                return None
            if res.status_code >= 400:
                return None
            result = res.json().get("inspectionResult") or {}
            return (result.get("indexStatusResult") or {}).get("coverageState")

        # Inspection is best-effort; not every URL can be inspected
        statuses = await map_bounded(ctx.page_urls, inspect, concurrency=INSPECT_CONCURRENCY, settle=True)

        records = []
        for url, indexed_status in zip(ctx.page_urls, statuses):
            analytics = by_page.get(url) or {}
            records.append(self.record(url, {
                "queries": (analytics.get("queries") or [])[:TOP_QUERIES],
                "total_clicks": analytics.get("total_clicks", 0),
                "total_impressions": analytics.get("total_impressions", 0),
                "indexed_status": indexed_status,
            }))
        return records
