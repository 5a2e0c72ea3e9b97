from typing import Dict, List
from urllib.parse import urlparse

from app.features.enrichment.fetchers.base import IntegrationFetcher, bearer
from app.features.enrichment.models.integration import IntegrationProvider
from app.features.enrichment.schemas.enrichment import EnrichmentRecord, FetcherContext
from app.platform.exceptions import IntegrationAuthError, ProviderRequestError

GA4_DATA_API = "https://analyticsdata.googleapis.com/v1beta"

METRICS = ["bounceRate", "averageSessionDuration", "sessions", "engagedSessions", "userEngagementDuration"]


def _number(value, cast=float):
    try:
        return cast(float(value))
    except (TypeError, ValueError):
        return 0


class AnalyticsFetcher(IntegrationFetcher):
    """Engagement metrics per page path from a Google Analytics 4 property."""

    provider = IntegrationProvider.ga4

    async def fetch(self, ctx: FetcherContext) -> List[EnrichmentRecord]:
        access_token = ctx.credentials.get("access_token")
        if not access_token:
            raise IntegrationAuthError("Google Analytics access token is missing")
        property_id = ctx.config.get("property_id")
        if not property_id:
            raise ProviderRequestError(
                "GA4 property ID is required in integration config",
                data={"provider": self.provider.value},
            )

        response = await ctx.http.post(
            f"{GA4_DATA_API}/properties/{property_id}:runReport",
            headers=bearer(access_token),
            json={
                "dateRanges": [{"startDate": "28daysAgo", "endDate": "today"}],
                "dimensions": [{"name": "pagePath"}],
                "metrics": [{"name": name} for name in METRICS],
                "limit": 10000,
            },
        )
        self.check_response(response, "GA4 Data API")

        by_path: Dict[str, dict] = {}
        for row in response.json().get("rows") or []:
            dims = row.get("dimensionValues") or []
            values = [m.get("value") for m in row.get("metricValues") or []]
            if not dims or len(values) < len(METRICS):
                continue
            by_path[dims[0].get("value")] = {
                "bounce_rate": _number(values[0]),
                "avg_session_duration": _number(values[1]),
                "sessions": _number(values[2], int),
                "engaged_sessions": _number(values[3], int),
                "engagement_duration": _number(values[4]),
            }

        # GA4 reports paths, the crawler reports absolute URLs
        records = []
        for url in ctx.page_urls:
            path = urlparse(url).path or "/"
            metrics = by_path.get(path) or {}
            records.append(self.record(url, {
                "bounce_rate": metrics.get("bounce_rate"),
                "avg_session_duration": metrics.get("avg_session_duration"),
                "sessions": metrics.get("sessions", 0),
                "engaged_sessions": metrics.get("engaged_sessions", 0),
                "engagement_duration": metrics.get("engagement_duration", 0),
            }))
        return records
