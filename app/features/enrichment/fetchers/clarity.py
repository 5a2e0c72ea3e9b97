from typing import Dict, List, Optional
from urllib.parse import urlsplit

from app.features.enrichment.fetchers.base import IntegrationFetcher, bearer
from app.features.enrichment.models.integration import IntegrationProvider
from app.features.enrichment.schemas.enrichment import EnrichmentRecord, FetcherContext
from app.platform.exceptions import IntegrationAuthError

CLARITY_API = "https://www.clarity.ms/export-data/api/v1/project-live-insights"

# metricName -> (our field, row keys to try, cast)
METRIC_FIELDS = {
    "Traffic": ("sessions", ("totalSessionCount",), int),
    "Dead Click Count": ("dead_clicks", ("Dead Click Count", "deadClickCount"), int),
    "Rage Click Count": ("rage_clicks", ("Rage Click Count", "rageClickCount"), int),
    "Scroll Depth": ("scroll_depth", ("Scroll Depth", "scrollDepth"), float),
    "Engagement Time": ("engagement_time", ("Engagement Time", "engagementTime"), float),
}


def _number(raw, cast, default):
    if raw is None:
        return default
    try:
        return cast(float(raw)) if cast is int else cast(raw)
    except (TypeError, ValueError):
        return default


def _empty() -> dict:
    return {"sessions": 0, "dead_clicks": 0, "rage_clicks": 0, "scroll_depth": 0.0, "engagement_time": 0.0}


class ClarityFetcher(IntegrationFetcher):
    """
    Behavioural metrics from the Microsoft Clarity data export API.

    The API token identifies the Clarity project. The export covers at most
    the last three days and is rate limited per project per day.
    """

    provider = IntegrationProvider.clarity

    async def fetch(self, ctx: FetcherContext) -> List[EnrichmentRecord]:
        api_token = ctx.credentials.get("api_key") or ctx.credentials.get("api_token")
        if not api_token:
            raise IntegrationAuthError("Clarity API token is missing")

        response = await ctx.http.get(
            CLARITY_API,
            params={"numOfDays": str(ctx.config.get("num_of_days", 3)), "dimension1": "URL"},
            headers=bearer(api_token),
        )
        self.check_response(response, "Clarity API")

        by_url: Dict[str, dict] = {}
        for metric in response.json() or []:
            spec = METRIC_FIELDS.get(metric.get("metricName"))
            for row in metric.get("information") or []:
                url = row.get("URL") or row.get("url")
                if not url:
                    continue
                entry = by_url.setdefault(url, _empty())
                if spec is None:
                    continue
                field, keys, cast = spec
                raw = next((row[k] for k in keys if row.get(k)), None)
                entry[field] = _number(raw, cast, entry[field])

        records = []
        for page_url in ctx.page_urls:
            metrics = _match(by_url, page_url)
            records.append(self.record(page_url, {
                "dead_clicks": metrics["dead_clicks"] if metrics else None,
                "rage_clicks": metrics["rage_clicks"] if metrics else None,
                "scroll_depth": metrics["scroll_depth"] if metrics else None,
                "total_sessions": metrics["sessions"] if metrics else 0,
                "engagement_time": metrics["engagement_time"] if metrics else 0,
            }))
        return records


def _normalize(url: str) -> str:
    parts = urlsplit(url)
    path = parts.path.rstrip("/")
    return f"{parts.scheme}://{parts.netloc.lower()}{path}"


def _match(by_url: Dict[str, dict], page_url: str) -> Optional[dict]:
    """Exact URL, then ignoring query string and trailing slash, then substring either way."""
    if page_url in by_url:
        return by_url[page_url]
    normalized = _normalize(page_url)
    for clarity_url, metrics in by_url.items():
        if _normalize(clarity_url) == normalized:
            return metrics
    for clarity_url, metrics in by_url.items():
        if clarity_url in page_url or page_url in clarity_url:
            return metrics
    return None
