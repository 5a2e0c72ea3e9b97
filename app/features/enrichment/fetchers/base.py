from typing import List

import httpx

from app.features.enrichment.models.integration import IntegrationProvider
from app.features.enrichment.schemas.enrichment import EnrichmentRecord, FetcherContext
from app.platform.exceptions import ProviderRequestError


class IntegrationFetcher:
    """
    Pulls per-URL metrics from one analytics provider.

    Subclasses set ``provider`` and implement ``fetch``. They return one
    record per crawled URL they could match and raise on provider errors.
    """

    provider: IntegrationProvider

    async def fetch(self, ctx: FetcherContext) -> List[EnrichmentRecord]:
        raise NotImplementedError

    def record(self, page_url: str, data: dict) -> EnrichmentRecord:
        return EnrichmentRecord(provider=self.provider, page_url=page_url, data=data)

    def check_response(self, response: httpx.Response, what: str) -> None:
        if response.status_code >= 400:
            raise ProviderRequestError(
                f"{what} error: {response.status_code}",
                data={"provider": self.provider.value, "status_code": response.status_code},
            )


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}", "Content-Type": "application/json"}
