"""
Enrichment Orchestrator

Runs once per job, after its final batch. Pulls metrics for every crawled
URL from each enabled analytics integration of the project and stores them
per page. One provider failing is recorded on that integration and never
affects the others.
"""
import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

import httpx
from sqlalchemy import insert
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.features.crawl.models.page import Page
from app.features.crawl.models.project import Project
from app.features.crawl.services.ingest_service import get_job
from app.features.enrichment.fetchers import IntegrationFetcher, default_fetchers
from app.features.enrichment.models.enrichment_result import EnrichmentResult
from app.features.enrichment.models.integration import IntegrationProvider, ProjectIntegration
from app.features.enrichment.schemas.enrichment import EnrichmentRecord, EnrichmentSummary, FetcherContext
from app.features.enrichment.services.credentials import resolve_credentials
from app.platform.config import settings
from app.platform.db.base import new_id
from app.platform.utils.concurrency import map_bounded

logger = logging.getLogger(__name__)

HTTP_TIMEOUT_SECONDS = 60.0
MAX_ERROR_LENGTH = 1000


class EnrichmentService:
    """
    Orchestrates provider fetchers for a crawl job.

    Phases run in order: credentials (sequential, may commit refreshed
    tokens), fetches (concurrent, HTTP only), persistence (one insert, one
    commit).
    """

    def __init__(
        self,
        http: Optional[httpx.AsyncClient] = None,
        fetchers: Optional[Dict[IntegrationProvider, IntegrationFetcher]] = None,
        concurrency: Optional[int] = None,
    ):
        self.http = http
        self.fetchers = fetchers if fetchers is not None else default_fetchers()
        self.concurrency = concurrency or settings.ENRICHMENT_CONCURRENCY

    async def enrich_job(self, db: AsyncSession, job_id: str) -> EnrichmentSummary:
        job = await get_job(db, job_id)
        project = await db.get(Project, job.project_id)

        result = await db.execute(
            select(ProjectIntegration).where(
                ProjectIntegration.project_id == job.project_id,
                ProjectIntegration.enabled.is_(True),
            )
        )
        integrations = list(result.scalars().all())
        if not integrations:
            logger.info(f"[{job_id}] No enabled integrations, skipping enrichment")
            return EnrichmentSummary()

        page_rows = (
            await db.execute(
                select(Page.id, Page.url).where(Page.job_id == job_id).order_by(Page.batch_index, Page.position)
            )
        ).all()
        page_ids_by_url: Dict[str, str] = {}
        for page_id, url in page_rows:
            page_ids_by_url.setdefault(url, page_id)
        page_urls = list(page_ids_by_url)

        summary = EnrichmentSummary(integrations=len(integrations))
        if not page_urls:
            logger.info(f"[{job_id}] Job has no pages, skipping enrichment")
            return summary

        http = self.http or httpx.AsyncClient(timeout=HTTP_TIMEOUT_SECONDS)
        try:
            errors: Dict[str, str] = {}
            ready: List[Tuple[ProjectIntegration, Dict[str, str]]] = []

            for integration in integrations:
                try:
                    credentials = await resolve_credentials(db, integration, http)
                except Exception as e:
                    logger.error(f"[{job_id}] {integration.provider.value} credentials unavailable: {e}")
                    errors[integration.id] = str(e)
                    continue
                ready.append((integration, credentials))

            async def run(item: Tuple[ProjectIntegration, Dict[str, str]]) -> List[EnrichmentRecord]:
                integration, credentials = item
                try:
                    fetcher = self.fetchers.get(integration.provider)
                    if fetcher is None:
                        raise ValueError(f"No fetcher registered for {integration.provider.value}")
                    ctx = FetcherContext(
                        domain=project.domain,
                        page_urls=page_urls,
                        credentials=credentials,
                        config=integration.config or {},
                        http=http,
                    )
                    return await fetcher.fetch(ctx)
                except Exception as e:
                    logger.error(f"[{job_id}] {integration.provider.value} enrichment failed: {e}")
                    errors[integration.id] = str(e)
                    raise

            outcomes = await map_bounded(ready, run, concurrency=self.concurrency, settle=True)
        finally:
            if self.http is None:
                await http.aclose()

        rows = []
        succeeded: List[ProjectIntegration] = []
        for (integration, _), records in zip(ready, outcomes):
            if records is None:
                continue
            succeeded.append(integration)
            for record in records:
                page_id = page_ids_by_url.get(record.page_url)
                if page_id is None:
                    continue
                rows.append({
                    "id": new_id(),
                    "page_id": page_id,
                    "job_id": job_id,
                    "provider": integration.provider,
                    "data": record.data,
                })

        try:
            if rows:
                await db.execute(insert(EnrichmentResult), rows)

            now = datetime.now(timezone.utc)
            for integration in succeeded:
                integration.last_synced_at = now
                integration.last_error = None
            for integration in integrations:
                if integration.id in errors:
                    integration.last_error = errors[integration.id][:MAX_ERROR_LENGTH]

            await db.commit()
        except Exception:
            await db.rollback()
            raise

        summary.succeeded = len(succeeded)
        summary.failed = len(errors)
        summary.rows = len(rows)
        logger.info(
            f"[{job_id}] Enrichment done: {summary.succeeded}/{summary.integrations} integrations, {summary.rows} rows"
        )
        return summary
