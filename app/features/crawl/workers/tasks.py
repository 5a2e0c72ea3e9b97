"""
Background tasks scheduled by the ingestion routes.

Each task drives an async service under ``asyncio.run`` with its own
database session. Per-item failures are logged inside the services; a task
never moves a crawl job to ``failed``.
"""
import asyncio
import logging
from typing import Any, Dict, List

from sqlalchemy.future import select

from app.features.content_quality.services.content_scorer import ContentQualityScorer
from app.features.crawl.models.page import Page
from app.features.enrichment.services.enrichment_service import EnrichmentService
from app.platform.async_db_helper import get_async_db
from app.platform.cache.redis import ContentScoreCache, create_redis
from app.platform.celery_app import celery_app

logger = logging.getLogger(__name__)


async def _score_content(job_id: str, page_ids: List[str] = None, force: bool = False) -> Dict[str, Any]:
    redis = create_redis()
    try:
        async with get_async_db() as db:
            query = select(Page).where(Page.job_id == job_id)
            if page_ids is not None:
                query = query.where(Page.id.in_(page_ids))
            pages = (await db.execute(query)).scalars().all()

            scorer = ContentQualityScorer(cache=ContentScoreCache(redis))
            summary = await scorer.score_pages(db, pages, force=force)
            return summary.model_dump()
    finally:
        await redis.aclose()


async def _enrich(job_id: str) -> Dict[str, Any]:
    async with get_async_db() as db:
        summary = await EnrichmentService().enrich_job(db, job_id)
        return summary.model_dump()


@celery_app.task(
    bind=True,
    name="app.features.crawl.workers.tasks.score_content_quality",
)
def score_content_quality(self, job_id: str, page_ids: List[str], force: bool = False) -> Dict[str, Any]:
    """
    Judge content quality for the pages of one ingested batch.

    Args:
        job_id: Crawl job the pages belong to
        page_ids: Pages inserted by the batch
        force: Re-judge pages that already carry model scores
    """
    logger.info(f"[{job_id}] Content scoring {len(page_ids)} pages (force={force})")
    try:
        return asyncio.run(_score_content(job_id, page_ids, force))
    except Exception as e:
        logger.error(f"[{job_id}] Content scoring task failed: {e}")
        raise


@celery_app.task(
    bind=True,
    name="app.features.crawl.workers.tasks.rescore_content_quality",
)
def rescore_content_quality(self, job_id: str) -> Dict[str, Any]:
    """Force a fresh content judgment for every page of a job."""
    logger.info(f"[{job_id}] Forced content rescoring")
    try:
        return asyncio.run(_score_content(job_id, None, force=True))
    except Exception as e:
        logger.error(f"[{job_id}] Content rescoring task failed: {e}")
        raise


@celery_app.task(
    bind=True,
    name="app.features.crawl.workers.tasks.enrich_job",
)
def enrich_job(self, job_id: str) -> Dict[str, Any]:
    """Pull analytics for a completed crawl job from the project's integrations."""
    logger.info(f"[{job_id}] Starting enrichment")
    try:
        return asyncio.run(_enrich(job_id))
    except Exception as e:
        logger.error(f"[{job_id}] Enrichment task failed: {e}")
        raise
