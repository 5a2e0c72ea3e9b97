from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.features.crawl.schemas.ingest import CrawlResultBatch, RescoreRequest
from app.features.crawl.services.ingest_service import get_job, ingest_batch, rescore_job
from app.features.crawl.workers.tasks import enrich_job, rescore_content_quality, score_content_quality
from app.platform.db.session import get_db
from app.platform.logger import get_logger
from app.platform.response import api_response

logger = get_logger(__name__)

router = APIRouter(prefix="/ingest", tags=["ingest"])


def _schedule(task, *args, **kwargs) -> bool:
    """Queue a background task. Broker trouble is logged, never raised to the crawler."""
    try:
        task.delay(*args, **kwargs)
        return True
    except Exception as e:
        logger.error(f"Failed to schedule {task.name} for {args[0] if args else '?'}: {e}")
        return False


@router.post("/batch")
async def ingest_crawl_batch(
    batch: CrawlResultBatch,
    db: AsyncSession = Depends(get_db),
):
    """
    Ingest one batch of crawled pages.

    Pages are stored and scored synchronously. Content-quality scoring for
    the batch, and enrichment after the final batch, run in the background.
    """
    result = await ingest_batch(db, batch)

    if result.page_ids:
        _schedule(score_content_quality, result.job_id, result.page_ids)
    if result.is_final:
        _schedule(enrich_job, result.job_id)

    return api_response(
        data=result.model_dump(),
        message=f"Batch {result.batch_index} ingested: {result.pages_processed} pages",
        status_code=status.HTTP_200_OK,
    )


@router.post("/rescore")
async def rescore_crawl_job(
    request: RescoreRequest,
    db: AsyncSession = Depends(get_db),
):
    """Re-run rule scoring over every stored page of a job."""
    result = await rescore_job(db, request.job_id)
    return api_response(
        data=result.model_dump(),
        message=f"Rescored {result.pages_rescored} pages",
    )


@router.post("/rescore-llm")
async def rescore_crawl_job_content(
    request: RescoreRequest,
    db: AsyncSession = Depends(get_db),
):
    """Schedule a forced content-quality rescore of every page of a job."""
    job = await get_job(db, request.job_id)
    queued = _schedule(rescore_content_quality, job.id)
    return api_response(
        data={"job_id": job.id, "queued": queued},
        message="Content rescoring queued" if queued else "Content rescoring could not be queued",
        status_code=status.HTTP_202_ACCEPTED,
    )
