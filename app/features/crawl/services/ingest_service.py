"""
Batch Ingestion Coordinator

Accepts one crawler batch at a time: advances the job state machine,
persists pages, scores every page with the rule engine and stores the
results. Each batch is one transaction; the job row is written with a
compare-and-set on its version column.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import delete, insert, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.features.crawl.models.crawl_job import CrawlJob, CrawlJobStatus
from app.features.crawl.models.issue import Issue
from app.features.crawl.models.page import Page
from app.features.crawl.models.page_score import PageScore
from app.features.crawl.schemas.ingest import (
    BatchIngestResult,
    CrawlPageResult,
    CrawlResultBatch,
    RescoreResult,
)
from app.features.crawl.schemas.score_detail import ScoreDetail
from app.features.crawl.services.job_state import ensure_transition, is_terminal
from app.features.scoring.schemas import LighthouseScores, PageData, ScoringResult, SiteContext
from app.features.scoring.services.engine import ScoreWeights, score_page
from app.platform.db.base import new_id
from app.platform.exceptions import (
    ConcurrentUpdateError,
    DuplicateBatchError,
    DuplicatePageError,
    JobNotAcceptingBatchesError,
    JobNotFoundError,
)
from app.platform.storage import ObjectStore, get_object_store

logger = logging.getLogger(__name__)

LIGHTHOUSE_CATEGORIES = {
    "performance": "performance",
    "seo": "seo",
    "accessibility": "accessibility",
    "best_practices": "best-practices",
}


async def get_job(db: AsyncSession, job_id: str) -> CrawlJob:
    # populate_existing: the job row is written with Core updates that bypass the identity map
    result = await db.execute(
        select(CrawlJob).where(CrawlJob.id == job_id).execution_options(populate_existing=True)
    )
    job = result.scalars().first()
    if not job:
        raise JobNotFoundError(f"Crawl job {job_id} not found", data={"job_id": job_id})
    return job


async def job_page_hashes(db: AsyncSession, job_id: str) -> List[Tuple[str, Optional[str]]]:
    """``(url, content_hash)`` of every stored page of a job, in delivery order."""
    result = await db.execute(
        select(Page.url, Page.content_hash)
        .where(Page.job_id == job_id)
        .order_by(Page.batch_index, Page.position)
    )
    return [(url, content_hash) for url, content_hash in result.all()]


def _with_content_hashes(base: Optional[SiteContext], pages: List[Tuple[str, Optional[str]]]) -> SiteContext:
    """Copy of the site context whose hash map also covers ``pages`` (first URL per hash wins)."""
    base = base or SiteContext()
    hashes = dict(base.content_hashes)
    for url, content_hash in pages:
        if content_hash:
            hashes.setdefault(content_hash, url)
    return base.model_copy(update={"content_hashes": hashes})


def _page_data(page: CrawlPageResult, site_context: SiteContext) -> PageData:
    return PageData(
        url=page.url,
        status_code=page.status_code,
        title=page.title,
        meta_description=page.meta_description,
        canonical_url=page.canonical_url,
        word_count=page.word_count,
        content_hash=page.content_hash,
        extracted=page.extracted,
        lighthouse=page.lighthouse,
        redirect_chain=page.redirect_chain,
        page_size_bytes=page.page_size_bytes,
        site_context=site_context,
    )


def _score_row(page_id: str, job_id: str, data: PageData, result: ScoringResult, detail: ScoreDetail) -> Dict[str, Any]:
    detail.performance_score = result.performance_score
    detail.letter_grade = result.letter_grade
    detail.extracted = data.extracted
    detail.lighthouse = data.lighthouse
    detail.redirect_chain = data.redirect_chain
    detail.page_size_bytes = data.page_size_bytes
    return {
        "page_id": page_id,
        "job_id": job_id,
        "overall_score": result.overall_score,
        "technical_score": result.technical_score,
        "content_score": result.content_score,
        "ai_readiness_score": result.ai_readiness_score,
        "performance_score": result.performance_score,
        "letter_grade": result.letter_grade,
        "lighthouse_perf": data.lighthouse.performance if data.lighthouse else None,
        "lighthouse_seo": data.lighthouse.seo if data.lighthouse else None,
        "detail": detail.dump(),
    }


def _issue_rows(page_id: str, job_id: str, result: ScoringResult) -> List[Dict[str, Any]]:
    return [
        {
            "id": new_id(),
            "page_id": page_id,
            "job_id": job_id,
            "category": issue.category,
            "severity": issue.severity,
            "code": issue.code,
            "message": issue.message,
            "recommendation": issue.recommendation,
            "data": issue.data,
        }
        for issue in result.issues
    ]


async def ingest_batch(
    db: AsyncSession,
    batch: CrawlResultBatch,
    weights: Optional[ScoreWeights] = None,
) -> BatchIngestResult:
    """
    Persist and score one crawler batch.

    Raises:
        JobNotFoundError: Unknown job id
        JobNotAcceptingBatchesError: Job is complete, failed or cancelled
        DuplicateBatchError: batch_index was already accepted (or is older)
        DuplicatePageError: A page URL was already ingested for this job
        ConcurrentUpdateError: Another writer updated the job first
    """
    weights = weights or ScoreWeights.from_settings()
    job = await get_job(db, batch.job_id)

    if is_terminal(job.status):
        raise JobNotAcceptingBatchesError(
            f"Crawl job {job.id} is {job.status.value} and accepts no more batches",
            data={"job_id": job.id, "status": job.status.value},
        )
    if batch.batch_index <= job.last_batch_index:
        raise DuplicateBatchError(
            f"Batch {batch.batch_index} for job {job.id} was already ingested",
            data={"job_id": job.id, "batch_index": batch.batch_index, "last_batch_index": job.last_batch_index},
        )

    earlier_pages = await job_page_hashes(db, job.id)
    seen_urls = {url for url, _ in earlier_pages}
    repeated = [page.url for page in batch.pages if page.url in seen_urls]
    if repeated:
        raise DuplicatePageError(
            f"Batch {batch.batch_index} for job {job.id} repeats {len(repeated)} already ingested URL(s)",
            data={"job_id": job.id, "batch_index": batch.batch_index, "urls": repeated},
        )

    job_id = job.id
    expected_version = job.version
    status = job.status
    started_at = job.started_at
    now = datetime.now(timezone.utc)

    try:
        # (a) first batch opens the crawl
        if status == CrawlJobStatus.pending:
            status = ensure_transition(status, CrawlJobStatus.crawling)
            started_at = now

        # (b) pages, one batch insert
        page_ids = [new_id() for _ in batch.pages]
        page_rows = [
            {
                "id": page_id,
                "job_id": job_id,
                "project_id": job.project_id,
                "url": page.url,
                "canonical_url": page.canonical_url,
                "status_code": page.status_code,
                "title": page.title,
                "meta_description": page.meta_description,
                "word_count": page.word_count,
                "content_hash": page.content_hash,
                "raw_html_key": page.html_key,
                "performance_audit_key": page.lighthouse.lh_r2_key if page.lighthouse else None,
                "batch_index": batch.batch_index,
                "position": position,
                "crawled_at": now,
            }
            for position, (page_id, page) in enumerate(zip(page_ids, batch.pages))
        ]
        if page_rows:
            await db.execute(insert(Page), page_rows)

        # (c)
        status = ensure_transition(status, CrawlJobStatus.scoring)

        # (d) score in batch order, entirely in memory
        base_context = batch.site_context
        if base_context is None and job.site_context:
            base_context = SiteContext.model_validate(job.site_context)
        # the first URL in delivery order owns a hash, across the whole job
        site_context = _with_content_hashes(
            base_context, earlier_pages + [(p.url, p.content_hash) for p in batch.pages]
        )

        score_rows: List[Dict[str, Any]] = []
        issue_rows: List[Dict[str, Any]] = []
        for page_id, page in zip(page_ids, batch.pages):
            data = _page_data(page, site_context)
            result = score_page(data, weights)
            score_row = _score_row(page_id, job_id, data, result, ScoreDetail())
            score_row["id"] = new_id()
            score_rows.append(score_row)
            issue_rows.extend(_issue_rows(page_id, job_id, result))

        # (e) exactly one insert for scores and one for issues
        if score_rows:
            await db.execute(insert(PageScore), score_rows)
        if issue_rows:
            await db.execute(insert(Issue), issue_rows)

        # (f) counters; found never trails scored
        pages_scored = job.pages_scored + len(batch.pages)
        pages_found = max(batch.stats.pages_found, pages_scored)

        # (g)
        completed_at = job.completed_at
        if batch.is_final:
            status = ensure_transition(status, CrawlJobStatus.complete)
            completed_at = now
        else:
            status = ensure_transition(status, CrawlJobStatus.crawling)

        values = {
            "status": status,
            "started_at": started_at,
            "completed_at": completed_at,
            "pages_found": pages_found,
            "pages_crawled": batch.stats.pages_crawled,
            "pages_scored": pages_scored,
            "last_batch_index": batch.batch_index,
            "version": expected_version + 1,
        }
        if batch.site_context is not None:
            values["site_context"] = batch.site_context.model_dump(mode="json", exclude={"content_hashes"})

        result = await db.execute(
            update(CrawlJob)
            .where(CrawlJob.id == job_id, CrawlJob.version == expected_version)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise ConcurrentUpdateError(
                f"Crawl job {job_id} was modified concurrently",
                data={"job_id": job_id, "expected_version": expected_version},
            )

        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info(
        f"[{job_id}] Ingested batch {batch.batch_index}: {len(batch.pages)} pages, "
        f"{len(issue_rows)} issues, status={status.value}"
    )

    return BatchIngestResult(
        job_id=job_id,
        batch_index=batch.batch_index,
        pages_processed=len(batch.pages),
        is_final=batch.is_final,
        status=status.value,
        page_ids=page_ids,
    )


def lighthouse_from_audit(payload: Dict[str, Any], key: Optional[str] = None) -> Optional[LighthouseScores]:
    """
    Read category scores from a stored performance audit.

    Accepts a raw Lighthouse report (``categories.<id>.score``) or the flat
    ``{performance, seo, accessibility, best_practices}`` form.
    """
    categories = payload.get("categories")
    scores: Dict[str, Any] = {}
    for field, category_id in LIGHTHOUSE_CATEGORIES.items():
        if isinstance(categories, dict):
            value = (categories.get(category_id) or {}).get("score")
        else:
            value = payload.get(field)
        if value is None:
            return None
        scores[field] = value
    return LighthouseScores(**scores, lh_r2_key=key)


async def rescore_job(
    db: AsyncSession,
    job_id: str,
    store: Optional[ObjectStore] = None,
    weights: Optional[ScoreWeights] = None,
) -> RescoreResult:
    """
    Re-run the rule engine over every stored page of a job without re-crawling.

    Signals come from each score's detail; a missing Lighthouse block is read
    back from the object store when the page kept its audit key. Model-derived
    detail fields are kept. The job's issues are replaced wholesale.
    """
    weights = weights or ScoreWeights.from_settings()
    job = await get_job(db, job_id)

    rows = (
        await db.execute(
            select(Page, PageScore)
            .outerjoin(PageScore, PageScore.page_id == Page.id)
            .where(Page.job_id == job_id)
            .order_by(Page.batch_index, Page.position)
        )
    ).all()

    base_context = SiteContext.model_validate(job.site_context) if job.site_context else None
    site_context = _with_content_hashes(base_context, [(page.url, page.content_hash) for page, _ in rows])

    score_updates: List[Dict[str, Any]] = []
    score_inserts: List[Dict[str, Any]] = []
    issue_rows: List[Dict[str, Any]] = []

    for page, score in rows:
        detail = ScoreDetail.load(score.detail if score else None)

        lighthouse = detail.lighthouse
        if lighthouse is None and page.performance_audit_key:
            store = store or get_object_store()
            try:
                payload = await store.get_json(page.performance_audit_key)
            except Exception as e:
                logger.warning(f"[{job_id}] Could not read audit {page.performance_audit_key}: {e}")
                payload = None
            if payload:
                lighthouse = lighthouse_from_audit(payload, page.performance_audit_key)

        data = PageData(
            url=page.url,
            status_code=page.status_code,
            title=page.title,
            meta_description=page.meta_description,
            canonical_url=page.canonical_url,
            word_count=page.word_count,
            content_hash=page.content_hash,
            extracted=detail.extracted,
            lighthouse=lighthouse,
            redirect_chain=detail.redirect_chain,
            page_size_bytes=detail.page_size_bytes,
            llm_scores=detail.llm_content_scores,
            site_context=site_context,
        )
        result = score_page(data, weights)
        row = _score_row(page.id, job_id, data, result, detail)
        if score:
            row["id"] = score.id
            score_updates.append(row)
        else:
            row["id"] = new_id()
            score_inserts.append(row)
        issue_rows.extend(_issue_rows(page.id, job_id, result))

    try:
        if score_updates:
            await db.execute(update(PageScore), score_updates)
        if score_inserts:
            await db.execute(insert(PageScore), score_inserts)
        await db.execute(delete(Issue).where(Issue.job_id == job_id))
        if issue_rows:
            await db.execute(insert(Issue), issue_rows)
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info(f"[{job_id}] Rescored {len(rows)} pages, {len(issue_rows)} issues")
    return RescoreResult(job_id=job_id, pages_rescored=len(rows), issues_created=len(issue_rows))
