import pytest
from sqlalchemy import func, select, update

from app.features.crawl.models import CrawlJob, CrawlJobStatus, Issue, Page, PageScore
from app.features.crawl.schemas import CrawlPageResult, CrawlResultBatch, CrawlStats
from app.features.crawl.services import ingest_service
from app.features.crawl.services.ingest_service import ingest_batch
from app.features.scoring.schemas import ExtractedSignals, LighthouseScores, SiteContext
from app.platform.exceptions import (
    ConcurrentUpdateError,
    DuplicateBatchError,
    DuplicatePageError,
    JobNotAcceptingBatchesError,
    JobNotFoundError,
)

GOOD_DESCRIPTION = (
    "Everything we learned testing twenty espresso grinders at home: burr types, "
    "retention, noise and which grinder suits your budget."
)
ORGANIZATION = {"@type": "Organization", "name": "Example", "url": "https://example.com"}


def crawled_page(path: str, **overrides) -> CrawlPageResult:
    fields = dict(
        url=f"https://example.com/{path}",
        status_code=200,
        title="Espresso Grinder Buying Guide for Home Baristas",
        meta_description=GOOD_DESCRIPTION,
        canonical_url=f"https://example.com/{path}",
        word_count=640,
        content_hash=f"hash-{path}",
        html_key=f"crawls/job-1/{path}.html",
        extracted=ExtractedSignals(structured_data=[ORGANIZATION], schema_types=["Organization"]),
    )
    fields.update(overrides)
    return CrawlPageResult(**fields)


def make_batch(index=0, pages=None, is_final=False, found=10, crawled=None, site_context=None, job_id="job-1"):
    pages = pages if pages is not None else [crawled_page(f"p{index}-a"), crawled_page(f"p{index}-b")]
    return CrawlResultBatch(
        job_id=job_id,
        batch_index=index,
        is_final=is_final,
        pages=pages,
        stats=CrawlStats(pages_found=found, pages_crawled=crawled if crawled is not None else len(pages)),
        site_context=site_context,
    )


async def count(db, model, **filters):
    query = select(func.count()).select_from(model)
    for column, value in filters.items():
        query = query.where(getattr(model, column) == value)
    return (await db.execute(query)).scalar_one()


async def fresh_job(db, job_id="job-1"):
    return await ingest_service.get_job(db, job_id)


class TestIngestBatch:
    async def test_non_final_batch_leaves_job_crawling(self, db_session, crawl_job):
        result = await ingest_batch(db_session, make_batch(0))

        assert result.status == "crawling"
        assert result.pages_processed == 2
        assert len(result.page_ids) == 2

        job = await fresh_job(db_session)
        assert job.status == CrawlJobStatus.crawling
        assert job.started_at is not None
        assert job.completed_at is None
        assert job.last_batch_index == 0
        assert job.version == 1
        assert await count(db_session, Page, job_id="job-1") == 2
        assert await count(db_session, PageScore, job_id="job-1") == 2

    async def test_final_batch_completes_job(self, db_session, crawl_job):
        await ingest_batch(db_session, make_batch(0))
        result = await ingest_batch(db_session, make_batch(1, is_final=True))

        assert result.status == "complete"
        job = await fresh_job(db_session)
        assert job.status == CrawlJobStatus.complete
        assert job.completed_at is not None
        assert job.pages_scored == 4
        assert job.version == 2

    async def test_single_final_batch_goes_straight_to_complete(self, db_session, crawl_job):
        await ingest_batch(db_session, make_batch(0, is_final=True))
        job = await fresh_job(db_session)
        assert job.status == CrawlJobStatus.complete
        assert job.started_at is not None

    async def test_issues_attributed_to_the_right_page(self, db_session, crawl_job):
        pages = [
            crawled_page("clean"),
            crawled_page("no-desc", meta_description=None),
            crawled_page("no-schema", extracted=ExtractedSignals()),
        ]
        result = await ingest_batch(db_session, make_batch(0, pages=pages))
        page_id_by_url = dict(zip([p.url for p in pages], result.page_ids))

        rows = (await db_session.execute(
            select(Issue.page_id).where(Issue.code == "MISSING_META_DESC")
        )).scalars().all()
        assert rows == [page_id_by_url["https://example.com/no-desc"]]

        rows = (await db_session.execute(
            select(Issue.page_id).where(Issue.code == "NO_STRUCTURED_DATA")
        )).scalars().all()
        assert rows == [page_id_by_url["https://example.com/no-schema"]]

    async def test_score_rows_carry_signals(self, db_session, crawl_job):
        lighthouse = LighthouseScores(performance=0.4, seo=0.9, accessibility=0.9, best_practices=0.9, lh_r2_key="lh/p.json")
        result = await ingest_batch(db_session, make_batch(0, pages=[crawled_page("lh", lighthouse=lighthouse)]))

        page = await db_session.get(Page, result.page_ids[0])
        assert page.performance_audit_key == "lh/p.json"
        assert page.raw_html_key == "crawls/job-1/lh.html"

        score = (await db_session.execute(
            select(PageScore).where(PageScore.page_id == page.id)
        )).scalar_one()
        assert score.lighthouse_perf == 0.4
        assert score.performance_score == 80
        assert score.detail["lighthouse"]["performance"] == 0.4
        assert score.detail["llm_content_scores"] is None

    async def test_pages_found_never_trails_pages_scored(self, db_session, crawl_job):
        await ingest_batch(db_session, make_batch(0, found=1))
        job = await fresh_job(db_session)
        assert job.pages_found == 2
        assert job.pages_crawled == 2

    async def test_duplicate_content_within_batch(self, db_session, crawl_job):
        pages = [
            crawled_page("first", content_hash="same"),
            crawled_page("second", content_hash="same"),
        ]
        result = await ingest_batch(db_session, make_batch(0, pages=pages))
        flagged = (await db_session.execute(
            select(Issue.page_id, Issue.data).where(Issue.code == "DUPLICATE_CONTENT")
        )).all()
        assert len(flagged) == 1
        assert flagged[0].page_id == result.page_ids[1]
        assert flagged[0].data == {"duplicate_of": "https://example.com/first"}

    async def test_duplicate_content_across_batches(self, db_session, crawl_job):
        first = await ingest_batch(db_session, make_batch(0, pages=[crawled_page("a", content_hash="same")]))
        second = await ingest_batch(
            db_session, make_batch(1, pages=[crawled_page("b", content_hash="same")], is_final=True)
        )

        flagged = (await db_session.execute(
            select(Issue.page_id, Issue.data).where(Issue.code == "DUPLICATE_CONTENT")
        )).all()
        assert [row.page_id for row in flagged] == second.page_ids
        assert flagged[0].data == {"duplicate_of": "https://example.com/a"}
        assert first.page_ids[0] not in [row.page_id for row in flagged]

    async def test_pages_read_back_in_delivery_order(self, db_session, crawl_job):
        paths = [f"p{i}" for i in range(8)]
        await ingest_batch(db_session, make_batch(0, pages=[crawled_page(p) for p in paths[:5]]))
        await ingest_batch(db_session, make_batch(1, pages=[crawled_page(p) for p in paths[5:]]))

        rows = (await db_session.execute(
            select(Page.url, Page.batch_index, Page.position)
            .where(Page.job_id == "job-1")
            .order_by(Page.batch_index, Page.position)
        )).all()
        assert [row.url for row in rows] == [f"https://example.com/{p}" for p in paths]
        assert [(row.batch_index, row.position) for row in rows] == [
            (0, 0), (0, 1), (0, 2), (0, 3), (0, 4), (1, 0), (1, 1), (1, 2),
        ]

    async def test_url_from_earlier_batch_rejected(self, db_session, crawl_job):
        await ingest_batch(db_session, make_batch(0))
        repeat = make_batch(1, pages=[crawled_page("fresh"), crawled_page("p0-b")])

        with pytest.raises(DuplicatePageError) as exc:
            await ingest_batch(db_session, repeat)

        assert exc.value.data["urls"] == ["https://example.com/p0-b"]
        assert await count(db_session, Page, job_id="job-1") == 2
        job = await fresh_job(db_session)
        assert job.version == 1
        assert job.last_batch_index == 0

    async def test_site_context_carries_over_to_later_batches(self, db_session, crawl_job):
        await ingest_batch(db_session, make_batch(0, site_context=SiteContext(has_llms_txt=False)))
        job = await fresh_job(db_session)
        assert job.site_context["has_llms_txt"] is False
        assert "content_hashes" not in job.site_context

        result = await ingest_batch(db_session, make_batch(1))
        flagged = (await db_session.execute(
            select(Issue.page_id).where(Issue.code == "MISSING_LLMS_TXT")
        )).scalars().all()
        assert set(result.page_ids) <= set(flagged)
        assert len(flagged) == 4

    async def test_empty_batch_still_advances(self, db_session, crawl_job):
        result = await ingest_batch(db_session, make_batch(0, pages=[], is_final=True, found=0))
        assert result.pages_processed == 0
        job = await fresh_job(db_session)
        assert job.status == CrawlJobStatus.complete

    async def test_unknown_job(self, db_session, crawl_job):
        with pytest.raises(JobNotFoundError):
            await ingest_batch(db_session, make_batch(0, job_id="missing"))

    async def test_duplicate_batch_index_rejected(self, db_session, crawl_job):
        await ingest_batch(db_session, make_batch(0))
        with pytest.raises(DuplicateBatchError):
            await ingest_batch(db_session, make_batch(0, pages=[crawled_page("again")]))
        assert await count(db_session, Page, job_id="job-1") == 2

    async def test_terminal_job_rejects_batches(self, db_session, crawl_job):
        await ingest_batch(db_session, make_batch(0, is_final=True))
        with pytest.raises(JobNotAcceptingBatchesError) as exc:
            await ingest_batch(db_session, make_batch(1))
        assert exc.value.data["status"] == "complete"

    async def test_cancelled_job_rejects_batches(self, db_session, crawl_job):
        await db_session.execute(
            update(CrawlJob).where(CrawlJob.id == "job-1").values(status=CrawlJobStatus.cancelled)
        )
        await db_session.commit()
        with pytest.raises(JobNotAcceptingBatchesError):
            await ingest_batch(db_session, make_batch(0))

    async def test_concurrent_writer_loses_cleanly(self, db_session, db_engine, crawl_job, monkeypatch):
        real_get_job = ingest_service.get_job

        async def racing_get_job(db, job_id):
            job = await real_get_job(db, job_id)
            # another batch commits between our read and our write
            async with db_engine.begin() as conn:
                await conn.execute(
                    update(CrawlJob).where(CrawlJob.id == job_id).values(version=CrawlJob.version + 1)
                )
            return job

        monkeypatch.setattr(ingest_service, "get_job", racing_get_job)

        with pytest.raises(ConcurrentUpdateError):
            await ingest_batch(db_session, make_batch(0))

        assert await count(db_session, Page, job_id="job-1") == 0
        assert await count(db_session, Issue, job_id="job-1") == 0
