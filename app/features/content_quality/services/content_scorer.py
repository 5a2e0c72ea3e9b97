"""
Deferred Content-Quality Scorer

Runs after a batch has been ingested. For every eligible page it reads the
raw HTML from the object store, asks the model provider for a content
judgment (once per distinct content hash) and merges the judgment into the
page's score detail. Dimension scores are left as they are.
"""
import asyncio
import logging
from datetime import datetime, timezone
from typing import Dict, List, NamedTuple, Optional, Sequence, Tuple

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.features.content_quality.schemas.content import ContentScoringSummary
from app.features.content_quality.services.llm_judge import ContentQualityModel
from app.features.content_quality.utils.text import html_to_text
from app.features.crawl.models.page import Page
from app.features.crawl.models.page_score import PageScore
from app.features.crawl.schemas.score_detail import ScoreDetail
from app.features.scoring.schemas import LLMContentScores
from app.platform.cache.redis import ContentScoreCache
from app.platform.config import settings
from app.platform.storage import ObjectStore, get_object_store
from app.platform.utils.concurrency import map_bounded

logger = logging.getLogger(__name__)


class _Judged(NamedTuple):
    score: PageScore
    scores: LLMContentScores
    cache_hit: bool


_SKIPPED = object()


class ContentQualityScorer:
    """
    Scores page content with the model provider and records it on PageScore.detail.

    Collaborators are injectable so tests can swap the store, cache and model.
    """

    def __init__(
        self,
        store: Optional[ObjectStore] = None,
        cache: Optional[ContentScoreCache] = None,
        model: Optional[ContentQualityModel] = None,
        min_words: Optional[int] = None,
        max_chars: Optional[int] = None,
        concurrency: Optional[int] = None,
    ):
        self.store = store or get_object_store()
        self.cache = cache
        self.model = model or ContentQualityModel()
        self.min_words = settings.CONTENT_SCORING_MIN_WORDS if min_words is None else min_words
        self.max_chars = settings.CONTENT_SCORING_MAX_CHARS if max_chars is None else max_chars
        self.concurrency = concurrency or settings.CONTENT_SCORING_CONCURRENCY
        self._in_flight: Dict[str, asyncio.Task] = {}

    def is_eligible(self, page: Page) -> bool:
        return (page.word_count or 0) > self.min_words and bool(page.content_hash)

    async def _cached(self, content_hash: str) -> Optional[LLMContentScores]:
        if self.cache is None:
            return None
        try:
            raw = await self.cache.get(content_hash)
        except Exception as e:
            logger.warning(f"Content score cache read failed for {content_hash}: {e}")
            return None
        if raw is None:
            return None
        try:
            return LLMContentScores.model_validate(raw)
        except ValueError:
            logger.warning(f"Ignoring malformed cached content score for {content_hash}")
            return None

    async def _judge(self, content_hash: str, text: str, url: str, force: bool) -> Tuple[LLMContentScores, bool]:
        # forced runs ask the model again and overwrite the cached judgment
        if not force:
            cached = await self._cached(content_hash)
            if cached is not None:
                return cached, True

        scores = await self.model.score(text, url)
        if self.cache is not None:
            # Written before use so a concurrent job sees it
            await self.cache.set(content_hash, scores.model_dump())
        return scores, False

    async def _judgment_for(
        self, content_hash: str, text: str, url: str, force: bool = False
    ) -> Tuple[LLMContentScores, bool]:
        """One judgment per content hash; concurrent callers share the in-flight request."""
        task = self._in_flight.get(content_hash)
        if task is not None:
            scores, _ = await asyncio.shield(task)
            return scores, True

        task = asyncio.ensure_future(self._judge(content_hash, text, url, force))
        self._in_flight[content_hash] = task
        return await asyncio.shield(task)

    async def _score_one(self, item: Tuple[Page, PageScore], force: bool = False):
        page, score = item
        if not page.raw_html_key:
            logger.info(f"[{page.job_id}] No raw HTML key for {page.url}, skipping")
            return _SKIPPED

        try:
            raw_html = await self.store.get_text(page.raw_html_key)
            if raw_html is None:
                logger.info(f"[{page.job_id}] Raw HTML {page.raw_html_key} missing, skipping {page.url}")
                return _SKIPPED

            text = html_to_text(raw_html, self.max_chars)
            if not text:
                return _SKIPPED

            scores, cache_hit = await self._judgment_for(page.content_hash, text, page.url, force)
            return _Judged(score=score, scores=scores, cache_hit=cache_hit)
        except Exception as e:
            logger.error(f"[{page.job_id}] Content scoring failed for {page.url}: {e}")
            raise

    async def score_pages(
        self,
        db: AsyncSession,
        pages: Sequence[Page],
        force: bool = False,
    ) -> ContentScoringSummary:
        """
        Judge every eligible page and merge the result into its score detail.

        Args:
            db: Session used to read scores and write the merged detail
            pages: Pages to consider, typically one ingested batch
            force: Re-judge pages that already carry model scores

        Returns:
            ContentScoringSummary with eligible, scored, cache-hit, skipped
            and failed counts
        """
        summary = ContentScoringSummary()
        eligible = [page for page in pages if self.is_eligible(page)]
        summary.eligible = len(eligible)
        summary.skipped = len(pages) - len(eligible)
        if not eligible:
            return summary

        result = await db.execute(
            select(PageScore)
            .where(PageScore.page_id.in_([page.id for page in eligible]))
            .execution_options(populate_existing=True)
        )
        scores_by_page = {score.page_id: score for score in result.scalars().all()}

        work: List[Tuple[Page, PageScore]] = []
        for page in eligible:
            score = scores_by_page.get(page.id)
            if score is None:
                summary.skipped += 1
                continue
            if not force and ScoreDetail.load(score.detail).llm_content_scores is not None:
                summary.skipped += 1
                continue
            work.append((page, score))

        outcomes = await map_bounded(
            work,
            lambda item: self._score_one(item, force),
            concurrency=self.concurrency,
            settle=True,
        )
        self._in_flight.clear()

        now = datetime.now(timezone.utc)
        for outcome in outcomes:
            if outcome is None:
                summary.failed += 1
                continue
            if outcome is _SKIPPED:
                summary.skipped += 1
                continue

            detail = ScoreDetail.load(outcome.score.detail)
            detail.llm_content_scores = outcome.scores
            detail.llm_scored_at = now
            # Only the detail column; dimension scores stay rule-derived
            await db.execute(
                update(PageScore)
                .where(PageScore.id == outcome.score.id)
                .values(detail=detail.dump())
                .execution_options(synchronize_session=False)
            )
            summary.scored += 1
            if outcome.cache_hit:
                summary.cache_hits += 1

        await db.commit()
        logger.info(
            f"Content scoring done: eligible={summary.eligible} scored={summary.scored} "
            f"cache_hits={summary.cache_hits} skipped={summary.skipped} failed={summary.failed}"
        )
        return summary
