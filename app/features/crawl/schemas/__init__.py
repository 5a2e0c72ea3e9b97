from app.features.crawl.schemas.ingest import (
    BatchIngestResult,
    CrawlPageResult,
    CrawlResultBatch,
    CrawlStats,
    RescoreRequest,
    RescoreResult,
)
from app.features.crawl.schemas.score_detail import ScoreDetail

__all__ = [
    "BatchIngestResult",
    "CrawlPageResult",
    "CrawlResultBatch",
    "CrawlStats",
    "RescoreRequest",
    "RescoreResult",
    "ScoreDetail",
]
