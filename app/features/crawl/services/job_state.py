"""Allowed CrawlJob status transitions."""
from app.features.crawl.models.crawl_job import CrawlJobStatus
from app.platform.exceptions import InvalidStatusTransitionError

TERMINAL_STATUSES = frozenset({
    CrawlJobStatus.complete,
    CrawlJobStatus.failed,
    CrawlJobStatus.cancelled,
})

ALLOWED_TRANSITIONS = {
    CrawlJobStatus.pending: {CrawlJobStatus.crawling},
    CrawlJobStatus.crawling: {CrawlJobStatus.scoring},
    # scoring -> crawling while more batches are expected
    CrawlJobStatus.scoring: {CrawlJobStatus.crawling, CrawlJobStatus.complete},
}


def is_terminal(status: CrawlJobStatus) -> bool:
    return status in TERMINAL_STATUSES


def can_transition(current: CrawlJobStatus, target: CrawlJobStatus) -> bool:
    if is_terminal(current):
        return False
    if target in (CrawlJobStatus.failed, CrawlJobStatus.cancelled):
        return True
    return target in ALLOWED_TRANSITIONS.get(current, set())


def ensure_transition(current: CrawlJobStatus, target: CrawlJobStatus) -> CrawlJobStatus:
    """Return ``target`` if the move is allowed, raise InvalidStatusTransitionError otherwise."""
    if not can_transition(current, target):
        raise InvalidStatusTransitionError(
            f"Cannot move crawl job from {current.value} to {target.value}",
            data={"from": current.value, "to": target.value},
        )
    return target
