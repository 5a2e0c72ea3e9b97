"""
Bounded-concurrency mapping over async operations.

Used by the content-quality scorer, the enrichment orchestrator and the
page-speed fetcher, each with its own limit.
"""
import asyncio
import logging
from typing import Awaitable, Callable, List, Optional, Sequence, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


async def map_bounded(
    items: Sequence[T],
    fn: Callable[[T], Awaitable[R]],
    *,
    concurrency: int,
    settle: bool = False,
) -> List[Optional[R]]:
    """
    Apply ``fn`` to every item with at most ``concurrency`` calls in flight.

    Results come back in input order. Workers pull the next unclaimed index
    from a shared cursor, so slow items do not hold up a static partition.

    Args:
        items: Inputs to process
        fn: Async operation applied to each input
        concurrency: Maximum number of simultaneous calls (>= 1)
        settle: When True a failing item yields ``None`` in its slot and the
            rest keep going. When False the first failure cancels the
            remaining workers and is re-raised.

    Returns:
        List with one result per input, ``None`` for settled failures
    """
    if concurrency < 1:
        raise ValueError(f"concurrency must be >= 1, got {concurrency}")

    results: List[Optional[R]] = [None] * len(items)
    if not items:
        return results

    cursor = 0

    async def worker() -> None:
        nonlocal cursor
        while cursor < len(items):
            index = cursor
            cursor += 1
            try:
                results[index] = await fn(items[index])
            except Exception as e:
                if not settle:
                    raise
                logger.warning(f"Item {index} failed and was settled to None: {e}")
                results[index] = None

    workers = [asyncio.create_task(worker()) for _ in range(min(concurrency, len(items)))]

    if settle:
        await asyncio.gather(*workers)
        return results

    done, pending = await asyncio.wait(workers, return_when=asyncio.FIRST_EXCEPTION)
    errors = [task.exception() for task in done if task.exception() is not None]

    if errors:
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
        raise errors[0]

    return results
