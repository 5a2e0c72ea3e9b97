import asyncio

import pytest

from app.platform.utils.concurrency import map_bounded


async def fails_on_two(x):
    await asyncio.sleep(0)
    if x == 2:
        raise RuntimeError("boom")
    return x


async def test_settle_puts_none_in_failed_slot():
    assert await map_bounded([1, 2, 3], fails_on_two, concurrency=2, settle=True) == [1, None, 3]


async def test_without_settle_first_failure_propagates():
    with pytest.raises(RuntimeError, match="boom"):
        await map_bounded([1, 2, 3], fails_on_two, concurrency=2)


async def test_results_keep_input_order():
    async def slow_first(x):
        await asyncio.sleep(0.02 if x == 0 else 0)
        return x * 10

    assert await map_bounded(list(range(6)), slow_first, concurrency=3) == [0, 10, 20, 30, 40, 50]


async def test_never_exceeds_concurrency():
    in_flight = 0
    peak = 0

    async def track(x):
        nonlocal in_flight, peak
        in_flight += 1
        peak = max(peak, in_flight)
        await asyncio.sleep(0.01)
        in_flight -= 1
        return x

    await map_bounded(list(range(10)), track, concurrency=3)
    assert peak == 3


async def test_empty_input():
    assert await map_bounded([], fails_on_two, concurrency=4) == []


async def test_invalid_concurrency():
    with pytest.raises(ValueError):
        await map_bounded([1], fails_on_two, concurrency=0)


async def test_failure_cancels_siblings_before_propagating():
    claimed = []
    cancelled = []
    finished = []

    async def fail_fast_or_sleep(x):
        claimed.append(x)
        if x == 0:
            await asyncio.sleep(0)
            raise RuntimeError("boom")
        try:
            await asyncio.sleep(1)
        except asyncio.CancelledError:
            cancelled.append(x)
            raise
        finished.append(x)
        return x

    with pytest.raises(RuntimeError, match="boom"):
        await map_bounded([0, 1, 2, 3, 4], fail_fast_or_sleep, concurrency=2)

    # the sleeping sibling was cancelled and awaited, nothing else was started
    assert cancelled == [1]
    assert finished == []
    assert claimed == [0, 1]
