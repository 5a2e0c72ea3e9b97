from unittest.mock import AsyncMock

from app.platform.cache.redis import ContentScoreCache


async def test_get_and_set_use_prefixed_keys():
    client = AsyncMock()
    client.get.return_value = '{"clarity": 80}'
    cache = ContentScoreCache(client, ttl_seconds=60)

    assert await cache.get("abc") == {"clarity": 80}
    client.get.assert_awaited_once_with("llm-content-score:abc")

    await cache.set("abc", {"clarity": 80})
    client.set.assert_awaited_once_with("llm-content-score:abc", '{"clarity": 80}', ex=60)


async def test_miss_and_unreadable_entries():
    client = AsyncMock()
    cache = ContentScoreCache(client, ttl_seconds=60)

    client.get.return_value = None
    assert await cache.get("abc") is None

    client.get.return_value = "{not json"
    assert await cache.get("abc") is None


async def test_zero_ttl_never_expires():
    client = AsyncMock()
    await ContentScoreCache(client, ttl_seconds=0).set("abc", {})
    client.set.assert_awaited_once_with("llm-content-score:abc", "{}", ex=None)
