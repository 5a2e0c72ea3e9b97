import json
import logging
from typing import Any, Dict, Optional

from redis.asyncio import Redis

from app.platform.config import settings

logger = logging.getLogger(__name__)


def create_redis() -> Redis:
    return Redis.from_url(
        settings.REDIS_URL,
        encoding="utf-8",
        decode_responses=True,
    )


class ContentScoreCache:
    """
    Durable cache of content-quality judgments keyed by page content hash.

    Two pages with identical rendered text share one judgment, so the model
    provider is only asked once per distinct content.
    """

    KEY_PREFIX = "llm-content-score:"

    def __init__(self, client: Redis, ttl_seconds: Optional[int] = None):
        self.client = client
        self.ttl_seconds = ttl_seconds if ttl_seconds is not None else settings.CONTENT_CACHE_TTL_SECONDS

    def _key(self, content_hash: str) -> str:
        return f"{self.KEY_PREFIX}{content_hash}"

    async def get(self, content_hash: str) -> Optional[Dict[str, Any]]:
        raw = await self.client.get(self._key(content_hash))
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.warning(f"Discarding unreadable cache entry for {content_hash}")
            return None

    async def set(self, content_hash: str, value: Dict[str, Any]) -> None:
        await self.client.set(self._key(content_hash), json.dumps(value), ex=self.ttl_seconds or None)
