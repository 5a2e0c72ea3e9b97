"""
Object storage access for raw page bodies and performance-audit payloads.

The crawler uploads objects and hands us their keys; this service only reads.
"""
import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import httpx

from app.platform.config import settings

logger = logging.getLogger(__name__)


class ObjectStore:
    """Read-only interface over the bucket the crawler writes into."""

    async def get_text(self, key: str) -> Optional[str]:
        raise NotImplementedError

    async def get_json(self, key: str) -> Optional[Dict[str, Any]]:
        text = await self.get_text(key)
        if text is None:
            return None
        return json.loads(text)


class LocalObjectStore(ObjectStore):
    """Objects laid out as files under a root directory, keyed by relative path."""

    def __init__(self, root: str):
        self.root = Path(root).resolve()

    def _path_for(self, key: str) -> Path:
        path = (self.root / key).resolve()
        if self.root not in path.parents and path != self.root:
            raise ValueError(f"Object key escapes storage root: {key}")
        return path

    async def get_text(self, key: str) -> Optional[str]:
        path = self._path_for(key)
        if not path.is_file():
            return None
        return await asyncio.to_thread(path.read_text, encoding="utf-8", errors="replace")


class HttpObjectStore(ObjectStore):
    """Objects served over HTTP from a bucket endpoint (``{base_url}/{key}``)."""

    def __init__(self, base_url: str, client: Optional[httpx.AsyncClient] = None, timeout: float = 30.0):
        self.base_url = base_url.rstrip("/")
        self._client = client
        self.timeout = timeout

    async def get_text(self, key: str) -> Optional[str]:
        url = f"{self.base_url}/{key.lstrip('/')}"
        if self._client is not None:
            response = await self._client.get(url)
        else:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(url)

        if response.status_code == 404:
            return None
        response.raise_for_status()
        return response.text


def get_object_store() -> ObjectStore:
    """Build the configured store: HTTP when a base URL is set, local disk otherwise."""
    if settings.OBJECT_STORE_BASE_URL:
        return HttpObjectStore(settings.OBJECT_STORE_BASE_URL)
    return LocalObjectStore(settings.OBJECT_STORE_ROOT)
