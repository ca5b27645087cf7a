"""Data cache (invalidated by tag) and rendered-page cache (invalidated by path).

Data entries remember the tags they were stored with; invalidating a tag
marks every entry stored before that moment as stale. Page entries are keyed
by request path and simply dropped on invalidation.
"""

import itertools
import time
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import Any, Protocol

from botocore.exceptions import BotoCoreError, ClientError

from app.config import Settings
from app.db.dynamodb import DynamoDBClient
from app.logging_config import get_logger

logger = get_logger(__name__)


class CacheError(Exception):
    """The cache backend could not be read or written."""


class CacheStore(Protocol):
    async def get(self, key: str) -> Any | None: ...

    async def set(
        self, key: str, value: Any, tags: list[str], ttl_seconds: int | None = None
    ) -> None: ...

    async def invalidate_tag(self, tag: str) -> None: ...

    async def get_page(self, path: str) -> str | None: ...

    async def set_page(self, path: str, html: str, ttl_seconds: int | None = None) -> None: ...

    async def invalidate_path(self, path: str) -> None: ...


class MemoryCacheStore:
    """Per-process cache. Suitable for a single worker and for tests."""

    def __init__(self) -> None:
        self._clock = itertools.count(1)
        self._entries: dict[str, tuple[Any, list[str], int, float | None]] = {}
        self._tag_invalidations: dict[str, int] = {}
        self._pages: dict[str, tuple[str, float | None]] = {}

    async def get(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, tags, stored_at, expires_at = entry
        if expires_at is not None and expires_at <= time.monotonic():
            del self._entries[key]
            return None
        if any(self._tag_invalidations.get(tag, 0) > stored_at for tag in tags):
            del self._entries[key]
            return None
        return value

    async def set(
        self, key: str, value: Any, tags: list[str], ttl_seconds: int | None = None
    ) -> None:
        expires_at = time.monotonic() + ttl_seconds if ttl_seconds is not None else None
        self._entries[key] = (value, list(tags), next(self._clock), expires_at)

    async def invalidate_tag(self, tag: str) -> None:
        self._tag_invalidations[tag] = next(self._clock)

    async def get_page(self, path: str) -> str | None:
        page = self._pages.get(path)
        if page is None:
            return None
        html, expires_at = page
        if expires_at is not None and expires_at <= time.monotonic():
            del self._pages[path]
            return None
        return html

    async def set_page(self, path: str, html: str, ttl_seconds: int | None = None) -> None:
        expires_at = time.monotonic() + ttl_seconds if ttl_seconds is not None else None
        self._pages[path] = (html, expires_at)

    async def invalidate_path(self, path: str) -> None:
        self._pages.pop(path, None)


class DynamoDBCacheStore:
    """Cache shared between workers, stored in a DynamoDB table."""

    def __init__(self, client: DynamoDBClient):
        self.client = client

    @asynccontextmanager
    async def _errors(self, action: str) -> AsyncIterator[None]:
        try:
            yield
        except (BotoCoreError, ClientError) as e:
            raise CacheError(f"Cache {action} failed: {e}") from e

    async def get(self, key: str) -> Any | None:
        async with self._errors("read"):
            entry = await self.client.get_entry(f"ENTRY#{key}")
            if entry is None:
                return None

            stored_at = entry["stored_at"]
            for tag in entry["tags"]:
                marker = await self.client.get_entry(f"TAG#{tag}")
                if marker is not None and marker["invalidated_at"] >= stored_at:
                    return None
            return entry["value"]

    async def set(
        self, key: str, value: Any, tags: list[str], ttl_seconds: int | None = None
    ) -> None:
        payload = {"value": value, "tags": list(tags), "stored_at": time.time()}
        async with self._errors("write"):
            await self.client.put_entry(f"ENTRY#{key}", payload, ttl_seconds)

    async def invalidate_tag(self, tag: str) -> None:
        async with self._errors("invalidation"):
            await self.client.put_entry(f"TAG#{tag}", {"invalidated_at": time.time()}, None)

    async def get_page(self, path: str) -> str | None:
        async with self._errors("read"):
            entry = await self.client.get_entry(f"PAGE#{path}")
        return entry["html"] if entry else None

    async def set_page(self, path: str, html: str, ttl_seconds: int | None = None) -> None:
        async with self._errors("write"):
            await self.client.put_entry(f"PAGE#{path}", {"html": html}, ttl_seconds)

    async def invalidate_path(self, path: str) -> None:
        async with self._errors("invalidation"):
            await self.client.delete_entry(f"PAGE#{path}")


def build_cache_store(settings: Settings) -> CacheStore:
    if settings.cache_backend == "dynamodb":
        logger.info("Using DynamoDB cache table %s", settings.cache_table_name)
        return DynamoDBCacheStore(DynamoDBClient(settings))
    return MemoryCacheStore()


async def cached(
    cache: CacheStore,
    key: str,
    tags: list[str],
    ttl_seconds: int | None,
    loader: Callable[[], Awaitable[Any]],
) -> Any:
    """Return the cached value for ``key`` or load, store and return it."""
    value = await cache.get(key)
    if value is not None:
        return value

    value = await loader()
    await cache.set(key, value, tags, ttl_seconds)
    return value
