"""Targeted cache invalidation for one briefing date, plus page pre-warming."""

import asyncio
from datetime import datetime

import httpx

from app.constants.briefing import (
    HOME_PATH,
    PREWARM_DELAY_SECONDS,
    PREWARM_USER_AGENT,
    briefing_tag,
    date_page_path,
)
from app.logging_config import get_logger
from app.services.cache_service import CacheStore
from app.utils.dates import SHANGHAI, today_in

logger = get_logger(__name__)

# Strong references to detached tasks so they are not garbage collected mid-flight
_background_tasks: set[asyncio.Task] = set()


def spawn_background(coro) -> asyncio.Task:
    """Run ``coro`` detached from the current request."""
    task = asyncio.create_task(coro)
    _background_tasks.add(task)
    task.add_done_callback(_background_tasks.discard)
    return task


class Prewarmer:
    """Requests freshly invalidated pages so the next visitor gets a cache hit."""

    def __init__(
        self,
        delay_seconds: float = PREWARM_DELAY_SECONDS,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.delay_seconds = delay_seconds
        self.http_client = httpx.AsyncClient(
            headers={"User-Agent": PREWARM_USER_AGENT},
            timeout=timeout,
            follow_redirects=True,
            transport=transport,
        )

    def schedule(self, urls: list[str]) -> asyncio.Task:
        """Fire and forget. The returned task never raises."""
        return spawn_background(self.warm(urls))

    async def warm(self, urls: list[str]) -> None:
        await asyncio.sleep(self.delay_seconds)
        for url in urls:
            try:
                response = await self.http_client.get(url)
                logger.info("[Prewarm] %s -> %s", url, response.status_code)
            except httpx.HTTPError as e:
                logger.warning("[Prewarm] Failed to warm %s: %s", url, e)
            except Exception:
                logger.exception("[Prewarm] Unexpected error warming %s", url)

    async def close(self) -> None:
        await self.http_client.aclose()


async def revalidate_date(
    cache: CacheStore,
    date: str,
    now: datetime | None = None,
) -> list[str]:
    """Invalidate the data and pages for ``date``.

    The data tag goes first so a page rebuilt in between never reads stale
    data. The homepage is only invalidated when ``date`` is today in
    Asia/Shanghai. Returns the invalidated page paths.
    """
    await cache.invalidate_tag(briefing_tag(date))

    paths = [date_page_path(date)]
    await cache.invalidate_path(paths[0])

    if date == today_in(SHANGHAI, now):
        await cache.invalidate_path(HOME_PATH)
        paths.append(HOME_PATH)

    logger.info("Revalidated briefing %s (pages: %s)", date, ", ".join(paths))
    return paths
