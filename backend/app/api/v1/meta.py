"""Archive dates and FreshRSS category/tag listings."""

from typing import Any

from fastapi import APIRouter, Depends

from app.api.deps import get_article_service, get_briefing_service, get_cache
from app.constants.briefing import AVAILABLE_FILTERS_TAG, FILTERS_TTL_SECONDS
from app.schemas.article import AvailableFilters
from app.services.article_service import ArticleService
from app.services.briefing_service import BriefingService
from app.services.cache_service import CacheStore, cached

router = APIRouter()


@router.get("/available-dates", response_model=list[str])
async def get_available_dates(
    service: BriefingService = Depends(get_briefing_service),
) -> list[str]:
    """Dates that have a briefing, newest first."""
    return await service.get_available_dates()


@router.get("/tags", response_model=AvailableFilters)
async def get_tags(
    articles: ArticleService = Depends(get_article_service),
    cache: CacheStore = Depends(get_cache),
) -> Any:
    """FreshRSS folders (categories) and user labels (tags)."""

    async def loader() -> dict[str, Any]:
        filters = await articles.get_available_filters()
        return filters.model_dump()

    return await cached(
        cache,
        AVAILABLE_FILTERS_TAG,
        [AVAILABLE_FILTERS_TAG],
        FILTERS_TTL_SECONDS,
        loader,
    )
