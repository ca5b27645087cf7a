"""Shared FastAPI dependencies.

Long-lived clients are created once in the application lifespan and kept on
``app.state``; these dependencies hand them to the endpoints.
"""

from collections.abc import AsyncGenerator

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.agents.dashboard_summary import DashboardSummaryAgent
from app.config import Settings
from app.constants.briefing import SITE_TOKEN_COOKIE
from app.db.postgres import get_session
from app.services.article_service import ArticleService
from app.services.briefing_service import BriefingRepository, BriefingService
from app.services.cache_service import CacheStore
from app.services.freshrss_client import FreshRSSClient
from app.services.revalidation import Prewarmer
from app.services.stats_service import StatsService
from app.utils.auth import tokens_match


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_cache(request: Request) -> CacheStore:
    return request.app.state.cache


def get_prewarmer(request: Request) -> Prewarmer:
    return request.app.state.prewarmer


def get_freshrss_client(request: Request) -> FreshRSSClient:
    client: FreshRSSClient | None = getattr(request.app.state, "freshrss", None)
    if client is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="FreshRSS is not configured",
        )
    return client


def get_summary_agent(request: Request) -> DashboardSummaryAgent | None:
    return getattr(request.app.state, "summary_agent", None)


def get_article_service(
    freshrss: FreshRSSClient = Depends(get_freshrss_client),
) -> ArticleService:
    return ArticleService(freshrss)


def get_briefing_repository(
    session: AsyncSession = Depends(get_session),
) -> BriefingRepository:
    return BriefingRepository(session)


def get_briefing_service(
    repository: BriefingRepository = Depends(get_briefing_repository),
    cache: CacheStore = Depends(get_cache),
) -> BriefingService:
    return BriefingService(repository, cache)


def get_stats_service(session: AsyncSession = Depends(get_session)) -> StatsService:
    return StatsService(session)


def is_admin(request: Request, settings: Settings) -> bool:
    """True when the ``site_token`` cookie carries the configured access token."""
    return tokens_match(request.cookies.get(SITE_TOKEN_COOKIE), settings.access_token)


def require_admin(request: Request, settings: Settings = Depends(get_settings)) -> None:
    """401 for anyone without a valid ``site_token`` cookie."""
    if not is_admin(request, settings):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")


def require_admin_write(request: Request, settings: Settings = Depends(get_settings)) -> None:
    """403 for state-changing requests without a valid ``site_token`` cookie."""
    if not is_admin(request, settings):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Unauthorized: Admin access required",
        )


async def get_optional_briefing_repository(
    request: Request,
) -> AsyncGenerator[BriefingRepository | None, None]:
    """Repository when a datastore is configured, else None."""
    database = getattr(request.app.state, "database", None)
    if database is None:
        yield None
        return

    async with database.sessionmaker() as session:
        yield BriefingRepository(session)
