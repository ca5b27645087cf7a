"""Cache revalidation endpoints used by the enrichment pipeline and admin UI."""

import time
from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request, status

from app.api.deps import get_cache, get_prewarmer, get_settings
from app.config import Settings
from app.constants.briefing import SITE_TOKEN_COOKIE
from app.logging_config import get_logger
from app.schemas.briefing import RevalidateRequest, RevalidateResponse
from app.services.cache_service import CacheStore
from app.services.revalidation import Prewarmer, revalidate_date
from app.utils.auth import tokens_match
from app.utils.dates import is_date_string

logger = get_logger(__name__)

router = APIRouter()


def _authorized(request: Request, settings: Settings, secret: str | None) -> bool:
    """Shared secret from the caller, or the admin ``site_token`` cookie."""
    return tokens_match(secret, settings.revalidation_secret) or tokens_match(
        request.cookies.get(SITE_TOKEN_COOKIE), settings.access_token
    )


def _base_url(request: Request, settings: Settings) -> str:
    return (settings.site_url or str(request.base_url)).rstrip("/")


@router.post("/revalidate-date", response_model=RevalidateResponse, response_model_by_alias=True)
async def revalidate_briefing_date(
    body: RevalidateRequest,
    request: Request,
    settings: Settings = Depends(get_settings),
    cache: CacheStore = Depends(get_cache),
    prewarmer: Prewarmer = Depends(get_prewarmer),
) -> RevalidateResponse:
    """
    Invalidate one date's briefing data and pages, then pre-warm them.

    Authorization is checked before the date so that unauthenticated
    callers cannot probe input handling.
    """
    if not _authorized(request, settings, body.secret):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")

    if not body.date or not is_date_string(body.date):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid date format")

    paths = await revalidate_date(cache, body.date)

    base_url = _base_url(request, settings)
    prewarmer.schedule([f"{base_url}{path}" for path in paths])

    return RevalidateResponse(date=body.date, revalidated_at=datetime.now(UTC))


@router.api_route("/revalidate", methods=["GET", "POST"])
async def revalidate_tag(
    request: Request,
    tag: str | None = None,
    secret: str | None = None,
    settings: Settings = Depends(get_settings),
    cache: CacheStore = Depends(get_cache),
) -> dict[str, Any]:
    """Invalidate a single data-cache tag, e.g. ``available-dates``."""
    if not _authorized(request, settings, secret):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

    if not tag:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing tag parameter")

    await cache.invalidate_tag(tag)
    logger.info("Revalidated tag %s", tag)
    return {"revalidated": True, "tag": tag, "now": int(time.time() * 1000)}
