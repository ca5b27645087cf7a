"""Daily briefing endpoints."""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.api.deps import get_briefing_service
from app.services.briefing_service import BriefingService
from app.utils.dates import is_date_string

router = APIRouter()


@router.get("")
async def get_briefing(
    date: str | None = None,
    article_ids: list[str] | None = Query(default=None, alias="articleIds"),
    service: BriefingService = Depends(get_briefing_service),
) -> dict[str, Any]:
    """
    Articles of one day grouped by importance band and ranked by score.

    With ``articleIds`` the matching stored articles are returned keyed by
    id instead.
    """
    if article_ids:
        return await service.get_articles_by_ids(article_ids)

    if not date:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Date parameter is required.")
    if not is_date_string(date):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid date format")

    return await service.fetch_briefing(date)
