"""Article search, FreshRSS streams, read/star state and full content."""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.exc import SQLAlchemyError

from app.api.deps import (
    get_article_service,
    get_briefing_service,
    get_optional_briefing_repository,
    get_settings,
    is_admin,
    require_admin_write,
)
from app.config import Settings
from app.logging_config import get_logger
from app.schemas.article import ArticleStateUpdate, StreamResponse
from app.services.article_service import ArticleService
from app.services.briefing_service import BriefingRepository, BriefingService
from app.utils.ids import to_full_id

logger = get_logger(__name__)

router = APIRouter()


@router.get("/search", dependencies=[Depends(require_admin_write)])
async def search_articles(
    query: str | None = None,
    page: int = 1,
    service: BriefingService = Depends(get_briefing_service),
) -> list[dict[str, Any]]:
    """Partial keyword search over stored articles. Admin only."""
    if not query or not query.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Search query parameter is required.",
        )
    return await service.search(query, page)


@router.get("/stream", response_model=StreamResponse)
async def get_stream(
    value: str | None = None,
    n: str | None = None,
    c: str | None = None,
    articles: ArticleService = Depends(get_article_service),
) -> StreamResponse:
    """One page of a category or label stream. ``c`` continues a previous page."""
    if not value:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Stream ID is required.")
    return await articles.get_stream(value, count=n, continuation=c)


@router.post("/state")
async def article_state(
    body: ArticleStateUpdate,
    request: Request,
    settings: Settings = Depends(get_settings),
    articles: ArticleService = Depends(get_article_service),
) -> dict[str, Any]:
    """
    Read or change article tags.

    With only ``articleIds`` this returns ``{id: [tags]}``. Any of
    ``action``, ``isAdding``, ``tagsToAdd`` or ``tagsToRemove`` makes it an
    admin-only update.
    """
    if not body.is_update:
        return await articles.get_states(body.article_ids or [])

    if not is_admin(request, settings):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Unauthorized: Admin access required",
        )

    has_change = (
        (body.action and body.is_adding is not None) or body.tags_to_add or body.tags_to_remove
    )
    if not body.ids or not has_change:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Missing required parameters"
        )

    await articles.update_state(
        body.ids,
        action=body.action,
        is_adding=body.is_adding,
        tags_to_add=body.tags_to_add,
        tags_to_remove=body.tags_to_remove,
    )
    logger.info("Updated state of %d article(s)", len(body.ids))
    return {"success": True}


@router.get("/{article_id:path}/content")
async def get_article_content(
    article_id: str,
    include_state: bool = False,
    articles: ArticleService = Depends(get_article_service),
    repository: BriefingRepository | None = Depends(get_optional_briefing_repository),
) -> dict[str, Any]:
    """Cleaned article HTML. Accepts short or fully-qualified ids."""
    full_id = to_full_id(article_id)

    title = None
    if repository is not None:
        try:
            record = await repository.get_article(full_id)
            title = record.title if record and record.title else None
        except SQLAlchemyError as e:
            logger.warning("Title lookup failed for %s: %s", full_id, e)

    content = await articles.get_content(full_id, title)
    if content is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Article content not found.")

    data = content.model_dump()
    if include_state:
        states = await articles.get_states([full_id])
        data["tags"] = states.get(full_id, [])
    return data
