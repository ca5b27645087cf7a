"""Server-rendered briefing pages and the sitemap.

Rendered HTML is kept in the page cache under the request path, so a
revalidation of ``/date/<date>`` (and ``/`` for today) drops exactly the
pages that show that date.
"""

from pathlib import Path
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import HTMLResponse, Response
from fastapi.templating import Jinja2Templates

from app.api.deps import (
    get_article_service,
    get_briefing_repository,
    get_briefing_service,
    get_cache,
    get_settings,
)
from app.config import Settings
from app.constants.briefing import BRIEFING_TTL_SECONDS, HOME_PATH, date_page_path
from app.logging_config import get_logger
from app.services.article_service import ArticleService, map_record
from app.services.briefing_service import BriefingRepository, BriefingService
from app.services.cache_service import CacheStore
from app.services.freshrss_client import FreshRSSError
from app.utils.content import strip_tags
from app.utils.dates import is_date_string, today_in
from app.utils.ids import to_full_id, to_short_id

logger = get_logger(__name__)

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))
templates.env.filters["short_id"] = to_short_id

SITEMAP_CACHE_CONTROL = "s-maxage=3600, stale-while-revalidate=86400"
DESCRIPTION_LENGTH = 160

router = APIRouter()


async def _render_briefing(
    path: str,
    date: str,
    settings: Settings,
    service: BriefingService,
    cache: CacheStore,
) -> HTMLResponse:
    html = await cache.get_page(path)
    if html is not None:
        return HTMLResponse(html, headers={"X-Cache": "HIT"})

    sections = await service.fetch_briefing(date)
    dates = await service.get_available_dates()
    html = templates.get_template("briefing.html").render(
        app_name=settings.app_name,
        date=date,
        sections=sections,
        total=sum(len(articles) for articles in sections.values()),
        dates=dates,
    )

    await cache.set_page(path, html, BRIEFING_TTL_SECONDS)
    logger.info("Rendered %s", path)
    return HTMLResponse(html, headers={"X-Cache": "MISS"})


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
async def home(
    settings: Settings = Depends(get_settings),
    service: BriefingService = Depends(get_briefing_service),
    cache: CacheStore = Depends(get_cache),
) -> HTMLResponse:
    """Today's briefing (Asia/Shanghai)."""
    return await _render_briefing(HOME_PATH, today_in(), settings, service, cache)


@router.get("/date/{date}", response_class=HTMLResponse, include_in_schema=False)
async def briefing_page(
    date: str,
    settings: Settings = Depends(get_settings),
    service: BriefingService = Depends(get_briefing_service),
    cache: CacheStore = Depends(get_cache),
) -> HTMLResponse:
    if not is_date_string(date):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")
    return await _render_briefing(date_page_path(date), date, settings, service, cache)


@router.get("/article/{short_id}", response_class=HTMLResponse, include_in_schema=False)
async def article_page(
    short_id: str,
    settings: Settings = Depends(get_settings),
    repository: BriefingRepository = Depends(get_briefing_repository),
    articles: ArticleService = Depends(get_article_service),
    cache: CacheStore = Depends(get_cache),
) -> HTMLResponse:
    """Single stored article with its full FreshRSS content."""
    path = f"/article/{short_id}"
    html = await cache.get_page(path)
    if html is not None:
        return HTMLResponse(html, headers={"X-Cache": "HIT"})

    record = await repository.get_article(to_full_id(short_id))
    if record is None:
        logger.warning("Article not found: %s", short_id)
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Article not found")

    article = map_record(record)
    try:
        content = await articles.get_content(article.id, article.title)
    except FreshRSSError as e:
        logger.warning("Content unavailable for %s: %s", article.id, e)
        content = None

    description = strip_tags(article.summary or article.tldr)[:DESCRIPTION_LENGTH]
    html = templates.get_template("article.html").render(
        app_name=settings.app_name,
        article=article.model_dump(by_alias=True),
        content=content.content if content else "",
        description=description,
    )

    await cache.set_page(path, html, BRIEFING_TTL_SECONDS)
    return HTMLResponse(html, headers={"X-Cache": "MISS"})


@router.get("/sitemap.xml", include_in_schema=False)
async def sitemap(
    request: Request,
    settings: Settings = Depends(get_settings),
    service: BriefingService = Depends(get_briefing_service),
) -> Response:
    """Homepage plus one entry per archived date."""
    base_url = (settings.site_url or str(request.base_url)).rstrip("/")
    dates = await service.get_available_dates()

    urls: list[dict[str, Any]] = [
        {"loc": f"{base_url}/", "changefreq": "daily", "priority": "1.0"},
    ]
    urls.extend(
        {
            "loc": f"{base_url}{date_page_path(date)}",
            "lastmod": date,
            "changefreq": "weekly",
            "priority": "0.8",
        }
        for date in dates
    )

    xml = templates.get_template("sitemap.xml").render(urls=urls)
    return Response(
        content=xml,
        media_type="application/xml",
        headers={"Cache-Control": SITEMAP_CACHE_CONTROL},
    )
