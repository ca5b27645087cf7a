"""Article mapping and FreshRSS-backed article operations."""

from datetime import UTC, datetime, timedelta
from typing import Any
from urllib.parse import unquote, urlparse

from app.constants.briefing import READ_TAG, STAR_TAG, STATE_TAG_MARKERS
from app.logging_config import get_logger
from app.models import ArticleRecord
from app.schemas.article import Article, ArticleContent, AvailableFilters, StreamResponse, Tag
from app.schemas.freshrss import FreshRSSItem, StreamContents, TagList
from app.services.freshrss_client import FreshRSSClient, FreshRSSError
from app.utils.content import clean_ai_content, clean_article_html
from app.utils.ids import to_full_id

logger = get_logger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)

ACTION_TAGS = {
    "star": STAR_TAG,
    "read": READ_TAG,
}


def _iso_utc(value: datetime) -> str:
    return value.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def published_to_iso(seconds: int | float | None) -> str:
    """Unix seconds to an ISO-8601 UTC timestamp with millisecond precision."""
    milliseconds = int((seconds or 0) * 1000)
    return _iso_utc(_EPOCH + timedelta(milliseconds=milliseconds))


def map_feed_item(item: FreshRSSItem | dict[str, Any]) -> Article:
    """Normalize a raw FreshRSS item. Never fails on missing fields."""
    if not isinstance(item, FreshRSSItem):
        item = FreshRSSItem.model_validate(item)

    annotation_tags = [annotation.id for annotation in item.annotations if annotation.id]

    return Article(
        id=item.id or "",
        title=item.title or "",
        link=item.alternate[0].href if item.alternate else "",
        source_name=(item.origin.title if item.origin else None) or "",
        published=published_to_iso(item.published),
        tags=[*item.categories, *annotation_tags],
    )


def map_record(record: ArticleRecord | dict[str, Any]) -> Article:
    """Convert a stored article row into the API shape with cleaned AI fields."""
    if isinstance(record, ArticleRecord):
        record = record.model_dump()

    def iso(value: Any) -> str | None:
        if isinstance(value, datetime):
            return _iso_utc(value if value.tzinfo else value.replace(tzinfo=UTC))
        return value

    verdict = record.get("verdict") or None
    section = (
        (verdict or {}).get("importance")
        or record.get("briefing_section")
        or record.get("briefingSection")
        or ""
    )

    return Article(
        id=str(record.get("id") or ""),
        title=record.get("title") or "",
        link=record.get("link") or "",
        source_name=record.get("source_name") or record.get("sourceName") or "",
        published=iso(record.get("published")) or "",
        created_at=iso(record.get("created_at")),
        n8n_processing_date=iso(record.get("n8n_processing_date")),
        category=record.get("category") or "",
        briefing_section=section,
        keywords=record.get("keywords") or [],
        verdict=verdict,
        summary=clean_ai_content(record.get("summary")),
        tldr=clean_ai_content(record.get("tldr")),
        highlights=clean_ai_content(record.get("highlights")),
        critiques=clean_ai_content(record.get("critiques")),
        market_take=clean_ai_content(record.get("market_take") or record.get("marketTake")),
        tags=record.get("tags") or [],
    )


class ArticleService:
    """Reads and writes article data held by FreshRSS."""

    def __init__(self, freshrss: FreshRSSClient):
        self.freshrss = freshrss

    async def get_stream(
        self,
        stream_id: str,
        count: str | None = None,
        continuation: str | None = None,
    ) -> StreamResponse:
        """Articles in a category or label stream, without content."""
        # '/' must stay literal for FreshRSS to parse the stream path
        safe_stream_id = stream_id.replace("&", "%26")

        params = {"output": "json", "excludeContent": "1"}
        if count:
            params["n"] = count
        if continuation:
            params["c"] = continuation

        data = await self.freshrss.get(f"/stream/contents/{safe_stream_id}", params)
        contents = StreamContents.model_validate(data)

        return StreamResponse(
            articles=[map_feed_item(item) for item in contents.items],
            continuation=contents.continuation,
        )

    async def get_available_filters(self) -> AvailableFilters:
        """Folders as categories and labels as tags, state tags skipped."""
        data = await self.freshrss.get("/tag/list", {"output": "json", "with_counts": "1"})
        tag_list = TagList.model_validate(data)

        categories: list[Tag] = []
        tags: list[Tag] = []
        for item in tag_list.tags:
            if any(marker in item.id for marker in STATE_TAG_MARKERS):
                continue

            label = unquote(item.id.rsplit("/", 1)[-1])
            tag = Tag(id=item.id, label=label, count=item.count)
            if item.type == "folder":
                categories.append(tag)
            else:
                tags.append(tag)

        categories.sort(key=lambda t: t.label)
        tags.sort(key=lambda t: t.label)
        return AvailableFilters(categories=categories, tags=tags)

    async def get_states(self, article_ids: list[str]) -> dict[str, list[str]]:
        """Current tags (folders, labels, read/starred) for each article."""
        if not article_ids:
            return {}

        data = await self.freshrss.post(
            "/stream/items/contents",
            {"i": [to_full_id(article_id) for article_id in article_ids]},
            params={"output": "json", "excludeContent": "1"},
        )
        contents = StreamContents.model_validate(data)

        states: dict[str, list[str]] = {}
        for item in contents.items:
            annotation_tags = [a.id for a in item.annotations if a.id]
            # dict.fromkeys keeps first-seen order while de-duplicating
            states[item.id] = list(dict.fromkeys([*item.categories, *annotation_tags]))
        return states

    async def update_state(
        self,
        article_ids: list[str],
        action: str | None = None,
        is_adding: bool | None = None,
        tags_to_add: list[str] | None = None,
        tags_to_remove: list[str] | None = None,
    ) -> None:
        """Add or remove tags through ``edit-tag``."""
        token = await self.freshrss.get_action_token()

        add: list[str] = []
        remove: list[str] = []
        tag = ACTION_TAGS.get(action or "")
        if tag and is_adding is not None:
            (add if is_adding else remove).append(tag)
        add.extend(tags_to_add or [])
        remove.extend(tags_to_remove or [])

        form: dict[str, str | list[str]] = {
            "i": [to_full_id(article_id) for article_id in article_ids],
            "T": token,
        }
        if add:
            form["a"] = add
        if remove:
            form["r"] = remove

        response = await self.freshrss.post("/edit-tag", form)
        if str(response).strip() != "OK":
            raise FreshRSSError(f"Failed to update state. FreshRSS responded with: {response}")

    async def get_content(self, article_id: str, title: str | None = None) -> ArticleContent | None:
        """Full article HTML, cleaned for display."""
        data = await self.freshrss.post(
            "/stream/items/contents",
            {"i": to_full_id(article_id)},
            params={"output": "json"},
        )
        contents = StreamContents.model_validate(data)
        if not contents.items:
            return None

        item = contents.items[0]
        source = item.origin.title if item.origin and item.origin.title else ""
        if not source and item.canonical:
            source = urlparse(item.canonical[0].href).hostname or ""

        final_title = title or item.title or ""
        return ArticleContent(
            title=final_title,
            content=clean_article_html(item.html, final_title),
            source=source,
        )
