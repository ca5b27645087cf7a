"""Briefing data held in Supabase Postgres: articles, daily statuses, config."""

from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import text
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col, select

from app.constants.briefing import (
    AVAILABLE_DATES_TAG,
    BRIEFING_DATA_TAG,
    BRIEFING_SECTIONS,
    BRIEFING_TTL_SECONDS,
    DATES_TTL_SECONDS,
    REGULAR,
    briefing_tag,
)
from app.logging_config import get_logger
from app.models import AppConfig, ArticleRecord, DailyBriefingStatus
from app.schemas.article import Article, GroupedArticles, dump_grouped
from app.services.article_service import map_record
from app.services.cache_service import CacheStore, cached
from app.services.ranking import RankingStrategy, default_strategy
from app.utils.dates import is_date_string, shanghai_day_window, to_local_date

logger = get_logger(__name__)

SEARCH_PAGE_SIZE = 20


class BriefingRepository:
    """Queries against the tables written by the enrichment pipeline."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_articles_processed_between(
        self, start: datetime, end: datetime
    ) -> list[ArticleRecord]:
        query = (
            select(ArticleRecord)
            .where(col(ArticleRecord.n8n_processing_date) >= start)
            .where(col(ArticleRecord.n8n_processing_date) <= end)
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def list_processing_dates(self) -> list[datetime]:
        query = (
            select(ArticleRecord.n8n_processing_date)
            .where(col(ArticleRecord.n8n_processing_date).is_not(None))
            .order_by(col(ArticleRecord.n8n_processing_date).desc())
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def get_article(self, article_id: str) -> ArticleRecord | None:
        return await self.session.get(ArticleRecord, article_id)

    async def get_articles_by_ids(self, article_ids: list[str]) -> list[ArticleRecord]:
        if not article_ids:
            return []
        query = select(ArticleRecord).where(col(ArticleRecord.id).in_(article_ids))
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def search_articles(
        self, search_term: str, limit: int = SEARCH_PAGE_SIZE, offset: int = 0
    ) -> list[dict[str, Any]]:
        """Partial keyword search through the ``search_articles_by_partial_keyword`` function."""
        result = await self.session.execute(
            text(
                "SELECT * FROM search_articles_by_partial_keyword(:search_term) "
                "LIMIT :limit OFFSET :offset"
            ),
            {"search_term": search_term, "limit": limit, "offset": offset},
        )
        return [dict(row) for row in result.mappings().all()]

    async def get_daily_statuses(self, start_date: str, end_date: str) -> dict[str, bool]:
        query = (
            select(DailyBriefingStatus)
            .where(col(DailyBriefingStatus.date) >= start_date)
            .where(col(DailyBriefingStatus.date) <= end_date)
        )
        result = await self.session.execute(query)
        return {row.date: row.is_completed for row in result.scalars().all()}

    async def upsert_daily_status(self, date: str, is_completed: bool) -> None:
        statement = insert(DailyBriefingStatus).values(date=date, is_completed=is_completed)
        statement = statement.on_conflict_do_update(
            index_elements=["date"],
            set_={"is_completed": statement.excluded.is_completed},
        )
        await self.session.execute(statement)
        await self.session.commit()

    async def get_config(self, key: str) -> str | None:
        config = await self.session.get(AppConfig, key)
        return config.value if config else None

    async def set_config(self, key: str, value: str) -> None:
        statement = insert(AppConfig).values(key=key, value=value, updated_at=datetime.now(UTC))
        statement = statement.on_conflict_do_update(
            index_elements=["key"],
            set_={"value": statement.excluded.value, "updated_at": statement.excluded.updated_at},
        )
        await self.session.execute(statement)
        await self.session.commit()


def group_by_section(
    articles: Iterable[Article],
    strategy: RankingStrategy = default_strategy,
) -> GroupedArticles:
    """Split articles into the importance bands and rank each band.

    Articles whose section is not one of the bands go to the regular band.
    """
    groups: GroupedArticles = {section: [] for section in BRIEFING_SECTIONS}
    for article in articles:
        section = article.briefing_section if article.briefing_section in groups else REGULAR
        groups[section].append(article)

    return {section: strategy(items) for section, items in groups.items()}


def dedupe_by_id(articles: Iterable[Article]) -> list[Article]:
    unique: dict[str, Article] = {}
    for article in articles:
        unique.setdefault(article.id, article)
    return list(unique.values())


class BriefingService:
    """Builds the per-date briefing and the archive date list."""

    def __init__(
        self,
        repository: BriefingRepository,
        cache: CacheStore,
        strategy: RankingStrategy = default_strategy,
    ):
        self.repository = repository
        self.cache = cache
        self.strategy = strategy

    async def load_briefing(self, date: str) -> GroupedArticles:
        """Uncached briefing for a Shanghai calendar day."""
        if not is_date_string(date):
            logger.warning("Invalid date format for briefing: %s", date)
            return group_by_section([], self.strategy)

        try:
            start, end = shanghai_day_window(date)
        except ValueError:
            logger.warning("Not a calendar date: %s", date)
            return group_by_section([], self.strategy)

        records = await self.repository.list_articles_processed_between(start, end)
        articles = dedupe_by_id(map_record(record) for record in records)

        for article in articles:
            if article.briefing_section not in BRIEFING_SECTIONS:
                article.briefing_section = REGULAR

        logger.info("Loaded %d articles for briefing %s", len(articles), date)
        return group_by_section(articles, self.strategy)

    async def fetch_briefing(self, date: str) -> dict[str, list[dict[str, Any]]]:
        """Grouped, ranked briefing for ``date`` through the data cache."""

        async def loader() -> dict[str, list[dict[str, Any]]]:
            return dump_grouped(await self.load_briefing(date))

        return await cached(
            self.cache,
            f"{BRIEFING_DATA_TAG}:{date}",
            [BRIEFING_DATA_TAG, briefing_tag(date)],
            BRIEFING_TTL_SECONDS,
            loader,
        )

    async def get_available_dates(self) -> list[str]:
        """Distinct processing dates as Shanghai calendar days, newest first."""

        async def loader() -> list[str]:
            processed = await self.repository.list_processing_dates()
            dates = {to_local_date(value) for value in processed if value is not None}
            return sorted(dates, reverse=True)

        return await cached(
            self.cache,
            AVAILABLE_DATES_TAG,
            [AVAILABLE_DATES_TAG],
            DATES_TTL_SECONDS,
            loader,
        )

    async def search(self, query: str, page: int = 1) -> list[dict[str, Any]]:
        offset = (max(page, 1) - 1) * SEARCH_PAGE_SIZE
        rows = await self.repository.search_articles(query.strip(), SEARCH_PAGE_SIZE, offset)
        return [map_record(row).model_dump(by_alias=True) for row in rows]

    async def get_articles_by_ids(self, article_ids: list[str]) -> dict[str, dict[str, Any]]:
        records = await self.repository.get_articles_by_ids(article_ids)
        return {
            article.id: article.model_dump(by_alias=True)
            for article in (map_record(record) for record in records)
        }
