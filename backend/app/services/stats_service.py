"""Admin dashboard statistics and bot-hit recording."""

from datetime import UTC, datetime, timedelta

from sqlalchemy import Integer, case, cast, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlmodel import col, select

from app.logging_config import get_logger
from app.models import ArticleRecord, BotHit
from app.schemas.dashboard import (
    BotStat,
    ContentStats,
    DailyCount,
    DashboardStats,
    LabelCount,
    PathCount,
    SecurityStats,
)
from app.utils.dates import day_start_utc

logger = get_logger(__name__)

TREND_DAYS = 7
TOP_LIMIT = 10
BLOCKED_STATUS = 403


class StatsService:
    """Aggregates over ``articles`` and ``bot_hits``."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _count(self, query) -> int:
        result = await self.session.execute(query)
        return int(result.scalar_one() or 0)

    async def get_content_stats(self, today_start: datetime) -> ContentStats:
        total = await self._count(select(func.count()).select_from(ArticleRecord))
        today_added = await self._count(
            select(func.count())
            .select_from(ArticleRecord)
            .where(col(ArticleRecord.n8n_processing_date) >= today_start)
        )

        local_day = func.to_char(
            func.timezone("Asia/Shanghai", col(ArticleRecord.n8n_processing_date)), "YYYY-MM-DD"
        )
        trend_query = (
            select(local_day.label("day"), func.count().label("count"))
            .where(col(ArticleRecord.n8n_processing_date) >= today_start - timedelta(days=TREND_DAYS - 1))
            .group_by(local_day)
            .order_by(local_day)
        )
        trend = (await self.session.execute(trend_query)).all()

        importance = ArticleRecord.__table__.c.verdict["importance"].as_string()
        verdict_query = (
            select(importance.label("label"), func.count().label("count"))
            .where(importance.is_not(None))
            .group_by(importance)
            .order_by(func.count().desc())
        )
        verdicts = (await self.session.execute(verdict_query)).all()

        return ContentStats(
            total_articles=total,
            today_added=today_added,
            daily_trend=[DailyCount(date=row.day, count=row.count) for row in trend],
            verdict_distribution=[LabelCount(label=row.label, count=row.count) for row in verdicts],
        )

    async def get_security_stats(self, today_start: datetime) -> SecurityStats:
        today_blocked = await self._count(
            select(func.count())
            .select_from(BotHit)
            .where(col(BotHit.created_at) >= today_start)
            .where(BotHit.status == BLOCKED_STATUS)
        )

        blocked = func.sum(cast(case((BotHit.status == BLOCKED_STATUS, 1), else_=0), Integer))
        allowed = func.sum(cast(case((BotHit.status < 400, 1), else_=0), Integer))
        bots_query = (
            select(
                col(BotHit.bot_name),
                allowed.label("allowed_count"),
                blocked.label("blocked_count"),
            )
            .group_by(col(BotHit.bot_name))
            .order_by(func.count().desc())
            .limit(TOP_LIMIT)
        )
        bots = (await self.session.execute(bots_query)).all()

        paths_query = (
            select(col(BotHit.path), func.count().label("count"))
            .where(BotHit.status == BLOCKED_STATUS)
            .group_by(col(BotHit.path))
            .order_by(func.count().desc())
            .limit(TOP_LIMIT)
        )
        paths = (await self.session.execute(paths_query)).all()

        return SecurityStats(
            today_blocked=today_blocked,
            top_bots=[
                BotStat(
                    name=row.bot_name,
                    allowed_count=row.allowed_count or 0,
                    blocked_count=row.blocked_count or 0,
                )
                for row in bots
            ],
            blocked_paths=[PathCount(path=row.path, count=row.count) for row in paths],
        )

    async def get_dashboard_stats(self, now: datetime | None = None) -> DashboardStats:
        now = now or datetime.now(UTC)
        today_start = day_start_utc(now=now)
        return DashboardStats(
            content=await self.get_content_stats(today_start),
            security=await self.get_security_stats(today_start),
            last_updated=now,
        )


class BotHitRecorder:
    """Writes bot guard decisions to ``bot_hits`` with its own session."""

    def __init__(self, sessionmaker: async_sessionmaker[AsyncSession]):
        self.sessionmaker = sessionmaker

    async def record(
        self,
        bot_name: str,
        path: str,
        user_agent: str,
        status: int,
        ip_country: str | None = None,
    ) -> None:
        """Never raises; a failed insert is only logged."""
        hit = BotHit(
            bot_name=bot_name,
            path=path,
            user_agent=user_agent,
            status=status,
            ip_country=ip_country,
        )
        try:
            async with self.sessionmaker() as session:
                session.add(hit)
                await session.commit()
        except SQLAlchemyError as e:
            logger.warning("Failed to record bot hit for %s: %s", bot_name, e)
