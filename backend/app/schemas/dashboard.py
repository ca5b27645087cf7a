"""Admin dashboard schemas."""

from datetime import datetime

from pydantic import BaseModel, Field


class DailyCount(BaseModel):
    date: str
    count: int


class LabelCount(BaseModel):
    label: str
    count: int


class BotStat(BaseModel):
    name: str
    allowed_count: int = 0
    blocked_count: int = 0


class PathCount(BaseModel):
    path: str
    count: int


class ContentStats(BaseModel):
    total_articles: int = 0
    today_added: int = 0
    daily_trend: list[DailyCount] = Field(default_factory=list)
    verdict_distribution: list[LabelCount] = Field(default_factory=list)


class SecurityStats(BaseModel):
    today_blocked: int = 0
    top_bots: list[BotStat] = Field(default_factory=list)
    blocked_paths: list[PathCount] = Field(default_factory=list)


class DashboardStats(BaseModel):
    content: ContentStats
    security: SecurityStats
    last_updated: datetime


class DashboardSummaryResponse(BaseModel):
    ai_summary: str = Field(serialization_alias="aiSummary")
