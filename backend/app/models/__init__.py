"""Models package - SQLModel database models."""

from app.models.app_config import AppConfig
from app.models.article import ArticleRecord
from app.models.bot_hit import BotHit
from app.models.daily_status import DailyBriefingStatus

__all__ = ["ArticleRecord", "DailyBriefingStatus", "AppConfig", "BotHit"]
