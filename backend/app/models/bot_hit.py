"""Crawler and scanner hits recorded by the bot guard."""

from datetime import UTC, datetime

from sqlalchemy import Column, DateTime
from sqlmodel import Field, SQLModel


class BotHit(SQLModel, table=True):
    __tablename__ = "bot_hits"

    id: int | None = Field(default=None, primary_key=True)
    bot_name: str = Field(max_length=100, index=True)
    path: str = Field(max_length=2048)
    user_agent: str = Field(default="")
    status: int = Field(index=True)
    ip_country: str | None = Field(default=None, max_length=8)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(DateTime(timezone=True), index=True),
    )
