"""Article model mirroring the enrichment pipeline's ``articles`` table."""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Column, DateTime
from sqlmodel import Field, SQLModel


class ArticleRecord(SQLModel, table=True):
    """
    AI-enriched article. Rows are written by the external enrichment
    pipeline; this service only reads them.
    """

    __tablename__ = "articles"

    id: str = Field(primary_key=True, max_length=255)

    title: str = Field(default="")
    link: str = Field(default="")
    source_name: str = Field(default="", sa_column_kwargs={"name": "sourceName"})
    published: datetime | None = Field(default=None, sa_column=Column(DateTime(timezone=True)))
    created_at: datetime | None = Field(default=None, sa_column=Column(DateTime(timezone=True)))
    n8n_processing_date: datetime | None = Field(
        default=None, sa_column=Column(DateTime(timezone=True), index=True)
    )

    # Classification
    category: str | None = Field(default=None)
    briefing_section: str | None = Field(
        default=None, sa_column_kwargs={"name": "briefingSection"}
    )
    keywords: list[str] | None = Field(default=None, sa_column=Column(JSON))
    verdict: dict[str, Any] | None = Field(default=None, sa_column=Column(JSON))
    tags: list[str] | None = Field(default=None, sa_column=Column(JSON))

    # AI text fields (may hold JSON array strings)
    summary: str | None = Field(default=None)
    tldr: str | None = Field(default=None)
    highlights: str | None = Field(default=None)
    critiques: str | None = Field(default=None)
    market_take: str | None = Field(default=None, sa_column_kwargs={"name": "marketTake"})
