"""Per-date completion flag written by the enrichment pipeline."""

from sqlmodel import Field, SQLModel


class DailyBriefingStatus(SQLModel, table=True):
    """Whether the briefing for a calendar date has finished processing."""

    __tablename__ = "daily_briefing_status"

    date: str = Field(primary_key=True, max_length=10)  # YYYY-MM-DD
    is_completed: bool = Field(default=False)
