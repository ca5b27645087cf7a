"""Free-form key/value application config."""

from datetime import UTC, datetime

from sqlalchemy import Column, DateTime
from sqlmodel import Field, SQLModel


class AppConfig(SQLModel, table=True):
    """Stores prompts and other operator-edited settings."""

    __tablename__ = "app_config"

    key: str = Field(primary_key=True, max_length=255)
    value: str = Field(default="")
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(DateTime(timezone=True)),
    )
