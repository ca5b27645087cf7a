"""Schemas for daily status and revalidation endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field, StrictBool


class DailyStatusUpdate(BaseModel):
    """Admin request to mark a date as processed (or not)."""

    date: str = Field(..., min_length=1)
    is_completed: StrictBool


class DailyStatusUpdateResponse(BaseModel):
    success: bool = True
    date: str
    is_completed: bool


class RevalidateRequest(BaseModel):
    """Targeted revalidation of one briefing date.

    ``date`` is validated by the handler after authorization so that an
    unauthenticated caller learns nothing about the input.
    """

    date: str | None = None
    secret: str | None = None


class RevalidateResponse(BaseModel):
    success: bool = True
    date: str
    revalidated_at: datetime = Field(serialization_alias="revalidatedAt")
