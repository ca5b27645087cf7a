"""Per-date briefing completion flags."""

from fastapi import APIRouter, Depends, HTTPException, Response, status

from app.api.deps import get_briefing_repository, require_admin_write
from app.logging_config import get_logger
from app.schemas.briefing import DailyStatusUpdate, DailyStatusUpdateResponse
from app.services.briefing_service import BriefingRepository

logger = get_logger(__name__)

router = APIRouter()


@router.get("", response_model=dict[str, bool])
async def get_daily_statuses(
    response: Response,
    start_date: str | None = None,
    end_date: str | None = None,
    repository: BriefingRepository = Depends(get_briefing_repository),
) -> dict[str, bool]:
    """Completion flag per date in the inclusive range."""
    if not start_date or not end_date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="start_date and end_date parameters are required.",
        )

    statuses = await repository.get_daily_statuses(start_date, end_date)
    response.headers["Cache-Control"] = "no-store, max-age=0"
    return statuses


@router.post(
    "",
    response_model=DailyStatusUpdateResponse,
    dependencies=[Depends(require_admin_write)],
)
async def update_daily_status(
    update: DailyStatusUpdate,
    repository: BriefingRepository = Depends(get_briefing_repository),
) -> DailyStatusUpdateResponse:
    """Mark a date as completed or not. Admin only."""
    await repository.upsert_daily_status(update.date, update.is_completed)
    logger.info("Daily status for %s set to %s", update.date, update.is_completed)
    return DailyStatusUpdateResponse(date=update.date, is_completed=update.is_completed)
