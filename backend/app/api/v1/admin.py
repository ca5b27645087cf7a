"""Admin dashboard endpoints."""

from fastapi import APIRouter, Depends

from app.agents.dashboard_summary import FAILED_SUMMARY, DashboardSummaryAgent
from app.api.deps import get_stats_service, get_summary_agent, require_admin
from app.logging_config import get_logger
from app.schemas.dashboard import DashboardStats, DashboardSummaryResponse
from app.services.stats_service import StatsService

logger = get_logger(__name__)

router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("/stats", response_model=DashboardStats)
async def get_stats(stats: StatsService = Depends(get_stats_service)) -> DashboardStats:
    """Content and bot-guard statistics."""
    return await stats.get_dashboard_stats()


@router.get("/stats/ai", response_model=DashboardSummaryResponse, response_model_by_alias=True)
async def get_stats_summary(
    stats: StatsService = Depends(get_stats_service),
    agent: DashboardSummaryAgent | None = Depends(get_summary_agent),
) -> DashboardSummaryResponse:
    """Short AI-written reading of the dashboard statistics."""
    dashboard = await stats.get_dashboard_stats()
    if agent is None:
        logger.warning("GEMINI_API_KEY is not set, skipping dashboard summary")
        return DashboardSummaryResponse(ai_summary=FAILED_SUMMARY)
    return DashboardSummaryResponse(ai_summary=await agent.summarize(dashboard))
