"""Admin session check for the UI."""

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from app.api.deps import get_settings, is_admin
from app.config import Settings

router = APIRouter()


@router.get("/check")
async def check_admin(request: Request, settings: Settings = Depends(get_settings)) -> JSONResponse:
    """``{isAdmin}`` for the caller's ``site_token`` cookie."""
    if not settings.access_token:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"isAdmin": False, "error": "Server misconfiguration"},
        )
    return JSONResponse(content={"isAdmin": is_admin(request, settings)})
