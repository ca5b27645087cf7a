"""API v1 main router - aggregates all endpoint routers."""

from fastapi import APIRouter

from app.api.v1 import admin, articles, auth, briefings, daily_statuses, meta, system

api_router = APIRouter()

# Reading
api_router.include_router(briefings.router, prefix="/briefings", tags=["briefings"])
api_router.include_router(articles.router, prefix="/articles", tags=["articles"])
api_router.include_router(meta.router, prefix="/meta", tags=["meta"])
api_router.include_router(daily_statuses.router, prefix="/daily-statuses", tags=["daily-statuses"])

# Admin and system
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
api_router.include_router(system.router, prefix="/system", tags=["system"])
