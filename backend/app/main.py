"""FastAPI application entry point."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.agents.dashboard_summary import DashboardSummaryAgent
from app.api.v1.router import api_router
from app.config import Settings, get_settings
from app.db.postgres import Database
from app.logging_config import get_logger, setup_logging
from app.middleware import AccessMiddleware
from app.services.cache_service import CacheError, DynamoDBCacheStore, build_cache_store
from app.services.freshrss_client import FreshRSSClient, FreshRSSError
from app.services.revalidation import Prewarmer
from app.services.stats_service import BotHitRecorder
from app.web import pages

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager for startup/shutdown events."""
    # Startup
    settings: Settings = app.state.settings
    logger.info("Starting %s in %s mode", settings.app_name, settings.environment)

    app.state.database = None
    app.state.bot_recorder = None
    if settings.database_configured:
        database = Database(settings)
        try:
            await database.init_models()
            logger.info("PostgreSQL tables initialized")
        except (SQLAlchemyError, OSError) as e:
            logger.warning("PostgreSQL init error (may be offline): %s", e)
        app.state.database = database
        app.state.bot_recorder = BotHitRecorder(database.sessionmaker)
    else:
        logger.warning("DATABASE_URL is not set, datastore endpoints will fail")

    app.state.freshrss = None
    if settings.freshrss_configured:
        app.state.freshrss = FreshRSSClient.from_settings(settings)
    else:
        logger.warning("FreshRSS is not configured, feed endpoints will fail")

    app.state.cache = build_cache_store(settings)
    if isinstance(app.state.cache, DynamoDBCacheStore):
        try:
            await app.state.cache.client.create_table_if_not_exists()
            logger.info("DynamoDB cache table initialized")
        except Exception as e:
            logger.warning("DynamoDB init error (may be offline): %s", e)

    app.state.prewarmer = Prewarmer()
    app.state.summary_agent = DashboardSummaryAgent(settings) if settings.gemini_api_key else None

    yield

    # Shutdown
    logger.info("Shutting down...")
    await app.state.prewarmer.close()
    if app.state.freshrss is not None:
        await app.state.freshrss.close()
    if app.state.database is not None:
        await app.state.database.dispose()


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = exc.errors()
        message = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'][1:])}: {error['msg']}" for error in errors
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": message or "Invalid request"},
        )

    @app.exception_handler(FreshRSSError)
    async def freshrss_error(request: Request, exc: FreshRSSError) -> JSONResponse:
        logger.error("FreshRSS error on %s: %s", request.url.path, exc, exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Error fetching from FreshRSS", "error": str(exc)},
        )

    @app.exception_handler(SQLAlchemyError)
    async def datastore_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        logger.error("Datastore error on %s: %s", request.url.path, exc, exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Datastore error", "error": str(exc)},
        )

    @app.exception_handler(CacheError)
    async def cache_error(request: Request, exc: CacheError) -> JSONResponse:
        logger.error("Cache error on %s: %s", request.url.path, exc, exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Cache error", "error": str(exc)},
        )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    app = FastAPI(
        title=settings.app_name,
        description="Daily AI briefings served from FreshRSS and Supabase",
        version="0.1.0",
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        lifespan=lifespan,
    )
    app.state.settings = settings

    register_exception_handlers(app)

    app.add_middleware(AccessMiddleware, settings=settings)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.site_url] if settings.site_url else ["http://localhost:3000"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include API router
    app.include_router(api_router, prefix=settings.api_v1_prefix)
    app.include_router(pages.router)

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy", "app": settings.app_name}

    return app


app = create_app()
