"""Request guard: legacy redirects, bot filtering and URL-token login."""

from urllib.parse import unquote

from fastapi import Request
from fastapi.responses import PlainTextResponse, RedirectResponse, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from app.config import Settings
from app.constants.briefing import ARTICLE_ID_PREFIX, SITE_TOKEN_COOKIE, SITE_TOKEN_MAX_AGE
from app.constants.security import (
    AI_ARCHIVE_BOTS_PATTERN,
    COUNTRY_HEADERS,
    EXEMPT_PATHS,
    MIN_USER_AGENT_LENGTH,
    SEARCH_ENGINE_BOTS_PATTERN,
    SEO_SCRAPER_BOTS_PATTERN,
    UTILITY_BOTS_PATTERN,
    is_malicious_path,
    search_engine_name,
)
from app.logging_config import get_logger
from app.services.revalidation import spawn_background
from app.utils.auth import tokens_match

logger = get_logger(__name__)


def legacy_article_redirect(request: Request) -> Response | None:
    """301 ``/article/tag:google.com,2005:reader/item/<id>`` to ``/article/<id>``."""
    path = unquote(request.url.path)
    if ARTICLE_ID_PREFIX not in path:
        return None

    short_id = path.split(ARTICLE_ID_PREFIX, 1)[1]
    if not short_id or "/" in short_id:
        return None

    target = request.url.replace(path=f"/article/{short_id}")
    return RedirectResponse(str(target), status_code=301)


class AccessMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, settings: Settings):
        super().__init__(app)
        self.settings = settings

    def _record(self, request: Request, bot_name: str, user_agent: str, status: int) -> None:
        recorder = getattr(request.app.state, "bot_recorder", None)
        if recorder is None:
            return
        country = next(
            (request.headers[h] for h in COUNTRY_HEADERS if h in request.headers), None
        )
        spawn_background(
            recorder.record(bot_name, request.url.path, user_agent, status, country)
        )

    def _guard(self, request: Request) -> Response | None:
        """Return a 403 response for unwanted clients, else None."""
        path = request.url.path
        user_agent = request.headers.get("user-agent", "")

        if UTILITY_BOTS_PATTERN.search(user_agent):
            return None

        if is_malicious_path(path):
            logger.warning("[SECURITY-BLOCKED] Malicious path: %s | Agent: %s", path, user_agent)
            self._record(request, "Malicious-Scanner", user_agent, 403)
            return PlainTextResponse("Access Denied: Path is not permitted.", status_code=403)

        if SEARCH_ENGINE_BOTS_PATTERN.search(user_agent):
            self._record(request, search_engine_name(user_agent), user_agent, 200)
            return None

        if len(user_agent) < MIN_USER_AGENT_LENGTH:
            return PlainTextResponse("Access Denied: Suspicious request source.", status_code=403)

        if SEO_SCRAPER_BOTS_PATTERN.search(user_agent):
            logger.warning("[BOT-BLOCKED] Scraper: %s | Path: %s", user_agent, path)
            self._record(request, "SEO-Scraper", user_agent, 403)
            return PlainTextResponse(
                "Access Denied: Automated scraping is not permitted.", status_code=403
            )

        if AI_ARCHIVE_BOTS_PATTERN.search(user_agent):
            logger.warning("[BOT-BLOCKED] AI/Archive: %s | Path: %s", user_agent, path)
            self._record(request, "AI-Bot", user_agent, 403)
            return PlainTextResponse(
                "Access Denied: AI training/archiving is restricted.", status_code=403
            )

        return None

    def _login(self, request: Request) -> Response | None:
        """Handle ``?token=`` login and ``?logout=true``."""
        access_token = self.settings.access_token
        if not access_token:
            return None

        if tokens_match(request.query_params.get("token"), access_token):
            target = request.url.remove_query_params("token")
            response = RedirectResponse(str(target), status_code=307)
            response.set_cookie(
                SITE_TOKEN_COOKIE,
                access_token,
                max_age=SITE_TOKEN_MAX_AGE,
                path="/",
                httponly=True,
                secure=True,
                samesite="strict",
            )
            logger.info("Admin login via URL token")
            return response

        if request.query_params.get("logout") == "true":
            response = RedirectResponse("/", status_code=307)
            response.delete_cookie(
                SITE_TOKEN_COOKIE, path="/", httponly=True, secure=True, samesite="strict"
            )
            return response

        return None

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        path = request.url.path

        redirect = legacy_article_redirect(request)
        if redirect is not None:
            return redirect

        if path in EXEMPT_PATHS or path.startswith(self.settings.api_v1_prefix):
            return await call_next(request)

        if self.settings.bot_guard_enabled:
            blocked = self._guard(request)
            if blocked is not None:
                return blocked

        login = self._login(request)
        if login is not None:
            return login

        return await call_next(request)
