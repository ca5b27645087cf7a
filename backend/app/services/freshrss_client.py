"""Async client for the FreshRSS Google Reader API."""

from typing import Any

import httpx

from app.config import Settings
from app.logging_config import get_logger

logger = get_logger(__name__)

API_PATH = "/greader.php/reader/api/0"


class FreshRSSError(Exception):
    """FreshRSS answered with a non-2xx status or could not be reached."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class FreshRSSClient:
    """Thin wrapper around ``httpx.AsyncClient`` with GoogleLogin auth."""

    def __init__(
        self,
        api_url: str,
        auth_token: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        if not api_url or not auth_token:
            raise ValueError("FreshRSS API URL and auth token are required")

        self.http_client = httpx.AsyncClient(
            base_url=f"{api_url.rstrip('/')}{API_PATH}",
            headers={"Authorization": f"GoogleLogin auth={auth_token}"},
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "FreshRSSClient":
        return cls(settings.freshrss_api_url, settings.freshrss_auth_token)

    async def _request(
        self,
        method: str,
        path: str,
        params: dict[str, str] | None = None,
        data: dict[str, str | list[str]] | None = None,
    ) -> Any:
        try:
            response = await self.http_client.request(method, path, params=params, data=data)
        except httpx.HTTPError as e:
            raise FreshRSSError(f"FreshRSS request failed: {e}") from e

        if response.is_error:
            raise FreshRSSError(
                f"FreshRSS API Error: {response.status_code} {response.text}",
                status_code=response.status_code,
            )

        if "application/json" in response.headers.get("content-type", ""):
            return response.json()
        return response.text

    async def get(self, path: str, params: dict[str, str] | None = None) -> Any:
        return await self._request("GET", path, params=params)

    async def post(
        self,
        path: str,
        data: dict[str, str | list[str]],
        params: dict[str, str] | None = None,
    ) -> Any:
        """POST form fields. List values repeat the key (``i=..&i=..``)."""
        return await self._request("POST", path, params=params, data=data)

    async def get_action_token(self) -> str:
        """Short-lived token required by write endpoints such as ``edit-tag``."""
        token = await self._request("GET", "/token")
        return str(token).strip()

    async def close(self) -> None:
        await self.http_client.aclose()
