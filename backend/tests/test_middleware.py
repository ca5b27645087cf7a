"""Tests for legacy redirects, the bot guard and URL-token login."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.constants.security import is_malicious_path, search_engine_name

from tests.fakes import ACCESS_TOKEN, FakeRecorder

BROWSER = "Mozilla/5.0 (X11; Linux x86_64) Firefox/128.0"


@pytest.fixture
def recorder(app: FastAPI, client: TestClient) -> FakeRecorder:
    fake = FakeRecorder()
    app.state.bot_recorder = fake
    return fake


class TestSecurityRules:
    def test_search_engine_names(self) -> None:
        assert search_engine_name("Mozilla/5.0 (compatible; Googlebot/2.1)") == "Googlebot"
        assert search_engine_name("Mozilla/5.0 (compatible; Bytespider)") == "Bytespider"
        assert search_engine_name("facebookexternalhit/1.1") == "Facebook"
        assert search_engine_name("SomethingElse") == "Search-Engine"

    def test_malicious_paths(self) -> None:
        assert is_malicious_path("/wp-login.php")
        assert is_malicious_path("/.env")
        assert is_malicious_path("/.git/config")
        assert is_malicious_path("/index.php")
        assert not is_malicious_path("/date/2025-01-15")


class TestBotGuard:
    def test_browser_passes(self, client: TestClient) -> None:
        assert client.get("/", headers={"User-Agent": BROWSER}).status_code == 200

    def test_ai_crawler_blocked_and_recorded(
        self, client: TestClient, recorder: FakeRecorder
    ) -> None:
        ua = "Mozilla/5.0 (compatible; GPTBot/1.2; +https://openai.com/gptbot)"

        response = client.get("/date/2025-01-15", headers={"User-Agent": ua})

        assert response.status_code == 403
        assert response.text == "Access Denied: AI training/archiving is restricted."
        assert recorder.calls == [("AI-Bot", "/date/2025-01-15", ua, 403, None)]

    def test_seo_scraper_blocked(self, client: TestClient, recorder: FakeRecorder) -> None:
        response = client.get("/", headers={"User-Agent": "Mozilla/5.0 (compatible; AhrefsBot/7.0)"})

        assert response.status_code == 403
        assert recorder.calls[0][0] == "SEO-Scraper"

    def test_short_user_agent_blocked_without_record(
        self, client: TestClient, recorder: FakeRecorder
    ) -> None:
        response = client.get("/", headers={"User-Agent": "curl/8"})

        assert response.status_code == 403
        assert response.text == "Access Denied: Suspicious request source."
        assert recorder.calls == []

    def test_malicious_path_blocked(self, client: TestClient, recorder: FakeRecorder) -> None:
        response = client.get("/wp-login.php", headers={"User-Agent": BROWSER})

        assert response.status_code == 403
        assert recorder.calls[0][:2] == ("Malicious-Scanner", "/wp-login.php")

    def test_search_engine_allowed_and_recorded(
        self, client: TestClient, recorder: FakeRecorder
    ) -> None:
        ua = "Mozilla/5.0 (compatible; Googlebot/2.1; +http://www.google.com/bot.html)"

        response = client.get("/", headers={"User-Agent": ua, "CF-IPCountry": "US"})

        assert response.status_code == 200
        assert recorder.calls == [("Googlebot", "/", ua, 200, "US")]

    def test_utility_bots_pass_silently(self, client: TestClient, recorder: FakeRecorder) -> None:
        response = client.get("/", headers={"User-Agent": "BriefingHub-Prewarmer/1.0"})

        assert response.status_code == 200
        assert recorder.calls == []

    def test_exempt_paths(self, client: TestClient) -> None:
        ua = "GPTBot/1.0"

        assert client.get("/health", headers={"User-Agent": ua}).status_code == 200
        assert client.get("/sitemap.xml", headers={"User-Agent": ua}).status_code == 200
        assert client.get("/api/v1/auth/check", headers={"User-Agent": "x"}).status_code == 200

    def test_guard_can_be_disabled(self, app: FastAPI, client: TestClient) -> None:
        app.state.settings.bot_guard_enabled = False

        response = client.get("/", headers={"User-Agent": "GPTBot/1.0"})

        assert response.status_code == 200


class TestTokenLogin:
    def test_token_sets_cookie_and_cleans_url(self, client: TestClient) -> None:
        response = client.get(
            "/date/2025-01-15",
            params={"token": ACCESS_TOKEN, "ref": "mail"},
            follow_redirects=False,
        )

        assert response.status_code == 307
        assert response.headers["location"] == "http://testserver/date/2025-01-15?ref=mail"
        cookie = response.headers["set-cookie"].lower()
        assert cookie.startswith(f"site_token={ACCESS_TOKEN}")
        assert "httponly" in cookie
        assert "secure" in cookie
        assert "samesite=strict" in cookie
        assert "max-age=7776000" in cookie
        assert "path=/" in cookie

    def test_wrong_token_is_ignored(self, client: TestClient) -> None:
        response = client.get("/", params={"token": "guess"}, follow_redirects=False)

        assert response.status_code == 200
        assert "set-cookie" not in response.headers

    def test_logout_clears_cookie(self, client: TestClient) -> None:
        response = client.get("/date/2025-01-15", params={"logout": "true"}, follow_redirects=False)

        assert response.status_code == 307
        assert response.headers["location"] == "/"
        cookie = response.headers["set-cookie"].lower()
        assert cookie.startswith("site_token=")
        assert "max-age=0" in cookie


class TestLegacyRedirect:
    def test_full_id_redirects_to_short_id(self, client: TestClient) -> None:
        response = client.get(
            "/article/tag:google.com,2005:reader/item/000642d52cde0249",
            follow_redirects=False,
        )

        assert response.status_code == 301
        assert response.headers["location"].endswith("/article/000642d52cde0249")

    def test_other_paths_untouched(self, client: TestClient) -> None:
        assert client.get("/article/abc", follow_redirects=False).status_code == 404
