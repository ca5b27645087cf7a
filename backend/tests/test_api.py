"""HTTP tests for the JSON API."""

from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.agents.dashboard_summary import FAILED_SUMMARY
from app.api.deps import get_stats_service
from app.constants.briefing import IMPORTANT, MUST_KNOW, REGULAR, STAR_TAG
from app.schemas.dashboard import ContentStats, DashboardStats, SecurityStats

from tests.fakes import ACCESS_TOKEN, FakeFreshRSS, FakeRepository

API = "/api/v1"


class TestAuthCheck:
    def test_anonymous(self, client: TestClient) -> None:
        response = client.get(f"{API}/auth/check")

        assert response.status_code == 200
        assert response.json() == {"isAdmin": False}

    def test_admin_cookie(self, admin_client: TestClient) -> None:
        assert admin_client.get(f"{API}/auth/check").json() == {"isAdmin": True}

    def test_wrong_cookie(self, client: TestClient) -> None:
        client.cookies.set("site_token", "guess")

        assert client.get(f"{API}/auth/check").json() == {"isAdmin": False}

    def test_missing_access_token_is_misconfiguration(self, app: FastAPI) -> None:
        app.state.settings.access_token = ""
        with TestClient(app) as client:
            response = client.get(f"{API}/auth/check")

        assert response.status_code == 500
        assert response.json() == {"isAdmin": False, "error": "Server misconfiguration"}


class TestDailyStatuses:
    def test_range(self, client: TestClient) -> None:
        response = client.get(
            f"{API}/daily-statuses",
            params={"start_date": "2025-01-13", "end_date": "2025-01-14"},
        )

        assert response.status_code == 200
        assert response.json() == {"2025-01-13": True, "2025-01-14": False}
        assert response.headers["cache-control"] == "no-store, max-age=0"

    def test_both_bounds_required(self, client: TestClient) -> None:
        response = client.get(f"{API}/daily-statuses", params={"start_date": "2025-01-13"})

        assert response.status_code == 400
        assert response.json() == {"message": "start_date and end_date parameters are required."}

    def test_update_requires_admin(self, client: TestClient, repository: FakeRepository) -> None:
        response = client.post(
            f"{API}/daily-statuses", json={"date": "2025-01-14", "is_completed": True}
        )

        assert response.status_code == 403
        assert response.json() == {"message": "Unauthorized: Admin access required"}
        assert repository.statuses["2025-01-14"] is False

    def test_update(self, admin_client: TestClient, repository: FakeRepository) -> None:
        response = admin_client.post(
            f"{API}/daily-statuses", json={"date": "2025-01-14", "is_completed": True}
        )

        assert response.status_code == 200
        assert response.json() == {"success": True, "date": "2025-01-14", "is_completed": True}
        assert repository.statuses["2025-01-14"] is True

    def test_update_rejects_non_boolean(self, admin_client: TestClient) -> None:
        response = admin_client.post(
            f"{API}/daily-statuses", json={"date": "2025-01-14", "is_completed": "yes"}
        )

        assert response.status_code == 400
        assert "message" in response.json()


class TestBriefings:
    def test_grouped_and_ranked(self, client: TestClient) -> None:
        response = client.get(f"{API}/briefings", params={"date": "2025-01-15"})

        assert response.status_code == 200
        body = response.json()
        assert list(body) == [IMPORTANT, MUST_KNOW, REGULAR]
        assert [a["title"] for a in body[IMPORTANT]] == ["Chip export rules tighten"]
        assert [a["title"] for a in body[MUST_KNOW]] == ["New model release"]
        assert [a["title"] for a in body[REGULAR]] == ["Minor changelog"]

    def test_date_required(self, client: TestClient) -> None:
        response = client.get(f"{API}/briefings")

        assert response.status_code == 400
        assert response.json() == {"message": "Date parameter is required."}

    def test_invalid_date(self, client: TestClient) -> None:
        response = client.get(f"{API}/briefings", params={"date": "yesterday"})

        assert response.status_code == 400
        assert response.json() == {"message": "Invalid date format"}

    def test_by_article_ids(self, client: TestClient) -> None:
        response = client.get(
            f"{API}/briefings",
            params=[
                ("articleIds", "tag:google.com,2005:reader/item/a1"),
                ("articleIds", "tag:google.com,2005:reader/item/b1"),
            ],
        )

        assert response.status_code == 200
        assert sorted(response.json()) == [
            "tag:google.com,2005:reader/item/a1",
            "tag:google.com,2005:reader/item/b1",
        ]


class TestMeta:
    def test_available_dates(self, client: TestClient) -> None:
        response = client.get(f"{API}/meta/available-dates")

        assert response.json() == ["2025-01-15", "2025-01-13"]

    def test_tags_are_cached(self, client: TestClient, freshrss: FakeFreshRSS) -> None:
        freshrss.on(
            "GET",
            "/tag/list",
            json={"tags": [{"id": "user/-/label/Tech", "type": "folder", "count": 3}]},
        )

        first = client.get(f"{API}/meta/tags")
        second = client.get(f"{API}/meta/tags")

        assert first.status_code == 200
        assert first.json() == {
            "categories": [{"id": "user/-/label/Tech", "label": "Tech", "count": 3}],
            "tags": [],
        }
        assert second.json() == first.json()
        assert len(freshrss.requests) == 1

    def test_freshrss_failure(self, client: TestClient, freshrss: FakeFreshRSS) -> None:
        freshrss.on("GET", "/tag/list", status_code=503, text="maintenance")

        response = client.get(f"{API}/meta/tags")

        assert response.status_code == 500
        assert response.json()["message"] == "Error fetching from FreshRSS"
        assert "503" in response.json()["error"]


class TestArticleSearch:
    def test_admin_only(self, client: TestClient) -> None:
        response = client.get(f"{API}/articles/search", params={"query": "chips"})

        assert response.status_code == 403

    def test_query_required(self, admin_client: TestClient) -> None:
        response = admin_client.get(f"{API}/articles/search", params={"query": "  "})

        assert response.status_code == 400
        assert response.json() == {"message": "Search query parameter is required."}

    def test_results(self, admin_client: TestClient, repository: FakeRepository) -> None:
        repository.search_results = [{"id": "s1", "title": "Chips", "tldr": '["short"]'}]

        response = admin_client.get(f"{API}/articles/search", params={"query": "chips", "page": 2})

        assert response.status_code == 200
        assert response.json()[0]["tldr"] == "short"
        assert repository.search_calls == [("chips", 20, 20)]


class TestArticleStream:
    def test_stream_id_required(self, client: TestClient) -> None:
        response = client.get(f"{API}/articles/stream")

        assert response.status_code == 400
        assert response.json() == {"message": "Stream ID is required."}

    def test_stream(self, client: TestClient, freshrss: FakeFreshRSS) -> None:
        freshrss.on(
            "GET",
            "/stream/contents/user/-/label/Tech",
            json={"items": [{"id": "i1", "title": "One"}], "continuation": "c1"},
        )

        response = client.get(f"{API}/articles/stream", params={"value": "user/-/label/Tech", "n": "5"})

        assert response.status_code == 200
        body = response.json()
        assert body["continuation"] == "c1"
        assert body["articles"][0]["title"] == "One"
        assert body["articles"][0]["sourceName"] == ""


class TestArticleState:
    def test_read_states(self, client: TestClient, freshrss: FakeFreshRSS) -> None:
        freshrss.on(
            "POST",
            "/stream/items/contents",
            json={"items": [{"id": "tag:google.com,2005:reader/item/a1", "categories": [STAR_TAG]}]},
        )

        response = client.post(f"{API}/articles/state", json={"articleIds": ["a1"]})

        assert response.status_code == 200
        assert response.json() == {"tag:google.com,2005:reader/item/a1": [STAR_TAG]}

    def test_update_requires_admin(self, client: TestClient, freshrss: FakeFreshRSS) -> None:
        response = client.post(
            f"{API}/articles/state", json={"articleId": "a1", "action": "star", "isAdding": True}
        )

        assert response.status_code == 403
        assert freshrss.requests == []

    def test_update_missing_parameters(self, admin_client: TestClient) -> None:
        response = admin_client.post(f"{API}/articles/state", json={"articleId": "a1", "action": "star"})

        assert response.status_code == 400
        assert response.json() == {"message": "Missing required parameters"}

    def test_update(self, admin_client: TestClient, freshrss: FakeFreshRSS) -> None:
        freshrss.on("GET", "/token", text="tok")
        freshrss.on("POST", "/edit-tag", text="OK")

        response = admin_client.post(
            f"{API}/articles/state", json={"articleId": "a1", "action": "star", "isAdding": True}
        )

        assert response.status_code == 200
        assert response.json() == {"success": True}


class TestArticleContent:
    def test_content_with_stored_title_and_state(
        self, client: TestClient, freshrss: FakeFreshRSS
    ) -> None:
        freshrss.on(
            "POST",
            "/stream/items/contents",
            json={
                "items": [
                    {
                        "id": "tag:google.com,2005:reader/item/a1",
                        "title": "Feed headline",
                        "origin": {"title": "Reuters"},
                        "categories": [STAR_TAG],
                        "summary": {"content": "<h1>Chip export rules tighten</h1><p>Body</p>"},
                    }
                ]
            },
        )

        response = client.get(f"{API}/articles/a1/content", params={"include_state": "true"})

        assert response.status_code == 200
        assert response.json() == {
            "title": "Chip export rules tighten",
            "content": "<p>Body</p>",
            "source": "Reuters",
            "tags": [STAR_TAG],
        }

    def test_not_found(self, client: TestClient, freshrss: FakeFreshRSS) -> None:
        freshrss.on("POST", "/stream/items/contents", json={"items": []})

        response = client.get(f"{API}/articles/unknown/content")

        assert response.status_code == 404
        assert response.json() == {"message": "Article content not found."}


class TestAdmin:
    def test_stats_require_admin(self, client: TestClient) -> None:
        assert client.get(f"{API}/admin/stats").status_code == 401

    def test_summary_without_ai_key(self, app: FastAPI) -> None:
        class FakeStats:
            async def get_dashboard_stats(self):
                return DashboardStats(
                    content=ContentStats(total_articles=3),
                    security=SecurityStats(),
                    last_updated="2025-01-15T00:00:00Z",
                )

        app.dependency_overrides[get_stats_service] = FakeStats
        with TestClient(app) as client:
            client.cookies.set("site_token", ACCESS_TOKEN)
            stats = client.get(f"{API}/admin/stats")
            summary = client.get(f"{API}/admin/stats/ai")

        assert stats.json()["content"]["total_articles"] == 3
        assert summary.json() == {"aiSummary": FAILED_SUMMARY}

