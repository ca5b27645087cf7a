"""Tests for the rendered pages and the sitemap."""

from fastapi.testclient import TestClient

from app.utils.dates import today_in

from tests.fakes import REVALIDATION_SECRET, FakeFreshRSS, SpyCache


class TestBriefingPage:
    def test_renders_articles_by_section(self, client: TestClient) -> None:
        response = client.get("/date/2025-01-15")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        html = response.text
        assert "2025-01-15 每日简报" in html
        assert html.index("重要新闻") < html.index("必知要闻") < html.index("常规更新")
        assert "Chip export rules tighten" in html
        assert "Older story" not in html

    def test_second_request_is_cached(self, client: TestClient) -> None:
        first = client.get("/date/2025-01-15")
        second = client.get("/date/2025-01-15")

        assert first.headers["x-cache"] == "MISS"
        assert second.headers["x-cache"] == "HIT"
        assert second.text == first.text

    def test_revalidation_rebuilds_page(self, client: TestClient, cache: SpyCache) -> None:
        client.get("/date/2025-01-15")
        client.post(
            "/api/v1/system/revalidate-date",
            json={"date": "2025-01-15", "secret": REVALIDATION_SECRET},
        )

        assert client.get("/date/2025-01-15").headers["x-cache"] == "MISS"

    def test_empty_day(self, client: TestClient) -> None:
        response = client.get("/date/2024-06-01")

        assert response.status_code == 200
        assert "该日期暂无简报" in response.text

    def test_bad_date_is_404(self, client: TestClient) -> None:
        assert client.get("/date/june").status_code == 404

    def test_escapes_article_fields(self, client: TestClient, repository) -> None:
        repository.articles[0].title = "<script>alert(1)</script>"

        html = client.get("/date/2025-01-15").text

        assert "<script>alert(1)</script>" not in html
        assert "&lt;script&gt;" in html


class TestHomePage:
    def test_today_and_homepage_revalidation(self, client: TestClient) -> None:
        today = today_in()

        assert client.get("/").headers["x-cache"] == "MISS"
        assert client.get("/").headers["x-cache"] == "HIT"

        client.post(
            "/api/v1/system/revalidate-date",
            json={"date": today, "secret": REVALIDATION_SECRET},
        )

        response = client.get("/")
        assert response.headers["x-cache"] == "MISS"
        assert f"{today} 每日简报" in response.text

    def test_past_revalidation_keeps_homepage(self, client: TestClient) -> None:
        client.get("/")
        client.post(
            "/api/v1/system/revalidate-date",
            json={"date": "2020-01-01", "secret": REVALIDATION_SECRET},
        )

        assert client.get("/").headers["x-cache"] == "HIT"


class TestArticlePage:
    def test_stored_article_with_content(self, client: TestClient, freshrss: FakeFreshRSS) -> None:
        freshrss.on(
            "POST",
            "/stream/items/contents",
            json={
                "items": [
                    {"id": "tag:google.com,2005:reader/item/a1", "summary": {"content": "<p>Full body</p>"}}
                ]
            },
        )

        response = client.get("/article/a1")

        assert response.status_code == 200
        assert response.headers["x-cache"] == "MISS"
        assert "<p>Full body</p>" in response.text
        assert "Chip export rules tighten" in response.text
        assert client.get("/article/a1").headers["x-cache"] == "HIT"

    def test_content_failure_still_renders(self, client: TestClient, freshrss: FakeFreshRSS) -> None:
        freshrss.on("POST", "/stream/items/contents", status_code=502, text="bad gateway")

        response = client.get("/article/a1")

        assert response.status_code == 200
        assert "暂时无法加载原文内容" in response.text

    def test_unknown_article(self, client: TestClient) -> None:
        assert client.get("/article/nope").status_code == 404

    def test_briefing_links_to_article_page(self, client: TestClient) -> None:
        assert 'href="/article/a1"' in client.get("/date/2025-01-15").text


class TestSitemap:
    def test_lists_homepage_and_dates(self, client: TestClient) -> None:
        response = client.get("/sitemap.xml")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/xml")
        assert response.headers["cache-control"] == "s-maxage=3600, stale-while-revalidate=86400"
        xml = response.text
        assert "<loc>http://testserver/</loc>" in xml
        assert "<loc>http://testserver/date/2025-01-15</loc>" in xml
        assert "<lastmod>2025-01-13</lastmod>" in xml
        assert xml.count("<url>") == 3
