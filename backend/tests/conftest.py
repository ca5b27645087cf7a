"""Shared fixtures: settings, in-memory fakes and a test client."""

from collections.abc import Iterator
from datetime import UTC, datetime

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.api.deps import (
    get_briefing_repository,
    get_cache,
    get_freshrss_client,
    get_optional_briefing_repository,
    get_prewarmer,
)
from app.config import Settings
from app.main import create_app

from tests.fakes import (
    ACCESS_TOKEN,
    REVALIDATION_SECRET,
    FakeFreshRSS,
    FakePrewarmer,
    FakeRepository,
    SpyCache,
    make_record,
)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        environment="test",
        site_url="",
        database_url="",
        freshrss_api_url="",
        freshrss_auth_token="",
        access_token=ACCESS_TOKEN,
        revalidation_secret=REVALIDATION_SECRET,
        gemini_api_key="",
        cache_backend="memory",
        bot_guard_enabled=True,
    )


@pytest.fixture
def repository() -> FakeRepository:
    return FakeRepository(
        articles=[
            make_record(
                "tag:google.com,2005:reader/item/a1",
                datetime(2025, 1, 15, 2, 0, tzinfo=UTC),
                title="Chip export rules tighten",
                source_name="Reuters",
                verdict={"type": "news", "score": 9, "importance": "重要新闻"},
            ),
            make_record(
                "tag:google.com,2005:reader/item/a2",
                datetime(2025, 1, 14, 17, 0, tzinfo=UTC),
                title="New model release",
                verdict={"type": "news", "score": 7},
                briefing_section="必知要闻",
            ),
            make_record(
                "tag:google.com,2005:reader/item/a3",
                datetime(2025, 1, 15, 3, 0, tzinfo=UTC),
                title="Minor changelog",
                briefing_section="something else",
            ),
            make_record(
                "tag:google.com,2005:reader/item/b1",
                datetime(2025, 1, 13, 6, 0, tzinfo=UTC),
                title="Older story",
                verdict={"score": 5, "importance": "常规更新"},
            ),
        ],
        statuses={"2025-01-13": True, "2025-01-14": False, "2025-01-20": True},
    )


@pytest.fixture
def cache() -> SpyCache:
    return SpyCache()


@pytest.fixture
def prewarmer() -> FakePrewarmer:
    return FakePrewarmer()


@pytest.fixture
def freshrss() -> FakeFreshRSS:
    return FakeFreshRSS()


@pytest.fixture
def app(
    settings: Settings,
    repository: FakeRepository,
    cache: SpyCache,
    prewarmer: FakePrewarmer,
    freshrss: FakeFreshRSS,
) -> FastAPI:
    application = create_app(settings)
    freshrss_client = freshrss.client()
    application.dependency_overrides[get_briefing_repository] = lambda: repository
    application.dependency_overrides[get_optional_briefing_repository] = lambda: repository
    application.dependency_overrides[get_cache] = lambda: cache
    application.dependency_overrides[get_prewarmer] = lambda: prewarmer
    application.dependency_overrides[get_freshrss_client] = lambda: freshrss_client
    return application


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def admin_client(client: TestClient) -> TestClient:
    client.cookies.set("site_token", ACCESS_TOKEN)
    return client
