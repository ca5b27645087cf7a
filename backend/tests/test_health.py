"""Basic sanity tests for the Briefing Hub backend."""

import sys

from fastapi.testclient import TestClient

from app.config import Settings
from app.main import create_app


class TestBasic:
    """Basic tests that don't need any external service."""

    def test_python_version(self) -> None:
        """Verify Python version is 3.11+."""
        assert sys.version_info >= (3, 11)

    def test_health(self) -> None:
        """The app starts with nothing configured and reports healthy."""
        app = create_app(Settings(_env_file=None, database_url="", freshrss_api_url=""))

        with TestClient(app) as client:
            response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "app": "Briefing Hub"}

    def test_datastore_endpoints_fail_closed(self) -> None:
        """Without DATABASE_URL the datastore dependency answers 500."""
        app = create_app(Settings(_env_file=None, database_url=""))

        with TestClient(app) as client:
            response = client.get("/api/v1/meta/available-dates")

        assert response.status_code == 500
        assert response.json() == {"message": "Datastore is not configured"}

    def test_docs_only_in_development(self) -> None:
        assert create_app(Settings(_env_file=None, environment="development")).docs_url == "/docs"
        assert create_app(Settings(_env_file=None, environment="production")).docs_url is None
