"""
Integration tests for the cron sync endpoints.

Tests the endpoint logic with mocked dependencies:
- get_settings: overridden with a known CRON_SECRET
- get_db: overridden with a MagicMock session
- run_and_sync / cleanup_duplicates: patched, no adapters or database

This validates:
- Bearer secret check on every trigger
- Parameter validation (400 with the list of valid values)
- Response structure, including per-source failures inside a 200

Run: python3 -m pytest api/__tests__/test_sync_routes.py -v
"""
import pytest
from unittest.mock import patch, MagicMock, AsyncMock
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from main import app
from config.settings import Settings, get_settings
from db.session import get_db
from sources.enums import IndeedQueryType, IndeedRegion, JobSource, ScrapeMode
from workers.types import InvocationReport, SourceRunResult

CRON_SECRET = "test-cron-secret"
AUTH = {"Authorization": f"Bearer {CRON_SECRET}"}


def override_get_settings():
    return Settings(CRON_SECRET=CRON_SECRET)


def override_get_db():
    yield MagicMock()


@pytest.fixture
def client():
    """Test client with settings and database overridden."""
    app.dependency_overrides[get_settings] = override_get_settings
    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_report(*results: SourceRunResult, warning: str = None) -> InvocationReport:
    return InvocationReport(results=list(results), duration_ms=1234, warning=warning)


@pytest.fixture
def mock_run():
    report = make_report(
        SourceRunResult(source="greenhouse", fetched=40, classified=3, inserted=2, skipped=1),
        SourceRunResult(source="lever", status="error", error_message="Could not connect to upstream"),
    )
    with patch("api.sync_routes.run_and_sync", AsyncMock(return_value=report)) as run:
        yield run


class TestAuth:

    def test_missing_header(self, client, mock_run):
        response = client.get("/api/cron/sync?source=remotive")
        assert response.status_code == 401
        mock_run.assert_not_awaited()

    def test_wrong_secret(self, client, mock_run):
        response = client.post(
            "/api/cron/sync?source=remotive",
            headers={"Authorization": "Bearer nope"},
        )
        assert response.status_code == 401

    def test_unset_secret_rejects_everything(self, mock_run):
        app.dependency_overrides[get_settings] = lambda: Settings(CRON_SECRET="")
        try:
            response = TestClient(app).get(
                "/api/cron/endpoints", headers={"Authorization": "Bearer "}
            )
        finally:
            app.dependency_overrides.clear()
        assert response.status_code == 401


class TestSyncEndpoint:

    def test_group_runs_its_sources(self, client, mock_run):
        response = client.get("/api/cron/sync?group=ats", headers=AUTH)

        assert response.status_code == 200
        sources = mock_run.await_args.args[1]
        assert sources == [JobSource.GREENHOUSE, JobSource.LEVER, JobSource.ASHBY]

        data = response.json()
        assert data["success"] is False
        assert data["sources"] == ["greenhouse", "lever"]
        assert data["inserted"] == 2
        assert data["results"][1]["status"] == "error"
        assert data["errors"] == [{"source": "lever", "message": "Could not connect to upstream"}]

    def test_single_source_post(self, client, mock_run):
        response = client.post("/api/cron/sync?source=Himalayas", headers=AUTH)

        assert response.status_code == 200
        assert mock_run.await_args.args[1] == [JobSource.HIMALAYAS]

    def test_unknown_source(self, client, mock_run):
        response = client.get("/api/cron/sync?source=monster", headers=AUTH)

        assert response.status_code == 400
        assert "Unknown source 'monster'" in response.json()["detail"]
        mock_run.assert_not_awaited()

    def test_unknown_group(self, client, mock_run):
        response = client.get("/api/cron/sync?group=all", headers=AUTH)
        assert response.status_code == 400

    @pytest.mark.parametrize("query", ["", "?source=remotive&group=ats"])
    def test_exactly_one_of_source_or_group(self, client, mock_run, query):
        response = client.get(f"/api/cron/sync{query}", headers=AUTH)

        assert response.status_code == 400
        assert "Pass exactly one of source or group" in response.json()["detail"]


class TestIndeedEndpoint:

    def test_region_and_type(self, client, mock_run):
        response = client.get("/api/cron/sync-indeed?region=ph&type=ux", headers=AUTH)

        assert response.status_code == 200
        kwargs = mock_run.await_args.kwargs
        assert kwargs["region"] == IndeedRegion.PH
        assert kwargs["query_types"] == [IndeedQueryType.UX]

    def test_type_is_optional(self, client, mock_run):
        client.get("/api/cron/sync-indeed?region=gb", headers=AUTH)
        assert mock_run.await_args.kwargs["query_types"] is None

    def test_invalid_region_lists_valid_values(self, client, mock_run):
        response = client.get("/api/cron/sync-indeed?region=fr", headers=AUTH)

        assert response.status_code == 400
        assert response.json()["detail"] == (
            "Invalid region 'fr'. Valid values: us, ph, ca, gb, au, in, sg, id"
        )

    def test_missing_region(self, client, mock_run):
        response = client.get("/api/cron/sync-indeed", headers=AUTH)
        assert response.status_code == 400


class TestScrapeEndpoint:

    def test_mode_defaults_to_full(self, client, mock_run):
        response = client.get("/api/cron/scrape?source=nodesk", headers=AUTH)

        assert response.status_code == 200
        assert mock_run.await_args.args[1] == [JobSource.NODESK]
        assert mock_run.await_args.kwargs["mode"] == ScrapeMode.FULL

    def test_non_scraper_source_rejected(self, client, mock_run):
        response = client.get("/api/cron/scrape?source=remotive", headers=AUTH)

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid source 'remotive'. Valid values: remoteco, nodesk"

    def test_invalid_mode(self, client, mock_run):
        response = client.get("/api/cron/scrape?source=remoteco&mode=deep", headers=AUTH)
        assert response.status_code == 400

    def test_empty_scrape_warns(self, client):
        report = make_report(SourceRunResult(source="remoteco"))
        with patch("api.sync_routes.run_and_sync", AsyncMock(return_value=report)):
            response = client.get("/api/cron/scrape?source=remoteco&mode=quick", headers=AUTH)

        assert response.status_code == 200
        assert response.json()["warning"] == "No jobs scraped - page layout may have changed"


class TestCleanupEndpoint:

    def test_cleanup_counts(self, client):
        with patch(
            "api.sync_routes.cleanup_duplicates",
            MagicMock(return_value={"deleted": 3, "total": 120}),
        ) as cleanup:
            response = client.post("/api/cron/cleanup-duplicates", headers=AUTH)

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["deleted"] == 3
        assert data["total"] == 120
        cleanup.assert_called_once()

    def test_database_failure_is_reported_in_a_200(self, client):
        db = MagicMock()
        app.dependency_overrides[get_db] = lambda: db
        with patch(
            "api.sync_routes.cleanup_duplicates",
            MagicMock(side_effect=OperationalError("DELETE FROM jobs", {}, Exception("server closed"))),
        ):
            response = client.get("/api/cron/cleanup-duplicates", headers=AUTH)

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is False
        assert data["deleted"] == 0
        assert data["error"] == "Database error while syncing: OperationalError"
        db.rollback.assert_called_once()


class TestEndpointsList:

    def test_lists_every_trigger(self, client):
        response = client.get("/api/cron/endpoints", headers=AUTH)

        assert response.status_code == 200
        data = response.json()
        assert len(data["sources"]) == 14
        assert data["groups"] == ["aggregators", "search", "ats", "scrapers"]
        assert "/api/cron/sync?group=ats" in data["endpoints"]
        assert "/api/cron/sync-indeed?region=ph&type=ux" in data["endpoints"]
        assert "/api/cron/scrape?source=nodesk&mode=quick" in data["endpoints"]
        assert data["endpoints"][-1] == "/api/cron/cleanup-duplicates"
