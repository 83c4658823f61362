"""
tests/test_api_routes.py

HTTP contract of the search, results, and status endpoints.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from app.config import DiscogsSettings, EbaySettings
from app.main import create_app
from app.repositories.snapshot_repository import SnapshotRepository
from app.services.aggregation_service import MarketplaceAggregator
from app.services.search_service import SearchService, get_search_service
from tests.conftest import StubSource


@pytest.fixture()
def search_service(tmp_path: Path) -> SearchService:
    aggregator = MarketplaceAggregator(sources=[StubSource("Discogs")], artist_delay_seconds=0.0)
    return SearchService(aggregator=aggregator, repository=SnapshotRepository(tmp_path / "last-results.json"))


@pytest.fixture()
def client(search_service: SearchService) -> Iterator[TestClient]:
    application = create_app()
    application.dependency_overrides[get_search_service] = lambda: search_service
    yield TestClient(application)
    application.dependency_overrides.clear()


def _upload(client: TestClient, content: bytes, mode: str = "replace"):
    return client.post(
        "/api/search",
        files={"csv": ("artists.csv", content, "text/csv")},
        data={"mode": mode},
    )


# ---------------------------------------------------------------------------
# POST /api/search
# ---------------------------------------------------------------------------


def test_search_returns_combined_results(client: TestClient) -> None:
    response = _upload(client, b"artist\nCan\nNeu!\n")

    assert response.status_code == 200
    body = response.json()
    assert body["artists"] == ["Can", "Neu!"]
    assert body["searched"] == ["Can", "Neu!"]
    assert body["emptyBatch"] is False
    assert body["results"][0]["isSearch"] is False
    assert body["results"][0]["source"] == "Discogs"


def test_append_upload_reports_empty_batch(client: TestClient) -> None:
    _upload(client, b"artist\nCan\n")

    response = _upload(client, b"artist\ncan\n", mode="append")

    assert response.status_code == 200
    assert response.json()["emptyBatch"] is True
    assert response.json()["artists"] == ["Can"]


def test_missing_file_is_rejected(client: TestClient) -> None:
    response = client.post("/api/search", data={"mode": "replace"})

    assert response.status_code == 400
    assert response.json()["detail"] == "No CSV file uploaded"


def test_csv_without_artists_is_rejected(client: TestClient) -> None:
    response = _upload(client, b"")

    assert response.status_code == 400
    assert response.json()["detail"] == "No artists found in CSV"


def test_unknown_mode_is_rejected(client: TestClient) -> None:
    response = _upload(client, b"artist\nCan\n", mode="merge")

    assert response.status_code == 400


# ---------------------------------------------------------------------------
# POST /api/search/artists
# ---------------------------------------------------------------------------


def test_add_artists_appends(client: TestClient) -> None:
    _upload(client, b"artist\nCan\n")

    response = client.post("/api/search/artists", json={"artists": ["Faust", "can"]})

    assert response.status_code == 200
    assert response.json()["artists"] == ["Can", "Faust"]


def test_add_known_artists_is_rejected(client: TestClient) -> None:
    _upload(client, b"artist\nCan\n")

    response = client.post("/api/search/artists", json={"artists": ["CAN"]})

    assert response.status_code == 400
    assert response.json()["detail"] == "All artists already in list"


def test_add_artists_requires_list(client: TestClient) -> None:
    response = client.post("/api/search/artists", json={"artists": []})

    assert response.status_code == 400
    assert response.json()["detail"] == "Artists array required"


# ---------------------------------------------------------------------------
# GET endpoints
# ---------------------------------------------------------------------------


def test_latest_results_404_then_snapshot(client: TestClient) -> None:
    assert client.get("/api/results/latest").status_code == 404

    _upload(client, b"artist\nCan\n")
    response = client.get("/api/results/latest")

    assert response.status_code == 200
    body = response.json()
    assert body["artists"] == ["Can"]
    assert "timestamp" in body
    assert len(body["results"]) == 1


def test_unreadable_snapshot_is_a_server_error(client: TestClient, tmp_path: Path) -> None:
    (tmp_path / "last-results.json").write_text("{not json", encoding="utf-8")

    response = client.get("/api/results/latest")

    assert response.status_code == 500
    assert response.json()["detail"].startswith("Could not load results")


def test_status_reports_configuration(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        "app.api.routers.results_router.get_discogs_settings",
        lambda: DiscogsSettings(token="abc"),
    )
    monkeypatch.setattr(
        "app.api.routers.results_router.get_ebay_settings",
        lambda: EbaySettings(client_id="id", client_secret=None, sandbox=True),
    )

    response = client.get("/api/status")

    assert response.json() == {
        "hasDiscogsToken": True,
        "hasEbayCredentials": False,
        "ebayMode": "sandbox",
    }


def test_health(client: TestClient) -> None:
    assert client.get("/health").json() == {"status": "ok"}
