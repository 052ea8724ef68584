import time

import pytest
from fastapi.testclient import TestClient

from app.api.dependencies import get_orchestrator, parse_bool_query
from app.main import app
from app.models.events import ChangeNotification, ModelAction
from app.models.series import SeriesStatistics


@pytest.fixture
def client(orchestrator):
    """TestClient with the orchestrator backed by in-memory collaborators."""
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_list_series(client, statistics):
    statistics.upsert(SeriesStatistics(series_id=7, episode_count=10, size_on_disk=5))

    response = client.get("/api/series")

    assert response.status_code == 200
    data = response.json()
    assert len(data) == 1
    assert data[0]["id"] == 7
    assert data[0]["episodeCount"] == 10
    assert data[0]["sizeOnDisk"] == 5
    assert data[0]["images"][0]["url"] == "/MediaCover/7/poster.jpg"


def test_get_series_omits_absent_fields(client):
    response = client.get("/api/series/7")

    assert response.status_code == 200
    data = response.json()
    assert data["tvdbId"] == 123
    assert data["alternateTitles"] == []
    assert "episodeCount" not in data
    assert "rootFolderPath" not in data
    assert "images" not in data["seasons"][0]


def test_get_series_with_season_images(client):
    response = client.get("/api/series/7?includeSeasonImages=true")

    assert len(response.json()["seasons"][0]["images"]) == 1


def test_get_unknown_series_is_404(client):
    response = client.get("/api/series/99")

    assert response.status_code == 404
    assert "99" in response.json()["message"]


def test_create_series(client, store):
    response = client.post(
        "/api/series",
        json={
            "tvdbId": 456,
            "title": "New Show",
            "rootFolderPath": "/tv",
            "profileId": 1,
        },
    )

    assert response.status_code == 201
    series_id = response.json()["id"]
    assert store.series[series_id].tvdb_id == 456
    assert store.series[series_id].language_profile_id == 1


def test_create_invalid_series_lists_failures(client, store):
    response = client.post(
        "/api/series",
        json={"tvdbId": 123, "title": "Dup", "path": "relative", "profileId": 0},
    )

    assert response.status_code == 400
    failures = response.json()
    assert {f["propertyName"] for f in failures} == {"profileId", "path", "tvdbId"}
    assert all("errorMessage" in f for f in failures)
    assert list(store.series) == [7]


def test_update_series(client, store, broadcaster):
    response = client.put(
        "/api/series/7",
        json={
            "tvdbId": 123,
            "path": "/tv/Series 7",
            "profileId": 2,
            "languageProfileId": 1,
            "monitored": False,
        },
    )

    assert response.status_code == 202
    assert store.series[7].profile_id == 2
    assert store.series[7].monitored is False
    broadcaster.publish.assert_awaited_once()


def test_update_unknown_series_is_404(client):
    response = client.put(
        "/api/series",
        json={"id": 50, "path": "/tv/Other", "profileId": 1, "languageProfileId": 1},
    )

    assert response.status_code == 404


@pytest.mark.parametrize(
    "query, expected",
    [
        ("", False),
        ("?deleteFiles=true", True),
        ("?deleteFiles=True", True),
        ("?deleteFiles=false", False),
        ("?deleteFiles=banana", False),
    ],
)
def test_delete_series_delete_files_flag(client, store, query, expected):
    response = client.delete(f"/api/series/7{query}")

    assert response.status_code == 200
    assert store.deleted == [(7, expected, False)]


def test_delete_unknown_series_is_404(client, store):
    assert client.delete("/api/series/99").status_code == 404
    assert store.deleted == []


@pytest.mark.parametrize(
    "value, expected",
    [(None, False), ("1", True), ("TRUE", True), (" false ", False), ("yes", False)],
)
def test_parse_bool_query(value, expected):
    assert parse_bool_query(value) is expected


def test_health(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_stream_receives_notifications(client):
    broadcaster = app.state.broadcaster
    with client.websocket_connect("/api/stream") as ws:
        deadline = time.monotonic() + 2
        while broadcaster.subscriber_count == 0 and time.monotonic() < deadline:
            time.sleep(0.01)

        ws.portal.call(
            broadcaster.publish,
            ChangeNotification(action=ModelAction.UPDATED, series_id=7),
        )

        assert ws.receive_json() == {
            "action": "updated",
            "resourceType": "series",
            "id": 7,
        }
