import pytest
from fastapi.testclient import TestClient

from conftest import collection, point_feature
from geojson_featureset import __version__
from geojson_featureset import datasource as datasource_module
from geojson_featureset.main import create_app


@pytest.fixture
def client(monkeypatch):
    for name in ("ALLOW_COMMENTS", "ALLOW_TRAILING_GARBAGE", "CHUNK_SIZE", "BACKEND", "DEFAULT_ENCODING"):
        monkeypatch.delenv(f"GEOJSON_FEATURESET_{name}", raising=False)
    return TestClient(create_app())


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "version": __version__}


def test_features_inline(client, stations_text):
    response = client.post("/features", json={"geojson": stations_text})
    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 3
    assert body["total"] == 3
    assert body["envelope"] == [2.2945, 48.8339, 2.3731, 48.8584]
    assert body["fields"] == {"name": "string", "lines": "number", "open": "boolean", "note": "null"}
    first = body["features"][0]
    assert first == {
        "id": 1,
        "x": 2.3324,
        "y": 48.8339,
        "declared_type": "Point",
        "properties": {"name": "Denfert", "lines": 4.0, "open": True},
    }


def test_features_filtered_by_bbox(client, stations_text):
    response = client.post("/features", json={"geojson": stations_text, "bbox": [2.36, 48.84, 2.38, 48.85]})
    body = response.json()
    assert body["count"] == 1
    assert body["total"] == 3
    assert body["features"][0]["properties"]["name"] == "Gare de Lyon"


def test_empty_collection(client):
    body = client.post("/features", json={"geojson": collection()}).json()
    assert body["count"] == 0
    assert body["envelope"] is None


def test_malformed_geojson_is_bad_request(client):
    response = client.post("/features", json={"geojson": '{"features": ['})
    assert response.status_code == 400
    assert response.json()["detail"].startswith("invalid GeoJSON detected")


def test_inverted_bbox_is_bad_request(client, stations_text):
    response = client.post("/features", json={"geojson": stations_text, "bbox": [1, 1, 0, 0]})
    assert response.status_code == 400


def test_unknown_encoding_is_bad_request(client, stations_text):
    response = client.post("/features", json={"geojson": stations_text, "encoding": "nope"})
    assert response.status_code == 400


@pytest.mark.parametrize(
    "payload",
    [{}, {"geojson": "{}", "url": "https://example.com/a.geojson"}, {"geojson": "{}", "bbox": [1, 2, 3]}],
)
def test_invalid_payload(client, payload):
    assert client.post("/features", json=payload).status_code == 422


def test_features_from_url(client, monkeypatch):
    text = collection(point_feature(5, 6, name="remote"))
    monkeypatch.setattr(datasource_module, "fetch_bytes", lambda url, timeout: text.encode("utf-8"))
    body = client.post("/features", json={"url": "https://example.com/remote.geojson"}).json()
    assert body["features"][0]["properties"] == {"name": "remote"}


def test_download_failure_is_bad_gateway(client, monkeypatch):
    def failing(url, timeout):
        raise RuntimeError(f"Failed to download {url}: HTTP 503")

    monkeypatch.setattr(datasource_module, "fetch_bytes", failing)
    response = client.post("/features", json={"url": "https://example.com/remote.geojson"})
    assert response.status_code == 502
