import pytest
from fastapi.testclient import TestClient

from conftest import FakeHazardClient
from disaster_info.api import main as api_main
from disaster_info.core.errors import ExternalApiError, InternalError
from disaster_info.core.service import DisasterInfoService
from disaster_info.core.shelters import ShelterSynthesizer


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setattr(api_main, "service", DisasterInfoService(client=FakeHazardClient()))
    with TestClient(api_main.app, raise_server_exceptions=False) as c:
        yield c


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"


def test_full_lookup(client):
    resp = client.get("/api/disaster-info/34.6993494/133.9110238")
    assert resp.status_code == 200

    body = resp.json()
    assert body["success"] is True
    data = body["data"]
    assert data["coordinates"] == {"latitude": 34.6993494, "longitude": 133.9110238}
    assert [h["type"] for h in data["hazardInfo"]] == ["earthquake", "large_scale_fill"]
    assert data["weatherAlerts"] == []

    distances = [s["distance"] for s in data["shelters"]]
    assert distances == sorted(distances)
    dates = [e["date"] for e in data["disasterHistory"]]
    assert dates == sorted(dates, reverse=True)


@pytest.mark.parametrize("suffix,key", [
    ("hazards", "hazardInfo"),
    ("shelters", "shelters"),
    ("history", "disasterHistory"),
])
def test_partial_lookups(client, suffix, key):
    resp = client.get(f"/api/disaster-info/35.6762/139.6503/{suffix}")
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert key in data
    assert "lastUpdated" in data


@pytest.mark.parametrize("lat,lng", [("abc", "139.6"), ("35.6", "999"), ("40.7128", "-74.0060")])
def test_invalid_coordinates(client, lat, lng):
    resp = client.get(f"/api/disaster-info/{lat}/{lng}")
    assert resp.status_code == 400
    body = resp.json()
    assert body["success"] is False
    assert body["error"]["code"] == "INVALID_COORDINATES"


def test_external_api_error_maps_to_503(client, monkeypatch):
    error = ExternalApiError("Hazard Map API error: 404 Not Found", 404, "hazard-map-api")
    monkeypatch.setattr(api_main, "service", DisasterInfoService(client=FakeHazardClient(error=error)))

    resp = client.get("/api/disaster-info/35.6762/139.6503")
    assert resp.status_code == 503
    err = resp.json()["error"]
    assert err["code"] == "EXTERNAL_API_ERROR"
    assert err["apiName"] == "hazard-map-api"
    assert "404" in err["message"]


class ExplodingShelters(ShelterSynthesizer):
    def synthesize(self, coordinates):
        raise InternalError("negative capacity")


def test_internal_error_maps_to_500(client, monkeypatch):
    service = DisasterInfoService(client=FakeHazardClient(), shelters=ExplodingShelters())
    monkeypatch.setattr(api_main, "service", service)

    resp = client.get("/api/disaster-info/35.6762/139.6503/shelters")
    assert resp.status_code == 500
    assert resp.json()["error"]["code"] == "INTERNAL_SERVER_ERROR"
