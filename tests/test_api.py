import pytest
from fastapi.testclient import TestClient

from route_optimizer.config import settings
from route_optimizer.main import create_app
from route_optimizer.services.geospatial import haversine_km
from route_optimizer.services.routing.cache import get_result_cache


@pytest.fixture(autouse=True)
def clear_result_cache(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(settings, "use_google_api", False)
    get_result_cache().clear()
    yield
    get_result_cache().clear()


@pytest.fixture
def api_client() -> TestClient:
    return TestClient(create_app())


def _body(**overrides) -> dict:
    body = {
        "pickup": {"latitude": 0, "longitude": 0},
        "destination": {"latitude": 0, "longitude": 1},
    }
    body.update(overrides)
    return body


def test_health(api_client: TestClient):
    response = api_client.get("/api/health")

    assert response.status_code == 200
    assert response.json()["status"] == "OK"
    assert response.json()["service"] == settings.app_name


def test_distance_provider_health_reports_haversine(api_client: TestClient):
    response = api_client.get("/api/health/distance-provider")

    assert response.json() == {"provider": "haversine", "healthy": True}


def test_direct_route_without_via_points(api_client: TestClient):
    response = api_client.post("/api/optimize-route", json=_body(pickupTime="2025-01-06T08:00:00Z"))

    assert response.status_code == 200
    data = response.json()
    assert data["optimizationApplied"] is False
    assert data["cached"] is False
    assert len(data["optimizedRoute"]) == 2
    assert data["totalDistanceKm"] == pytest.approx(haversine_km(0, 0, 0, 1), abs=0.01)
    assert "penalties" not in data


def test_second_identical_request_is_served_from_cache(api_client: TestClient):
    body = _body(viaPoints=[{"latitude": 0.5, "longitude": 0.2, "id": "A"}], pickupTime="2025-01-06T08:00:00Z")

    first = api_client.post("/api/optimize-route", json=body).json()
    second = api_client.post("/api/optimize-route", json=body).json()

    assert first["cached"] is False
    assert second["cached"] is True
    assert {k: v for k, v in second.items() if k != "cached"} == {k: v for k, v in first.items() if k != "cached"}


def test_optimized_route_uses_camel_case_fields(api_client: TestClient):
    body = _body(
        viaPoints=[{"latitude": 0.5, "longitude": 0.9, "id": "far"}, {"latitude": 0.1, "longitude": 0.1, "id": "near"}],
        pickupTime="2025-01-06T08:00:00Z",
    )

    data = api_client.post("/api/optimize-route", json=body).json()

    assert data["optimizationApplied"] is True
    assert [stop.get("id") for stop in data["optimizedRoute"]] == [None, "near", "far", None]
    assert [stop["sequenceNumber"] for stop in data["optimizedRoute"]] == [0, 1, 2, 3]
    assert data["optimizedRoute"][0]["arrivalTime"].startswith("2025-01-06T08:00:00")
    assert all("waitingTimeMinutes" in stop for stop in data["optimizedRoute"])
    assert all("waitingTimeMinutes" not in stop for stop in data["originalRoute"])
    assert data["timeSavedMinutes"] >= 0
    assert data["metadata"]["permutationsEvaluated"] == 2
    assert data["metadata"]["optimizationScore"] <= data["metadata"]["originalScore"]
    assert set(data["penalties"]) == {"optimized", "original"}


def test_missing_pickup_time_defaults_to_now(api_client: TestClient):
    response = api_client.post("/api/optimize-route", json=_body(viaPoints=None, timeWindows=None))

    assert response.status_code == 200
    assert response.json()["metadata"]["pickupTime"]


@pytest.mark.parametrize(
    "body",
    [
        {"pickup": {"latitude": 0, "longitude": 0}},
        {"destination": {"latitude": 0, "longitude": 1}},
        _body(pickup={"latitude": "north", "longitude": 0}),
        _body(destination={"latitude": 0}),
        _body(viaPoints="not-a-list"),
        _body(viaPoints=[{"latitude": 0.5}]),
        _body(pickup={"latitude": 91, "longitude": 0}),
        _body(timeWindows={"A": {"earliest": "2025-01-06T09:00:00Z", "latest": "2025-01-06T08:00:00Z"}}),
    ],
)
def test_invalid_requests_are_rejected(api_client: TestClient, body: dict):
    response = api_client.post("/api/optimize-route", json=body)

    assert response.status_code == 422


def test_too_many_via_points_returns_bad_request(api_client: TestClient, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(settings, "max_via_points", 1)
    body = _body(viaPoints=[{"latitude": 0.1, "longitude": 0.1}, {"latitude": 0.2, "longitude": 0.2}])

    response = api_client.post("/api/optimize-route", json=body)

    assert response.status_code == 400
    assert "exceeds the limit of 1" in response.json()["detail"]


def test_unexpected_errors_become_internal_server_error(api_client: TestClient, monkeypatch: pytest.MonkeyPatch):
    from route_optimizer.api.routes import routes

    def boom(payload):
        raise RuntimeError("matrix exploded")

    monkeypatch.setattr(routes, "optimize_route", boom)

    response = api_client.post("/api/optimize-route", json=_body())

    assert response.status_code == 500
    assert response.json()["detail"] == "Failed to optimize route: matrix exploded"


def test_health_is_also_served_outside_api_prefix(api_client: TestClient):
    response = api_client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "OK"
    assert response.json()["timestamp"]


def test_value_errors_from_computation_are_internal_errors(api_client: TestClient, monkeypatch: pytest.MonkeyPatch):
    from route_optimizer.api.routes import routes

    def bad_matrix(payload):
        raise ValueError("matrix row missing")

    monkeypatch.setattr(routes, "optimize_route", bad_matrix)

    response = api_client.post("/api/optimize-route", json=_body())

    assert response.status_code == 500
    assert response.json()["detail"] == "Failed to optimize route: matrix row missing"
