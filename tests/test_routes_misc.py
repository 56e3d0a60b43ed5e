# tests/test_routes_misc.py
import math

import pytest

from meetpoint.api.v1.dependencies import get_ors_client
from meetpoint.main import app
from meetpoint.services.ors_client import OpenRouteServiceClient

from conftest import FakeResponse, FakeSession


def use_session(session, api_key="secret"):
    app.dependency_overrides[get_ors_client] = lambda: OpenRouteServiceClient(
        api_key=api_key, session=session
    )


ROUTE_BODY = {"start": {"lat": 53.55, "lon": 9.99}, "end": {"lat": 52.52, "lon": 13.40}}


def test_driving_route_returns_lat_lon_pairs(client):
    use_session(
        FakeSession(
            FakeResponse(
                payload={"features": [{"geometry": {"coordinates": [[9.99, 53.55], [11.0, 53.0], [13.40, 52.52]]}}]}
            )
        )
    )
    response = client.post("/driving-route/", json=ROUTE_BODY)
    assert response.status_code == 200
    assert response.json() == {"coordinates": [[53.55, 9.99], [53.0, 11.0], [52.52, 13.40]]}


def test_driving_route_is_empty_when_service_fails(client):
    use_session(FakeSession(FakeResponse(status_code=404, payload=None, text="no route")))
    response = client.post("/driving-route/", json=ROUTE_BODY)
    assert response.status_code == 200
    assert response.json() == {"coordinates": []}


def test_driving_route_validation_and_configuration(client):
    response = client.post("/driving-route/", json={"start": {"lat": 53.55, "lon": 9.99}})
    assert response.status_code == 400

    use_session(FakeSession(), api_key=None)
    response = client.post("/driving-route/", json=ROUTE_BODY)
    assert response.status_code == 503


def test_search_radius_by_trip_diameter(client):
    response = client.post(
        "/search-radius/",
        json={"coordinates": [{"lat": 53.5511, "lon": 9.9937}, {"lat": 48.137, "lon": 11.575}]},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["radiusKm"] == 50
    assert data["diameterKm"] > 450


def test_search_radius_needs_two_points(client):
    response = client.post("/search-radius/", json={"coordinates": [{"lat": 53.5, "lon": 10.0}]})
    assert response.status_code == 400


def test_search_radius_handles_antipodal_participants(client):
    response = client.post(
        "/search-radius/",
        json={"coordinates": [{"lat": -12.0, "lon": 0.0}, {"lat": 12.0, "lon": 180.0}]},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["radiusKm"] == 50
    assert data["diameterKm"] == pytest.approx(math.pi * 6371.0)


def test_search_radius_reports_spread_from_centroid(client):
    response = client.post(
        "/search-radius/",
        json={"coordinates": [{"lat": 0.0, "lon": 0.0}, {"lat": 0.0, "lon": 10.0}]},
    )
    data = response.json()
    # The centroid sits halfway, so the spread is half the diameter
    assert data["maxSpreadKm"] == pytest.approx(data["diameterKm"] / 2)
