"""HTTP-level tests: routing, caller identity and error-to-status mapping."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import uuid
import asyncio
import pytest
from unittest.mock import patch
from fastapi.testclient import TestClient
from app.config import settings
from app.database import get_db
from app.errors import ResourceUnavailable, InvariantViolation
from app.main import app, shutdown
from conftest import T0


@pytest.fixture
def client(db):
    def _override():
        yield db

    app.dependency_overrides[get_db] = _override
    yield TestClient(app)
    app.dependency_overrides.clear()


def as_org(org):
    return {"X-Organization-Id": str(org.id)}


PLACE = {"name": "Gym", "average_duration": 45, "maximum_duration": 90,
         "latitude": 0.0001, "longitude": 0.0, "maximum_gauge": 50}


class TestPlaceRoutes:
    def test_create_get_list(self, client, make_org):
        org = make_org(name="Fit Inc")
        created = client.post("/api/v1/places", json=PLACE, headers=as_org(org))
        assert created.status_code == 201
        place_id = created.json()["id"]

        fetched = client.get(f"/api/v1/places/{place_id}")
        assert fetched.status_code == 200
        assert fetched.json()["organization"]["name"] == "Fit Inc"
        assert fetched.json()["current_gauge_level"] == "empty"

        listed = client.get("/api/v1/places", headers=as_org(org))
        assert [p["id"] for p in listed.json()] == [place_id]

    def test_unknown_place_is_404(self, client):
        assert client.get(f"/api/v1/places/{uuid.uuid4()}").status_code == 404

    def test_missing_identity_rejected(self, client):
        assert client.post("/api/v1/places", json=PLACE).status_code == 422

    def test_update_and_disable_by_owner_only(self, client, make_org, make_place):
        place = make_place()
        stranger = make_org()

        assert client.put(f"/api/v1/places/{place.id}", json=PLACE, headers=as_org(stranger)).status_code == 404
        assert client.delete(f"/api/v1/places/{place.id}", headers=as_org(stranger)).status_code == 404

        owner = {"X-Organization-Id": str(place.organization_id)}
        updated = client.put(f"/api/v1/places/{place.id}", json=PLACE, headers=owner)
        assert updated.status_code == 200
        assert updated.json()["name"] == "Gym"

        assert client.delete(f"/api/v1/places/{place.id}", headers=owner).status_code == 200
        assert client.get(f"/api/v1/places/{place.id}").status_code == 404

    def test_bad_coordinate_is_400(self, client, make_org):
        body = dict(PLACE, latitude=120.0)
        assert client.post("/api/v1/places", json=body, headers=as_org(make_org())).status_code == 400


class TestSearchRoute:
    def test_search(self, client, make_place):
        near = make_place(latitude=0.0004, longitude=0.0)     # ~45m
        make_place(latitude=0.01, longitude=0.0)              # ~1.1km

        resp = client.get("/api/v1/places/search",
                          params={"longitude": 0.0, "latitude": 0.0, "radius": 100})
        assert resp.status_code == 200
        data = resp.json()
        assert [p["id"] for p in data["places"]] == [str(near.id)]
        assert data["pagination"] == {"page": 1, "next_page": None}

    def test_non_positive_radius_is_400(self, client):
        resp = client.get("/api/v1/places/search", params={"longitude": 0, "latitude": 0, "radius": 0})
        assert resp.status_code == 400


class TestOccupancyAndGauges:
    def test_occupancy_and_refresh(self, client, make_place, make_checkin):
        place = make_place(maximum_gauge=4)
        make_checkin(place, start=T0, minutes=60, number=2)

        resp = client.get(f"/api/v1/places/{place.id}/occupancy", params={"at": T0.isoformat()})
        assert resp.json()["occupancy"] == 2

        refreshed = client.post("/api/v1/gauges/refresh")
        assert refreshed.status_code == 200
        assert refreshed.json()["rows_updated"] == 1

    def test_checkin_route(self, client, make_place):
        place = make_place(maximum_duration=60)
        resp = client.post("/api/v1/checkins", json={
            "place_id": str(place.id), "session_id": str(uuid.uuid4()),
            "duration": 90, "start_timestamp": T0.isoformat(),
        })
        assert resp.status_code == 201
        assert resp.json()["duration"] == 60


class TestInfectionRoute:
    def test_foreign_place_is_404(self, client, make_org, make_place):
        org = make_org()
        foreign = make_place()
        resp = client.post("/api/v1/infections", headers=as_org(org), json={
            "places_ids": [str(foreign.id)],
            "start_timestamp": T0.isoformat(),
            "end_timestamp": T0.replace(hour=14).isoformat(),
        })
        assert resp.status_code == 404

    def test_declare(self, client, make_place, make_checkin):
        place = make_place()
        make_checkin(place)
        resp = client.post("/api/v1/infections", headers={"X-Organization-Id": str(place.organization_id)}, json={
            "places_ids": [str(place.id)],
            "start_timestamp": T0.isoformat(),
            "end_timestamp": T0.replace(hour=14).isoformat(),
        })
        assert resp.status_code == 201
        assert resp.json()["flagged_checkins"] == 1


class TestErrorMapping:
    def test_unavailable_is_503_with_retry_after(self, client):
        with patch("app.routers.gauges.refresh_all_gauges", side_effect=ResourceUnavailable("pool exhausted")):
            resp = client.post("/api/v1/gauges/refresh")
        assert resp.status_code == 503
        assert resp.headers["Retry-After"] == str(settings.RETRY_AFTER_SECONDS)

    def test_invariant_violation_is_500(self, client):
        with patch("app.routers.gauges.refresh_all_gauges", side_effect=InvariantViolation("2 rows")):
            resp = client.post("/api/v1/gauges/refresh")
        assert resp.status_code == 500
        assert resp.json() == {"detail": "Internal server error"}


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_shutdown_waits_for_refresher(self):
        task = asyncio.create_task(asyncio.sleep(3600))
        app.state.gauge_task = task

        await shutdown()

        assert task.done()
        assert task.cancelled()
        assert app.state.gauge_task is None
