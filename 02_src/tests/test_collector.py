"""Tests for the development collector API."""

import pytest
from fastapi.testclient import TestClient

from conftest import TEST_PUBLIC_KEY, make_event
from irontelemetry.collector import EventStore, create_collector_app
from irontelemetry.models import event_to_wire

HEADERS = {"X-Public-Key": TEST_PUBLIC_KEY}


@pytest.fixture
def store():
    return EventStore({TEST_PUBLIC_KEY})


@pytest.fixture
def api(store):
    """TestClient for a collector restricted to the test key."""
    return TestClient(create_collector_app(store=store))


class TestHealth:
    """Tests for GET /api/v1/health."""

    def test_health_ok(self, api):
        response = api.get("/api/v1/health", headers=HEADERS)

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_health_without_key(self, api):
        response = api.get("/api/v1/health")

        assert response.status_code == 401


class TestIngestEvent:
    """Tests for POST /api/v1/events."""

    def test_accepts_wire_event(self, api, store):
        response = api.post("/api/v1/events", json=event_to_wire(make_event("e1")), headers=HEADERS)

        assert response.status_code == 200
        assert response.json() == {"eventId": "e1"}
        assert [e.event_id for e in store.all()] == ["e1"]

    def test_rejects_unknown_key(self, api, store):
        response = api.post(
            "/api/v1/events",
            json=event_to_wire(make_event("e1")),
            headers={"X-Public-Key": "pk_other"},
        )

        assert response.status_code == 401
        assert store.all() == []

    def test_rejects_malformed_body(self, api, store):
        """Test that a body without required fields fails validation."""
        response = api.post("/api/v1/events", json={"message": "no id"}, headers=HEADERS)

        assert response.status_code == 422
        assert store.all() == []

    def test_keeps_unknown_fields(self, api, store):
        body = event_to_wire(make_event("e1"))
        body["release"] = "2024.1"

        api.post("/api/v1/events", json=body, headers=HEADERS)

        assert store.all()[0].model_extra == {"release": "2024.1"}


class TestListEvents:
    """Tests for GET /api/v1/events."""

    def test_lists_in_arrival_order(self, api):
        for event_id in ("e1", "e2", "e3"):
            api.post("/api/v1/events", json=event_to_wire(make_event(event_id)), headers=HEADERS)

        response = api.get("/api/v1/events", headers=HEADERS)

        assert response.status_code == 200
        assert [e["eventId"] for e in response.json()] == ["e1", "e2", "e3"]

    def test_list_requires_key(self, api):
        assert api.get("/api/v1/events").status_code == 401


class TestEventStore:
    """Tests for EventStore authorization."""

    def test_any_key_when_unrestricted(self):
        store = EventStore()

        assert store.is_authorized("pk_anything")
        assert not store.is_authorized("")
        assert not store.is_authorized(None)

    def test_restricted_keys(self):
        store = EventStore({"pk_a"})

        assert store.is_authorized("pk_a")
        assert not store.is_authorized("pk_b")

    def test_clear(self):
        store = EventStore()
        api = TestClient(create_collector_app(store=store))
        api.post("/api/v1/events", json=event_to_wire(make_event("e1")), headers=HEADERS)

        store.clear()

        assert store.all() == []
