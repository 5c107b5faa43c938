"""
Tests for the FastAPI service using the in-process TestClient.

Camera transitions are started with autoplay disabled and stepped explicitly
through the control endpoint so no background frame loop is involved.
"""

import math

import pytest
from fastapi.testclient import TestClient

from app.backend.main import app


@pytest.fixture
def client():
    with TestClient(app) as c:
        c.post("/camera/control", json={"cmd": "reset"})
        yield c


def test_root(client):
    assert client.get("/").json() == {"service": "spatial-layout", "status": "ok"}


class TestLayoutEndpoints:
    def test_tree_layout_starts_with_root_expanded(self, client):
        data = client.get("/layout/tree").json()

        assert data["root"] == "ai-dev-landscape"
        assert data["expanded"] == ["ai-dev-landscape"]
        assert len(data["nodes"]) == 12
        assert sum(1 for n in data["nodes"] if n["visible"]) == 5

    def test_expand_and_collapse(self, client):
        data = client.post("/layout/expand", json={"id": "ai-coding-assistants"}).json()
        assert sum(1 for n in data["nodes"] if n["visible"]) == 8

        data = client.post("/layout/expand", json={"id": "ai-coding-assistants"}).json()
        assert sum(1 for n in data["nodes"] if n["visible"]) == 5

    def test_expand_unknown_category(self, client):
        resp = client.post("/layout/expand", json={"id": "nope"})
        assert resp.status_code == 404

    def test_item_layout_with_connections(self, client):
        data = client.get("/layout/items", params={"pattern": "sphere"}).json()

        assert data["pattern"] == "sphere"
        assert set(data["positions"]) == {"a1", "a2", "a3", "a4", "a5", "a6"}
        pairs = {frozenset((c["source_id"], c["target_id"])) for c in data["connections"]}
        assert pairs == {frozenset(("a1", "a2")), frozenset(("a1", "a4")), frozenset(("a3", "a5"))}

    def test_item_layout_is_seeded(self, client):
        params = {"pattern": "constellation", "seed": 11}
        assert client.get("/layout/items", params=params).json() == client.get("/layout/items", params=params).json()

    def test_item_layout_bad_requests(self, client):
        assert client.get("/layout/items", params={"pattern": "spiral"}).status_code == 400
        assert client.get("/layout/items", params={"pattern": "sphere", "radius": -1}).status_code == 400


class TestCameraEndpoints:
    def test_trigger_and_step_to_target(self, client):
        body = client.post("/camera/trigger", json={"autoplay": False}).json()
        assert body["started"] is True
        assert body["state"]["state"] == "TRANSITIONING"

        again = client.post("/camera/trigger", json={"autoplay": False}).json()
        assert again["started"] is False

        step = client.post("/camera/control", json={"cmd": "step", "dt": 0.5}).json()
        assert step["done"] is False
        assert 0 < step["state"]["progress"] < 1

        step = client.post("/camera/control", json={"cmd": "step", "dt": 2.0}).json()
        assert step["done"] is True
        orbit = step["state"]["orbit"]
        assert orbit["azimuth"] == pytest.approx(0.0)
        assert orbit["polar"] == pytest.approx(math.pi / 2)
        assert orbit["radius"] == pytest.approx(40.0)

        state = client.get("/camera/state").json()
        assert state["state"] == "IDLE"
        assert state["frame"] == 2

    def test_trigger_with_explicit_target(self, client):
        client.post("/camera/trigger", json={"azimuth": 1.0, "polar": 1.2, "autoplay": False})
        step = client.post("/camera/control", json={"cmd": "step", "dt": 5.0}).json()
        assert step["state"]["orbit"]["azimuth"] == pytest.approx(1.0)
        assert step["state"]["orbit"]["polar"] == pytest.approx(1.2)

    def test_trigger_rejects_bad_radius(self, client):
        resp = client.post("/camera/trigger", json={"radius": -3, "autoplay": False})
        assert resp.status_code == 400

    def test_cancel(self, client):
        client.post("/camera/trigger", json={"autoplay": False})
        assert client.post("/camera/control", json={"cmd": "cancel"}).json() == {"ok": True}
        assert client.get("/camera/state").json()["state"] == "IDLE"

    def test_unknown_command_is_rejected(self, client):
        resp = client.post("/camera/control", json={"cmd": "warp"})
        assert resp.status_code == 422

