"""Tests for API endpoints."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from shapenest.dependencies import get_editor
from shapenest.engine.config import EditorConfig
from shapenest.engine.editor import EditorSession
from shapenest.main import app


@pytest.fixture
def client():
    session = EditorSession(EditorConfig())
    app.dependency_overrides[get_editor] = lambda: session
    yield TestClient(app)
    app.dependency_overrides.clear()


def _add_rect(client: TestClient, width: float, height: float, x: float = 0.0, y: float = 0.0) -> str:
    response = client.post("/api/scene/preview", json={
        "kind": "rectangle",
        "params": {"width": width, "height": height},
        "transform": {"x": x, "y": y},
    })
    assert response.status_code == 200
    node_id = response.json()["node_id"]
    response = client.post("/api/scene/commit")
    assert response.json()["committed"]
    return node_id


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["shape_kinds"] == 4
    assert data["environment"]


def test_list_shapes(client):
    response = client.get("/api/shapes")
    assert response.status_code == 200
    kinds = {item["kind"]: item for item in response.json()}
    assert set(kinds) == {"rectangle", "circle", "triangle"}
    assert [p["id"] for p in kinds["circle"]["params"]] == ["radius"]
    assert kinds["triangle"]["name"] == "Triangle"


def test_shape_params(client):
    response = client.get("/api/shapes/rectangle/params")
    assert response.status_code == 200
    assert response.json() == [
        {"id": "width", "name": "Width"},
        {"id": "height", "name": "Height"},
    ]


def test_shape_params_unknown_kind(client):
    response = client.get("/api/shapes/hexagon/params")
    assert response.status_code == 422


def test_initial_scene(client):
    response = client.get("/api/scene")
    assert response.status_code == 200
    data = response.json()
    assert data["selected_id"] == "S0"
    assert data["preview_id"] is None
    assert data["hierarchy"]["kind"] == "canvas"
    assert data["hierarchy"]["bbox"] == [0, 0, 640, 480]
    assert len(data["shapes"]) == 1
    assert data["shapes"][0]["stroke"] == "black"


# ---------------------------------------------------------------------------
# Preview / commit
# ---------------------------------------------------------------------------

def test_preview_and_commit(client):
    response = client.post("/api/scene/preview", json={
        "kind": "circle",
        "params": {"radius": "25"},
    })
    assert response.status_code == 200
    data = response.json()
    assert data["stable"]
    assert data["scene"]["preview_id"] == data["node_id"]

    response = client.post("/api/scene/commit")
    assert response.status_code == 200
    data = response.json()
    assert data["committed"]
    assert data["message"] == "ok"
    assert data["scene"]["preview_id"] is None
    assert len(data["scene"]["hierarchy"]["children"]) == 1


def test_commit_unstable_preview(client):
    response = client.post("/api/scene/preview", json={
        "kind": "rectangle",
        "params": {"width": 100, "height": 50},
        "transform": {"x": 400},
    })
    data = response.json()
    assert not data["stable"]
    pending = data["node_id"]
    assert [s["stroke"] for s in data["scene"]["shapes"] if s["node_id"] == pending] == ["red"]

    response = client.post("/api/scene/commit")
    data = response.json()
    assert not data["committed"]
    assert data["message"].startswith("New shape can't be placed here")
    assert data["scene"]["preview_id"] == pending

    response = client.post("/api/scene/cancel")
    assert response.json()["preview_id"] is None
    assert len(response.json()["shapes"]) == 1


def test_preview_bad_params(client):
    response = client.post("/api/scene/preview", json={
        "kind": "rectangle",
        "params": {"width": "wide"},
    })
    assert response.status_code == 422
    fields = response.json()["detail"]["fields"]
    assert set(fields) == {"width", "height"}


def test_preview_unknown_kind(client):
    response = client.post("/api/scene/preview", json={"kind": "hexagon", "params": {}})
    assert response.status_code == 422


def test_commit_without_preview(client):
    response = client.post("/api/scene/commit")
    assert response.status_code == 409


# ---------------------------------------------------------------------------
# Selection
# ---------------------------------------------------------------------------

def test_select_and_select_at(client):
    node_id = _add_rect(client, 100, 100, x=-150)
    response = client.post("/api/scene/select", json={"node_id": node_id})
    assert response.status_code == 200
    assert response.json()["selected_id"] == node_id

    response = client.post("/api/scene/select-at", json={"x": 600, "y": 20})
    assert response.json()["selected_id"] == "S0"

    response = client.post("/api/scene/select-at", json={"x": 170, "y": 240})
    assert response.json()["selected_id"] == node_id


def test_select_unknown(client):
    response = client.post("/api/scene/select", json={"node_id": "S99"})
    assert response.status_code == 404


def test_select_while_previewing(client):
    node_id = _add_rect(client, 100, 100)
    client.post("/api/scene/preview", json={"kind": "circle", "params": {"radius": 5}, "transform": {"x": 200}})
    response = client.post("/api/scene/select", json={"node_id": node_id})
    assert response.status_code == 409
    assert "finish editing" in response.json()["detail"]


# ---------------------------------------------------------------------------
# Moves
# ---------------------------------------------------------------------------

def test_translate(client):
    node_id = _add_rect(client, 100, 100)
    client.post("/api/scene/select", json={"node_id": node_id})

    response = client.post("/api/scene/translate/preview", json={"transform": {"x": 500}})
    assert response.status_code == 200
    data = response.json()
    assert data["editing"]
    assert [s["stroke"] for s in data["shapes"] if s["node_id"] == node_id] == ["red"]

    response = client.post("/api/scene/translate", json={"transform": {"x": 500}})
    data = response.json()
    assert not data["applied"]
    assert data["message"] == "Shape can't be placed here"

    response = client.post("/api/scene/translate", json={"transform": {"x": 20, "rotation": 45}})
    data = response.json()
    assert data["applied"]
    assert not data["scene"]["editing"]


def test_translate_preview_while_previewing(client):
    client.post("/api/scene/preview", json={"kind": "circle", "params": {"radius": 5}})
    response = client.post("/api/scene/translate/preview", json={"transform": {"x": 1}})
    assert response.status_code == 409


# ---------------------------------------------------------------------------
# Removal and export
# ---------------------------------------------------------------------------

def test_remove_node(client):
    node_id = _add_rect(client, 100, 100)
    response = client.delete(f"/api/scene/nodes/{node_id}")
    assert response.status_code == 200
    assert len(response.json()["shapes"]) == 1


def test_remove_canvas(client):
    response = client.delete("/api/scene/nodes/S0")
    assert response.status_code == 409


def test_remove_unknown(client):
    response = client.delete("/api/scene/nodes/S99")
    assert response.status_code == 404


def test_scene_svg(client):
    node_id = _add_rect(client, 100, 50)
    response = client.get("/api/scene/svg")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("image/svg+xml")
    assert f'id="{node_id}"' in response.text
    assert 'points="270.00,265.00 370.00,265.00 370.00,215.00 270.00,215.00"' in response.text


def test_translate_while_previewing(client):
    node_id = _add_rect(client, 100, 100)
    client.post("/api/scene/select", json={"node_id": node_id})
    client.post("/api/scene/preview", json={"kind": "circle", "params": {"radius": 5}})
    response = client.post("/api/scene/translate", json={"transform": {"x": 10}})
    assert response.status_code == 409
