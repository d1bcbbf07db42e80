"""HTTP API tests through FastAPI's TestClient."""

import pytest
from fastapi.testclient import TestClient

from puzzle_engine import storage
from puzzle_engine.app import create_app
from puzzle_engine.routes import actions


@pytest.fixture
def client():
    return TestClient(create_app(storage.data_dir()))


@pytest.fixture
def story(client, manor_seed) -> str:
    resp = client.post("/api/stories", json=manor_seed.model_dump(by_alias=True))
    assert resp.status_code == 201
    return resp.json()["id"]


@pytest.fixture
def room_ids(client, story) -> dict[str, str]:
    return {r["name"]: r["id"] for r in client.get(f"/api/stories/{story}/rooms").json()}


def _puzzle_id(client, story: str, name: str) -> str:
    resp = client.get(f"/api/stories/{story}/puzzles/by-name", params={"name": name})
    assert resp.status_code == 200
    return resp.json()["id"]


# ── Health and settings ──────────────────────────────────


def test_health(client):
    assert client.get("/api/health").json() == {"status": "ok"}


def test_settings_roundtrip(client):
    assert client.get("/api/settings").json()["default_skill_boost"] == 1
    resp = client.patch("/api/settings", json={"default_skill_boost": 2})
    assert resp.json()["default_skill_boost"] == 2
    assert client.get("/api/settings").json()["default_skill_boost"] == 2


# ── Stories ──────────────────────────────────────────────


def test_create_and_get_story(client, story):
    assert story == "manor"
    data = client.get(f"/api/stories/{story}").json()
    assert data["title"] == "Manor"
    assert data["summary"]["rooms"] == 4
    assert data["inventory"] == []
    assert [s["id"] for s in client.get("/api/stories").json()] == ["manor"]


def test_invalid_seed_rejected(client):
    seed = {"title": "Broken", "puzzles": [{"name": "A"}, {"name": "A"}]}
    assert client.post("/api/stories", json=seed).status_code == 422


def test_rooms_listed_with_exits(client, story):
    rooms = client.get(f"/api/stories/{story}/rooms").json()
    hallway = next(r for r in rooms if r["name"] == "Hallway")
    assert hallway["hiddenExits"] == ["east", "down"]
    assert hallway["discoveredExits"] == []


def test_delete_story(client, story):
    assert client.delete(f"/api/stories/{story}").json() == {"ok": True}
    assert client.get(f"/api/stories/{story}").status_code == 404
    assert client.delete(f"/api/stories/{story}").status_code == 404


def test_delete_story_drops_turn_lock(client, story, room_ids):
    client.post(f"/api/stories/{story}/turns", json={"action": "wait", "roomId": room_ids["Entrance"]})
    assert story in actions._locks
    client.delete(f"/api/stories/{story}")
    assert story not in actions._locks


def test_missing_story_is_404(client):
    assert client.get("/api/stories/nope").status_code == 404
    assert client.get("/api/stories/nope/objectives").status_code == 404
    resp = client.post("/api/stories/nope/turns", json={"action": "x", "room_id": "y"})
    assert resp.status_code == 404


# ── Turns and stages ─────────────────────────────────────


def test_turns_complete_locked_door(client, story, room_ids):
    client.post(f"/api/stories/{story}/turns",
                json={"action": "look", "room_id": room_ids["Entrance"], "inventory": ["rusty key"]})
    resp = client.post(f"/api/stories/{story}/turns",
                       json={"action": "unlock the door", "room_id": room_ids["Hallway"],
                             "inventory": ["rusty key"]})
    assert resp.status_code == 200
    data = resp.json()
    assert data["narratives"] == [
        "[Objective progress: Unlock the door]",
        "[Objective complete: Locked Door]",
        "[New objective: Vault]",
    ]
    assert [p["name"] for p in data["completedPuzzles"]] == ["Locked Door"]
    assert client.get(f"/api/stories/{story}").json()["inventory"] == ["brass key"]


def test_steps_endpoint(client, story, room_ids):
    resp = client.post(f"/api/stories/{story}/steps",
                       json={"action": "look", "room_id": room_ids["Entrance"], "inventory": ["rusty key"]})
    assert resp.json()["narratives"] == ["[Objective progress: Find a key]"]


def test_camel_case_bodies(client, story, room_ids):
    resp = client.post(f"/api/stories/{story}/turns",
                       json={"action": "look", "roomId": room_ids["Entrance"],
                             "inventory": [], "acquiredItems": ["rusty key"]})
    assert resp.status_code == 200

    resp = client.post(f"/api/stories/{story}/discover/item", json={"itemName": "brass key"})
    assert resp.json()["narratives"] == ["[Objective discovered: Vault]"]

    resp = client.post(f"/api/stories/{story}/discover/exits",
                       json={"roomId": room_ids["Hallway"], "action": "examine bookcase"})
    assert resp.json()["discoveredExits"] == ["east"]


def test_discovery_endpoints(client, story, room_ids):
    resp = client.post(f"/api/stories/{story}/discover/item", json={"item_name": "brass key"})
    assert resp.json()["narratives"] == ["[Objective discovered: Vault]"]

    resp = client.post(f"/api/stories/{story}/discover/action", json={"action": "read notes"})
    assert resp.json()["narratives"] == ["[Objective discovered: Study Notes]"]

    resp = client.post(f"/api/stories/{story}/discover/room", json={"room_id": room_ids["Study"]})
    assert resp.json()["narratives"] == []


def test_exits_endpoint(client, story, room_ids):
    resp = client.post(f"/api/stories/{story}/discover/exits",
                       json={"room_id": room_ids["Hallway"], "action": "search the bookcase"})
    assert resp.json()["discoveredExits"] == ["east"]


# ── Objectives and manual transitions ────────────────────


def test_objectives(client, story):
    objectives = client.get(f"/api/stories/{story}/objectives").json()
    assert [o["name"] for o in objectives] == ["Locked Door"]
    assert objectives[0]["isActive"] is True
    assert client.get(f"/api/stories/{story}/objectives/counts").json() == {"active": 1, "completed": 0}


def test_puzzle_by_name_missing(client, story):
    resp = client.get(f"/api/stories/{story}/puzzles/by-name", params={"name": "Attic"})
    assert resp.status_code == 404


def test_current_step(client, story):
    door = _puzzle_id(client, story, "Locked Door")
    assert client.get(f"/api/puzzles/{door}/current-step").json()["stepNumber"] == 1
    assert client.get("/api/puzzles/nope/current-step").status_code == 404


def test_manual_transitions(client, story):
    vault = _puzzle_id(client, story, "Vault")
    assert client.post(f"/api/puzzles/{vault}/discover").json()["isDiscovered"] is True
    assert client.post(f"/api/puzzles/{vault}/activate").json()["status"] == "active"
    assert client.post(f"/api/puzzles/{vault}/fail").json()["status"] == "failed"
    assert client.post("/api/puzzles/nope/fail").status_code == 404


# ── Errors ───────────────────────────────────────────────


def test_storage_error_is_503(client, monkeypatch):
    def broken():
        raise storage.StorageError("database is locked")

    monkeypatch.setattr(storage, "list_stories", broken)
    assert client.get("/api/stories").status_code == 503
