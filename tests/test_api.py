"""
Testy dla FastAPI (TestClient).

Testuje:
- Przebieg dnia przez HTTP: advance, move, end-day, choose, acknowledge
- Odpowiedzi błędów (409, 400, 404)
- Widok planszy z mgłą i ścieżki
- Sloty zapisu
"""

import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from fastapi.testclient import TestClient

from lighthouse.api.main import app
from lighthouse.api.session import reset_session


# ═══════════════════════════════════════════════════════════════════════════
# FIXTURES
# ═══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def client(monkeypatch):
    """Klient z nową sesją gry (zapisy w pamięci)."""
    monkeypatch.delenv("LIGHTHOUSE_SAVE_DIR", raising=False)
    reset_session()
    yield TestClient(app)
    reset_session()


@pytest.fixture
def day_client(client):
    """Klient z grą w pierwszym dniu."""
    client.post("/api/game/advance", json={})
    return client


# ═══════════════════════════════════════════════════════════════════════════
# TEST: GAME
# ═══════════════════════════════════════════════════════════════════════════

def test_health(client):
    assert client.get("/api/health").json() == {"status": "healthy"}


def test_initial_state(client):
    state = client.get("/api/game").json()
    assert state["act"] == 1
    assert state["phase"] == "dawn"
    assert state["pending"] == [{"label": "start_day", "due": 2500}]


def test_advance_to_day(client):
    response = client.post("/api/game/advance", json={"ms": 2500}).json()
    assert response["executed"] == 1
    assert response["state"]["phase"] == "day"
    assert response["state"]["moves_remaining"] == 6


def test_move(day_client):
    body = day_client.post("/api/game/move", json={"q": 1, "r": 0}).json()
    assert body["result"]["outcome"] == "ok"
    assert body["result"]["tile"]["name"] == "East Coast Trail"
    assert body["state"]["position"] == {"q": 1, "r": 0}


def test_move_rejected_is_not_http_error(day_client):
    response = day_client.post("/api/game/move", json={"q": 5, "r": 5})
    assert response.status_code == 200
    assert response.json()["result"]["outcome"] == "unknown_tile"


def test_move_validation_error(day_client):
    assert day_client.post("/api/game/move", json={"q": "east"}).status_code == 422


def test_night_flow(day_client):
    assert day_client.post("/api/game/end-day").json()["phase"] == "dusk"
    assert day_client.post("/api/game/choose", json={"light": True}).status_code == 409

    day_client.post("/api/game/advance", json={})
    body = day_client.post("/api/game/choose", json={"light": True}).json()
    assert body["report"]["oil_used"] == 3
    assert body["state"]["phase"] == "night"

    assert day_client.post("/api/game/acknowledge").status_code == 409
    day_client.post("/api/game/advance", json={})
    state = day_client.post("/api/game/acknowledge").json()
    assert state["act"] == 2
    assert state["phase"] == "dawn"


def test_end_day_outside_day(client):
    assert client.post("/api/game/end-day").status_code == 409


def test_events_endpoint(day_client):
    body = day_client.get("/api/game/events").json()
    types = [e["type"] for e in body["events"]]
    assert "DAY_STARTED" in types
    assert "STATE_CHANGED" not in types

    only = day_client.get("/api/game/events", params={"type": "day_started"}).json()
    assert [e["type"] for e in only["events"]] == ["DAY_STARTED"]

    assert day_client.get("/api/game/events", params={"type": "nope"}).status_code == 400


def test_snapshot_has_tagged_sets(client):
    snapshot = client.get("/api/game/snapshot").json()
    assert snapshot["board"]["explored"] == {"__type": "set", "values": ["0,0"]}


def test_effects_and_journal(day_client):
    state = day_client.post("/api/game/effects", json={"sanity": -10}).json()
    assert state["sanity"] == 90

    body = day_client.post("/api/game/journal", json={"id": "j1", "text": "Fog."}).json()
    assert body["journal"][0]["id"] == "j1"

    body = day_client.post("/api/game/complete-event", json={"event_id": "act1_start"}).json()
    assert body["completed_events"] == ["act1_start"]


# ═══════════════════════════════════════════════════════════════════════════
# TEST: BOARD
# ═══════════════════════════════════════════════════════════════════════════

def test_hidden_tiles_only_show_position(client):
    tiles = {(t["q"], t["r"]): t for t in client.get("/api/board/tiles").json()}
    assert tiles[(2, 0)] == {"q": 2, "r": 0, "fog": "hidden"}
    assert tiles[(0, 0)]["name"] == "The Lighthouse"


def test_tile_not_found(client):
    assert client.get("/api/board/tiles/9/9").status_code == 404


def test_valid_moves(client):
    moves = client.get("/api/board/valid-moves").json()
    assert moves[0] == {"q": 1, "r": 0}
    assert len(moves) == 6


def test_path(client):
    body = client.get("/api/board/path/2/-1").json()
    assert body["length"] == 2
    assert body["path"][1] == {"q": 1, "r": 0}
    assert client.get("/api/board/path/3/-2").status_code == 404


def test_map(client):
    response = client.get("/api/board/map")
    assert response.status_code == 200
    assert "@" in response.text


# ═══════════════════════════════════════════════════════════════════════════
# TEST: SAVES
# ═══════════════════════════════════════════════════════════════════════════

def test_save_and_load(day_client):
    day_client.post("/api/game/move", json={"q": 1, "r": 0})
    assert day_client.post("/api/saves/save_1").status_code == 200

    day_client.post("/api/game/new")
    state = day_client.post("/api/saves/save_1/load").json()
    assert state["position"] == {"q": 1, "r": 0}


def test_save_unknown_slot(client):
    assert client.post("/api/saves/save_42").status_code == 400


def test_load_empty_slot(client):
    assert client.post("/api/saves/save_2/load").status_code == 404


def test_list_and_delete(day_client):
    day_client.post("/api/saves/save_1")
    slots = {s["slot"]: s for s in day_client.get("/api/saves").json()}
    assert slots["save_1"]["exists"]

    assert day_client.delete("/api/saves/save_1").json() == {"slot": "save_1", "deleted": True}
    slots = {s["slot"]: s for s in day_client.get("/api/saves").json()}
    assert not slots["save_1"]["exists"]


def test_continue(day_client):
    assert day_client.post("/api/saves/continue").status_code == 404
    day_client.post("/api/game/move", json={"q": 0, "r": 1})
    assert day_client.post("/api/saves/continue").json()["position"] == {"q": 0, "r": 1}
