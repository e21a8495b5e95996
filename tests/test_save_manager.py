"""
Testy dla zapisów w slotach.

Testuje:
- Format wpisu (klucz z namespace, koperta version/timestamp/data)
- Wczytanie zapisu
- Odrzucenie: brak zapisu, uszkodzony JSON, zła wersja, brak danych
- Informacje o slotach
- FileStorage
"""

import pytest
import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from lighthouse.core.config_loader import PersistenceConfig
from lighthouse.persistence.save_manager import FileStorage, MemoryStorage, SaveManager
from lighthouse.state.actions import ActionType
from lighthouse.state.models import GameState
from lighthouse.state.store import GameStateStore


# ═══════════════════════════════════════════════════════════════════════════
# FIXTURES
# ═══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def store():
    return GameStateStore(GameState())


@pytest.fixture
def saves(store, storage):
    return SaveManager(store, PersistenceConfig(), storage)


# ═══════════════════════════════════════════════════════════════════════════
# TEST: SAVE
# ═══════════════════════════════════════════════════════════════════════════

def test_save_writes_namespaced_key(saves, storage):
    assert saves.save("save_1")
    assert storage.keys() == ["lastlighthouse_save_1"]


def test_save_envelope(saves, storage):
    saves.save("save_1")
    envelope = json.loads(storage.get("lastlighthouse_save_1"))

    assert envelope["version"] == 1
    assert isinstance(envelope["timestamp"], int)
    assert envelope["data"]["board"]["explored"] == {"__type": "set", "values": ["0,0"]}


def test_autosave_slot(saves):
    assert saves.autosave()
    assert saves.has_save("autosave")


def test_unknown_slot_rejected(saves, storage):
    assert not saves.save("save_9")
    assert not saves.load("save_9")
    assert storage.keys() == []


# ═══════════════════════════════════════════════════════════════════════════
# TEST: LOAD
# ═══════════════════════════════════════════════════════════════════════════

def test_load_restores_state(saves, store):
    store.dispatch(ActionType.ADJUST_RESOURCE, {"resource": "oil", "amount": -5})
    saves.save("save_2")
    store.dispatch(ActionType.ADJUST_RESOURCE, {"resource": "oil", "amount": 5})

    assert saves.load("save_2")
    assert store.state.resources.oil == 7


def test_slot_readable_by_store_deserialize(saves, store, storage):
    store.dispatch(ActionType.SET_FLAG, {"flag": "met_sailor"})
    saves.save("save_1")

    other = GameStateStore(GameState())
    assert other.deserialize(storage.get("lastlighthouse_save_1"))
    assert other.state == store.state


def test_slot_written_from_store_envelope(saves, store, storage):
    storage.set("lastlighthouse_save_2", store.to_json())
    assert saves.load("save_2")


def test_load_missing_save(saves, store):
    state = store.state
    assert not saves.load("save_1")
    assert store.state is state


def test_load_corrupted_json(saves, store, storage):
    storage.set("lastlighthouse_save_1", "{broken")
    state = store.state
    assert not saves.load("save_1")
    assert store.state is state


def test_load_version_mismatch(saves, store, storage):
    saves.save("save_1")
    envelope = json.loads(storage.get("lastlighthouse_save_1"))
    envelope["version"] = 99
    storage.set("lastlighthouse_save_1", json.dumps(envelope))

    assert not saves.load("save_1")


def test_load_missing_data(saves, storage):
    storage.set("lastlighthouse_save_1", json.dumps({"version": 1, "timestamp": 0}))
    assert not saves.load("save_1")


def test_load_invalid_snapshot(saves, store, storage):
    storage.set("lastlighthouse_save_1", json.dumps({
        "version": 1, "timestamp": 0, "data": {"act": 1},
    }))
    state = store.state
    assert not saves.load("save_1")
    assert store.state is state


# ═══════════════════════════════════════════════════════════════════════════
# TEST: SLOT INFO
# ═══════════════════════════════════════════════════════════════════════════

def test_get_slot_info(saves, store):
    store.dispatch(ActionType.SET_SANITY, {"sanity": 70})
    saves.save("save_3")

    info = saves.get_slot_info("save_3")
    assert info["act"] == 1
    assert info["phase"] == "dawn"
    assert info["sanity"] == 70
    assert saves.get_slot_info("save_1") is None


def test_list_slots(saves, storage):
    saves.save("save_1")
    storage.set("lastlighthouse_save_2", "not json")

    slots = {entry["slot"]: entry for entry in saves.list_slots()}
    assert list(slots) == ["autosave", "save_1", "save_2", "save_3"]
    assert slots["save_1"]["exists"] and not slots["save_1"]["corrupt"]
    assert slots["save_2"]["corrupt"]
    assert not slots["save_3"]["exists"]


def test_delete_save(saves):
    saves.save("save_1")
    assert saves.delete_save("save_1")
    assert not saves.has_save("save_1")


# ═══════════════════════════════════════════════════════════════════════════
# TEST: FILE STORAGE
# ═══════════════════════════════════════════════════════════════════════════

def test_file_storage_round_trip(store, tmp_path):
    saves = SaveManager(store, PersistenceConfig(), FileStorage(tmp_path / "saves"))
    store.dispatch(ActionType.SET_FLAG, {"flag": "met_sailor"})

    assert saves.save("save_1")
    assert (tmp_path / "saves" / "lastlighthouse_save_1.json").exists()

    other = GameStateStore(GameState())
    assert SaveManager(other, PersistenceConfig(), FileStorage(tmp_path / "saves")).load("save_1")
    assert other.state.player.flags == {"met_sailor": True}


def test_file_storage_missing_dir(tmp_path):
    storage = FileStorage(tmp_path / "nowhere")
    assert storage.get("x") is None
    assert storage.keys() == []
    storage.remove("x")
