"""
Testy serializacji stanu.

Testuje:
- Oznaczanie zbiorów {"__type": "set", "values": [...]}
- Pełny obieg snapshot -> JSON -> restore
- "Fail closed": każdy błąd zostawia stan bez zmian
"""

import pytest
import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from lighthouse.state.actions import ActionType
from lighthouse.state.models import GameState, SnapshotError
from lighthouse.state.store import GameStateStore, tag_sets, untag_sets


# ═══════════════════════════════════════════════════════════════════════════
# FIXTURES
# ═══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def played_store():
    """Store po kilku akcjach (NPC, dziennik, łup, flagi)."""
    store = GameStateStore(GameState())
    store.dispatch(ActionType.START_GAME)
    store.dispatch(ActionType.SET_PHASE, {"phase": "day", "moves_remaining": 6})
    store.dispatch(ActionType.MOVE, {"q": -1, "r": 1})
    store.dispatch(ActionType.COLLECT_LOOT, {"q": -1, "r": 1, "kind": "oil", "amount": 2})
    store.dispatch(ActionType.UPSERT_NPC, {"id": "child", "data": {"trust": 2, "mood": "scared"}})
    store.dispatch(ActionType.ADD_JOURNAL_ENTRY, {"id": "j1", "text": "A child on the beach."})
    store.dispatch(ActionType.SET_FLAG, {"flag": "met_child"})
    store.dispatch(ActionType.RECORD_NIGHT_OUTCOME, {"lit": True})
    return store


# ═══════════════════════════════════════════════════════════════════════════
# TEST: SET TAGGING
# ═══════════════════════════════════════════════════════════════════════════

def test_snapshot_tags_sets(played_store):
    explored = played_store.snapshot()["board"]["explored"]
    assert explored == {"__type": "set", "values": ["-1,1", "0,0"]}


def test_tag_sets_nested():
    tagged = tag_sets({"a": [{1, 2}], "b": {"c": set()}})
    assert tagged == {
        "a": [{"__type": "set", "values": [1, 2]}],
        "b": {"c": {"__type": "set", "values": []}},
    }


def test_untag_sets_accepts_any_case():
    assert untag_sets({"__type": "Set", "values": ["a"]}) == {"a"}


def test_untag_sets_malformed_raises():
    with pytest.raises(SnapshotError):
        untag_sets({"__type": "set", "values": "a,b"})


# ═══════════════════════════════════════════════════════════════════════════
# TEST: ROUND TRIP
# ═══════════════════════════════════════════════════════════════════════════

def test_json_round_trip(played_store):
    other = GameStateStore(GameState())
    assert other.deserialize(played_store.to_json())
    assert other.state == played_store.state


def test_envelope_format(played_store):
    envelope = json.loads(played_store.to_json())
    assert envelope["version"] == 1
    assert isinstance(envelope["timestamp"], int)
    assert envelope["data"]["act"] == 1


def test_restore_keeps_unknown_npc_fields(played_store):
    other = GameStateStore(GameState())
    other.restore(json.loads(json.dumps(played_store.snapshot())))
    assert other.state.npcs["child"].extra == {"mood": "scared"}


def test_restore_notifies_with_no_action(played_store):
    other = GameStateStore(GameState())
    received = []
    other.subscribe(lambda state, action: received.append(action))
    other.restore(played_store.snapshot())
    assert received == [None]


# ═══════════════════════════════════════════════════════════════════════════
# TEST: FAIL CLOSED
# ═══════════════════════════════════════════════════════════════════════════

def _assert_rejected(store, payload):
    state = store.state
    before = store.snapshot()
    assert store.restore(payload) is False
    assert store.state is state
    assert store.snapshot() == before


def test_restore_missing_field(played_store):
    payload = played_store.snapshot()
    del payload["resources"]
    _assert_rejected(GameStateStore(GameState()), payload)


def test_restore_wrong_type(played_store):
    payload = played_store.snapshot()
    payload["act"] = "three"
    _assert_rejected(GameStateStore(GameState()), payload)


def test_restore_untagged_set_rejected(played_store):
    payload = played_store.snapshot()
    payload["board"]["explored"] = ["0,0"]
    _assert_rejected(GameStateStore(GameState()), payload)


def test_restore_malformed_set_tag(played_store):
    payload = played_store.snapshot()
    payload["board"]["looted"] = {"__type": "set"}
    _assert_rejected(GameStateStore(GameState()), payload)


def test_restore_act_out_of_range(played_store):
    payload = played_store.snapshot()
    payload["act"] = 9
    _assert_rejected(GameStateStore(GameState()), payload)


@pytest.mark.parametrize("path,value", [
    (("player", "sanity"), 500),
    (("player", "sanity"), -1),
    (("resources", "oil"), -7),
    (("resources", "food"), 999),
    (("resources", "max", "oil"), 0),
])
def test_restore_counters_out_of_range(played_store, path, value):
    payload = played_store.snapshot()
    target = payload
    for key in path[:-1]:
        target = target[key]
    target[path[-1]] = value
    _assert_rejected(GameStateStore(GameState()), payload)


def test_restore_counters_at_bounds(played_store):
    payload = played_store.snapshot()
    payload["player"]["sanity"] = 0
    payload["resources"]["oil"] = payload["resources"]["max"]["oil"]
    payload["resources"]["food"] = 0

    other = GameStateStore(GameState())
    assert other.restore(payload)
    assert other.state.player.sanity == 0
    assert other.state.resources.oil == 20


def test_restore_non_mapping():
    _assert_rejected(GameStateStore(GameState()), ["not", "a", "state"])


def test_deserialize_version_mismatch(played_store):
    envelope = played_store.serialize()
    envelope["version"] = 2
    other = GameStateStore(GameState())
    assert other.deserialize(envelope) is False
    assert other.state.game_started is False


def test_deserialize_missing_data():
    store = GameStateStore(GameState())
    assert store.deserialize({"version": 1, "timestamp": 0}) is False


def test_deserialize_invalid_json():
    store = GameStateStore(GameState())
    assert store.deserialize("{not json") is False
