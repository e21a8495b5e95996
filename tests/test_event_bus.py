"""
Testy dla szyny zdarzeń.
"""

import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from lighthouse.events.event_bus import EventBus, EventType
from lighthouse.state.models import GameState, Phase


def test_emit_stamps_act_and_phase():
    state = GameState(act=3, phase=Phase.NIGHT)
    bus = EventBus(state_provider=lambda: state)

    event = bus.emit(EventType.NOTIFICATION, message="Sanity -15", level="danger")

    assert (event.act, event.phase) == (3, "night")
    assert event.to_dict() == {
        "type": "NOTIFICATION",
        "act": 3,
        "phase": "night",
        "data": {"message": "Sanity -15", "level": "danger"},
    }


def test_subscribe_by_type():
    bus = EventBus()
    received = []
    bus.subscribe(received.append, EventType.GAME_OVER)

    bus.notify("hello")
    bus.emit(EventType.GAME_OVER, reason="complete")

    assert [e.event_type for e in received] == [EventType.GAME_OVER]


def test_subscribe_all_and_unsubscribe():
    bus = EventBus()
    received = []
    unsubscribe = bus.subscribe(received.append)

    bus.announce("Dusk")
    unsubscribe()
    bus.announce("Night")

    assert len(received) == 1
    assert received[0].data == {"title": "Dusk", "subtitle": ""}


def test_history_is_bounded():
    bus = EventBus(max_history=3)
    for i in range(5):
        bus.notify(str(i))

    assert bus.get_event_count() == 3
    assert [e.data["message"] for e in bus.events] == ["2", "3", "4"]


def test_last_and_filter():
    bus = EventBus()
    bus.emit(EventType.ACT_ADVANCED, act=2)
    bus.emit(EventType.ACT_ADVANCED, act=3)

    assert bus.last(EventType.ACT_ADVANCED).data == {"act": 3}
    assert bus.last(EventType.GAME_OVER) is None
    assert len(bus.get_events_by_type(EventType.ACT_ADVANCED)) == 2


def test_save_writes_json_log(tmp_path):
    bus = EventBus()
    bus.announce("Day 1", "The fog has not lifted.")
    path = tmp_path / "logs" / "events.json"

    bus.save(str(path))

    log = json.loads(path.read_text(encoding="utf-8"))
    assert log["metadata"]["version"] == "1.0"
    assert log["events"][0]["type"] == "PHASE_TRANSITION"


def test_clear():
    bus = EventBus()
    bus.notify("x")
    bus.clear()
    assert bus.get_event_count() == 0
