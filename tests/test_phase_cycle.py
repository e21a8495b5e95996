"""
Testy dla cyklu dnia i nocy.

Testuje:
- Świt -> dzień po pauzie (ruchy per akt)
- Zmierzch po ostatnim ruchu i po end_day()
- Wybór przy zmierzchu (odrzucenie zapalenia bez oleju)
- Noc: rozliczenie, przegrana, czuwanie, świt
- Pełną rozgrywkę do końca ostatniego aktu
"""

import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from lighthouse.core.config_loader import ConfigLoader
from lighthouse.core.hex_coord import HexCoord
from lighthouse.events.event_bus import EventType
from lighthouse.game import LighthouseGame
from lighthouse.state.models import Phase
from lighthouse.systems.phase_cycle import Awaiting, CycleStatus


# ═══════════════════════════════════════════════════════════════════════════
# FIXTURES
# ═══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def game():
    """Nowa gra, jeszcze przed napisem pierwszego aktu."""
    return LighthouseGame()


@pytest.fixture
def day_game(game):
    """Gra w pierwszym dniu (pauza świtu minęła)."""
    game.fast_forward()
    return game


def reach_dusk_choice(game):
    """Dzień -> zmierzch -> oczekiwanie na wybór."""
    game.end_day()
    game.fast_forward()
    assert game.cycle.awaiting == Awaiting.DUSK_CHOICE


def play_night(game, light):
    """Wybór + czuwanie + świt (+ pauza do następnego dnia)."""
    reach_dusk_choice(game)
    assert game.choose(light)
    game.fast_forward()
    if not game.state.game_over:
        assert game.acknowledge()
        game.fast_forward()


# ═══════════════════════════════════════════════════════════════════════════
# TEST: DAWN / DAY
# ═══════════════════════════════════════════════════════════════════════════

def test_new_game_starts_at_dawn(game):
    state = game.state
    assert state.act == 1
    assert state.phase == Phase.DAWN
    assert state.moves_remaining == 0
    assert game.bus.last(EventType.PHASE_TRANSITION).data["title"] == "Day 1"


def test_day_starts_after_transition(game):
    assert game.advance(2499) == 0
    assert game.state.phase == Phase.DAWN

    game.advance(1)

    assert game.state.phase == Phase.DAY
    assert game.state.moves_remaining == 6
    assert game.bus.last(EventType.DAY_STARTED).data == {"moves": 6}


def test_begin_outside_dawn_is_noop(day_game):
    day_game.cycle.begin()
    assert day_game.scheduler.pending == []


def test_dusk_after_last_move(day_game):
    for coord in [HexCoord(1, 0), HexCoord(0, 0)] * 3:
        assert day_game.try_move(coord).ok

    assert day_game.state.moves_remaining == 0
    assert day_game.state.phase == Phase.DAY
    assert day_game.scheduler.has_pending("dusk")

    day_game.advance(1000)
    assert day_game.state.phase == Phase.DUSK


def test_end_day_early(day_game):
    assert day_game.end_day()
    assert day_game.state.phase == Phase.DUSK
    assert day_game.state.moves_remaining == 0
    assert not day_game.end_day()


def test_dusk_choice_offered_after_pause(day_game):
    day_game.end_day()
    assert day_game.cycle.awaiting == Awaiting.NONE

    day_game.advance(2500)

    choice = day_game.cycle.pending_choice
    assert day_game.cycle.awaiting == Awaiting.DUSK_CHOICE
    assert (choice.oil_cost, choice.oil_available, choice.can_light) == (3, 12, True)


# ═══════════════════════════════════════════════════════════════════════════
# TEST: DUSK CHOICE / NIGHT
# ═══════════════════════════════════════════════════════════════════════════

def test_choose_without_pending_choice(day_game):
    assert not day_game.choose(True)
    assert day_game.state.lighthouse_lit == []


def test_light_rejected_without_oil(day_game):
    reach_dusk_choice(day_game)
    day_game.state.resources.oil = 2

    assert not day_game.choose(True)
    assert day_game.cycle.awaiting == Awaiting.DUSK_CHOICE
    assert day_game.state.phase == Phase.DUSK

    assert day_game.choose(False)
    assert day_game.state.lighthouse_lit == [False]


def test_lit_night_consumes_resources(day_game):
    reach_dusk_choice(day_game)
    day_game.choose(True)

    state = day_game.state
    assert state.phase == Phase.NIGHT
    assert state.lighthouse_lit == [True]
    assert state.resources.oil == 9
    assert state.resources.food == 7
    assert day_game.cycle.last_report.oil_used == 3


def test_night_vigil_then_dawn(day_game):
    reach_dusk_choice(day_game)
    day_game.choose(True)
    assert not day_game.acknowledge()

    day_game.fast_forward()
    assert day_game.cycle.awaiting == Awaiting.NIGHT_ACK
    assert day_game.bus.last(EventType.NIGHT_VIGIL).data == {"lit": True}

    assert day_game.acknowledge()
    assert day_game.state.act == 2
    assert day_game.state.phase == Phase.DAWN
    assert day_game.state.turn == 0

    day_game.fast_forward()
    assert day_game.state.phase == Phase.DAY
    assert day_game.state.moves_remaining == 6


def test_fatal_night_ends_game(day_game):
    """Sanity 10 i ciemna noc w akcie 1: przegrana od razu, bez świtu."""
    reach_dusk_choice(day_game)
    day_game.state.player.sanity = 10

    day_game.choose(False)

    assert day_game.state.game_over
    assert day_game.state.game_over_reason == "sanity"
    assert day_game.cycle.status == CycleStatus.LOST
    assert day_game.scheduler.pending == []
    assert day_game.bus.last(EventType.GAME_OVER).data["reason"] == "sanity"

    day_game.fast_forward()
    assert not day_game.acknowledge()
    assert day_game.state.act == 1


def test_shortfall_notifications(day_game):
    reach_dusk_choice(day_game)
    day_game.state.resources.food = 0
    day_game.choose(False)

    messages = [e.data["message"] for e in day_game.bus.get_events_by_type(EventType.NOTIFICATION)]
    assert "1 portions short. Someone went hungry tonight." in messages
    assert "Sanity -25" in messages


# ═══════════════════════════════════════════════════════════════════════════
# TEST: FULL GAME
# ═══════════════════════════════════════════════════════════════════════════

def test_full_game_completes_after_last_night(day_game):
    """Pięć nocy, latarnia zapalana dopóki starcza oleju."""
    for _ in range(5):
        play_night(day_game, day_game.economy.can_light_beacon())

    state = day_game.state
    assert state.game_over
    assert state.game_over_reason == "complete"
    assert day_game.cycle.status == CycleStatus.COMPLETE
    assert state.act == 5
    assert state.lighthouse_lit == [True, True, True, False, False]
    assert state.player.sanity == 60


def test_shorter_game_from_config():
    config = ConfigLoader().load_game_config({"cycle": {"max_act": 2}})
    game = LighthouseGame(config=config)
    game.fast_forward()

    play_night(game, True)
    play_night(game, True)

    assert game.cycle.status == CycleStatus.COMPLETE
    assert game.state.act == 2


def test_moves_per_act_from_config():
    config = ConfigLoader().load_game_config({"cycle": {"moves_per_act": [2, 3]}})
    game = LighthouseGame(config=config)
    game.fast_forward()
    assert game.state.moves_remaining == 2

    play_night(game, True)
    assert game.state.moves_remaining == 3

    play_night(game, True)
    assert game.state.moves_remaining == 3
