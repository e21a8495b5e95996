"""
System akcji - nazwane, walidowane tranzycje stanu gry.

Każda akcja:
1. Waliduje cały payload (przed jakąkolwiek zmianą)
2. Wykonuje dokładnie jedną mutację stanu
3. Zwraca ActionResult (sukces lub opis błędu)

AKCJE:
═══════════════════════════════════════════════════════════════════

    MOVE                 {q, r}            pozycja, explored, ruchy - 1, tura + 1
    ADJUST_RESOURCE      {resource, amount} clamp(aktualne + amount, 0, max)
    SET_PHASE            {phase, moves_remaining?}
    SET_SANITY           {sanity}          clamp(0, 100)
    ADD_JOURNAL_ENTRY    {id, text}        + act, turn, timestamp
    SET_FLAG             {flag, value=True}
    UPSERT_NPC           {id, data}        merge lub utworzenie
    ADVANCE_ACT          -                 act + 1 (max 5), tura 0, świt
    SET_GAME_OVER        {reason?}         stan końcowy
    RECORD_NIGHT_OUTCOME {lit}             historia latarni
    COLLECT_LOOT         {q, r, kind, amount, label?}
    COMPLETE_EVENT       {event_id}
    START_GAME           -

Po SET_GAME_OVER akcje postępu (PROGRESSION_ACTIONS) są odrzucane.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Optional

from ..core.hex_coord import HexCoord
from .models import (
    MAX_ACT,
    MAX_SANITY,
    MIN_SANITY,
    RESOURCES,
    GameState,
    JournalEntry,
    NPCState,
    Phase,
    clamp,
    now_ms,
)


class ActionType(Enum):
    """Zamknięty zbiór tranzycji stanu."""

    MOVE = "MOVE"
    ADJUST_RESOURCE = "ADJUST_RESOURCE"
    SET_PHASE = "SET_PHASE"
    SET_SANITY = "SET_SANITY"
    ADD_JOURNAL_ENTRY = "ADD_JOURNAL_ENTRY"
    SET_FLAG = "SET_FLAG"
    UPSERT_NPC = "UPSERT_NPC"
    ADVANCE_ACT = "ADVANCE_ACT"
    SET_GAME_OVER = "SET_GAME_OVER"
    RECORD_NIGHT_OUTCOME = "RECORD_NIGHT_OUTCOME"
    COLLECT_LOOT = "COLLECT_LOOT"
    COMPLETE_EVENT = "COMPLETE_EVENT"
    START_GAME = "START_GAME"

    @classmethod
    def parse(cls, name: Any) -> Optional[ActionType]:
        """Nazwa akcji -> ActionType, None dla nieznanej."""
        if isinstance(name, cls):
            return name
        if not isinstance(name, str):
            return None
        try:
            return cls[name.upper()]
        except KeyError:
            return None


PROGRESSION_ACTIONS = frozenset({
    ActionType.MOVE,
    ActionType.SET_PHASE,
    ActionType.ADVANCE_ACT,
    ActionType.RECORD_NIGHT_OUTCOME,
    ActionType.COLLECT_LOOT,
})


@dataclass
class Action:
    """
    Akcja do wykonania przez store.

    Attributes:
        type (ActionType): Rodzaj tranzycji
        payload (Dict): Parametry (kształt zależy od typu)
    """
    type: ActionType
    payload: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type.value, "payload": dict(self.payload)}


@dataclass
class ActionResult:
    """
    Wynik dispatch.

    Attributes:
        success (bool): Czy akcja została przyjęta
        error (Optional[str]): Powód odrzucenia
        deferred (bool): Akcja zakolejkowana (dispatch z wnętrza subskrybenta)
    """
    success: bool
    error: Optional[str] = None
    deferred: bool = False

    @classmethod
    def ok(cls, deferred: bool = False) -> ActionResult:
        return cls(success=True, deferred=deferred)

    @classmethod
    def failure(cls, error: str) -> ActionResult:
        return cls(success=False, error=error)

    def __bool__(self) -> bool:
        return self.success


class InvalidPayload(ValueError):
    """Payload akcji nie przeszedł walidacji."""


# ─────────────────────────────────────────────────────────────────────────────
# WALIDACJA PAYLOADU
# ─────────────────────────────────────────────────────────────────────────────

def _int(payload: Dict[str, Any], key: str) -> int:
    value = payload.get(key)
    if not isinstance(value, int) or isinstance(value, bool):
        raise InvalidPayload(f"{key!r} must be an int")
    return value


def _str(payload: Dict[str, Any], key: str) -> str:
    value = payload.get(key)
    if not isinstance(value, str) or not value:
        raise InvalidPayload(f"{key!r} must be a non-empty string")
    return value


# ─────────────────────────────────────────────────────────────────────────────
# HANDLERY
# ─────────────────────────────────────────────────────────────────────────────

def _move(state: GameState, payload: Dict[str, Any]) -> None:
    target = HexCoord(_int(payload, "q"), _int(payload, "r"))
    if target == state.player.position:
        raise InvalidPayload(f"already at {target}")
    state.player.position = target
    state.board.explored.add(target.key())
    state.moves_remaining = max(0, state.moves_remaining - 1)
    state.turn += 1


def _adjust_resource(state: GameState, payload: Dict[str, Any]) -> None:
    resource = payload.get("resource")
    if resource not in RESOURCES:
        raise InvalidPayload(f"unknown resource {resource!r}")
    state.resources.adjust(resource, _int(payload, "amount"))


def _set_phase(state: GameState, payload: Dict[str, Any]) -> None:
    raw = payload.get("phase")
    try:
        phase = raw if isinstance(raw, Phase) else Phase(raw)
    except ValueError:
        raise InvalidPayload(f"unknown phase {raw!r}")
    moves = None
    if payload.get("moves_remaining") is not None:
        moves = _int(payload, "moves_remaining")
        if moves < 0:
            raise InvalidPayload("moves_remaining must be >= 0")
    state.phase = phase
    if moves is not None:
        state.moves_remaining = moves


def _set_sanity(state: GameState, payload: Dict[str, Any]) -> None:
    state.player.sanity = clamp(_int(payload, "sanity"), MIN_SANITY, MAX_SANITY)


def _add_journal_entry(state: GameState, payload: Dict[str, Any]) -> None:
    entry_id = _str(payload, "id")
    text = payload.get("text")
    if not isinstance(text, str):
        raise InvalidPayload("'text' must be a string")
    state.player.journal.append(JournalEntry(
        id=entry_id,
        text=text,
        act=state.act,
        turn=state.turn,
        timestamp=now_ms(),
    ))


def _set_flag(state: GameState, payload: Dict[str, Any]) -> None:
    flag = _str(payload, "flag")
    state.player.flags[flag] = payload.get("value", True)


def _upsert_npc(state: GameState, payload: Dict[str, Any]) -> None:
    npc_id = _str(payload, "id")
    data = payload.get("data", {})
    if not isinstance(data, dict):
        raise InvalidPayload("'data' must be a mapping")
    error = NPCState.validate(data)
    if error:
        raise InvalidPayload(error)
    npc = state.npcs.get(npc_id)
    if npc is None:
        npc = NPCState(arrived=state.act)
        state.npcs[npc_id] = npc
    npc.merge(data)


def _advance_act(state: GameState, payload: Dict[str, Any]) -> None:
    state.act = min(MAX_ACT, state.act + 1)
    state.turn = 0
    state.phase = Phase.DAWN


def _set_game_over(state: GameState, payload: Dict[str, Any]) -> None:
    reason = payload.get("reason")
    if reason is not None and not isinstance(reason, str):
        raise InvalidPayload("'reason' must be a string")
    state.game_over = True
    if reason:
        state.game_over_reason = reason


def _record_night_outcome(state: GameState, payload: Dict[str, Any]) -> None:
    lit = payload.get("lit")
    if not isinstance(lit, bool):
        raise InvalidPayload("'lit' must be a bool")
    state.lighthouse_lit.append(lit)


def _collect_loot(state: GameState, payload: Dict[str, Any]) -> None:
    key = HexCoord(_int(payload, "q"), _int(payload, "r")).key()
    kind = _str(payload, "kind")
    amount = _int(payload, "amount")
    label = payload.get("label", "")
    if key in state.board.looted:
        raise InvalidPayload(f"loot at {key} already collected")

    if kind in RESOURCES:
        state.resources.adjust(kind, amount)
    else:
        state.player.inventory.append({
            "kind": kind,
            "amount": amount,
            "label": label,
            "act": state.act,
        })
    state.board.looted.add(key)


def _complete_event(state: GameState, payload: Dict[str, Any]) -> None:
    event_id = _str(payload, "event_id")
    if event_id not in state.completed_events:
        state.completed_events.append(event_id)


def _start_game(state: GameState, payload: Dict[str, Any]) -> None:
    state.game_started = True


HANDLERS: Dict[ActionType, Callable[[GameState, Dict[str, Any]], None]] = {
    ActionType.MOVE: _move,
    ActionType.ADJUST_RESOURCE: _adjust_resource,
    ActionType.SET_PHASE: _set_phase,
    ActionType.SET_SANITY: _set_sanity,
    ActionType.ADD_JOURNAL_ENTRY: _add_journal_entry,
    ActionType.SET_FLAG: _set_flag,
    ActionType.UPSERT_NPC: _upsert_npc,
    ActionType.ADVANCE_ACT: _advance_act,
    ActionType.SET_GAME_OVER: _set_game_over,
    ActionType.RECORD_NIGHT_OUTCOME: _record_night_outcome,
    ActionType.COLLECT_LOOT: _collect_loot,
    ActionType.COMPLETE_EVENT: _complete_event,
    ActionType.START_GAME: _start_game,
}


def apply_action(state: GameState, action: Action) -> None:
    """
    Wykonuje akcję na stanie.

    Handlery walidują payload przed pierwszą mutacją, więc odrzucona
    akcja nie zostawia stanu w połowie zmienionego.

    Raises:
        InvalidPayload: Akcja odrzucona (stan bez zmian)
    """
    if not isinstance(action.payload, dict):
        raise InvalidPayload("payload must be a mapping")
    if state.game_over and action.type in PROGRESSION_ACTIONS:
        raise InvalidPayload(f"game over, {action.type.value} rejected")
    HANDLERS[action.type](state, action.payload)
