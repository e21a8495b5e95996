"""
Game router - stan partii, ruch, cykl dnia.
"""

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel
from typing import Any, Dict, Optional

from ...core.hex_coord import HexCoord
from ...events.event_bus import EventType
from ..session import get_game, new_game


router = APIRouter()


# ═══════════════════════════════════════════════════════════════════════════
# REQUEST/RESPONSE MODELS
# ═══════════════════════════════════════════════════════════════════════════

class MoveRequest(BaseModel):
    """Ruch na sąsiednie pole."""
    q: int
    r: int


class ChoiceRequest(BaseModel):
    """Wybór przy zmierzchu."""
    light: bool


class AdvanceRequest(BaseModel):
    """Przesunięcie zegara pauz (None = wszystkie oczekujące)."""
    ms: Optional[int] = None


class JournalRequest(BaseModel):
    id: str
    text: str


class EventCompleteRequest(BaseModel):
    event_id: str


class EffectsRequest(BaseModel):
    """Efekty wyboru narracyjnego."""
    sanity: int = 0
    resources: Dict[str, int] = {}
    trust: Dict[str, int] = {}
    flags: Dict[str, Any] = {}


# ═══════════════════════════════════════════════════════════════════════════
# ENDPOINTS
# ═══════════════════════════════════════════════════════════════════════════

@router.get("/game")
async def get_state() -> Dict[str, Any]:
    """Zwięzły stan partii."""
    return get_game().summary()


@router.get("/game/snapshot")
async def get_snapshot() -> Dict[str, Any]:
    """Pełny obraz stanu (ten sam format co w zapisach)."""
    return get_game().store.snapshot()


@router.post("/game/new")
async def start_new_game() -> Dict[str, Any]:
    return new_game().summary()


@router.post("/game/move")
async def move(request: MoveRequest) -> Dict[str, Any]:
    """
    Ruch gracza.

    Returns:
        Dict z wynikiem ruchu i stanem partii. Odmowa ruchu nie jest
        błędem HTTP - powód jest w polu "outcome".
    """
    game = get_game()
    result = game.try_move(HexCoord(request.q, request.r))
    return {"result": result.to_dict(), "state": game.summary()}


@router.post("/game/end-day")
async def end_day() -> Dict[str, Any]:
    game = get_game()
    if not game.end_day():
        raise HTTPException(status_code=409, detail="Not daytime")
    return game.summary()


@router.post("/game/choose")
async def choose(request: ChoiceRequest) -> Dict[str, Any]:
    """Zapal latarnię lub zostaw ją zgaszoną."""
    game = get_game()
    if not game.choose(request.light):
        raise HTTPException(status_code=409, detail="Choice not available")
    report = game.cycle.last_report
    return {
        "report": report.to_dict() if report else None,
        "state": game.summary(),
    }


@router.post("/game/acknowledge")
async def acknowledge() -> Dict[str, Any]:
    """Czekaj na świt."""
    game = get_game()
    if not game.acknowledge():
        raise HTTPException(status_code=409, detail="Nothing to acknowledge")
    return game.summary()


@router.post("/game/advance")
async def advance(request: AdvanceRequest) -> Dict[str, Any]:
    """Przesuwa zegar pauz narracyjnych."""
    game = get_game()
    if request.ms is None:
        executed = game.fast_forward()
    else:
        executed = game.advance(request.ms)
    return {"executed": executed, "state": game.summary()}


@router.get("/game/events")
async def get_events(limit: int = 50, type: Optional[str] = None) -> Dict[str, Any]:
    """Ostatnie zdarzenia silnika (bez STATE_CHANGED, chyba że podano typ)."""
    bus = get_game().bus
    if type is not None:
        try:
            events = bus.get_events_by_type(EventType[type.upper()])
        except KeyError:
            raise HTTPException(status_code=400, detail=f"Unknown event type: {type}")
    else:
        events = [e for e in bus.events if e.event_type != EventType.STATE_CHANGED]
    return {
        "events": [e.to_dict() for e in events[-limit:]],
        "total_events": bus.get_event_count(),
    }


@router.post("/game/journal")
async def add_journal(request: JournalRequest) -> Dict[str, Any]:
    if not get_game().add_journal(request.id, request.text):
        raise HTTPException(status_code=400, detail="Invalid journal entry")
    return {"journal": [e.to_dict() for e in get_game().state.player.journal]}


@router.post("/game/complete-event")
async def complete_event(request: EventCompleteRequest) -> Dict[str, Any]:
    if not get_game().complete_event(request.event_id):
        raise HTTPException(status_code=400, detail="Invalid event id")
    return {"completed_events": list(get_game().state.completed_events)}


@router.post("/game/effects")
async def apply_effects(request: EffectsRequest) -> Dict[str, Any]:
    game = get_game()
    game.apply_effects(request.model_dump())
    return game.summary()
