"""
Szyna powiadomień silnika dla warstwy prezentacji i narracji.

Silnik nie wywołuje callbacków prezentacji bezpośrednio - emituje
zdarzenia z zamkniętego zbioru, a zewnętrzni współpracownicy je
subskrybują. Historia zdarzeń może być zapisana do JSON.

TYPY ZDARZEŃ:
═══════════════════════════════════════════════════════════════════

    PHASE_TRANSITION
    ─────────────────────────────────────────────────────────────
    Napis przejścia między porami dnia.
    Data: title, subtitle

    DAY_STARTED
    ─────────────────────────────────────────────────────────────
    Początek dnia.
    Data: moves

    DUSK_CHOICE
    ─────────────────────────────────────────────────────────────
    Wybór przy zmierzchu: zapalić latarnię czy nie.
    Data: oil_cost, oil_available, can_light

    NIGHT_VIGIL / NIGHT_REPORT
    ─────────────────────────────────────────────────────────────
    Czuwanie nocne i rozliczenie zasobów.
    Data: lit / NightReport

    NOTIFICATION
    ─────────────────────────────────────────────────────────────
    Komunikat (niedobór, kara, ostrzeżenie).
    Data: message, level (info | warning | danger)

    STATE_CHANGED
    ─────────────────────────────────────────────────────────────
    Po każdym dispatch.
    Data: action

    ACT_ADVANCED, GAME_OVER
    ─────────────────────────────────────────────────────────────
    Data: act / reason, message

    TILE_EVENTS, LOOT_COLLECTED, NPC_ENCOUNTER, NPC_ARRIVAL
    ─────────────────────────────────────────────────────────────
    Dla narracji. Data: q, r, event_ids / loot / npc_id

    GAME_SAVED, GAME_LOADED
    ─────────────────────────────────────────────────────────────
    Data: slot

FORMAT LOGU:
═══════════════════════════════════════════════════════════════════

{
    "metadata": {"version": "1.0", "timestamp": "2026-01-01T12:00:00"},
    "events": [
        {"type": "PHASE_TRANSITION", "act": 1, "phase": "dawn",
         "data": {"title": "Act I", "subtitle": "Dawn"}},
        ...
    ]
}
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple
import json

from ..state.models import GameState


class EventType(Enum):
    """Typ zdarzenia emitowanego przez silnik."""

    # Cykl dnia
    PHASE_TRANSITION = auto()
    DAY_STARTED = auto()
    DUSK_CHOICE = auto()
    NIGHT_VIGIL = auto()
    NIGHT_REPORT = auto()
    ACT_ADVANCED = auto()
    GAME_OVER = auto()

    # Ogólne
    NOTIFICATION = auto()
    STATE_CHANGED = auto()

    # Wyspa
    TILE_EVENTS = auto()
    LOOT_COLLECTED = auto()
    NPC_ENCOUNTER = auto()
    NPC_ARRIVAL = auto()

    # Zapisy
    GAME_SAVED = auto()
    GAME_LOADED = auto()


@dataclass
class GameEvent:
    """
    Pojedyncze zdarzenie.

    Attributes:
        event_type (EventType): Typ zdarzenia
        act (int): Akt w chwili emisji
        phase (str): Pora dnia w chwili emisji
        data (Dict): Dane specyficzne dla typu
    """
    event_type: EventType
    act: int = 0
    phase: str = ""
    data: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "type": self.event_type.name,
            "act": self.act,
            "phase": self.phase,
        }
        if self.data:
            result["data"] = self.data
        return result


EventListener = Callable[[GameEvent], None]


class EventBus:
    """
    Publikacja zdarzeń + ograniczona historia.

    Wyjątki subskrybentów nie są łapane - zdarzenia są "fire-and-forget"
    tylko w tym sensie, że silnik nie czeka na odpowiedź.

    Attributes:
        events (List[GameEvent]): Historia (najwyżej max_history)
        metadata (Dict): Metadane logu

    Example:
        >>> bus = EventBus(state_provider=lambda: store.state)
        >>> bus.subscribe(print, EventType.GAME_OVER)
        >>> bus.emit(EventType.GAME_OVER, reason="sanity")
    """

    def __init__(
        self,
        state_provider: Optional[Callable[[], GameState]] = None,
        max_history: int = 1000,
    ):
        """
        Args:
            state_provider: Zwraca aktualny stan (act/phase w zdarzeniach)
            max_history: Limit historii
        """
        self.events: List[GameEvent] = []
        self.metadata: Dict[str, Any] = {
            "version": "1.0",
            "timestamp": datetime.now().isoformat(),
        }
        self.max_history = max_history
        self._state_provider = state_provider
        self._listeners: List[Tuple[Optional[EventType], EventListener]] = []

    # ─────────────────────────────────────────────────────────────────────────
    # SUBSKRYPCJE
    # ─────────────────────────────────────────────────────────────────────────

    def subscribe(
        self,
        listener: EventListener,
        event_type: Optional[EventType] = None,
    ) -> Callable[[], None]:
        """
        Rejestruje odbiorcę wszystkich zdarzeń lub jednego typu.

        Returns:
            Callable: Funkcja wypisująca odbiorcę
        """
        entry = (event_type, listener)
        self._listeners.append(entry)

        def unsubscribe() -> None:
            if entry in self._listeners:
                self._listeners.remove(entry)

        return unsubscribe

    # ─────────────────────────────────────────────────────────────────────────
    # EMISJA
    # ─────────────────────────────────────────────────────────────────────────

    def publish(self, event: GameEvent) -> None:
        """Zapisuje zdarzenie w historii i rozsyła do odbiorców."""
        self.events.append(event)
        if len(self.events) > self.max_history:
            del self.events[: len(self.events) - self.max_history]

        for event_type, listener in list(self._listeners):
            if event_type is None or event_type == event.event_type:
                listener(event)

    def emit(self, event_type: EventType, **data: Any) -> GameEvent:
        """
        Tworzy i publikuje zdarzenie.

        Args:
            event_type: Typ zdarzenia
            **data: Dane zdarzenia

        Returns:
            GameEvent: Opublikowane zdarzenie
        """
        act, phase = 0, ""
        if self._state_provider is not None:
            state = self._state_provider()
            act, phase = state.act, state.phase.value
        event = GameEvent(event_type=event_type, act=act, phase=phase, data=dict(data))
        self.publish(event)
        return event

    # ─────────────────────────────────────────────────────────────────────────
    # POMOCNICZE
    # ─────────────────────────────────────────────────────────────────────────

    def announce(self, title: str, subtitle: str = "") -> GameEvent:
        """Napis przejścia fazy."""
        return self.emit(EventType.PHASE_TRANSITION, title=title, subtitle=subtitle)

    def notify(self, message: str, level: str = "info") -> GameEvent:
        return self.emit(EventType.NOTIFICATION, message=message, level=level)

    # ─────────────────────────────────────────────────────────────────────────
    # SERIALIZACJA
    # ─────────────────────────────────────────────────────────────────────────

    def to_dict(self) -> Dict[str, Any]:
        return {
            "metadata": self.metadata,
            "events": [e.to_dict() for e in self.events],
        }

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    def save(self, filepath: str) -> None:
        """
        Zapisuje log zdarzeń do pliku JSON.

        Args:
            filepath: Ścieżka do pliku
        """
        path = Path(filepath)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, 'w', encoding='utf-8') as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)

    # ─────────────────────────────────────────────────────────────────────────
    # STATYSTYKI
    # ─────────────────────────────────────────────────────────────────────────

    def get_event_count(self) -> int:
        return len(self.events)

    def get_events_by_type(self, event_type: EventType) -> List[GameEvent]:
        """Filtruje zdarzenia po typie."""
        return [e for e in self.events if e.event_type == event_type]

    def last(self, event_type: EventType) -> Optional[GameEvent]:
        matches = self.get_events_by_type(event_type)
        return matches[-1] if matches else None

    def clear(self) -> None:
        self.events = []
