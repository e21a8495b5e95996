"""
GameStateStore - jedyne źródło prawdy o stanie gry.

Wzorzec reducer:
═══════════════════════════════════════════════════════════════════

    dispatch(action)
        │
        ├── nieznana akcja / zły payload ──► warning, ActionResult.failure,
        │                                    stan bez zmian, brak powiadomień
        │
        └── apply_action (pełna walidacja, jedna mutacja)
                │
                ▼
            subskrybenci (state, action) w kolejności rejestracji
                │
                └── dispatch z wnętrza subskrybenta trafia do kolejki
                    i wykonuje się po zakończeniu bieżącej rundy

ZAPIS:
═══════════════════════════════════════════════════════════════════

    snapshot()  -> payload, każdy set zamieniony na
                   {"__type": "set", "values": [...]} (rekurencyjnie)
    serialize() -> {"version", "timestamp", "data"}  (format zapisu w slotach)

    restore()/deserialize() działają "fail closed": błąd = False
    i poprzedni stan zostaje nietknięty.
"""

from __future__ import annotations
from collections import deque
from typing import Any, Callable, Deque, Dict, List, Optional, Union
import json
import logging

from .actions import Action, ActionResult, ActionType, InvalidPayload, apply_action
from .models import GameState, SnapshotError, now_ms


logger = logging.getLogger(__name__)

SET_TAG = "__type"
SET_TAG_VALUE = "set"

Listener = Callable[[GameState, Optional[Action]], None]


# ─────────────────────────────────────────────────────────────────────────────
# OZNACZANIE ZBIORÓW
# ─────────────────────────────────────────────────────────────────────────────

def tag_sets(value: Any) -> Any:
    """Zamienia rekurencyjnie każdy set na oznaczony słownik."""
    if isinstance(value, (set, frozenset)):
        return {SET_TAG: SET_TAG_VALUE, "values": [tag_sets(v) for v in sorted(value, key=str)]}
    if isinstance(value, dict):
        return {key: tag_sets(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [tag_sets(item) for item in value]
    return value


def untag_sets(value: Any) -> Any:
    """
    Odwrotność tag_sets.

    Raises:
        SnapshotError: Oznaczenie zbioru bez listy wartości
    """
    if isinstance(value, dict):
        if SET_TAG in value:
            tag = value[SET_TAG]
            values = value.get("values")
            if not isinstance(tag, str) or tag.lower() != SET_TAG_VALUE or not isinstance(values, list):
                raise SnapshotError(f"malformed set tag: {value!r}")
            try:
                return set(untag_sets(v) for v in values)
            except TypeError as exc:
                raise SnapshotError(f"unhashable set member: {exc}") from exc
        return {key: untag_sets(item) for key, item in value.items()}
    if isinstance(value, list):
        return [untag_sets(item) for item in value]
    return value


class GameStateStore:
    """
    Centralny store stanu gry.

    Attributes:
        version (int): Wersja formatu zapisu
        _state (GameState): Żywy agregat
        _listeners (List[Listener]): Subskrybenci
        _queue (Deque[Action]): Akcje wysłane w trakcie powiadamiania

    Example:
        >>> store = GameStateStore()
        >>> store.dispatch("ADJUST_RESOURCE", {"resource": "oil", "amount": -3})
        ActionResult(success=True, error=None, deferred=False)
        >>> store.state.resources.oil
        9
    """

    def __init__(self, state: Optional[GameState] = None, version: int = 1):
        self.version = version
        self._state = state if state is not None else GameState()
        self._listeners: List[Listener] = []
        self._queue: Deque[Action] = deque()
        self._notifying = False

    @property
    def state(self) -> GameState:
        return self._state

    def get_state(self) -> GameState:
        return self._state

    # ─────────────────────────────────────────────────────────────────────────
    # DISPATCH
    # ─────────────────────────────────────────────────────────────────────────

    def dispatch(
        self,
        action: Union[Action, ActionType, str],
        payload: Optional[Dict[str, Any]] = None,
    ) -> ActionResult:
        """
        Wykonuje akcję i powiadamia subskrybentów.

        Args:
            action: Action, ActionType lub nazwa akcji
            payload: Parametry (gdy action nie jest obiektem Action)

        Returns:
            ActionResult: success / failure z opisem / deferred
        """
        resolved = self._resolve(action, payload)
        if resolved is None:
            logger.warning("Unknown action rejected: %r", action)
            return ActionResult.failure(f"unknown action: {action!r}")

        if self._notifying:
            self._queue.append(resolved)
            return ActionResult.ok(deferred=True)

        result = self._apply(resolved)
        if result.success:
            self._notify(resolved)
            self._drain()
        return result

    @staticmethod
    def _resolve(
        action: Union[Action, ActionType, str],
        payload: Optional[Dict[str, Any]],
    ) -> Optional[Action]:
        if isinstance(action, Action):
            return action
        action_type = ActionType.parse(action)
        if action_type is None:
            return None
        return Action(action_type, payload if payload is not None else {})

    def _apply(self, action: Action) -> ActionResult:
        try:
            apply_action(self._state, action)
        except InvalidPayload as exc:
            logger.warning("Action %s rejected: %s", action.type.value, exc)
            return ActionResult.failure(str(exc))
        logger.debug("Applied %s %s", action.type.value, action.payload)
        return ActionResult.ok()

    def _drain(self) -> None:
        while self._queue:
            queued = self._queue.popleft()
            if self._apply(queued).success:
                self._notify(queued)

    # ─────────────────────────────────────────────────────────────────────────
    # SUBSKRYPCJE
    # ─────────────────────────────────────────────────────────────────────────

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Rejestruje subskrybenta wywoływanego jako listener(state, action).

        action jest None dla restore() i reset().

        Returns:
            Callable: Funkcja wypisująca subskrybenta
        """
        if not callable(listener):
            return lambda: None
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, action: Optional[Action]) -> None:
        self._notifying = True
        try:
            for listener in list(self._listeners):
                listener(self._state, action)
        finally:
            self._notifying = False

    # ─────────────────────────────────────────────────────────────────────────
    # SERIALIZACJA
    # ─────────────────────────────────────────────────────────────────────────

    def snapshot(self) -> Dict[str, Any]:
        """Pełny obraz stanu z oznaczonymi zbiorami."""
        return tag_sets(self._state.to_dict())

    def serialize(self) -> Dict[str, Any]:
        """Koperta {version, timestamp, data}."""
        return {
            "version": self.version,
            "timestamp": now_ms(),
            "data": self.snapshot(),
        }

    def to_json(self) -> str:
        return json.dumps(self.serialize(), ensure_ascii=False)

    def restore(self, payload: Any) -> bool:
        """
        Zastępuje stan obrazem z snapshot().

        Returns:
            bool: False przy błędzie - wtedy stan zostaje bez zmian
        """
        try:
            new_state = GameState.from_dict(untag_sets(payload))
        except SnapshotError as exc:
            logger.warning("Snapshot rejected: %s", exc)
            return False

        self._state = new_state
        self._notify(None)
        self._drain()
        return True

    def deserialize(self, envelope: Union[str, Dict[str, Any]]) -> bool:
        """
        Odtwarza stan z koperty serialize() (dict lub JSON).

        Returns:
            bool: False dla złego JSON, złej wersji lub braku danych
        """
        if isinstance(envelope, str):
            try:
                envelope = json.loads(envelope)
            except ValueError as exc:
                logger.warning("Envelope is not valid JSON: %s", exc)
                return False

        if not isinstance(envelope, dict):
            logger.warning("Envelope rejected: expected mapping")
            return False
        if envelope.get("version") != self.version:
            logger.warning(
                "Envelope version mismatch: %r != %r", envelope.get("version"), self.version
            )
            return False
        if not isinstance(envelope.get("data"), dict):
            logger.warning("Envelope rejected: missing data")
            return False
        return self.restore(envelope["data"])

    def reset(self, state: Optional[GameState] = None) -> None:
        """Nowa gra - świeży stan i jedno powiadomienie."""
        self._state = state if state is not None else GameState()
        self._queue.clear()
        self._notify(None)
