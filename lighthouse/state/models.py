"""
Model stanu gry - agregat GameState i jego części.

Struktura:
═══════════════════════════════════════════════════════════════════

    GameState
    ├── act, phase, turn, moves_remaining
    ├── player: PlayerState
    │     position, sanity, flags, journal[], inventory[]
    ├── resources: ResourcePool (oil, food - z limitami)
    ├── npcs: {id: NPCState}
    ├── board: BoardRecord (explored: set, looted: set)
    ├── completed_events[]
    ├── lighthouse_lit[]   (historia nocy, tylko dopisywanie)
    └── game_started, game_over, game_over_reason

Jedynym zapisującym jest GameStateStore - reszta kodu tylko czyta.

to_dict() zostawia zbiory jako Python set; oznaczanie ich w zapisie
robi store. from_dict() odbudowuje stan i rzuca SnapshotError przy
brakującym lub źle typowanym polu.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Set
import copy
import time

from ..core.hex_coord import HexCoord

if TYPE_CHECKING:
    from ..core.config_loader import GameConfig


MAX_ACT = 5
MIN_SANITY = 0
MAX_SANITY = 100
RESOURCES = ("oil", "food")


def now_ms() -> int:
    """Aktualny czas w milisekundach epoki."""
    return int(time.time() * 1000)


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


class SnapshotError(ValueError):
    """Zapis stanu jest niekompletny lub ma złe typy."""


class Phase(Enum):
    """Pora dnia w cyklu aktu."""

    DAWN = "dawn"
    DAY = "day"
    DUSK = "dusk"
    NIGHT = "night"

    def __str__(self) -> str:
        return self.value


# ─────────────────────────────────────────────────────────────────────────────
# CZĘŚCI STANU
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class JournalEntry:
    """
    Wpis w dzienniku gracza.

    Attributes:
        id (str): Identyfikator wpisu
        text (str): Treść
        act (int): Akt, w którym powstał
        turn (int): Numer tury
        timestamp (int): Czas w ms epoki
    """
    id: str
    text: str
    act: int
    turn: int
    timestamp: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "act": self.act,
            "turn": self.turn,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: Any) -> JournalEntry:
        _expect(data, dict, "journal entry")
        return cls(
            id=_field(data, "id", str),
            text=_field(data, "text", str),
            act=_field(data, "act", int),
            turn=_field(data, "turn", int),
            timestamp=_field(data, "timestamp", int),
        )


@dataclass
class ResourcePool:
    """
    Dwa liczniki zasobów (oil, food), każdy w [0, max].

    Jedyna mutacja to adjust() - dodaj deltę i przytnij.
    """
    oil: int = 12
    food: int = 8
    max_oil: int = 20
    max_food: int = 15

    def get(self, name: str) -> Optional[int]:
        """Ilość zasobu lub None dla nieznanej nazwy."""
        if name not in RESOURCES:
            return None
        return getattr(self, name)

    def maximum(self, name: str) -> Optional[int]:
        if name not in RESOURCES:
            return None
        return getattr(self, f"max_{name}")

    def adjust(self, name: str, delta: int) -> Optional[int]:
        """
        clamp(current + delta, 0, max).

        Returns:
            Optional[int]: Nowa wartość lub None dla nieznanego zasobu
        """
        if name not in RESOURCES:
            return None
        value = clamp(getattr(self, name) + delta, 0, self.maximum(name))
        setattr(self, name, value)
        return value

    def to_dict(self) -> Dict[str, Any]:
        return {
            "oil": self.oil,
            "food": self.food,
            "max": {"oil": self.max_oil, "food": self.max_food},
        }

    @classmethod
    def from_dict(cls, data: Any) -> ResourcePool:
        _expect(data, dict, "resources")
        maxima = data.get("max", {"oil": 20, "food": 15})
        _expect(maxima, dict, "resources.max")
        pool = cls(
            oil=_field(data, "oil", int),
            food=_field(data, "food", int),
            max_oil=_field(maxima, "oil", int),
            max_food=_field(maxima, "food", int),
        )
        for name in RESOURCES:
            value, maximum = pool.get(name), pool.maximum(name)
            if maximum <= 0:
                raise SnapshotError(f"resources: max {name} must be positive")
            if not 0 <= value <= maximum:
                raise SnapshotError(f"resources: {name} {value} out of range [0, {maximum}]")
        return pool


@dataclass
class NPCState:
    """
    Rekord NPC - tworzony przy pierwszym spotkaniu, nigdy nie usuwany.

    Attributes:
        arrived (int): Akt pojawienia się
        trust (int): Poziom zaufania
        alive (bool): Czy żyje (zamiast usuwania rekordu)
        revealed (List[str]): Odkryte tematy rozmów
        extra (Dict): Pozostałe pola (nieprzezroczyste dla silnika)
    """
    arrived: int = 1
    trust: int = 0
    alive: bool = True
    revealed: List[str] = field(default_factory=list)
    extra: Dict[str, Any] = field(default_factory=dict)

    _KNOWN = ("arrived", "trust", "alive", "revealed")

    def merge(self, partial: Dict[str, Any]) -> None:
        """Nakłada częściowy rekord na istniejący."""
        for key, value in partial.items():
            if key in self._KNOWN:
                setattr(self, key, copy.deepcopy(value))
            else:
                self.extra[key] = copy.deepcopy(value)

    @staticmethod
    def validate(partial: Dict[str, Any]) -> Optional[str]:
        """Zwraca opis błędu dla źle typowanych znanych pól albo None."""
        if "arrived" in partial and not _is_int(partial["arrived"]):
            return "arrived must be an int"
        if "trust" in partial and not _is_int(partial["trust"]):
            return "trust must be an int"
        if "alive" in partial and not isinstance(partial["alive"], bool):
            return "alive must be a bool"
        if "revealed" in partial and not isinstance(partial["revealed"], list):
            return "revealed must be a list"
        return None

    def to_dict(self) -> Dict[str, Any]:
        result = copy.deepcopy(self.extra)
        result.update({
            "arrived": self.arrived,
            "trust": self.trust,
            "alive": self.alive,
            "revealed": list(self.revealed),
        })
        return result

    @classmethod
    def from_dict(cls, data: Any) -> NPCState:
        _expect(data, dict, "npc")
        error = cls.validate(data)
        if error:
            raise SnapshotError(f"npc: {error}")
        npc = cls()
        npc.merge(data)
        return npc


@dataclass
class BoardRecord:
    """Zbiory kluczy "q,r": pola zbadane i pola z zabranym łupem."""
    explored: Set[str] = field(default_factory=lambda: {"0,0"})
    looted: Set[str] = field(default_factory=set)

    def to_dict(self) -> Dict[str, Any]:
        return {"explored": set(self.explored), "looted": set(self.looted)}

    @classmethod
    def from_dict(cls, data: Any) -> BoardRecord:
        _expect(data, dict, "board")
        explored = _field(data, "explored", set)
        looted = data.get("looted", set())
        _expect(looted, set, "board.looted")
        for key in explored | looted:
            if HexCoord.from_key(key) is None:
                raise SnapshotError(f"board: malformed key {key!r}")
        return cls(explored=set(explored), looted=set(looted))


@dataclass
class PlayerState:
    """
    Stan gracza.

    Attributes:
        position (HexCoord): Aktualne pole
        sanity (int): Zdrowie psychiczne, [0, 100]
        flags (Dict[str, Any]): Flagi postępu (nazwa -> wartość)
        journal (List[JournalEntry]): Dziennik (tylko dopisywanie)
        inventory (List[Dict]): Przedmioty (silnik tylko przechowuje)
    """
    position: HexCoord = field(default_factory=lambda: HexCoord(0, 0))
    sanity: int = MAX_SANITY
    flags: Dict[str, Any] = field(default_factory=dict)
    journal: List[JournalEntry] = field(default_factory=list)
    inventory: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "position": self.position.to_dict(),
            "sanity": self.sanity,
            "flags": copy.deepcopy(self.flags),
            "journal": [entry.to_dict() for entry in self.journal],
            "inventory": copy.deepcopy(self.inventory),
        }

    @classmethod
    def from_dict(cls, data: Any) -> PlayerState:
        _expect(data, dict, "player")
        position = _field(data, "position", dict)
        flags = data.get("flags", {})
        _expect(flags, dict, "player.flags")
        journal = data.get("journal", [])
        _expect(journal, list, "player.journal")
        inventory = data.get("inventory", [])
        _expect(inventory, list, "player.inventory")
        sanity = _field(data, "sanity", int)
        if not MIN_SANITY <= sanity <= MAX_SANITY:
            raise SnapshotError(f"player: sanity {sanity} out of range")
        return cls(
            position=HexCoord(_field(position, "q", int), _field(position, "r", int)),
            sanity=sanity,
            flags=copy.deepcopy(flags),
            journal=[JournalEntry.from_dict(entry) for entry in journal],
            inventory=copy.deepcopy(inventory),
        )


# ─────────────────────────────────────────────────────────────────────────────
# AGREGAT
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class GameState:
    """
    Pełny stan rozgrywki.

    Invarianty:
        - act nie maleje i nie przekracza MAX_ACT
        - moves_remaining >= 0, ustawiane tylko przy wejściu w dzień
        - lighthouse_lit tylko rośnie (jeden wpis na noc)
    """
    act: int = 1
    phase: Phase = Phase.DAWN
    turn: int = 0
    moves_remaining: int = 0
    player: PlayerState = field(default_factory=PlayerState)
    resources: ResourcePool = field(default_factory=ResourcePool)
    npcs: Dict[str, NPCState] = field(default_factory=dict)
    board: BoardRecord = field(default_factory=BoardRecord)
    completed_events: List[str] = field(default_factory=list)
    lighthouse_lit: List[bool] = field(default_factory=list)
    game_started: bool = False
    game_over: bool = False
    game_over_reason: Optional[str] = None

    @classmethod
    def initial(cls, config: Optional[GameConfig] = None) -> GameState:
        """
        Stan nowej gry.

        Args:
            config: Konfiguracja gry (None = wartości wbudowane)
        """
        if config is None:
            return cls()

        economy = config.economy
        start = HexCoord(int(config.start.get("q", 0)), int(config.start.get("r", 0)))
        return cls(
            player=PlayerState(
                position=start,
                sanity=clamp(economy.initial_sanity, MIN_SANITY, MAX_SANITY),
            ),
            resources=ResourcePool(
                oil=economy.initial_resources.get("oil", 12),
                food=economy.initial_resources.get("food", 8),
                max_oil=economy.max_resources.get("oil", 20),
                max_food=economy.max_resources.get("food", 15),
            ),
            board=BoardRecord(explored={start.key()}),
        )

    # ─────────────────────────────────────────────────────────────────────────
    # ZAPYTANIA
    # ─────────────────────────────────────────────────────────────────────────

    def living_npcs(self) -> List[str]:
        return [npc_id for npc_id, npc in self.npcs.items() if npc.alive]

    # ─────────────────────────────────────────────────────────────────────────
    # SERIALIZACJA
    # ─────────────────────────────────────────────────────────────────────────

    def to_dict(self) -> Dict[str, Any]:
        """Struktura z prostych typów; zbiory zostają jako set."""
        return {
            "act": self.act,
            "phase": self.phase.value,
            "turn": self.turn,
            "moves_remaining": self.moves_remaining,
            "player": self.player.to_dict(),
            "resources": self.resources.to_dict(),
            "npcs": {npc_id: npc.to_dict() for npc_id, npc in self.npcs.items()},
            "board": self.board.to_dict(),
            "completed_events": list(self.completed_events),
            "lighthouse_lit": list(self.lighthouse_lit),
            "game_started": self.game_started,
            "game_over": self.game_over,
            "game_over_reason": self.game_over_reason,
        }

    @classmethod
    def from_dict(cls, data: Any) -> GameState:
        """
        Odbudowuje stan ze struktury z to_dict().

        Raises:
            SnapshotError: Brakujące pole, zły typ lub wartość spoza zakresu
        """
        _expect(data, dict, "state")

        try:
            phase = Phase(_field(data, "phase", str))
        except ValueError as exc:
            raise SnapshotError(f"state: {exc}") from exc

        act = _field(data, "act", int)
        if not 1 <= act <= MAX_ACT:
            raise SnapshotError(f"state: act {act} out of range")
        moves = _field(data, "moves_remaining", int)
        if moves < 0:
            raise SnapshotError("state: negative moves_remaining")

        npcs = _field(data, "npcs", dict)
        completed = data.get("completed_events", [])
        _expect(completed, list, "completed_events")
        lit = data.get("lighthouse_lit", [])
        _expect(lit, list, "lighthouse_lit")
        if not all(isinstance(v, bool) for v in lit):
            raise SnapshotError("lighthouse_lit: expected booleans")
        reason = data.get("game_over_reason")
        if reason is not None and not isinstance(reason, str):
            raise SnapshotError("game_over_reason: expected str")

        return cls(
            act=act,
            phase=phase,
            turn=_field(data, "turn", int),
            moves_remaining=moves,
            player=PlayerState.from_dict(data.get("player")),
            resources=ResourcePool.from_dict(data.get("resources")),
            npcs={str(npc_id): NPCState.from_dict(npc) for npc_id, npc in npcs.items()},
            board=BoardRecord.from_dict(data.get("board")),
            completed_events=[str(e) for e in completed],
            lighthouse_lit=list(lit),
            game_started=bool(data.get("game_started", False)),
            game_over=bool(data.get("game_over", False)),
            game_over_reason=reason,
        )


# ─────────────────────────────────────────────────────────────────────────────
# WALIDACJA
# ─────────────────────────────────────────────────────────────────────────────

def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _expect(value: Any, expected: type, name: str) -> None:
    if expected is int:
        ok = _is_int(value)
    else:
        ok = isinstance(value, expected)
    if not ok:
        raise SnapshotError(f"{name}: expected {expected.__name__}, got {type(value).__name__}")


def _field(data: Dict[str, Any], key: str, expected: type) -> Any:
    if key not in data:
        raise SnapshotError(f"missing field {key!r}")
    _expect(data[key], expected, key)
    return data[key]
