"""
Kafelek wyspy (Tile) - jedno pole planszy hexagonalnej.

Każdy kafelek ma:
- Stałe właściwości z mapy: teren, nazwa, opis, explorable, blokada, eventy
- Jednorazowy loot (zasób + ilość + etykieta) - zabierany najwyżej raz
- Stan dynamiczny: visited, explored, fog

MGŁA WOJNY:
═══════════════════════════════════════════════════════════════════

    HIDDEN ──────► SHROUDED ──────► REVEALED
    (nieznane)     (wyczuwalne)     (widoczne)

    Mgła tylko postępuje naprzód - nigdy się nie cofa.
    Stan dynamiczny zmienia wyłącznie Board (explore/reveal)
    lub odtworzenie zapisu.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from ..core.hex_coord import HexCoord


class TerrainType(Enum):
    """Typ terenu kafelka (zamknięta lista)."""

    LIGHTHOUSE = "lighthouse"
    SHORE = "shore"
    CLIFF = "cliff"
    FOREST = "forest"
    CAVE = "cave"
    RUINS = "ruins"
    VILLAGE = "village"
    REEF = "reef"
    DEEP_WATER = "deep_water"
    SHRINE = "shrine"
    SHIPWRECK = "shipwreck"
    PATH = "path"


class FogState(Enum):
    """
    Stan mgły wojny.

    Wartości są uporządkowane: HIDDEN < SHROUDED < REVEALED.
    """

    HIDDEN = "hidden"
    SHROUDED = "shrouded"
    REVEALED = "revealed"

    @property
    def rank(self) -> int:
        return _FOG_ORDER[self]

    def __str__(self) -> str:
        return self.value


_FOG_ORDER = {
    FogState.HIDDEN: 0,
    FogState.SHROUDED: 1,
    FogState.REVEALED: 2,
}


@dataclass(frozen=True)
class Loot:
    """
    Jednorazowy łup leżący na kafelku.

    Attributes:
        kind (str): Rodzaj (oil, food lub inny przedmiot - np. supplies)
        amount (int): Ilość
        label (str): Opis do wyświetlenia
    """
    kind: str
    amount: int
    label: str = ""

    @classmethod
    def from_config(cls, data: Optional[Dict[str, Any]]) -> Optional[Loot]:
        """Tworzy loot z rekordu mapy ({type, amount, description}) lub None."""
        if not data:
            return None
        return cls(
            kind=data.get("kind", data.get("type", "")),
            amount=int(data.get("amount", 0)),
            label=data.get("label", data.get("description", "")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "amount": self.amount, "label": self.label}


@dataclass
class Tile:
    """
    Pojedynczy kafelek wyspy.

    Attributes:
        coord (HexCoord): Pozycja na planszy
        terrain (TerrainType): Typ terenu
        name (str): Nazwa wyświetlana
        description (str): Opis narracyjny (nieprzezroczysty dla silnika)
        explorable (bool): Czy można wejść na pole
        blocked (bool): Czy pole jest zablokowane
        block_reason (str): Powód blokady
        loot (Optional[Loot]): Jednorazowy łup
        events (List[str]): ID zdarzeń narracyjnych
        visited (bool): Czy gracz stał na polu
        explored (bool): Czy pole zostało zbadane
        fog (FogState): Stan mgły
    """
    coord: HexCoord
    terrain: TerrainType = TerrainType.SHORE
    name: str = "Unknown tile"
    description: str = ""
    explorable: bool = True
    blocked: bool = False
    block_reason: str = ""
    loot: Optional[Loot] = None
    events: List[str] = field(default_factory=list)

    # Stan dynamiczny
    visited: bool = False
    explored: bool = False
    fog: FogState = FogState.HIDDEN

    @classmethod
    def from_config(cls, data: Dict[str, Any]) -> Tile:
        """
        Tworzy kafelek z rekordu statycznej mapy.

        Format rekordu:
            {q, r, type, name, description, explorable, events[],
             loot|null, blocked?, blockReason?}

        Raises:
            ValueError: Nieznany typ terenu
        """
        return cls(
            coord=HexCoord(int(data["q"]), int(data["r"])),
            terrain=TerrainType(data.get("type", TerrainType.SHORE.value)),
            name=data.get("name", "Unknown tile"),
            description=data.get("description", ""),
            explorable=bool(data.get("explorable", True)),
            blocked=bool(data.get("blocked", False)),
            block_reason=data.get("blockReason", data.get("block_reason", "")) or "",
            loot=Loot.from_config(data.get("loot")),
            events=list(data.get("events") or []),
        )

    # ─────────────────────────────────────────────────────────────────────────
    # ZAPYTANIA
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def key(self) -> str:
        return self.coord.key()

    def is_passable(self) -> bool:
        """Czy gracz może wejść na pole (explorable, nie zablokowane, nie głęboka woda)."""
        return (
            self.explorable
            and not self.blocked
            and self.terrain != TerrainType.DEEP_WATER
        )

    # ─────────────────────────────────────────────────────────────────────────
    # MGŁA I ŁUP
    # ─────────────────────────────────────────────────────────────────────────

    def advance_fog(self, target: FogState) -> bool:
        """
        Przesuwa mgłę do stanu target, tylko jeśli to krok naprzód.

        Returns:
            bool: True jeśli stan się zmienił
        """
        if target.rank <= self.fog.rank:
            return False
        self.fog = target
        return True

    def reveal(self) -> bool:
        """Odsłania pole (idempotentne)."""
        return self.advance_fog(FogState.REVEALED)

    def shroud(self) -> bool:
        """HIDDEN -> SHROUDED; pola już widoczne zostają bez zmian."""
        return self.advance_fog(FogState.SHROUDED)

    def take_loot(self) -> Optional[Loot]:
        """Zabiera łup - zwraca go najwyżej raz, potem None."""
        loot = self.loot
        self.loot = None
        return loot

    # ─────────────────────────────────────────────────────────────────────────
    # SERIALIZACJA STANU DYNAMICZNEGO
    # ─────────────────────────────────────────────────────────────────────────

    def serialize_state(self) -> Dict[str, Any]:
        return {
            "q": self.coord.q,
            "r": self.coord.r,
            "visited": self.visited,
            "explored": self.explored,
            "fog": self.fog.value,
            "looted": self.loot is None,
        }

    def restore_state(self, state: Dict[str, Any]) -> None:
        """
        Odtwarza stan dynamiczny z zapisu.

        Note:
            Mgła nie cofa się - nieznane lub "wcześniejsze" wartości
            są ignorowane.
        """
        if "visited" in state:
            self.visited = bool(state["visited"])
        if "explored" in state:
            self.explored = bool(state["explored"])
        if state.get("looted"):
            self.loot = None
        fog = state.get("fog")
        if fog in {f.value for f in FogState}:
            self.advance_fog(FogState(fog))

    def to_dict(self) -> Dict[str, Any]:
        """Widok kafelka dla warstwy prezentacji."""
        return {
            "q": self.coord.q,
            "r": self.coord.r,
            "type": self.terrain.value,
            "name": self.name,
            "description": self.description,
            "explorable": self.explorable,
            "block_reason": self.block_reason,
            "loot": self.loot.to_dict() if self.loot else None,
            "events": list(self.events),
            "visited": self.visited,
            "explored": self.explored,
            "fog": self.fog.value,
        }
