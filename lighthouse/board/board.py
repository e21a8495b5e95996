"""
Plansza wyspy (Board) - właściciel wszystkich kafelków.

Board zarządza przestrzenią gry:
- Tworzy kafelki raz, ze statycznej mapy
- Odpowiada na zapytania o sąsiadów i pola dostępne do ruchu
- Odsłania mgłę wojny podczas eksploracji

EKSPLORACJA (latarka o zasięgu 1):
═══════════════════════════════════════════════════════════════════

            . . .                  . ░ ░ .
           . . . .                ░ ░ █ ░
          . . @ . .     explore   . ░ @ ░ .
           . . . .    ─────────►  ░ ░ ░ ░
            . . .                  . . .

    @ / █  REVEALED   - pole na którym stoi gracz
    ░      SHROUDED   - pierścień 1 (tylko jeśli był HIDDEN)
    .      bez zmian

    Nieznane współrzędne są ignorowane (no-op, bez wyjątku) -
    legalność ruchu sprawdza wywołujący.

Przykład użycia:
    >>> board = Board(loader.load_tiles())
    >>> board.explore(HexCoord(0, 0))
    >>> [t.name for t in board.movable_from(HexCoord(0, 0))]
    ['East Coast Trail', 'Hidden Cove', 'North Cliff', ...]
"""

from __future__ import annotations
from typing import Any, Dict, Iterable, List, Optional

from ..core.hex_coord import HexCoord
from .tile import FogState, Loot, TerrainType, Tile


class Board:
    """
    Plansza hexagonalna wyspy.

    Attributes:
        _tiles (Dict[HexCoord, Tile]): Mapa pozycja -> kafelek
        _configs (List[Dict]): Rekordy statycznej mapy (do reset())
    """

    def __init__(self, tile_configs: Iterable[Dict[str, Any]] = ()):
        """
        Args:
            tile_configs: Uporządkowana lista rekordów mapy
        """
        self._configs: List[Dict[str, Any]] = [dict(c) for c in tile_configs]
        self._tiles: Dict[HexCoord, Tile] = {}
        self._build()

    def _build(self) -> None:
        self._tiles = {}
        for config in self._configs:
            tile = Tile.from_config(config)
            self._tiles[tile.coord] = tile

    # ─────────────────────────────────────────────────────────────────────────
    # DOSTĘP DO KAFELKÓW
    # ─────────────────────────────────────────────────────────────────────────

    def get_tile(self, coord: HexCoord) -> Optional[Tile]:
        """Zwraca kafelek lub None jeśli pozycja nie istnieje na mapie."""
        return self._tiles.get(coord)

    def all_tiles(self) -> List[Tile]:
        return list(self._tiles.values())

    def tiles_by_type(self, terrain: TerrainType) -> List[Tile]:
        return [t for t in self._tiles.values() if t.terrain == terrain]

    @property
    def tile_count(self) -> int:
        return len(self._tiles)

    def __contains__(self, coord: object) -> bool:
        return coord in self._tiles

    # ─────────────────────────────────────────────────────────────────────────
    # SĄSIEDZI I RUCH
    # ─────────────────────────────────────────────────────────────────────────

    def neighbors(self, coord: HexCoord) -> List[Tile]:
        """
        Zwraca istniejące kafelki sąsiednie (max 6).

        Kolejność zgodna z HEX_DIRECTIONS. Brakujące pola są pomijane.
        """
        result = []
        for neighbor in coord.neighbors():
            tile = self._tiles.get(neighbor)
            if tile is not None:
                result.append(tile)
        return result

    def movable_from(self, coord: HexCoord) -> List[Tile]:
        """
        Zwraca sąsiadów, na których gracz może wejść.

        Warunki: explorable, nie zablokowany, teren != deep_water.
        """
        return [t for t in self.neighbors(coord) if t.is_passable()]

    # ─────────────────────────────────────────────────────────────────────────
    # MGŁA WOJNY
    # ─────────────────────────────────────────────────────────────────────────

    def reveal(self, coord: HexCoord) -> None:
        """Odsłania kafelek (idempotentne). Nieznana pozycja - no-op."""
        tile = self._tiles.get(coord)
        if tile is None:
            return
        tile.reveal()

    def explore(self, coord: HexCoord) -> None:
        """
        Eksploruje kafelek: visited + explored, REVEALED,
        a ukryci sąsiedzi przechodzą w SHROUDED.

        Drugie wywołanie niczego nie zmienia.
        """
        tile = self._tiles.get(coord)
        if tile is None:
            return

        tile.visited = True
        tile.explored = True
        self.reveal(coord)

        for neighbor in self.neighbors(coord):
            neighbor.shroud()

    def take_loot(self, coord: HexCoord) -> Optional[Loot]:
        """Zabiera jednorazowy łup z kafelka (None jeśli brak lub już zabrany)."""
        tile = self._tiles.get(coord)
        if tile is None:
            return None
        return tile.take_loot()

    # ─────────────────────────────────────────────────────────────────────────
    # SERIALIZACJA / RESET
    # ─────────────────────────────────────────────────────────────────────────

    def reset(self) -> None:
        """Przywraca wszystkie kafelki do stanu z mapy (mgła, łup, blokady)."""
        self._build()

    def serialize_state(self) -> List[Dict[str, Any]]:
        return [tile.serialize_state() for tile in self._tiles.values()]

    def restore_state(self, states: Iterable[Dict[str, Any]]) -> None:
        for state in states:
            try:
                coord = HexCoord(int(state["q"]), int(state["r"]))
            except (KeyError, TypeError, ValueError):
                continue
            tile = self._tiles.get(coord)
            if tile is not None:
                tile.restore_state(state)

    # ─────────────────────────────────────────────────────────────────────────
    # DEBUG / VISUALIZACJA
    # ─────────────────────────────────────────────────────────────────────────

    def debug_print(self, player: Optional[HexCoord] = None) -> str:
        """
        Zwraca tekstową reprezentację wyspy.

        Legenda:
            @ = gracz
            # = odsłonięte pole (dostępne)
            ~ = odsłonięta głęboka woda
            X = odsłonięte pole zablokowane
            ? = pole we mgle (shrouded)
            (spacja) = pole ukryte lub poza mapą

        Wiersze przesunięte o r/2, jak na siatce pointy-top.
        """
        if not self._tiles:
            return ""

        qs = [c.q for c in self._tiles]
        rs = [c.r for c in self._tiles]
        min_r, max_r = min(rs), max(rs)
        min_q, max_q = min(qs), max(qs)

        lines = []
        for r in range(min_r, max_r + 1):
            indent = " " * (r - min_r)
            row = []
            for q in range(min_q, max_q + 1):
                coord = HexCoord(q, r)
                tile = self._tiles.get(coord)
                row.append(self._debug_symbol(tile, coord == player))
            lines.append((indent + " ".join(row)).rstrip())
        return "\n".join(lines)

    @staticmethod
    def _debug_symbol(tile: Optional[Tile], is_player: bool) -> str:
        if is_player:
            return "@"
        if tile is None or tile.fog == FogState.HIDDEN:
            return " "
        if tile.fog == FogState.SHROUDED:
            return "?"
        if tile.terrain == TerrainType.DEEP_WATER:
            return "~"
        if not tile.is_passable():
            return "X"
        return "#"
