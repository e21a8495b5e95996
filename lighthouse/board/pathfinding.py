"""
Zapytania grafowe nad planszą wyspy: dystans, sąsiedztwo, ruchy, BFS.

PathFinder nie ma własnego stanu - trzyma tylko referencję do Board,
więc zawsze odpowiada według aktualnych blokad.

BFS zamiast A*:
    Każdy ruch kosztuje 1, a wyspa ma kilkadziesiąt pól, więc
    przeszukiwanie wszerz daje najkrótszą ścieżkę bez heurystyki.

Determinizm:
    Sąsiedzi są odwiedzani w stałej kolejności HEX_DIRECTIONS
    (E, NE, NW, W, SW, SE). Wynik jest powtarzalny, ale jest to
    *jakaś* najkrótsza ścieżka - nie jedyna kanoniczna, jeśli istnieje
    kilka ścieżek tej samej długości.

Edge cases:
    - Start == Goal: zwraca [start]
    - Brak ścieżki: zwraca None
    - Start lub Goal poza mapą: zwraca None

Przykład użycia:
    >>> finder = PathFinder(board)
    >>> finder.shortest_path(HexCoord(0, 0), HexCoord(2, -1))
    [HexCoord(q=0, r=0), HexCoord(q=1, r=0), HexCoord(q=2, r=-1)]
"""

from __future__ import annotations
from collections import deque
from typing import Deque, Dict, List, Optional

from ..core.hex_coord import HexCoord, hex_range
from .board import Board


class PathFinder:
    """
    Bezstanowe zapytania o ruch po planszy.

    Attributes:
        _board (Board): Plansza, na której liczymy
    """

    def __init__(self, board: Board):
        self._board = board

    # ─────────────────────────────────────────────────────────────────────────
    # DYSTANS I SĄSIEDZTWO
    # ─────────────────────────────────────────────────────────────────────────

    @staticmethod
    def distance(a: HexCoord, b: HexCoord) -> int:
        """Odległość cube max(|dq|, |dr|, |ds|)."""
        return a.distance(b)

    @staticmethod
    def is_adjacent(a: HexCoord, b: HexCoord) -> bool:
        return a.distance(b) == 1

    # ─────────────────────────────────────────────────────────────────────────
    # RUCHY
    # ─────────────────────────────────────────────────────────────────────────

    def valid_moves(self, coord: HexCoord) -> List[HexCoord]:
        """Pozycje, na które gracz może przejść z coord (≡ Board.movable_from)."""
        return [tile.coord for tile in self._board.movable_from(coord)]

    def is_valid_move(self, a: HexCoord, b: HexCoord) -> bool:
        """Ruch a -> b jest legalny: sąsiedztwo i b wśród valid_moves(a)."""
        if not self.is_adjacent(a, b):
            return False
        return b in self.valid_moves(a)

    # ─────────────────────────────────────────────────────────────────────────
    # ŚCIEŻKI
    # ─────────────────────────────────────────────────────────────────────────

    def shortest_path(self, start: HexCoord, goal: HexCoord) -> Optional[List[HexCoord]]:
        """
        Znajduje najkrótszą ścieżkę BFS po grafie valid_moves.

        Args:
            start: Pozycja startowa
            goal: Pozycja docelowa

        Returns:
            Optional[List[HexCoord]]: Ścieżka od start do goal (włącznie
                z oboma) lub None jeśli cel jest nieosiągalny.

        Complexity:
            Time: O(n) gdzie n = liczba pól
            Space: O(n) dla słownika rodziców
        """
        if start not in self._board or goal not in self._board:
            return None

        if start == goal:
            return [start]

        parents: Dict[HexCoord, HexCoord] = {}
        visited = {start}
        queue: Deque[HexCoord] = deque([start])

        while queue:
            current = queue.popleft()

            for neighbor in self.valid_moves(current):
                if neighbor in visited:
                    continue
                visited.add(neighbor)
                parents[neighbor] = current

                if neighbor == goal:
                    return _reconstruct_path(parents, start, goal)

                queue.append(neighbor)

        return None

    def next_step(self, start: HexCoord, goal: HexCoord) -> Optional[HexCoord]:
        """
        Zwraca tylko następny krok na ścieżce do celu.

        Returns:
            Optional[HexCoord]: Następny hex lub None (brak ścieżki / już w celu)
        """
        path = self.shortest_path(start, goal)
        if path is None or len(path) < 2:
            return None
        return path[1]

    def hexes_in_range(self, center: HexCoord, radius: int) -> List[HexCoord]:
        """
        Zwraca istniejące pola w odległości <= radius od centrum.

        Note:
            Zawiera centrum, jeśli istnieje na mapie.
        """
        return [pos for pos in hex_range(center, radius) if pos in self._board]


def _reconstruct_path(
    parents: Dict[HexCoord, HexCoord],
    start: HexCoord,
    goal: HexCoord
) -> List[HexCoord]:
    """Odtwarza ścieżkę od goal do start używając mapy rodziców."""
    path = [goal]
    current = goal

    while current != start:
        current = parents[current]
        path.append(current)

    path.reverse()
    return path
