"""
Board module - przestrzeń gry.

Zawiera:
- Tile: Pojedyncze pole wyspy (teren, mgła, łup)
- Board: Wszystkie kafelki, sąsiedzi, eksploracja
- PathFinder: Zapytania grafowe (BFS, zasięg)
"""

from .tile import Tile, TerrainType, FogState, Loot
from .board import Board
from .pathfinding import PathFinder

__all__ = ["Tile", "TerrainType", "FogState", "Loot", "Board", "PathFinder"]
