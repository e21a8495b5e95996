"""
The Last Lighthouse - silnik symulacji wyspy.

Pakiety:
- core: współrzędne hexagonalne, konfiguracja
- board: kafelki, plansza, pathfinding
- state: model stanu gry i centralny store
- systems: ekonomia zasobów, harmonogram, cykl dnia i nocy
- events: powiadomienia dla warstwy prezentacji
- persistence: zapisy w slotach
"""

from .game import LighthouseGame, MoveOutcome, MoveResult

__version__ = "1.0.0"

__all__ = ["LighthouseGame", "MoveOutcome", "MoveResult", "__version__"]
