"""
Core module - podstawowe komponenty silnika.

Zawiera:
- HexCoord: System współrzędnych hexagonalnych (axial, pointy-top)
- axial_to_pixel / pixel_to_axial: Konwersja dla warstwy prezentacji
- hex_range: Hexy w zasięgu
- ConfigLoader: Wczytywanie konfiguracji z defaults
"""

from .hex_coord import HexCoord, HEX_DIRECTIONS, axial_to_pixel, pixel_to_axial, hex_range
from .config_loader import (
    ConfigLoader,
    GameConfig,
    EconomyConfig,
    CycleConfig,
    PersistenceConfig,
)

__all__ = [
    "HexCoord", "HEX_DIRECTIONS", "axial_to_pixel", "pixel_to_axial", "hex_range",
    "ConfigLoader", "GameConfig", "EconomyConfig", "CycleConfig", "PersistenceConfig",
]
