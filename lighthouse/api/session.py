"""
Sesja gry API - jedna partia w procesie.

Zapisy trafiają do katalogu z LIGHTHOUSE_SAVE_DIR albo do pamięci.
"""

from __future__ import annotations
from typing import Optional
import logging
import os

from ..core.config_loader import ConfigLoader
from ..game import LighthouseGame
from ..persistence.save_manager import FileStorage, MemoryStorage, Storage


logger = logging.getLogger(__name__)

_loader = ConfigLoader(os.environ.get("LIGHTHOUSE_DATA_DIR") or None)
_game: Optional[LighthouseGame] = None


def _make_storage() -> Storage:
    save_dir = os.environ.get("LIGHTHOUSE_SAVE_DIR")
    if save_dir:
        return FileStorage(save_dir)
    return MemoryStorage()


def get_game() -> LighthouseGame:
    """Zwraca bieżącą partię (tworzy ją przy pierwszym wywołaniu)."""
    global _game
    if _game is None:
        _game = LighthouseGame(storage=_make_storage(), loader=_loader)
        logger.info("API game session created")
    return _game


def new_game() -> LighthouseGame:
    """Nowa partia; zapisy zostają."""
    game = get_game()
    game.new_game()
    return game


def reset_session() -> None:
    """Porzuca partię razem z magazynem zapisów (testy)."""
    global _game
    _game = None
