"""
State module - stan gry i centralny store.

Zawiera:
- GameState (+ PlayerState, ResourcePool, NPCState, BoardRecord): Model stanu
- ActionType, Action, ActionResult: Tranzycje stanu
- GameStateStore: dispatch/subscribe, zapis i odtwarzanie
"""

from .models import (
    GameState,
    PlayerState,
    ResourcePool,
    NPCState,
    BoardRecord,
    JournalEntry,
    Phase,
    SnapshotError,
    MAX_ACT,
    MAX_SANITY,
)
from .actions import Action, ActionResult, ActionType, PROGRESSION_ACTIONS
from .store import GameStateStore, tag_sets, untag_sets

__all__ = [
    "GameState", "PlayerState", "ResourcePool", "NPCState", "BoardRecord",
    "JournalEntry", "Phase", "SnapshotError", "MAX_ACT", "MAX_SANITY",
    "Action", "ActionResult", "ActionType", "PROGRESSION_ACTIONS",
    "GameStateStore", "tag_sets", "untag_sets",
]
