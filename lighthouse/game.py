"""
LighthouseGame - obiekt główny rozgrywki.

Tworzy i łączy wszystkie komponenty jednej partii. Nie ma globalnego
singletonu - "nowa gra" buduje wszystko od zera.

    LighthouseGame
    ├── config       GameConfig (YAML)
    ├── board        Board (kafelki, mgła)
    ├── pathfinder   PathFinder
    ├── store        GameStateStore (jedyne źródło prawdy)
    ├── scheduler    Scheduler (pauzy narracyjne)
    ├── bus          EventBus (powiadomienia)
    ├── economy      ResourceEconomy
    ├── cycle        PhaseCycle
    └── saves        SaveManager

RUCH GRACZA (try_move):
═══════════════════════════════════════════════════════════════════

    1. Walidacja: koniec gry, pora dnia, ruchy, pole, sąsiedztwo, blokada
    2. MOVE + Board.explore
    3. Łup (jednorazowo) -> COLLECT_LOOT + LOOT_COLLECTED
    4. Nieukończone eventy pola -> TILE_EVENTS
    5. Spotkanie NPC z tabeli npc_spawns -> UPSERT_NPC + NPC_ENCOUNTER
    6. Cykl dnia (zmierzch po ostatnim ruchu) + autosave

Fog planszy jest stanem pochodnym: po wczytaniu zapisu plansza jest
odbudowywana z explored i looted w GameState.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional
import logging

from .board.board import Board
from .board.pathfinding import PathFinder
from .board.tile import Loot, Tile
from .core.config_loader import ConfigLoader, GameConfig
from .core.hex_coord import HexCoord
from .events.event_bus import EventBus, EventType, GameEvent
from .persistence.save_manager import MemoryStorage, SaveManager, Storage
from .state.actions import Action, ActionType
from .state.models import GameState, Phase
from .state.store import GameStateStore
from .systems.phase_cycle import PhaseCycle
from .systems.resource_economy import ResourceEconomy
from .systems.scheduler import Scheduler


logger = logging.getLogger(__name__)


class MoveOutcome(Enum):
    """Wynik próby ruchu."""

    OK = "ok"
    GAME_OVER = "game_over"
    NOT_DAY = "not_day"
    NO_MOVES = "no_moves"
    SAME_TILE = "same_tile"
    UNKNOWN_TILE = "unknown_tile"
    NOT_ADJACENT = "not_adjacent"
    BLOCKED = "blocked"
    IMPASSABLE = "impassable"


@dataclass
class MoveResult:
    """
    Wynik try_move.

    Attributes:
        outcome (MoveOutcome): Rezultat
        tile (Optional[Tile]): Pole docelowe (jeśli istnieje)
        loot (Optional[Loot]): Zebrany łup
        message (str): Komunikat dla gracza (np. powód blokady)
    """
    outcome: MoveOutcome
    tile: Optional[Tile] = None
    loot: Optional[Loot] = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.outcome == MoveOutcome.OK

    def to_dict(self) -> Dict[str, Any]:
        return {
            "outcome": self.outcome.value,
            "tile": self.tile.to_dict() if self.tile else None,
            "loot": self.loot.to_dict() if self.loot else None,
            "message": self.message,
        }


class LighthouseGame:
    """
    Partia gry - właściciel wszystkich komponentów.

    Attributes:
        loader (ConfigLoader): Źródło konfiguracji
        config (GameConfig): Konfiguracja partii
        storage (Storage): Magazyn zapisów (przeżywa new_game())

    Example:
        >>> game = LighthouseGame()
        >>> game.fast_forward()               # napis aktu -> dzień
        >>> game.try_move(HexCoord(1, 0)).outcome
        <MoveOutcome.OK: 'ok'>
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        storage: Optional[Storage] = None,
        loader: Optional[ConfigLoader] = None,
    ):
        self.loader = loader or ConfigLoader()
        self.config = config or self.loader.load_game_config()
        self.storage = storage if storage is not None else MemoryStorage()
        self.new_game()

    # ─────────────────────────────────────────────────────────────────────────
    # BUDOWA PARTII
    # ─────────────────────────────────────────────────────────────────────────

    def new_game(self) -> None:
        """Buduje wszystkie komponenty od nowa i rozpoczyna akt 1."""
        config = self.config

        self.board = Board(config.tiles)
        self.pathfinder = PathFinder(self.board)
        self.store = GameStateStore(GameState.initial(config), version=config.persistence.version)
        self.scheduler = Scheduler()
        self.bus = EventBus(state_provider=lambda: self.store.state)
        self.economy = ResourceEconomy(self.store, config.economy)
        self.cycle = PhaseCycle(self.store, self.economy, self.scheduler, self.bus, config.cycle)
        self.saves = SaveManager(self.store, config.persistence, self.storage)

        self.store.subscribe(self._on_state_changed)
        self.bus.subscribe(self._on_day_started, EventType.DAY_STARTED)

        self.board.explore(self.store.state.player.position)
        self.store.dispatch(ActionType.START_GAME)
        logger.info("New game started")
        self.cycle.begin()

    def _on_state_changed(self, state: GameState, action: Optional[Action]) -> None:
        self.bus.emit(EventType.STATE_CHANGED, action=action.type.value if action else None)

    def _on_day_started(self, event: GameEvent) -> None:
        arrivals = self.new_arrivals(self.store.state.act)
        for npc_id in arrivals:
            spawn = self.config.npc_spawns[npc_id]
            self.bus.emit(EventType.NPC_ARRIVAL, npc_id=npc_id, q=spawn["q"], r=spawn["r"])
        if arrivals:
            self.bus.notify("Someone new seems to have arrived on the island...", "event")

    @property
    def state(self) -> GameState:
        return self.store.state

    # ─────────────────────────────────────────────────────────────────────────
    # CZAS
    # ─────────────────────────────────────────────────────────────────────────

    def advance(self, ms: int) -> int:
        """Przesuwa zegar pauz narracyjnych."""
        return self.scheduler.advance(ms)

    def fast_forward(self) -> int:
        """Wykonuje wszystkie oczekujące kontynuacje."""
        return self.scheduler.run_pending()

    # ─────────────────────────────────────────────────────────────────────────
    # RUCH
    # ─────────────────────────────────────────────────────────────────────────

    def try_move(self, coord: HexCoord) -> MoveResult:
        """
        Próba przejścia gracza na sąsiednie pole.

        Args:
            coord: Pole docelowe

        Returns:
            MoveResult: OK albo powód odmowy (stan bez zmian)
        """
        state = self.store.state
        if state.game_over:
            return MoveResult(MoveOutcome.GAME_OVER, message="The game is over.")
        if state.phase != Phase.DAY:
            return MoveResult(MoveOutcome.NOT_DAY, message="You can only explore during the day.")
        if state.moves_remaining <= 0:
            return MoveResult(MoveOutcome.NO_MOVES, message="No moves left. Night is coming.")

        position = state.player.position
        if coord == position:
            return MoveResult(MoveOutcome.SAME_TILE, self.board.get_tile(coord))

        tile = self.board.get_tile(coord)
        if tile is None:
            return MoveResult(MoveOutcome.UNKNOWN_TILE, message="There is nothing there.")
        if not self.pathfinder.is_adjacent(position, coord):
            return MoveResult(MoveOutcome.NOT_ADJACENT, tile, message="Too far away.")
        if tile.blocked:
            return MoveResult(
                MoveOutcome.BLOCKED, tile, message=tile.block_reason or "The way is blocked."
            )
        if not self.pathfinder.is_valid_move(position, coord):
            return MoveResult(MoveOutcome.IMPASSABLE, tile, message="You cannot go there.")

        self.store.dispatch(ActionType.MOVE, coord.to_dict())
        self.board.explore(coord)
        loot = self._collect_loot(tile)
        self._check_tile_events(tile)
        self._check_encounters(coord)

        self.cycle.on_player_moved()
        self.saves.autosave()
        return MoveResult(MoveOutcome.OK, tile, loot)

    def _collect_loot(self, tile: Tile) -> Optional[Loot]:
        if tile.loot is None or tile.key in self.store.state.board.looted:
            return None
        loot = self.board.take_loot(tile.coord)
        self.store.dispatch(ActionType.COLLECT_LOOT, {
            "q": tile.coord.q,
            "r": tile.coord.r,
            "kind": loot.kind,
            "amount": loot.amount,
            "label": loot.label,
        })
        self.bus.emit(EventType.LOOT_COLLECTED, q=tile.coord.q, r=tile.coord.r, **loot.to_dict())
        self.bus.notify(f"{loot.label} (+{loot.amount} {loot.kind})", "loot")
        return loot

    def _check_tile_events(self, tile: Tile) -> None:
        completed = self.store.state.completed_events
        pending = [event_id for event_id in tile.events if event_id not in completed]
        if pending:
            self.bus.emit(EventType.TILE_EVENTS, q=tile.coord.q, r=tile.coord.r, event_ids=pending)

    def _check_encounters(self, coord: HexCoord) -> None:
        state = self.store.state
        for npc_id, spawn in self.config.npc_spawns.items():
            if HexCoord(spawn["q"], spawn["r"]) != coord:
                continue
            if spawn.get("act", 1) > state.act or npc_id in state.npcs:
                continue
            self.store.dispatch(ActionType.UPSERT_NPC, {
                "id": npc_id,
                "data": {"arrived": state.act, "trust": 0, "alive": True, "revealed": []},
            })
            self.bus.emit(EventType.NPC_ENCOUNTER, npc_id=npc_id, q=coord.q, r=coord.r)

    def new_arrivals(self, act: int) -> List[str]:
        """NPC, którzy pojawiają się w danym akcie i nie zostali jeszcze spotkani."""
        npcs = self.store.state.npcs
        return [
            npc_id for npc_id, spawn in self.config.npc_spawns.items()
            if spawn.get("act") == act and npc_id not in npcs
        ]

    # ─────────────────────────────────────────────────────────────────────────
    # CYKL DNIA
    # ─────────────────────────────────────────────────────────────────────────

    def end_day(self) -> bool:
        return self.cycle.end_day()

    def choose(self, light: bool) -> bool:
        return self.cycle.choose(light)

    def acknowledge(self) -> bool:
        return self.cycle.acknowledge()

    # ─────────────────────────────────────────────────────────────────────────
    # NARRACJA
    # ─────────────────────────────────────────────────────────────────────────

    def complete_event(self, event_id: str) -> bool:
        return self.store.dispatch(ActionType.COMPLETE_EVENT, {"event_id": event_id}).success

    def add_journal(self, entry_id: str, text: str) -> bool:
        return self.store.dispatch(ActionType.ADD_JOURNAL_ENTRY, {"id": entry_id, "text": text}).success

    def apply_effects(self, effects: Optional[Dict[str, Any]]) -> None:
        """
        Nakłada efekty wyboru narracyjnego.

        Format:
            {"sanity": -5, "resources": {"oil": 2}, "trust": {"sailor": 1},
             "flags": {"met_keeper": True}}

        Note:
            Zaufanie zmienia się tylko u NPC już spotkanych.
        """
        if not effects:
            return

        if effects.get("sanity"):
            sanity = self.store.state.player.sanity
            self.store.dispatch(ActionType.SET_SANITY, {"sanity": sanity + effects["sanity"]})

        for resource, amount in (effects.get("resources") or {}).items():
            self.store.dispatch(ActionType.ADJUST_RESOURCE, {"resource": resource, "amount": amount})

        for npc_id, amount in (effects.get("trust") or {}).items():
            npc = self.store.state.npcs.get(npc_id)
            if npc is None:
                continue
            self.store.dispatch(ActionType.UPSERT_NPC, {
                "id": npc_id, "data": {"trust": npc.trust + amount},
            })

        for flag, value in (effects.get("flags") or {}).items():
            self.store.dispatch(ActionType.SET_FLAG, {"flag": flag, "value": value})

    # ─────────────────────────────────────────────────────────────────────────
    # ZAPISY
    # ─────────────────────────────────────────────────────────────────────────

    def save(self, slot: Optional[str] = None) -> bool:
        slot = slot or self.config.persistence.manual_slots[0]
        if not self.saves.save(slot):
            return False
        self.bus.emit(EventType.GAME_SAVED, slot=slot)
        return True

    def load(self, slot: str) -> bool:
        """
        Wczytuje zapis: stan, plansza odbudowana z explored/looted,
        wznowienie cyklu.

        Returns:
            bool: False - nic się nie zmieniło
        """
        if not self.saves.load(slot):
            return False
        self._sync_board_from_state()
        self.cycle.resume()
        self.bus.emit(EventType.GAME_LOADED, slot=slot)
        return True

    def continue_game(self) -> bool:
        """Wczytuje autosave, a gdy go brak lub jest uszkodzony - pierwszy slot ręczny."""
        for slot in (self.config.persistence.autosave_slot, self.config.persistence.manual_slots[0]):
            if self.saves.has_save(slot) and self.load(slot):
                return True
        return False

    def _sync_board_from_state(self) -> None:
        record = self.store.state.board
        self.board.reset()
        for key in sorted(record.explored):
            coord = HexCoord.from_key(key)
            if coord is not None:
                self.board.explore(coord)
        for key in record.looted:
            coord = HexCoord.from_key(key)
            if coord is not None:
                self.board.take_loot(coord)

    # ─────────────────────────────────────────────────────────────────────────
    # ZAPYTANIA (tylko odczyt)
    # ─────────────────────────────────────────────────────────────────────────

    def get_tile(self, coord: HexCoord) -> Optional[Tile]:
        return self.board.get_tile(coord)

    def neighbors(self, coord: HexCoord) -> List[Tile]:
        return self.board.neighbors(coord)

    def valid_moves(self, coord: Optional[HexCoord] = None) -> List[HexCoord]:
        return self.pathfinder.valid_moves(coord or self.store.state.player.position)

    def is_valid_move(self, a: HexCoord, b: HexCoord) -> bool:
        return self.pathfinder.is_valid_move(a, b)

    def shortest_path(self, start: HexCoord, goal: HexCoord) -> Optional[List[HexCoord]]:
        return self.pathfinder.shortest_path(start, goal)

    def hexes_in_range(self, center: HexCoord, radius: int) -> List[HexCoord]:
        return self.pathfinder.hexes_in_range(center, radius)

    def summary(self) -> Dict[str, Any]:
        """Zwięzły obraz partii dla CLI i API."""
        state = self.store.state
        costs = self.economy.calculate_night_costs(state)
        return {
            "act": state.act,
            "phase": state.phase.value,
            "turn": state.turn,
            "moves_remaining": state.moves_remaining,
            "position": state.player.position.to_dict(),
            "sanity": state.player.sanity,
            "resources": {"oil": state.resources.oil, "food": state.resources.food},
            "night_costs": {"oil": costs.oil, "food": costs.food},
            "npcs": sorted(state.npcs),
            "lighthouse_lit": list(state.lighthouse_lit),
            "awaiting": self.cycle.awaiting.name,
            "status": self.cycle.status.value,
            "game_over_reason": state.game_over_reason,
            "warnings": [w.to_dict() for w in self.economy.get_warnings(state)],
            "pending": [c.to_dict() for c in self.scheduler.pending],
            "clock_ms": self.scheduler.now,
        }
