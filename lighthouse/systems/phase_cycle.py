"""
Cykl dnia i nocy (PhaseCycle) - maszyna stanów pór dnia.

Każdy akt to pełny obieg świt -> dzień -> zmierzch -> noc.
Przejścia zmieniają stan wyłącznie przez dispatch, a pauzy narracyjne
są kontynuacjami w Scheduler (żadnych timerów ani sleepów).

STANY:
═══════════════════════════════════════════════════════════════════

    DAWN (Świt)
    ─────────────────────────────────────────────────────────────
    Napis aktu, po pauzie -> start_day().

    DAY (Dzień)
    ─────────────────────────────────────────────────────────────
    moves_remaining = MOVES_PER_ACT[akt - 1].
    Wyjście: ruchy spadły do 0 (po dusk_delay) lub end_day().

    DUSK (Zmierzch)
    ─────────────────────────────────────────────────────────────
    Po pauzie: wybór DuskChoice (awaiting = DUSK_CHOICE).
    Zapalenie bez oleju jest odrzucane przed rozliczeniem.

    NIGHT (Noc)
    ─────────────────────────────────────────────────────────────
    Dokładnie jedno rozliczenie ResourceEconomy.
    sanity <= 0 -> koniec gry (LOST) od razu, bez świtu.
    W przeciwnym razie po pauzie awaiting = NIGHT_ACK.

DIAGRAM TRANZYCJI:
═══════════════════════════════════════════════════════════════════

      ┌──────┐  pauza   ┌──────┐  0 ruchów / end_day  ┌──────┐
      │ DAWN │ ───────► │ DAY  │ ───────────────────► │ DUSK │
      └──────┘          └──────┘                      └──┬───┘
          ▲                                              │ choose(light)
          │ acknowledge()  (akt < max)                   ▼
          └──────────────────────────────────────── ┌───────┐
                                                    │ NIGHT │
                 acknowledge() przy akt == max ───► └───┬───┘
                        COMPLETE                        │ sanity <= 0
                                                        ▼
                                                      LOST
"""

from __future__ import annotations
from dataclasses import asdict, dataclass
from enum import Enum, auto
from typing import Any, Dict, Optional
import logging

from ..core.config_loader import CycleConfig
from ..events.event_bus import EventBus, EventType
from ..state.actions import ActionType
from ..state.models import MAX_ACT, Phase
from ..state.store import GameStateStore
from .resource_economy import NightReport, ResourceEconomy
from .scheduler import Scheduler


logger = logging.getLogger(__name__)


DAWN_SUBTITLES = {
    1: "The fog has not lifted. The lamp must burn.",
    2: "A new day rises. The fog is still here.",
    3: "The third day. The island begins to give up its secrets.",
    4: "The fourth day. The tension is palpable.",
    5: "The last day. Everything is decided now.",
}


class Awaiting(Enum):
    """Na co czeka cykl (wejście gracza)."""

    NONE = auto()
    DUSK_CHOICE = auto()
    NIGHT_ACK = auto()


class CycleStatus(Enum):
    """Status rozgrywki z punktu widzenia cyklu."""

    RUNNING = "running"
    COMPLETE = "complete"
    LOST = "lost"


@dataclass(frozen=True)
class DuskChoice:
    """Wybór przy zmierzchu."""
    oil_cost: int
    oil_available: int
    can_light: bool

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class PhaseCycle:
    """
    Maszyna stanów dnia i nocy.

    Nie przechowuje stanu gry - tylko to, na co aktualnie czeka
    (awaiting) i ostatnie rozliczenie nocy.

    Attributes:
        store (GameStateStore): Store stanu gry
        economy (ResourceEconomy): Rozliczenia zasobów
        scheduler (Scheduler): Kontynuacje pauz narracyjnych
        bus (EventBus): Powiadomienia
        config (CycleConfig): Tabela ruchów i czasy pauz
        awaiting (Awaiting): Oczekiwane wejście gracza
        pending_choice (Optional[DuskChoice]): Aktualny wybór zmierzchu
        last_report (Optional[NightReport]): Rozliczenie ostatniej nocy
    """

    def __init__(
        self,
        store: GameStateStore,
        economy: ResourceEconomy,
        scheduler: Scheduler,
        bus: EventBus,
        config: Optional[CycleConfig] = None,
    ):
        self.store = store
        self.economy = economy
        self.scheduler = scheduler
        self.bus = bus
        self.config = config or CycleConfig()
        self.awaiting = Awaiting.NONE
        self.pending_choice: Optional[DuskChoice] = None
        self.last_report: Optional[NightReport] = None

    # ─────────────────────────────────────────────────────────────────────────
    # ZAPYTANIA
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def max_act(self) -> int:
        return min(self.config.max_act, MAX_ACT)

    @property
    def status(self) -> CycleStatus:
        state = self.store.state
        if not state.game_over:
            return CycleStatus.RUNNING
        if state.game_over_reason == "complete":
            return CycleStatus.COMPLETE
        return CycleStatus.LOST

    def moves_for_act(self, act: int) -> int:
        table = self.config.moves_per_act
        return table[max(0, min(act - 1, len(table) - 1))]

    def _in_phase(self, phase: Phase) -> bool:
        state = self.store.state
        return not state.game_over and state.phase == phase

    # ─────────────────────────────────────────────────────────────────────────
    # ŚWIT I DZIEŃ
    # ─────────────────────────────────────────────────────────────────────────

    def begin(self) -> None:
        """Napis bieżącego aktu i kontynuacja do dnia."""
        if not self._in_phase(Phase.DAWN):
            return
        act = self.store.state.act
        self.bus.announce(f"Day {act}", DAWN_SUBTITLES.get(act, ""))
        self.scheduler.schedule(self.config.transition_duration_ms, "start_day", self.start_day)

    def start_day(self) -> bool:
        """Świt -> dzień z przydziałem ruchów dla aktu."""
        if not self._in_phase(Phase.DAWN):
            return False
        moves = self.moves_for_act(self.store.state.act)
        self.store.dispatch(ActionType.SET_PHASE, {"phase": Phase.DAY, "moves_remaining": moves})
        logger.info("Act %d: day started with %d moves", self.store.state.act, moves)
        self.bus.emit(EventType.DAY_STARTED, moves=moves)
        return True

    def on_player_moved(self) -> None:
        """Po ruchu: gdy ruchy się skończyły, zmierzch po krótkiej pauzie."""
        if not self._in_phase(Phase.DAY):
            return
        if self.store.state.moves_remaining > 0 or self.scheduler.has_pending("dusk"):
            return
        self.scheduler.schedule(self.config.dusk_delay_ms, "dusk", self.transition_to_dusk)

    def end_day(self) -> bool:
        """Gracz kończy dzień wcześniej."""
        if not self._in_phase(Phase.DAY):
            return False
        self.transition_to_dusk()
        return True

    # ─────────────────────────────────────────────────────────────────────────
    # ZMIERZCH
    # ─────────────────────────────────────────────────────────────────────────

    def transition_to_dusk(self) -> None:
        if not self._in_phase(Phase.DAY):
            return
        self.store.dispatch(ActionType.SET_PHASE, {"phase": Phase.DUSK, "moves_remaining": 0})
        self.bus.announce("Dusk", "The sun sinks below the horizon. Time to prepare for the night.")
        self.scheduler.schedule(
            self.config.transition_duration_ms, "dusk_choice", self._offer_dusk_choice
        )

    def _offer_dusk_choice(self) -> None:
        if not self._in_phase(Phase.DUSK):
            return
        state = self.store.state
        choice = DuskChoice(
            oil_cost=self.economy.nightly_fuel_cost(state.act),
            oil_available=state.resources.oil,
            can_light=self.economy.can_light_beacon(state),
        )
        self.pending_choice = choice
        self.awaiting = Awaiting.DUSK_CHOICE
        self.bus.emit(EventType.DUSK_CHOICE, **choice.to_dict())

    def choose(self, light: bool) -> bool:
        """
        Odpowiedź na wybór zmierzchu.

        Args:
            light: True = zapal latarnię

        Returns:
            bool: False gdy wybór nie jest oczekiwany albo brakuje oleju
                (cykl dalej czeka na wybór)
        """
        if self.awaiting != Awaiting.DUSK_CHOICE or self.store.state.game_over:
            return False
        if light and not self.economy.can_light_beacon():
            logger.warning("Beacon choice rejected: not enough oil")
            return False

        self.awaiting = Awaiting.NONE
        self.pending_choice = None
        self.store.dispatch(ActionType.RECORD_NIGHT_OUTCOME, {"lit": light})
        if light:
            self.bus.notify("The lighthouse lights up the night.", "info")
        else:
            self.bus.notify("The lighthouse stays dark. The darkness weighs on your mind.", "danger")
        self._transition_to_night(light)
        return True

    # ─────────────────────────────────────────────────────────────────────────
    # NOC
    # ─────────────────────────────────────────────────────────────────────────

    def _transition_to_night(self, lit: bool) -> None:
        self.store.dispatch(ActionType.SET_PHASE, {"phase": Phase.NIGHT, "moves_remaining": 0})
        self.bus.announce("Night", "Darkness swallows the island...")

        report = self.economy.apply_night_consumption(lit)
        self.last_report = report
        self.bus.emit(EventType.NIGHT_REPORT, **report.to_dict())
        self._report_shortfalls(report)

        outcome = self.economy.check_terminal()
        if outcome is not None:
            self.store.dispatch(ActionType.SET_GAME_OVER, {"reason": outcome.reason})
            logger.info("Game over: %s", outcome.reason)
            self.bus.emit(EventType.GAME_OVER, reason=outcome.reason, message=outcome.message)
            return

        self.scheduler.schedule(
            self.config.transition_duration_ms, "night_vigil", self._await_dawn
        )

    def _report_shortfalls(self, report: NightReport) -> None:
        if report.oil_shortfall > 0:
            self.bus.notify(f"Not enough oil: {report.oil_shortfall} short.", "danger")
        if report.food_shortfall > 0:
            self.bus.notify(
                f"{report.food_shortfall} portions short. Someone went hungry tonight.", "danger"
            )
        if report.sanity_penalty > 0:
            self.bus.notify(f"Sanity -{report.sanity_penalty}", "danger")

    def _await_dawn(self) -> None:
        if not self._in_phase(Phase.NIGHT):
            return
        lit = bool(self.store.state.lighthouse_lit and self.store.state.lighthouse_lit[-1])
        self.awaiting = Awaiting.NIGHT_ACK
        self.bus.emit(EventType.NIGHT_VIGIL, lit=lit)

    def acknowledge(self) -> bool:
        """Czekanie na świt: noc -> świt albo koniec gry po ostatnim akcie."""
        if self.awaiting != Awaiting.NIGHT_ACK or self.store.state.game_over:
            return False
        self.awaiting = Awaiting.NONE
        self._transition_to_dawn()
        return True

    # ─────────────────────────────────────────────────────────────────────────
    # ŚWIT
    # ─────────────────────────────────────────────────────────────────────────

    def _transition_to_dawn(self) -> None:
        if self.store.state.act >= self.max_act:
            self.store.dispatch(ActionType.SET_GAME_OVER, {"reason": "complete"})
            logger.info("Game complete after act %d", self.store.state.act)
            self.bus.emit(
                EventType.GAME_OVER,
                reason="complete",
                message="Dawn breaks over the last night. You kept the light.",
            )
            return

        self.store.dispatch(ActionType.ADVANCE_ACT)
        act = self.store.state.act
        self.bus.emit(EventType.ACT_ADVANCED, act=act)
        self.begin()

    # ─────────────────────────────────────────────────────────────────────────
    # ZAPIS / RESET
    # ─────────────────────────────────────────────────────────────────────────

    def resume(self) -> None:
        """Odtwarza oczekujące kontynuacje po wczytaniu zapisu."""
        self.reset()
        state = self.store.state
        if state.game_over:
            return

        if state.phase == Phase.DAWN:
            self.begin()
        elif state.phase == Phase.DAY:
            self.on_player_moved()
        elif state.phase == Phase.DUSK:
            self._offer_dusk_choice()
        elif state.phase == Phase.NIGHT:
            self._await_dawn()

    def reset(self) -> None:
        """Czyści kontynuacje i oczekiwanie (nowa gra / wczytanie)."""
        self.scheduler.clear()
        self.awaiting = Awaiting.NONE
        self.pending_choice = None
        self.last_report = None
