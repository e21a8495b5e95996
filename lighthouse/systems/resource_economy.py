"""
Ekonomia zasobów - nocne zużycie, niedobory i kary sanity.

Każdej nocy:
═══════════════════════════════════════════════════════════════════

    OLEJ (latarnia)
    ─────────────────────────────────────────────────────────────
    lit, oil >= koszt    -> oil -= koszt, bez kary
    lit, oil <  koszt    -> oil = 0, niedobór = koszt - oil,
                            kara = round(DARK_NIGHT / 2) (+ LATE od aktu 3)
    ciemno               -> olej nietknięty,
                            kara = DARK_NIGHT (+ LATE od aktu 3)

    JEDZENIE (gracz + żywi NPC)
    ─────────────────────────────────────────────────────────────
    food -= min(food, potrzeba)
    jakikolwiek niedobór -> płaska kara HUNGER (niezależnie od wielkości)

    Cała kara trafia do stanu jednym SET_SANITY (clamp 0..100).
    Koszt oleju per akt: [3, 3, 4, 4, 5] (index = min(akt - 1, 4)).

Kara za ciemność jest proporcjonalna do próby (połowa), a kara za głód
płaska - tak ustawiono balans gry.
"""

from __future__ import annotations
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional
import math

from ..core.config_loader import EconomyConfig
from ..state.actions import ActionType
from ..state.models import GameState
from ..state.store import GameStateStore


# ─────────────────────────────────────────────────────────────────────────────
# WYNIKI
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class NightCosts:
    """Zapotrzebowanie na najbliższą noc."""
    oil: int
    food: int


@dataclass(frozen=True)
class NightReport:
    """
    Rozliczenie jednej nocy - liczby do przekazania graczowi bez zmian.

    Attributes:
        lit (bool): Czy gracz próbował zapalić latarnię
        oil_cost (int): Koszt oleju tej nocy
        oil_used (int): Faktycznie spalony olej
        oil_shortfall (int): Brakujący olej
        food_cost (int): Zapotrzebowanie na jedzenie
        food_used (int): Zjedzone jedzenie
        food_shortfall (int): Brakujące jedzenie
        sanity_penalty (int): Łączna kara sanity
    """
    lit: bool
    oil_cost: int
    oil_used: int
    oil_shortfall: int
    food_cost: int
    food_used: int
    food_shortfall: int
    sanity_penalty: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class TerminalOutcome:
    """Warunek przegranej (np. sanity spadło do zera)."""
    reason: str
    message: str


@dataclass(frozen=True)
class ResourceWarning:
    """Ostrzeżenie o niskim zasobie (level: low | critical)."""
    resource: str
    level: str
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class ResourceEconomy:
    """
    Obliczenia ekonomii + jedyne miejsce, które zmienia zasoby w nocy.

    Nie ma własnego stanu - czyta store i pisze przez dispatch.

    Attributes:
        store (GameStateStore): Store stanu gry
        config (EconomyConfig): Stałe ekonomii
    """

    def __init__(self, store: GameStateStore, config: Optional[EconomyConfig] = None):
        self.store = store
        self.config = config or EconomyConfig()

    # ─────────────────────────────────────────────────────────────────────────
    # ZAPOTRZEBOWANIE
    # ─────────────────────────────────────────────────────────────────────────

    def get_max(self, resource: str) -> int:
        if resource == "sanity":
            return self.config.max_sanity
        return self.config.max_resources.get(resource, 0)

    def nightly_fuel_cost(self, act: int) -> int:
        schedule = self.config.oil_cost_per_night
        index = max(0, min(act - 1, len(schedule) - 1))
        return schedule[index]

    def nightly_food_cost(self, state: GameState) -> int:
        """Gracz + żywi NPC."""
        return len(state.living_npcs()) + 1

    def calculate_night_costs(self, state: Optional[GameState] = None) -> NightCosts:
        state = state or self.store.state
        return NightCosts(
            oil=self.nightly_fuel_cost(state.act),
            food=self.nightly_food_cost(state),
        )

    def can_light_beacon(self, state: Optional[GameState] = None) -> bool:
        state = state or self.store.state
        return state.resources.oil >= self.nightly_fuel_cost(state.act)

    def get_percent(self, resource: str, value: int) -> float:
        """Procent zasobu (0-100) dla paska HUD."""
        maximum = self.get_max(resource)
        if maximum <= 0:
            return 0.0
        return min(100.0, value / maximum * 100)

    def dark_penalty(self, act: int, attempted: bool) -> int:
        """Kara za noc bez światła; attempted = latarnia zgasła z braku oleju."""
        base = self.config.penalty_dark_night
        if attempted:
            base = _round_half_up(base / 2)
        if act >= self.config.late_game_act:
            base += self.config.penalty_dark_late
        return base

    # ─────────────────────────────────────────────────────────────────────────
    # NOC
    # ─────────────────────────────────────────────────────────────────────────

    def apply_night_consumption(self, lit: bool) -> NightReport:
        """
        Rozlicza noc: olej, jedzenie, kara sanity.

        Args:
            lit: Czy gracz wybrał zapalenie latarni

        Returns:
            NightReport: Wszystkie liczby rozliczenia
        """
        state = self.store.state
        costs = self.calculate_night_costs(state)
        penalty = 0

        oil_used = 0
        oil_shortfall = 0
        if lit:
            available = state.resources.oil
            if available >= costs.oil:
                oil_used = costs.oil
            else:
                oil_used = available
                oil_shortfall = costs.oil - available
                penalty += self.dark_penalty(state.act, attempted=True)
            if oil_used:
                self._adjust("oil", -oil_used)
        else:
            penalty += self.dark_penalty(state.act, attempted=False)

        food_available = self.store.state.resources.food
        food_used = min(food_available, costs.food)
        food_shortfall = costs.food - food_used
        if food_used:
            self._adjust("food", -food_used)
        if food_shortfall > 0:
            penalty += self.config.penalty_hunger

        if penalty > 0:
            sanity = self.store.state.player.sanity
            self.store.dispatch(ActionType.SET_SANITY, {"sanity": sanity - penalty})

        return NightReport(
            lit=lit,
            oil_cost=costs.oil,
            oil_used=oil_used,
            oil_shortfall=oil_shortfall,
            food_cost=costs.food,
            food_used=food_used,
            food_shortfall=food_shortfall,
            sanity_penalty=penalty,
        )

    def _adjust(self, resource: str, amount: int) -> None:
        self.store.dispatch(ActionType.ADJUST_RESOURCE, {"resource": resource, "amount": amount})

    # ─────────────────────────────────────────────────────────────────────────
    # OSTRZEŻENIA I KONIEC GRY
    # ─────────────────────────────────────────────────────────────────────────

    def get_warnings(self, state: Optional[GameState] = None) -> List[ResourceWarning]:
        state = state or self.store.state
        warnings = []

        oil = self.config.warn_thresholds.get("oil", {"low": 6, "critical": 3})
        if state.resources.oil <= oil["critical"]:
            warnings.append(ResourceWarning(
                "oil", "critical",
                f"Oil critical! The lamp needs {self.nightly_fuel_cost(state.act)} tonight.",
            ))
        elif state.resources.oil <= oil["low"]:
            warnings.append(ResourceWarning("oil", "low", "The oil reserves are running out..."))

        food = self.config.warn_thresholds.get("food", {"low": 4, "critical": 2})
        if state.resources.food <= food["critical"]:
            warnings.append(ResourceWarning(
                "food", "critical",
                f"Food critical! {self.nightly_food_cost(state)} portions needed tonight.",
            ))
        elif state.resources.food <= food["low"]:
            warnings.append(ResourceWarning("food", "low", "Food is starting to run short..."))

        return warnings

    def check_terminal(self, state: Optional[GameState] = None) -> Optional[TerminalOutcome]:
        """Sanity <= 0 to przegrana; wywoływane po każdej nocy, przed świtem."""
        state = state or self.store.state
        if state.player.sanity <= 0:
            return TerminalOutcome("sanity", "Your mind has sunk into the darkness.")
        return None
