"""
Loader konfiguracji z automatycznym uzupełnianiem wartości domyślnych.

Gra jest data-driven - stałe ekonomii, cykl dnia i mapa wyspy
są wczytywane z plików YAML:
- defaults.yaml: zasoby, kary sanity, cykl dnia, zapisy
- island.yaml: kafelki wyspy i miejsca pojawiania się NPC

Logika merge (uzupełniania defaults):
    1. Wczytaj defaults.yaml
    2. Nałóż nadpisania (np. z testów lub z innego pliku)
    3. Zbuduj typowany GameConfig

Użycie:
    >>> loader = ConfigLoader()
    >>> config = loader.load_game_config()
    >>> config.economy.oil_cost_per_night
    [3, 3, 4, 4, 5]
    >>> config = loader.load_game_config({"cycle": {"max_act": 3}})
"""

from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional
import copy
import logging

import yaml


logger = logging.getLogger(__name__)

DEFAULT_DATA_PATH = Path(__file__).resolve().parent.parent / "data"


# ─────────────────────────────────────────────────────────────────────────────
# TYPOWANA KONFIGURACJA
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class EconomyConfig:
    """
    Stałe ekonomii zasobów.

    Attributes:
        max_resources: Maksimum każdego zasobu (oil, food)
        initial_resources: Zasoby na starcie gry
        oil_cost_per_night: Koszt latarni per akt (index = akt - 1)
        max_sanity: Górna granica sanity
        initial_sanity: Sanity na starcie gry
        penalty_dark_night: Kara za noc bez latarni
        penalty_hunger: Kara za brak jedzenia (płaska)
        penalty_dark_late: Dopłata za ciemną noc od late_game_act
        late_game_act: Akt od którego naliczana jest dopłata
        warn_thresholds: Progi ostrzeżeń {zasób: {low, critical}}
    """
    max_resources: Dict[str, int] = field(default_factory=lambda: {"oil": 20, "food": 15})
    initial_resources: Dict[str, int] = field(default_factory=lambda: {"oil": 12, "food": 8})
    oil_cost_per_night: List[int] = field(default_factory=lambda: [3, 3, 4, 4, 5])
    max_sanity: int = 100
    initial_sanity: int = 100
    penalty_dark_night: int = 15
    penalty_hunger: int = 10
    penalty_dark_late: int = 5
    late_game_act: int = 3
    warn_thresholds: Dict[str, Dict[str, int]] = field(default_factory=lambda: {
        "oil": {"low": 6, "critical": 3},
        "food": {"low": 4, "critical": 2},
    })


@dataclass
class CycleConfig:
    """
    Konfiguracja cyklu dnia.

    Attributes:
        max_act: Liczba aktów (dni) w rozgrywce
        moves_per_act: Liczba ruchów w dzień per akt (index = akt - 1)
        transition_duration_ms: Pauza narracyjna między fazami
        dusk_delay_ms: Opóźnienie zmierzchu po ostatnim ruchu
    """
    max_act: int = 5
    moves_per_act: List[int] = field(default_factory=lambda: [6, 6, 7, 7, 8])
    transition_duration_ms: int = 2500
    dusk_delay_ms: int = 1000


@dataclass
class PersistenceConfig:
    """Konfiguracja zapisów (namespace kluczy i sloty)."""
    version: int = 1
    namespace: str = "lastlighthouse_"
    autosave_slot: str = "autosave"
    manual_slots: List[str] = field(default_factory=lambda: ["save_1", "save_2", "save_3"])


@dataclass
class GameConfig:
    """
    Pełna konfiguracja gry.

    Attributes:
        economy: Stałe ekonomii
        cycle: Cykl dnia
        persistence: Zapisy
        start: Pozycja startowa gracza (q, r)
        tiles: Statyczna mapa wyspy (lista rekordów kafelków)
        npc_spawns: Miejsca pojawiania się NPC {id: {q, r, act}}
    """
    economy: EconomyConfig = field(default_factory=EconomyConfig)
    cycle: CycleConfig = field(default_factory=CycleConfig)
    persistence: PersistenceConfig = field(default_factory=PersistenceConfig)
    start: Dict[str, int] = field(default_factory=lambda: {"q": 0, "r": 0})
    tiles: List[Dict[str, Any]] = field(default_factory=list)
    npc_spawns: Dict[str, Dict[str, int]] = field(default_factory=dict)


# ─────────────────────────────────────────────────────────────────────────────
# LOADER
# ─────────────────────────────────────────────────────────────────────────────

class ConfigLoader:
    """
    Ładuje konfigurację z plików YAML z automatycznym merge defaults.

    Attributes:
        data_path (Path): Ścieżka do folderu z plikami YAML
        _defaults (Dict): Cache wczytanych defaults
        _island (Dict): Cache wczytanej mapy
    """

    def __init__(self, data_path: Optional[str] = None):
        """
        Args:
            data_path: Ścieżka do folderu z plikami YAML
                (domyślnie lighthouse/data/)
        """
        self.data_path = Path(data_path) if data_path else DEFAULT_DATA_PATH
        self._defaults: Optional[Dict] = None
        self._island: Optional[Dict] = None

    # ─────────────────────────────────────────────────────────────────────────
    # WCZYTYWANIE PLIKÓW
    # ─────────────────────────────────────────────────────────────────────────

    def _load_yaml(self, filename: str) -> Dict:
        """
        Wczytuje plik YAML.

        Raises:
            FileNotFoundError: Jeśli plik nie istnieje
        """
        filepath = self.data_path / filename
        logger.debug("Loading %s", filepath)
        with open(filepath, 'r', encoding='utf-8') as f:
            return yaml.safe_load(f) or {}

    def get_defaults(self) -> Dict:
        """Zwraca zawartość defaults.yaml (cache)."""
        if self._defaults is None:
            self._defaults = self._load_yaml("defaults.yaml")
        return self._defaults

    def get_island(self) -> Dict:
        """Zwraca zawartość island.yaml (cache)."""
        if self._island is None:
            self._island = self._load_yaml("island.yaml")
        return self._island

    def load_tiles(self) -> List[Dict[str, Any]]:
        """Zwraca kopię statycznej mapy wyspy (lista rekordów)."""
        return copy.deepcopy(self.get_island().get("tiles", []))

    def load_npc_spawns(self) -> Dict[str, Dict[str, int]]:
        """Zwraca kopię tabeli pojawiania się NPC."""
        return copy.deepcopy(self.get_island().get("npc_spawns", {}))

    # ─────────────────────────────────────────────────────────────────────────
    # BUDOWANIE GameConfig
    # ─────────────────────────────────────────────────────────────────────────

    def load_game_config(self, overrides: Optional[Dict] = None) -> GameConfig:
        """
        Buduje pełną konfigurację gry.

        Args:
            overrides: Opcjonalne nadpisania (ten sam kształt co defaults.yaml)

        Returns:
            GameConfig: Typowana konfiguracja z mapą wyspy
        """
        data = self.get_defaults()
        if overrides:
            data = self._deep_merge(data, overrides)

        resources = data.get("resources", {})
        sanity = data.get("sanity", {})
        cycle = data.get("cycle", {})
        persistence = data.get("persistence", {})

        economy = EconomyConfig()
        economy.max_resources = dict(resources.get("max", economy.max_resources))
        economy.initial_resources = dict(resources.get("initial", economy.initial_resources))
        economy.oil_cost_per_night = list(resources.get("oil_cost_per_night", economy.oil_cost_per_night))
        economy.warn_thresholds = copy.deepcopy(resources.get("warn_thresholds", economy.warn_thresholds))
        economy.max_sanity = sanity.get("max", economy.max_sanity)
        economy.initial_sanity = sanity.get("initial", economy.initial_sanity)
        economy.penalty_dark_night = sanity.get("penalty_dark_night", economy.penalty_dark_night)
        economy.penalty_hunger = sanity.get("penalty_hunger", economy.penalty_hunger)
        economy.penalty_dark_late = sanity.get("penalty_dark_late", economy.penalty_dark_late)
        economy.late_game_act = sanity.get("late_game_act", economy.late_game_act)

        cycle_config = CycleConfig()
        cycle_config.max_act = cycle.get("max_act", cycle_config.max_act)
        cycle_config.moves_per_act = list(cycle.get("moves_per_act", cycle_config.moves_per_act))
        cycle_config.transition_duration_ms = cycle.get(
            "transition_duration_ms", cycle_config.transition_duration_ms
        )
        cycle_config.dusk_delay_ms = cycle.get("dusk_delay_ms", cycle_config.dusk_delay_ms)

        persistence_config = PersistenceConfig()
        persistence_config.version = persistence.get("version", persistence_config.version)
        persistence_config.namespace = persistence.get("namespace", persistence_config.namespace)
        persistence_config.autosave_slot = persistence.get("autosave_slot", persistence_config.autosave_slot)
        persistence_config.manual_slots = list(
            persistence.get("manual_slots", persistence_config.manual_slots)
        )

        return GameConfig(
            economy=economy,
            cycle=cycle_config,
            persistence=persistence_config,
            start=dict(data.get("player", {}).get("start", {"q": 0, "r": 0})),
            tiles=self.load_tiles(),
            npc_spawns=self.load_npc_spawns(),
        )

    # ─────────────────────────────────────────────────────────────────────────
    # HELPERY
    # ─────────────────────────────────────────────────────────────────────────

    @staticmethod
    def _deep_merge(base: Dict, override: Dict) -> Dict:
        """
        Głęboko łączy dwa słowniki.

        Override nadpisuje wartości w base.
        Nested dicts są merge'owane rekurencyjnie.
        """
        result = copy.deepcopy(base)

        for key, value in override.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = ConfigLoader._deep_merge(result[key], value)
            else:
                result[key] = copy.deepcopy(value)

        return result

    def reload(self) -> None:
        """Czyści cache i wymusza ponowne wczytanie plików."""
        self._defaults = None
        self._island = None
