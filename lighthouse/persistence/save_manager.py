"""
Zapisy gry w slotach (autosave + sloty ręczne).

Format wpisu:
═══════════════════════════════════════════════════════════════════

    klucz:  "lastlighthouse_" + slot      (np. lastlighthouse_save_1)
    wartość (JSON):
    {
        "version": 1,
        "timestamp": 1767225600000,        # ms epoki
        "data": { ...snapshot store... }   # zbiory oznaczone __type
    }

Kopertę buduje i sprawdza GameStateStore (to_json / deserialize).

save()/load() nigdy nie rzucają wyjątków dla błędów magazynu lub
uszkodzonych danych - zwracają False. Nieudany load zostawia stan
w pamięci bez zmian.
"""

from __future__ import annotations
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Union
import json
import logging

from ..core.config_loader import PersistenceConfig
from ..state.store import GameStateStore


logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# MAGAZYNY KLUCZ-WARTOŚĆ
# ─────────────────────────────────────────────────────────────────────────────

class Storage(Protocol):
    """Magazyn klucz -> tekst."""

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...

    def keys(self) -> List[str]: ...


class MemoryStorage:
    """Magazyn w pamięci (testy, sesja API)."""

    def __init__(self):
        self._data: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> List[str]:
        return sorted(self._data)


class FileStorage:
    """Jeden plik JSON na klucz w katalogu base_dir."""

    def __init__(self, base_dir: Union[Path, str]):
        self._base_dir = Path(base_dir)

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        self._base_dir.mkdir(parents=True, exist_ok=True)
        self._path(key).write_text(value, encoding="utf-8")

    def remove(self, key: str) -> None:
        try:
            self._path(key).unlink()
        except FileNotFoundError:
            return

    def keys(self) -> List[str]:
        if not self._base_dir.exists():
            return []
        return sorted(p.stem for p in self._base_dir.glob("*.json"))

    def _path(self, key: str) -> Path:
        return self._base_dir / f"{key}.json"


# ─────────────────────────────────────────────────────────────────────────────
# SAVE MANAGER
# ─────────────────────────────────────────────────────────────────────────────

class SaveManager:
    """
    Zapis i odczyt stanu store w nazwanych slotach.

    Attributes:
        store (GameStateStore): Store, którego stan zapisujemy
        config (PersistenceConfig): Namespace i sloty (wersję sprawdza store)
        storage (Storage): Magazyn klucz-wartość

    Example:
        >>> saves = SaveManager(store, storage=FileStorage("saves"))
        >>> saves.save("save_1")
        True
        >>> saves.get_slot_info("save_1")
        {'timestamp': ..., 'act': 1, 'phase': 'day', 'sanity': 100}
    """

    def __init__(
        self,
        store: GameStateStore,
        config: Optional[PersistenceConfig] = None,
        storage: Optional[Storage] = None,
    ):
        self.store = store
        self.config = config or PersistenceConfig()
        self.storage = storage if storage is not None else MemoryStorage()

    @property
    def slots(self) -> List[str]:
        return [self.config.autosave_slot] + list(self.config.manual_slots)

    def key(self, slot: str) -> str:
        return f"{self.config.namespace}{slot}"

    def _known(self, slot: str) -> bool:
        if slot in self.slots:
            return True
        logger.warning("Unknown save slot: %r", slot)
        return False

    # ─────────────────────────────────────────────────────────────────────────
    # ZAPIS I ODCZYT
    # ─────────────────────────────────────────────────────────────────────────

    def save(self, slot: str) -> bool:
        """
        Zapisuje aktualny stan w slocie (koperta z store.to_json()).

        Returns:
            bool: True jeśli zapis się udał
        """
        if not self._known(slot):
            return False
        try:
            self.storage.set(self.key(slot), self.store.to_json())
        except (OSError, TypeError, ValueError) as exc:
            logger.error("Save to %s failed: %s", slot, exc)
            return False
        logger.info("Saved game to %s", slot)
        return True

    def autosave(self) -> bool:
        return self.save(self.config.autosave_slot)

    def load(self, slot: str) -> bool:
        """
        Wczytuje slot i zastępuje stan store.

        Walidację koperty (JSON, wersja, dane) wykonuje store.deserialize().

        Returns:
            bool: False dla brakującego, uszkodzonego lub niezgodnego zapisu
                (stan w pamięci bez zmian)
        """
        if not self._known(slot):
            return False
        raw = self._get_raw(slot)
        if raw is None:
            return False
        if not self.store.deserialize(raw):
            logger.error("Save %s could not be restored", slot)
            return False

        logger.info("Loaded game from %s", slot)
        return True

    def _get_raw(self, slot: str) -> Optional[str]:
        try:
            raw = self.storage.get(self.key(slot))
        except OSError as exc:
            logger.error("Reading %s failed: %s", slot, exc)
            return None
        if raw is None:
            logger.warning("No save in %s", slot)
        return raw

    def _read(self, slot: str) -> Optional[Dict[str, Any]]:
        raw = self._get_raw(slot)
        if raw is None:
            return None
        try:
            envelope = json.loads(raw)
        except ValueError as exc:
            logger.error("Save %s is not valid JSON: %s", slot, exc)
            return None
        if not isinstance(envelope, dict):
            logger.error("Save %s is corrupted: expected an object", slot)
            return None
        return envelope

    # ─────────────────────────────────────────────────────────────────────────
    # INFORMACJE O SLOTACH
    # ─────────────────────────────────────────────────────────────────────────

    def has_save(self, slot: str) -> bool:
        try:
            return self.storage.get(self.key(slot)) is not None
        except OSError:
            return False

    def delete_save(self, slot: str) -> bool:
        try:
            self.storage.remove(self.key(slot))
        except OSError as exc:
            logger.error("Deleting %s failed: %s", slot, exc)
            return False
        logger.info("Deleted save %s", slot)
        return True

    def get_slot_info(self, slot: str) -> Optional[Dict[str, Any]]:
        """
        Podsumowanie zapisu do menu.

        Returns:
            Optional[Dict]: {timestamp, act, phase, sanity} lub None
        """
        if not self.has_save(slot):
            return None
        envelope = self._read(slot)
        if envelope is None:
            return None
        data = envelope.get("data")
        if not isinstance(data, dict):
            return None
        player = data.get("player")
        return {
            "timestamp": envelope.get("timestamp"),
            "act": data.get("act"),
            "phase": data.get("phase"),
            "sanity": player.get("sanity") if isinstance(player, dict) else None,
        }

    def list_slots(self) -> List[Dict[str, Any]]:
        """Wszystkie znane sloty z informacją, czy są zajęte."""
        result = []
        for slot in self.slots:
            exists = self.has_save(slot)
            info = self.get_slot_info(slot) if exists else None
            result.append({
                "slot": slot,
                "exists": exists,
                "info": info,
                "corrupt": exists and info is None,
            })
        return result
