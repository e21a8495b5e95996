"""
Persistence module - zapisy gry.

Zawiera:
- SaveManager: Zapis/odczyt stanu w slotach
- MemoryStorage, FileStorage: Magazyny klucz-wartość
"""

from .save_manager import SaveManager, Storage, MemoryStorage, FileStorage

__all__ = ["SaveManager", "Storage", "MemoryStorage", "FileStorage"]
