from __future__ import annotations

import logging
import sqlite3
from abc import ABC, abstractmethod
from threading import RLock
from typing import Dict, Optional

from .settings import Settings, get_settings

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
class KeyValueStorage(ABC):
    """Abstract durable key-value contract used to persist the task list."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the stored value for key, or None if absent."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store value under key, overwriting any prior value."""


class InMemoryStorage(KeyValueStorage):
    """
    Thread-safe in-memory storage suitable for testing and default runtime.
    """

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._lock = RLock()
        self._items: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._items.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._items[key] = value


# PUBLIC_INTERFACE
def get_storage(settings: Optional[Settings] = None) -> KeyValueStorage:
    """
    Factory to return the configured storage backend based on settings.
    - memory: InMemoryStorage
    - sqlite: SQLiteStorage (falls back to memory if the database cannot be opened)
    """
    settings = settings or get_settings()
    if settings.persistence_backend == "sqlite":
        from .db import SQLiteStorage

        try:
            return SQLiteStorage(settings.sqlite_db_path)
        except (OSError, sqlite3.Error) as exc:
            logger.warning("sqlite storage unavailable path=%s err=%s; using memory", settings.sqlite_db_path, exc)
            return InMemoryStorage()
    return InMemoryStorage()
