from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from threading import RLock
from typing import Dict, Iterator, List, Optional, Tuple

from .errors import NotFound, StorageUnavailable
from .models import TodoRecord
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
class Backend(ABC):
    """
    Durable key-value contract consumed by TodoStore.

    Every method raises StorageUnavailable when the backend cannot serve the
    request. The backend knows nothing about uniqueness or defaults.
    """

    name = "abstract"

    @abstractmethod
    def put(self, todo_id: str, record: TodoRecord) -> None:
        """Insert or replace the record stored under todo_id."""

    @abstractmethod
    def get(self, todo_id: str) -> TodoRecord:
        """Return the record stored under todo_id, or raise NotFound."""

    @abstractmethod
    def delete(self, todo_id: str) -> None:
        """Remove the record stored under todo_id, or raise NotFound."""

    @abstractmethod
    def scan(self) -> Iterator[Tuple[str, TodoRecord]]:
        """Yield every (id, record) pair in insertion order."""


class InMemoryBackend(Backend):
    """
    Thread-safe in-memory backend suitable for testing and default runtime.

    Setting `available` to False makes every call raise StorageUnavailable,
    which is how outages are simulated.
    """

    name = "memory"

    def __init__(self) -> None:
        self._lock = RLock()
        self._items: Dict[str, TodoRecord] = {}
        self.available = True

    def _check_available(self) -> None:
        if not self.available:
            raise StorageUnavailable("In-memory backend is marked unavailable")

    def put(self, todo_id: str, record: TodoRecord) -> None:
        with self._lock:
            self._check_available()
            self._items[todo_id] = record.copy()  # type: ignore[assignment]

    def get(self, todo_id: str) -> TodoRecord:
        with self._lock:
            self._check_available()
            item = self._items.get(todo_id)
            if item is None:
                raise NotFound(todo_id)
            return item.copy()  # type: ignore[return-value]

    def delete(self, todo_id: str) -> None:
        with self._lock:
            self._check_available()
            if self._items.pop(todo_id, None) is None:
                raise NotFound(todo_id)

    def scan(self) -> Iterator[Tuple[str, TodoRecord]]:
        with self._lock:
            self._check_available()
            # Copy under the lock so the caller can iterate without holding it
            items: List[Tuple[str, TodoRecord]] = [
                (k, v.copy()) for k, v in self._items.items()  # type: ignore[misc]
            ]
        return iter(items)


# PUBLIC_INTERFACE
def get_backend(settings: Optional[Settings] = None) -> Backend:
    """
    Factory to return the configured backend based on settings.
    - memory: InMemoryBackend
    - sqlite: SQLiteBackend backed by SQLITE_DB_PATH
    """
    settings = settings or get_settings()
    if settings.persistence_backend == "sqlite":
        from .db import SQLiteBackend

        logger.info("Using sqlite backend at %s", settings.sqlite_db_path)
        return SQLiteBackend(settings.sqlite_db_path)
    logger.info("Using in-memory backend")
    return InMemoryBackend()
