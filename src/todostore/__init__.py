"""
Todo record store.

TodoStore keeps Todo items with store-generated ids, unique text and a done
flag defaulting to False, layered on a pluggable key-value Backend. The
FastAPI app in `todostore.main` is a thin serving layer over it.
"""

from .backends import Backend, InMemoryBackend, get_backend
from .errors import DuplicateText, InvalidInput, NotFound, StorageUnavailable, TodoStoreError
from .models import Todo, TodoRecord
from .store import TodoStore, TodoView

__all__ = [
    "Backend",
    "DuplicateText",
    "InMemoryBackend",
    "InvalidInput",
    "NotFound",
    "StorageUnavailable",
    "Todo",
    "TodoRecord",
    "TodoStore",
    "TodoStoreError",
    "TodoView",
    "get_backend",
]
