from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

# Default to the memory backend so tests never touch ./data
os.environ.setdefault("PERSISTENCE_BACKEND", "memory")

from todostore.backends import InMemoryBackend  # noqa: E402
from todostore.store import TodoStore  # noqa: E402


@pytest.fixture()
def backend() -> InMemoryBackend:
    return InMemoryBackend()


@pytest.fixture()
def store(backend: InMemoryBackend) -> TodoStore:
    return TodoStore(backend)
