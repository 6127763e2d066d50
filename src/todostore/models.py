from __future__ import annotations

from dataclasses import dataclass
from typing import TypedDict


# PUBLIC_INTERFACE
class TodoRecord(TypedDict):
    """
    The persisted layout of a Todo item, one record per key `id`.

    Fields:
    - id: Opaque unique identifier (UUID4 string) assigned by the store
    - text: Non-empty text, unique across live records
    - done: Completion flag
    """

    id: str
    text: str
    done: bool


# PUBLIC_INTERFACE
@dataclass(frozen=True)
class Todo:
    """
    Immutable Todo value handed out by the store.

    Instances are never mutated in place; an update produces a new Todo with
    the same id.
    """

    id: str
    text: str
    done: bool = False

    def to_record(self) -> TodoRecord:
        return {"id": self.id, "text": self.text, "done": self.done}

    @classmethod
    def from_record(cls, record: TodoRecord) -> "Todo":
        return cls(id=str(record["id"]), text=str(record["text"]), done=bool(record["done"]))
