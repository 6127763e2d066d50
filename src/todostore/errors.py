from __future__ import annotations

from typing import Optional


class TodoStoreError(Exception):
    """Base class for every error raised by the store and its backends."""

    kind = "TodoStoreError"


# PUBLIC_INTERFACE
class InvalidInput(TodoStoreError):
    """Raised when text is empty or a field has the wrong type."""

    kind = "InvalidInput"


# PUBLIC_INTERFACE
class DuplicateText(TodoStoreError):
    """Raised when a text value already belongs to another live Todo."""

    kind = "DuplicateText"

    def __init__(self, text: str) -> None:
        super().__init__(f"Todo text already exists: {text!r}")
        self.text = text


# PUBLIC_INTERFACE
class NotFound(TodoStoreError):
    """Raised when no live Todo has the requested id."""

    kind = "NotFound"

    def __init__(self, todo_id: str) -> None:
        super().__init__(f"Todo not found: {todo_id}")
        self.todo_id = todo_id


# PUBLIC_INTERFACE
class StorageUnavailable(TodoStoreError):
    """
    Raised by a backend when it cannot serve a request.

    The store propagates it unchanged and never retries.
    """

    kind = "StorageUnavailable"

    def __init__(self, message: str = "Storage backend unavailable", cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.cause = cause
