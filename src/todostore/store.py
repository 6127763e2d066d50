from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from threading import Lock
from typing import Callable, Dict, Iterator, Mapping, Optional, Set

from .backends import Backend, InMemoryBackend, get_backend
from .errors import DuplicateText, InvalidInput, NotFound, StorageUnavailable
from .models import Todo

logger = logging.getLogger(__name__)

_MAX_ID_ATTEMPTS = 16


def _uuid4_str() -> str:
    return str(uuid.uuid4())


def _validate_text(text: object) -> str:
    if not isinstance(text, str):
        raise InvalidInput("text must be a string")
    if not text.strip():
        raise InvalidInput("text must not be empty")
    return text


def _validate_done(done: object) -> Optional[bool]:
    if done is not None and not isinstance(done, bool):
        raise InvalidInput("done must be a boolean")
    return done


# PUBLIC_INTERFACE
class TodoView:
    """
    Lazy, restartable view over a snapshot of live Todos.

    The snapshot mapping is never mutated after the store publishes it, so
    iterating a view is unaffected by later writes. Order is insertion order.
    """

    def __init__(self, snapshot: Mapping[str, Todo], done: Optional[bool] = None) -> None:
        self._snapshot = snapshot
        self._done = done

    def __iter__(self) -> Iterator[Todo]:
        for todo in self._snapshot.values():
            if self._done is None or todo.done is self._done:
                yield todo

    def __len__(self) -> int:
        if self._done is None:
            return len(self._snapshot)
        return sum(1 for _ in self)

    def __repr__(self) -> str:
        return f"TodoView(done={self._done!r}, size={len(self)})"


# PUBLIC_INTERFACE
class TodoStore:
    """
    Record store enforcing Todo identity, uniqueness and defaults.

    Invariants held for every live record:
    - id is generated here, once, and never reused
    - no two live records share the same text
    - done is always a bool, False unless the caller said otherwise

    Writers (create/update/delete) serialize on a single lock covering the
    uniqueness index, the primary index and the backend call. Readers
    (get/list) never lock: writers publish a fresh id -> Todo mapping only
    after the backend accepted the change, and readers grab whichever mapping
    is current.

    Backend failures (StorageUnavailable) propagate unchanged and leave the
    store as it was.
    """

    def __init__(
        self,
        backend: Optional[Backend] = None,
        id_factory: Callable[[], str] = _uuid4_str,
    ) -> None:
        self._backend = backend if backend is not None else InMemoryBackend()
        self._id_factory = id_factory
        self._write_lock = Lock()
        # Published snapshot; replaced, never mutated
        self._records: Dict[str, Todo] = {}
        # text -> id, only touched under _write_lock
        self._text_index: Dict[str, str] = {}
        # every id this store has issued or loaded
        self._issued_ids: Set[str] = set()
        self._load()

    @property
    def backend(self) -> Backend:
        return self._backend

    def _load(self) -> None:
        records: Dict[str, Todo] = {}
        for todo_id, record in self._backend.scan():
            todo = Todo.from_record(record)
            if todo.id != todo_id:
                raise StorageUnavailable(f"Backend record under key {todo_id!r} carries id {todo.id!r}")
            if todo.text in self._text_index:
                raise DuplicateText(todo.text)
            records[todo_id] = todo
            self._text_index[todo.text] = todo_id
            self._issued_ids.add(todo_id)
        self._records = records
        logger.debug("Loaded %d todos from %s backend", len(records), self._backend.name)

    def _lookup(self, todo_id: object) -> Optional[Todo]:
        if not isinstance(todo_id, str):
            return None
        return self._records.get(todo_id)

    def _new_id(self) -> str:
        for _ in range(_MAX_ID_ATTEMPTS):
            candidate = self._id_factory()
            if candidate not in self._issued_ids:
                self._issued_ids.add(candidate)
                return candidate
        raise RuntimeError(f"id factory produced {_MAX_ID_ATTEMPTS} previously issued ids in a row")

    def _persist(self, todo: Todo) -> None:
        try:
            self._backend.put(todo.id, todo.to_record())
        except StorageUnavailable:
            logger.warning("Backend rejected write of todo %s", todo.id)
            raise

    # PUBLIC_INTERFACE
    def create(self, text: str, done: Optional[bool] = None) -> Todo:
        """
        Create a Todo with a freshly generated id.

        Raises:
            InvalidInput: text is empty or not a string, or done is not a bool.
            DuplicateText: another live Todo already has this text.
            StorageUnavailable: the backend failed; nothing was created.
        """
        text = _validate_text(text)
        resolved_done = _validate_done(done)
        if resolved_done is None:
            resolved_done = False

        with self._write_lock:
            if text in self._text_index:
                logger.info("Rejected create: duplicate text %r", text)
                raise DuplicateText(text)

            todo = Todo(id=self._new_id(), text=text, done=resolved_done)
            self._persist(todo)

            records = dict(self._records)
            records[todo.id] = todo
            self._text_index[text] = todo.id
            self._records = records

        logger.debug("Created todo %s", todo.id)
        return todo

    # PUBLIC_INTERFACE
    def get(self, todo_id: str) -> Todo:
        """Return the live Todo with this id or raise NotFound."""
        todo = self._lookup(todo_id)
        if todo is None:
            raise NotFound(todo_id)
        return todo

    # PUBLIC_INTERFACE
    def update(self, todo_id: str, text: Optional[str] = None, done: Optional[bool] = None) -> Todo:
        """
        Change text and/or done of a live Todo. Fields left as None keep their value.

        The update is all-or-nothing: on DuplicateText, InvalidInput or
        StorageUnavailable the stored record is untouched.
        """
        if text is not None:
            text = _validate_text(text)
        done = _validate_done(done)

        with self._write_lock:
            current = self._lookup(todo_id)
            if current is None:
                raise NotFound(todo_id)

            new_text = current.text if text is None else text
            new_done = current.done if done is None else done

            if new_text != current.text:
                owner = self._text_index.get(new_text)
                if owner is not None and owner != todo_id:
                    logger.info("Rejected update of %s: duplicate text %r", todo_id, new_text)
                    raise DuplicateText(new_text)

            updated = replace(current, text=new_text, done=new_done)
            if updated == current:
                return current

            self._persist(updated)

            records = dict(self._records)
            records[todo_id] = updated
            if new_text != current.text:
                del self._text_index[current.text]
                self._text_index[new_text] = todo_id
            self._records = records

        logger.debug("Updated todo %s", todo_id)
        return updated

    # PUBLIC_INTERFACE
    def delete(self, todo_id: str) -> None:
        """
        Remove a live Todo and free its text for reuse.

        Raises NotFound when the id is not live; the id itself is never
        handed out again.
        """
        with self._write_lock:
            current = self._lookup(todo_id)
            if current is None:
                raise NotFound(todo_id)

            try:
                self._backend.delete(todo_id)
            except NotFound:
                # Already gone from the backend; drop our copy to match
                logger.warning("Todo %s was live in the store but missing from the backend", todo_id)
            except StorageUnavailable:
                logger.warning("Backend rejected delete of todo %s", todo_id)
                raise

            records = dict(self._records)
            del records[todo_id]
            del self._text_index[current.text]
            self._records = records

        logger.debug("Deleted todo %s", todo_id)

    # PUBLIC_INTERFACE
    def list(self, done: Optional[bool] = None) -> TodoView:
        """Return a view over the live Todos, optionally filtered by done."""
        return TodoView(self._records, _validate_done(done))

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, todo_id: object) -> bool:
        return self._lookup(todo_id) is not None


_STORE: Optional[TodoStore] = None
_STORE_LOCK = Lock()


# PUBLIC_INTERFACE
def get_store() -> TodoStore:
    """Return the process-wide store, building it from settings on first use."""
    global _STORE
    with _STORE_LOCK:
        if _STORE is None:
            _STORE = TodoStore(get_backend())
        return _STORE
