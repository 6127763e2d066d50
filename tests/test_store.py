import uuid

import pytest

from todostore.backends import InMemoryBackend
from todostore.errors import DuplicateText, InvalidInput, NotFound, StorageUnavailable
from todostore.models import Todo
from todostore.store import TodoStore, TodoView


class TestCreate:
    def test_done_defaults_to_false(self, store):
        todo = store.create("buy milk")
        assert todo.text == "buy milk"
        assert todo.done is False

    def test_done_can_be_set(self, store):
        todo = store.create("pay rent", done=True)
        assert todo.done is True

    def test_generates_uuid_ids(self, store):
        a = store.create("a")
        b = store.create("b")
        assert a.id != b.id
        # ids are UUID strings
        uuid.UUID(a.id)
        uuid.UUID(b.id)

    def test_persists_record_to_backend(self, store, backend):
        todo = store.create("water plants")
        assert backend.get(todo.id) == {"id": todo.id, "text": "water plants", "done": False}

    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    def test_rejects_empty_text(self, store, backend, text):
        with pytest.raises(InvalidInput):
            store.create(text)
        assert len(store) == 0
        assert list(backend.scan()) == []

    def test_rejects_non_bool_done(self, store):
        with pytest.raises(InvalidInput):
            store.create("x", done="yes")  # type: ignore[arg-type]

    def test_rejects_duplicate_text(self, store):
        store.create("wash car")
        with pytest.raises(DuplicateText) as excinfo:
            store.create("wash car")
        assert excinfo.value.text == "wash car"
        assert len(store) == 1

    def test_text_comparison_is_exact(self, store):
        store.create("Wash car")
        store.create("wash car")
        store.create("wash car ")
        assert len(store) == 3


class TestGet:
    def test_returns_created_todo(self, store):
        todo = store.create("read book")
        assert store.get(todo.id) == todo

    def test_unknown_id_raises_not_found(self, store):
        with pytest.raises(NotFound) as excinfo:
            store.get("missing")
        assert excinfo.value.todo_id == "missing"

    @pytest.mark.parametrize("bad_id", [["a"], {"a": 1}, 42, None])
    def test_non_string_id_is_not_found(self, store, bad_id):
        store.create("a")
        with pytest.raises(NotFound):
            store.get(bad_id)
        with pytest.raises(NotFound):
            store.update(bad_id, done=True)
        with pytest.raises(NotFound):
            store.delete(bad_id)
        assert bad_id not in store


class TestUpdate:
    def test_update_done_keeps_id_and_text(self, store):
        todo = store.create("wash car")
        updated = store.update(todo.id, done=True)
        assert updated == Todo(id=todo.id, text="wash car", done=True)
        assert store.get(todo.id) == updated

    def test_id_survives_many_updates(self, store):
        todo = store.create("t0")
        for i in range(1, 6):
            store.update(todo.id, text=f"t{i}", done=bool(i % 2))
        assert store.get(todo.id).id == todo.id
        assert store.get(todo.id).text == "t5"

    def test_update_text_frees_old_text(self, store):
        todo = store.create("old")
        store.update(todo.id, text="new")
        other = store.create("old")
        assert other.id != todo.id

    def test_update_to_own_text_is_allowed(self, store):
        todo = store.create("same")
        assert store.update(todo.id, text="same", done=True).done is True

    def test_duplicate_text_leaves_record_unchanged(self, store, backend):
        a = store.create("a")
        b = store.create("b")
        with pytest.raises(DuplicateText):
            store.update(b.id, text="a", done=True)
        assert store.get(b.id) == b
        assert backend.get(b.id)["text"] == "b"
        assert store.get(a.id) == a

    def test_empty_text_rejected(self, store):
        todo = store.create("x")
        with pytest.raises(InvalidInput):
            store.update(todo.id, text="  ")
        assert store.get(todo.id) == todo

    def test_unknown_id_raises_not_found(self, store):
        with pytest.raises(NotFound):
            store.update("missing", done=True)

    def test_no_change_returns_current(self, store):
        todo = store.create("x")
        assert store.update(todo.id) is todo


class TestDelete:
    def test_delete_removes_record(self, store, backend):
        todo = store.create("gone")
        store.delete(todo.id)
        assert todo.id not in store
        with pytest.raises(NotFound):
            store.get(todo.id)
        with pytest.raises(NotFound):
            backend.get(todo.id)

    def test_delete_frees_text(self, store):
        todo = store.create("X")
        store.delete(todo.id)
        again = store.create("X")
        assert again.id != todo.id

    def test_delete_missing_raises(self, store):
        todo = store.create("once")
        store.delete(todo.id)
        with pytest.raises(NotFound):
            store.delete(todo.id)

    def test_ids_are_never_reused(self, backend):
        ids = iter(["id-1", "id-1", "id-2"])
        store = TodoStore(backend, id_factory=lambda: next(ids))
        first = store.create("a")
        store.delete(first.id)
        second = store.create("b")
        assert first.id == "id-1"
        assert second.id == "id-2"

    def test_delete_tolerates_record_already_missing_from_backend(self, store, backend):
        todo = store.create("drifted")
        backend.delete(todo.id)
        store.delete(todo.id)
        assert len(store) == 0
        store.create("drifted")


class TestList:
    def test_insertion_order(self, store):
        texts = ["one", "two", "three"]
        for t in texts:
            store.create(t)
        assert [t.text for t in store.list()] == texts

    def test_filter_by_done(self, store):
        store.create("a", done=True)
        store.create("b")
        store.create("c", done=True)
        assert [t.text for t in store.list(done=True)] == ["a", "c"]
        assert [t.text for t in store.list(done=False)] == ["b"]
        assert len(store.list(done=True)) == 2

    def test_view_is_restartable(self, store):
        store.create("a")
        store.create("b")
        view = store.list()
        assert isinstance(view, TodoView)
        assert list(view) == list(view)

    def test_view_is_a_snapshot(self, store):
        a = store.create("a")
        view = store.list()
        iterator = iter(view)
        assert next(iterator) == a
        store.create("b")
        store.update(a.id, done=True)
        store.delete(a.id)
        assert list(iterator) == []
        assert list(view) == [a]
        assert [t.text for t in store.list()] == ["b"]

    def test_rejects_non_bool_filter(self, store):
        with pytest.raises(InvalidInput):
            store.list(done="true")  # type: ignore[arg-type]


class TestStorageUnavailable:
    def test_create_propagates_and_leaves_store_unchanged(self, store, backend):
        backend.available = False
        with pytest.raises(StorageUnavailable):
            store.create("offline")
        backend.available = True
        assert len(store) == 0
        # text was not reserved by the failed create
        store.create("offline")

    def test_update_propagates_and_leaves_store_unchanged(self, store, backend):
        todo = store.create("before")
        backend.available = False
        with pytest.raises(StorageUnavailable):
            store.update(todo.id, text="after", done=True)
        backend.available = True
        assert store.get(todo.id) == todo
        store.create("after")
        with pytest.raises(DuplicateText):
            store.create("before")

    def test_delete_propagates_and_keeps_record(self, store, backend):
        todo = store.create("stay")
        backend.available = False
        with pytest.raises(StorageUnavailable):
            store.delete(todo.id)
        backend.available = True
        assert store.get(todo.id) == todo

    def test_construction_propagates(self):
        backend = InMemoryBackend()
        backend.available = False
        with pytest.raises(StorageUnavailable):
            TodoStore(backend)


class TestLoad:
    def test_loads_existing_records(self, backend):
        backend.put("a", {"id": "a", "text": "first", "done": True})
        backend.put("b", {"id": "b", "text": "second", "done": False})
        store = TodoStore(backend)
        assert [t.id for t in store.list()] == ["a", "b"]
        with pytest.raises(DuplicateText):
            store.create("first")

    def test_loaded_ids_are_not_reissued(self, backend):
        backend.put("fixed", {"id": "fixed", "text": "t", "done": False})
        ids = iter(["fixed", "fresh"])
        store = TodoStore(backend, id_factory=lambda: next(ids))
        assert store.create("u").id == "fresh"

    def test_duplicate_text_in_backend_is_rejected(self, backend):
        backend.put("a", {"id": "a", "text": "dup", "done": False})
        backend.put("b", {"id": "b", "text": "dup", "done": True})
        with pytest.raises(DuplicateText):
            TodoStore(backend)

    def test_record_id_must_match_its_key(self, backend):
        backend.put("k", {"id": "other", "text": "t", "done": False})
        with pytest.raises(StorageUnavailable):
            TodoStore(backend)
        assert [k for k, _ in backend.scan()] == ["k"]


def test_wash_car_scenario(store):
    created = store.create("wash car")
    assert created == Todo(id=created.id, text="wash car", done=False)

    updated = store.update(created.id, done=True)
    assert updated == Todo(id=created.id, text="wash car", done=True)

    with pytest.raises(DuplicateText):
        store.create("wash car")

    store.delete(created.id)
    with pytest.raises(NotFound):
        store.get(created.id)


def test_get_store_returns_one_instance_per_process():
    from todostore.store import get_store

    assert get_store() is get_store()
    assert isinstance(get_store().backend, InMemoryBackend)
