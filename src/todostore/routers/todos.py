from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status

from ..auth import get_basic_auth_dependency
from ..schemas import ErrorOut, TodoCreate, TodoListOut, TodoOut, TodoUpdate
from ..store import TodoStore, get_store

router = APIRouter(
    prefix="/api/v1/todos",
    tags=["todos"],
    dependencies=[Depends(get_basic_auth_dependency())],
)

_NOT_FOUND = {"model": ErrorOut, "description": "Todo not found"}
_DUPLICATE = {"model": ErrorOut, "description": "Another todo already has this text"}
_INVALID = {"model": ErrorOut, "description": "Empty text"}
_UNAVAILABLE = {"model": ErrorOut, "description": "Storage backend unavailable"}


# PUBLIC_INTERFACE
@router.post(
    "/",
    response_model=TodoOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create Todo",
    description="Create a new Todo item. `done` defaults to false.",
    responses={
        201: {"description": "Todo created successfully"},
        400: _INVALID,
        409: _DUPLICATE,
        503: _UNAVAILABLE,
    },
)
def create_todo(payload: TodoCreate, store: TodoStore = Depends(get_store)) -> TodoOut:
    """
    Create a new Todo.
    """
    return TodoOut.from_todo(store.create(payload.text, payload.done))


# PUBLIC_INTERFACE
@router.get(
    "/",
    response_model=TodoListOut,
    summary="List Todos",
    description="List live todos in insertion order, optionally filtered by completion status.",
    responses={
        200: {"description": "List retrieved successfully"},
        503: _UNAVAILABLE,
    },
)
def list_todos(
    done: Optional[bool] = Query(None, description="Filter by completion status"),
    store: TodoStore = Depends(get_store),
) -> TodoListOut:
    items = [TodoOut.from_todo(t) for t in store.list(done)]
    return TodoListOut(items=items, total=len(items))


# PUBLIC_INTERFACE
@router.get(
    "/{todo_id}",
    response_model=TodoOut,
    summary="Get Todo",
    description="Get a single Todo item by ID.",
    responses={
        200: {"description": "Todo found"},
        404: _NOT_FOUND,
    },
)
def get_todo(todo_id: str, store: TodoStore = Depends(get_store)) -> TodoOut:
    return TodoOut.from_todo(store.get(todo_id))


# PUBLIC_INTERFACE
@router.patch(
    "/{todo_id}",
    response_model=TodoOut,
    summary="Update Todo",
    description="Partially update text and/or done of a Todo item. The id never changes.",
    responses={
        200: {"description": "Todo updated"},
        400: _INVALID,
        404: _NOT_FOUND,
        409: _DUPLICATE,
        503: _UNAVAILABLE,
    },
)
def patch_todo(todo_id: str, payload: TodoUpdate, store: TodoStore = Depends(get_store)) -> TodoOut:
    """
    Partial update of a Todo item.
    """
    return TodoOut.from_todo(store.update(todo_id, text=payload.text, done=payload.done))


# PUBLIC_INTERFACE
@router.delete(
    "/{todo_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Todo",
    description="Delete a Todo item by ID. Its text becomes available again.",
    responses={
        204: {"description": "Todo deleted"},
        404: _NOT_FOUND,
        503: _UNAVAILABLE,
    },
)
def delete_todo(todo_id: str, store: TodoStore = Depends(get_store)) -> Response:
    """
    Delete a Todo. Returns 204 on success, 404 if not found.
    """
    store.delete(todo_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
