from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .models import Todo


# PUBLIC_INTERFACE
class TodoCreate(BaseModel):
    """
    Schema for creating a new Todo item.

    Emptiness of `text` is checked by the store, so blank text comes back as
    a 400 InvalidInput rather than a 422.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "text": "wash car",
                "done": False,
            }
        }
    )

    text: str = Field(..., description="Todo text, unique among live todos")
    done: Optional[bool] = Field(default=None, description="Completion flag; false when omitted")


# PUBLIC_INTERFACE
class TodoUpdate(BaseModel):
    """
    Schema for updating an existing Todo item.
    All fields are optional; only provided fields will be updated.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "text": "wash car and bike",
                "done": True,
            }
        }
    )

    text: Optional[str] = Field(default=None, description="New text, unique among live todos")
    done: Optional[bool] = Field(default=None, description="New completion flag")


# PUBLIC_INTERFACE
class TodoOut(BaseModel):
    """
    Schema returned by the API for a Todo item.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "5b1f2c9e-8a9d-4c43-9f0e-2f1c8e6f7a10",
                "text": "wash car",
                "done": False,
            }
        }
    )

    id: str = Field(..., description="Unique identifier assigned by the store")
    text: str = Field(..., description="Todo text")
    done: bool = Field(..., description="Completion flag")

    @classmethod
    def from_todo(cls, todo: Todo) -> "TodoOut":
        return cls(id=todo.id, text=todo.text, done=todo.done)


class TodoListOut(BaseModel):
    """
    Envelope for list responses.
    """

    items: List[TodoOut] = Field(..., description="List of Todo items")
    total: int = Field(..., description="Number of items returned")


class ErrorOut(BaseModel):
    """
    Error body for store failures.
    """

    error: str = Field(..., description="Error kind, e.g. DuplicateText")
    message: str = Field(..., description="Human readable description")
