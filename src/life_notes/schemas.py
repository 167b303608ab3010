from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from .models import TODO_TYPES, TYPE_SPECIFIC_FIELDS, HabitFrequency, Priority, TodoType

# Shared type for incoming timestamps which can be a date, datetime, or ISO8601 string
TimestampInput = Union[date, datetime, str]


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# PUBLIC_INTERFACE
def parse_timestamp(value: Optional[TimestampInput]) -> Optional[datetime]:
    """
    Normalize a client supplied timestamp into an aware UTC datetime.

    - Strings are parsed as ISO8601 datetimes; a bare date is promoted to 00:00.
      A trailing 'Z' is accepted.
    - A date (not datetime) is promoted to a datetime at 00:00.
    - Naive datetimes are taken as UTC.

    Raises:
        ValueError: if the value cannot be interpreted as a timestamp.
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        return _as_utc(value)

    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)

    if isinstance(value, str):
        s = value.strip()
        if s.endswith(("Z", "z")):
            s = s[:-1] + "+00:00"
        try:
            return _as_utc(datetime.fromisoformat(s))
        except ValueError:
            try:
                d = date.fromisoformat(s)
            except ValueError as e:
                raise ValueError(
                    "Invalid date format. Use ISO8601 date or datetime string "
                    "(e.g., '2025-01-31' or '2025-01-31T13:45:00Z')."
                ) from e
            return datetime(d.year, d.month, d.day, tzinfo=timezone.utc)

    raise ValueError("Invalid type for date; expected date, datetime, or ISO8601 string.")


def _require_title(value: Optional[str]) -> str:
    if value is None or not value.strip():
        raise PydanticCustomError("title_required", "Title is required")
    return value


class CamelModel(BaseModel):
    """Base model exposing camelCase field names on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Notes
# ---------------------------------------------------------------------------


# PUBLIC_INTERFACE
class NoteCreate(CamelModel):
    """Schema for creating a note."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Trip ideas",
                "content": "Lisbon in spring",
                "tags": ["travel"],
                "isPinned": True,
            }
        }
    )

    title: Optional[str] = Field(default=None, validate_default=True, description="Note title (required)")
    content: str = Field(default="", description="Free text body")
    tags: List[str] = Field(default_factory=list, description="Tags, order preserved")
    is_pinned: bool = Field(default=False, description="Pinned notes are listed first")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: Optional[str]) -> str:
        return _require_title(v)


# PUBLIC_INTERFACE
class NoteUpdate(CamelModel):
    """
    Schema for updating a note.
    All fields are optional; only provided fields will be updated.
    """

    title: Optional[str] = Field(default=None, description="New title; must not be empty when given")
    content: Optional[str] = None
    tags: Optional[List[str]] = None
    is_pinned: Optional[bool] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return _require_title(v)


# PUBLIC_INTERFACE
class NoteOut(CamelModel):
    """Schema returned by the API for a note."""

    id: str
    title: str
    content: str
    tags: List[str]
    is_pinned: bool
    created_at: datetime
    updated_at: datetime


# ---------------------------------------------------------------------------
# Todos
# ---------------------------------------------------------------------------


# PUBLIC_INTERFACE
class TodoCreate(CamelModel):
    """
    Schema for creating a todo.

    Only the type-specific field matching the resolved type is kept; the
    others are dropped unvalidated.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "type": "shopping",
                "title": "Oat milk",
                "priority": "low",
                "tags": ["groceries"],
                "quantity": 2,
            }
        }
    )

    title: Optional[str] = Field(default=None, validate_default=True, description="Todo title (required)")
    type: TodoType = Field(default=TodoType.TASK, description="One of the 7 todo types")
    description: str = ""
    priority: Priority = Priority.MEDIUM
    due_date: Optional[datetime] = Field(
        default=None,
        description="Due date/time. Accepts ISO8601 date or datetime; dates are set to 00:00 UTC",
    )
    tags: List[str] = Field(default_factory=list)
    habit_frequency: Optional[HabitFrequency] = None
    reminder_time: Optional[str] = None
    url: Optional[str] = None
    quantity: Optional[int] = Field(default=None, ge=1)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: Optional[str]) -> str:
        return _require_title(v)

    @model_validator(mode="before")
    @classmethod
    def drop_foreign_type_fields(cls, data: Any) -> Any:
        """
        Discard type-specific attributes the resolved type does not own, before
        they are validated. A falsy shopping quantity falls back to the default.
        """
        if not isinstance(data, dict):
            return data
        todo_type = data.get("type", TodoType.TASK.value)
        if isinstance(todo_type, TodoType):
            todo_type = todo_type.value
        cleaned = dict(data)
        for owner, field in TYPE_SPECIFIC_FIELDS.items():
            if owner != todo_type:
                cleaned.pop(field, None)
                cleaned.pop(to_camel(field), None)
        if todo_type == TodoType.SHOPPING.value and "quantity" in cleaned and not cleaned["quantity"]:
            del cleaned["quantity"]
        return cleaned

    @field_validator("type", mode="before")
    @classmethod
    def validate_type(cls, v: object) -> object:
        if isinstance(v, TodoType):
            return v
        if v not in TODO_TYPES:
            raise PydanticCustomError(
                "invalid_todo_type",
                "Invalid type. Must be one of: {valid}",
                {"valid": ", ".join(TODO_TYPES)},
            )
        return v

    @field_validator("due_date", mode="before")
    @classmethod
    def parse_due_date(cls, v: Optional[TimestampInput]) -> Optional[datetime]:
        return parse_timestamp(v)


# PUBLIC_INTERFACE
class TodoUpdate(CamelModel):
    """
    Schema for updating a todo.
    All fields are optional; only provided fields will be updated.
    """

    title: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[Priority] = None
    is_completed: Optional[bool] = None
    due_date: Optional[datetime] = None
    tags: Optional[List[str]] = None
    habit_frequency: Optional[HabitFrequency] = None
    reminder_time: Optional[str] = None
    url: Optional[str] = None
    quantity: Optional[int] = Field(default=None, ge=1)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return _require_title(v)

    @field_validator("due_date", mode="before")
    @classmethod
    def parse_due_date(cls, v: Optional[TimestampInput]) -> Optional[datetime]:
        return parse_timestamp(v)


class _TodoOutBase(CamelModel):
    id: str
    title: str
    description: str
    priority: Priority
    is_completed: bool
    due_date: Optional[datetime] = None
    tags: List[str]
    completed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class TaskTodoOut(_TodoOutBase):
    type: Literal["task"]


class GoalTodoOut(_TodoOutBase):
    type: Literal["goal"]


class HabitTodoOut(_TodoOutBase):
    type: Literal["habit"]
    habit_frequency: HabitFrequency = HabitFrequency.DAILY


class ReminderTodoOut(_TodoOutBase):
    type: Literal["reminder"]
    reminder_time: Optional[str] = None


class ShoppingTodoOut(_TodoOutBase):
    type: Literal["shopping"]
    quantity: int = 1


class IdeaTodoOut(_TodoOutBase):
    type: Literal["idea"]


class BookmarkTodoOut(_TodoOutBase):
    type: Literal["bookmark"]
    url: Optional[str] = None


# Tagged union: each variant only carries the attribute of its own type.
TodoOut = Annotated[
    Union[
        TaskTodoOut,
        GoalTodoOut,
        HabitTodoOut,
        ReminderTodoOut,
        ShoppingTodoOut,
        IdeaTodoOut,
        BookmarkTodoOut,
    ],
    Field(discriminator="type"),
]


class TodoTypeInfo(CamelModel):
    type: TodoType
    label: str
    icon: str
    description: str


# ---------------------------------------------------------------------------
# Response envelopes
# ---------------------------------------------------------------------------


class NoteListMeta(CamelModel):
    total: int = Field(..., description="Number of notes returned")


class TodoListMeta(CamelModel):
    total: int = Field(..., description="Number of todos returned")
    by_type: Dict[str, int] = Field(..., description="Per-type counts; all 7 types are present")
    completed: int
    pending: int


class NoteResponse(CamelModel):
    success: bool = True
    data: NoteOut


class NoteListResponse(CamelModel):
    success: bool = True
    data: List[NoteOut]
    meta: NoteListMeta


class NoteDeleteResponse(CamelModel):
    success: bool = True
    data: NoteOut
    message: str = "Note deleted successfully"


class TodoResponse(CamelModel):
    success: bool = True
    data: TodoOut


class TodoListResponse(CamelModel):
    success: bool = True
    data: List[TodoOut]
    meta: TodoListMeta


class TodoDeleteResponse(CamelModel):
    success: bool = True
    data: TodoOut
    message: str = "Todo deleted successfully"


class TodoTypeListResponse(CamelModel):
    success: bool = True
    data: List[TodoTypeInfo]


class ErrorDetail(CamelModel):
    message: str


class ErrorResponse(CamelModel):
    """Envelope used by every error response."""

    success: bool = False
    error: ErrorDetail
