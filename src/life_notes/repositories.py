from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from functools import lru_cache
from threading import RLock
from typing import Dict, List, Optional

from .logging_config import get_logger
from .models import PRIORITY_RANK, TYPE_SPECIFIC_FIELDS, NoteEntity, TodoEntity, TodoType
from .schemas import NoteCreate, NoteUpdate, TodoCreate, TodoUpdate

logger = get_logger("repositories")

_FAR_FUTURE = datetime.max.replace(tzinfo=timezone.utc)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


def _copy_note(note: NoteEntity) -> NoteEntity:
    copied = note.copy()
    copied["tags"] = list(note["tags"])
    return copied


def _copy_todo(todo: TodoEntity) -> TodoEntity:
    copied = todo.copy()
    copied["tags"] = list(todo["tags"])
    return copied


@dataclass(frozen=True)
class NoteListQuery:
    """
    Query parameters for listing notes.
    """
    tag: Optional[str] = None
    pinned: Optional[bool] = None
    search: Optional[str] = None


@dataclass(frozen=True)
class TodoListQuery:
    """
    Query parameters for listing todos. All filters are combined with AND.
    """
    type: Optional[str] = None
    priority: Optional[str] = None
    completed: Optional[bool] = None
    tag: Optional[str] = None
    search: Optional[str] = None
    due_before: Optional[datetime] = None
    due_after: Optional[datetime] = None


class TypeFieldMismatchError(ValueError):
    """A type-specific attribute was supplied for a todo of another type."""

    def __init__(self, field_alias: str, owner_type: str, todo_type: str) -> None:
        super().__init__(
            f"Field '{field_alias}' only applies to {owner_type} todos, not {todo_type}"
        )
        self.field_alias = field_alias
        self.owner_type = owner_type
        self.todo_type = todo_type


# PUBLIC_INTERFACE
class NoteRepository(ABC):
    """Abstract repository contract for note storage."""

    @abstractmethod
    def create(self, data: NoteCreate) -> NoteEntity:
        """Create and return a new note."""

    @abstractmethod
    def get(self, note_id: str) -> Optional[NoteEntity]:
        """Return a note by id, or None if not found."""

    @abstractmethod
    def update(self, note_id: str, data: NoteUpdate) -> Optional[NoteEntity]:
        """Merge the provided fields into a note. Return the updated note or None if not found."""

    @abstractmethod
    def delete(self, note_id: str) -> Optional[NoteEntity]:
        """Remove a note. Return the removed note, or None if not found."""

    @abstractmethod
    def list(self, query: Optional[NoteListQuery] = None) -> List[NoteEntity]:
        """
        Return notes matching the filters:
        - exact tag membership
        - exact pinned flag
        - case-insensitive substring search across title and content
        Sorted pinned first, then by updated_at descending.
        """

    @abstractmethod
    def clear(self) -> None:
        """Remove every note."""


# PUBLIC_INTERFACE
class TodoRepository(ABC):
    """Abstract repository contract for todo storage."""

    @abstractmethod
    def create(self, data: TodoCreate) -> TodoEntity:
        """Create and return a new todo."""

    @abstractmethod
    def get(self, todo_id: str) -> Optional[TodoEntity]:
        """Return a todo by id, or None if not found."""

    @abstractmethod
    def update(self, todo_id: str, data: TodoUpdate) -> Optional[TodoEntity]:
        """
        Merge the provided fields into a todo. Return the updated todo or None if not found.

        Raises:
            TypeFieldMismatchError: a type-specific field was given for another type.
        """

    @abstractmethod
    def toggle(self, todo_id: str) -> Optional[TodoEntity]:
        """Flip the completion state of a todo. Return the updated todo or None if not found."""

    @abstractmethod
    def delete(self, todo_id: str) -> Optional[TodoEntity]:
        """Remove a todo. Return the removed todo, or None if not found."""

    @abstractmethod
    def list(self, query: Optional[TodoListQuery] = None) -> List[TodoEntity]:
        """
        Return todos matching every given filter, sorted incomplete first,
        then by priority rank, then by due date (undated last).
        """

    @abstractmethod
    def clear(self) -> None:
        """Remove every todo."""


class InMemoryNoteRepository(NoteRepository):
    """
    Thread-safe in-memory note store. Insertion order is kept, so notes that
    tie on sort keys list in creation order.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._items: Dict[str, NoteEntity] = {}

    def create(self, data: NoteCreate) -> NoteEntity:
        now = _now()
        entity: NoteEntity = {
            "id": _new_id(),
            "title": data.title,  # type: ignore[typeddict-item]
            "content": data.content,
            "tags": list(data.tags),
            "is_pinned": data.is_pinned,
            "created_at": now,
            "updated_at": now,
        }
        with self._lock:
            self._items[entity["id"]] = entity
        logger.info("Created note id=%s", entity["id"])
        return _copy_note(entity)

    def get(self, note_id: str) -> Optional[NoteEntity]:
        with self._lock:
            item = self._items.get(note_id)
            return None if item is None else _copy_note(item)

    def update(self, note_id: str, data: NoteUpdate) -> Optional[NoteEntity]:
        with self._lock:
            existing = self._items.get(note_id)
            if existing is None:
                return None

            # Update only provided fields
            updated = _copy_note(existing)
            if data.title is not None:
                updated["title"] = data.title
            if data.content is not None:
                updated["content"] = data.content
            if data.tags is not None:
                updated["tags"] = list(data.tags)
            if data.is_pinned is not None:
                updated["is_pinned"] = data.is_pinned
            updated["updated_at"] = _now()

            self._items[note_id] = updated
            return _copy_note(updated)

    def delete(self, note_id: str) -> Optional[NoteEntity]:
        with self._lock:
            removed = self._items.pop(note_id, None)
        if removed is not None:
            logger.info("Deleted note id=%s", note_id)
        return removed

    def list(self, query: Optional[NoteListQuery] = None) -> List[NoteEntity]:
        q = query or NoteListQuery()
        with self._lock:
            items = [_copy_note(n) for n in self._items.values()]

        if q.tag:
            items = [n for n in items if q.tag in n["tags"]]

        if q.pinned is not None:
            items = [n for n in items if n["is_pinned"] == q.pinned]

        if q.search:
            s = q.search.lower()
            items = [n for n in items if s in n["title"].lower() or s in n["content"].lower()]

        # Two stable passes: newest first, then pinned ahead of unpinned.
        items.sort(key=lambda n: n["updated_at"], reverse=True)
        items.sort(key=lambda n: not n["is_pinned"])
        return items

    def clear(self) -> None:
        with self._lock:
            self._items.clear()


def _todo_sort_key(todo: TodoEntity):
    due = todo["due_date"]
    return (
        todo["is_completed"],
        PRIORITY_RANK[todo["priority"]],
        due is None,
        due or _FAR_FUTURE,
    )


def _check_type_fields(todo: TodoEntity, data: TodoUpdate) -> None:
    for todo_type, field in TYPE_SPECIFIC_FIELDS.items():
        if getattr(data, field) is not None and todo["type"] != todo_type:
            alias = TodoUpdate.model_fields[field].alias or field
            raise TypeFieldMismatchError(alias, todo_type, todo["type"])


class InMemoryTodoRepository(TodoRepository):
    """
    Thread-safe in-memory todo store.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._items: Dict[str, TodoEntity] = {}

    def create(self, data: TodoCreate) -> TodoEntity:
        now = _now()
        todo_type = data.type.value
        entity: TodoEntity = {
            "id": _new_id(),
            "type": todo_type,
            "title": data.title,  # type: ignore[typeddict-item]
            "description": data.description,
            "priority": data.priority.value,
            "is_completed": False,
            "due_date": data.due_date,
            "tags": list(data.tags),
            "completed_at": None,
            "created_at": now,
            "updated_at": now,
        }
        if todo_type == TodoType.HABIT.value:
            entity["habit_frequency"] = data.habit_frequency.value if data.habit_frequency else "daily"
        elif todo_type == TodoType.REMINDER.value:
            entity["reminder_time"] = data.reminder_time
        elif todo_type == TodoType.BOOKMARK.value:
            entity["url"] = data.url
        elif todo_type == TodoType.SHOPPING.value:
            entity["quantity"] = data.quantity or 1

        with self._lock:
            self._items[entity["id"]] = entity
        logger.info("Created todo id=%s type=%s", entity["id"], todo_type)
        return _copy_todo(entity)

    def get(self, todo_id: str) -> Optional[TodoEntity]:
        with self._lock:
            item = self._items.get(todo_id)
            return None if item is None else _copy_todo(item)

    def update(self, todo_id: str, data: TodoUpdate) -> Optional[TodoEntity]:
        with self._lock:
            existing = self._items.get(todo_id)
            if existing is None:
                return None
            _check_type_fields(existing, data)

            now = _now()
            updated = _copy_todo(existing)
            if data.title is not None:
                updated["title"] = data.title
            if data.description is not None:
                updated["description"] = data.description
            if data.priority is not None:
                updated["priority"] = data.priority.value
            if data.is_completed is not None:
                if data.is_completed and not existing["is_completed"]:
                    updated["completed_at"] = now
                elif not data.is_completed:
                    updated["completed_at"] = None
                updated["is_completed"] = data.is_completed
            if "due_date" in data.model_fields_set:
                # Respect explicit nulling of due_date
                updated["due_date"] = data.due_date
            if data.tags is not None:
                updated["tags"] = list(data.tags)
            if data.habit_frequency is not None:
                updated["habit_frequency"] = data.habit_frequency.value
            if "reminder_time" in data.model_fields_set:
                updated["reminder_time"] = data.reminder_time
            if "url" in data.model_fields_set:
                updated["url"] = data.url
            if data.quantity is not None:
                updated["quantity"] = data.quantity
            updated["updated_at"] = now

            self._items[todo_id] = updated
            return _copy_todo(updated)

    def toggle(self, todo_id: str) -> Optional[TodoEntity]:
        with self._lock:
            existing = self._items.get(todo_id)
            if existing is None:
                return None
            now = _now()
            updated = _copy_todo(existing)
            updated["is_completed"] = not existing["is_completed"]
            updated["completed_at"] = now if updated["is_completed"] else None
            updated["updated_at"] = now
            self._items[todo_id] = updated
            return _copy_todo(updated)

    def delete(self, todo_id: str) -> Optional[TodoEntity]:
        with self._lock:
            removed = self._items.pop(todo_id, None)
        if removed is not None:
            logger.info("Deleted todo id=%s", todo_id)
        return removed

    def list(self, query: Optional[TodoListQuery] = None) -> List[TodoEntity]:
        q = query or TodoListQuery()
        with self._lock:
            items = [_copy_todo(t) for t in self._items.values()]

        # Filtering
        if q.type:
            items = [t for t in items if t["type"] == q.type]

        if q.priority:
            items = [t for t in items if t["priority"] == q.priority]

        if q.completed is not None:
            items = [t for t in items if t["is_completed"] == q.completed]

        if q.tag:
            items = [t for t in items if q.tag in t["tags"]]

        if q.search:
            s = q.search.lower()
            items = [t for t in items if s in t["title"].lower() or s in t["description"].lower()]

        if q.due_before is not None:
            items = [t for t in items if t["due_date"] is not None and t["due_date"] <= q.due_before]

        if q.due_after is not None:
            items = [t for t in items if t["due_date"] is not None and t["due_date"] >= q.due_after]

        items.sort(key=_todo_sort_key)
        return items

    def clear(self) -> None:
        with self._lock:
            self._items.clear()


# PUBLIC_INTERFACE
@lru_cache
def get_note_repository() -> NoteRepository:
    """Return the process-wide note repository."""
    return InMemoryNoteRepository()


# PUBLIC_INTERFACE
@lru_cache
def get_todo_repository() -> TodoRepository:
    """Return the process-wide todo repository."""
    return InMemoryTodoRepository()
