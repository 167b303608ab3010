from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, TypedDict


class TodoType(str, Enum):
    """The 7 fixed todo classifications."""

    TASK = "task"
    GOAL = "goal"
    HABIT = "habit"
    REMINDER = "reminder"
    SHOPPING = "shopping"
    IDEA = "idea"
    BOOKMARK = "bookmark"


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class HabitFrequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


TODO_TYPES: List[str] = [t.value for t in TodoType]

# Lower rank sorts first.
PRIORITY_RANK: Dict[str, int] = {
    Priority.URGENT.value: 0,
    Priority.HIGH.value: 1,
    Priority.MEDIUM.value: 2,
    Priority.LOW.value: 3,
}

# Type-specific attribute carried by each todo type, if any.
TYPE_SPECIFIC_FIELDS: Dict[str, str] = {
    TodoType.HABIT.value: "habit_frequency",
    TodoType.REMINDER.value: "reminder_time",
    TodoType.BOOKMARK.value: "url",
    TodoType.SHOPPING.value: "quantity",
}

TODO_TYPE_CATALOG: List[Dict[str, str]] = [
    {"type": "task", "label": "Task", "icon": "✅", "description": "General tasks to complete"},
    {"type": "goal", "label": "Goal", "icon": "🎯", "description": "Long-term goals to achieve"},
    {"type": "habit", "label": "Habit", "icon": "🔄", "description": "Daily/weekly habits to track"},
    {"type": "reminder", "label": "Reminder", "icon": "⏰", "description": "Time-based reminders"},
    {"type": "shopping", "label": "Shopping", "icon": "🛒", "description": "Shopping list items"},
    {"type": "idea", "label": "Idea", "icon": "💡", "description": "Ideas to explore later"},
    {"type": "bookmark", "label": "Bookmark", "icon": "🔖", "description": "Links and resources"},
]


# PUBLIC_INTERFACE
class NoteEntity(TypedDict):
    """
    Stored representation of a note.

    Fields:
    - id: uuid4 string
    - title: non-empty title
    - content: free text, empty by default
    - tags: ordered list of tags
    - is_pinned: pinned notes list first
    - created_at / updated_at: aware UTC datetimes
    """

    id: str
    title: str
    content: str
    tags: List[str]
    is_pinned: bool
    created_at: datetime
    updated_at: datetime


class _TodoBase(TypedDict):
    id: str
    type: str
    title: str
    description: str
    priority: str
    is_completed: bool
    due_date: Optional[datetime]
    tags: List[str]
    completed_at: Optional[datetime]
    created_at: datetime
    updated_at: datetime


# PUBLIC_INTERFACE
class TodoEntity(_TodoBase, total=False):
    """
    Stored representation of a todo.

    The type-specific keys are only present on todos of the matching type:
    habit_frequency (habit), reminder_time (reminder), url (bookmark) and
    quantity (shopping).
    """

    habit_frequency: str
    reminder_time: Optional[str]
    url: Optional[str]
    quantity: int
