from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from fastapi import HTTPException, status

from .models import TODO_TYPES, NoteEntity, TodoEntity
from .schemas import parse_timestamp


# PUBLIC_INTERFACE
def note_list_meta(items: Sequence[NoteEntity]) -> Dict[str, Any]:
    """Build the meta block for the notes list endpoint."""
    return {"total": len(items)}


# PUBLIC_INTERFACE
def todo_list_meta(items: Sequence[TodoEntity]) -> Dict[str, Any]:
    """
    Build the meta block for the todos list endpoint.

    Args:
        items: The filtered todos being returned.

    Returns:
        Dict with keys: total, by_type (every todo type, zero when absent),
        completed, pending.
    """
    by_type = {t: 0 for t in TODO_TYPES}
    completed = 0
    for todo in items:
        by_type[todo["type"]] += 1
        if todo["is_completed"]:
            completed += 1
    return {
        "total": len(items),
        "by_type": by_type,
        "completed": completed,
        "pending": len(items) - completed,
    }


# PUBLIC_INTERFACE
def parse_query_datetime(name: str, raw: Optional[str]) -> Optional[datetime]:
    """
    Parse a timestamp query parameter.

    Returns None when the parameter is absent or blank.

    Raises:
        HTTPException(400) naming the parameter when the value is not an
        ISO8601 date or datetime.
    """
    if raw is None or not raw.strip():
        return None
    try:
        return parse_timestamp(raw)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid {name}: expected an ISO8601 date or datetime",
        ) from None


_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _invalid_query(name: str, expected: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=f"Invalid {name}: expected {expected}",
    )


# PUBLIC_INTERFACE
def parse_query_bool(name: str, raw: Optional[str]) -> Optional[bool]:
    """
    Parse a boolean query parameter (true/false, 1/0, yes/no, on/off).

    Returns None when the parameter is absent or blank.

    Raises:
        HTTPException(400) naming the parameter for any other value.
    """
    if raw is None or not raw.strip():
        return None
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise _invalid_query(name, "true or false")


# PUBLIC_INTERFACE
def parse_query_choice(name: str, raw: Optional[str], choices: Sequence[str]) -> Optional[str]:
    """
    Parse a query parameter restricted to a fixed set of values.

    Returns None when the parameter is absent or blank.

    Raises:
        HTTPException(400) naming the parameter and listing the choices.
    """
    if raw is None or not raw.strip():
        return None
    value = raw.strip()
    if value not in choices:
        raise _invalid_query(name, "one of " + ", ".join(choices))
    return value
