from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ..models import PRIORITY_RANK, TODO_TYPE_CATALOG, TODO_TYPES
from ..repositories import TodoListQuery, TodoRepository, TypeFieldMismatchError, get_todo_repository
from ..schemas import (
    ErrorResponse,
    TodoCreate,
    TodoDeleteResponse,
    TodoListResponse,
    TodoResponse,
    TodoTypeListResponse,
    TodoUpdate,
)
from ..utils import parse_query_bool, parse_query_choice, parse_query_datetime, todo_list_meta

PRIORITIES = list(PRIORITY_RANK)

router = APIRouter(
    prefix="/api/todos",
    tags=["todos"],
)

TODO_NOT_FOUND = "Todo not found"


def _get_repo(repo: TodoRepository = Depends(get_todo_repository)) -> TodoRepository:
    """
    Dependency wrapper for repository to keep signatures clean.
    """
    return repo


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=TODO_NOT_FOUND)


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=TodoListResponse,
    summary="List Todos",
    description=(
        "List todos with optional filters, all combined with AND.\n\n"
        "Query parameters:\n"
        "- type: one of the 7 todo types\n"
        "- priority: low, medium, high or urgent\n"
        "- completed: filter by completion status\n"
        "- tag: only todos carrying this tag\n"
        "- search: case-insensitive text searched in title and description\n"
        "- dueBefore / dueAfter: inclusive due date bounds; undated todos are excluded\n\n"
        "Incomplete todos come first, then by priority (urgent first), then by due date "
        "with undated todos last. The meta block counts the returned todos."
    ),
    responses={400: {"model": ErrorResponse, "description": "Invalid query parameters"}},
)
def list_todos(
    type: Optional[str] = Query(None, description="Filter by todo type"),
    priority: Optional[str] = Query(None, description="Filter by priority"),
    completed: Optional[str] = Query(None, description="Filter by completion status (true or false)"),
    tag: Optional[str] = Query(None, description="Exact tag to match"),
    search: Optional[str] = Query(None, description="Search text for title/description"),
    due_before: Optional[str] = Query(None, alias="dueBefore", description="Latest due date (inclusive)"),
    due_after: Optional[str] = Query(None, alias="dueAfter", description="Earliest due date (inclusive)"),
    repo: TodoRepository = Depends(_get_repo),
) -> TodoListResponse:
    """
    List todos with filters and the per-type summary.
    """
    query = TodoListQuery(
        type=parse_query_choice("type", type, TODO_TYPES),
        priority=parse_query_choice("priority", priority, PRIORITIES),
        completed=parse_query_bool("completed", completed),
        tag=tag or None,
        search=search or None,
        due_before=parse_query_datetime("dueBefore", due_before),
        due_after=parse_query_datetime("dueAfter", due_after),
    )
    items = repo.list(query)
    return TodoListResponse(data=items, meta=todo_list_meta(items))


# PUBLIC_INTERFACE
@router.get(
    "/types",
    response_model=TodoTypeListResponse,
    summary="List Todo Types",
    description="Return the fixed catalog of todo types with label, icon and description.",
)
def list_todo_types() -> TodoTypeListResponse:
    """
    Static catalog; never touches storage.
    """
    return TodoTypeListResponse(data=TODO_TYPE_CATALOG)


# PUBLIC_INTERFACE
@router.get(
    "/{todo_id}",
    response_model=TodoResponse,
    summary="Get Todo",
    responses={404: {"model": ErrorResponse, "description": "Todo not found"}},
)
def get_todo(todo_id: str, repo: TodoRepository = Depends(_get_repo)) -> TodoResponse:
    """
    Retrieve a single todo by its ID.
    """
    item = repo.get(todo_id)
    if item is None:
        raise _not_found()
    return TodoResponse(data=item)


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=TodoResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Todo",
    description=(
        "Create a todo. The type defaults to task and the priority to medium. "
        "Only the attribute belonging to the resolved type is stored: habitFrequency "
        "(habit, default daily), reminderTime (reminder), url (bookmark), quantity "
        "(shopping, default 1)."
    ),
    responses={400: {"model": ErrorResponse, "description": "Validation error"}},
)
def create_todo(payload: TodoCreate, repo: TodoRepository = Depends(_get_repo)) -> TodoResponse:
    """
    Create a new todo.
    """
    return TodoResponse(data=repo.create(payload))


# PUBLIC_INTERFACE
@router.put(
    "/{todo_id}",
    response_model=TodoResponse,
    summary="Update Todo",
    description=(
        "Partially update a todo. Setting isCompleted to true on a pending todo stamps "
        "completedAt; setting it to false clears completedAt."
    ),
    responses={
        400: {"model": ErrorResponse, "description": "Validation error"},
        404: {"model": ErrorResponse, "description": "Todo not found"},
    },
)
def update_todo(
    todo_id: str,
    payload: Optional[TodoUpdate] = None,
    repo: TodoRepository = Depends(_get_repo),
) -> TodoResponse:
    """
    Merge the provided fields into a todo.
    """
    try:
        updated = repo.update(todo_id, payload or TodoUpdate())
    except TypeFieldMismatchError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    if updated is None:
        raise _not_found()
    return TodoResponse(data=updated)


# PUBLIC_INTERFACE
@router.patch(
    "/{todo_id}/complete",
    response_model=TodoResponse,
    summary="Toggle Todo Completion",
    responses={404: {"model": ErrorResponse, "description": "Todo not found"}},
)
def toggle_todo(todo_id: str, repo: TodoRepository = Depends(_get_repo)) -> TodoResponse:
    """
    Flip isCompleted and stamp or clear completedAt accordingly.
    """
    updated = repo.toggle(todo_id)
    if updated is None:
        raise _not_found()
    return TodoResponse(data=updated)


# PUBLIC_INTERFACE
@router.delete(
    "/{todo_id}",
    response_model=TodoDeleteResponse,
    summary="Delete Todo",
    responses={404: {"model": ErrorResponse, "description": "Todo not found"}},
)
def delete_todo(todo_id: str, repo: TodoRepository = Depends(_get_repo)) -> TodoDeleteResponse:
    """
    Delete a todo and return it.
    """
    deleted = repo.delete(todo_id)
    if deleted is None:
        raise _not_found()
    return TodoDeleteResponse(data=deleted)
