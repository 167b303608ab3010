from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ..repositories import NoteListQuery, NoteRepository, get_note_repository
from ..schemas import (
    ErrorResponse,
    NoteCreate,
    NoteDeleteResponse,
    NoteListResponse,
    NoteResponse,
    NoteUpdate,
)
from ..utils import note_list_meta, parse_query_bool

router = APIRouter(
    prefix="/api/notes",
    tags=["notes"],
)

NOTE_NOT_FOUND = "Note not found"


def _get_repo(repo: NoteRepository = Depends(get_note_repository)) -> NoteRepository:
    """
    Dependency wrapper for repository to keep signatures clean.
    """
    return repo


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=NoteListResponse,
    summary="List Notes",
    description=(
        "List notes with optional filters.\n\n"
        "Query parameters:\n"
        "- tag: only notes carrying this tag\n"
        "- pinned: filter by pinned flag\n"
        "- search: case-insensitive text searched in title and content\n\n"
        "Pinned notes come first, then the most recently updated."
    ),
    responses={400: {"model": ErrorResponse, "description": "Invalid query parameters"}},
)
def list_notes(
    tag: Optional[str] = Query(None, description="Exact tag to match"),
    pinned: Optional[str] = Query(None, description="Filter by pinned flag (true or false)"),
    search: Optional[str] = Query(None, description="Search text for title/content"),
    repo: NoteRepository = Depends(_get_repo),
) -> NoteListResponse:
    """
    List notes with filters.
    """
    query = NoteListQuery(tag=tag or None, pinned=parse_query_bool("pinned", pinned), search=search or None)
    items = repo.list(query)
    return NoteListResponse(data=items, meta=note_list_meta(items))


# PUBLIC_INTERFACE
@router.get(
    "/{note_id}",
    response_model=NoteResponse,
    summary="Get Note",
    responses={404: {"model": ErrorResponse, "description": "Note not found"}},
)
def get_note(note_id: str, repo: NoteRepository = Depends(_get_repo)) -> NoteResponse:
    """
    Retrieve a single note by its ID.
    """
    item = repo.get(note_id)
    if item is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOTE_NOT_FOUND)
    return NoteResponse(data=item)


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=NoteResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Note",
    responses={400: {"model": ErrorResponse, "description": "Validation error"}},
)
def create_note(payload: NoteCreate, repo: NoteRepository = Depends(_get_repo)) -> NoteResponse:
    """
    Create a new note.
    """
    return NoteResponse(data=repo.create(payload))


# PUBLIC_INTERFACE
@router.put(
    "/{note_id}",
    response_model=NoteResponse,
    summary="Update Note",
    description="Partially update a note; fields omitted from the body are left untouched.",
    responses={
        400: {"model": ErrorResponse, "description": "Validation error"},
        404: {"model": ErrorResponse, "description": "Note not found"},
    },
)
def update_note(
    note_id: str,
    payload: Optional[NoteUpdate] = None,
    repo: NoteRepository = Depends(_get_repo),
) -> NoteResponse:
    """
    Merge the provided fields into a note and refresh its updatedAt.
    """
    updated = repo.update(note_id, payload or NoteUpdate())
    if updated is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOTE_NOT_FOUND)
    return NoteResponse(data=updated)


# PUBLIC_INTERFACE
@router.delete(
    "/{note_id}",
    response_model=NoteDeleteResponse,
    summary="Delete Note",
    responses={404: {"model": ErrorResponse, "description": "Note not found"}},
)
def delete_note(note_id: str, repo: NoteRepository = Depends(_get_repo)) -> NoteDeleteResponse:
    """
    Delete a note and return it.
    """
    deleted = repo.delete(note_id)
    if deleted is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOTE_NOT_FOUND)
    return NoteDeleteResponse(data=deleted)
