"""Test configuration for the Life Notes API."""

import pytest

from life_notes.main import app
from life_notes.repositories import get_note_repository, get_todo_repository


@pytest.fixture(autouse=True)
def reset_repositories():
    """Start each test from empty collections."""
    get_note_repository().clear()
    get_todo_repository().clear()
    yield
    get_note_repository().clear()
    get_todo_repository().clear()
    app.dependency_overrides.clear()
