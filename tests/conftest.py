"""Pytest configuration and fixtures for questions-ui tests."""

import json
import logging
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from questions_ui.config import Settings
from questions_ui.schemas import Question
from questions_ui.store import SessionStore, get_store
from questions_ui.web import app


@pytest.fixture
def store() -> SessionStore:
    """Fresh, isolated session store."""
    return SessionStore()


@pytest.fixture
def client(store: SessionStore):
    """TestClient whose routes use the isolated store."""
    app.dependency_overrides[get_store] = lambda: store
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def sample_questions() -> list[Question]:
    """One question of every type."""
    return [
        Question(id="name", question="What should the project be called?"),
        Question(
            id="db",
            question="Which database?",
            type="select",
            options=["postgres", "sqlite"],
            allowCustom=True,
        ),
        Question(
            id="targets",
            question="Which platforms?",
            type="multiselect",
            options=["linux", "macos", "windows"],
            required=False,
        ),
        Question(id="ship_it", question="Ship it today?", type="boolean"),
    ]


@pytest.fixture
def fast_settings() -> Settings:
    """Settings with a short poll interval and no browser."""
    return Settings(timeout_ms=5000, no_open=True, poll_interval=0.05)


@pytest.fixture
def questions_file(tmp_path: Path) -> Path:
    """A questions file in the tool-input shape."""
    path = tmp_path / "questions.json"
    path.write_text(json.dumps({
        "title": "Project Clarifications",
        "questions": [
            {"id": "q1", "question": "Anything else?"},
        ],
    }))
    return path


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Entry points reconfigure the root logger; put it back after each test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
