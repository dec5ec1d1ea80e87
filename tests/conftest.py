"""
Pytest configuration and shared fixtures.
"""

import json
from pathlib import Path
from typing import Any, Dict, List

import pytest

from notescore.logger import reset_logger
from notescore.scoring import NoteInput, ScoreParams


@pytest.fixture(autouse=True)
def fresh_logger():
    """Each test starts without a cached global logger."""
    reset_logger()
    yield
    reset_logger()


@pytest.fixture
def make_params():
    """Build ScoreParams the way a well-behaved caller would."""
    def _make(query: str, tokens=None, enable_fuzzy_matching: bool = True) -> ScoreParams:
        return ScoreParams.from_query(query, tokens=tokens, enable_fuzzy_matching=enable_fuzzy_matching)
    return _make


@pytest.fixture
def make_note():
    def _make(id: str = "n1", title: str = "", path_title: str = "", hidden: bool = False) -> NoteInput:
        return NoteInput(id=id, title=title, path_title=path_title, hidden=hidden)
    return _make


@pytest.fixture
def sample_notes() -> List[Dict[str, Any]]:
    """Notes as they arrive from a JSON export."""
    return [
        {"id": "aB12cD", "title": "Meeting notes", "pathTitle": "Work / Meetings", "hidden": False},
        {"id": "xY98zW", "title": "Grocery list", "path_title": "Home", "hidden": False},
        {"id": "_hidden", "title": "Meeting templates", "pathTitle": "Hidden / Templates", "hidden": True},
    ]


@pytest.fixture
def notes_file(tmp_path, sample_notes) -> Path:
    path = tmp_path / "notes.json"
    path.write_text(json.dumps(sample_notes))
    return path
