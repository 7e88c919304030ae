"""Shared fixtures for mood tracker tests."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from moodtrack.storage import initialize_storage


@pytest.fixture(scope="session")
def qapp():
    """One QApplication for widget tests, rendered offscreen."""
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
    from PySide6.QtWidgets import QApplication

    return QApplication.instance() or QApplication([])


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    """An initialized, empty mood database in a temporary directory."""
    path = tmp_path / "moods.sqlite3"
    initialize_storage(path, tmp_path / "legacy.json")
    return path
