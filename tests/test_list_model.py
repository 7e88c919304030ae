"""Tests for MoodEntryListModel."""

from __future__ import annotations

from datetime import datetime, timezone

from PySide6.QtCore import QModelIndex, Qt

from moodtrack.catalog import default_moods
from moodtrack.models import UNKNOWN_MOOD, MoodEntry
from moodtrack.ui import MoodEntryListModel

MOODS = {mood.id: mood for mood in default_moods()}
WHEN = datetime(2025, 11, 11, 10, 0, tzinfo=timezone.utc)


def resolve(mood_id: str):
    return MOODS.get(mood_id, UNKNOWN_MOOD)


def make_entry(entry_id: str, mood_id: str = "5", note: str | None = None):
    return MoodEntry(id=entry_id, mood_id=mood_id, date=WHEN, note=note)


class TestMoodEntryListModel:
    """Behavior of the history list model."""

    def test_empty_model(self):
        model = MoodEntryListModel(resolve)
        assert model.rowCount() == 0
        assert model.data(QModelIndex()) is None

    def test_display_role(self):
        model = MoodEntryListModel(resolve)
        model.set_entries([make_entry("a", "5", "sunny walk")])

        text = model.data(model.index(0, 0), Qt.ItemDataRole.DisplayRole)

        assert "Joyful" in text
        assert "😄" in text
        assert "sunny walk" in text

    def test_unknown_mood_display(self):
        model = MoodEntryListModel(resolve)
        model.set_entries([make_entry("a", "gone")])

        text = model.data(model.index(0, 0), Qt.ItemDataRole.DisplayRole)

        assert "Unknown mood" in text

    def test_user_role_returns_entry(self):
        model = MoodEntryListModel(resolve)
        entry = make_entry("a")
        model.set_entries([entry])

        assert model.data(model.index(0, 0), Qt.ItemDataRole.UserRole) == entry

    def test_get_entry_and_invalid_index(self):
        model = MoodEntryListModel(resolve)
        model.set_entries([make_entry("a"), make_entry("b")])

        assert model.get_entry(model.index(1, 0)).id == "b"
        assert model.get_entry(QModelIndex()) is None
        assert model.get_entry(model.index(999, 0)) is None

    def test_long_note_truncation(self):
        model = MoodEntryListModel(resolve)
        model.set_entries([make_entry("a", note="a" * 100)])

        text = model.data(model.index(0, 0), Qt.ItemDataRole.DisplayRole)

        assert "…" in text

    def test_clear(self):
        model = MoodEntryListModel(resolve)
        model.set_entries([make_entry("a")])
        model.clear()
        assert model.rowCount() == 0
