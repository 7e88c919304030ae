"""Tests for MoodDashboard wiring against a real store."""

from __future__ import annotations

import itertools

import pytest

from moodtrack.models import Mood
from moodtrack.store import MoodStore
from moodtrack.ui import MoodDashboard


@pytest.fixture
def store(db_path):
    counter = itertools.count(1)
    return MoodStore(db_path, id_factory=lambda: f"entry-{next(counter)}")


@pytest.fixture
def dashboard(qapp, store, monkeypatch):
    window = MoodDashboard(store)
    monkeypatch.setattr(window, "_confirm", lambda *args: True)
    yield window
    window.deleteLater()


def select_entry(dashboard, entry_id):
    model = dashboard.history_list_model
    dashboard.history_list.setCurrentIndex(model.index(model.row_for_id(entry_id), 0))


def test_recent_list_shows_last_seven_newest_first(dashboard, store):
    for _ in range(9):
        store.add_entry("3")

    model = dashboard.recent_list_model
    assert model.rowCount() == 7
    assert [model.get_entry(model.index(row, 0)).id for row in range(7)] == [
        f"entry-{i}" for i in range(9, 2, -1)
    ]


class TestEditEntry:
    """The inline editor changes mood and note through the store."""

    def test_edit_and_save(self, dashboard, store):
        store.add_entry("1", "old note")
        entry = store.add_entry("2", "keep me")
        select_entry(dashboard, "entry-1")

        dashboard.edit_selected_entry()
        assert not dashboard.edit_panel.isHidden()
        assert dashboard.edit_mood_selector.currentData() == "1"
        assert dashboard.edit_note_input.text() == "old note"

        dashboard.edit_mood_selector.setCurrentIndex(
            dashboard.edit_mood_selector.findData("4")
        )
        dashboard.edit_note_input.setText("  better now ")
        dashboard.save_edit()

        edited, untouched = store.entries()
        assert edited.mood_id == "4"
        assert edited.note == "better now"
        assert untouched == entry
        assert dashboard.edit_panel.isHidden()

    def test_blank_note_is_cleared(self, dashboard, store):
        store.add_entry("1", "old note")
        select_entry(dashboard, "entry-1")

        dashboard.edit_selected_entry()
        dashboard.edit_note_input.setText("   ")
        dashboard.save_edit()

        assert store.entries()[0].note is None

    def test_declined_confirmation_keeps_entry(self, dashboard, store, monkeypatch):
        original = store.add_entry("1", "old note")
        select_entry(dashboard, "entry-1")
        monkeypatch.setattr(dashboard, "_confirm", lambda *args: False)

        dashboard.edit_selected_entry()
        dashboard.edit_note_input.setText("changed")
        dashboard.save_edit()

        assert store.entries() == [original]
        assert not dashboard.edit_panel.isHidden()

    def test_cancel_edit(self, dashboard, store):
        original = store.add_entry("1", "old note")
        select_entry(dashboard, "entry-1")

        dashboard.edit_selected_entry()
        dashboard.cancel_edit()
        dashboard.save_edit()

        assert store.entries() == [original]
        assert dashboard.edit_panel.isHidden()


def test_selection_survives_refresh(dashboard, store):
    for mood_id in "123":
        store.add_entry(mood_id)
    select_entry(dashboard, "entry-1")

    store.add_entry("5")
    store.update_entry("entry-2", note="touched")

    assert dashboard.selected_entry().id == "entry-1"


def test_deleted_selection_falls_back_to_newest(dashboard, store):
    for mood_id in "123":
        store.add_entry(mood_id)
    select_entry(dashboard, "entry-1")

    store.delete_entry("entry-1")

    assert dashboard.selected_entry().id == "entry-3"


def test_mood_buttons_use_catalog_scale(dashboard, store):
    store.replace_moods(
        [Mood("low", "Low", "🙁", "#000000", 2), Mood("top", "Top", "🤩", "#ffffff", 10)]
    )

    row = dashboard.mood_button_row
    tooltips = [row.itemAt(i).widget().toolTip() for i in range(row.count())]
    assert tooltips == ["Record 'Low' (2/10)", "Record 'Top' (10/10)"]
