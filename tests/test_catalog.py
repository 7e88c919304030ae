"""Tests for the versioned mood catalog."""

from __future__ import annotations

import json

from moodtrack.catalog import MoodCatalog, default_moods
from moodtrack.constants import MOODS_KEY, MOODS_VERSION, MOODS_VERSION_KEY
from moodtrack.models import Mood
from moodtrack.storage import read_item, write_items

CUSTOM_MOODS = json.dumps(
    [{"id": "custom", "name": "Meh", "emoji": "😐", "color": "#000000", "value": 3}]
)


def test_load_seeds_defaults_when_empty(db_path):
    """Without stored moods, load() writes the default set and version."""
    moods = MoodCatalog(db_path).load()

    assert moods == default_moods()
    assert len(moods) == 5
    assert [mood.value for mood in moods] == [1, 2, 3, 4, 5]
    assert read_item(db_path, MOODS_VERSION_KEY) == str(MOODS_VERSION)
    stored = json.loads(read_item(db_path, MOODS_KEY))
    assert [item["id"] for item in stored] == ["1", "2", "3", "4", "5"]


def test_outdated_version_replaces_custom_moods(db_path):
    write_items(db_path, {MOODS_KEY: CUSTOM_MOODS, MOODS_VERSION_KEY: "1"})

    catalog = MoodCatalog(db_path)
    moods = catalog.load()

    assert moods == default_moods()
    assert catalog.get_by_id("custom") is None
    assert read_item(db_path, MOODS_VERSION_KEY) == str(MOODS_VERSION)


def test_current_version_keeps_custom_moods(db_path):
    write_items(
        db_path, {MOODS_KEY: CUSTOM_MOODS, MOODS_VERSION_KEY: str(MOODS_VERSION)}
    )

    catalog = MoodCatalog(db_path)
    moods = catalog.load()

    assert moods == [Mood("custom", "Meh", "😐", "#000000", 3)]
    assert catalog.get_by_id("custom").value == 3


def test_garbage_version_reseeds(db_path):
    write_items(db_path, {MOODS_KEY: CUSTOM_MOODS, MOODS_VERSION_KEY: "abc"})

    assert MoodCatalog(db_path).load() == default_moods()


def test_missing_version_reseeds(db_path):
    write_items(db_path, {MOODS_KEY: CUSTOM_MOODS})

    assert MoodCatalog(db_path).load() == default_moods()


def test_corrupt_moods_fall_back_to_defaults(db_path):
    write_items(
        db_path, {MOODS_KEY: "{not json", MOODS_VERSION_KEY: str(MOODS_VERSION)}
    )

    assert MoodCatalog(db_path).load() == default_moods()
    assert json.loads(read_item(db_path, MOODS_KEY))[0]["id"] == "1"


def test_reset_to_defaults_discards_custom_set(db_path):
    catalog = MoodCatalog(db_path)
    catalog.load()
    catalog.replace([Mood("custom", "Meh", "😐", "#000000", 3)])
    assert catalog.get_by_id("custom") is not None

    moods = catalog.reset_to_defaults()

    assert moods == default_moods()
    assert catalog.get_by_id("custom") is None
    assert MoodCatalog(db_path).load() == default_moods()


def test_resolve_unknown_mood_is_neutral(db_path):
    catalog = MoodCatalog(db_path)
    catalog.load()

    assert catalog.resolve_value("missing") == 0
    assert catalog.resolve_name("missing") == ""
    assert catalog.resolve("missing").id == "missing"
    assert catalog.resolve_value("5") == 5
    assert catalog.resolve_name("5") == "Joyful"


def test_unreadable_database_still_yields_defaults(tmp_path):
    """A database file that was never initialized must not crash the catalog."""
    catalog = MoodCatalog(tmp_path / "missing.sqlite3")

    assert catalog.load() == default_moods()
