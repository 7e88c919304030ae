"""Versioned mood catalog backed by the key/value store."""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterable
from pathlib import Path

from moodtrack.constants import DEFAULT_MOODS, MOODS_KEY, MOODS_VERSION, MOODS_VERSION_KEY
from moodtrack.models import UNKNOWN_MOOD, Mood
from moodtrack.storage import decode_moods, encode_moods, read_item, write_items


def default_moods() -> list[Mood]:
    """Return a fresh copy of the built-in mood set."""
    return [Mood(*fields) for fields in DEFAULT_MOODS]


def _parse_version(raw: str | None) -> int | None:
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        logging.warning("Ignoring non-numeric mood catalog version %r", raw)
        return None


class MoodCatalog:
    """Holds the mood definitions and seeds them when missing or outdated.

    A version bump replaces the whole stored set, so custom moods written
    with ``replace`` do not survive an upgrade. Entries are never touched.
    """

    def __init__(self, db_path: Path) -> None:
        self._db_path = db_path
        self._moods: list[Mood] = []
        self._by_id: dict[str, Mood] = {}

    @property
    def moods(self) -> list[Mood]:
        return list(self._moods)

    def load(self) -> list[Mood]:
        """Load the stored set, seeding defaults on first run or version upgrade."""
        stored_version = _parse_version(read_item(self._db_path, MOODS_VERSION_KEY))
        raw_moods = read_item(self._db_path, MOODS_KEY)

        if raw_moods is None or stored_version is None or stored_version < MOODS_VERSION:
            logging.info(
                "Seeding default mood catalog (stored version %s, current %d)",
                stored_version,
                MOODS_VERSION,
            )
            return self.reset_to_defaults()

        moods = decode_moods(raw_moods)
        if moods is None:
            logging.warning("Stored mood catalog is unreadable; restoring defaults.")
            return self.reset_to_defaults()

        self._set(moods)
        return self.moods

    def reset_to_defaults(self) -> list[Mood]:
        """Unconditionally restore the built-in set and stamp the current version."""
        moods = default_moods()
        self._set(moods)
        write_items(
            self._db_path,
            {MOODS_KEY: encode_moods(moods), MOODS_VERSION_KEY: str(MOODS_VERSION)},
        )
        return self.moods

    def replace(self, moods: Iterable[Mood]) -> None:
        """Overwrite the whole mood set, keeping the current version stamp."""
        self._set(list(moods))
        write_items(self._db_path, {MOODS_KEY: encode_moods(self._moods)})

    def get_by_id(self, mood_id: str) -> Mood | None:
        return self._by_id.get(mood_id)

    def resolve(self, mood_id: str) -> Mood:
        """Return the mood for ``mood_id`` or a placeholder with value 0 and no name.

        Every consumer goes through here so dangling references never break
        aggregation or display.
        """
        mood = self._by_id.get(mood_id)
        if mood is None:
            return dataclasses.replace(UNKNOWN_MOOD, id=mood_id)
        return mood

    def resolve_value(self, mood_id: str) -> int:
        return self.resolve(mood_id).value

    def resolve_name(self, mood_id: str) -> str:
        return self.resolve(mood_id).name

    def _set(self, moods: list[Mood]) -> None:
        self._moods = moods
        by_id: dict[str, Mood] = {}
        for mood in moods:
            # first definition wins, matching a linear search over the list
            by_id.setdefault(mood.id, mood)
        self._by_id = by_id
