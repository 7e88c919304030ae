"""Mood entry store: the single owner of entries and the mood catalog.

Every mutation updates the in-memory list first, then writes a full snapshot
to SQLite. A failed write is logged and the in-memory state stays
authoritative until the next successful write. Observers subscribe to
``entries_changed`` / ``moods_changed``; both are emitted synchronously after
the change is committed, so reads made from a slot already see it.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable
from datetime import datetime, timedelta
from pathlib import Path

from PySide6.QtCore import QObject, Signal

from moodtrack.catalog import MoodCatalog
from moodtrack.constants import ENTRIES_KEY, PERIOD_DAYS, RECENT_WINDOW
from moodtrack.models import Mood, MoodEntry, MoodStats
from moodtrack.stats import average_for, compute_stats
from moodtrack.storage import (
    decode_entries,
    encode_entries,
    export_entries_to_csv,
    read_item,
    write_item,
)
from moodtrack.utils import ensure_aware, generate_entry_id, parse_timestamp

UPDATABLE_FIELDS = frozenset({"mood_id", "date", "note"})


class MoodStore(QObject):
    """Process-wide mood store, loaded once at construction."""

    entries_changed = Signal()
    moods_changed = Signal()

    def __init__(
        self,
        db_path: Path,
        id_factory: Callable[[], str] = generate_entry_id,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._db_path = db_path
        self._id_factory = id_factory
        self.catalog = MoodCatalog(db_path)
        self.catalog.load()
        self._entries: list[MoodEntry] = decode_entries(
            read_item(db_path, ENTRIES_KEY)
        )
        logging.info(
            "Loaded %d mood entries and %d moods from %s",
            len(self._entries),
            len(self.catalog.moods),
            db_path,
        )

    # ---- read projections ----
    def entries(self) -> list[MoodEntry]:
        return list(self._entries)

    def available_moods(self) -> list[Mood]:
        return self.catalog.moods

    def max_mood_value(self) -> int:
        """Top of the current mood scale, 0 for an empty catalog."""
        return max((mood.value for mood in self.catalog.moods), default=0)

    def stats(self) -> MoodStats:
        return self.compute_stats()

    def recent_entries(self) -> list[MoodEntry]:
        """The last seven entries, most recent first."""
        return list(reversed(self._entries[-RECENT_WINDOW:]))

    def get_mood_by_id(self, mood_id: str) -> Mood | None:
        return self.catalog.get_by_id(mood_id)

    def resolve_mood(self, mood_id: str) -> Mood:
        return self.catalog.resolve(mood_id)

    def entries_in_range(self, start: datetime, end: datetime) -> list[MoodEntry]:
        """Entries dated within ``[start, end]``, in insertion order."""
        start, end = ensure_aware(start), ensure_aware(end)
        return [entry for entry in self._entries if start <= entry.date <= end]

    def entries_for_period(
        self, period: str, now: datetime | None = None
    ) -> list[MoodEntry]:
        """Filter by one of ``all``, ``today``, ``week`` or ``month``.

        Unknown periods fall back to all entries.
        """
        now = ensure_aware(now or datetime.now()).astimezone()
        if period == "today":
            today = now.date()
            return [
                entry
                for entry in self._entries
                if entry.date.astimezone().date() == today
            ]
        if period in PERIOD_DAYS:
            cutoff = now - timedelta(days=PERIOD_DAYS[period])
            return [entry for entry in self._entries if entry.date >= cutoff]
        return self.entries()

    def average_for(self, entries: list[MoodEntry]) -> float | None:
        return average_for(entries, self.catalog.resolve_value)

    def compute_stats(self) -> MoodStats:
        return compute_stats(
            self._entries, self.catalog.resolve_value, self.catalog.resolve_name
        )

    # ---- mutations ----
    def add_entry(self, mood_id: str, note: str | None = None) -> MoodEntry:
        """Append a new entry stamped with the current local time."""
        entry = MoodEntry(
            id=self._id_factory(),
            mood_id=mood_id,
            date=datetime.now().astimezone(),
            note=note,
        )
        self._entries.append(entry)
        self._commit_entries()
        return entry

    def update_entry(self, entry_id: str, **fields: object) -> None:
        """Merge ``fields`` into the matching entry; unknown ids are ignored."""
        changes = {k: v for k, v in fields.items() if k in UPDATABLE_FIELDS}
        ignored = set(fields) - UPDATABLE_FIELDS
        if ignored:
            logging.warning("Ignoring non-updatable entry fields: %s", sorted(ignored))
        if "date" in changes:
            try:
                changes["date"] = parse_timestamp(changes["date"])
            except (TypeError, ValueError):
                logging.warning("Ignoring unparseable entry date %r", changes["date"])
                del changes["date"]

        self._entries = [
            dataclasses.replace(entry, **changes) if entry.id == entry_id else entry
            for entry in self._entries
        ]
        self._commit_entries()

    def delete_entry(self, entry_id: str) -> None:
        self._entries = [entry for entry in self._entries if entry.id != entry_id]
        self._commit_entries()

    def delete_all_entries(self) -> None:
        self._entries = []
        self._commit_entries()

    def reset_mood_definitions(self) -> None:
        """Restore the built-in moods; entries keep their (possibly dangling) ids."""
        self.catalog.reset_to_defaults()
        self.moods_changed.emit()

    def replace_moods(self, moods: list[Mood]) -> None:
        self.catalog.replace(moods)
        self.moods_changed.emit()

    def export_csv(self, csv_path: Path) -> int:
        return export_entries_to_csv(self._entries, self.catalog.resolve, csv_path)

    def _commit_entries(self) -> None:
        write_item(self._db_path, ENTRIES_KEY, encode_entries(self._entries))
        self.entries_changed.emit()
