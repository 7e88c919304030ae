"""Database operations and data persistence."""

from __future__ import annotations

import csv
import json
import logging
import sqlite3
from collections.abc import Callable, Iterable
from pathlib import Path

from moodtrack.constants import ENTRIES_KEY, MOODS_KEY, MOODS_VERSION_KEY
from moodtrack.models import Mood, MoodEntry
from moodtrack.utils import parse_timestamp

LEGACY_KEYS = (ENTRIES_KEY, MOODS_KEY, MOODS_VERSION_KEY)


def apply_sqlite_pragmas(conn: sqlite3.Connection) -> None:
    """Apply recommended PRAGMA tunings to an open SQLite connection.

    This centralizes the WAL and sync/temp_store settings so all code paths
    opening the DB get consistent behavior.
    """
    try:
        conn.execute("PRAGMA journal_mode=WAL;")
        conn.execute("PRAGMA synchronous=NORMAL;")
        conn.execute("PRAGMA temp_store=MEMORY;")
    except sqlite3.DatabaseError:
        logging.exception("Failed to apply SQLite PRAGMA settings.")


def initialize_storage(db_path: Path, legacy_json_path: Path) -> None:
    """Ensure the SQLite key/value store exists and import a legacy JSON dump."""
    db_path.parent.mkdir(parents=True, exist_ok=True)

    try:
        with sqlite3.connect(db_path) as conn:
            apply_sqlite_pragmas(conn)
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv_store (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
                """
            )
    except sqlite3.DatabaseError:
        logging.exception("Failed to initialize mood database at %s", db_path)
        raise

    migrate_legacy_json(legacy_json_path, db_path)


def read_item(db_path: Path, key: str) -> str | None:
    """Return the stored value for ``key``, or None if absent or unreadable."""
    if not db_path.exists():
        return None

    try:
        with sqlite3.connect(db_path) as conn:
            row = conn.execute(
                "SELECT value FROM kv_store WHERE key = ?", (key,)
            ).fetchone()
    except sqlite3.DatabaseError:
        logging.exception("Failed to read %s from SQLite.", key)
        return None

    return None if row is None else str(row[0])


def write_items(db_path: Path, items: dict[str, str]) -> bool:
    """Upsert several keys in one transaction. Failures are logged, not raised."""
    try:
        with sqlite3.connect(db_path) as conn:
            apply_sqlite_pragmas(conn)
            conn.executemany(
                """
                INSERT INTO kv_store (key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value
                """,
                list(items.items()),
            )
    except sqlite3.DatabaseError:
        logging.warning(
            "Failed to persist %s to %s", ", ".join(items), db_path, exc_info=True
        )
        return False
    return True


def write_item(db_path: Path, key: str, value: str) -> bool:
    return write_items(db_path, {key: value})


def migrate_legacy_json(json_path: Path, db_path: Path) -> None:
    """Import a legacy key/value JSON dump into SQLite, preserving the original file."""
    if not json_path.exists() or json_path.stat().st_size == 0:
        return

    try:
        with json_path.open("r", encoding="utf-8") as file:
            data = json.load(file)
    except (OSError, json.JSONDecodeError):
        logging.exception("Failed to read legacy mood JSON from %s", json_path)
        return

    if not isinstance(data, dict):
        logging.warning("Ignoring legacy mood JSON without a top-level object.")
        return

    payload: dict[str, str] = {}
    for key in LEGACY_KEYS:
        if key not in data:
            continue
        value = data[key]
        # Browser storage dumps hold strings; tolerate already-decoded values
        payload[key] = value if isinstance(value, str) else json.dumps(value)

    if not payload:
        return

    if read_item(db_path, ENTRIES_KEY) is not None:
        logging.info("Skipping legacy migration; database already has entries.")
        return

    if write_items(db_path, payload):
        logging.info("Migrated legacy keys %s into SQLite storage.", sorted(payload))


def encode_entries(entries: Iterable[MoodEntry]) -> str:
    """Serialize entries to the persisted JSON array shape."""
    payload = []
    for entry in entries:
        item = {
            "id": entry.id,
            "moodId": entry.mood_id,
            "date": entry.date.isoformat(),
        }
        if entry.note is not None:
            item["note"] = entry.note
        payload.append(item)
    return json.dumps(payload, ensure_ascii=False)


def decode_entries(raw: str | None) -> list[MoodEntry]:
    """Rehydrate persisted entries, skipping any record that fails to decode."""
    if not raw:
        return []

    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        logging.exception("Stored mood entries are not valid JSON; starting empty.")
        return []

    if not isinstance(data, list):
        logging.error("Stored mood entries are not a JSON array; starting empty.")
        return []

    entries: list[MoodEntry] = []
    for item in data:
        try:
            note = item.get("note")
            entries.append(
                MoodEntry(
                    id=str(item["id"]),
                    mood_id=str(item["moodId"]),
                    date=parse_timestamp(item["date"]),
                    note=None if note is None else str(note),
                )
            )
        except (AttributeError, KeyError, TypeError, ValueError):
            logging.exception("Skipping malformed stored entry: %s", item)
            continue
    return entries


def encode_moods(moods: Iterable[Mood]) -> str:
    return json.dumps(
        [
            {
                "id": mood.id,
                "name": mood.name,
                "emoji": mood.symbol,
                "color": mood.color,
                "value": mood.value,
            }
            for mood in moods
        ],
        ensure_ascii=False,
    )


def _mood_value(raw: object) -> int:
    """Accept whole numbers only; 3.0 and "3" pass, 3.7 is malformed."""
    if isinstance(raw, float) and not raw.is_integer():
        raise ValueError(f"Mood value must be a whole number, got {raw}")
    return int(raw)  # type: ignore[call-overload]


def decode_moods(raw: str) -> list[Mood] | None:
    """Decode a stored mood set; None means the record is unusable."""
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        logging.exception("Stored mood definitions are not valid JSON.")
        return None

    if not isinstance(data, list):
        logging.error("Stored mood definitions are not a JSON array.")
        return None

    moods: list[Mood] = []
    for item in data:
        try:
            moods.append(
                Mood(
                    id=str(item["id"]),
                    name=str(item.get("name", "")),
                    symbol=str(item.get("emoji", "")),
                    color=str(item.get("color", "")),
                    value=_mood_value(item.get("value", 0)),
                )
            )
        except (AttributeError, KeyError, TypeError, ValueError):
            logging.exception("Skipping malformed stored mood: %s", item)
            continue
    return moods


def export_entries_to_csv(
    entries: Iterable[MoodEntry], resolve: Callable[[str], Mood], csv_path: Path
) -> int:
    """Write entries with their resolved mood to CSV and return the row count."""
    csv_path.parent.mkdir(parents=True, exist_ok=True)

    row_count = 0
    try:
        with csv_path.open("w", encoding="utf-8", newline="") as handle:
            writer = csv.writer(handle)
            writer.writerow(["id", "date", "mood_id", "mood", "value", "note"])
            for entry in entries:
                mood = resolve(entry.mood_id)
                writer.writerow(
                    [
                        entry.id,
                        entry.date.isoformat(),
                        entry.mood_id,
                        mood.name,
                        mood.value,
                        entry.note or "",
                    ]
                )
                row_count += 1
    except OSError:
        logging.exception("Failed to write mood CSV export to %s", csv_path)
        raise

    return row_count
