"""Utility functions for ids, timestamps, and HTML rendering."""

from __future__ import annotations

import itertools
import random
import time
import uuid
from datetime import datetime

from moodtrack.constants import (
    ENTRY_DETAIL_TEMPLATE,
    STATS_SUMMARY_TEMPLATE,
    TREND_LABELS,
)
from moodtrack.models import Mood, MoodEntry, MoodStats

_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"
_fallback_counter = itertools.count()


def _to_base36(number: int) -> str:
    if number == 0:
        return "0"
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(_BASE36_DIGITS[remainder])
    return "".join(reversed(digits))


def fallback_entry_id() -> str:
    """Timestamp-plus-random id for platforms without an OS randomness source.

    The per-process counter keeps ids distinct even when the clock and the
    random suffix collide within one session.
    """
    time_part = _to_base36(time.time_ns() // 1_000_000)
    random_part = _to_base36(random.getrandbits(52))
    return f"{time_part}-{random_part}{_to_base36(next(_fallback_counter))}"


def generate_entry_id() -> str:
    """Return a random UUID, or a fallback id when os.urandom is unavailable."""
    try:
        return str(uuid.uuid4())
    except NotImplementedError:
        return fallback_entry_id()


def parse_timestamp(raw: object) -> datetime:
    """Parse a stored ISO-8601 timestamp into an aware datetime.

    Accepts the ``Z`` suffix written by browsers; naive values are taken as
    local time.
    """
    if isinstance(raw, datetime):
        return ensure_aware(raw)
    if not isinstance(raw, str):
        raise TypeError(f"Timestamp must be a string, got {type(raw).__name__}")
    text = raw.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    return ensure_aware(datetime.fromisoformat(text))


def ensure_aware(moment: datetime) -> datetime:
    """Attach the local timezone to naive datetimes so comparisons never mix kinds."""
    if moment.tzinfo is None:
        return moment.astimezone()
    return moment


def format_timestamp_display(moment: datetime | None) -> str:
    """Render timestamps into a compact, reader-friendly local-time string."""
    if moment is None:
        return "Unknown time"
    return ensure_aware(moment).astimezone().strftime("%Y-%m-%d %H:%M")


def review_theme_colors(dark_mode: bool) -> dict[str, str]:
    """Choose review pane colors based on the current palette."""
    if dark_mode:
        return {
            "text": "#dfe6e9",
            "secondary": "#a4b0be",
            "divider": "#3a3f44",
        }
    return {
        "text": "#2d3436",
        "secondary": "#636e72",
        "divider": "#dfe6e9",
    }


def render_stats_html(
    stats: MoodStats, max_value: int, dark_mode: bool = False
) -> str:
    """Render the statistics panel via the Jinja2 template."""
    return STATS_SUMMARY_TEMPLATE.render(
        colors=review_theme_colors(dark_mode),
        stats=stats,
        max_value=max_value,
        trend_label=TREND_LABELS.get(stats.mood_trend, stats.mood_trend),
    )


def render_entry_detail_html(
    entry: MoodEntry, mood: Mood, dark_mode: bool = False
) -> str:
    """Render one entry with its already-resolved mood."""
    note = entry.note or ""
    return ENTRY_DETAIL_TEMPLATE.render(
        colors=review_theme_colors(dark_mode),
        timestamp_display=format_timestamp_display(entry.date),
        mood_symbol=mood.symbol,
        mood_name=mood.name or "Unknown mood",
        mood_color=mood.color,
        note_lines=note.splitlines(),
        has_note=bool(note.strip()),
        empty_note_notice="(no note)",
    )
