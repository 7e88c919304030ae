"""Data models for moods, mood entries and derived statistics."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Mood:
    """A catalog mood category with the numeric value used for aggregation."""

    id: str
    name: str
    symbol: str
    color: str
    value: int


@dataclass(frozen=True)
class MoodEntry:
    """One recorded mood event."""

    id: str
    mood_id: str
    date: datetime
    note: str | None = None


@dataclass(frozen=True)
class MoodStats:
    """Aggregates derived from the current entries; never persisted."""

    total_entries: int = 0
    average_mood: float = 0
    most_common_mood: str = ""
    mood_trend: str = "stable"


# Stand-in for mood ids missing from the catalog
UNKNOWN_MOOD = Mood(id="", name="", symbol="", color="#b3b3b3", value=0)
