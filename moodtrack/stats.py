"""Derived mood statistics: average, most common mood and windowed trend."""

from __future__ import annotations

import math
from collections import Counter
from collections.abc import Callable, Sequence

from moodtrack.constants import RECENT_WINDOW, TREND_THRESHOLD
from moodtrack.models import MoodEntry, MoodStats

Resolver = Callable[[str], int]


def round_one_decimal(value: float) -> float:
    """Round half up to one decimal place (2.25 -> 2.3, unlike ``round``)."""
    return math.floor(value * 10 + 0.5) / 10


def mean_value(entries: Sequence[MoodEntry], resolve_value: Resolver) -> float:
    return sum(resolve_value(entry.mood_id) for entry in entries) / len(entries)


def average_for(
    entries: Sequence[MoodEntry], resolve_value: Resolver
) -> float | None:
    """Rounded mean mood value, or None when there is nothing to average."""
    if not entries:
        return None
    return round_one_decimal(mean_value(entries, resolve_value))


def most_common_mood_id(entries: Sequence[MoodEntry]) -> str | None:
    """The most frequent mood id; ties go to the id seen first."""
    # most_common sorts stably, so equal counts keep insertion order
    ranked = Counter(entry.mood_id for entry in entries).most_common()
    return ranked[0][0] if ranked else None


def mood_trend(entries: Sequence[MoodEntry], resolve_value: Resolver) -> str:
    """Compare the trailing window against the one before it.

    Differences within TREND_THRESHOLD either way count as stable.
    """
    recent = entries[-RECENT_WINDOW:]
    older = entries[-2 * RECENT_WINDOW : -RECENT_WINDOW]
    if not recent or not older:
        return "stable"

    recent_mean = mean_value(recent, resolve_value)
    older_mean = mean_value(older, resolve_value)
    if recent_mean > older_mean + TREND_THRESHOLD:
        return "improving"
    if recent_mean < older_mean - TREND_THRESHOLD:
        return "declining"
    return "stable"


def compute_stats(
    entries: Sequence[MoodEntry],
    resolve_value: Resolver,
    resolve_name: Callable[[str], str],
) -> MoodStats:
    """Recompute every aggregate from scratch for the given entries."""
    if not entries:
        return MoodStats()

    top_id = most_common_mood_id(entries)
    return MoodStats(
        total_entries=len(entries),
        average_mood=round_one_decimal(mean_value(entries, resolve_value)),
        most_common_mood=resolve_name(top_id) if top_id is not None else "",
        mood_trend=mood_trend(entries, resolve_value),
    )
