"""Configuration constants and templates for the application."""

from __future__ import annotations

import logging
from pathlib import Path
from textwrap import dedent

from jinja2 import DictLoader, Environment, select_autoescape

# Database and file paths
DATABASE_PATH = Path("moods.sqlite3")
LEGACY_JSON_PATH = Path("moods.json")

# Persisted record keys
ENTRIES_KEY = "mood-entries"
MOODS_KEY = "mood-definitions"
MOODS_VERSION_KEY = "mood-definitions-version"

# Bump whenever DEFAULT_MOODS changes; stored catalogs older than this are replaced
MOODS_VERSION = 2

# Built-in catalog as (id, name, symbol, color, value)
DEFAULT_MOODS = [
    ("1", "Sad", "😢", "#32aff3", 1),
    ("2", "Angry", "😠", "#ff1d34", 2),
    ("3", "Scared", "😨", "#b3b3b3", 3),
    ("4", "Surprised", "😮", "#ff961e", 4),
    ("5", "Joyful", "😄", "#2ed573", 5),
]

# Statistics windows
RECENT_WINDOW = 7
TREND_THRESHOLD = 0.5

# History filter periods in days; "all" and "today" are handled separately
PERIOD_CHOICES = [
    ("All entries", "all"),
    ("Today", "today"),
    ("Last 7 days", "week"),
    ("Last 30 days", "month"),
]
PERIOD_DAYS = {"week": 7, "month": 30}

TREND_LABELS = {
    "improving": "Improving ↗",
    "declining": "Declining ↘",
    "stable": "Stable →",
}

# Basic logging setup
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
)

# Jinja2 template environment for HTML rendering
TEMPLATE_ENV = Environment(
    loader=DictLoader(
        {
            "stats_summary.html": dedent(
                """\
                <div style='font-family:"Segoe UI",sans-serif; line-height:1.6; color:{{ colors.text }};'>
                    {% if stats.total_entries %}
                    <div style='display:flex; flex-wrap:wrap; gap:18px;'>
                        <div>Entries: <strong>{{ stats.total_entries }}</strong></div>
                        <div>Average mood: <strong>{{ "%.1f"|format(stats.average_mood) }}</strong> / {{ max_value }}</div>
                    </div>
                    <div style='color:{{ colors.secondary }};'>Most common: <strong style='color:{{ colors.text }};'>{{ stats.most_common_mood | e }}</strong></div>
                    <div style='color:{{ colors.secondary }};'>Trend: <strong style='color:{{ colors.text }};'>{{ trend_label }}</strong></div>
                    {% else %}
                    <em style='color:{{ colors.secondary }};'>No moods recorded yet.</em>
                    {% endif %}
                </div>
                """
            ),
            "entry_detail.html": dedent(
                """\
                <div style='font-family:"Segoe UI",sans-serif; line-height:1.6; color:{{ colors.text }};'>
                    <div style='font-size:16px; font-weight:bold;'>{{ timestamp_display }}</div>
                    <div style='color:{{ mood_color }};'>{{ mood_symbol }} {{ mood_name | e }}</div>
                    <hr style='border:0; height:1px; background:{{ colors.divider }}; margin:12px 0;'>
                    <p style='white-space:pre-wrap; margin:0;'>
                        {% if has_note %}{% for line in note_lines %}{{ line }}{% if not loop.last %}<br>{% endif %}{% endfor %}{% else %}<em>{{ empty_note_notice }}</em>{% endif %}
                    </p>
                </div>
                """
            ),
        }
    ),
    autoescape=select_autoescape(["html", "xml"]),
    trim_blocks=True,
    lstrip_blocks=True,
)

STATS_SUMMARY_TEMPLATE = TEMPLATE_ENV.get_template("stats_summary.html")
ENTRY_DETAIL_TEMPLATE = TEMPLATE_ENV.get_template("entry_detail.html")
