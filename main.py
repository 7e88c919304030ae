"""Main entry point for the mood tracker application."""

from __future__ import annotations

import sys

from PySide6.QtWidgets import QApplication

from moodtrack.constants import DATABASE_PATH, LEGACY_JSON_PATH
from moodtrack.storage import initialize_storage
from moodtrack.store import MoodStore
from moodtrack.ui import MoodDashboard


def main() -> int:
    """Initialize the database, load the store and launch the dashboard."""
    initialize_storage(DATABASE_PATH, LEGACY_JSON_PATH)
    app = QApplication(sys.argv)
    store = MoodStore(DATABASE_PATH)
    window = MoodDashboard(store)
    window.resize(560, 620)
    window.show()
    return int(app.exec())


if __name__ == "__main__":
    sys.exit(main())
