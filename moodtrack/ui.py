"""User interface components and event handling."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from pathlib import Path
from typing import Any

from PySide6.QtCore import (
    QAbstractListModel,
    QModelIndex,
    QPersistentModelIndex,
    Qt,
    Slot,
)
from PySide6.QtGui import QColor, QFont, QPalette
from PySide6.QtWidgets import (
    QApplication,
    QComboBox,
    QFileDialog,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QListView,
    QMessageBox,
    QPushButton,
    QSplitter,
    QTextBrowser,
    QVBoxLayout,
    QWidget,
)

from moodtrack.constants import PERIOD_CHOICES
from moodtrack.models import Mood, MoodEntry
from moodtrack.store import MoodStore
from moodtrack.utils import (
    format_timestamp_display,
    render_entry_detail_html,
    render_stats_html,
)


class MoodEntryListModel(QAbstractListModel):
    """List model over mood entries; rows are rendered lazily by the view."""

    def __init__(self, resolve: Callable[[str], Mood], parent=None) -> None:
        super().__init__(parent)
        self._resolve = resolve
        self._entries: list[MoodEntry] = []

    def rowCount(
        self, parent: QModelIndex | QPersistentModelIndex = QModelIndex()
    ) -> int:
        if parent.isValid():
            return 0
        return len(self._entries)

    def data(
        self,
        index: QModelIndex | QPersistentModelIndex,
        role: int = Qt.ItemDataRole.DisplayRole,
    ) -> Any:
        if not index.isValid() or index.row() >= len(self._entries):
            return None

        entry = self._entries[index.row()]

        if role == Qt.ItemDataRole.DisplayRole:
            mood = self._resolve(entry.mood_id)
            mood_display = f"{mood.symbol} {mood.name}".strip() or "Unknown mood"
            lines = [f"[{format_timestamp_display(entry.date)}] {mood_display}"]

            preview = " ".join((entry.note or "").split())
            if len(preview) > 48:
                preview = preview[:47] + "…"
            if preview:
                lines.append(f"  -> {preview}")
            return "\n".join(lines)

        if role == Qt.ItemDataRole.UserRole:
            return entry

        return None

    def get_entry(self, index: QModelIndex) -> MoodEntry | None:
        if not index.isValid() or index.row() >= len(self._entries):
            return None
        return self._entries[index.row()]

    def row_for_id(self, entry_id: str) -> int | None:
        for row, entry in enumerate(self._entries):
            if entry.id == entry_id:
                return row
        return None

    def set_entries(self, entries: list[MoodEntry]) -> None:
        """Replace the rows and notify attached views."""
        self.beginResetModel()
        self._entries = entries
        self.endResetModel()

    def clear(self) -> None:
        self.beginResetModel()
        self._entries = []
        self.endResetModel()


class MoodDashboard(QWidget):
    """Main window: quick mood capture, statistics and history review."""

    def __init__(self, store: MoodStore) -> None:
        super().__init__()
        self.setWindowTitle("Mood Tracker")
        self.setObjectName("MoodDashboard")
        self.store = store
        self._apply_fluent_theme()

        layout = QVBoxLayout()
        layout.setContentsMargins(28, 28, 28, 24)
        layout.setSpacing(14)

        layout.addWidget(QLabel("How do you feel right now?"))

        self.note_input = QLineEdit()
        self.note_input.setPlaceholderText("Optional note")
        layout.addWidget(self.note_input)

        self.mood_button_row = QHBoxLayout()
        layout.addLayout(self.mood_button_row)

        self.stats_view = QTextBrowser()
        self.stats_view.setObjectName("StatsView")
        self.stats_view.setMaximumHeight(120)
        layout.addWidget(self.stats_view)

        layout.addWidget(QLabel("Recent entries:"))
        self.recent_list_model = MoodEntryListModel(store.resolve_mood, self)
        self.recent_list = QListView()
        self.recent_list.setObjectName("RecentListView")
        self.recent_list.setModel(self.recent_list_model)
        self.recent_list.setSelectionMode(QListView.SelectionMode.NoSelection)
        self.recent_list.setMaximumHeight(140)
        layout.addWidget(self.recent_list)

        filter_row = QHBoxLayout()
        filter_row.addWidget(QLabel("Show:"))
        self.period_selector = QComboBox()
        for label, value in PERIOD_CHOICES:
            self.period_selector.addItem(label, userData=value)
        self.period_selector.currentIndexChanged.connect(self.refresh_history)
        filter_row.addWidget(self.period_selector)
        self.period_average_label = QLabel()
        filter_row.addWidget(self.period_average_label)
        filter_row.addStretch()
        layout.addLayout(filter_row)

        self.history_splitter = QSplitter(Qt.Orientation.Horizontal)
        self.history_list_model = MoodEntryListModel(store.resolve_mood, self)
        self.history_list = QListView()
        self.history_list.setModel(self.history_list_model)
        self.history_list.setSelectionMode(QListView.SelectionMode.SingleSelection)
        self.history_list.setVerticalScrollMode(QListView.ScrollMode.ScrollPerPixel)
        self.history_list.selectionModel().currentChanged.connect(
            self.on_history_selection_changed
        )
        self.history_splitter.addWidget(self.history_list)

        self.history_content = QTextBrowser()
        self.history_content.setOpenExternalLinks(False)
        self.history_splitter.addWidget(self.history_content)
        self.history_splitter.setMinimumHeight(160)
        self.history_splitter.setStretchFactor(0, 1)
        self.history_splitter.setStretchFactor(1, 2)
        layout.addWidget(self.history_splitter)

        # inline editor, shown only while an entry is being edited
        self._editing_entry_id: str | None = None
        self.edit_panel = QWidget()
        edit_row = QHBoxLayout()
        edit_row.setContentsMargins(0, 0, 0, 0)
        edit_row.addWidget(QLabel("Mood:"))
        self.edit_mood_selector = QComboBox()
        edit_row.addWidget(self.edit_mood_selector)
        self.edit_note_input = QLineEdit()
        self.edit_note_input.setPlaceholderText("Note")
        edit_row.addWidget(self.edit_note_input)
        self.save_edit_button = QPushButton("Save")
        self.save_edit_button.clicked.connect(self.save_edit)
        edit_row.addWidget(self.save_edit_button)
        self.cancel_edit_button = QPushButton("Cancel")
        self.cancel_edit_button.clicked.connect(self.cancel_edit)
        edit_row.addWidget(self.cancel_edit_button)
        self.edit_panel.setLayout(edit_row)
        self.edit_panel.setVisible(False)
        layout.addWidget(self.edit_panel)

        action_row = QHBoxLayout()
        self.edit_button = QPushButton("Edit Entry")
        self.edit_button.clicked.connect(self.edit_selected_entry)
        action_row.addWidget(self.edit_button)
        self.delete_button = QPushButton("Delete Entry")
        self.delete_button.clicked.connect(self.delete_selected_entry)
        action_row.addWidget(self.delete_button)
        self.delete_all_button = QPushButton("Delete All")
        self.delete_all_button.clicked.connect(self.delete_all_entries)
        action_row.addWidget(self.delete_all_button)
        self.reset_button = QPushButton("Reset Moods")
        self.reset_button.clicked.connect(self.reset_mood_definitions)
        action_row.addWidget(self.reset_button)
        self.export_button = QPushButton("Export to CSV")
        self.export_button.clicked.connect(self.export_entries)
        action_row.addWidget(self.export_button)
        layout.addLayout(action_row)

        self.setLayout(layout)

        store.entries_changed.connect(self.refresh)
        store.moods_changed.connect(self.rebuild_mood_buttons)
        store.moods_changed.connect(self.refresh)

        self.rebuild_mood_buttons()
        self.refresh()

    def _apply_fluent_theme(self) -> None:
        """Configure a light Fusion palette approximating Fluent Design."""
        app = QApplication.instance()
        QApplication.setStyle("Fusion")

        accent_color = QColor(15, 108, 189)
        foreground = QColor(32, 31, 30)

        palette = QPalette()
        palette.setColor(QPalette.ColorRole.Window, QColor(243, 242, 241))
        palette.setColor(QPalette.ColorRole.Base, QColor(255, 255, 255))
        palette.setColor(QPalette.ColorRole.Text, foreground)
        palette.setColor(QPalette.ColorRole.WindowText, foreground)
        palette.setColor(QPalette.ColorRole.ButtonText, foreground)
        palette.setColor(QPalette.ColorRole.Highlight, accent_color)

        if app is not None and isinstance(app, QApplication):
            app.setPalette(palette)

        self.setPalette(palette)
        self.setFont(QFont("Segoe UI", 10))

    def is_dark_theme(self) -> bool:
        """Check the current palette to decide which colors to render with."""
        palette = self.history_content.palette()
        base_lightness = palette.color(QPalette.ColorRole.Base).lightnessF()
        window_lightness = palette.color(QPalette.ColorRole.Window).lightnessF()
        return min(base_lightness, window_lightness) < 0.5

    @Slot()
    def rebuild_mood_buttons(self) -> None:
        while self.mood_button_row.count():
            item = self.mood_button_row.takeAt(0)
            widget = item.widget()
            if widget is not None:
                widget.deleteLater()

        max_value = self.store.max_mood_value()
        for mood in self.store.available_moods():
            button = QPushButton(f"{mood.symbol}\n{mood.name}")
            button.setToolTip(f"Record '{mood.name}' ({mood.value}/{max_value})")
            button.setStyleSheet(f"QPushButton {{ border-bottom: 3px solid {mood.color}; }}")
            button.clicked.connect(
                lambda _checked=False, mood_id=mood.id: self.add_quick_mood(mood_id)
            )
            self.mood_button_row.addWidget(button)

    def add_quick_mood(self, mood_id: str) -> None:
        note = self.note_input.text().strip() or None
        self.store.add_entry(mood_id, note)
        self.note_input.clear()

    @Slot()
    def refresh(self) -> None:
        self.stats_view.setHtml(
            render_stats_html(
                self.store.stats(), self.store.max_mood_value(), self.is_dark_theme()
            )
        )
        self.recent_list_model.set_entries(self.store.recent_entries())
        self.refresh_history()

    @Slot()
    def refresh_history(self) -> None:
        period = self.period_selector.currentData() or "all"
        selected = self.history_list_model.get_entry(self.history_list.currentIndex())

        # newest first, like the recent list on the dashboard
        entries = list(reversed(self.store.entries_for_period(period)))
        self.history_list_model.set_entries(entries)

        average = self.store.average_for(entries)
        self.period_average_label.setText(
            "Average: no data" if average is None else f"Average: {average:.1f}"
        )

        if not entries:
            self.history_content.clear()
            return

        row = None if selected is None else self.history_list_model.row_for_id(selected.id)
        self.history_list.setCurrentIndex(self.history_list_model.index(row or 0, 0))

    def selected_entry(self) -> MoodEntry | None:
        return self.history_list_model.get_entry(self.history_list.currentIndex())

    def edit_selected_entry(self) -> None:
        """Open the inline editor for the selected entry."""
        entry = self.selected_entry()
        if entry is None:
            return

        self._editing_entry_id = entry.id
        self.edit_mood_selector.clear()
        for mood in self.store.available_moods():
            self.edit_mood_selector.addItem(f"{mood.symbol} {mood.name}", userData=mood.id)
        # a dangling mood id leaves nothing selected until the user picks one
        self.edit_mood_selector.setCurrentIndex(
            self.edit_mood_selector.findData(entry.mood_id)
        )
        self.edit_note_input.setText(entry.note or "")
        self.edit_panel.setVisible(True)

    def save_edit(self) -> None:
        mood_id = self.edit_mood_selector.currentData()
        if self._editing_entry_id is None or not mood_id:
            return
        if not self._confirm("Edit Entry", "Save changes to this entry?"):
            return

        entry_id = self._editing_entry_id
        note = self.edit_note_input.text().strip() or None
        self.cancel_edit()
        self.store.update_entry(entry_id, mood_id=mood_id, note=note)

    def cancel_edit(self) -> None:
        self._editing_entry_id = None
        self.edit_mood_selector.clear()
        self.edit_note_input.clear()
        self.edit_panel.setVisible(False)

    def on_history_selection_changed(
        self, current: QModelIndex, previous: QModelIndex
    ) -> None:
        entry = self.history_list_model.get_entry(current)
        if entry is None:
            self.history_content.clear()
            return
        self.history_content.setHtml(
            render_entry_detail_html(
                entry, self.store.resolve_mood(entry.mood_id), self.is_dark_theme()
            )
        )

    def _confirm(self, title: str, question: str) -> bool:
        answer = QMessageBox.question(
            self,
            title,
            question,
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
            QMessageBox.StandardButton.No,
        )
        return answer == QMessageBox.StandardButton.Yes

    def delete_selected_entry(self) -> None:
        entry = self.selected_entry()
        if entry is None:
            return
        if self._confirm("Delete Entry", "Delete this entry?"):
            self.store.delete_entry(entry.id)

    def delete_all_entries(self) -> None:
        if self._confirm(
            "Delete All", "Delete ALL entries? This cannot be undone."
        ):
            self.store.delete_all_entries()

    def reset_mood_definitions(self) -> None:
        if self._confirm(
            "Reset Moods",
            "Restore the default mood definitions? Your entries are kept.",
        ):
            self.store.reset_mood_definitions()

    def export_entries(self) -> None:
        """Export mood entries to a CSV file."""
        suggested_name = f"moods-export-{datetime.now().strftime('%Y%m%d-%H%M%S')}.csv"
        target_path_str, _ = QFileDialog.getSaveFileName(
            self,
            "Export Moods to CSV",
            str(Path.home() / suggested_name),
            "CSV Files (*.csv);;All Files (*)",
        )
        if not target_path_str:
            return

        target_path = Path(target_path_str)
        try:
            exported_rows = self.store.export_csv(target_path)
        except OSError as exc:
            logging.exception("Mood export failed")
            QMessageBox.critical(self, "Export Failed", f"Could not export moods: {exc}")
            return

        QMessageBox.information(
            self,
            "Export Complete",
            f"Exported {exported_rows} entries to {target_path.resolve()}",
        )
