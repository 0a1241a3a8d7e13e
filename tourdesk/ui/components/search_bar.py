"""Debounced search box with a match count."""

from PySide6.QtCore import QTimer, Signal
from PySide6.QtWidgets import QHBoxLayout, QLabel, QLineEdit, QWidget


class SearchBar(QWidget):
    """Search box for one admin screen.

    Typing is debounced; clearing the box applies immediately so the full
    list comes back without a delay.

    Signals:
        search_changed(str): Query text, emitted once typing pauses
    """

    search_changed = Signal(str)

    DEBOUNCE_MS = 300

    def __init__(self, placeholder: str = "Search...", noun: str = "record", plural: str = "", parent=None):
        """Initialize search bar.

        Args:
            placeholder: Placeholder text for the input
            noun: Singular noun used in the match count ("category")
            plural: Plural noun ("categories"); defaults to noun + "s"
            parent: Parent widget
        """
        super().__init__(parent)
        self._noun = noun
        self._plural = plural or f"{noun}s"

        self._pause = QTimer(self)
        self._pause.setSingleShot(True)
        self._pause.setInterval(self.DEBOUNCE_MS)
        self._pause.timeout.connect(self._publish)

        row = QHBoxLayout(self)
        row.setContentsMargins(0, 0, 0, 0)
        row.setSpacing(8)

        self.search_input = QLineEdit()
        self.search_input.setPlaceholderText(placeholder)
        self.search_input.setClearButtonEnabled(True)
        self.search_input.textChanged.connect(self._on_text_changed)
        row.addWidget(self.search_input, 1)

        self.count_label = QLabel("")
        self.count_label.setObjectName("secondary_text")
        row.addWidget(self.count_label)

    def _on_text_changed(self, text: str) -> None:
        if not text:
            self._pause.stop()
            self._publish()
            return
        self._pause.start()

    def _publish(self) -> None:
        self.search_changed.emit(self.search_input.text())

    def set_result_count(self, matching: int, total: int) -> None:
        """Show "n messages" or "m of n messages" when a filter is active."""
        noun = self._noun if total == 1 else self._plural
        shown = f"{total}" if matching == total else f"{matching} of {total}"
        self.count_label.setText(f"{shown} {noun}")

    def clear(self) -> None:
        self.search_input.clear()

    def get_query(self) -> str:
        return self.search_input.text()
