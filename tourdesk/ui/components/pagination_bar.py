"""Rows-per-page selector and page navigation."""

from PySide6.QtCore import Signal
from PySide6.QtWidgets import (
    QWidget,
    QHBoxLayout,
    QLabel,
    QComboBox,
    QPushButton,
)

from tourdesk.services.paging import PAGE_SIZE_OPTIONS, PageResult


class PaginationBar(QWidget):
    """Footer showing "Showing a-b of n" with prev/next buttons.

    Signals:
        page_requested(int): Emitted with the page index the user navigated to
        page_size_changed(int): Emitted when rows-per-page changes
    """

    page_requested = Signal(int)
    page_size_changed = Signal(int)

    def __init__(self, page_size: int = 10, parent=None):
        super().__init__(parent)
        self._page_index = 0
        self._page_count = 1
        self._setup_ui(page_size)

    def _setup_ui(self, page_size: int) -> None:
        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(8)

        layout.addWidget(QLabel("Rows per page:"))
        self.size_combo = QComboBox()
        for size in PAGE_SIZE_OPTIONS:
            self.size_combo.addItem(str(size), size)
        self.size_combo.setCurrentIndex(max(0, self.size_combo.findData(page_size)))
        self.size_combo.currentIndexChanged.connect(self._on_size_changed)
        layout.addWidget(self.size_combo)

        layout.addStretch()

        self.range_label = QLabel("")
        self.range_label.setObjectName("secondary_text")
        layout.addWidget(self.range_label)

        self.prev_btn = QPushButton("‹")  # Single left angle
        self.prev_btn.setToolTip("Previous page")
        self.prev_btn.clicked.connect(lambda: self.page_requested.emit(self._page_index - 1))
        layout.addWidget(self.prev_btn)

        self.next_btn = QPushButton("›")  # Single right angle
        self.next_btn.setToolTip("Next page")
        self.next_btn.clicked.connect(lambda: self.page_requested.emit(self._page_index + 1))
        layout.addWidget(self.next_btn)

    def _on_size_changed(self, index: int) -> None:
        self.page_size_changed.emit(self.size_combo.itemData(index))

    def set_page(self, page: PageResult) -> None:
        """Render the range label and navigation state for a page."""
        self._page_index = page.page_index
        self._page_count = page.page_count
        self.range_label.setText(
            f"Showing {page.first_row_number}-{page.last_row_number} of {page.total_filtered}"
        )
        self.prev_btn.setEnabled(self._page_index > 0)
        self.next_btn.setEnabled(self._page_index < self._page_count - 1)
