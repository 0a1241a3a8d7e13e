"""Main application window with one tab per admin screen."""

import logging
from typing import TYPE_CHECKING, Optional

import qasync
from PySide6.QtCore import Signal
from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QTabWidget,
    QVBoxLayout,
    QWidget,
)

from tourdesk.domain.models import DashboardStats
from tourdesk.ui.components.notification_banner import NotificationBanner
from tourdesk.ui.dialogs.confirm_dialog import message_box_confirmer
from tourdesk.ui.theme import apply_theme
from tourdesk.ui.views.entity_table_view import EntityTableView

if TYPE_CHECKING:
    from tourdesk.app import ApplicationContext

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    """Admin console window.

    Screens load lazily: a tab fetches its collection the first time it
    is shown.

    Signals:
        closed(): Emitted after the window accepted a close event
    """

    closed = Signal()

    def __init__(self, context: "ApplicationContext"):
        super().__init__()
        self._ctx = context
        self._ctx.set_confirmer(message_box_confirmer(self))
        apply_theme(context.settings.theme.mode)

        self.setWindowTitle("Tourdesk Admin")
        self.resize(1100, 720)

        self._views: dict[str, EntityTableView] = {}
        self._setup_ui()

        self._ctx.notifier.posted.connect(self.banner.show_notification)
        self._ctx.stats.changed.connect(self._on_stats_changed)

    def _setup_ui(self) -> None:
        central = QWidget()
        layout = QVBoxLayout(central)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        # Header with dashboard figures
        header = QHBoxLayout()
        header.setContentsMargins(16, 12, 16, 12)
        title = QLabel("Admin Dashboard")
        title.setObjectName("page_header")
        header.addWidget(title)
        header.addStretch()
        self.stats_label = QLabel("")
        self.stats_label.setObjectName("secondary_text")
        header.addWidget(self.stats_label)
        layout.addLayout(header)

        self.banner = NotificationBanner()
        layout.addWidget(self.banner)

        self.tabs = QTabWidget()
        for name, controller in self._ctx.controllers.items():
            view = EntityTableView(controller)
            self._views[name] = view
            self.tabs.addTab(view, name.title())
        layout.addWidget(self.tabs, 1)

        self.setCentralWidget(central)

        names = list(self._views)
        last_tab = self._ctx.settings.ui_state.last_tab
        self.tabs.setCurrentIndex(names.index(last_tab) if last_tab in names else 0)
        self.tabs.currentChanged.connect(self._on_tab_changed)

    def start(self) -> None:
        """Load the header figures and the initially visible screen."""
        self._load_stats()
        self._on_tab_changed(self.tabs.currentIndex())

    def _on_tab_changed(self, index: int) -> None:
        view = self.tabs.widget(index)
        if isinstance(view, EntityTableView):
            view.ensure_loaded()

    @qasync.asyncSlot()
    async def _load_stats(self) -> None:
        await self._ctx.load_stats()

    def _on_stats_changed(self, stats: Optional[DashboardStats]) -> None:
        if stats is None:
            return
        self.stats_label.setText(
            f"Agencies: {stats.total_agencies}  •  Tourists: {stats.total_tourists}  •  "
            f"Tours: {stats.total_tours}  •  Bookings: {stats.total_bookings}"
        )

    def save_ui_state(self) -> None:
        """Persist the active tab and rows-per-page choice."""
        names = list(self._views)
        ui_state = self._ctx.settings.ui_state
        ui_state.last_tab = names[self.tabs.currentIndex()]
        current = self._ctx.controllers[ui_state.last_tab]
        ui_state.rows_per_page = current.page_size.value
        self._ctx.save_settings()

    def closeEvent(self, event) -> None:
        """Save UI state and let the entry point clean up."""
        try:
            self.save_ui_state()
        except OSError as e:
            logger.warning(f"Could not save UI state: {e}")
        event.accept()
        self.closed.emit()
