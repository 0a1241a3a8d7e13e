"""Notification banner widget for action outcomes."""

from PySide6.QtCore import Signal, QTimer
from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QPushButton,
    QFrame,
)

from tourdesk.services.notifications import Notification, Severity

ICONS = {
    Severity.SUCCESS: "✔",  # Check mark
    Severity.INFO: "ℹ",  # Information source
    Severity.ERROR: "⚠",  # Warning triangle
}


class NotificationBanner(QFrame):
    """A dismissable banner showing the latest notification.

    Success and info banners hide themselves after a short delay; errors
    stay until dismissed.
    """

    dismissed = Signal()

    AUTO_HIDE_MS = 2000

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setObjectName("notification_banner")
        self._hide_timer = QTimer(self)
        self._hide_timer.setSingleShot(True)
        self._hide_timer.timeout.connect(self.hide)
        self._setup_ui()
        self.hide()  # Hidden by default

    def _setup_ui(self) -> None:
        layout = QHBoxLayout(self)
        layout.setContentsMargins(16, 10, 16, 10)
        layout.setSpacing(12)

        self.icon_label = QLabel()
        self.icon_label.setObjectName("banner_icon")
        layout.addWidget(self.icon_label)

        self.title_label = QLabel()
        self.title_label.setObjectName("banner_title")
        layout.addWidget(self.title_label)

        self.message_label = QLabel()
        self.message_label.setObjectName("banner_message")
        self.message_label.setWordWrap(True)
        layout.addWidget(self.message_label, 1)

        self.dismiss_btn = QPushButton("Dismiss")
        self.dismiss_btn.setObjectName("banner_dismiss_btn")
        self.dismiss_btn.clicked.connect(self._on_dismiss_clicked)
        layout.addWidget(self.dismiss_btn)

    def show_notification(self, notification: Notification) -> None:
        """Display a notification posted on the channel."""
        self.setProperty("severity", notification.severity.value)
        self.icon_label.setText(ICONS[notification.severity])
        self.title_label.setText(notification.title)
        self.message_label.setText(notification.text)
        self._hide_timer.stop()
        if notification.severity != Severity.ERROR:
            self._hide_timer.start(self.AUTO_HIDE_MS)
        self.show()

    def _on_dismiss_clicked(self) -> None:
        self._hide_timer.stop()
        self.dismissed.emit()
        self.hide()
