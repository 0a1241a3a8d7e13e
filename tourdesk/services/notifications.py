"""Notification channel for reporting the outcome of user actions."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from PySide6.QtCore import QObject, Signal

logger = logging.getLogger(__name__)


class Severity(Enum):
    SUCCESS = "success"
    INFO = "info"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    """A single user-facing message."""

    severity: Severity
    title: str
    text: str
    created_at: datetime = field(default_factory=datetime.now)


class NotificationChannel(QObject):
    """Collects notifications and broadcasts them to the UI.

    The channel keeps a bounded history so screens (and tests) can inspect
    what was reported.

    Example:
        >>> channel = NotificationChannel()
        >>> channel.posted.connect(banner.show_notification)
        >>> channel.success("Deleted!", "Message has been removed.")
    """

    posted = Signal(object)  # Notification

    def __init__(self, max_history: int = 100, parent=None):
        super().__init__(parent)
        self._history: list[Notification] = []
        self._max_history = max_history

    @property
    def history(self) -> list[Notification]:
        return self._history.copy()

    @property
    def last(self):
        return self._history[-1] if self._history else None

    def post(self, notification: Notification) -> None:
        self._history.append(notification)
        if len(self._history) > self._max_history:
            self._history.pop(0)
        log = logger.error if notification.severity == Severity.ERROR else logger.info
        log(f"{notification.title}: {notification.text}")
        self.posted.emit(notification)

    def success(self, title: str, text: str) -> None:
        self.post(Notification(Severity.SUCCESS, title, text))

    def info(self, title: str, text: str) -> None:
        self.post(Notification(Severity.INFO, title, text))

    def error(self, title: str, text: str) -> None:
        self.post(Notification(Severity.ERROR, title, text))
