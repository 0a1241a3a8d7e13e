"""Read-only view of one contact message."""

from PySide6.QtWidgets import (
    QDialog,
    QDialogButtonBox,
    QFormLayout,
    QLabel,
    QPlainTextEdit,
    QVBoxLayout,
)

from tourdesk.domain.models import Message


class MessageDetailsDialog(QDialog):
    """Shows sender details and the full message body."""

    def __init__(self, message: Message, parent=None):
        super().__init__(parent)
        self.setWindowTitle(message.subject or "Message")
        self.setModal(True)
        self.setMinimumWidth(480)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(20, 20, 20, 20)

        form = QFormLayout()
        form.addRow("From:", QLabel(message.name))
        form.addRow("Email:", QLabel(message.email))
        form.addRow("Phone:", QLabel(message.phone or "-"))
        received = message.created_at.strftime("%d %b %Y %H:%M") if message.created_at else "-"
        form.addRow("Received:", QLabel(received))
        form.addRow("Status:", QLabel(message.status.value.title()))
        layout.addLayout(form)

        body = QPlainTextEdit(message.message)
        body.setReadOnly(True)
        layout.addWidget(body, 1)

        buttons = QDialogButtonBox(QDialogButtonBox.StandardButton.Close)
        buttons.rejected.connect(self.reject)
        layout.addWidget(buttons)
