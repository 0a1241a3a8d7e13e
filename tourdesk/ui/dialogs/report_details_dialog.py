"""Read-only view of one abuse report."""

from PySide6.QtWidgets import (
    QDialog,
    QDialogButtonBox,
    QFormLayout,
    QLabel,
    QPlainTextEdit,
    QVBoxLayout,
)

from tourdesk.domain.models import Report


def reporter_text(report: Report) -> str:
    """Reporter name and email, or "Guest" for anonymous reports."""
    if not report.reporter_name:
        return "Guest"
    if report.reporter_email:
        return f"{report.reporter_name} ({report.reporter_email})"
    return report.reporter_name


class ReportDetailsDialog(QDialog):
    """Shows who filed a report, what it targets and the full description."""

    def __init__(self, report: Report, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Report Details")
        self.setModal(True)
        self.setMinimumWidth(480)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(20, 20, 20, 20)

        form = QFormLayout()
        self.reporter_label = QLabel(reporter_text(report))
        form.addRow("Reporter:", self.reporter_label)
        form.addRow("Target:", QLabel(report.target_display))
        form.addRow("Reason:", QLabel(report.reason or "Not specified"))
        form.addRow("Status:", QLabel(report.status.value.title()))
        created = report.created_at.strftime("%d %b %Y %H:%M") if report.created_at else "-"
        form.addRow("Date:", QLabel(created))
        layout.addLayout(form)

        self.description = QPlainTextEdit(report.description or "No additional details provided")
        self.description.setReadOnly(True)
        layout.addWidget(self.description, 1)

        buttons = QDialogButtonBox(QDialogButtonBox.StandardButton.Close)
        buttons.rejected.connect(self.reject)
        layout.addWidget(buttons)
