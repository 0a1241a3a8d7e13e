"""Create/edit form dialog for agencies and categories."""

from dataclasses import dataclass
from typing import Any, Optional

from PySide6.QtWidgets import (
    QDialog,
    QDialogButtonBox,
    QFormLayout,
    QLabel,
    QLineEdit,
    QVBoxLayout,
)


@dataclass(frozen=True)
class FormField:
    """One input row of a form."""

    name: str
    label: str
    password: bool = False


AGENCY_CREATE_FIELDS = [
    FormField("name", "Name"),
    FormField("email", "Email"),
    FormField("phone_number", "Phone number"),
    FormField("password", "Password", password=True),
    FormField("password_confirmation", "Confirm password", password=True),
]

AGENCY_EDIT_FIELDS = [
    FormField("name", "Name"),
    FormField("email", "Email"),
    FormField("phone_number", "Phone number"),
]

CATEGORY_FIELDS = [
    FormField("name", "Name"),
    FormField("comment", "Comment"),
]


class FormDialog(QDialog):
    """Modal form returning raw field values.

    Validation happens in the controller; errors it reports are shown under
    the offending inputs with ``set_errors`` and the dialog is re-opened.
    """

    def __init__(self, title: str, fields: list[FormField], values: Optional[dict[str, Any]] = None, parent=None):
        super().__init__(parent)
        self.setWindowTitle(title)
        self.setModal(True)
        self.setMinimumWidth(400)

        self._inputs: dict[str, QLineEdit] = {}
        self._errors: dict[str, QLabel] = {}
        self._setup_ui(fields, values or {})

    def _setup_ui(self, fields: list[FormField], values: dict[str, Any]) -> None:
        layout = QVBoxLayout(self)
        layout.setSpacing(12)
        layout.setContentsMargins(20, 20, 20, 20)

        form = QFormLayout()
        for field in fields:
            line = QLineEdit()
            if field.password:
                line.setEchoMode(QLineEdit.Password)
            value = values.get(field.name)
            if value is not None:
                line.setText(str(value))
            error = QLabel("")
            error.setObjectName("field_error")
            error.hide()
            form.addRow(field.label, line)
            form.addRow("", error)
            self._inputs[field.name] = line
            self._errors[field.name] = error
        layout.addLayout(form)

        button_box = QDialogButtonBox(
            QDialogButtonBox.StandardButton.Save | QDialogButtonBox.StandardButton.Cancel
        )
        button_box.accepted.connect(self.accept)
        button_box.rejected.connect(self.reject)
        layout.addWidget(button_box)

    def values(self) -> dict[str, str]:
        return {name: line.text() for name, line in self._inputs.items()}

    def set_errors(self, errors: dict[str, str]) -> None:
        """Show validation messages next to their fields."""
        for name, label in self._errors.items():
            message = errors.get(name)
            label.setText(message or "")
            label.setVisible(bool(message))
