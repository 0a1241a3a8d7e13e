"""QMessageBox-backed confirmation for gated actions."""

from PySide6.QtWidgets import QMessageBox, QWidget

from tourdesk.services.gate import ConfirmPrompt, Confirmer


def message_box_confirmer(parent: QWidget) -> Confirmer:
    """Build a confirmer that asks with a modal message box.

    Args:
        parent: Widget the message box is centred on

    Returns:
        Async callable resolving to True when the user confirms
    """

    async def confirm(prompt: ConfirmPrompt) -> bool:
        box = QMessageBox(parent)
        box.setWindowTitle(prompt.title)
        box.setText(prompt.title)
        box.setInformativeText(prompt.text)
        box.setIcon(QMessageBox.Warning if prompt.destructive else QMessageBox.Question)
        confirm_btn = box.addButton(
            prompt.confirm_label,
            QMessageBox.DestructiveRole if prompt.destructive else QMessageBox.AcceptRole,
        )
        cancel_btn = box.addButton("Cancel", QMessageBox.RejectRole)
        box.setDefaultButton(cancel_btn)
        box.exec()
        return box.clickedButton() is confirm_btn

    return confirm
