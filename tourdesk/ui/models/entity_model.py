"""Entity table model for Qt Model/View."""

from dataclasses import dataclass
from typing import Any, Optional

from PySide6.QtCore import QAbstractTableModel, QModelIndex, Qt, Signal
from PySide6.QtGui import QColor, QFont

from tourdesk.domain.models import AgencyStatus, MessageStatus, ReportStatus, field_text


@dataclass(frozen=True)
class Column:
    """One table column bound to an entity field."""

    header: str
    field: str


# Status colours (pending amber, positive green, negative grey)
STATUS_COLORS = {
    ReportStatus.PENDING: QColor(217, 119, 6),
    ReportStatus.REVIEWED: QColor(22, 163, 74),
    ReportStatus.IGNORED: QColor(100, 116, 139),
    AgencyStatus.PENDING: QColor(217, 119, 6),
    AgencyStatus.APPROVED: QColor(22, 163, 74),
    AgencyStatus.REJECTED: QColor(220, 38, 38),
}


class EntityTableModel(QAbstractTableModel):
    """Table model over the visible page of one screen.

    Column 0 is a selection checkbox; the remaining columns show entity
    fields. The model holds no selection state of its own: it renders the
    set it is given and reports checkbox clicks through ``toggled``.

    Signals:
        toggled(object): Entity id whose checkbox was clicked
    """

    toggled = Signal(object)

    COL_SELECT = 0

    def __init__(self, columns: list[Column], parent=None):
        """Initialize the model.

        Args:
            columns: Field columns shown after the checkbox column
            parent: Parent object
        """
        super().__init__(parent)
        self._columns = columns
        self._rows: list = []
        self._selected: frozenset = frozenset()

    def rowCount(self, parent: QModelIndex = QModelIndex()) -> int:
        if parent.isValid():
            return 0
        return len(self._rows)

    def columnCount(self, parent: QModelIndex = QModelIndex()) -> int:
        if parent.isValid():
            return 0
        return len(self._columns) + 1

    def data(self, index: QModelIndex, role: int = Qt.DisplayRole) -> Any:
        """Return data for the given index and role."""
        if not index.isValid() or index.row() >= len(self._rows):
            return None

        entity = self._rows[index.row()]
        col = index.column()

        if col == self.COL_SELECT:
            if role == Qt.CheckStateRole:
                return Qt.Checked if entity.id in self._selected else Qt.Unchecked
            if role == Qt.UserRole:
                return entity
            return None

        field = self._columns[col - 1].field
        if role == Qt.DisplayRole:
            return self._display(entity, field)
        elif role == Qt.ForegroundRole:
            return self._foreground(entity, field)
        elif role == Qt.FontRole:
            return self._font(entity)
        elif role == Qt.UserRole:
            # Store the full entity object for easy access
            return entity
        return None

    def _display(self, entity: Any, field: str) -> str:
        value = getattr(entity, field, None)
        if hasattr(value, "strftime"):
            return value.strftime("%Y-%m-%d %H:%M")
        text = field_text(entity, field)
        if field == "status":
            return text.title()
        return text

    def _foreground(self, entity: Any, field: str) -> Optional[QColor]:
        if field != "status":
            return None
        return STATUS_COLORS.get(getattr(entity, "status", None))

    def _font(self, entity: Any) -> Optional[QFont]:
        """Bold font for unread messages."""
        if getattr(entity, "status", None) == MessageStatus.UNREAD:
            font = QFont()
            font.setBold(True)
            return font
        return None

    def flags(self, index: QModelIndex) -> Qt.ItemFlags:
        if not index.isValid():
            return Qt.NoItemFlags
        flags = Qt.ItemIsEnabled | Qt.ItemIsSelectable
        if index.column() == self.COL_SELECT:
            flags |= Qt.ItemIsUserCheckable
        return flags

    def setData(self, index: QModelIndex, value: Any, role: int = Qt.EditRole) -> bool:
        if role != Qt.CheckStateRole or index.column() != self.COL_SELECT:
            return False
        if not index.isValid() or index.row() >= len(self._rows):
            return False
        self.toggled.emit(self._rows[index.row()].id)
        return True

    def headerData(self, section: int, orientation: Qt.Orientation, role: int = Qt.DisplayRole) -> Any:
        if role == Qt.DisplayRole and orientation == Qt.Horizontal:
            if section == self.COL_SELECT:
                return ""
            if 0 < section <= len(self._columns):
                return self._columns[section - 1].header
        return None

    def set_rows(self, rows: list, selected: frozenset = frozenset()) -> None:
        """Replace the displayed page.

        Args:
            rows: Entities on the visible page
            selected: Currently selected ids
        """
        self.beginResetModel()
        self._rows = list(rows)
        self._selected = frozenset(selected)
        self.endResetModel()

    def set_selected(self, selected: frozenset) -> None:
        """Refresh checkbox column only."""
        self._selected = frozenset(selected)
        if self._rows:
            top = self.index(0, self.COL_SELECT)
            bottom = self.index(len(self._rows) - 1, self.COL_SELECT)
            self.dataChanged.emit(top, bottom, [Qt.CheckStateRole])

    def entity_at(self, row: int) -> Optional[Any]:
        if 0 <= row < len(self._rows):
            return self._rows[row]
        return None
