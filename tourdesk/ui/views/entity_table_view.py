"""Generic admin screen: search, table, paging and row actions.

The view holds no business state. Everything it shows is read from its
``ListController`` and every user action is forwarded to it.
"""

import logging
from typing import Optional

import qasync
from PySide6.QtCore import Qt, QUrl
from PySide6.QtGui import QDesktopServices
from PySide6.QtWidgets import (
    QAbstractItemView,
    QCheckBox,
    QHBoxLayout,
    QHeaderView,
    QLabel,
    QPushButton,
    QTableView,
    QVBoxLayout,
    QWidget,
)

from tourdesk.data.errors import ValidationError
from tourdesk.state.list_controller import ListController
from tourdesk.state.screens import (
    AgenciesController,
    MessagesController,
    ReportsController,
)
from tourdesk.ui.components.pagination_bar import PaginationBar
from tourdesk.ui.components.search_bar import SearchBar
from tourdesk.ui.dialogs.form_dialog import (
    AGENCY_CREATE_FIELDS,
    AGENCY_EDIT_FIELDS,
    CATEGORY_FIELDS,
    FormDialog,
)
from tourdesk.ui.dialogs.message_details_dialog import MessageDetailsDialog
from tourdesk.ui.dialogs.report_details_dialog import ReportDetailsDialog
from tourdesk.ui.models.entity_model import Column, EntityTableModel

logger = logging.getLogger(__name__)


SCREEN_COLUMNS = {
    "agencies": [
        Column("Name", "name"),
        Column("Email", "email"),
        Column("Phone", "phone"),
        Column("Type", "type"),
        Column("Status", "status"),
    ],
    "tourists": [
        Column("Name", "name"),
        Column("Email", "email"),
        Column("Phone", "phone_number"),
        Column("Joined", "created_at"),
    ],
    "messages": [
        Column("Name", "name"),
        Column("Email", "email"),
        Column("Subject", "subject"),
        Column("Received", "created_at"),
        Column("Status", "status"),
    ],
    "reports": [
        Column("Reporter", "reporter_name"),
        Column("Target", "target_display"),
        Column("Reason", "reason"),
        Column("Created", "created_at"),
        Column("Status", "status"),
    ],
    "categories": [
        Column("Name", "name"),
        Column("Comment", "comment"),
    ],
}


class EntityTableView(QWidget):
    """One tab of the admin console bound to a controller."""

    def __init__(self, controller: ListController, parent=None):
        """Initialize the screen.

        Args:
            controller: Controller for the screen's collection
            parent: Parent widget
        """
        super().__init__(parent)
        self._controller = controller
        self._config = controller.config
        self._loaded = False

        self._setup_ui()
        self._connect_signals()
        self._refresh()

    def _setup_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(16, 16, 16, 16)
        layout.setSpacing(8)

        # Header: title and derived counts
        header = QHBoxLayout()
        title = QLabel(f"{self._config.kind.title()} Management")
        title.setObjectName("section_header")
        header.addWidget(title)
        header.addStretch()
        self.summary_label = QLabel("")
        self.summary_label.setObjectName("secondary_text")
        header.addWidget(self.summary_label)
        layout.addLayout(header)

        # Toolbar
        toolbar = QHBoxLayout()
        self.select_all = QCheckBox()
        self.select_all.setTristate(True)
        self.select_all.setToolTip("Select all matching rows")
        toolbar.addWidget(self.select_all)

        self.search_bar = SearchBar(
            placeholder=f"Search {self._config.kind}...",
            noun=self._config.noun,
            plural=self._config.kind,
        )
        toolbar.addWidget(self.search_bar, 1)

        self.bulk_delete_btn = QPushButton("Delete selected")
        self.bulk_delete_btn.setObjectName("danger_btn")
        self.bulk_delete_btn.hide()
        toolbar.addWidget(self.bulk_delete_btn)

        self.add_btn: Optional[QPushButton] = None
        if self._config.validate_create is not None:
            self.add_btn = QPushButton(f"Add {self._config.noun.title()}")
            toolbar.addWidget(self.add_btn)

        self.refresh_btn: Optional[QPushButton] = None
        if isinstance(self._controller, ReportsController):
            self.refresh_btn = QPushButton("Refresh")
            toolbar.addWidget(self.refresh_btn)
        layout.addLayout(toolbar)

        # Persistent load error, shown in place of the table
        self.error_label = QLabel("")
        self.error_label.setObjectName("error_text")
        self.error_label.setAlignment(Qt.AlignCenter)
        self.error_label.hide()
        layout.addWidget(self.error_label)

        self.loading_label = QLabel("Loading...")
        self.loading_label.setAlignment(Qt.AlignCenter)
        self.loading_label.hide()
        layout.addWidget(self.loading_label)

        # Table
        self.model = EntityTableModel(SCREEN_COLUMNS[self._config.kind], self)
        self.table = QTableView()
        self.table.setModel(self.model)
        self.table.setSelectionBehavior(QAbstractItemView.SelectRows)
        self.table.setSelectionMode(QAbstractItemView.SingleSelection)
        self.table.verticalHeader().hide()
        self.table.horizontalHeader().setSectionResizeMode(QHeaderView.Stretch)
        self.table.horizontalHeader().setSectionResizeMode(
            EntityTableModel.COL_SELECT, QHeaderView.ResizeToContents
        )
        layout.addWidget(self.table, 1)

        # Row actions operate on the highlighted row
        actions = QHBoxLayout()
        self.view_btn: Optional[QPushButton] = None
        if isinstance(self._controller, (MessagesController, ReportsController)):
            self.view_btn = QPushButton("View")
            actions.addWidget(self.view_btn)

        self.agreement_btn: Optional[QPushButton] = None
        if isinstance(self._controller, AgenciesController):
            self.agreement_btn = QPushButton("Open agreement")
            self.agreement_btn.setToolTip("Open the uploaded agreement in the browser")
            actions.addWidget(self.agreement_btn)

        self.edit_btn: Optional[QPushButton] = None
        if self._config.validate_update is not None:
            self.edit_btn = QPushButton("Edit")
            actions.addWidget(self.edit_btn)

        self.status_btns: list[tuple[QPushButton, object]] = []
        if self._config.workflow is not None:
            for target in self._config.workflow.targets:
                btn = QPushButton(self._config.workflow.prompt(target, "").title)
                actions.addWidget(btn)
                self.status_btns.append((btn, target))

        self.delete_btn = QPushButton("Delete")
        self.delete_btn.setObjectName("danger_btn")
        actions.addWidget(self.delete_btn)
        actions.addStretch()
        layout.addLayout(actions)

        self.pagination = PaginationBar(self._controller.page_size.value)
        layout.addWidget(self.pagination)

    def _connect_signals(self) -> None:
        c = self._controller
        c.view.changed.connect(lambda _page: self._refresh())
        c.selection.changed.connect(lambda _ids: self._sync_selection())
        c.store.is_loading.changed.connect(self.loading_label.setVisible)
        c.store.error_message.changed.connect(self._on_error_changed)

        self.search_bar.search_changed.connect(c.set_query)
        self.pagination.page_requested.connect(c.set_page)
        self.pagination.page_size_changed.connect(c.set_page_size)
        self.model.toggled.connect(c.toggle)
        self.select_all.clicked.connect(self._on_select_all_clicked)

        self.bulk_delete_btn.clicked.connect(self._on_bulk_delete)
        self.delete_btn.clicked.connect(self._on_delete)
        if self.add_btn is not None:
            self.add_btn.clicked.connect(self._on_add)
        if self.edit_btn is not None:
            self.edit_btn.clicked.connect(self._on_edit)
        if self.view_btn is not None:
            self.view_btn.clicked.connect(self._on_view)
            self.table.doubleClicked.connect(lambda _index: self._on_view())
        if self.agreement_btn is not None:
            self.agreement_btn.clicked.connect(self._on_open_agreement)
        if self.refresh_btn is not None:
            self.refresh_btn.clicked.connect(self._on_refresh)
        for btn, target in self.status_btns:
            btn.clicked.connect(lambda _checked=False, t=target: self._on_change_status(t))

    # ----- rendering -----

    def _refresh(self) -> None:
        page = self._controller.page
        self.model.set_rows(page.rows, self._controller.selection.value)
        self.pagination.set_page(page)
        self.search_bar.set_result_count(page.total_filtered, self._controller.store.count)
        self.summary_label.setText(self._summary())
        self._sync_selection()

    def _summary(self) -> str:
        c = self._controller
        if isinstance(c, MessagesController):
            return f"{c.total_filtered} total messages • {c.unread_count} unread"
        if isinstance(c, (ReportsController, AgenciesController)):
            return " • ".join(f"{status.value.title()}: {n}" for status, n in c.tally.items())
        return f"{c.total_filtered} {self._config.kind}"

    def _sync_selection(self) -> None:
        c = self._controller
        self.model.set_selected(c.selection.value)
        if c.is_all_selected:
            state = Qt.Checked
        elif c.is_indeterminate:
            state = Qt.PartiallyChecked
        else:
            state = Qt.Unchecked
        self.select_all.blockSignals(True)
        self.select_all.setCheckState(state)
        self.select_all.blockSignals(False)

        count = c.selection.count
        self.bulk_delete_btn.setVisible(count > 0)
        self.bulk_delete_btn.setText(f"Delete selected ({count})")

    def _on_error_changed(self, message: Optional[str]) -> None:
        self.error_label.setText(message or "")
        self.error_label.setVisible(bool(message))
        self.table.setVisible(not message)

    def _current_entity(self):
        index = self.table.currentIndex()
        if not index.isValid():
            return None
        return self.model.entity_at(index.row())

    # ----- actions -----

    def _on_select_all_clicked(self) -> None:
        self._controller.toggle_all()
        self._sync_selection()

    @qasync.asyncSlot()
    async def ensure_loaded(self) -> None:
        """Fetch the collection the first time the tab is shown."""
        if self._loaded:
            return
        self._loaded = True
        await self._controller.load()

    @qasync.asyncSlot()
    async def _on_refresh(self) -> None:
        await self._controller.refresh()

    @qasync.asyncSlot()
    async def _on_delete(self) -> None:
        entity = self._current_entity()
        if entity is not None:
            await self._controller.delete(entity.id)

    @qasync.asyncSlot()
    async def _on_bulk_delete(self) -> None:
        await self._controller.delete_selected()

    @qasync.asyncSlot(object)
    async def _on_change_status(self, target) -> None:
        entity = self._current_entity()
        if entity is not None:
            await self._controller.change_status(entity.id, target)

    @qasync.asyncSlot()
    async def _on_view(self) -> None:
        entity = self._current_entity()
        if entity is None:
            return
        if isinstance(self._controller, ReportsController):
            ReportDetailsDialog(entity, self).exec()
            return
        message = await self._controller.view_details(entity.id)
        if message is not None:
            MessageDetailsDialog(message, self).exec()

    def _on_open_agreement(self) -> Optional[str]:
        entity = self._current_entity()
        if entity is None:
            return None
        url = self._controller.agreement_url(entity.id)
        if url is None:
            self._controller.notifier.info("No agreement", f"{entity.name} has not uploaded an agreement.")
            return None
        logger.info(f"Opening agreement for agency {entity.id!r}")
        QDesktopServices.openUrl(QUrl(url))
        return url

    @qasync.asyncSlot()
    async def _on_add(self) -> None:
        if isinstance(self._controller, AgenciesController):
            fields = AGENCY_CREATE_FIELDS
        else:
            fields = CATEGORY_FIELDS
        title = f"Add {self._config.noun.title()}"
        await self._run_form(title, FormDialog(title, fields, parent=self))

    @qasync.asyncSlot()
    async def _on_edit(self) -> None:
        entity = self._current_entity()
        if entity is None:
            return
        if isinstance(self._controller, AgenciesController):
            fields = AGENCY_EDIT_FIELDS
            values = {"name": entity.name, "email": entity.email, "phone_number": entity.phone}
        else:
            fields = CATEGORY_FIELDS
            values = {"name": entity.name, "comment": entity.comment}
        title = f"Edit {self._config.noun.title()}"
        await self._run_form(title, FormDialog(title, fields, values, parent=self), entity.id)

    async def _run_form(self, title: str, dialog: FormDialog, id=None) -> None:
        # Re-open the form until it validates or the user cancels
        while dialog.exec() == FormDialog.Accepted:
            try:
                await self._controller.save(dialog.values(), id)
                return
            except ValidationError as e:
                logger.info(f"{title}: {len(e.errors)} invalid field(s)")
                dialog.set_errors(e.errors)
