"""Concrete admin screens built on ``ListController``.

Each screen differs only in its search fields, wording and the extra
capabilities layered on top (status workflow, forms, unread count).
"""

import logging
from typing import Optional

from PySide6.QtCore import QObject

from tourdesk.data.errors import MutationError, describe_error
from tourdesk.data.gateway import CollectionGateway, MessageGateway
from tourdesk.domain.forms import validate_agency_create, validate_agency_update, validate_category
from tourdesk.domain.models import (
    AgencyStatus,
    EntityId,
    Message,
    MessageStatus,
    ReportStatus,
)
from tourdesk.services.gate import ActionGate, Confirmer
from tourdesk.services.notifications import NotificationChannel
from tourdesk.services.workflow import AGENCY_WORKFLOW, REPORT_WORKFLOW
from tourdesk.state.list_controller import ListController, ScreenConfig
from tourdesk.state.list_store import EntityListStore, MessageListStore
from tourdesk.state.observable import Derived

logger = logging.getLogger(__name__)


AGENCIES = ScreenConfig(
    kind="agencies",
    noun="agency",
    match_fields=("name", "email", "phone"),
    delete_title="Delete Agency",
    delete_text="Are you sure you want to delete {label}? This action cannot be undone.",
    delete_confirm_label="Yes, delete it!",
    deleted_text="The agency and associated user have been deleted.",
    workflow=AGENCY_WORKFLOW,
    validate_create=validate_agency_create,
    validate_update=validate_agency_update,
    field_aliases={"phone_number": "phone"},
)

TOURISTS = ScreenConfig(
    kind="tourists",
    noun="tourist",
    match_fields=("name", "email", "phone_number"),
    delete_text="This will permanently delete the tourist account.",
    deleted_text="Tourist account has been removed.",
)

MESSAGES = ScreenConfig(
    kind="messages",
    noun="message",
    match_fields=("name", "email", "phone", "subject", "message"),
    label=lambda m: m.subject or f"message from {m.name}",
)

REPORTS = ScreenConfig(
    kind="reports",
    noun="report",
    match_fields=(
        "reporter_name",
        "reporter_email",
        "tour_title",
        "agency_name",
        "reason",
        "description",
    ),
    label=lambda r: f"report #{r.id}",
    workflow=REPORT_WORKFLOW,
)

CATEGORIES = ScreenConfig(
    kind="categories",
    noun="category",
    match_fields=("name", "comment"),
    delete_title="Delete Category",
    delete_text='Are you sure you want to delete "{label}"? This action cannot be undone.',
    delete_confirm_label="Yes, delete it!",
    deleted_text='Category "{label}" has been deleted.',
    validate_create=validate_category,
    validate_update=validate_category,
)


class AgenciesController(ListController):
    """Agencies screen: approval workflow plus add/edit forms."""

    def __init__(self, gateway: CollectionGateway, notifier: NotificationChannel, confirmer: Confirmer,
                 page_size: int = 10, storage_url: str = "http://localhost:8000/storage",
                 parent: Optional[QObject] = None):
        store = EntityListStore(gateway, AGENCIES.kind, field_aliases=AGENCIES.field_aliases)
        super().__init__(store, AGENCIES, notifier, confirmer, page_size=page_size, parent=parent)
        store.setParent(self)
        self.storage_url = storage_url.rstrip("/")

    @property
    def tally(self) -> dict[AgencyStatus, int]:
        return AGENCY_WORKFLOW.tally(self.store.items.value)

    def agreement_url(self, id: EntityId) -> Optional[str]:
        """Public link to an agency's uploaded agreement, if it has one.

        Stored values are paths on the API's public disk; absolute URLs are
        passed through unchanged.
        """
        agency = self.store.get(id)
        if agency is None or not agency.agreement_file:
            return None
        if agency.agreement_file.startswith(("http://", "https://")):
            return agency.agreement_file
        return f"{self.storage_url}/{agency.agreement_file.lstrip('/')}"

    async def approve(self, id: EntityId) -> Optional[ActionGate]:
        return await self.change_status(id, AgencyStatus.APPROVED)

    async def reject(self, id: EntityId) -> Optional[ActionGate]:
        return await self.change_status(id, AgencyStatus.REJECTED)


class TouristsController(ListController):
    """Tourists screen: search, single and bulk delete."""

    def __init__(self, gateway: CollectionGateway, notifier: NotificationChannel, confirmer: Confirmer,
                 page_size: int = 10, parent: Optional[QObject] = None):
        store = EntityListStore(gateway, TOURISTS.kind)
        super().__init__(store, TOURISTS, notifier, confirmer, page_size=page_size, parent=parent)
        store.setParent(self)


class MessagesController(ListController):
    """Messages screen with a derived unread count.

    Example:
        >>> messages.unread_count  # 1
        >>> message = await messages.view_details(7)
        >>> messages.unread_count  # 0
    """

    def __init__(self, gateway: MessageGateway, notifier: NotificationChannel, confirmer: Confirmer,
                 page_size: int = 10, parent: Optional[QObject] = None):
        store = MessageListStore(gateway, MESSAGES.kind)
        super().__init__(store, MESSAGES, notifier, confirmer, page_size=page_size, parent=parent)
        store.setParent(self)
        self.unread: Derived[int] = Derived(lambda: self.unread_count, store.items, parent=self)

    @property
    def unread_count(self) -> int:
        """Unread messages in the whole collection, counted on every read."""
        return self.store.count_where(lambda m: m.status == MessageStatus.UNREAD)

    async def view_details(self, id: EntityId) -> Optional[Message]:
        """Open a message, marking it read if it was unread.

        A failure to mark read is logged and does not prevent viewing. While
        another action on the message is pending it is shown as-is.

        Returns:
            The message to display, or None if it is unknown
        """
        message = self.store.get(id)
        if message is None:
            return None
        if not self.gates.claim({id}, "Mark message as read"):
            return message
        try:
            return await self.store.mark_read(id)
        except MutationError as e:
            logger.warning(f"Could not mark message {id!r} as read: {describe_error(e)}")
            return message
        finally:
            self.gates.unclaim({id})


class ReportsController(ListController):
    """Reports screen: pending/reviewed/ignored workflow with tallies."""

    def __init__(self, gateway: CollectionGateway, notifier: NotificationChannel, confirmer: Confirmer,
                 page_size: int = 10, parent: Optional[QObject] = None):
        store = EntityListStore(gateway, REPORTS.kind)
        super().__init__(store, REPORTS, notifier, confirmer, page_size=page_size, parent=parent)
        store.setParent(self)
        self.tallies: Derived[dict] = Derived(lambda: self.tally, store.items, parent=self)

    @property
    def tally(self) -> dict[ReportStatus, int]:
        return REPORT_WORKFLOW.tally(self.store.items.value)

    async def refresh(self) -> bool:
        """Re-fetch the reports (the only user-initiated retry path)."""
        return await self.load()

    async def mark_reviewed(self, id: EntityId) -> Optional[ActionGate]:
        return await self.change_status(id, ReportStatus.REVIEWED)

    async def mark_ignored(self, id: EntityId) -> Optional[ActionGate]:
        return await self.change_status(id, ReportStatus.IGNORED)

    async def mark_pending(self, id: EntityId) -> Optional[ActionGate]:
        return await self.change_status(id, ReportStatus.PENDING)


class CategoriesController(ListController):
    """Categories screen with create/edit forms."""

    def __init__(self, gateway: CollectionGateway, notifier: NotificationChannel, confirmer: Confirmer,
                 page_size: int = 10, parent: Optional[QObject] = None):
        store = EntityListStore(gateway, CATEGORIES.kind)
        super().__init__(store, CATEGORIES, notifier, confirmer, page_size=page_size, parent=parent)
        store.setParent(self)
