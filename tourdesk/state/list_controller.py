"""List-management controller shared by every admin screen.

A controller composes one ``EntityListStore`` with the screen's query,
page window and selection, and routes every destructive or state-changing
action through the gate registry. It is the single place where remote
failures are caught and turned into notifications; nothing raised by the
gateway escapes an event handler.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional

from PySide6.QtCore import QObject

from tourdesk.data.errors import FetchError, MutationError, describe_error
from tourdesk.domain.models import EntityId
from tourdesk.services.gate import ActionGate, ConfirmPrompt, Confirmer, GateRegistry, GateState
from tourdesk.services.notifications import NotificationChannel
from tourdesk.services.paging import (
    PAGE_SIZE_OPTIONS,
    PageResult,
    clamp_page_index,
    filter_rows,
    visible_page,
)
from tourdesk.services.selection import SelectionTracker
from tourdesk.services.workflow import StatusWorkflow, TransitionError
from tourdesk.state.list_store import EntityListStore
from tourdesk.state.observable import Derived, Observable

logger = logging.getLogger(__name__)

Validator = Callable[[dict[str, Any]], dict[str, Any]]


def _default_label(entity: Any) -> str:
    return getattr(entity, "name", None) or f"#{entity.id}"


@dataclass(frozen=True)
class ScreenConfig:
    """Per-screen wording, search fields and optional capabilities.

    Attributes:
        kind: Plural collection name ("messages")
        noun: Singular name used in sentences ("message")
        match_fields: Entity fields the search box matches against
        label: Produces the name shown for one entity in prompts
        delete_title: Title of the single-delete prompt
        delete_text: Body of the single-delete prompt; ``{label}`` and
            ``{noun}`` are substituted
        delete_confirm_label: Confirm button text for single delete
        deleted_text: Success text after single delete
        workflow: Status workflow, if the screen changes statuses
        validate_create: Form validator for new entities
        validate_update: Form validator for edits
        field_aliases: Payload keys whose entity field has another name
    """

    kind: str
    noun: str
    match_fields: tuple[str, ...]
    label: Callable[[Any], str] = _default_label
    delete_title: str = "Confirm Deletion"
    delete_text: str = "This will permanently delete the {noun}."
    delete_confirm_label: str = "Delete"
    deleted_text: str = "{Noun} has been removed."
    workflow: Optional[StatusWorkflow] = None
    validate_create: Optional[Validator] = None
    validate_update: Optional[Validator] = None
    field_aliases: Mapping[str, str] = field(default_factory=dict)

    def _fill(self, template: str, entity: Any) -> str:
        return template.format(label=self.label(entity), noun=self.noun, Noun=self.noun.capitalize())

    def delete_prompt(self, entity: Any) -> ConfirmPrompt:
        return ConfirmPrompt(
            title=self._fill(self.delete_title, entity),
            text=self._fill(self.delete_text, entity),
            confirm_label=self.delete_confirm_label,
        )

    def deleted_message(self, entity: Any) -> str:
        return self._fill(self.deleted_text, entity)

    def bulk_delete_prompt(self, count: int) -> ConfirmPrompt:
        return ConfirmPrompt(
            title=f"Delete {count} {self.kind}?",
            text="This action cannot be undone.",
            confirm_label=f"Delete ({count})",
        )


class ListController(QObject):
    """Search, paging, selection and gated mutations for one collection.

    Derived values (``page``, ``total_filtered``, ``visible_ids`` and the
    select-all flags) are computed from the store on every read. The
    ``view`` derived observable re-emits the current page whenever the
    collection, query or page window changes.

    Example:
        >>> controller = ListController(store, config, notifier, confirmer)
        >>> await controller.load()
        >>> controller.set_query("jo")
        >>> controller.toggle_all()
        >>> await controller.delete_selected()
    """

    def __init__(
        self,
        store: EntityListStore,
        config: ScreenConfig,
        notifier: NotificationChannel,
        confirmer: Confirmer,
        page_size: int = 10,
        gates: Optional[GateRegistry] = None,
        parent: Optional[QObject] = None,
    ):
        super().__init__(parent)
        self.store = store
        self.config = config
        self.notifier = notifier
        self._confirmer = confirmer
        self.gates = gates or GateRegistry()

        self.query: Observable[str] = Observable("", self)
        self.page_index: Observable[int] = Observable(0, self)
        self.page_size: Observable[int] = Observable(page_size, self)
        self.selection = SelectionTracker(self)

        self.view: Derived[PageResult] = Derived(
            self._project, store.items, self.query, self.page_index, self.page_size, parent=self
        )

        store.items.changed.connect(self._on_items_changed)

    # ----- derived reads -----

    def _project(self) -> PageResult:
        return visible_page(
            self.store.items.value,
            self.query.value,
            self.page_index.value,
            self.page_size.value,
            self.config.match_fields,
        )

    @property
    def page(self) -> PageResult:
        return self._project()

    @property
    def total_filtered(self) -> int:
        return len(self.visible_ids)

    @property
    def visible_ids(self) -> list[EntityId]:
        """Identifiers of every row matching the query, across all pages."""
        rows = filter_rows(self.store.items.value, self.query.value, self.config.match_fields)
        return [e.id for e in rows]

    @property
    def is_all_selected(self) -> bool:
        return self.selection.is_all_selected(self.total_filtered)

    @property
    def is_indeterminate(self) -> bool:
        return self.selection.is_indeterminate(self.total_filtered)

    @property
    def has_selection(self) -> bool:
        return self.selection.count > 0

    def set_confirmer(self, confirmer: Confirmer) -> None:
        self._confirmer = confirmer

    # ----- query, paging, selection -----

    def _reconcile(self) -> None:
        visible = self.visible_ids
        self.page_index.set(clamp_page_index(self.page_index.value, len(visible), self.page_size.value))
        self.selection.reconcile(visible)

    def _on_items_changed(self, _items: object) -> None:
        self._reconcile()

    def set_query(self, query: str) -> None:
        """Change the search text; returns to the first page."""
        if self.query.set(query):
            self.page_index.set(0)
            self._reconcile()

    def set_page(self, page_index: int) -> None:
        self.page_index.set(clamp_page_index(page_index, self.total_filtered, self.page_size.value))

    def set_page_size(self, page_size: int) -> None:
        """Change rows per page; returns to the first page.

        Raises:
            ValueError: If the size is not one of the offered options
        """
        if page_size not in PAGE_SIZE_OPTIONS:
            raise ValueError(f"Rows per page must be one of {PAGE_SIZE_OPTIONS}")
        if self.page_size.set(page_size):
            self.page_index.set(0)

    def toggle(self, id: EntityId) -> None:
        if id not in self.visible_ids:
            logger.debug(f"Ignoring selection of hidden {self.config.noun} {id!r}")
            return
        self.selection.toggle(id)

    def toggle_all(self) -> None:
        self.selection.toggle_all(self.visible_ids)

    # ----- remote operations -----

    async def load(self) -> bool:
        """Fetch the collection; failures become an error notification.

        Returns:
            True if the collection was loaded
        """
        try:
            await self.store.load()
        except FetchError as e:
            self.notifier.error("Error!", f"Failed to load {self.config.kind}. {describe_error(e)}")
            return False
        self._reconcile()
        return True

    def _report(self, gate: Optional[ActionGate], title: str, done: str, failed: str) -> None:
        if gate is None:
            return
        if gate.state == GateState.SUCCEEDED:
            self.selection.discard(gate.targets)
            self.notifier.success(title, done)
        elif gate.state == GateState.FAILED:
            self.notifier.error("Error!", f"{failed} {describe_error(gate.error)}")

    async def delete(self, id: EntityId) -> Optional[ActionGate]:
        """Confirm and delete one entity.

        Returns:
            The finished gate, or None if nothing was started
        """
        entity = self.store.get(id)
        if entity is None:
            logger.warning(f"Cannot delete unknown {self.config.noun} {id!r}")
            return None

        async def action() -> None:
            await self.store.remove(id)

        gate = await self.gates.run({id}, self.config.delete_prompt(entity), action, self._confirmer)
        self._report(
            gate,
            "Deleted!",
            self.config.deleted_message(entity),
            f"Failed to delete {self.config.noun}.",
        )
        return gate

    async def delete_selected(self) -> Optional[ActionGate]:
        """Confirm and delete every selected entity with one request."""
        targets = self.selection.value
        if not targets:
            return None
        count = len(targets)

        async def action() -> None:
            await self.store.remove_many(targets)

        gate = await self.gates.run(targets, self.config.bulk_delete_prompt(count), action, self._confirmer)
        self._report(
            gate,
            "Deleted!",
            f"{count} {self.config.kind} have been removed.",
            f"Failed to delete {self.config.kind}.",
        )
        return gate

    async def change_status(self, id: EntityId, status) -> Optional[ActionGate]:
        """Confirm and move an entity to another status.

        Args:
            id: Entity identifier
            status: Target status (enum member or wire value)

        Returns:
            The finished gate, or None if the change was rejected up front
        """
        workflow = self.config.workflow
        entity = self.store.get(id)
        if workflow is None or entity is None:
            self.notifier.error("Error!", "This action is not available for this screen.")
            return None

        try:
            target = workflow.coerce(status)
            workflow.check(workflow.status_of(entity), target)
        except TransitionError as e:
            self.notifier.info("No change", str(e))
            return None

        label = self.config.label(entity)

        async def action() -> None:
            await self.store.update_status(id, target)

        gate = await self.gates.run({id}, workflow.prompt(target, label), action, self._confirmer)
        if gate is not None and gate.state == GateState.SUCCEEDED:
            self.notifier.success("Updated!", workflow.done_message(target, label))
        elif gate is not None and gate.state == GateState.FAILED:
            self.notifier.error(
                "Error!",
                f"Failed to update {self.config.noun} status to {target.value}. {describe_error(gate.error)}",
            )
        return gate

    async def save(self, fields: dict[str, Any], id: Optional[EntityId] = None) -> Optional[Any]:
        """Validate a create/edit form and persist it.

        Args:
            fields: Raw form values
            id: Entity to edit, or None to create

        Returns:
            The saved entity, or None if saving failed or the entity
            already has a pending action (already notified)

        Raises:
            ValidationError: If the form is invalid; nothing is sent
        """
        validator = self.config.validate_create if id is None else self.config.validate_update
        if validator is None:
            self.notifier.error("Error!", "This action is not available for this screen.")
            return None

        payload = validator(fields)
        if id is not None and not self.gates.claim({id}, f"Update {self.config.noun}"):
            self.notifier.info("Please wait", f"This {self.config.noun} already has a pending action.")
            return None
        try:
            entity = await self.store.patch(id, payload)
        except MutationError as e:
            verb = "create" if id is None else "update"
            self.notifier.error("Error!", f"Failed to {verb} {self.config.noun}. {describe_error(e)}")
            return None
        finally:
            if id is not None:
                self.gates.unclaim({id})

        if entity is not None:
            verb = "created" if id is None else "updated"
            title = "Created!" if id is None else "Updated!"
            self.notifier.success(title, f"{self.config.label(entity)} has been {verb} successfully.")
        return entity

    def dispose(self) -> None:
        """Screen unmounted: drop late results and the selection."""
        self.store.dispose()
        self.selection.clear()
