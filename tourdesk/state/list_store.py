"""Authoritative in-memory collection for one admin screen.

The store is the only component that mutates the collection. Every
mutation calls the gateway first and only patches the local collection once
the call has succeeded; a failed call leaves the collection untouched. There
is no re-fetch after a mutation.

Derived counts are never stored here; callers compute them from ``items``
on every read.
"""

import logging
from typing import Any, Callable, Generic, Iterable, Optional, TypeVar

from PySide6.QtCore import QObject

from tourdesk.data.errors import FetchError, GatewayError, MutationError
from tourdesk.data.gateway import CollectionGateway, MessageGateway
from tourdesk.domain.models import EntityId, Message, MessageStatus
from tourdesk.state.observable import Observable

logger = logging.getLogger(__name__)

E = TypeVar("E")


class EntityListStore(QObject, Generic[E]):
    """Holds the entity collection plus its loading and error state.

    Example:
        >>> store = EntityListStore(gateway, kind="reports")
        >>> await store.load()
        >>> await store.update_status(7, ReportStatus.REVIEWED)
        >>> store.get(7).status  # ReportStatus.REVIEWED
    """

    def __init__(
        self,
        gateway: CollectionGateway,
        kind: str,
        field_aliases: Optional[dict[str, str]] = None,
        parent: Optional[QObject] = None,
    ):
        """Initialize an empty store.

        Args:
            gateway: Remote collection the store mirrors
            kind: Collection name used in messages ("agencies", "reports", ...)
            field_aliases: Payload keys that map to a differently named
                entity field (e.g. ``phone_number`` -> ``phone``)
            parent: Optional Qt parent object
        """
        super().__init__(parent)
        self._gateway = gateway
        self.kind = kind
        self._field_aliases = dict(field_aliases or {})
        self._disposed = False

        self.items: Observable[list] = Observable([], self)
        self.is_loading: Observable[bool] = Observable(False, self)
        self.error_message: Observable[Optional[str]] = Observable(None, self)

    # ----- reads -----

    @property
    def gateway(self) -> CollectionGateway:
        return self._gateway

    @property
    def count(self) -> int:
        return len(self.items.value)

    @property
    def ids(self) -> list[EntityId]:
        return [e.id for e in self.items.value]

    def get(self, id: EntityId) -> Optional[E]:
        return next((e for e in self.items.value if e.id == id), None)

    def count_where(self, predicate: Callable[[E], bool]) -> int:
        return sum(1 for e in self.items.value if predicate(e))

    # ----- lifecycle -----

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    def dispose(self) -> None:
        """Detach the store from its screen.

        Responses that arrive afterwards are discarded instead of being
        applied to a view that no longer exists.
        """
        self._disposed = True

    def _stale(self, operation: str) -> bool:
        if self._disposed:
            logger.debug(f"Discarding {operation} result for disposed {self.kind} store")
            return True
        return False

    # ----- mutations -----

    async def load(self) -> None:
        """Replace the whole collection with the server's current snapshot.

        Raises:
            FetchError: If the request fails. The previous collection is kept
                and ``error_message`` is set for display. A failure that
                arrives after ``dispose`` is dropped silently.
        """
        self.is_loading.set(True)
        try:
            entities = await self._gateway.list_all()
        except GatewayError as e:
            if self._stale("load failure"):
                return
            self.error_message.set(f"Failed to load {self.kind}.")
            raise FetchError(f"Failed to load {self.kind}", cause=e) from e
        finally:
            if not self._disposed:
                self.is_loading.set(False)

        if self._stale("load"):
            return

        unique: dict[EntityId, E] = {}
        for entity in entities:
            if entity.id in unique:
                logger.warning(f"Duplicate {self.kind} id {entity.id!r} in listing; keeping first")
                continue
            unique[entity.id] = entity

        self.items.set(list(unique.values()))
        self.error_message.set(None)
        logger.info(f"Loaded {len(unique)} {self.kind}")

    def _require(self, id: EntityId) -> E:
        entity = self.get(id)
        if entity is None:
            raise MutationError(f"No {self.kind} record with id {id!r}")
        return entity

    def _replace(self, id: EntityId, new_entity: E) -> None:
        self.items.set([new_entity if e.id == id else e for e in self.items.value])

    async def remove(self, id: EntityId) -> None:
        """Delete one entity.

        Raises:
            MutationError: If the entity is unknown or the request fails
        """
        self._require(id)
        try:
            await self._gateway.delete(id)
        except GatewayError as e:
            raise MutationError(f"Failed to delete {self.kind} {id!r}", cause=e) from e

        if self._stale("delete"):
            return
        self.items.set([e for e in self.items.value if e.id != id])
        logger.info(f"Deleted {self.kind} {id!r}")

    async def remove_many(self, ids: Iterable[EntityId]) -> None:
        """Delete several entities with a single bulk request.

        Either every id is removed locally (request succeeded) or none is.

        Raises:
            MutationError: If the request fails
        """
        targets = frozenset(ids)
        if not targets:
            return
        try:
            await self._gateway.delete_many(sorted(targets, key=str))
        except GatewayError as e:
            raise MutationError(f"Failed to delete {len(targets)} {self.kind}", cause=e) from e

        if self._stale("bulk delete"):
            return
        self.items.set([e for e in self.items.value if e.id not in targets])
        logger.info(f"Deleted {len(targets)} {self.kind}")

    async def update_status(self, id: EntityId, status) -> None:
        """Change an entity's status, keeping its other fields and position.

        Args:
            id: Entity identifier
            status: New status enum member

        Raises:
            MutationError: If the entity is unknown or the request fails
        """
        self._require(id)
        try:
            await self._gateway.change_status(id, status.value)
        except GatewayError as e:
            raise MutationError(
                f"Failed to set {self.kind} {id!r} to {status.value}", cause=e
            ) from e

        if self._stale("status change"):
            return
        # Re-read after the await so concurrent edits to other fields survive
        current = self.get(id)
        if current is not None:
            self._replace(id, current.with_updates(status=status))
            logger.info(f"{self.kind} {id!r} status -> {status.value}")

    async def patch(self, id: Optional[EntityId], fields: dict[str, Any]) -> Optional[E]:
        """Create (id is None) or update an entity from form fields.

        A create appends the server's entity; an update merges into the
        existing entity in place.

        Returns:
            The created or updated entity, or None if the result was discarded

        Raises:
            MutationError: If the entity is unknown or the request fails
        """
        if id is None:
            try:
                created = await self._gateway.create(fields)
            except GatewayError as e:
                raise MutationError(f"Failed to create {self.kind}", cause=e) from e
            if self._stale("create"):
                return None
            if self.get(created.id) is not None:
                self._replace(created.id, created)
            else:
                self.items.set(self.items.value + [created])
            logger.info(f"Created {self.kind} {created.id!r}")
            return created

        self._require(id)
        try:
            echoed = await self._gateway.update(id, fields)
        except GatewayError as e:
            raise MutationError(f"Failed to update {self.kind} {id!r}", cause=e) from e
        if self._stale("update"):
            return None

        current = self.get(id)
        if current is None:
            return None
        updated = current.with_updates(
            **{self._field_aliases.get(k, k): v for k, v in fields.items()}
        )
        if echoed is not None:
            updated = echoed.with_updates(id=id)
        self._replace(id, updated)
        logger.info(f"Updated {self.kind} {id!r}")
        return updated


class MessageListStore(EntityListStore):
    """Message store with the read-on-view side effect."""

    def __init__(self, gateway: MessageGateway, kind: str = "messages", parent: Optional[QObject] = None):
        super().__init__(gateway, kind, parent=parent)

    async def mark_read(self, id: EntityId) -> Message:
        """Mark a message as read.

        Already-read messages are returned unchanged without a request;
        nothing ever moves a message back to unread.

        Raises:
            MutationError: If the message is unknown or the request fails
        """
        message = self._require(id)
        if not message.is_unread:
            return message
        try:
            await self._gateway.mark_read(id)
        except GatewayError as e:
            raise MutationError(f"Failed to mark message {id!r} as read", cause=e) from e

        current = self.get(id) or message
        if self._stale("mark read"):
            return current
        read = current.with_updates(status=MessageStatus.READ)
        self._replace(id, read)
        return read
