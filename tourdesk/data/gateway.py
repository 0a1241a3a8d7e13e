"""Abstract gateway interfaces for the remote admin API.

The gateway pattern keeps screens independent of the transport: the list
store only talks to these interfaces, and tests substitute in-memory
implementations.
"""

from abc import ABC, abstractmethod
from typing import Any, Generic, Iterable, Optional, TypeVar

from tourdesk.domain.models import DashboardStats, EntityId, Message

E = TypeVar("E")


class CollectionGateway(ABC, Generic[E]):
    """Abstract interface for one kind of remote collection."""

    @abstractmethod
    async def list_all(self) -> list[E]:
        """Fetch the full collection.

        Returns:
            All entities in server order

        Raises:
            GatewayError: If the request fails
        """
        ...

    @abstractmethod
    async def create(self, fields: dict[str, Any]) -> E:
        """Create an entity.

        Args:
            fields: Field values from the create form

        Returns:
            The created entity with its server-assigned identifier
        """
        ...

    @abstractmethod
    async def update(self, id: EntityId, fields: dict[str, Any]) -> Optional[E]:
        """Update an entity.

        Args:
            id: Entity identifier
            fields: Changed field values

        Returns:
            The updated entity if the server echoes it, None otherwise
        """
        ...

    @abstractmethod
    async def delete(self, id: EntityId) -> None:
        """Delete a single entity.

        Args:
            id: Entity identifier
        """
        ...

    @abstractmethod
    async def delete_many(self, ids: Iterable[EntityId]) -> None:
        """Delete several entities in one request.

        The call is treated as a single unit: either it succeeds and all ids
        are gone, or it raises and none are considered deleted.

        Args:
            ids: Entity identifiers
        """
        ...

    @abstractmethod
    async def change_status(self, id: EntityId, status: str) -> None:
        """Set the status of an entity.

        Args:
            id: Entity identifier
            status: New status value (wire form, e.g. "reviewed")
        """
        ...


class MessageGateway(CollectionGateway[Message]):
    """Message collection with the mark-as-read endpoint."""

    @abstractmethod
    async def mark_read(self, id: EntityId) -> None:
        """Mark a message as read.

        Args:
            id: Message identifier
        """
        ...


class StatsGateway(ABC):
    """Headline statistics for the dashboard header."""

    @abstractmethod
    async def fetch_stats(self) -> DashboardStats:
        """Fetch aggregate counts."""
        ...
