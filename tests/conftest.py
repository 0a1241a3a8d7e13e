"""Pytest fixtures and configuration."""

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from typing import Any, Callable, Iterable, Optional

import pytest

from tourdesk.data.errors import GatewayError
from tourdesk.data.gateway import CollectionGateway, MessageGateway
from tourdesk.domain.models import (
    Agency,
    AgencyStatus,
    Category,
    EntityId,
    Message,
    MessageStatus,
    Report,
    ReportStatus,
    Tourist,
)
from tourdesk.services.notifications import NotificationChannel


class FakeGateway(CollectionGateway):
    """In-memory gateway recording every call.

    Operations listed in ``fail_on`` raise a GatewayError instead of
    touching the data.
    """

    def __init__(self, entities: Iterable = (), build: Optional[Callable[[EntityId, dict], Any]] = None):
        self.entities = {e.id: e for e in entities}
        self.calls: list[tuple] = []
        self.fail_on: set[str] = set()
        self._build = build
        self._next_id = max([e.id for e in self.entities.values() if isinstance(e.id, int)], default=0) + 1

    def _call(self, operation: str, *args) -> None:
        self.calls.append((operation, *args))
        if operation in self.fail_on:
            raise GatewayError(f"{operation} failed", status_code=500)

    def operations(self) -> list[str]:
        return [call[0] for call in self.calls]

    async def list_all(self) -> list:
        self._call("list_all")
        return list(self.entities.values())

    async def create(self, fields: dict[str, Any]):
        self._call("create", fields)
        entity = self._build(self._next_id, fields)
        self._next_id += 1
        self.entities[entity.id] = entity
        return entity

    async def update(self, id: EntityId, fields: dict[str, Any]):
        self._call("update", id, fields)
        return None

    async def delete(self, id: EntityId) -> None:
        self._call("delete", id)
        self.entities.pop(id, None)

    async def delete_many(self, ids: Iterable[EntityId]) -> None:
        ids = list(ids)
        self._call("delete_many", ids)
        for id in ids:
            self.entities.pop(id, None)

    async def change_status(self, id: EntityId, status: str) -> None:
        self._call("change_status", id, status)


class FakeMessageGateway(FakeGateway, MessageGateway):
    async def mark_read(self, id: EntityId) -> None:
        self._call("mark_read", id)


class FakeConfirmer:
    """Async confirmer that answers with a fixed reply and records prompts."""

    def __init__(self, reply: bool = True):
        self.reply = reply
        self.prompts = []

    async def __call__(self, prompt) -> bool:
        self.prompts.append(prompt)
        return self.reply


@pytest.fixture
def make_message():
    """Factory fixture for creating test messages."""

    def _make(id, **kwargs):
        defaults = {
            "name": f"Sender {id}",
            "email": f"sender{id}@example.com",
            "message": "Hello",
            "status": MessageStatus.UNREAD,
        }
        defaults.update(kwargs)
        return Message(id=id, **defaults)

    return _make


@pytest.fixture
def make_report():
    """Factory fixture for creating test reports."""

    def _make(id, **kwargs):
        defaults = {"reason": "Spam", "status": ReportStatus.PENDING}
        defaults.update(kwargs)
        return Report(id=id, **defaults)

    return _make


@pytest.fixture
def make_tourist():
    def _make(id, **kwargs):
        defaults = {"name": f"Tourist {id}", "email": f"tourist{id}@example.com"}
        defaults.update(kwargs)
        return Tourist(id=id, **defaults)

    return _make


@pytest.fixture
def make_agency():
    def _make(id, **kwargs):
        defaults = {
            "name": f"Agency {id}",
            "email": f"agency{id}@example.com",
            "agency_id": id + 100,
            "status": AgencyStatus.PENDING,
        }
        defaults.update(kwargs)
        return Agency(id=id, **defaults)

    return _make


@pytest.fixture
def sample_messages(make_message):
    """One unread and one read message."""
    return [
        make_message(1, name="John", status=MessageStatus.UNREAD),
        make_message(2, name="Anna", status=MessageStatus.READ),
    ]


@pytest.fixture
def category_builder():
    def _build(id, fields):
        return Category(id=id, name=fields["name"], comment=fields.get("comment"))

    return _build


@pytest.fixture
def notifier(qapp):
    return NotificationChannel()


@pytest.fixture
def confirm_yes():
    return FakeConfirmer(True)


@pytest.fixture
def confirm_no():
    return FakeConfirmer(False)


@pytest.fixture
def make_gateway():
    """Factory fixture for in-memory collection gateways."""

    def _make(entities=(), build=None):
        return FakeGateway(entities, build)

    return _make


@pytest.fixture
def make_message_gateway():
    def _make(entities=()):
        return FakeMessageGateway(entities)

    return _make
