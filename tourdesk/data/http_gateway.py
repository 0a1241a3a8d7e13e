"""httpx implementation of the remote collection gateways."""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterable, Optional, TypeVar
from urllib.parse import unquote

import httpx

from tourdesk.data.errors import GatewayError
from tourdesk.data.gateway import CollectionGateway, MessageGateway, StatsGateway
from tourdesk.domain.models import Agency, AgencyStatus, DashboardStats, EntityId, Message
from tourdesk.domain.settings import ApiSettings

logger = logging.getLogger(__name__)

E = TypeVar("E")


@dataclass(frozen=True)
class Routes:
    """URL templates for one entity kind.

    ``item`` and ``status`` contain an ``{id}`` placeholder. A route left as
    None means the API does not offer that operation for this kind.
    """

    list: str
    item: str
    create: Optional[str] = None
    bulk_delete: Optional[str] = None
    status: Optional[str] = None


def create_client(api: ApiSettings, transport: Optional[httpx.AsyncBaseTransport] = None) -> httpx.AsyncClient:
    """Create the shared HTTP client for all gateways.

    The client keeps the session cookies and mirrors the CSRF token cookie
    into the request header on every call.

    Args:
        api: Connection settings
        transport: Optional transport override (e.g. httpx.MockTransport)
    """
    client = httpx.AsyncClient(
        base_url=api.base_url,
        timeout=api.timeout_seconds,
        transport=transport,
        headers={
            "Accept": "application/json",
            "Content-Type": "application/json",
        },
    )

    async def attach_xsrf_token(request: httpx.Request) -> None:
        token = client.cookies.get(api.xsrf_cookie)
        if token:
            request.headers[api.xsrf_header] = unquote(token)

    client.event_hooks = {"request": [attach_xsrf_token], "response": []}
    return client


def _unwrap(body: Any) -> Any:
    """Strip a Laravel resource envelope ({"data": ...}) if present."""
    if isinstance(body, dict) and "data" in body:
        return body["data"]
    return body


def _find_entity(body: Any) -> Optional[dict]:
    """Locate the entity dict in a create/update response.

    Accepts the bare entity, a {"data": entity} envelope, or a wrapper such
    as {"message": "...", "category": entity}.
    """
    body = _unwrap(body)
    if not isinstance(body, dict):
        return None
    if "id" in body:
        return body
    for value in body.values():
        if isinstance(value, dict) and "id" in value:
            return value
    return None


class HttpCollectionGateway(CollectionGateway[E], Generic[E]):
    """REST gateway for one entity kind.

    Example:
        >>> gateway = HttpCollectionGateway(client, routes, Category.from_api, "categories")
        >>> categories = await gateway.list_all()
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        routes: Routes,
        parse: Callable[[dict], E],
        kind: str,
    ):
        """Initialize the gateway.

        Args:
            client: Shared HTTP client
            routes: URL templates for this kind
            parse: Builds an entity from a JSON object
            kind: Collection name used in log and error messages
        """
        self._client = client
        self._routes = routes
        self._parse = parse
        self.kind = kind

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        logger.debug(f"{method} {path}")
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.warning(f"{method} {path} transport failure: {e}")
            raise GatewayError.from_transport(e) from e

        if response.is_error:
            error = GatewayError.from_response(response)
            logger.warning(f"{error} ({error.server_message or 'no message'})")
            raise error
        return response

    def _route(self, template: Optional[str], operation: str, id: Optional[EntityId] = None) -> str:
        if template is None:
            raise GatewayError(f"{operation} is not supported for {self.kind}")
        return template.format(id=id) if id is not None else template

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return None

    async def list_all(self) -> list[E]:
        response = await self._request("GET", self._routes.list)
        body = _unwrap(self._json(response))
        if not isinstance(body, list):
            raise GatewayError(f"Unexpected {self.kind} list payload", response.status_code)
        return [self._parse(item) for item in body]

    async def create(self, fields: dict[str, Any]) -> E:
        path = self._route(self._routes.create, "create")
        response = await self._request("POST", path, json=fields)
        entity = _find_entity(self._json(response))
        if entity is None:
            raise GatewayError(f"Create {self.kind} returned no entity", response.status_code)
        return self._parse(entity)

    async def update(self, id: EntityId, fields: dict[str, Any]) -> Optional[E]:
        response = await self._request("PUT", self._route(self._routes.item, "update", id), json=fields)
        entity = _find_entity(self._json(response))
        return self._parse(entity) if entity is not None else None

    async def delete(self, id: EntityId) -> None:
        await self._request("DELETE", self._route(self._routes.item, "delete", id))

    async def delete_many(self, ids: Iterable[EntityId]) -> None:
        path = self._route(self._routes.bulk_delete, "bulk delete")
        await self._request("POST", path, json={"ids": list(ids)})

    async def change_status(self, id: EntityId, status: str) -> None:
        path = self._route(self._routes.status, "status change", id)
        await self._request("PUT", path, json={"status": status})


class HttpMessageGateway(HttpCollectionGateway, MessageGateway):
    """Message gateway with the mark-as-read endpoint."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        routes: Routes,
        mark_read_route: str = "/api/messages/{id}/mark-read",
        kind: str = "messages",
    ):
        super().__init__(client, routes, Message.from_api, kind)
        self._mark_read_route = mark_read_route

    async def mark_read(self, id: EntityId) -> None:
        await self._request("PUT", self._mark_read_route.format(id=id))


class HttpAgencyGateway(HttpCollectionGateway):
    """Agency gateway.

    The list endpoint returns user accounts and agency profiles separately;
    rows are keyed by user id while the agency endpoints expect the agency
    profile id, so the mapping from the last listing is kept here.
    """

    APPROVE_ROUTE = "/api/agencies/approve/{id}"
    REJECT_ROUTE = "/api/agencies/reject/{id}"

    def __init__(self, client: httpx.AsyncClient, routes: Routes, kind: str = "agencies"):
        super().__init__(client, routes, Agency.from_api, kind)
        self._agency_ids: dict[EntityId, EntityId] = {}

    def _remote_id(self, id: EntityId) -> EntityId:
        return self._agency_ids.get(id, id)

    async def list_all(self) -> list[Agency]:
        response = await self._request("GET", self._routes.list)
        body = self._json(response) or {}
        if not isinstance(body, dict):
            raise GatewayError("Unexpected agencies list payload", response.status_code)

        profiles = {a.get("user_id"): a for a in body.get("agencies") or []}
        agencies = [Agency.from_api(user, profiles.get(user["id"])) for user in body.get("users") or []]
        self._agency_ids = {a.id: a.remote_id for a in agencies}
        return agencies

    async def create(self, fields: dict[str, Any]) -> Agency:
        path = self._route(self._routes.create, "create")
        response = await self._request("POST", path, json=fields)
        body = _unwrap(self._json(response)) or {}
        user = body.get("user") if isinstance(body, dict) else None
        if isinstance(user, dict) and "id" in user:
            agency = Agency.from_api(user, body.get("agency"))
        else:
            entity = _find_entity(body)
            if entity is None:
                raise GatewayError("Create agencies returned no entity", response.status_code)
            agency = Agency.from_api(entity)
        self._agency_ids[agency.id] = agency.remote_id
        return agency

    async def update(self, id: EntityId, fields: dict[str, Any]) -> Optional[Agency]:
        path = self._route(self._routes.item, "update", self._remote_id(id))
        await self._request("PUT", path, json=fields)
        # The response describes the agency profile, not the merged row
        return None

    async def delete(self, id: EntityId) -> None:
        await super().delete(self._remote_id(id))
        self._agency_ids.pop(id, None)

    async def delete_many(self, ids: Iterable[EntityId]) -> None:
        ids = list(ids)
        await super().delete_many([self._remote_id(i) for i in ids])
        for i in ids:
            self._agency_ids.pop(i, None)

    async def change_status(self, id: EntityId, status: str) -> None:
        remote_id = self._remote_id(id)
        if status == AgencyStatus.APPROVED.value:
            await self._request("POST", self.APPROVE_ROUTE.format(id=remote_id))
        elif status == AgencyStatus.REJECTED.value:
            await self._request("POST", self.REJECT_ROUTE.format(id=remote_id))
        else:
            await super().change_status(remote_id, status)


class HttpStatsGateway(StatsGateway):
    """Dashboard statistics endpoint."""

    def __init__(self, client: httpx.AsyncClient, route: str = "/api/stats"):
        self._client = client
        self._route = route

    async def fetch_stats(self) -> DashboardStats:
        try:
            response = await self._client.get(self._route)
        except httpx.HTTPError as e:
            raise GatewayError.from_transport(e) from e
        if response.is_error:
            raise GatewayError.from_response(response)
        try:
            body = response.json()
        except ValueError:
            raise GatewayError("Unexpected stats payload", response.status_code) from None
        return DashboardStats.from_api(_unwrap(body) or {})
