"""Tests for the httpx gateways using a mock transport."""

import json

import httpx
import pytest

from tourdesk.data.errors import GatewayError
from tourdesk.data.factory import (
    AGENCY_ROUTES,
    CATEGORY_ROUTES,
    MESSAGE_ROUTES,
    REPORT_ROUTES,
    create_gateways,
)
from tourdesk.data.http_gateway import (
    HttpAgencyGateway,
    HttpCollectionGateway,
    HttpMessageGateway,
    Routes,
    create_client,
)
from tourdesk.domain.models import AgencyStatus, Category, MessageStatus, Report, ReportStatus
from tourdesk.domain.settings import ApiSettings


class Recorder:
    """Mock transport handler with canned responses per (method, path)."""

    def __init__(self, responses=None):
        self.responses = responses or {}
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        status, body = self.responses.get((request.method, request.url.path), (200, None))
        if body is None:
            return httpx.Response(status)
        return httpx.Response(status, json=body)

    def last_json(self):
        return json.loads(self.requests[-1].content)


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
async def client(recorder):
    client = create_client(ApiSettings(base_url="http://api.test"), transport=httpx.MockTransport(recorder))
    yield client
    await client.aclose()


class TestClient:
    """Tests for the shared client."""

    @pytest.mark.asyncio
    async def test_xsrf_cookie_copied_to_header(self, client, recorder):
        client.cookies.set("XSRF-TOKEN", "abc%3D%3D")
        await client.get("/api/reports")
        assert recorder.requests[0].headers["X-XSRF-TOKEN"] == "abc=="

    @pytest.mark.asyncio
    async def test_no_header_without_cookie(self, client, recorder):
        await client.get("/api/reports")
        assert "X-XSRF-TOKEN" not in recorder.requests[0].headers

    @pytest.mark.asyncio
    async def test_json_headers(self, client, recorder):
        await client.get("/api/reports")
        assert recorder.requests[0].headers["Accept"] == "application/json"


class TestHttpCollectionGateway:
    """Tests for the generic REST gateway."""

    @pytest.mark.asyncio
    async def test_list_all(self, client, recorder):
        recorder.responses[("GET", "/api/reports")] = (200, [
            {"id": 1, "reason": "Spam", "status": "pending"},
            {"id": 2, "reason": "Scam", "status": "reviewed"},
        ])
        gateway = HttpCollectionGateway(client, REPORT_ROUTES, Report.from_api, "reports")
        reports = await gateway.list_all()
        assert [r.id for r in reports] == [1, 2]
        assert reports[1].status == ReportStatus.REVIEWED

    @pytest.mark.asyncio
    async def test_list_all_unwraps_data_envelope(self, client, recorder):
        recorder.responses[("GET", "/api/categories")] = (200, {"data": [{"id": 1, "name": "Hiking"}]})
        gateway = HttpCollectionGateway(client, CATEGORY_ROUTES, Category.from_api, "categories")
        categories = await gateway.list_all()
        assert categories == [Category(id=1, name="Hiking")]

    @pytest.mark.asyncio
    async def test_list_all_unexpected_payload(self, client, recorder):
        recorder.responses[("GET", "/api/reports")] = (200, {"message": "ok"})
        gateway = HttpCollectionGateway(client, REPORT_ROUTES, Report.from_api, "reports")
        with pytest.raises(GatewayError):
            await gateway.list_all()

    @pytest.mark.asyncio
    async def test_error_status_raises_gateway_error(self, client, recorder):
        recorder.responses[("DELETE", "/api/categories/4")] = (422, {"message": "Category is in use"})
        gateway = HttpCollectionGateway(client, CATEGORY_ROUTES, Category.from_api, "categories")
        with pytest.raises(GatewayError) as exc_info:
            await gateway.delete(4)
        assert exc_info.value.status_code == 422
        assert exc_info.value.server_message == "Category is in use"

    @pytest.mark.asyncio
    async def test_transport_error(self):
        def fail(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = create_client(ApiSettings(base_url="http://api.test"), transport=httpx.MockTransport(fail))
        gateway = HttpCollectionGateway(client, REPORT_ROUTES, Report.from_api, "reports")
        with pytest.raises(GatewayError) as exc_info:
            await gateway.list_all()
        assert exc_info.value.status_code is None
        await client.aclose()

    @pytest.mark.asyncio
    async def test_create_finds_wrapped_entity(self, client, recorder):
        recorder.responses[("POST", "/api/categories")] = (201, {
            "message": "Category created",
            "category": {"id": 9, "name": "Diving", "comment": None},
        })
        gateway = HttpCollectionGateway(client, CATEGORY_ROUTES, Category.from_api, "categories")
        created = await gateway.create({"name": "Diving", "comment": None})
        assert created.id == 9
        assert recorder.last_json() == {"name": "Diving", "comment": None}

    @pytest.mark.asyncio
    async def test_update_without_echo_returns_none(self, client, recorder):
        gateway = HttpCollectionGateway(client, CATEGORY_ROUTES, Category.from_api, "categories")
        assert await gateway.update(3, {"name": "X"}) is None
        assert recorder.requests[-1].method == "PUT"
        assert recorder.requests[-1].url.path == "/api/categories/3"

    @pytest.mark.asyncio
    async def test_delete_many_single_request(self, client, recorder):
        gateway = HttpCollectionGateway(client, REPORT_ROUTES, Report.from_api, "reports")
        await gateway.delete_many([1, 2, 3])
        assert len(recorder.requests) == 1
        assert recorder.requests[0].url.path == "/api/reports/delete-multiple"
        assert recorder.last_json() == {"ids": [1, 2, 3]}

    @pytest.mark.asyncio
    async def test_change_status(self, client, recorder):
        gateway = HttpCollectionGateway(client, REPORT_ROUTES, Report.from_api, "reports")
        await gateway.change_status(7, "reviewed")
        assert recorder.requests[0].method == "PUT"
        assert recorder.requests[0].url.path == "/api/reports/7/status"
        assert recorder.last_json() == {"status": "reviewed"}

    @pytest.mark.asyncio
    async def test_unsupported_operation(self, client, recorder):
        routes = Routes(list="/api/things", item="/api/things/{id}")
        gateway = HttpCollectionGateway(client, routes, Category.from_api, "things")
        with pytest.raises(GatewayError, match="not supported"):
            await gateway.change_status(1, "done")
        assert recorder.requests == []


class TestHttpMessageGateway:
    """Tests for the message gateway."""

    @pytest.mark.asyncio
    async def test_mark_read(self, client, recorder):
        gateway = HttpMessageGateway(client, MESSAGE_ROUTES)
        await gateway.mark_read(3)
        assert recorder.requests[0].method == "PUT"
        assert recorder.requests[0].url.path == "/api/messages/3/mark-read"

    @pytest.mark.asyncio
    async def test_list_parses_messages(self, client, recorder):
        recorder.responses[("GET", "/api/admin/messages")] = (200, [
            {"id": 1, "name": "John", "email": "j@x.io", "message": "Hi", "status": "unread"},
        ])
        gateway = HttpMessageGateway(client, MESSAGE_ROUTES)
        messages = await gateway.list_all()
        assert messages[0].status == MessageStatus.UNREAD


class TestHttpAgencyGateway:
    """Tests for the agency gateway's user/profile merging."""

    @pytest.fixture
    def listing(self, recorder):
        recorder.responses[("GET", "/api/admin/agencies")] = (200, {
            "users": [
                {"id": 5, "name": "Sun Tours", "email": "sun@x.io", "phone_number": "1"},
                {"id": 6, "name": "Moon Club", "email": "moon@x.io"},
            ],
            "agencies": [
                {"id": 42, "user_id": 5, "status": "pending", "type": "agency"},
            ],
        })

    @pytest.mark.asyncio
    async def test_list_merges_profiles(self, client, listing):
        gateway = HttpAgencyGateway(client, AGENCY_ROUTES)
        agencies = await gateway.list_all()
        assert [a.id for a in agencies] == [5, 6]
        assert agencies[0].agency_id == 42
        assert agencies[1].agency_id is None

    @pytest.mark.asyncio
    async def test_approve_uses_agency_id(self, client, recorder, listing):
        gateway = HttpAgencyGateway(client, AGENCY_ROUTES)
        await gateway.list_all()
        await gateway.change_status(5, AgencyStatus.APPROVED.value)
        assert recorder.requests[-1].method == "POST"
        assert recorder.requests[-1].url.path == "/api/agencies/approve/42"

    @pytest.mark.asyncio
    async def test_reject_uses_agency_id(self, client, recorder, listing):
        gateway = HttpAgencyGateway(client, AGENCY_ROUTES)
        await gateway.list_all()
        await gateway.change_status(5, AgencyStatus.REJECTED.value)
        assert recorder.requests[-1].url.path == "/api/agencies/reject/42"

    @pytest.mark.asyncio
    async def test_delete_falls_back_to_user_id(self, client, recorder, listing):
        gateway = HttpAgencyGateway(client, AGENCY_ROUTES)
        await gateway.list_all()
        await gateway.delete(6)
        assert recorder.requests[-1].url.path == "/api/agencies/6"

    @pytest.mark.asyncio
    async def test_create_reads_user_and_agency(self, client, recorder):
        recorder.responses[("POST", "/api/admin/add-agency")] = (201, {
            "user": {"id": 8, "name": "Star Trips", "email": "star@x.io"},
            "agency": {"id": 77, "user_id": 8, "status": "pending"},
        })
        gateway = HttpAgencyGateway(client, AGENCY_ROUTES)
        agency = await gateway.create({"name": "Star Trips"})
        assert agency.id == 8
        assert agency.agency_id == 77
        await gateway.delete(8)
        assert recorder.requests[-1].url.path == "/api/agencies/77"


class TestFactory:
    """Tests for gateway wiring."""

    @pytest.mark.asyncio
    async def test_stats(self, client, recorder):
        recorder.responses[("GET", "/api/stats")] = (200, {"total_agencies": 2, "total_users": 9})
        gateways = create_gateways(client)
        stats = await gateways.stats.fetch_stats()
        assert stats.total_agencies == 2
        assert stats.total_tourists == 9

    @pytest.mark.asyncio
    async def test_stats_error(self, client, recorder):
        recorder.responses[("GET", "/api/stats")] = (500, {"message": "boom"})
        gateways = create_gateways(client)
        with pytest.raises(GatewayError):
            await gateways.stats.fetch_stats()

    @pytest.mark.asyncio
    async def test_tourists_bulk_delete_route(self, client, recorder):
        gateways = create_gateways(client)
        await gateways.tourists.delete_many([1, 2])
        assert recorder.requests[0].url.path == "/api/users/delete-multiple"
