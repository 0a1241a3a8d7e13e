"""Factory for creating gateway instances."""

from dataclasses import dataclass

import httpx

from tourdesk.data.gateway import CollectionGateway, MessageGateway, StatsGateway
from tourdesk.data.http_gateway import (
    HttpAgencyGateway,
    HttpCollectionGateway,
    HttpMessageGateway,
    HttpStatsGateway,
    Routes,
)
from tourdesk.domain.models import Category, Report, Tourist

AGENCY_ROUTES = Routes(
    list="/api/admin/agencies",
    item="/api/agencies/{id}",
    create="/api/admin/add-agency",
    bulk_delete="/api/agencies/delete-multiple",
    status="/api/agencies/{id}/status",
)

TOURIST_ROUTES = Routes(
    list="/api/admin/tourists",
    item="/api/users/{id}",
    create="/api/users",
    bulk_delete="/api/users/delete-multiple",
)

MESSAGE_ROUTES = Routes(
    list="/api/admin/messages",
    item="/api/messages/{id}",
    bulk_delete="/api/messages/delete-multiple",
)

REPORT_ROUTES = Routes(
    list="/api/reports",
    item="/api/reports/{id}",
    bulk_delete="/api/reports/delete-multiple",
    status="/api/reports/{id}/status",
)

CATEGORY_ROUTES = Routes(
    list="/api/categories",
    item="/api/categories/{id}",
    create="/api/categories",
    bulk_delete="/api/categories/delete-multiple",
)


@dataclass
class Gateways:
    """One gateway per admin screen, sharing a single HTTP client."""

    agencies: CollectionGateway
    tourists: CollectionGateway
    messages: MessageGateway
    reports: CollectionGateway
    categories: CollectionGateway
    stats: StatsGateway


def create_gateways(client: httpx.AsyncClient) -> Gateways:
    """Factory function to create the HTTP gateways.

    Args:
        client: Shared client from ``create_client``

    Returns:
        Gateways for every screen

    Example:
        >>> client = create_client(settings.api)
        >>> gateways = create_gateways(client)
        >>> reports = await gateways.reports.list_all()
    """
    return Gateways(
        agencies=HttpAgencyGateway(client, AGENCY_ROUTES),
        tourists=HttpCollectionGateway(client, TOURIST_ROUTES, Tourist.from_api, "tourists"),
        messages=HttpMessageGateway(client, MESSAGE_ROUTES),
        reports=HttpCollectionGateway(client, REPORT_ROUTES, Report.from_api, "reports"),
        categories=HttpCollectionGateway(client, CATEGORY_ROUTES, Category.from_api, "categories"),
        stats=HttpStatsGateway(client),
    )
