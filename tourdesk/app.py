"""Application context and dependency injection.

The ApplicationContext wires together all application components
and provides them to the UI layer.
"""

import logging
from typing import Optional

import httpx

from tourdesk.data.errors import GatewayError, describe_error
from tourdesk.data.factory import Gateways, create_gateways
from tourdesk.data.http_gateway import create_client
from tourdesk.domain.models import DashboardStats
from tourdesk.domain.settings import AppSettings
from tourdesk.services.gate import ConfirmPrompt, Confirmer
from tourdesk.services.notifications import NotificationChannel
from tourdesk.state.list_controller import ListController
from tourdesk.state.observable import Observable
from tourdesk.state.persistence import SettingsStore
from tourdesk.state.screens import (
    AgenciesController,
    CategoriesController,
    MessagesController,
    ReportsController,
    TouristsController,
)

logger = logging.getLogger(__name__)


async def _decline(prompt: ConfirmPrompt) -> bool:
    logger.warning(f"No confirmer installed; declining {prompt.title!r}")
    return False


class ApplicationContext:
    """Application context providing dependency injection.

    The context holds the settings, the shared HTTP client, the gateways,
    the notification channel and one controller per admin screen.

    Example:
        >>> ctx = ApplicationContext()
        >>> ctx.set_confirmer(ask_with_message_box)
        >>> await ctx.reports.load()
        >>> ctx.reports.tally
        >>> await ctx.close()
    """

    def __init__(
        self,
        settings_store: Optional[SettingsStore] = None,
        gateways: Optional[Gateways] = None,
        confirmer: Optional[Confirmer] = None,
    ):
        """Initialize application context.

        Args:
            settings_store: Settings persistence (defaults to the home file)
            gateways: Pre-built gateways; when omitted an httpx client is
                created from the API settings and owned by the context
            confirmer: Async confirmation callback for gated actions
        """
        self.settings_store = settings_store or SettingsStore()
        self.settings: AppSettings = self.settings_store.load()

        self._client: Optional[httpx.AsyncClient] = None
        if gateways is None:
            self._client = create_client(self.settings.api)
            gateways = create_gateways(self._client)
        self.gateways = gateways

        self.notifier = NotificationChannel()
        self.stats: Observable[Optional[DashboardStats]] = Observable(None)

        confirmer = confirmer or _decline
        page_size = self.settings.ui_state.rows_per_page
        self.agencies = AgenciesController(
            gateways.agencies, self.notifier, confirmer, page_size, storage_url=self.settings.api.storage_url
        )
        self.tourists = TouristsController(gateways.tourists, self.notifier, confirmer, page_size)
        self.messages = MessagesController(gateways.messages, self.notifier, confirmer, page_size)
        self.reports = ReportsController(gateways.reports, self.notifier, confirmer, page_size)
        self.categories = CategoriesController(gateways.categories, self.notifier, confirmer, page_size)

        logger.info(f"Application context created for {self.settings.api.base_url}")

    @property
    def controllers(self) -> dict[str, ListController]:
        """Screens by name, in tab order."""
        return {
            "agencies": self.agencies,
            "tourists": self.tourists,
            "messages": self.messages,
            "reports": self.reports,
            "categories": self.categories,
        }

    def set_confirmer(self, confirmer: Confirmer) -> None:
        for controller in self.controllers.values():
            controller.set_confirmer(confirmer)

    async def load_stats(self) -> Optional[DashboardStats]:
        """Fetch the dashboard header figures.

        Failures are logged and leave the previous figures in place.
        """
        try:
            stats = await self.gateways.stats.fetch_stats()
        except GatewayError as e:
            logger.warning(f"Failed to load dashboard stats: {describe_error(e)}")
            return None
        self.stats.set(stats)
        return stats

    def save_settings(self) -> None:
        self.settings_store.save(self.settings)

    async def close(self) -> None:
        """Dispose every screen and close the HTTP client."""
        for controller in self.controllers.values():
            controller.dispose()
        if self._client is not None:
            await self._client.aclose()
            self._client = None
        logger.info("Application context closed")
