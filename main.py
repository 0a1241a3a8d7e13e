#!/usr/bin/env python
"""Tourdesk admin console entry point.

This module initializes the Qt application with qasync event loop integration
and launches the main window.
"""

import asyncio
import logging
import sys

import qasync
from PySide6.QtWidgets import QApplication

from tourdesk.app import ApplicationContext
from tourdesk.state.persistence import SettingsStore
from tourdesk.ui.main_window import MainWindow

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def run() -> None:
    """Run the application with qasync event loop."""
    app = QApplication(sys.argv)
    app.setApplicationName("Tourdesk")
    app.setOrganizationName("Tourdesk")

    # Set up qasync event loop
    loop = qasync.QEventLoop(app)
    asyncio.set_event_loop(loop)

    settings_store = SettingsStore()
    configure_logging(settings_store.load().logging.level)
    context = ApplicationContext(settings_store)
    logger.info(f"Starting Tourdesk against {context.settings.api.base_url}")

    window = MainWindow(context)

    async def cleanup_and_quit() -> None:
        await context.close()
        app.quit()

    window.closed.connect(lambda: asyncio.ensure_future(cleanup_and_quit()))

    with loop:
        try:
            window.show()
            window.start()
            loop.run_forever()
        except KeyboardInterrupt:
            logger.info("Shutting down...")
        finally:
            try:
                loop.run_until_complete(context.close())
            except RuntimeError:
                # Event loop already stopped - cleanup was done before quit
                pass


if __name__ == "__main__":
    run()
