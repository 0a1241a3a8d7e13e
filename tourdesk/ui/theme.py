"""Light and dark stylesheets for the admin console."""

import logging
from enum import Enum
from typing import Optional

from PySide6.QtWidgets import QApplication

logger = logging.getLogger(__name__)


class Theme(Enum):
    """Available themes. SYSTEM leaves the platform style untouched."""

    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"


COLORS = {
    Theme.LIGHT: {
        "bg_primary": "#ffffff",
        "bg_secondary": "#f9fafb",
        "text_primary": "#111827",
        "text_secondary": "#6b7280",
        "border": "#e2e8f0",
        "accent": "#23395B",
        "danger": "#ef4444",
    },
    Theme.DARK: {
        "bg_primary": "#1a1a1a",
        "bg_secondary": "#242424",
        "text_primary": "#e2e8f0",
        "text_secondary": "#888888",
        "border": "#333333",
        "accent": "#4a6fa5",
        "danger": "#ef4444",
    },
}

_TEMPLATE = """
QWidget {{ background-color: {bg_primary}; color: {text_primary}; }}
QTableView, QLineEdit, QComboBox {{ background-color: {bg_secondary}; border: 1px solid {border}; }}
QHeaderView::section {{ background-color: {bg_secondary}; border: none; padding: 4px; }}
QTabBar::tab:selected {{ color: {accent}; }}
QPushButton {{ border: 1px solid {border}; border-radius: 4px; padding: 4px 10px; }}
QLabel#section_header {{ font-weight: 600; }}
QPushButton#danger_btn {{ background-color: {danger}; color: #ffffff; }}
QLabel#page_header {{ font-size: 18px; font-weight: 600; }}
QLabel#secondary_text {{ color: {text_secondary}; }}
QLabel#error_text, QLabel#field_error {{ color: {danger}; }}
"""


def stylesheet_for(theme: Theme) -> str:
    """Build the application stylesheet for a theme ("" for SYSTEM)."""
    if theme == Theme.SYSTEM:
        return ""
    return _TEMPLATE.format(**COLORS[theme])


def apply_theme(mode: str, app: Optional[QApplication] = None) -> Theme:
    """Apply the theme named by ``AppSettings.theme.mode``.

    Args:
        mode: "light", "dark" or "system"
        app: Application to style (defaults to the running instance)

    Returns:
        The theme that was applied
    """
    theme = Theme(mode)
    app = app or QApplication.instance()
    if app is not None:
        app.setStyleSheet(stylesheet_for(theme))
        logger.debug(f"Applied {theme.value} theme")
    return theme
