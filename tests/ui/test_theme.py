"""Tests for theme stylesheets."""

import pytest

from tourdesk.ui.theme import COLORS, Theme, apply_theme, stylesheet_for


def test_dark_stylesheet_uses_dark_palette():
    sheet = stylesheet_for(Theme.DARK)
    assert COLORS[Theme.DARK]["bg_primary"] in sheet
    assert COLORS[Theme.LIGHT]["bg_primary"] not in sheet


def test_system_theme_clears_stylesheet():
    assert stylesheet_for(Theme.SYSTEM) == ""


def test_apply_theme(qapp):
    assert apply_theme("dark", qapp) == Theme.DARK
    assert qapp.styleSheet() == stylesheet_for(Theme.DARK)
    apply_theme("system", qapp)
    assert qapp.styleSheet() == ""


def test_unknown_mode_rejected(qapp):
    with pytest.raises(ValueError):
        apply_theme("sepia", qapp)
