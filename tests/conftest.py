"""Pytest fixtures shared by the test suite."""

from __future__ import annotations

from dataclasses import replace

import pytest

from planner_extractor.config import Settings


@pytest.fixture()
def test_settings() -> Settings:
    """Deterministic settings independent of the process environment."""
    return replace(
        Settings(),
        api_key="secret",
        allow_anonymous=False,
        extraction_strategy="scoped-dom",
        planner_domain="kitchen.planner.ikea.com",
        gammes=("METOD", "MAXIMERA", "VOXTORP", "UTRUSTA"),
        navigation_timeout_ms=30000,
        iframe_timeout_ms=60000,
        modal_timeout_ms=10000,
        item_timeout_ms=2000,
        settle_delay_ms=0,
        context_window=20,
        max_concurrent_extractions=2,
        frame_selector="iframe",
        list_button_selector='button:has-text("Liste")',
        item_row_selector='[class*="item"]',
    )
