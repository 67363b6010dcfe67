"""Centralised settings for the planner extractor service.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).

``Settings`` is frozen: the orchestrator and the HTTP app receive one value at
construction time and never mutate it.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (one level up from this package)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)

DEFAULT_GAMMES: tuple[str, ...] = (
    "RINGHULT", "AXSTAD", "VOXTORP", "KUNGSBACKA", "LERHYTTAN", "BODARP",
    "HAVSTORP", "STENSUND", "ASKERSUND", "SÄVEDAL", "TORHAMN", "EKESTAD",
    "JUTIS", "HITTARP", "FÖRBÄTTRA", "KALLARP", "METOD", "MAXIMERA", "UTRUSTA",
)


def _env_bool(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in ("1", "true", "yes", "on")


def _env_gammes() -> tuple[str, ...]:
    raw = os.environ.get("IKEA_GAMMES")
    if not raw:
        return DEFAULT_GAMMES
    return tuple(g.strip().upper() for g in raw.split(",") if g.strip())


@dataclass(frozen=True)
class Settings:
    # ------------------------------------------------------------------
    # HTTP service
    # ------------------------------------------------------------------
    api_key: str | None = field(
        default_factory=lambda: os.environ.get("API_KEY") or None
    )
    allow_anonymous: bool = field(
        default_factory=lambda: _env_bool("ALLOW_ANONYMOUS", "false")
    )
    host: str = field(default_factory=lambda: os.environ.get("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.environ.get("PORT", "3000")))
    log_level: str = field(
        default_factory=lambda: os.environ.get("LOG_LEVEL", "INFO").upper()
    )
    max_concurrent_extractions: int = field(
        default_factory=lambda: int(os.environ.get("MAX_CONCURRENT_EXTRACTIONS", "2"))
    )

    # ------------------------------------------------------------------
    # Planner application
    # ------------------------------------------------------------------
    planner_domain: str = field(
        default_factory=lambda: os.environ.get("PLANNER_DOMAIN", "kitchen.planner.ikea.com")
    )
    extraction_strategy: str = field(
        default_factory=lambda: os.environ.get("EXTRACTION_STRATEGY", "scoped-dom")
    )
    gammes: tuple[str, ...] = field(default_factory=_env_gammes)

    # ------------------------------------------------------------------
    # Browser
    # ------------------------------------------------------------------
    browser_locale: str = field(
        default_factory=lambda: os.environ.get("BROWSER_LOCALE", "fr-FR")
    )
    headless: bool = field(default_factory=lambda: _env_bool("HEADLESS", "true"))

    frame_selector: str = field(
        default_factory=lambda: os.environ.get("FRAME_SELECTOR", "iframe")
    )
    list_button_selector: str = field(
        default_factory=lambda: os.environ.get(
            "LIST_BUTTON_SELECTOR", 'button:has-text("Liste")'
        )
    )
    item_row_selector: str = field(
        default_factory=lambda: os.environ.get("ITEM_ROW_SELECTOR", '[class*="item"]')
    )

    # ------------------------------------------------------------------
    # Per-phase timeouts (milliseconds)
    # ------------------------------------------------------------------
    navigation_timeout_ms: int = field(
        default_factory=lambda: int(os.environ.get("NAVIGATION_TIMEOUT_MS", "30000"))
    )
    iframe_timeout_ms: int = field(
        default_factory=lambda: int(os.environ.get("IFRAME_TIMEOUT_MS", "60000"))
    )
    modal_timeout_ms: int = field(
        default_factory=lambda: int(os.environ.get("MODAL_TIMEOUT_MS", "10000"))
    )
    item_timeout_ms: int = field(
        default_factory=lambda: int(os.environ.get("ITEM_TIMEOUT_MS", "2000"))
    )
    settle_delay_ms: int = field(
        default_factory=lambda: int(os.environ.get("SETTLE_DELAY_MS", "2000"))
    )

    # ------------------------------------------------------------------
    # Full-text parsing
    # ------------------------------------------------------------------
    context_window: int = field(
        default_factory=lambda: int(os.environ.get("CONTEXT_WINDOW", "60"))
    )


# Module-level default, import this where no explicit Settings is passed:
#   from planner_extractor.config import settings
settings = Settings()
