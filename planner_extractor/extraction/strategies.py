"""Parsing strategies.

A strategy decides how the page should settle, how content is located and how
it is parsed.  Both strategies produce the same :class:`Item` shape, so the
orchestrator never branches on which one is in use.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Protocol

from planner_extractor.config import Settings
from planner_extractor.extraction.models import Item, LocatedContent
from planner_extractor.extraction.parser import parse_modal_rows, parse_page_content
from planner_extractor.extraction.session import FULL_PAGE, MODAL

SCOPED_DOM = "scoped-dom"
FULL_TEXT = "full-text"


class ItemParser(Protocol):
    name: str
    extract_version: str
    wait_until: str
    content_mode: str

    def parse(self, content: LocatedContent) -> List[Item]: ...

    def source_context(self, content: LocatedContent) -> Dict[str, Any]: ...


@dataclass(frozen=True)
class ScopedDomStrategy:
    """Open the planner's item list modal and classify each row by product line."""

    gammes: tuple[str, ...]
    read_timeout_ms: float
    name: str = SCOPED_DOM
    extract_version: str = "v3"
    wait_until: str = "networkidle"
    content_mode: str = MODAL

    def parse(self, content: LocatedContent) -> List[Item]:
        return parse_modal_rows(content.rows, self.gammes, self.read_timeout_ms)

    def source_context(self, content: LocatedContent) -> Dict[str, Any]:
        return {
            "strategy": self.name,
            "modal_found": content.modal_found,
            "row_count": len(content.rows),
        }


@dataclass(frozen=True)
class FullTextStrategy:
    """Scan the rendered page text and markup for article numbers."""

    window: int
    name: str = FULL_TEXT
    extract_version: str = "v3-fulltext"
    wait_until: str = "domcontentloaded"
    content_mode: str = FULL_PAGE

    def parse(self, content: LocatedContent) -> List[Item]:
        return parse_page_content(content.text, content.html, self.window)

    def source_context(self, content: LocatedContent) -> Dict[str, Any]:
        return {
            "strategy": self.name,
            "modal_found": content.modal_found,
            "text_length": len(content.text),
            "html_length": len(content.html),
        }


STRATEGY_NAMES = (SCOPED_DOM, FULL_TEXT)


def build_strategy(name: str, settings: Settings) -> ItemParser:
    """Return the strategy registered under *name*, configured from *settings*."""
    if name == SCOPED_DOM:
        return ScopedDomStrategy(gammes=settings.gammes, read_timeout_ms=settings.item_timeout_ms)
    if name == FULL_TEXT:
        return FullTextStrategy(window=settings.context_window)
    raise ValueError(f"Unknown extraction strategy {name!r}; use one of {', '.join(STRATEGY_NAMES)}")
