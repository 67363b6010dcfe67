"""Data models for the extraction pipeline.

These are plain dataclasses; serialisation to the JSON envelope lives in the
``to_dict`` helpers so the HTTP and CLI layers share one wire shape.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Protocol

UNKNOWN = "UNKNOWN"


@dataclass(frozen=True)
class PlannerReference:
    """A validated planner URL and the planner UUID it embeds."""

    planner_url: str
    planner_id: str


@dataclass(frozen=True)
class Item:
    """One furniture line extracted from the planner.

    ``gamme`` is set by the scoped-DOM strategy, ``article_number`` by the
    full-text strategy.  ``qty`` is always a positive integer.
    """

    raw_name: str
    article_number: str | None = None
    gamme: str | None = None
    qty: int = 1

    def __post_init__(self) -> None:
        if self.qty < 1:
            raise ValueError(f"qty must be positive, got {self.qty}")
        if not self.raw_name:
            object.__setattr__(self, "raw_name", UNKNOWN)

    @property
    def identity_key(self) -> str:
        """De-duplication key: the article number when known, else the raw text."""
        return self.article_number or self.raw_name

    def to_dict(self) -> dict[str, Any]:
        """Serialise identity-relevant fields in a fixed order, omitting absent ones."""
        data: dict[str, Any] = {"raw_name": self.raw_name}
        if self.gamme is not None:
            data["gamme"] = self.gamme
        if self.article_number is not None:
            data["article_number"] = self.article_number
        data["qty"] = self.qty
        return data


class RowHandle(Protocol):
    """A live reference to one rendered item row (a Playwright ``Locator``)."""

    def text_content(self, timeout: float | None = None) -> str | None: ...


@dataclass
class LocatedContent:
    """What ``BrowserSession.locate_content`` found on the page.

    The scoped-DOM strategy fills ``rows``; the full-text strategy fills
    ``text`` and ``html``.
    """

    rows: list[RowHandle] = field(default_factory=list)
    text: str = ""
    html: str = ""
    modal_found: bool = False


@dataclass(frozen=True)
class ExtractionResult:
    """The envelope returned for one extraction call, success or failure."""

    success: bool
    extract_version: str
    extracted_at: str
    planner_url: str
    request_nonce: str
    planner_id: str | None = None
    extraction_hash: str | None = None
    items: tuple[Item, ...] = ()
    source_context: Mapping[str, Any] = field(default_factory=dict)
    error_code: str | None = None
    error_message: str | None = None
    error_step: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", tuple(self.items))
        object.__setattr__(
            self, "source_context", MappingProxyType(dict(self.source_context))
        )

    def to_dict(self) -> dict[str, Any]:
        if self.success:
            return {
                "success": True,
                "extract_version": self.extract_version,
                "extraction_hash": self.extraction_hash,
                "extracted_at": self.extracted_at,
                "planner_id": self.planner_id,
                "planner_url": self.planner_url,
                "request_nonce": self.request_nonce,
                "source_context": dict(self.source_context),
                "items": [item.to_dict() for item in self.items],
            }
        return {
            "success": False,
            "extract_version": self.extract_version,
            "extracted_at": self.extracted_at,
            "planner_id": self.planner_id,
            "planner_url": self.planner_url,
            "request_nonce": self.request_nonce,
            "error": {
                "code": self.error_code,
                "message": self.error_message,
                "step": self.error_step,
            },
        }
