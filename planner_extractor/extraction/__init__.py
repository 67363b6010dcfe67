"""Extraction core: URL validation, browser session, parsing and hashing."""

from planner_extractor.extraction.errors import ExtractionError
from planner_extractor.extraction.models import ExtractionResult, Item, PlannerReference
from planner_extractor.extraction.orchestrator import ExtractionOrchestrator
from planner_extractor.extraction.session import BrowserSession
from planner_extractor.extraction.validator import validate_planner_url

__all__ = [
    "ExtractionOrchestrator",
    "BrowserSession",
    "ExtractionResult",
    "ExtractionError",
    "Item",
    "PlannerReference",
    "validate_planner_url",
]
