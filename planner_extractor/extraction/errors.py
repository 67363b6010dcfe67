"""Failure taxonomy for the extraction pipeline.

Every error carries a stable ``code`` (surfaced to callers as
``error.code``), a human-readable message and the pipeline ``step`` it was
raised from.
"""

from __future__ import annotations

from typing import Any


class ExtractionError(Exception):
    """Base class for all failures the orchestrator reports."""

    code = "EXTRACTION_ERROR"
    default_step: str | None = None

    def __init__(
        self,
        message: str,
        step: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.step = step or self.default_step
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
            "step": self.step,
        }
        if self.details:
            payload["details"] = self.details
        return payload


# Input errors: raised before any browser resource exists.

class InvalidRequest(ExtractionError):
    code = "INVALID_REQUEST"
    default_step = "validate_request"


class InvalidDomain(ExtractionError):
    code = "INVALID_DOMAIN"
    default_step = "validate_url"


class MissingPlannerId(ExtractionError):
    code = "MISSING_PLANNER_ID"
    default_step = "validate_url"


# Resource errors.

class LaunchFailed(ExtractionError):
    code = "LAUNCH_FAILED"
    default_step = "open_session"


# Timing and navigation errors.

class NavigationTimeout(ExtractionError):
    code = "NAVIGATION_TIMEOUT"
    default_step = "navigate"


class NavigationFailed(ExtractionError):
    code = "NAVIGATION_FAILED"
    default_step = "navigate"


class ModalTimeout(ExtractionError):
    code = "MODAL_TIMEOUT"
    default_step = "locate_content"


# Parsing faults.

class ParseError(ExtractionError):
    code = "PARSE_ERROR"
    default_step = "parse"


INPUT_ERROR_CODES = frozenset(
    {InvalidRequest.code, InvalidDomain.code, MissingPlannerId.code}
)
