"""End-to-end extraction for one planner URL.

``ExtractionOrchestrator.extract`` walks a fixed sequence of states::

    validate_url -> open_session -> navigate -> locate_content -> parse -> hash -> done

Any failure jumps straight to a failure envelope.  Nothing is retried, and no
exception escapes ``extract``: callers always receive an
:class:`ExtractionResult`.  The browser session is closed before ``extract``
returns, whichever state failed.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Callable

from planner_extractor.config import Settings, settings as default_settings
from planner_extractor.extraction.errors import (
    ExtractionError,
    InvalidRequest,
    LaunchFailed,
    NavigationFailed,
    ParseError,
)
from planner_extractor.extraction.hasher import compute_extraction_hash
from planner_extractor.extraction.models import ExtractionResult, PlannerReference
from planner_extractor.extraction.session import BrowserSession
from planner_extractor.extraction.strategies import ItemParser, build_strategy
from planner_extractor.extraction.validator import validate_planner_url

logger = logging.getLogger(__name__)

SessionFactory = Callable[[Settings], BrowserSession]


class ExtractionState(str, Enum):
    VALIDATING = "validate_url"
    SESSION_OPENING = "open_session"
    NAVIGATING = "navigate"
    LOCATING_CONTENT = "locate_content"
    PARSING = "parse"
    HASHING = "hash"
    DONE = "done"


# Error type used for non-pipeline exceptions, by the state they escaped from.
_UNEXPECTED_FAULTS: dict[ExtractionState, type[ExtractionError]] = {
    ExtractionState.VALIDATING: InvalidRequest,
    ExtractionState.SESSION_OPENING: LaunchFailed,
    ExtractionState.NAVIGATING: NavigationFailed,
}


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with milliseconds and a ``Z`` suffix."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def new_request_nonce() -> str:
    return uuid.uuid4().hex


class ExtractionOrchestrator:
    """Compose validation, browser session, parsing and hashing into one call.

    Args:
        settings: Immutable configuration; defaults to the module-level settings.
        session_factory: Builds an unopened :class:`BrowserSession` per call.
            Tests pass a factory whose sessions run on fake page controllers.
        clock: Returns the ``extracted_at`` timestamp.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        session_factory: SessionFactory | None = None,
        clock: Callable[[], str] = utc_timestamp,
    ) -> None:
        self.settings = settings or default_settings
        self._session_factory: SessionFactory = session_factory or BrowserSession
        self._clock = clock
        self.default_strategy: ItemParser = build_strategy(
            self.settings.extraction_strategy, self.settings
        )

    def extract(
        self,
        planner_url: str,
        request_nonce: str | None = None,
        strategy: str | None = None,
    ) -> ExtractionResult:
        """Run one extraction and return its success or failure envelope."""
        extracted_at = self._clock()
        nonce = request_nonce or new_request_nonce()
        parser = self.default_strategy
        reference: PlannerReference | None = None
        state = ExtractionState.VALIDATING

        try:
            if strategy is not None and strategy != parser.name:
                try:
                    parser = build_strategy(strategy, self.settings)
                except ValueError as exc:
                    raise InvalidRequest(str(exc)) from exc
            reference = validate_planner_url(planner_url, self.settings.planner_domain)

            state = ExtractionState.SESSION_OPENING
            with self._session_factory(self.settings) as session:
                state = ExtractionState.NAVIGATING
                session.navigate(reference.planner_url, wait_until=parser.wait_until)

                state = ExtractionState.LOCATING_CONTENT
                content = session.locate_content(parser.content_mode)

                # Rows are live page handles, so parse before the session closes.
                state = ExtractionState.PARSING
                items = tuple(parser.parse(content))
                source_context = parser.source_context(content)

            state = ExtractionState.HASHING
            extraction_hash = compute_extraction_hash(
                items, reference.planner_id, nonce, extracted_at
            )
        except ExtractionError as exc:
            logger.warning(
                "Extraction failed at %s with %s: %s", state.value, exc.code, exc.message
            )
            return self._failure(exc, parser, planner_url, reference, nonce, extracted_at)
        except Exception as exc:
            logger.exception("Unexpected fault during %s", state.value)
            error_cls = _UNEXPECTED_FAULTS.get(state, ParseError)
            error = error_cls(f"{type(exc).__name__}: {exc}", step=state.value)
            return self._failure(error, parser, planner_url, reference, nonce, extracted_at)

        state = ExtractionState.DONE
        logger.info(
            "Extracted %d items from planner %s (%s, hash=%s)",
            len(items), reference.planner_id, parser.name, extraction_hash,
        )
        return ExtractionResult(
            success=True,
            extract_version=parser.extract_version,
            extracted_at=extracted_at,
            planner_url=reference.planner_url,
            request_nonce=nonce,
            planner_id=reference.planner_id,
            extraction_hash=extraction_hash,
            items=items,
            source_context=source_context,
        )

    @staticmethod
    def _failure(
        error: ExtractionError,
        parser: ItemParser,
        planner_url: str,
        reference: PlannerReference | None,
        nonce: str,
        extracted_at: str,
    ) -> ExtractionResult:
        return ExtractionResult(
            success=False,
            extract_version=parser.extract_version,
            extracted_at=extracted_at,
            planner_url=planner_url,
            request_nonce=nonce,
            planner_id=reference.planner_id if reference else None,
            error_code=error.code,
            error_message=error.message,
            error_step=error.step,
        )
