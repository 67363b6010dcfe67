"""FastAPI application factory.

Lifespan
--------
On startup the app configures logging and announces the active strategy.
The orchestrator and the concurrency semaphore are attached to
``app.state`` at construction so tests can swap the orchestrator for one
driven by fake browser sessions.
"""

from __future__ import annotations

import logging
import threading
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError

from planner_extractor.api.errors import ApiError, api_error_handler, validation_error_handler
from planner_extractor.api.routers import extract as extract_router
from planner_extractor.config import Settings, settings as default_settings
from planner_extractor.extraction.orchestrator import ExtractionOrchestrator

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings: Settings = app.state.settings
    configure_logging(settings.log_level)
    logger.info(
        "Extractor running on port %d (strategy=%s)",
        settings.port, settings.extraction_strategy,
    )
    yield


def create_app(
    settings: Settings | None = None,
    orchestrator: ExtractionOrchestrator | None = None,
) -> FastAPI:
    """Return a fully-configured FastAPI application instance."""
    settings = settings or default_settings
    app = FastAPI(
        title="Kitchen Planner Extractor",
        description=(
            "Read-only extraction of the furniture items of an IKEA kitchen "
            "planner session, driven through a headless browser."
        ),
        version=extract_router.SERVICE_VERSION,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.orchestrator = orchestrator or ExtractionOrchestrator(settings)
    app.state.extraction_slots = threading.BoundedSemaphore(
        max(1, settings.max_concurrent_extractions)
    )

    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    app.include_router(extract_router.router, tags=["extraction"])

    return app


# Module-level instance used by uvicorn:
#   uvicorn planner_extractor.api.app:app
app = create_app()
