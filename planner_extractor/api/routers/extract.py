"""Extraction endpoints.

Routes
------
GET  /health           → {"status": "ok", "version": "v3"}
POST /extract-items    Body: {"planner_url": "...", "request_nonce": "...", "strategy": "..."}

Status codes for ``/extract-items``:

* 200: extraction succeeded (``success: true``)
* 400: malformed body, or the URL failed domain / planner-id validation
* 401: missing or wrong ``x-api-key``
* 500: the pipeline failed after validation (launch, timeouts, parse fault)

The ``success`` flag and ``error.code`` in the body are authoritative.
"""

from __future__ import annotations

from typing import Literal, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from planner_extractor.api.auth import require_api_key
from planner_extractor.extraction.errors import INPUT_ERROR_CODES
from planner_extractor.extraction.models import ExtractionResult

SERVICE_VERSION = "v3"

router = APIRouter()


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class ExtractRequest(BaseModel):
    planner_url: str = Field(min_length=1)
    request_nonce: Optional[str] = Field(default=None, min_length=1)
    strategy: Optional[Literal["scoped-dom", "full-text"]] = None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _status_for(result: ExtractionResult) -> int:
    if result.success:
        return 200
    if result.error_code in INPUT_ERROR_CODES:
        return 400
    return 500


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok", "version": SERVICE_VERSION}


@router.post("/extract-items", dependencies=[Depends(require_api_key)])
def extract_items(body: ExtractRequest, request: Request) -> JSONResponse:
    """Extract the furniture items of one kitchen planner.

    Runs in FastAPI's threadpool; the semaphore bounds how many browsers are
    alive at once.
    """
    orchestrator = request.app.state.orchestrator
    with request.app.state.extraction_slots:
        result = orchestrator.extract(
            body.planner_url,
            request_nonce=body.request_nonce,
            strategy=body.strategy,
        )
    return JSONResponse(status_code=_status_for(result), content=result.to_dict())
