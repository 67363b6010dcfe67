"""API key check for the extraction endpoint.

Policy: when ``API_KEY`` is configured the ``x-api-key`` header must match it.
When no key is configured the service fails closed and rejects every request,
unless ``ALLOW_ANONYMOUS`` is set (local development).
"""

from __future__ import annotations

import hmac
from typing import Optional

from fastapi import Header, Request

from planner_extractor.api.errors import ApiError


def require_api_key(
    request: Request,
    x_api_key: Optional[str] = Header(default=None),
) -> None:
    settings = request.app.state.settings
    if settings.api_key is None:
        if settings.allow_anonymous:
            return
        raise ApiError(401, "UNAUTHORIZED", "Service has no API key configured")
    # compare_digest rejects non-ASCII str, so compare encoded bytes.
    if x_api_key is None or not hmac.compare_digest(
        x_api_key.encode("utf-8"), settings.api_key.encode("utf-8")
    ):
        raise ApiError(401, "UNAUTHORIZED", "Missing or invalid x-api-key header")
