"""
API Middleware.

Request ID injection and structured access logging for every incoming
API request.
"""

from __future__ import annotations

import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from factfind.logging_config import generate_trace_id, get_logger, trace_id_var

logger = get_logger(__name__)

# Probes are logged at debug so they don't drown out extraction traffic
QUIET_PATHS = frozenset({"/health"})


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Tag each request with an ID, echo it back, and log the outcome."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or generate_trace_id()
        trace_id_var.set(request_id)

        start = time.monotonic()
        response = await call_next(request)
        elapsed_ms = round((time.monotonic() - start) * 1000, 1)

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time-Ms"] = str(elapsed_ms)

        log = logger.debug if request.url.path in QUIET_PATHS else logger.info
        log(
            "api_request",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            elapsed_ms=elapsed_ms,
            client=request.client.host if request.client else None,
        )

        return response
