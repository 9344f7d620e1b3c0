"""
API Middleware

Per-request structlog context (request id, method, path) and an access log
line with the response status and duration.
"""

import time
import uuid
from typing import Callable

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = structlog.get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Bind request context and log every request once it completes"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception("Unhandled error while serving request")
            raise
        elapsed_ms = round((time.perf_counter() - started) * 1000, 2)

        log = logger.warning if response.status_code >= 400 else logger.info
        log("Request served", status_code=response.status_code, duration_ms=elapsed_ms)

        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers["X-Response-Time"] = f"{elapsed_ms}ms"
        return response
