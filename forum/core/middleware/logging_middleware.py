"""Logging middleware for FastAPI.

Adds a per-request UUID, binds it to the logging contextvars, and measures latency.
Background translation tasks spawned during the request inherit the bound context,
so their log lines carry the originating request id.
"""

import logging
import time
import uuid
from typing import Callable, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from forum.core.logging_config import bind_request_context, reset_request_context

access_logger = logging.getLogger("forum.access")


class LoggingMiddleware(BaseHTTPMiddleware):
    """Log HTTP requests/responses with timing metadata."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        tokens = bind_request_context(request_id=request_id)

        start_time = time.perf_counter()
        response: Optional[Response] = None
        try:
            response = await call_next(request)
        finally:
            duration_ms = (time.perf_counter() - start_time) * 1000
            status_code = response.status_code if response else 500
            access_logger.info(
                f"{request.method} {request.url.path} - {status_code} - {duration_ms:.2f}ms",
                extra={
                    "method": request.method,
                    "endpoint": request.url.path,
                    "status_code": status_code,
                    "duration": f"{duration_ms:.2f}",
                },
            )
            reset_request_context(tokens)

        response.headers["X-Request-ID"] = request_id
        return response
