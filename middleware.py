"""
Request logging middleware: correlation id, method, path, status and timing.
"""

import time
from typing import Callable, Set

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from logging_config import generate_request_id, logger, set_request_id


# Paths that should skip logging (liveness probe, docs)
SKIP_LOGGING_PATHS: Set[str] = {
    "/health",
    "/docs",
    "/redoc",
    "/openapi.json",
    "/favicon.ico",
}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    - Tracks a request id (X-Request-ID header or a fresh one) for log correlation
    - Logs method, path, status and duration
    - Adds X-Request-ID and X-Response-Time to responses
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or generate_request_id()
        set_request_id(request_id)

        path = request.url.path
        skip_logging = path in SKIP_LOGGING_PATHS
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as exc:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.error(
                f"✗ {request.method} {path} - Exception ({duration_ms:.2f}ms): {type(exc).__name__}",
                extra={
                    "event_type": "http_request_error",
                    "http_method": request.method,
                    "http_path": path,
                    "duration_ms": duration_ms,
                },
            )
            set_request_id("")
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{duration_ms:.2f}ms"

        if not skip_logging:
            status_code = response.status_code
            if status_code >= 500:
                log_func = logger.error
            elif status_code >= 400:
                log_func = logger.warning
            else:
                log_func = logger.info

            log_func(
                f"{request.method} {path} - {status_code} ({duration_ms:.2f}ms)",
                extra={
                    "event_type": "http_request",
                    "http_method": request.method,
                    "http_path": path,
                    "http_status": status_code,
                    "duration_ms": duration_ms,
                },
            )

        set_request_id("")
        return response
