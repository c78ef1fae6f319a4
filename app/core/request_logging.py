# app/core/request_logging.py
"""
Request logging middleware for the payroll API.
"""

import logging
import time
import uuid
from collections.abc import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from app.core.logging_config import get_logger

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

# Polled by monitoring, logged at DEBUG only
QUIET_PATHS = ("/health",)


def _level_for(status_code: int, path: str) -> int:
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    if path in QUIET_PATHS:
        return logging.DEBUG
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs method, path, status and duration of every request.

    A caller-supplied X-Request-ID is kept, otherwise one is generated. The
    id is stored on request.state and echoed in the response header.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = (time.perf_counter() - started) * 1000
            logger.error(
                f"{request.method} {request.url.path} - 500 ({duration_ms:.2f}ms) - ERROR: {e}",
                extra=self._extra(request, request_id, 500, duration_ms),
                exc_info=True,
            )
            raise

        duration_ms = (time.perf_counter() - started) * 1000
        logger.log(
            _level_for(response.status_code, request.url.path),
            f"{request.method} {request.url.path} - {response.status_code} ({duration_ms:.2f}ms)",
            extra=self._extra(request, request_id, response.status_code, duration_ms),
        )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response

    @staticmethod
    def _extra(request: Request, request_id: str, status_code: int, duration_ms: float) -> dict:
        return {
            "extra_fields": {
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "status_code": status_code,
                "duration": duration_ms,
            }
        }
