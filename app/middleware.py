"""Request logging middleware."""

from __future__ import annotations

import logging
import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

_LOGGER = logging.getLogger("app.requests")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log method, path, status and latency for every request.

    The wrapped response is returned as-is.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            elapsed_ms = (time.perf_counter() - started) * 1000
            _LOGGER.exception(
                "%s %s failed after %.1fms", request.method, request.url.path, elapsed_ms
            )
            raise

        elapsed_ms = (time.perf_counter() - started) * 1000
        _LOGGER.info(
            "%s %s %s %.1fms",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )
        return response


__all__ = ["RequestLoggingMiddleware"]
