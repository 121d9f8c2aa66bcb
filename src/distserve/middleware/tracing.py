"""
Request Tracing Middleware.

Outermost layer of the pipeline. Records method, path, status and latency
for every request and never touches the response itself.
"""

import logging
import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


class TraceMiddleware(BaseHTTPMiddleware):
    """Log one line per request/response pair."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Time the request through the rest of the pipeline."""
        method = request.method
        path = request.url.path
        logger.debug(f"started {method} {path}")

        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            latency_ms = (time.perf_counter() - start) * 1000
            logger.exception(f"{method} {path} failed after {latency_ms:.1f}ms")
            raise

        latency_ms = (time.perf_counter() - start) * 1000
        logger.info(f"{method} {path} {response.status_code} {latency_ms:.1f}ms")
        return response
