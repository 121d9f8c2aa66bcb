"""Request/response pipeline stages."""

from starlette.middleware import Middleware

from distserve.middleware.compression import CompressionMiddleware
from distserve.middleware.timeout import REQUEST_TIMEOUT_SECONDS, TimeoutMiddleware
from distserve.middleware.tracing import TraceMiddleware


def build_middleware(timeout: float = REQUEST_TIMEOUT_SECONDS) -> list[Middleware]:
    """
    The request pipeline, outermost stage first.

    trace -> timeout -> compression -> router
    """
    return [
        Middleware(TraceMiddleware),
        Middleware(TimeoutMiddleware, timeout=timeout),
        Middleware(CompressionMiddleware),
    ]


__all__ = [
    "CompressionMiddleware",
    "REQUEST_TIMEOUT_SECONDS",
    "TimeoutMiddleware",
    "TraceMiddleware",
    "build_middleware",
]
