"""
Response Compression Middleware.

Gzip via Starlette's GZipMiddleware, skipped for requests whose path names
a format that is already compressed. Gzip is lossless either way; the skip
only avoids spending CPU on bytes that will not shrink.
"""

import mimetypes

from starlette.middleware.gzip import GZipMiddleware
from starlette.types import ASGIApp, Receive, Scope, Send

MINIMUM_SIZE = 32

INCOMPRESSIBLE_PREFIXES = ("image/", "audio/", "video/")
COMPRESSIBLE_IMAGES = frozenset({"image/svg+xml", "image/bmp", "image/x-icon", "image/vnd.microsoft.icon"})
INCOMPRESSIBLE_TYPES = frozenset({
    "application/gzip",
    "application/x-gzip",
    "application/zip",
    "application/x-bzip2",
    "application/x-xz",
    "application/x-7z-compressed",
    "application/x-rar-compressed",
    "application/zstd",
    "font/woff",
    "font/woff2",
})


def is_compressible(path: str) -> bool:
    """Whether the asset behind a request path is worth compressing."""
    media_type, encoding = mimetypes.guess_type(path)
    if encoding is not None:
        return False
    if media_type is None:
        return True
    if media_type in COMPRESSIBLE_IMAGES:
        return True
    if media_type.startswith(INCOMPRESSIBLE_PREFIXES):
        return False
    return media_type not in INCOMPRESSIBLE_TYPES


class CompressionMiddleware(GZipMiddleware):
    """GZipMiddleware that leaves already-compressed formats alone."""

    def __init__(self, app: ASGIApp, minimum_size: int = MINIMUM_SIZE, compresslevel: int = 6) -> None:
        super().__init__(app, minimum_size=minimum_size, compresslevel=compresslevel)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http" and not is_compressible(scope["path"]):
            await self.app(scope, receive, send)
            return
        await super().__call__(scope, receive, send)
