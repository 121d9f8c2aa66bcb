"""
distserve - Main FastAPI application.

One diagnostic route plus the frontend bundle mounted at the root,
wrapped in the trace -> timeout -> compression pipeline.
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response

from distserve import __version__
from distserve.assets import BundleFiles
from distserve.config import Settings
from distserve.middleware import REQUEST_TIMEOUT_SECONDS, build_middleware

logger = logging.getLogger(__name__)

DIAGNOSTIC_PATH = "/api/test"
DIAGNOSTIC_MESSAGE = "hello from distserve"
NOT_FOUND_BODY = "<h1>404 Not Found</h1>"


def not_found() -> HTMLResponse:
    """The fixed 404 page, whatever the path or method."""
    return HTMLResponse(NOT_FOUND_BODY, status_code=404)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Report what is being served. Never fails on a bad asset directory."""
    settings: Settings = app.state.settings

    logger.info(f"Serving files in {settings.dist_dir}")
    if settings.uses_default_dist_dir:
        logger.warning("DIST_DIR not set; using the source checkout default (development only)")
    if not os.path.isdir(settings.dist_dir):
        logger.warning(f"Asset directory {settings.dist_dir} is not a readable directory; asset requests will 404")

    yield


def create_app(settings: Settings, *, timeout: float = REQUEST_TIMEOUT_SECONDS) -> FastAPI:
    """
    Build the application for the given settings.

    Args:
        settings: Server settings, read once at startup
        timeout: Seconds a request may take before it is answered with 503

    Returns:
        The ASGI application
    """
    app = FastAPI(
        title="distserve",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        middleware=build_middleware(timeout),
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.assets = BundleFiles(settings.dist_dir)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> Response:
        """Router and static errors carry a status only, never details."""
        if exc.status_code == 404:
            return not_found()
        return Response(status_code=exc.status_code, headers=exc.headers)

    # =========================================================================
    # Diagnostic
    # =========================================================================

    @app.api_route(DIAGNOSTIC_PATH, methods=["GET", "HEAD"], response_class=PlainTextResponse)
    async def diagnostic() -> str:
        """Liveness probe."""
        return DIAGNOSTIC_MESSAGE

    # =========================================================================
    # Frontend bundle (must stay the last route)
    # =========================================================================

    app.mount("/", app.state.assets, name="bundle")

    return app
