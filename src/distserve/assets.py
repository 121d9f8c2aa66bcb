"""
Static asset serving.

Starlette's StaticFiles, adjusted for a frontend bundle:
- the directory may be missing at startup, or vanish later; lookups then find nothing
- unmatched paths always raise 404 (no ``404.html`` substitution) so the app's
  fixed not-found page is used
- disk lookups can be abandoned when the request deadline expires
- a trailing slash only ever names a directory

Containment (realpath + commonpath against the root), directory index with
redirect, HEAD and conditional requests (304) come from StaticFiles.
"""

import logging
import os
import stat
from pathlib import Path

import anyio.to_thread
from starlette.datastructures import URL
from starlette.exceptions import HTTPException
from starlette.responses import RedirectResponse, Response
from starlette.staticfiles import StaticFiles
from starlette.types import Scope

logger = logging.getLogger(__name__)

INDEX_FILE = "index.html"

PathLookup = tuple[str, os.stat_result | None]


class BundleFiles(StaticFiles):
    """Serve files from a built frontend bundle directory."""

    def __init__(self, directory: str | Path, index_file: str = INDEX_FILE) -> None:
        super().__init__(directory=directory, html=True, check_dir=False)
        self.directory = Path(directory)
        self.index_file = index_file

    async def check_config(self) -> None:
        """Accept a missing directory; requests against it 404."""

    def get_path(self, scope: Scope) -> str:
        """Normalised relative path, keeping a trailing slash as a directory marker."""
        path = super().get_path(scope)
        if scope["path"].endswith("/") and path != ".":
            path += "/"
        return path

    def lookup_path(self, path: str) -> PathLookup:
        """
        Find a path under the root.

        Returns ``("", None)`` for paths outside the root, unreadable paths,
        and files addressed with a trailing slash.
        """
        wants_directory = path.endswith("/")
        try:
            full_path, stat_result = super().lookup_path(path.rstrip("/") or ".")
        except (OSError, ValueError) as e:
            logger.debug(f"Lookup of {path!r} failed: {e}")
            return "", None

        if wants_directory and stat_result is not None and not stat.S_ISDIR(stat_result.st_mode):
            return "", None
        return full_path, stat_result

    async def alookup(self, path: str) -> PathLookup:
        """Run :meth:`lookup_path` in a worker thread the request can walk away from."""
        return await anyio.to_thread.run_sync(self.lookup_path, path, abandon_on_cancel=True)

    async def get_response(self, path: str, scope: Scope) -> Response:
        if scope["method"] not in ("GET", "HEAD"):
            raise HTTPException(status_code=405, headers={"Allow": "GET, HEAD"})

        full_path, stat_result = await self.alookup(path)
        if stat_result is not None and stat.S_ISREG(stat_result.st_mode):
            return self.file_response(full_path, stat_result, scope)

        if stat_result is not None and stat.S_ISDIR(stat_result.st_mode):
            full_path, stat_result = await self.alookup(os.path.join(path, self.index_file))
            if stat_result is not None and stat.S_ISREG(stat_result.st_mode):
                if not scope["path"].endswith("/"):
                    url = URL(scope=scope)
                    return RedirectResponse(url.replace(path=url.path + "/"), status_code=307)
                return self.file_response(full_path, stat_result, scope)

        raise HTTPException(status_code=404)
