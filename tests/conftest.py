"""Shared fixtures: a small frontend bundle on disk and an app serving it."""

from pathlib import Path

import httpx
import pytest

from distserve.config import Settings
from distserve.main import create_app

BUNDLE = {
    "index.html": b"<!doctype html><html><body><div id=\"app\"></div></body></html>\n",
    "assets/app.js": b"console.log('frontend bundle loaded');\n" * 40,
    "assets/style.css": b"body { margin: 0; padding: 0; color: #222; }\n" * 40,
    # PNG signature followed by filler; enough bytes to pass the gzip threshold
    "assets/logo.png": b"\x89PNG\r\n\x1a\n" + bytes(range(256)) * 4,
    "docs/index.html": b"<h1>docs</h1>",
}
SECRET = b"outside the bundle\n"


@pytest.fixture
def bundle() -> dict[str, bytes]:
    """Relative path -> bytes of every file in the bundle."""
    return dict(BUNDLE)


@pytest.fixture
def secret() -> bytes:
    """Contents of a file next to the bundle that must never be served."""
    return SECRET


@pytest.fixture
def dist_dir(tmp_path: Path, bundle: dict[str, bytes], secret: bytes) -> Path:
    """A bundle directory with a sibling ``secret.txt``."""
    dist = tmp_path / "dist"
    for rel, content in bundle.items():
        target = dist / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(content)
    (dist / "empty").mkdir()

    (tmp_path / "secret.txt").write_bytes(secret)
    return dist


@pytest.fixture
def settings(dist_dir: Path) -> Settings:
    return Settings(_env_file=None, site_addr="127.0.0.1:0", dist_dir=dist_dir)


@pytest.fixture
def app(settings: Settings):
    return create_app(settings)


@pytest.fixture
async def client(app):
    """In-process HTTP client driving the ASGI app."""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as c:
        yield c
