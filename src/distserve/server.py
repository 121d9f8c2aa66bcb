"""
Process entry point.

Reads settings, binds the listening socket and hands it to uvicorn. The
socket is bound here rather than by uvicorn so that a bind failure is
reported and turned into a non-zero exit before anything else starts.
"""

import logging
import socket

import uvicorn

from distserve.config import Settings, get_settings
from distserve.log import configure_logging
from distserve.main import create_app

logger = logging.getLogger(__name__)

BACKLOG = 128


def parse_bind_address(address: str) -> tuple[str, int]:
    """
    Split a ``host:port`` string.

    IPv6 hosts may be bracketed, e.g. ``[::1]:3000``.

    Raises:
        ValueError: if the port is missing or not a valid port number
    """
    host, sep, port_text = address.strip().rpartition(":")
    if not sep or not host:
        raise ValueError(f"bind address must look like host:port, got {address!r}")

    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]

    try:
        port = int(port_text)
    except ValueError:
        raise ValueError(f"invalid port in bind address {address!r}") from None
    if not 0 <= port <= 65535:
        raise ValueError(f"port out of range in bind address {address!r}")

    return host, port


def bind_socket(host: str, port: int, backlog: int = BACKLOG) -> socket.socket:
    """
    Create/bind/listen a TCP socket.

    Uses SO_REUSEADDR to make restarts easier during development; binding
    still fails while another socket is listening on the address.

    Raises:
        OSError: if the address cannot be resolved or bound
    """
    family, type_, proto, _, sockaddr = socket.getaddrinfo(
        host, port, type=socket.SOCK_STREAM, flags=socket.AI_PASSIVE
    )[0]

    sock = socket.socket(family, type_, proto)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind(sockaddr)
        sock.listen(backlog)
    except OSError:
        sock.close()
        raise

    return sock


def serve(settings: Settings) -> int:
    """Bind and serve until the process is told to stop. Returns the exit code."""
    try:
        host, port = parse_bind_address(settings.site_addr)
        sock = bind_socket(host, port)
    except (ValueError, OSError) as e:
        logger.error(f"Cannot listen on {settings.site_addr}: {e}")
        return 1

    app = create_app(settings)
    config = uvicorn.Config(
        app,
        host=host,
        port=port,
        log_level="info",
        access_log=False,  # TraceMiddleware logs every request
    )
    server = uvicorn.Server(config)

    logger.info(f"Listening on http://{settings.site_addr}/")
    try:
        server.run(sockets=[sock])
    except SystemExit as e:
        # uvicorn exits on startup failure (lifespan error); report it as ours
        logger.error(f"Server failed to start (uvicorn exit {e.code})")
        return 1
    finally:
        sock.close()

    if not server.started:
        logger.error("Server stopped before it finished starting")
        return 1
    return 0


def main() -> int:
    """Console script entry point."""
    configure_logging()
    return serve(get_settings())
