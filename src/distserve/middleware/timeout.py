"""
Request Timeout Middleware.

Gives every request a deadline for producing its response. A handler that
has not started responding by then is cancelled and the client receives
503 Service Unavailable with an empty body.
"""

import logging
import math

import anyio
from starlette.responses import Response
from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT_SECONDS = 30.0


class TimeoutMiddleware:
    """
    Pure ASGI middleware enforcing a per-request deadline.

    The deadline covers the handler up to ``http.response.start``. Once the
    response has started the deadline is lifted, so streaming a large file
    is never cut off halfway.
    """

    def __init__(self, app: ASGIApp, timeout: float = REQUEST_TIMEOUT_SECONDS) -> None:
        self.app = app
        self.timeout = timeout

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        with anyio.move_on_after(self.timeout) as cancel_scope:

            async def send_with_deadline(message: Message) -> None:
                nonlocal response_started
                if message["type"] == "http.response.start":
                    response_started = True
                    cancel_scope.deadline = math.inf
                await send(message)

            await self.app(scope, receive, send_with_deadline)

        if not cancel_scope.cancelled_caught:
            return

        path = scope.get("path", "")
        if response_started:
            # Headers are already on the wire; nothing left to replace.
            logger.warning(f"Request to {path} cancelled mid-response")
            return

        logger.warning(f"Request to {path} timed out after {self.timeout}s")
        response = Response(status_code=503)
        await response(scope, receive, send)
