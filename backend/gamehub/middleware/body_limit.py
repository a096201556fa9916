"""
GameHub API — Request Body Size Cap
====================================

What:  Limits how many body bytes a request may deliver.
How:   Pure ASGI middleware that wraps the `receive` channel and counts the
       bytes of each `http.request` message. Once the running total passes
       the cap, the read raises PayloadTooLargeError.
When:  Second in the pipeline.

Behavior:
    Nothing is rejected up front (Content-Length is not inspected). A request
    whose body is never read is never rejected. The error surfaces inside
    whatever code consumes the body. Route handlers get the 413 from the
    app's GameHubError handler; if the error escapes the app before a
    response has started, this middleware sends the 413 itself.

Note:
    The stages inside this one (rate limit, input validation) are plain ASGI
    as well, so nothing between here and the route reads the body in a
    separate task.
"""

import logging

from starlette.types import ASGIApp, Message, Receive, Scope, Send

from gamehub.exceptions import PayloadTooLargeError, error_response

logger = logging.getLogger(__name__)


class BodySizeLimitMiddleware:
    """
    Args:
        max_bytes: Largest body, in bytes, that may be read in full.
    """

    def __init__(self, app: ASGIApp, max_bytes: int):
        self.app = app
        self.max_bytes = max_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        received = 0
        response_started = False

        async def limited_receive() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_bytes:
                    logger.warning(
                        "Request body on %s exceeded %d bytes",
                        scope.get("path", ""),
                        self.max_bytes,
                    )
                    raise PayloadTooLargeError(limit=self.max_bytes)
            return message

        async def tracking_send(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, limited_receive, tracking_send)
        except PayloadTooLargeError as exc:
            if response_started:
                raise
            await error_response(exc)(scope, receive, send)
