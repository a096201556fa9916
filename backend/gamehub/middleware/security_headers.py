"""
GameHub API — Security Headers Middleware
==========================================

What:  Adds a fixed set of hardening headers to every response.
How:   Plain ASGI; sets the headers on the `http.response.start` message.
When:  First in the pipeline, so short-circuit responses from the body cap,
       rate limiter and input validator carry the headers too.

Unexpected errors:
    An exception no handler turned into a response is logged here and
    answered with 500 {"error": "Internal server error"}. Starlette's own
    fallback handler sits outside the middleware stack, so answering here
    keeps the security headers and X-Request-ID on those responses. An error
    raised after the response has started is re-raised.

The API serves JSON only, so the CSP denies everything.
"""

import logging

from starlette.datastructures import MutableHeaders
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from gamehub.middleware.request_id import request_id_var

logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
    "Content-Security-Policy": "default-src 'none'; frame-ancestors 'none'",
}


class SecurityHeadersMiddleware:
    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def send_with_headers(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
                headers = MutableHeaders(scope=message)
                for name, value in SECURITY_HEADERS.items():
                    headers[name] = value
            await send(message)

        try:
            await self.app(scope, receive, send_with_headers)
        except Exception as exc:
            if response_started:
                raise
            logger.error(
                "[%s] Unexpected error on %s %s: %s",
                request_id_var.get(""),
                scope.get("method", ""),
                scope.get("path", ""),
                exc,
                exc_info=True,
            )
            response = JSONResponse(status_code=500, content={"error": "Internal server error"})
            await response(scope, receive, send_with_headers)
