"""
GameHub API — Input Validation Middleware
==========================================

What:  Rejects malformed requests before they reach a route handler.
How:   Plain ASGI; inspects only the scope (query string, method, headers),
       never the body.
When:  Last stage of the pipeline, right before routing.

Rules (checked in this order):
    1. Raw query string longer than max_query_length  → 400
    2. POST whose media type is not application/json  → 415
    3. Query parameter name containing < > { } [ ] \\  → 400
"""

import logging
from typing import Optional

from starlette.requests import Request
from starlette.types import ASGIApp, Receive, Scope, Send

from gamehub.exceptions import (
    BadRequestError,
    GameHubError,
    UnsupportedMediaTypeError,
    error_response,
)

logger = logging.getLogger(__name__)

FORBIDDEN_PARAM_CHARS = frozenset("<>{}[]\\")


class InputValidationMiddleware:
    """
    Args:
        max_query_length: Longest accepted raw (still percent-encoded) query string.
    """

    def __init__(self, app: ASGIApp, max_query_length: int):
        self.app = app
        self.max_query_length = max_query_length

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request(scope)
        error = self.validate(request)
        if error is not None:
            logger.info("Rejected %s %s: %s", request.method, request.url.path, error.message)
            await error_response(error)(scope, receive, send)
            return

        await self.app(scope, receive, send)

    def validate(self, request: Request) -> Optional[GameHubError]:
        raw_query = request.scope.get("query_string", b"")
        if len(raw_query) > self.max_query_length:
            return BadRequestError(
                "Query string too long",
                context={"length": len(raw_query), "limit": self.max_query_length},
            )

        if request.method == "POST":
            content_type = request.headers.get("content-type", "")
            media_type = content_type.split(";", 1)[0].strip().lower()
            if media_type != "application/json":
                return UnsupportedMediaTypeError(content_type)

        for name in request.query_params.keys():
            if FORBIDDEN_PARAM_CHARS.intersection(name):
                return BadRequestError("Invalid query parameter name", context={"param": name})

        return None
