"""
GameHub API — Request ID Middleware
====================================

What:  Tags each request with a short correlation id and echoes it back.
How:   Reuses the client's X-Request-ID header when it is a plain token
       (letters, digits, '.', '_', '-', at most 64 chars), otherwise
       generates an 8-char id. The id goes into a ContextVar for loggers and
       into request.state for handlers, and is set on the response.
When:  Outermost middleware, so every later log line can use the id.
"""

import re
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"
CLIENT_REQUEST_ID_PATTERN = re.compile(r"[A-Za-z0-9._-]{1,64}")

# Coroutine-local: concurrent requests on one event loop each see their own id.
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def resolve_request_id(header_value: str) -> str:
    """The client's id if it is a safe token, else a fresh 8-char id."""
    if header_value and CLIENT_REQUEST_ID_PATTERN.fullmatch(header_value):
        return header_value
    return uuid.uuid4().hex[:8]


class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = resolve_request_id(request.headers.get(REQUEST_ID_HEADER, ""))

        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = rid
        return response
