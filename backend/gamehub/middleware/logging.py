"""
GameHub API — Request Logging Middleware
=========================================

What:  One access-log line per request, with the GameHub outcome attached.
How:   Times the downstream call, then reads what the pipeline and the
       handlers recorded in the request state:
           rate_limited  set by RateLimitMiddleware on a 429
           upstream      set by the /games handlers: "ok", "not_found"
                         or "error"
When:  Directly inside RequestIDMiddleware, outside the policy pipeline, so
       requests rejected by the pipeline are logged as well.

Example:
    GET /games/popular 500 812.4ms upstream=error [a1b2c3d4] from 10.0.0.7
    GET /games 429 0.3ms rate_limited [e5f6a7b8] from 10.0.0.7

Log level by status:
    5xx → ERROR, 4xx → WARNING, everything else → INFO

Not logged: query strings (search terms) and request bodies.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from gamehub.middleware.request_id import request_id_var

logger = logging.getLogger("gamehub.access")


def _level_for(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Health checks are not logged."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path == "/health":
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        upstream = getattr(request.state, "upstream", None)
        rate_limited = getattr(request.state, "rate_limited", False)

        outcome = []
        if upstream:
            outcome.append(f"upstream={upstream}")
        if rate_limited:
            outcome.append("rate_limited")

        rid = request_id_var.get("")
        client_ip = request.client.host if request.client else "unknown"
        logger.log(
            _level_for(response.status_code),
            "%s %s %d %.1fms %s[%s] from %s",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
            "".join(part + " " for part in outcome),
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "status": response.status_code,
                "duration_ms": round(duration_ms, 2),
                "upstream": upstream,
                "rate_limited": rate_limited,
                "client_ip": client_ip,
            },
        )
        return response
