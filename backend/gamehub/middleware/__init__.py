# Middleware package init
"""
GameHub API — Middleware Pipeline
==================================

What:  Cross-cutting request policies applied to every request.
How:   `install_middleware()` registers every stage on the app in a fixed order.

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging]
            → [Security Headers] → [Body Size Cap] → [Rate Limit] → [Input Validation]
            → Route Handler

    Request ID and Logging are ambient: they never reject anything. The four
    policy stages after them may each pass the request on, annotate it, or
    answer it directly, in which case nothing further down runs.

    The four policy stages are plain ASGI callables, so none of them reads
    the body or runs the rest of the chain in a separate task. Request ID and
    Logging are BaseHTTPMiddleware.

    Starlette runs the LAST added middleware FIRST, so stages are added here
    innermost first.
"""

from fastapi import FastAPI

from gamehub.config import Settings, settings as default_settings
from gamehub.middleware.body_limit import BodySizeLimitMiddleware
from gamehub.middleware.input_validation import InputValidationMiddleware
from gamehub.middleware.logging import RequestLoggingMiddleware
from gamehub.middleware.rate_limit import RateLimiter, RateLimitMiddleware
from gamehub.middleware.request_id import RequestIDMiddleware
from gamehub.middleware.security_headers import SecurityHeadersMiddleware

__all__ = [
    "BodySizeLimitMiddleware",
    "InputValidationMiddleware",
    "RateLimitMiddleware",
    "RateLimiter",
    "RequestIDMiddleware",
    "RequestLoggingMiddleware",
    "SecurityHeadersMiddleware",
    "install_middleware",
]


def install_middleware(
    app: FastAPI,
    rate_limiter: RateLimiter,
    config: Settings = default_settings,
) -> None:
    """Register the full pipeline on `app`."""
    # 4. Input validation — innermost, runs right before routing
    app.add_middleware(InputValidationMiddleware, max_query_length=config.max_query_length)

    # 3. Rate limiting — one admitted request per client per interval
    app.add_middleware(RateLimitMiddleware, limiter=rate_limiter)

    # 2. Body size cap — fails body reads past the limit
    app.add_middleware(BodySizeLimitMiddleware, max_bytes=config.max_body_size)

    # 1. Security headers — on every response, including rejections above
    app.add_middleware(SecurityHeadersMiddleware)

    # Ambient: access log, then request id (outermost)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
