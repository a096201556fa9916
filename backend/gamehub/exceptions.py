"""
GameHub API — Custom Exception Hierarchy
=========================================

What:  Application-specific exceptions for every failure the façade can hit.
How:   Each exception carries a message, an optional context dict and the
       HTTP status it maps to. The middleware pipeline turns validation
       failures into responses with `error_response()`; route handlers catch
       upstream failures and answer with a generic message.
Who:   Raised by the RAWG client, the body-size cap and the validators.

Exception Hierarchy:
    GameHubError (base)
    ├── UpstreamError                  → 500 (detail never returned to clients)
    │   ├── InvalidEndpointError       → endpoint failed the character check
    │   ├── MissingCredentialError     → RAWG_API_KEY not configured
    │   ├── UpstreamUnavailableError   → network failure or deadline expired
    │   ├── UpstreamMalformedError     → body is not the expected JSON
    │   └── UpstreamRejectedError      → RAWG answered with a non-2xx status
    ├── InvalidArgumentError           → 400 (empty id or search term)
    ├── BadRequestError                → 400 (oversized/invalid query)
    ├── UnsupportedMediaTypeError      → 415
    ├── PayloadTooLargeError           → 413
    └── RateLimitExceededError         → 429
"""

from typing import Any, Dict, Optional

from starlette.responses import JSONResponse


class GameHubError(Exception):
    """
    Base exception for all GameHub application errors.

    Attributes:
        message:     User-facing error description
        context:     Additional debug info (logged but NOT returned to client)
        status_code: HTTP status used when the error reaches a client
    """

    status_code = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


# ══════════════════════════════════════════════════════════════════════════
# Upstream (RAWG) Errors
# ══════════════════════════════════════════════════════════════════════════


class UpstreamError(GameHubError):
    """Base for every failure raised by the RAWG client."""

    def __init__(
        self,
        message: str = "Upstream request failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class InvalidEndpointError(UpstreamError):
    """
    Raised when an upstream endpoint path fails validation.

    When:  The path does not start with '/' or contains characters outside
           [a-zA-Z0-9/_?=&-]. No network call is made.
    """

    def __init__(self, endpoint: str, reason: str):
        super().__init__(
            message=f"Invalid endpoint: {reason}",
            context={"endpoint": endpoint},
        )
        self.endpoint = endpoint


class MissingCredentialError(UpstreamError):
    """Raised when RAWG_API_KEY is empty at fetch time."""

    def __init__(self):
        super().__init__(message="RAWG_API_KEY not configured")


class UpstreamUnavailableError(UpstreamError):
    """
    Raised when the upstream call could not complete.

    When:  Connection refused/reset, DNS failure, or the total deadline expired.
    """

    def __init__(
        self,
        message: str = "RAWG is unreachable",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class UpstreamMalformedError(UpstreamError):
    """Raised when the upstream body is not JSON or not the expected shape."""

    def __init__(
        self,
        message: str = "RAWG returned a malformed response",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class UpstreamRejectedError(UpstreamError):
    """Raised when RAWG answers with a non-success status (bad key, 5xx, ...)."""

    def __init__(self, status: int, context: Optional[Dict[str, Any]] = None):
        ctx = context or {}
        ctx["status"] = status
        super().__init__(message=f"RAWG responded with HTTP {status}", context=ctx)
        self.status = status


# ══════════════════════════════════════════════════════════════════════════
# Client-Facing Errors
# ══════════════════════════════════════════════════════════════════════════


class InvalidArgumentError(GameHubError):
    """Raised when a required argument (game id, search term) is empty."""

    status_code = 400

    def __init__(self, message: str = "Invalid argument", field: Optional[str] = None):
        super().__init__(message=message, context={"field": field} if field else None)
        self.field = field


class BadRequestError(GameHubError):
    """Raised for oversized query strings and invalid query parameter names."""

    status_code = 400

    def __init__(
        self,
        message: str = "Bad request",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class UnsupportedMediaTypeError(GameHubError):
    """Raised for POST requests whose Content-Type is not application/json."""

    status_code = 415

    def __init__(self, content_type: str = ""):
        super().__init__(
            message="Content-Type must be application/json",
            context={"content_type": content_type},
        )


class PayloadTooLargeError(GameHubError):
    """
    Raised while reading a request body that exceeds the configured cap.

    When:  Raised from the wrapped ASGI receive channel, so it surfaces in
           whatever code consumes the body.
    """

    status_code = 413

    def __init__(self, limit: int):
        super().__init__(
            message="Request body too large",
            context={"limit": limit},
        )
        self.limit = limit


class RateLimitExceededError(GameHubError):
    """
    Raised when a client sends a request inside its rate-limit interval.

    Response includes a Retry-After header (whole seconds, at least 1).
    """

    status_code = 429

    def __init__(self, retry_after: int = 1, context: Optional[Dict[str, Any]] = None):
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message="Too many requests", context=ctx)
        self.retry_after = retry_after


def error_response(exc: GameHubError) -> JSONResponse:
    """Build the `{"error": message}` response for a client-facing error."""
    headers = {}
    if isinstance(exc, RateLimitExceededError):
        headers["Retry-After"] = str(exc.retry_after)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message},
        headers=headers,
    )
