"""
GameHub API — Rate Limiting Middleware
=======================================

What:  Per-IP single-slot rate limiter.
How:   Remembers the time of each client's last admitted request. A request
       arriving sooner than `interval` seconds after it is rejected with 429.
Who:   Applied to every request as plain ASGI middleware.
When:  Third in the pipeline, after security headers and the body-size cap.

Algorithm: Single Slot
    1. Purge every client whose last admitted request is older than the
       idle window (60s)
    2. If this client was admitted less than `interval` ago, reject
    3. Otherwise record `now` for this client and admit

    There is no bucket: unused capacity does not accumulate, so a client
    gets at most one request per interval, ever. Rejected requests do not
    move the client's timestamp.

    Steps 1-3 run under a single lock acquisition, so two concurrent requests
    from one client cannot both be admitted inside the same interval.

Memory:
    Idle entries are only purged while requests are being checked. A quiet
    server keeps its last minute of clients until the next request arrives.

Production Upgrade Path:
    This in-memory implementation works for single-process deployments.
    Multi-worker deployments need a shared store (e.g. Redis SET NX PX).
"""

import logging
import math
import threading
import time
from typing import Callable, Dict, Optional

from starlette.types import ASGIApp, Receive, Scope, Send

from gamehub.config import settings
from gamehub.exceptions import RateLimitExceededError, error_response

logger = logging.getLogger(__name__)


class RateLimiter:
    """
    Client → last-admitted-timestamp table guarded by one lock.

    Args:
        interval:    Minimum seconds between admitted requests per client.
        idle_window: Entries older than this many seconds are purged.
        clock:       Monotonic time source in seconds (injectable for tests).
    """

    def __init__(
        self,
        interval: Optional[float] = None,
        idle_window: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.interval = settings.rate_limit_interval if interval is None else interval
        self.idle_window = settings.rate_limit_idle_window if idle_window is None else idle_window
        self._clock = clock
        self._last_seen: Dict[str, float] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._last_seen)

    def __contains__(self, client_id: str) -> bool:
        return client_id in self._last_seen

    def check(self, client_id: str) -> float:
        """
        Try to admit one request from `client_id`.

        Returns:
            0.0 if the request is admitted, otherwise the seconds remaining
            until the client may send again.
        """
        with self._lock:
            now = self._clock()
            self._purge(now)

            last = self._last_seen.get(client_id)
            if last is not None and now - last < self.interval:
                return self.interval - (now - last)

            self._last_seen[client_id] = now
            return 0.0

    def is_allowed(self, client_id: str) -> bool:
        return self.check(client_id) == 0.0

    def _purge(self, now: float) -> None:
        # Caller holds the lock.
        stale = [
            client_id for client_id, last in self._last_seen.items()
            if now - last > self.idle_window
        ]
        for client_id in stale:
            del self._last_seen[client_id]

        if stale:
            logger.debug("Purged %d idle rate-limit entries", len(stale))


class RateLimitMiddleware:
    """
    ASGI adapter around a RateLimiter.

    The limiter is passed in rather than created here, so one instance is
    shared for the life of the app and tests can supply their own.

    Excluded paths:
        /health and the OpenAPI docs are never limited.

    Response on rate limit:
        HTTP 429 {"error": "Too many requests"} with a Retry-After header.
        The request is flagged as `rate_limited` in the request state for
        the access log.
    """

    EXCLUDED_PATHS = {"/health", "/docs", "/openapi.json", "/redoc"}

    def __init__(self, app: ASGIApp, limiter: RateLimiter):
        self.app = app
        self.limiter = limiter

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or scope["path"] in self.EXCLUDED_PATHS:
            await self.app(scope, receive, send)
            return

        # Caveat: behind a reverse proxy this is the proxy's address; run
        # uvicorn with --proxy-headers to get the real client.
        client = scope.get("client")
        client_ip = client[0] if client else "unknown"

        wait = self.limiter.check(client_ip)
        if wait > 0:
            logger.warning(
                "Rate limit exceeded for IP %s on %s (retry in %.2fs)",
                client_ip,
                scope["path"],
                wait,
            )
            scope.setdefault("state", {})["rate_limited"] = True
            response = error_response(
                RateLimitExceededError(
                    retry_after=max(1, math.ceil(wait)),
                    context={"client_ip": client_ip},
                )
            )
            await response(scope, receive, send)
            return

        await self.app(scope, receive, send)
