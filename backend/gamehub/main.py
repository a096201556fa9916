"""
GameHub API — FastAPI Application Factory
==========================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn gamehub.main:app), and
       by tests that need an app with their own rate limiter or RAWG client.
When:  Once at server startup; the returned app handles all subsequent requests.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  Req ID → Logging → Security Headers → Body Cap     │
    │         → Rate Limit → Input Validation             │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────────┐ ┌──────────────┐ ┌─────────────┐  │
    │  │ GET /games/* │ │ GET /games/id│ │ GET /health │  │
    │  └──────────────┘ └──────────────┘ └─────────────┘  │
    │                                                     │
    │  Exception Handlers:                                │
    │  GameHubError→own status │ HTTP→{"error"} │ *→500   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, warn if RAWG_API_KEY is missing
    Shutdown: close the pooled RAWG HTTP client
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from gamehub import __version__
from gamehub.config import Settings, settings
from gamehub.exceptions import GameHubError, error_response
from gamehub.middleware import RateLimiter, install_middleware
from gamehub.middleware.request_id import request_id_var
from gamehub.routes import games, health
from gamehub.services.rawg_client import RawgClient

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: Optional[str] = None) -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once during app startup, before anything else logs.
    """
    log_format = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

    logging.basicConfig(
        level=getattr(logging, level or settings.log_level, logging.INFO),
        format=log_format,
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),  # Docker captures stdout
        ],
        force=True,
    )

    # Third-party libraries log every connection at DEBUG/INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup sequence:
        1. Setup logging
        2. Warn (don't fail) when RAWG_API_KEY is missing; requests will 500
           until it is set

    Shutdown sequence:
        1. Close the RAWG client's connection pool
    """
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("GameHub API %s starting up...", __version__)

    rawg_client = app.state.rawg_client
    if not rawg_client.api_key:
        logger.warning("RAWG_API_KEY is not set; /games requests will fail until it is.")

    logger.info("Upstream: %s (timeout %.1fs)", rawg_client.base_url, rawg_client.timeout)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("GameHub API shutting down...")
    await app.state.rawg_client.aclose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers so every error body is {"error": ...}.

    Handler hierarchy:
        GameHubError           → its own status_code (413 for body cap, ...)
        HTTPException          → its status, detail as the error message
        RequestValidationError → 400
        Exception (fallback)   → 500, traceback logged server-side only

    SecurityHeadersMiddleware already answers unexpected errors inside the
    pipeline; the Exception handler only sees errors raised outside it.
    """

    @app.exception_handler(GameHubError)
    async def handle_gamehub_error(request: Request, exc: GameHubError):
        rid = request_id_var.get("")
        logger.warning("[%s] %s: %s | Context: %s", rid, type(exc).__name__, exc.message, exc.context)
        return error_response(exc)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Request validation failed: %s", rid, exc.errors())
        return JSONResponse(status_code=400, content={"error": "Invalid request parameters"})

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    rate_limiter: Optional[RateLimiter] = None,
    rawg_client: Optional[RawgClient] = None,
    config: Settings = settings,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        rate_limiter: Limiter shared by all requests to this app. A fresh one
                      built from `config` when omitted.
        rawg_client:  Upstream client. A fresh one built from `config` when
                      omitted.
        config:       Settings for the middleware limits and the default
                      RAWG client.

    Returns: Fully configured FastAPI instance ready to receive requests.
    """
    app = FastAPI(
        title="GameHub API",
        description=(
            "Stable, simplified game metadata backed by the RAWG API. "
            "Browse, rank and search games, with store links for every title."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    if rate_limiter is None:
        rate_limiter = RateLimiter(
            interval=config.rate_limit_interval,
            idle_window=config.rate_limit_idle_window,
        )
    if rawg_client is None:
        rawg_client = RawgClient(config=config)

    app.state.rate_limiter = rate_limiter
    app.state.rawg_client = rawg_client

    install_middleware(app, app.state.rate_limiter, config)
    register_exception_handlers(app)

    app.include_router(games.router)
    app.include_router(health.router)

    return app


# ── Application Instance ─────────────────────────────────────────────────
# uvicorn expects `gamehub.main:app` to be importable
app = create_app()
