"""
GameHub API — Health Check Route
=================================

What:  Liveness endpoint for load balancers and container health checks.
How:   Reports version, uptime and whether the app's RAWG client has an API
       key. It never calls RAWG, so it cannot spend upstream quota or fail
       when RAWG is down.
Note:  Exempt from rate limiting and access logging.
"""

import time

from fastapi import APIRouter, Depends

from gamehub import __version__
from gamehub.routes.games import get_rawg_client
from gamehub.schemas.game import HealthResponse
from gamehub.services.rawg_client import RawgClient

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(client: RawgClient = Depends(get_rawg_client)) -> HealthResponse:
    return HealthResponse(
        status="healthy",
        version=__version__,
        upstream_configured=bool(client.api_key),
        uptime_seconds=round(time.time() - _start_time, 2),
    )
