"""
GameHub API — Game Route Handlers
==================================

What:  The /games endpoints.
How:   Each handler picks a fixed RAWG query preset, calls RawgClient and
       returns the normalized records. RAWG failures become a generic 500;
       their detail is logged, never returned. Each handler records the
       upstream outcome ("ok", "not_found", "error") in request.state for
       the access log.

Route Inventory:
    GET /games             unfiltered
    GET /games/latest      ordering=-released
    GET /games/popular     ordering=-rating
    GET /games/metacritic  ordering=-metacritic
    GET /games/upcoming    dates=<today>,<today+N days>&ordering=released
    GET /games/search?q=   search=<q>
    GET /games/{game_id}   single game, 404 if RAWG does not know it

    /games/{game_id} is registered last so it does not shadow the fixed paths.
"""

import logging
from datetime import date, datetime, timedelta, timezone
from typing import Dict, List, Optional, Union

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse

from gamehub.config import settings
from gamehub.exceptions import GameHubError, InvalidArgumentError, error_response
from gamehub.schemas.game import ErrorResponse, GameRecord
from gamehub.services.rawg_client import RawgClient

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/games", tags=["Games"])

COLLECTION_ERROR = "Internal server error"
SINGLE_GAME_ERROR = "Failed to fetch game"

COLLECTION_RESPONSES = {
    200: {"description": "Up to one page of games"},
    429: {"description": "Rate limit exceeded", "model": ErrorResponse},
    500: {"description": "RAWG request failed", "model": ErrorResponse},
}


def get_rawg_client(request: Request) -> RawgClient:
    """Dependency: the application's shared RawgClient."""
    return request.app.state.rawg_client


def upcoming_date_range(today: Optional[date] = None) -> str:
    """RAWG `dates` value covering the configured window starting today (UTC)."""
    start = today or datetime.now(timezone.utc).date()
    end = start + timedelta(days=settings.upcoming_window_days)
    return f"{start.isoformat()},{end.isoformat()}"


async def _fetch_collection(
    request: Request,
    client: RawgClient,
    endpoint: str,
    params: Optional[Dict[str, str]] = None,
) -> Union[List[GameRecord], JSONResponse]:
    try:
        games = await client.fetch_collection(endpoint, params)
    except GameHubError as exc:
        request.state.upstream = "error"
        logger.error(
            "Collection fetch %s failed: %s | Context: %s",
            endpoint,
            exc.message,
            exc.context,
        )
        return JSONResponse(status_code=500, content={"error": COLLECTION_ERROR})

    request.state.upstream = "ok"
    return games


@router.get("", response_model=List[GameRecord], responses=COLLECTION_RESPONSES,
            summary="List games")
async def list_games(request: Request, client: RawgClient = Depends(get_rawg_client)):
    return await _fetch_collection(request, client, "/games")


@router.get("/latest", response_model=List[GameRecord], responses=COLLECTION_RESPONSES,
            summary="Newest releases first")
async def latest_games(request: Request, client: RawgClient = Depends(get_rawg_client)):
    return await _fetch_collection(request, client, "/games", {"ordering": "-released"})


@router.get("/popular", response_model=List[GameRecord], responses=COLLECTION_RESPONSES,
            summary="Highest rated first")
async def popular_games(request: Request, client: RawgClient = Depends(get_rawg_client)):
    return await _fetch_collection(request, client, "/games", {"ordering": "-rating"})


@router.get("/metacritic", response_model=List[GameRecord], responses=COLLECTION_RESPONSES,
            summary="Highest Metacritic score first")
async def metacritic_games(request: Request, client: RawgClient = Depends(get_rawg_client)):
    return await _fetch_collection(request, client, "/games", {"ordering": "-metacritic"})


@router.get("/upcoming", response_model=List[GameRecord], responses=COLLECTION_RESPONSES,
            summary="Games releasing soon, earliest first")
async def upcoming_games(request: Request, client: RawgClient = Depends(get_rawg_client)):
    return await _fetch_collection(
        request,
        client,
        "/games",
        {"dates": upcoming_date_range(), "ordering": "released"},
    )


@router.get(
    "/search",
    response_model=List[GameRecord],
    responses={**COLLECTION_RESPONSES, 400: {"description": "Missing q", "model": ErrorResponse}},
    summary="Search games by name",
)
async def search_games(
    request: Request,
    q: Optional[str] = Query(default=None, description="Search term"),
    client: RawgClient = Depends(get_rawg_client),
):
    """
    Full-text search on RAWG.

    An absent or empty `q` is rejected without calling RAWG.
    """
    if not q:
        return error_response(InvalidArgumentError("Search query is required", field="q"))

    return await _fetch_collection(request, client, "/games", {"search": q})


@router.get(
    "/{game_id}",
    response_model=GameRecord,
    responses={
        200: {"description": "Game details", "model": GameRecord},
        404: {"description": "Game not found", "model": ErrorResponse},
        500: {"description": "RAWG request failed", "model": ErrorResponse},
    },
    summary="Get a single game by RAWG id",
)
async def get_game(
    game_id: str,
    request: Request,
    client: RawgClient = Depends(get_rawg_client),
):
    """
    Look up one game.

    A failed fetch is a 500; a fetch that succeeds but finds nothing is a 404.
    """
    try:
        game = await client.fetch_by_id(game_id)
    except GameHubError as exc:
        request.state.upstream = "error"
        logger.error(
            "Game fetch %s failed: %s | Context: %s",
            game_id,
            exc.message,
            exc.context,
        )
        return JSONResponse(status_code=500, content={"error": SINGLE_GAME_ERROR})

    if game is None:
        request.state.upstream = "not_found"
        return JSONResponse(status_code=404, content={"error": "Game not found"})

    request.state.upstream = "ok"
    return game
