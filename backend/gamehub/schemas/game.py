"""
GameHub API — Public Response Schemas
======================================

What:  Pydantic models defining the stable API contract GameHub exposes.
How:   Route handlers declare these as response models; FastAPI serializes
       them and documents them in the OpenAPI schema.

Design Decision:
    These are separate from the RAWG models in `schemas/rawg.py`. RAWG's
    shape can change; this one does not. The normalizer is the only code
    that knows both.
"""

from typing import List

from pydantic import BaseModel, Field


class StoreLink(BaseModel):
    """
    What:  Where a game can be bought.
    Note:  `url` is never empty: it is synthesized when RAWG omits it.
    """
    id: int = Field(description="RAWG store id")
    name: str = Field(description="Store display name")
    url: str = Field(description="Purchase or store-search URL")
    image: str = Field(default="", description="Store badge image URL")


class GameRecord(BaseModel):
    """
    What:  Flat representation of a game.
    Who:   Returned by every /games endpoint, alone or in a list.

    Zero values mean "unknown": metacritic 0 is "not rated", an empty
    release_date is "no date announced".
    """
    id: str = Field(description="RAWG game id, as a string")
    title: str = Field(default="", description="Game title")
    description: str = Field(default="", description="Description (HTML, detail endpoint only)")
    background_image: str = Field(default="", description="Cover/background image URL")
    genres: List[str] = Field(default_factory=list, description="Genre names, upstream order")
    rating: float = Field(default=0.0, description="Average rating, 0.0-5.0")
    rating_top: int = Field(default=0, description="Upper bound of the rating scale")
    release_date: str = Field(default="", description="ISO release date or empty")
    added: int = Field(default=0, description="Number of RAWG users who added the game")
    metacritic: int = Field(default=0, description="Metacritic score 0-100, 0 = not rated")
    playtime: int = Field(default=0, description="Average playtime in hours")
    updated: str = Field(default="", description="Last-updated timestamp")
    reviews_count: int = Field(default=0, description="Number of reviews")
    platforms: List[str] = Field(default_factory=list, description="Platform names")
    stores: List[StoreLink] = Field(default_factory=list, description="Store links")


class ErrorResponse(BaseModel):
    """
    What:  Error body shared by every failure response.

    Example:
        {"error": "Search query is required"}
    """
    error: str = Field(description="Human-readable error description")


class HealthResponse(BaseModel):
    status: str = Field(description="Always 'healthy' when the process answers")
    version: str = Field(description="Application version")
    upstream_configured: bool = Field(description="Whether RAWG_API_KEY is set")
    uptime_seconds: float = Field(description="Seconds since service started")
