"""
GameHub API — RAWG Upstream Schemas
====================================

What:  Pydantic models for the payloads RAWG returns.
How:   The RAWG client validates decoded JSON against these models; a
       validation failure becomes UpstreamMalformedError.

RAWG shapes (abridged):
    GET /games         → {"count", "next", "previous", "results": [game, ...]}
    GET /games/{id}    → game

    game.genres     → [{"id", "name"}]
    game.platforms  → [{"platform": {"id", "name"}}]
    game.stores     → [{"id", "url"?, "store": {"id", "name", "image_background"}}]

RAWG sends `null` for many scalars (metacritic, released, background_image),
so every scalar is Optional here. The normalizer maps None to zero values.
Unknown fields are ignored.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class RawgGenre(BaseModel):
    id: int = 0
    name: str = ""


class RawgPlatformDetail(BaseModel):
    id: int = 0
    name: str = ""


class RawgPlatformEntry(BaseModel):
    platform: RawgPlatformDetail = Field(default_factory=RawgPlatformDetail)


class RawgStoreDetail(BaseModel):
    id: int = 0
    name: str = ""
    url: Optional[str] = None
    image_background: Optional[str] = None


class RawgStoreEntry(BaseModel):
    """
    One store listing for a game.

    The detail endpoint carries the purchase link on the entry itself
    (`url`); list endpoints omit it.
    """

    id: Optional[int] = None
    url: Optional[str] = None
    store: RawgStoreDetail = Field(default_factory=RawgStoreDetail)


class RawgGame(BaseModel):
    id: Optional[int] = None
    name: Optional[str] = None
    description: Optional[str] = None
    released: Optional[str] = None
    background_image: Optional[str] = None
    rating: Optional[float] = None
    rating_top: Optional[int] = None
    added: Optional[int] = None
    metacritic: Optional[int] = None
    playtime: Optional[int] = None
    updated: Optional[str] = None
    reviews_count: Optional[int] = None
    genres: Optional[List[RawgGenre]] = None
    platforms: Optional[List[RawgPlatformEntry]] = None
    stores: Optional[List[RawgStoreEntry]] = None


class RawgEnvelope(BaseModel):
    """
    Paginated list response. Only `results` is consumed; the `next` and
    `previous` cursors are never followed.
    """

    count: int = 0
    next: Optional[str] = None
    previous: Optional[str] = None
    results: List[RawgGame] = Field(default_factory=list)
