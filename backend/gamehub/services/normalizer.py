"""
GameHub API — RAWG Record Normalizer
=====================================

What:  Maps a RAWG game object to the flat GameRecord exposed by the API.
How:   Pure functions with no I/O. Collection and single-game lookups both go
       through `normalize_game`, so the two can never drift apart.
Who:   Called by RawgClient after decoding every upstream response.

Store URLs:
    RAWG often lists a store without a purchase link. In that case a search
    URL is built from a fixed per-store template, keyed by the lowercased
    store name. Unknown stores get a generic web-search URL.
"""

from typing import Iterable, List, Optional
from urllib.parse import quote_plus

from gamehub.schemas.game import GameRecord, StoreLink
from gamehub.schemas.rawg import (
    RawgGame,
    RawgGenre,
    RawgPlatformEntry,
    RawgStoreEntry,
)

# ── Store URL Templates ───────────────────────────────────────────────────
# Keys are lowercased store display names as RAWG reports them.
STORE_URL_TEMPLATES = {
    "steam": "https://store.steampowered.com/search/?term={title}",
    "playstation store": "https://store.playstation.com/search/{title}",
    "xbox store": "https://www.xbox.com/games/search?q={title}",
    "nintendo": "https://www.nintendo.com/search/?q={title}&p=1&cat=gme",
    "gog": "https://www.gog.com/games?query={title}",
    "epic games": "https://store.epicgames.com/browse?q={title}",
}

FALLBACK_STORE_URL_TEMPLATE = "https://www.google.com/search?q=buy+{title}+game"


def store_purchase_url(store_name: str, title: str) -> str:
    """
    Build a deterministic store URL for a game.

    The title is query-escaped (spaces become '+') before substitution.

    Example:
        >>> store_purchase_url("Steam", "Half-Life 2")
        'https://store.steampowered.com/search/?term=Half-Life+2'
    """
    template = STORE_URL_TEMPLATES.get(
        (store_name or "").strip().lower(), FALLBACK_STORE_URL_TEMPLATE
    )
    return template.format(title=quote_plus(title or ""))


def genre_names(genres: Optional[Iterable[RawgGenre]]) -> List[str]:
    return [genre.name for genre in genres or ()]


def platform_names(platforms: Optional[Iterable[RawgPlatformEntry]]) -> List[str]:
    return [entry.platform.name for entry in platforms or ()]


def store_links(stores: Optional[Iterable[RawgStoreEntry]], title: str) -> List[StoreLink]:
    """
    Convert RAWG store entries to StoreLinks.

    The purchase URL comes from the entry, then the nested store object,
    and is synthesized only when both are empty.
    """
    links = []
    for entry in stores or ():
        store = entry.store
        url = entry.url or store.url or store_purchase_url(store.name, title)
        links.append(
            StoreLink(
                id=store.id,
                name=store.name,
                url=url,
                image=store.image_background or "",
            )
        )
    return links


def normalize_game(raw: RawgGame) -> GameRecord:
    """
    Map one RAWG game to a GameRecord.

    None scalars become zero values; lists keep upstream order and are not
    deduplicated.
    """
    title = raw.name or ""
    return GameRecord(
        id=str(raw.id or 0),
        title=title,
        description=raw.description or "",
        background_image=raw.background_image or "",
        genres=genre_names(raw.genres),
        rating=raw.rating or 0.0,
        rating_top=raw.rating_top or 0,
        release_date=raw.released or "",
        added=raw.added or 0,
        metacritic=raw.metacritic or 0,
        playtime=raw.playtime or 0,
        updated=raw.updated or "",
        reviews_count=raw.reviews_count or 0,
        platforms=platform_names(raw.platforms),
        stores=store_links(raw.stores, title),
    )
