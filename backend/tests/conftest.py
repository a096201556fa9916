"""
GameHub API — Test Configuration (conftest.py)
===============================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── fake_rawg:     Programmable stand-in for the RAWG API (records requests)
    ├── rawg_client:   RawgClient wired to fake_rawg through httpx.MockTransport
    ├── clock:         Manually advanced clock for the rate limiter
    ├── rawg_game:     A RAWG detail-endpoint game payload
    └── test_client:   HTTPX AsyncClient talking to a fresh app (rate limit off)
"""

import os

# Override settings for testing BEFORE any gamehub imports
os.environ["RAWG_API_KEY"] = "test-key-not-real"
os.environ["LOG_LEVEL"] = "WARNING"

import copy
from typing import Any, List, Optional

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from gamehub.main import create_app
from gamehub.middleware.rate_limit import RateLimiter
from gamehub.services.rawg_client import RawgClient

RAWG_BASE_URL = "https://rawg.test/api"


# ══════════════════════════════════════════════════════════════════════════
# Test Doubles
# ══════════════════════════════════════════════════════════════════════════


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeRawg:
    """
    httpx.MockTransport handler standing in for RAWG.

    Set `payload`/`status_code` for a JSON answer, `content` for a raw body,
    or `error` to raise a transport exception. Every request is recorded.
    """

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.status_code = 200
        self.payload: Any = {"count": 0, "next": None, "previous": None, "results": []}
        self.content: Optional[bytes] = None
        self.error: Optional[Exception] = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if self.content is not None:
            return httpx.Response(self.status_code, content=self.content)
        return httpx.Response(self.status_code, json=self.payload)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]


# ══════════════════════════════════════════════════════════════════════════
# Sample Data
# ══════════════════════════════════════════════════════════════════════════

RAWG_GAME = {
    "id": 3498,
    "slug": "grand-theft-auto-v",
    "name": "Grand Theft Auto V",
    "description": "<p>Rockstar Games went bigger.</p>",
    "released": "2013-09-17",
    "background_image": "https://media.rawg.io/media/games/gta5.jpg",
    "rating": 4.47,
    "rating_top": 5,
    "added": 21000,
    "metacritic": 92,
    "playtime": 74,
    "updated": "2024-01-15T12:00:00",
    "reviews_count": 6800,
    "genres": [
        {"id": 4, "name": "Action", "slug": "action"},
        {"id": 3, "name": "Adventure", "slug": "adventure"},
    ],
    "platforms": [
        {"platform": {"id": 4, "name": "PC", "slug": "pc"}, "released_at": "2013-09-17"},
        {"platform": {"id": 187, "name": "PlayStation 5", "slug": "playstation5"}},
    ],
    "stores": [
        {
            "id": 290375,
            "url": "https://store.steampowered.com/app/271590/",
            "store": {"id": 1, "name": "Steam", "image_background": "https://media.rawg.io/steam.jpg"},
        },
        {
            "id": 438095,
            "store": {"id": 11, "name": "Epic Games", "image_background": "https://media.rawg.io/epic.jpg"},
        },
    ],
}


@pytest.fixture
def rawg_game():
    """A RAWG detail payload; a deep copy so tests may mutate it."""
    return copy.deepcopy(RAWG_GAME)


@pytest.fixture
def rawg_envelope(rawg_game):
    return {"count": 1, "next": None, "previous": None, "results": [rawg_game]}


# ══════════════════════════════════════════════════════════════════════════
# Fixtures
# ══════════════════════════════════════════════════════════════════════════


@pytest.fixture
def fake_rawg():
    return FakeRawg()


@pytest.fixture
def rawg_client(fake_rawg):
    return RawgClient(
        base_url=RAWG_BASE_URL,
        api_key="test-key",
        store_ids=["1", "5"],
        transport=httpx.MockTransport(fake_rawg),
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest_asyncio.fixture
async def test_client(rawg_client):
    """
    HTTPX AsyncClient for a fresh app whose rate limiter admits everything.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    app = create_app(rate_limiter=RateLimiter(interval=0.0), rawg_client=rawg_client)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    await rawg_client.aclose()
