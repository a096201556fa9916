"""
GameHub API — Application Package Initializer
==============================================

What: Marks the `gamehub` directory as a Python package.
Who:  Imported by uvicorn (`gamehub.main:app`), the CLI entry point and pytest.

Architecture Note:
    GameHub is a thin façade over the RAWG game-metadata API:

    ┌─────────────────────────────────────┐
    │      Middleware Pipeline            │  ← headers, body cap, rate limit, validation
    ├─────────────────────────────────────┤
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services (RAWG client, normalizer)│  ← upstream I/O and record mapping
    ├─────────────────────────────────────┤
    │        Schemas (Pydantic)           │  ← upstream and external shapes
    └─────────────────────────────────────┘

    Nothing is persisted. The only shared state is the rate limiter's
    in-memory client table.
"""

__version__ = "1.0.0"
