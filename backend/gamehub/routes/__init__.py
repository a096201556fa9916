# Routes package init
"""
GameHub API — Routes Package
=============================

Route Inventory:
    - games.py:   GET /games, /games/{latest,popular,metacritic,upcoming,search},
                  GET /games/{game_id}
    - health.py:  GET /health

Design Principle:
    Routes are THIN: pick a RAWG preset, call RawgClient, map failures to
    status codes. Upstream I/O and record mapping live in services.
"""
