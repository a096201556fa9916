# Services package init
"""
GameHub API — Services Layer
=============================

Service Inventory:
    - RawgClient (rawg_client.py): validated, credentialed, time-bounded
      calls to RAWG; decodes the responses
    - normalizer.py: pure RAWG game → GameRecord mapping, shared by every
      code path that returns games

Services know nothing about HTTP requests or status codes; they raise
GameHubError subclasses and the routes decide what the client sees.
"""
