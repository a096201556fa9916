"""
GameHub API — Normalizer Unit Tests
====================================

What:  Tests for the RAWG → GameRecord mapping and store URL synthesis.
How:   Pure functions, so no fixtures beyond sample payloads.
"""

import pytest

from gamehub.schemas.rawg import RawgGame
from gamehub.services.normalizer import (
    FALLBACK_STORE_URL_TEMPLATE,
    normalize_game,
    store_purchase_url,
)


class TestStorePurchaseUrl:

    def test_steam_template_with_escaped_title(self):
        url = store_purchase_url("Steam", "Half-Life 2: Episode One")
        assert url == "https://store.steampowered.com/search/?term=Half-Life+2%3A+Episode+One"

    def test_store_name_match_is_case_insensitive(self):
        assert store_purchase_url("STEAM", "Portal") == store_purchase_url("steam", "Portal")
        assert store_purchase_url("PlayStation Store", "Portal") == (
            "https://store.playstation.com/search/Portal"
        )

    @pytest.mark.parametrize(
        "store_name, expected",
        [
            ("Steam", "https://store.steampowered.com/search/?term=Celeste"),
            ("PlayStation Store", "https://store.playstation.com/search/Celeste"),
            ("Xbox Store", "https://www.xbox.com/games/search?q=Celeste"),
            ("Nintendo", "https://www.nintendo.com/search/?q=Celeste&p=1&cat=gme"),
            ("GOG", "https://www.gog.com/games?query=Celeste"),
            ("Epic Games", "https://store.epicgames.com/browse?q=Celeste"),
        ],
    )
    def test_known_storefronts(self, store_name, expected):
        assert store_purchase_url(store_name, "Celeste") == expected

    def test_unknown_store_falls_back_to_web_search(self):
        url = store_purchase_url("itch.io", "Celeste Classic")
        assert url == "https://www.google.com/search?q=buy+Celeste+Classic+game"
        assert url == FALLBACK_STORE_URL_TEMPLATE.format(title="Celeste+Classic")

    def test_title_special_characters_are_escaped(self):
        url = store_purchase_url("GOG", "Tom & Jerry?")
        assert url == "https://www.gog.com/games?query=Tom+%26+Jerry%3F"


class TestNormalizeGame:

    def test_maps_every_field(self, rawg_game):
        record = normalize_game(RawgGame.model_validate(rawg_game))

        assert record.id == "3498"
        assert record.title == "Grand Theft Auto V"
        assert record.description == "<p>Rockstar Games went bigger.</p>"
        assert record.background_image == "https://media.rawg.io/media/games/gta5.jpg"
        assert record.genres == ["Action", "Adventure"]
        assert record.rating == 4.47
        assert record.rating_top == 5
        assert record.release_date == "2013-09-17"
        assert record.added == 21000
        assert record.metacritic == 92
        assert record.playtime == 74
        assert record.updated == "2024-01-15T12:00:00"
        assert record.reviews_count == 6800
        assert record.platforms == ["PC", "PlayStation 5"]

    def test_store_url_passed_through_when_present(self, rawg_game):
        record = normalize_game(RawgGame.model_validate(rawg_game))

        steam = record.stores[0]
        assert steam.id == 1
        assert steam.name == "Steam"
        assert steam.url == "https://store.steampowered.com/app/271590/"
        assert steam.image == "https://media.rawg.io/steam.jpg"

    def test_store_url_synthesized_when_absent(self, rawg_game):
        record = normalize_game(RawgGame.model_validate(rawg_game))

        epic = record.stores[1]
        assert epic.url == "https://store.epicgames.com/browse?q=Grand+Theft+Auto+V"

    def test_empty_store_url_uses_template(self, rawg_game):
        rawg_game["stores"] = [{"url": "", "store": {"id": 1, "name": "Steam", "url": ""}}]
        record = normalize_game(RawgGame.model_validate(rawg_game))
        assert record.stores[0].url == (
            "https://store.steampowered.com/search/?term=Grand+Theft+Auto+V"
        )

    def test_nested_store_url_is_used_before_synthesis(self, rawg_game):
        rawg_game["stores"] = [
            {"store": {"id": 5, "name": "GOG", "url": "https://www.gog.com/game/gta"}}
        ]
        record = normalize_game(RawgGame.model_validate(rawg_game))
        assert record.stores[0].url == "https://www.gog.com/game/gta"

    def test_every_store_link_has_a_url(self, rawg_game):
        rawg_game["stores"] = [
            {"store": {"id": 99, "name": "", "image_background": None}},
            {"store": {"id": 9, "name": "itch.io"}},
        ]
        record = normalize_game(RawgGame.model_validate(rawg_game))
        assert all(link.url for link in record.stores)
        assert record.stores[0].image == ""

    def test_nulls_become_zero_values(self):
        raw = RawgGame.model_validate({
            "id": 7,
            "name": "Unreleased Thing",
            "released": None,
            "metacritic": None,
            "background_image": None,
            "rating": None,
            "genres": None,
            "platforms": None,
            "stores": None,
        })
        record = normalize_game(raw)

        assert record.release_date == ""
        assert record.metacritic == 0
        assert record.background_image == ""
        assert record.rating == 0.0
        assert record.genres == []
        assert record.platforms == []
        assert record.stores == []

    def test_duplicates_are_passed_through(self, rawg_game):
        rawg_game["genres"] = [{"id": 4, "name": "Action"}, {"id": 4, "name": "Action"}]
        record = normalize_game(RawgGame.model_validate(rawg_game))
        assert record.genres == ["Action", "Action"]

    def test_missing_id_normalizes_to_zero_string(self):
        record = normalize_game(RawgGame.model_validate({"name": "Ghost"}))
        assert record.id == "0"

    def test_is_deterministic(self, rawg_game):
        raw = RawgGame.model_validate(rawg_game)
        assert normalize_game(raw) == normalize_game(raw)
