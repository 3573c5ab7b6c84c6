"""Tests for the FastAPI web application."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterator
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from dictfinder.config import AppConfig, GroupConfig
from dictfinder.web.app import app, configure, get_engine


client = TestClient(app)


@pytest.fixture(autouse=True)
def configured(tmp_path: Path, make_dictionary: Callable[..., Path], fruits) -> Iterator[AppConfig]:
    make_dictionary("dicts/fruits", fruits, bookname="Fruits")
    make_dictionary("dicts/more", [("armud", "typo"), ("elma", "red")], bookname="More")
    make_dictionary("tools/tools", [("çekiç", "hammer")], bookname="Tools")
    config = AppConfig(
        paths=[tmp_path / "dicts"],
        settings_path=tmp_path / "none.json",
        groups={"tools": GroupConfig(paths=[tmp_path / "tools"], matcher_type="exact")},
    )
    configure(config)
    yield config
    configure(None)


class TestEngineState:
    """Tests for engine creation."""

    def test_engine_is_loaded_once(self) -> None:
        assert get_engine() is get_engine()

    def test_configure_resets_engine(self, configured: AppConfig) -> None:
        first = get_engine()
        configure(configured)
        assert get_engine() is not first


class TestSearchEndpoint:
    """Tests for POST /search endpoint."""

    def test_empty_word(self) -> None:
        response = client.post("/search", json={"word": ""})
        assert response.status_code == 400
        assert "Empty word" in response.json()["detail"]

    def test_whitespace_word(self) -> None:
        response = client.post("/search", json={"word": "   "})
        assert response.status_code == 400

    def test_missing_word(self) -> None:
        response = client.post("/search", json={})
        assert response.status_code == 422

    def test_search_default_dictionaries(self) -> None:
        response = client.post("/search", json={"word": "armut"})
        assert response.status_code == 200
        data = response.json()
        assert data["Fruits"] == [{"word": "armut", "definition": "pear", "definition_type": "MEANING"}]
        assert data["More"][0]["word"] == "armud"

    def test_search_group(self) -> None:
        response = client.post("/search", json={"word": "çekiç", "group": "tools"})
        assert response.status_code == 200
        assert response.json() == {
            "Tools": [{"word": "çekiç", "definition": "hammer", "definition_type": "MEANING"}]
        }

    def test_group_uses_its_own_matcher(self) -> None:
        response = client.post("/search", json={"word": "cekic", "group": "tools"})
        assert response.json() == {}

    def test_unknown_group(self) -> None:
        response = client.post("/search", json={"word": "elma", "group": "nope"})
        assert response.status_code == 404
        assert "Unknown group" in response.json()["detail"]

    def test_no_results(self) -> None:
        response = client.post("/search", json={"word": "muz"})
        assert response.status_code == 200
        assert response.json() == {}


class TestDictionariesEndpoint:
    """Tests for GET /dictionaries endpoint."""

    def test_lists_dictionaries(self) -> None:
        response = client.get("/dictionaries")
        assert response.status_code == 200
        data = response.json()
        names = {d["name"]: d for d in data["dictionaries"]}
        assert set(names) == {"Fruits", "More", "Tools"}
        assert names["Fruits"]["word_count"] == 5
        assert names["Fruits"]["format"] == "MEANING"
        assert data["groups"] == {"tools": ["Tools"]}

    def test_default_config_when_unconfigured(self, tmp_path: Path) -> None:
        configure(None)
        with patch("dictfinder.web.app.AppConfig") as mock_config_class:
            mock_config_class.return_value.apply_settings_file.return_value = AppConfig(
                paths=[tmp_path / "nowhere"], settings_path=tmp_path / "none.json"
            )
            response = client.get("/dictionaries")
        assert response.status_code == 200
        assert response.json() == {"dictionaries": [], "groups": {}}
