"""Tests for the dictionary engine."""

from __future__ import annotations

from pathlib import Path
from typing import Callable
from unittest.mock import MagicMock

import pytest

from dictfinder.config import AppConfig, GroupConfig
from dictfinder.engine import Engine, UnknownGroupError
from dictfinder.timing import Operation


@pytest.fixture
def config(tmp_path: Path, make_dictionary: Callable[..., Path], fruits) -> AppConfig:
    make_dictionary("main/fruits", fruits, bookname="Fruits")
    make_dictionary("main/more", [("armud", "typo"), ("elma", "red")], bookname="More")
    make_dictionary("turkish/fruits", fruits, bookname="Fruits")
    return AppConfig(
        paths=[tmp_path / "main"],
        search_algorithm="exact",
        settings_path=tmp_path / "none.json",
        groups={
            "tr": GroupConfig(
                paths=[tmp_path / "turkish"], matcher_type="levenshtein", matcher_depth=2, morpher="tr"
            )
        },
    )


class TestEngine:
    """Test Engine loading and searching."""

    def test_load(self, config: AppConfig) -> None:
        engine = Engine(config).load()
        assert set(engine.dictionaries) == {"Fruits", "More"}
        assert engine.default_names == ["Fruits", "More"]
        assert engine.groups["tr"].names == ["Fruits"]

    def test_shared_dictionary_loaded_once(self, config: AppConfig) -> None:
        engine = Engine(config).load()
        assert len(engine.dictionaries) == 2

    def test_default_search(self, config: AppConfig) -> None:
        engine = Engine(config).load()
        groups = engine.search("elma")
        assert [g.dictionary.bookname for g in groups] == ["Fruits", "More"]

    def test_group_search_uses_group_matcher(self, config: AppConfig) -> None:
        engine = Engine(config).load()
        assert [g.dictionary.bookname for g in engine.search("armud")] == ["More"]
        groups = engine.search("armudlar", group="tr")
        assert {r.word for g in groups for r in g.records} == {"armutlar", "armut"}

    def test_unknown_group(self, config: AppConfig) -> None:
        engine = Engine(config).load()
        with pytest.raises(UnknownGroupError):
            engine.search("elma", group="nope")

    def test_load_event(self, config: AppConfig) -> None:
        sink = MagicMock()
        Engine(config, sink=sink).load()
        event = sink.write.call_args.args[0]
        assert event.operation is Operation.LOAD_DICTIONARY

    def test_no_default_dictionaries_falls_back_to_groups(self, tmp_path: Path, config: AppConfig) -> None:
        config.paths = [tmp_path / "nowhere"]
        engine = Engine(config).load()
        assert engine.default_names == ["Fruits"]
