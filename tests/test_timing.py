"""Tests for timing events and sinks."""

from __future__ import annotations

import json
from pathlib import Path

from dictfinder.timing import JsonLinesTimingSink, NullTimingSink, Operation, TimeLog


class TestTimeLog:
    """Test TimeLog serialization."""

    def test_to_dict(self) -> None:
        event = TimeLog(clock=0.5, operation=Operation.SEARCH, dictionary="Fruits", matcher="Exact Matcher", word="elma")
        data = event.to_dict()
        assert data["clock"] == 0.5
        assert data["operation"] == "Search"
        assert data["dictionary"] == "Fruits"
        assert data["comment"] is None
        assert "datetime" in data

    def test_defaults(self) -> None:
        event = TimeLog(clock=1.0)
        assert event.operation is Operation.OTHER
        assert event.word is None


class TestSinks:
    """Test timing sinks."""

    def test_null_sink_discards(self) -> None:
        NullTimingSink().record(0.1, "Fruits", "elma", "Exact Matcher")

    def test_json_lines_sink_appends(self, tmp_path: Path) -> None:
        path = tmp_path / "timelog.jsonl"
        sink = JsonLinesTimingSink(path)
        sink.record(0.25, "Fruits", "elma", "Exact Matcher")
        sink.write(TimeLog(clock=2.0, operation=Operation.LOAD_DICTIONARY))

        lines = [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]
        assert len(lines) == 2
        assert lines[0]["operation"] == "Search"
        assert lines[0]["word"] == "elma"
        assert lines[0]["matcher"] == "Exact Matcher"
        assert lines[1]["operation"] == "LoadDictionary"

    def test_unwritable_path_is_logged(self, tmp_path: Path, caplog) -> None:
        sink = JsonLinesTimingSink(tmp_path / "missing" / "timelog.jsonl")
        sink.record(0.1, "Fruits", "elma", "Exact Matcher")
        assert "Unable to write timing log" in caplog.text
