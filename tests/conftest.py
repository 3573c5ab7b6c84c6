"""Shared fixtures for building small dictionaries on disk."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Sequence

import pytest

from dictfinder.index.codec import encode_index
from dictfinder.models import IndexRecord


def write_dictionary(
    directory: Path,
    entries: Sequence[tuple[str, bytes | str]],
    *,
    name: str = "test",
    bookname: str | None = "Test Dictionary",
    sametypesequence: str | None = "m",
) -> Path:
    """Write ``.ifo``, ``.idx`` and ``.dict`` files and return the ``.ifo`` path."""
    directory.mkdir(parents=True, exist_ok=True)
    content = b""
    records = []
    for word, definition in entries:
        data = definition.encode("utf-8") if isinstance(definition, str) else definition
        records.append(IndexRecord(word=word, offset=len(content), size=len(data)))
        content += data

    lines = ["StarDict's dict ifo file", "version=2.4.2", f"wordcount={len(records)}"]
    if bookname is not None:
        lines.append(f"bookname={bookname}")
    if sametypesequence is not None:
        lines.append(f"sametypesequence={sametypesequence}")

    ifo_path = directory / f"{name}.ifo"
    ifo_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    (directory / f"{name}.idx").write_bytes(encode_index(records))
    (directory / f"{name}.dict").write_bytes(content)
    return ifo_path


@pytest.fixture
def make_dictionary(tmp_path: Path) -> Callable[..., Path]:
    """Build a dictionary under ``tmp_path / dirname``."""

    def _make(dirname: str, entries: Sequence[tuple[str, bytes | str]], **kwargs) -> Path:
        return write_dictionary(tmp_path / dirname, entries, **kwargs)

    return _make


@pytest.fixture
def fruits() -> list[tuple[str, str]]:
    return [
        ("armut", "pear"),
        ("elma", "apple"),
        ("erik", "plum"),
        ("armutlar", "pears"),
        ("kiraz", "cherry"),
    ]
