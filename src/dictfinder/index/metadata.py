"""Parsing of the ``.ifo`` dictionary descriptor."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from dictfinder.errors import DictionaryIOError
from dictfinder.models import ContentFormat

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class DictionaryMetadata:
    """Fields of a descriptor that the engine cares about."""

    format: ContentFormat
    word_count: int
    bookname: str | None


def parse_field(text: str, field: str) -> str | None:
    """Return the value of the first ``field=value`` line, if any."""
    prefix = f"{field}="
    for line in text.splitlines():
        if line.startswith(prefix):
            return line[len(prefix) :].strip()
    return None


def parse_metadata(text: str) -> DictionaryMetadata:
    """Parse descriptor text into :class:`DictionaryMetadata`.

    A missing ``sametypesequence`` means each entry carries its own type code.
    A missing or malformed ``wordcount`` is treated as zero.
    """
    sequence = parse_field(text, "sametypesequence")
    fmt = ContentFormat.from_code(sequence) if sequence is not None else ContentFormat.UNSPECIFIED

    raw_count = parse_field(text, "wordcount")
    word_count = 0
    if raw_count is not None:
        try:
            word_count = int(raw_count)
        except ValueError:
            LOGGER.warning("Invalid wordcount %r, assuming 0", raw_count)

    return DictionaryMetadata(format=fmt, word_count=word_count, bookname=parse_field(text, "bookname"))


def read_metadata(path: Path) -> DictionaryMetadata:
    """Read and parse a descriptor file."""
    try:
        text = Path(path).read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        raise DictionaryIOError(f"Cannot read descriptor {path}: {exc}") from exc
    return parse_metadata(text)
