"""Reading definitions out of the ``.dict`` content file."""

from __future__ import annotations

import logging
from pathlib import Path

from dictfinder.errors import DefinitionDecodeError, DictionaryIOError
from dictfinder.models import ContentFormat, Definition, IndexRecord

LOGGER = logging.getLogger(__name__)


def decode_definition(word: str, buffer: bytes, fmt: ContentFormat) -> Definition:
    """Turn raw content bytes into a :class:`Definition`.

    With an unspecified dictionary format the first byte is the entry's own
    type code and is stripped before decoding.
    """
    if fmt is ContentFormat.UNSPECIFIED:
        code = buffer[:1].decode("ascii", errors="replace")
        fmt = ContentFormat.from_code(code)
        buffer = buffer[1:]

    try:
        text = buffer.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise DefinitionDecodeError(f"Definition of {word!r} is not valid UTF-8: {exc.reason}") from exc

    if fmt is ContentFormat.HTML:
        text = text.strip()
    return Definition(word=word, text=text, format=fmt)


def read_definition(content_path: Path, record: IndexRecord, fmt: ContentFormat) -> Definition:
    """Read the byte range of ``record`` and decode it under ``fmt``."""
    try:
        with Path(content_path).open("rb") as handle:
            handle.seek(record.offset)
            buffer = handle.read(record.size)
    except OSError as exc:
        raise DictionaryIOError(f"Cannot read {content_path}: {exc}") from exc

    if len(buffer) != record.size:
        raise DictionaryIOError(
            f"Short read for {record.word!r} in {content_path}: "
            f"expected {record.size} bytes at {record.offset}, got {len(buffer)}"
        )
    LOGGER.debug("Read %d bytes for %r", record.size, record.word)
    return decode_definition(record.word, buffer, fmt)
