"""Binary ``.idx`` index decoding.

An index file is a sequence of records laid out as::

    word (UTF-8) | 0x00 | offset (u32, big endian) | size (u32, big endian)

Malformed records are logged and skipped. Every iteration of the decoder
moves the cursor forward, so corrupt input always terminates.
"""

from __future__ import annotations

import logging
import struct
from pathlib import Path
from typing import Iterable, Iterator, List

from dictfinder.errors import DictionaryIOError, IndexParseError
from dictfinder.models import IndexRecord

LOGGER = logging.getLogger(__name__)

_TERMINATOR = b"\x00"
_LOCATION = struct.Struct(">II")


def _decode_one(data: bytes, pos: int) -> tuple[IndexRecord | None, int]:
    """Decode the record starting at ``pos``.

    Returns the record (``None`` at a clean end of input) and the position of
    the next record. Raises :class:`IndexParseError` carrying the position to
    resume from when the record is malformed.
    """
    end = data.find(_TERMINATOR, pos)
    if end == -1:
        if pos < len(data):
            LOGGER.debug("Ignoring %d trailing bytes without terminator", len(data) - pos)
        return None, len(data)

    location_end = end + 1 + _LOCATION.size
    if location_end > len(data):
        raise IndexParseError("Truncated offset/size pair", len(data))

    try:
        word = data[pos:end].decode("utf-8")
    except UnicodeDecodeError as exc:
        raise IndexParseError(f"Invalid UTF-8 in headword ({exc.reason})", location_end) from exc

    offset, size = _LOCATION.unpack_from(data, end + 1)
    return IndexRecord(word=word, offset=offset, size=size), location_end


def iter_records(data: bytes) -> Iterator[IndexRecord]:
    """Yield records from raw index bytes in file order."""
    pos = 0
    while pos < len(data):
        try:
            record, next_pos = _decode_one(data, pos)
        except IndexParseError as exc:
            LOGGER.error("Error parsing index file, skipping record: %s", exc)
            next_pos = exc.position
            record = None
        if next_pos <= pos:
            # Should not happen; resynchronise one byte further to stay finite.
            next_pos = pos + 1
        pos = next_pos
        if record is not None:
            yield record


def decode_index(data: bytes) -> List[IndexRecord]:
    """Decode a complete index into an ordered list of records."""
    return list(iter_records(data))


def encode_index(records: Iterable[IndexRecord]) -> bytes:
    """Serialize records in the ``.idx`` layout."""
    parts = []
    for record in records:
        parts.append(record.word.encode("utf-8"))
        parts.append(_TERMINATOR)
        parts.append(_LOCATION.pack(record.offset, record.size))
    return b"".join(parts)


def read_index(path: Path) -> List[IndexRecord]:
    """Read and decode an index file from disk."""
    try:
        data = Path(path).read_bytes()
    except OSError as exc:
        LOGGER.error("Error opening index file at %s", path)
        raise DictionaryIOError(f"Cannot read index {path}: {exc}") from exc
    return decode_index(data)
