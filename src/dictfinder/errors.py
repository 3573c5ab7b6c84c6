"""Exceptions raised while loading and reading dictionaries."""

from __future__ import annotations


class DictionaryError(Exception):
    """Base class for dictionary failures."""


class DictionaryIOError(DictionaryError, OSError):
    """A dictionary file could not be opened, read or seeked."""


class DictionaryPathError(DictionaryError):
    """No recognizable dictionary layout was found at a location."""


class DefinitionDecodeError(DictionaryError, ValueError):
    """Stored bytes are not valid UTF-8."""


class IndexParseError(DictionaryError):
    """A single index record is malformed."""

    def __init__(self, message: str, position: int) -> None:
        super().__init__(f"{message} at byte {position}")
        self.position = position


class CacheError(DictionaryError):
    """An index cache is absent, truncated, corrupt or stale."""
