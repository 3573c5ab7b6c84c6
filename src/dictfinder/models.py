"""Core DictFinder data models."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, List

if TYPE_CHECKING:
    from dictfinder.index.dictionary import DictionaryHandle

LOGGER = logging.getLogger(__name__)


class ContentFormat(str, Enum):
    """Markup discriminator for one or all definitions in a dictionary."""

    MEANING = "m"
    LOCALE = "l"
    XDFX = "x"
    MEDIAWIKI = "w"
    HTML = "h"
    WORDNET = "n"
    RESOURCE = "r"
    PICTURE = "p"
    UNSPECIFIED = ""

    @classmethod
    def from_code(cls, code: str) -> "ContentFormat":
        """Map a single-character type code to a format.

        Unknown codes fall back to ``MEANING`` with a warning.
        """
        if code:
            for member in cls:
                if member.value == code:
                    return member
        LOGGER.warning("Unknown or unimplemented type sequence %r, falling back to meaning", code)
        return cls.MEANING


@dataclass(frozen=True, slots=True)
class IndexRecord:
    """Location of one definition inside the content file."""

    word: str
    offset: int
    size: int


@dataclass(slots=True)
class Definition:
    """A headword with its decoded definition text."""

    word: str
    text: str
    format: ContentFormat

    def to_dict(self) -> dict:
        return {
            "word": self.word,
            "definition": self.text,
            "definition_type": self.format.name,
        }


@dataclass(slots=True)
class MatchGroup:
    """Records of one dictionary accepted by a matcher for one query."""

    dictionary: "DictionaryHandle"
    records: List[IndexRecord]

    def __len__(self) -> int:
        return len(self.records)
