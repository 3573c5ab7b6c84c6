"""Expansion of an inflected query into candidate root words."""

from __future__ import annotations

from typing import List


class Morpher:
    """Identity expansion: the query is its own only root."""

    name = "none"

    def possible_roots(self, word: str) -> List[str]:
        return [word]


class EnglishMorpher(Morpher):
    name = "en"


class TurkishMorpher(Morpher):
    """Adds the stem of a word carrying the ``-ler`` plural suffix."""

    name = "tr"

    def possible_roots(self, word: str) -> List[str]:
        roots = [word]
        if word.endswith("ler") and len(word) > 3:
            roots.append(word[: -len("ler")])
        return roots


_MORPHERS = {cls.name: cls for cls in (Morpher, EnglishMorpher, TurkishMorpher)}


def build_morpher(name: str) -> Morpher:
    """Create a morpher by language code, defaulting to identity."""
    return _MORPHERS.get(name.lower(), Morpher)()
