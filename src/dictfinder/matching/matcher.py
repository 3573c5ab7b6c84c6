"""Word comparators used to decide whether a headword matches a query."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Sequence

import numpy as np
from rapidfuzz import process
from rapidfuzz.distance import Levenshtein


class WordMatcher(ABC):
    """Stateless predicate over (query, candidate) word pairs."""

    @property
    @abstractmethod
    def name(self) -> str:
        ...

    @abstractmethod
    def compare(self, query: str, candidate: str) -> bool:
        ...

    def select(self, query: str, words: Sequence[str]) -> List[int]:
        """Return positions of ``words`` accepted for ``query``."""
        return [i for i, word in enumerate(words) if self.compare(query, word)]


@dataclass(frozen=True)
class ExactMatcher(WordMatcher):
    """Case and accent sensitive equality."""

    @property
    def name(self) -> str:
        return "Exact Matcher"

    def compare(self, query: str, candidate: str) -> bool:
        return query == candidate


@dataclass(frozen=True)
class LevenshteinMatcher(WordMatcher):
    """Bounded normalized edit distance.

    Candidates whose length differs from the query by more than ``level``
    characters are rejected outright. The rest are accepted when their
    normalized similarity is strictly above ``0.89 - 0.05 * level``. For
    levels large enough to push the threshold below zero every candidate in
    the length window is accepted.
    """

    level: int = 2

    def __post_init__(self) -> None:
        if self.level < 0:
            raise ValueError("level must be non-negative")

    @property
    def name(self) -> str:
        return f"Levenshtein matcher {self.level}"

    @property
    def threshold(self) -> float:
        return 0.89 - 0.05 * self.level

    def compare(self, query: str, candidate: str) -> bool:
        if abs(len(query) - len(candidate)) > self.level:
            return False
        return Levenshtein.normalized_similarity(query, candidate) > self.threshold

    def select(self, query: str, words: Sequence[str]) -> List[int]:
        if not words:
            return []
        lengths = np.fromiter((len(word) for word in words), dtype="int64", count=len(words))
        window = np.flatnonzero(np.abs(lengths - len(query)) <= self.level)
        if window.size == 0:
            return []
        scores = process.cdist(
            [query],
            [words[i] for i in window],
            scorer=Levenshtein.normalized_similarity,
            dtype=np.float64,
        )[0]
        return window[scores > self.threshold].tolist()


def build_matcher(algorithm: str, depth: int = 2) -> WordMatcher:
    """Create a matcher by name; anything but ``levenshtein`` is exact."""
    if algorithm.lower() == "levenshtein":
        return LevenshteinMatcher(level=depth)
    return ExactMatcher()
