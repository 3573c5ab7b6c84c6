"""Query orchestration across loaded dictionaries."""

from __future__ import annotations

import json
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Iterable, List

from dictfinder.errors import DictionaryError
from dictfinder.index.dictionary import DictionaryHandle
from dictfinder.matching.matcher import WordMatcher
from dictfinder.matching.morpher import Morpher
from dictfinder.models import Definition, MatchGroup
from dictfinder.timing import NullTimingSink, TimingSink

LOGGER = logging.getLogger(__name__)


class Searcher:
    """Runs one matcher over a sequence of dictionaries.

    Dictionaries keep the caller's order in the output and those without a
    match are left out. Within a group, record order is not guaranteed.
    """

    def __init__(
        self,
        matcher: WordMatcher,
        *,
        sink: TimingSink | None = None,
        max_workers: int | None = None,
    ) -> None:
        self.matcher = matcher
        self.sink = sink if sink is not None else NullTimingSink()
        self.max_workers = max_workers

    def search(self, dictionaries: Iterable[DictionaryHandle], word: str) -> List[MatchGroup]:
        groups: List[MatchGroup] = []
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            for dictionary in dictionaries:
                start = time.perf_counter()
                records = dictionary.find_matches(self.matcher, word, executor=executor)
                elapsed = time.perf_counter() - start
                self._report(elapsed, dictionary.bookname, word)

                if records:
                    groups.append(MatchGroup(dictionary=dictionary, records=records))
                else:
                    LOGGER.debug("Found no result in %s", dictionary.bookname)
                LOGGER.debug(
                    "Searched %s with %s in %.4fs", word, self.matcher.name, elapsed
                )
        return groups

    def search_roots(
        self, dictionaries: Iterable[DictionaryHandle], word: str, morpher: Morpher
    ) -> List[MatchGroup]:
        """Search every root of ``word`` and concatenate the groups."""
        dictionaries = list(dictionaries)
        groups: List[MatchGroup] = []
        for root in morpher.possible_roots(word):
            groups.extend(self.search(dictionaries, root))
        return groups

    def _report(self, elapsed: float, bookname: str, word: str) -> None:
        try:
            self.sink.record(elapsed, bookname, word, self.matcher.name)
        except Exception as exc:
            LOGGER.warning("Timing sink failed: %s", exc)


def resolve_definitions(group: MatchGroup) -> List[Definition]:
    """Read every definition of a group, skipping the ones that fail."""
    definitions: List[Definition] = []
    for record in group.records:
        try:
            definitions.append(group.dictionary.read_definition(record))
        except DictionaryError as exc:
            LOGGER.warning("Skipping definition of %r in %s: %s", record.word, group.dictionary.bookname, exc)
    return definitions


def groups_to_dict(groups: Iterable[MatchGroup]) -> Dict[str, List[dict]]:
    """Map dictionary names to their resolved definitions."""
    output: Dict[str, List[dict]] = {}
    for group in groups:
        entries = output.setdefault(group.dictionary.bookname, [])
        entries.extend(definition.to_dict() for definition in resolve_definitions(group))
    return output


def groups_to_json(groups: Iterable[MatchGroup]) -> str:
    return json.dumps(groups_to_dict(groups), ensure_ascii=False, indent=2)
