"""Process-wide set of loaded dictionaries and their search groups."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Dict, List

from dictfinder.config import AppConfig
from dictfinder.index.dictionary import DictionaryHandle, load_dictionaries
from dictfinder.index.search import Searcher
from dictfinder.matching.morpher import Morpher
from dictfinder.models import MatchGroup
from dictfinder.timing import Operation, TimeLog, TimingSink

LOGGER = logging.getLogger(__name__)


class UnknownGroupError(KeyError):
    """A search named a group that is not configured."""


@dataclass(slots=True)
class SearchGroup:
    names: List[str]
    searcher: Searcher
    morpher: Morpher


class Engine:
    """Dictionaries loaded once, addressed by display name.

    A dictionary that appears in several groups is kept only once.
    """

    def __init__(self, config: AppConfig, *, sink: TimingSink | None = None) -> None:
        self.config = config
        self.sink = sink if sink is not None else config.build_sink()
        self.dictionaries: Dict[str, DictionaryHandle] = {}
        self.default_names: List[str] = []
        self.groups: Dict[str, SearchGroup] = {}
        self.searcher = Searcher(config.build_matcher(), sink=self.sink)
        self.morpher = config.build_morpher()

    def _register(self, handles: List[DictionaryHandle]) -> List[str]:
        names = []
        for handle in handles:
            self.dictionaries.setdefault(handle.bookname, handle)
            if handle.bookname not in names:
                names.append(handle.bookname)
        return names

    def load(self) -> "Engine":
        start = time.perf_counter()
        self.default_names = self._register(load_dictionaries(self.config.paths or []))
        for name, group in self.config.groups.items():
            self.groups[name] = SearchGroup(
                names=self._register(load_dictionaries(group.paths)),
                searcher=Searcher(group.build_matcher(), sink=self.sink),
                morpher=group.build_morpher(),
            )
        if not self.default_names:
            self.default_names = list(self.dictionaries)
        elapsed = time.perf_counter() - start
        LOGGER.info("Loaded %d dictionaries in %.2fs", len(self.dictionaries), elapsed)
        self.sink.write(TimeLog(clock=elapsed, operation=Operation.LOAD_DICTIONARY))
        return self

    def handles(self, names: List[str]) -> List[DictionaryHandle]:
        return [self.dictionaries[name] for name in names]

    def search(self, word: str, group: str | None = None) -> List[MatchGroup]:
        """Search ``word`` in a named group, or in the default dictionaries."""
        if group is None:
            return self.searcher.search_roots(self.handles(self.default_names), word, self.morpher)
        if group not in self.groups:
            raise UnknownGroupError(group)
        selected = self.groups[group]
        return selected.searcher.search_roots(self.handles(selected.names), word, selected.morpher)
