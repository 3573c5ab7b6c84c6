"""Loaded dictionaries and the load path that builds them."""

from __future__ import annotations

import logging
import random
from concurrent.futures import Executor, ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Iterable, List, Sequence, Tuple

from dictfinder.errors import CacheError, DictionaryError, DictionaryPathError
from dictfinder.index.cache import IndexCache
from dictfinder.index.codec import read_index
from dictfinder.index.metadata import read_metadata
from dictfinder.index.reader import read_definition
from dictfinder.matching.matcher import WordMatcher
from dictfinder.models import ContentFormat, Definition, IndexRecord
from dictfinder.utils.files import DESCRIPTOR_SUFFIX, find_descriptor, iter_dictionary_candidates

LOGGER = logging.getLogger(__name__)

CACHE_SUFFIX = ".dfx"
CHUNK_SIZE = 8192


@dataclass(slots=True, eq=False)
class DictionaryHandle:
    """One loaded dictionary: metadata, index records and file locations."""

    ifo_path: Path
    idx_path: Path
    dict_path: Path
    cache_path: Path
    bookname: str
    format: ContentFormat = ContentFormat.UNSPECIFIED
    records: Tuple[IndexRecord, ...] = ()
    word_count: int = 0
    _words: Tuple[str, ...] = field(init=False, repr=False, default=())

    def __post_init__(self) -> None:
        self.records = tuple(self.records)
        self._words = tuple(record.word for record in self.records)
        if not self.word_count:
            self.word_count = len(self.records)

    @classmethod
    def from_descriptor(cls, ifo_path: Path) -> "DictionaryHandle":
        """Create an empty handle whose sibling paths derive from ``ifo_path``."""
        ifo_path = Path(ifo_path)
        return cls(
            ifo_path=ifo_path,
            idx_path=ifo_path.with_suffix(".idx"),
            dict_path=ifo_path.with_suffix(".dict"),
            cache_path=ifo_path.with_suffix(CACHE_SUFFIX),
            bookname=str(ifo_path.with_suffix(".dict")),
        )

    def __len__(self) -> int:
        return len(self.records)

    def random_record(self, rng: random.Random | None = None) -> IndexRecord:
        """Pick a record uniformly at random."""
        if not self.records:
            raise LookupError(f"Dictionary {self.bookname} has no words")
        rng = rng or random
        return self.records[rng.randrange(len(self.records))]

    def read_definition(self, record: IndexRecord) -> Definition:
        return read_definition(self.dict_path, record, self.format)

    def find_matches(
        self,
        matcher: WordMatcher,
        word: str,
        *,
        executor: Executor | None = None,
        chunk_size: int = CHUNK_SIZE,
    ) -> List[IndexRecord]:
        """Return the records whose headword ``matcher`` accepts.

        Chunks of the index are filtered concurrently when an executor is
        given. The order of the result is not guaranteed to follow the index.
        """
        LOGGER.debug("Searching words matching %r in %s", word, self.bookname)
        spans = [(start, start + chunk_size) for start in range(0, len(self._words), chunk_size)]
        if executor is None or len(spans) <= 1:
            return [self.records[i] for i in matcher.select(word, self._words)]

        futures = {
            executor.submit(matcher.select, word, self._words[start:stop]): start
            for start, stop in spans
        }
        results: List[IndexRecord] = []
        for future in as_completed(futures):
            start = futures[future]
            results.extend(self.records[start + i] for i in future.result())
        return results


def _resolve_descriptor(path: Path) -> Path:
    if path.is_dir():
        descriptor = find_descriptor(path)
        if descriptor is None:
            raise DictionaryPathError(f"No {DESCRIPTOR_SUFFIX} file in {path}")
        return descriptor
    if path.is_file() and path.suffix == DESCRIPTOR_SUFFIX:
        return path
    raise DictionaryPathError(f"Not a dictionary location: {path}")


def load_dictionary(path: Path, *, use_cache: bool = True) -> DictionaryHandle:
    """Load a dictionary from a directory or a ``.ifo`` file.

    The index comes from the cache when one is present and current; otherwise
    it is parsed from the ``.idx`` file and the cache is rewritten.
    """
    ifo_path = _resolve_descriptor(Path(path))
    LOGGER.debug("Dictionary descriptor path: %s", ifo_path)
    handle = DictionaryHandle.from_descriptor(ifo_path)
    metadata = read_metadata(ifo_path)

    cache = IndexCache(handle.cache_path, source=handle.idx_path)
    records: Sequence[IndexRecord] | None = None
    if use_cache:
        try:
            records = cache.load()
            LOGGER.debug("Loaded %d records from cache %s", len(records), cache.path)
        except CacheError as exc:
            LOGGER.debug("Failed loading the cache: %s", exc)

    if records is None:
        records = read_index(handle.idx_path)
        if use_cache:
            try:
                cache.save(records)
            except OSError as exc:
                LOGGER.warning("Error when saving index cache %s: %s", cache.path, exc)

    bookname = metadata.bookname
    if not bookname:
        LOGGER.warning("Dictionary %s doesn't have a bookname field", ifo_path)
        bookname = str(handle.dict_path)
    if metadata.word_count != len(records):
        LOGGER.debug(
            "%s declares %d words but its index holds %d",
            bookname,
            metadata.word_count,
            len(records),
        )

    return replace(
        handle,
        bookname=bookname,
        format=metadata.format,
        records=records,
        word_count=len(records),
    )


def _try_load(path: Path, use_cache: bool) -> DictionaryHandle | None:
    try:
        return load_dictionary(path, use_cache=use_cache)
    except DictionaryPathError as exc:
        LOGGER.debug("Skipping %s: %s", path, exc)
    except DictionaryError as exc:
        LOGGER.error("Failed to load dictionary at %s: %s", path, exc)
    except OSError as exc:
        LOGGER.error("Cannot access %s: %s", path, exc)
    return None


def load_dictionaries(
    paths: Iterable[Path], *, use_cache: bool = True, max_workers: int | None = None
) -> List[DictionaryHandle]:
    """Load every dictionary found under ``paths``.

    Each location is loaded independently; failures are logged and skipped.
    The result follows discovery order.
    """
    candidates = list(iter_dictionary_candidates(paths))
    if not candidates:
        return []
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        loaded = executor.map(lambda p: _try_load(p, use_cache), candidates)
        return [handle for handle in loaded if handle is not None]
