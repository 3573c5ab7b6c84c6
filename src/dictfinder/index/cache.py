"""Binary persistence for decoded index records."""

from __future__ import annotations

import logging
import os
import zipfile
from pathlib import Path
from typing import List, Sequence

import numpy as np

from dictfinder.errors import CacheError
from dictfinder.models import IndexRecord

LOGGER = logging.getLogger(__name__)

CACHE_VERSION = 1


def source_fingerprint(path: Path) -> np.ndarray:
    """Size and modification time of the file a cache was built from."""
    stat = Path(path).stat()
    return np.array([stat.st_size, stat.st_mtime_ns], dtype="int64")


class IndexCache:
    """Stores index records in an uncompressed ``.npz`` archive.

    Words are kept as one UTF-8 blob plus per-word byte lengths, offsets and
    sizes as ``uint32`` columns. When ``source`` is given, the cache also
    records that file's fingerprint and refuses to load once it changes.
    """

    def __init__(self, path: Path, *, source: Path | None = None) -> None:
        self.path = Path(path)
        self.source = Path(source) if source is not None else None

    def save(self, records: Sequence[IndexRecord]) -> None:
        encoded = [record.word.encode("utf-8") for record in records]
        columns = {
            "version": np.array([CACHE_VERSION], dtype="uint32"),
            "lengths": np.array([len(word) for word in encoded], dtype="uint32"),
            "words": np.frombuffer(b"".join(encoded), dtype="uint8"),
            "offsets": np.array([record.offset for record in records], dtype="uint32"),
            "sizes": np.array([record.size for record in records], dtype="uint32"),
            "source": (
                source_fingerprint(self.source)
                if self.source is not None
                else np.array([], dtype="int64")
            ),
        }
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            with tmp_path.open("wb") as handle:
                np.savez(handle, **columns)
            os.replace(tmp_path, self.path)
        finally:
            tmp_path.unlink(missing_ok=True)
        LOGGER.debug("Wrote index cache with %d records to %s", len(records), self.path)

    def load(self) -> List[IndexRecord]:
        try:
            archive = np.load(self.path, allow_pickle=False)
            if not hasattr(archive, "files"):
                raise CacheError(f"Cache {self.path} is not an archive")
            with archive:
                columns = {name: archive[name] for name in archive.files}
        except FileNotFoundError as exc:
            raise CacheError(f"No cache at {self.path}") from exc
        except (OSError, ValueError, EOFError, zipfile.BadZipFile) as exc:
            raise CacheError(f"Unreadable cache {self.path}: {exc}") from exc

        required = ("version", "lengths", "words", "offsets", "sizes", "source")
        missing = [name for name in required if name not in columns]
        if missing:
            raise CacheError(f"Cache {self.path} lacks {', '.join(missing)}")

        try:
            version = columns["version"]
            supported = version.shape == (1,) and int(version[0]) == CACHE_VERSION
        except (TypeError, ValueError) as exc:
            raise CacheError(f"Malformed cache version in {self.path}: {exc}") from exc
        if not supported:
            raise CacheError(f"Unsupported cache version in {self.path}")

        if self.source is not None:
            try:
                current = source_fingerprint(self.source)
            except OSError as exc:
                raise CacheError(f"Cannot stat cache source {self.source}: {exc}") from exc
            if not np.array_equal(columns["source"], current):
                raise CacheError(f"Cache {self.path} is stale for {self.source}")

        try:
            return self._decode(columns)
        except (TypeError, ValueError, IndexError) as exc:
            raise CacheError(f"Malformed cache columns in {self.path}: {exc}") from exc

    def _decode(self, columns: dict) -> List[IndexRecord]:
        lengths = columns["lengths"].astype("int64")
        offsets = columns["offsets"]
        sizes = columns["sizes"]
        blob = columns["words"].tobytes()

        if not (len(lengths) == len(offsets) == len(sizes)):
            raise CacheError(f"Cache {self.path} has mismatched columns")
        if int(lengths.sum()) != len(blob):
            raise CacheError(f"Cache {self.path} word blob is truncated")

        bounds = np.concatenate(([0], np.cumsum(lengths)))
        records: List[IndexRecord] = []
        try:
            for i in range(len(lengths)):
                word = blob[bounds[i] : bounds[i + 1]].decode("utf-8")
                records.append(IndexRecord(word=word, offset=int(offsets[i]), size=int(sizes[i])))
        except UnicodeDecodeError as exc:
            raise CacheError(f"Cache {self.path} contains invalid UTF-8") from exc
        return records
