"""Utility helpers for locating dictionaries on disk."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Iterator

LOGGER = logging.getLogger(__name__)

DESCRIPTOR_SUFFIX = ".ifo"


def find_descriptor(directory: Path) -> Path | None:
    """Return the first ``.ifo`` file directly inside ``directory``."""
    candidates = sorted(
        child for child in directory.iterdir() if child.is_file() and child.suffix == DESCRIPTOR_SUFFIX
    )
    return candidates[0] if candidates else None


def iter_dictionary_candidates(inputs: Iterable[Path]) -> Iterator[Path]:
    """Yield locations that may hold a dictionary.

    For a directory these are its immediate subdirectories followed by the
    directory itself. Descriptor files are yielded as given. Directories that
    cannot be listed are logged and skipped.
    """
    for item in inputs:
        item = Path(item).expanduser()
        if item.is_dir():
            try:
                children = sorted(child for child in item.iterdir() if child.is_dir())
            except OSError as exc:
                LOGGER.error("Cannot list %s: %s", item, exc)
                continue
            yield from children
            yield item
        elif item.is_file() and item.suffix == DESCRIPTOR_SUFFIX:
            yield item
