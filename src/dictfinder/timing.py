"""Timing events emitted by dictionary loads and searches."""

from __future__ import annotations

import json
import logging
import threading
from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path

LOGGER = logging.getLogger(__name__)


class Operation(str, Enum):
    SEARCH = "Search"
    READ_DEFINITION = "ReadDefinition"
    LOAD_DICTIONARY = "LoadDictionary"
    BULK_SEARCH = "BulkSearch"
    OTHER = "Other"


@dataclass(slots=True)
class TimeLog:
    """One timed operation."""

    clock: float
    operation: Operation = Operation.OTHER
    dictionary: str | None = None
    matcher: str | None = None
    word: str | None = None
    comment: str | None = None
    datetime: str = field(default_factory=lambda: datetime.now().astimezone().isoformat())

    def to_dict(self) -> dict:
        data = asdict(self)
        data["operation"] = self.operation.value
        return data


class TimingSink:
    """Receives timing events. The base class discards them."""

    def write(self, event: TimeLog) -> None:
        pass

    def record(self, elapsed: float, dictionary_name: str, query: str, matcher_name: str) -> None:
        self.write(
            TimeLog(
                clock=elapsed,
                operation=Operation.SEARCH,
                dictionary=dictionary_name,
                matcher=matcher_name,
                word=query,
            )
        )


NullTimingSink = TimingSink


class JsonLinesTimingSink(TimingSink):
    """Appends every event as one JSON object per line."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def write(self, event: TimeLog) -> None:
        line = json.dumps(event.to_dict(), ensure_ascii=False)
        try:
            with self._lock, self.path.open("a", encoding="utf-8") as handle:
                handle.write(line + "\n")
        except OSError as exc:
            LOGGER.warning("Unable to write timing log %s: %s", self.path, exc)
