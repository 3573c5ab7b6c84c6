"""Application configuration defaults and the JSON settings file."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

from dictfinder.matching.matcher import WordMatcher, build_matcher
from dictfinder.matching.morpher import Morpher, build_morpher
from dictfinder.timing import JsonLinesTimingSink, NullTimingSink, TimingSink

LOGGER = logging.getLogger(__name__)

DEFAULT_SETTINGS_PATH = Path("~/.config/dictfinder/settings.json")
DEFAULT_PORT = 51881


def _get_default_paths() -> List[Path]:
    """Dictionary roots searched when none are configured."""
    return [Path.home() / ".dictfinder", Path.cwd()]


@dataclass(slots=True)
class GroupConfig:
    """Named set of dictionaries searched with its own matcher."""

    paths: List[Path] = field(default_factory=list)
    matcher_type: str = "exact"
    matcher_depth: int = 0
    morpher: str = "none"

    @classmethod
    def from_dict(cls, name: str, data: Dict[str, Any]) -> "GroupConfig":
        paths = [Path(p) for p in data.get("paths", []) if isinstance(p, str)]
        matcher_type = data.get("matcher_type")
        if not isinstance(matcher_type, str):
            LOGGER.warning("Group %s has no matcher_type, possibly misconfigured file", name)
            matcher_type = "exact"
        matcher_depth = data.get("matcher_depth")
        if not isinstance(matcher_depth, int) or matcher_depth < 0:
            LOGGER.warning("Group %s has no matcher_depth, possibly misconfigured file", name)
            matcher_depth = 0
        morpher = data.get("morpher")
        if not isinstance(morpher, str):
            morpher = "none"
        return cls(paths=paths, matcher_type=matcher_type, matcher_depth=matcher_depth, morpher=morpher)

    def build_matcher(self) -> WordMatcher:
        return build_matcher(self.matcher_type, self.matcher_depth)

    def build_morpher(self) -> Morpher:
        return build_morpher(self.morpher)


@dataclass(slots=True)
class AppConfig:
    paths: List[Path] | None = None
    search_algorithm: str = "levenshtein"
    search_depth: int = 2
    morpher: str = "none"
    timelog: bool = False
    timelog_path: Path = Path("timelog.jsonl")
    settings_path: Path = DEFAULT_SETTINGS_PATH
    groups: Dict[str, GroupConfig] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.paths is None:
            self.paths = _get_default_paths()

    def read_settings(self) -> Dict[str, Any]:
        """Return the settings file contents, or an empty dict."""
        path = Path(self.settings_path).expanduser()
        try:
            with path.open(encoding="utf-8") as handle:
                data = json.load(handle)
        except FileNotFoundError:
            LOGGER.debug("No settings file at %s", path)
            return {}
        except (OSError, ValueError) as exc:
            LOGGER.warning("Corrupt or unreadable settings file %s: %s", path, exc)
            return {}
        if not isinstance(data, dict):
            LOGGER.warning("Settings file %s is not a JSON object", path)
            return {}
        LOGGER.debug("Reading settings from %s", path)
        return data

    def apply_settings_file(self, explicit: set[str] | frozenset[str] = frozenset()) -> "AppConfig":
        """Fill fields from the settings file.

        Names in ``explicit`` were given by the caller and keep their values.
        """
        data = self.read_settings()

        paths = data.get("paths")
        if "paths" not in explicit:
            if isinstance(paths, str):
                self.paths = [Path(paths)]
            elif isinstance(paths, list):
                self.paths = [Path(p) for p in paths if isinstance(p, str)]

        algorithm = data.get("search_algorithm")
        if isinstance(algorithm, str) and "search_algorithm" not in explicit:
            self.search_algorithm = algorithm

        depth = data.get("search_depth")
        if isinstance(depth, int) and depth >= 0 and "search_depth" not in explicit:
            self.search_depth = depth

        groups = data.get("groups")
        if isinstance(groups, dict):
            for name, group in groups.items():
                if isinstance(group, dict):
                    self.groups[name] = GroupConfig.from_dict(name, group)
        return self

    def build_matcher(self) -> WordMatcher:
        return build_matcher(self.search_algorithm, self.search_depth)

    def build_morpher(self) -> Morpher:
        return build_morpher(self.morpher)

    def build_sink(self) -> TimingSink:
        if self.timelog:
            return JsonLinesTimingSink(self.timelog_path)
        return NullTimingSink()
