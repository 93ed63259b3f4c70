"""
Dungeon-level detection for save files.

Barony saves are JSON documents with a top-level ``dungeon_lvl`` integer.
The level only decorates backup names, so callers normally use
:func:`extract_level`, which never raises.
"""

import json
from dataclasses import dataclass

from .errors import MalformedContent

LEVEL_FIELD         = "dungeon_lvl"
UNKNOWN_LEVEL_TOKEN = "unknown"


@dataclass(frozen=True)
class LevelResult:
    """Outcome of level detection: ``value`` is None when the level is unknown."""

    value: int | None = None
    reason: str | None = None

    @property
    def found(self) -> bool:
        return self.value is not None

    @property
    def token(self) -> str:
        return str(self.value) if self.found else UNKNOWN_LEVEL_TOKEN


def parse_level(content: bytes | str) -> int:
    """Return the ``dungeon_lvl`` field of ``content`` or raise MalformedContent."""
    try:
        data = json.loads(content)
    except (ValueError, UnicodeDecodeError, RecursionError) as exc:
        raise MalformedContent(f"not valid JSON: {exc}") from exc

    if not isinstance(data, dict):
        raise MalformedContent(f"expected a JSON object, got {type(data).__name__}")
    if LEVEL_FIELD not in data:
        raise MalformedContent(f"missing {LEVEL_FIELD!r}")

    level = data[LEVEL_FIELD]
    # bool is an int subclass; true/false are not levels
    if isinstance(level, bool) or not isinstance(level, int):
        raise MalformedContent(f"{LEVEL_FIELD!r} is not an integer: {level!r}")
    return level


def extract_level(content: bytes | str) -> LevelResult:
    try:
        return LevelResult(parse_level(content))
    except MalformedContent as exc:
        return LevelResult(None, str(exc))
