from __future__ import annotations

import json

import pytest

from barony_checkpoint.errors import MalformedContent
from barony_checkpoint.levels import LevelResult, extract_level, parse_level


def test_parse_level_from_bytes_and_text():
    payload = {"dungeon_lvl": 5, "game_name": "run"}
    assert parse_level(json.dumps(payload).encode("utf-8")) == 5
    assert parse_level(json.dumps(payload)) == 5


def test_parse_level_accepts_utf8_bom():
    assert parse_level(b"\xef\xbb\xbf" + b'{"dungeon_lvl": 12}') == 12


@pytest.mark.parametrize(
    "content",
    [
        b"",
        b"not json at all",
        b'{"dungeon_lvl": 5',
        b"[1, 2, 3]",
        b'{"level": 5}',
        b'{"dungeon_lvl": "5"}',
        b'{"dungeon_lvl": 5.5}',
        b'{"dungeon_lvl": true}',
        b'{"dungeon_lvl": null}',
        b"\x80\x81{",
        b"[" * 200000,
    ],
)
def test_parse_level_rejects_malformed(content):
    with pytest.raises(MalformedContent):
        parse_level(content)


def test_extract_level_found():
    result = extract_level(b'{"dungeon_lvl": 0}')
    assert result == LevelResult(0)
    assert result.found
    assert result.token == "0"


def test_extract_level_falls_back_to_unknown():
    result = extract_level(b"\x00\x01garbage")
    assert not result.found
    assert result.value is None
    assert result.token == "unknown"
    assert result.reason
