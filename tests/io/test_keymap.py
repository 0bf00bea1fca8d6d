from __future__ import annotations

import pytest

from pychip8.io import KEY_MAP, lookup


@pytest.mark.parametrize(
    "name, expected",
    [
        ("1", 0x1),
        ("4", 0xC),
        ("q", 0x4),
        ("R", 0xD),
        ("a", 0x7),
        ("f", 0xE),
        ("z", 0xA),
        ("x", 0x0),
        ("c", 0xB),
        ("V", 0xF),
        ("[3]", 0x3),
    ],
)
def test_lookup_known_keys(name: str, expected: int) -> None:
    assert lookup(name) == expected


def test_lookup_unmapped_key() -> None:
    assert lookup("space") is None
    assert lookup("p") is None


def test_key_map_covers_every_keypad_index_once() -> None:
    assert sorted(KEY_MAP.values()) == list(range(16))
