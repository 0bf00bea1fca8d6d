"""Host key-name translation into CHIP-8 key indices.

The hexadecimal keypad is laid over the left block of a QWERTY keyboard::

    1 2 3 C        1 2 3 4
    4 5 6 D   <-   q w e r
    7 8 9 E        a s d f
    A 0 B F        z x c v
"""

from __future__ import annotations

from typing import Mapping

from pychip8.utils import debug_enabled, debug_log


KEY_MAP: Mapping[str, int] = {
    "1": 0x1,
    "2": 0x2,
    "3": 0x3,
    "4": 0xC,
    "q": 0x4,
    "w": 0x5,
    "e": 0x6,
    "r": 0xD,
    "a": 0x7,
    "s": 0x8,
    "d": 0x9,
    "f": 0xE,
    "z": 0xA,
    "x": 0x0,
    "c": 0xB,
    "v": 0xF,
}


ALIAS_TABLE: Mapping[str, str] = {
    "[1]": "1",
    "[2]": "2",
    "[3]": "3",
    "[4]": "4",
}


def lookup(key_name: str) -> int | None:
    """Return the keypad index for a host key name, or None if unmapped."""

    name = key_name.lower()
    name = ALIAS_TABLE.get(name, name)
    index = KEY_MAP.get(name)
    if index is None and debug_enabled("input"):
        debug_log("input", "unmapped=%s", key_name)
    return index
