"""Input helpers for the CHIP-8 interpreter."""

from __future__ import annotations

from .keymap import KEY_MAP, lookup
from .keypad import NUM_KEYS, Keypad

__all__ = [
    "KEY_MAP",
    "NUM_KEYS",
    "Keypad",
    "lookup",
]
