"""CHIP-8 hexadecimal keypad latch."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from pychip8.utils import debug_enabled, debug_log

NUM_KEYS = 16


def _check_index(index: int) -> int:
    if not isinstance(index, int) or not 0 <= index < NUM_KEYS:
        raise ValueError(f"key index out of range (0x0-0xF): {index!r}")
    return index


@dataclass
class Keypad:
    """Sixteen-slot press latch written by the host and polled by opcodes."""

    _state: list[bool] = field(default_factory=lambda: [False] * NUM_KEYS)

    def set_keys(self, pressed: Iterable[int]) -> None:
        """Overwrite the whole latch from the set of currently pressed keys."""

        indices = {_check_index(index) for index in pressed}
        self._state = [index in indices for index in range(NUM_KEYS)]
        if debug_enabled("input"):
            debug_log("input", "latch=%s", self.describe())

    def press(self, index: int) -> None:
        self._state[_check_index(index)] = True
        if debug_enabled("input"):
            debug_log("input", "press key=%X", index)

    def release(self, index: int) -> None:
        self._state[_check_index(index)] = False
        if debug_enabled("input"):
            debug_log("input", "release key=%X", index)

    def is_pressed(self, index: int) -> bool:
        return self._state[index & 0x0F]

    def first_pressed(self) -> int | None:
        for index, pressed in enumerate(self._state):
            if pressed:
                return index
        return None

    def pressed_keys(self) -> frozenset[int]:
        return frozenset(index for index, pressed in enumerate(self._state) if pressed)

    def reset(self) -> None:
        self._state = [False] * NUM_KEYS

    def snapshot(self) -> tuple[bool, ...]:
        return tuple(self._state)

    def describe(self) -> str:
        return "".join(f"{index:X}" if pressed else "." for index, pressed in enumerate(self._state))
