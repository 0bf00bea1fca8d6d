"""Packed monochrome framebuffer and sprite compositor.

The screen is 64x32 pixels stored one bit per pixel, row-major, eight
pixels per byte with the most significant bit on the left. Sprites are
XOR-blitted one 8-pixel row at a time; a row whose origin is not a
multiple of eight straddles two adjacent bytes ("byte groups").
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable, List, Sequence

SCREEN_WIDTH = 64
SCREEN_HEIGHT = 32
STRIDE = SCREEN_WIDTH // 8
FRAMEBUFFER_SIZE = STRIDE * SCREEN_HEIGHT
SCREEN_PIXELS = SCREEN_WIDTH * SCREEN_HEIGHT


class CollisionPolicy(Enum):
    """How a sprite blit decides that it erased a lit pixel."""

    # Flag when the byte group compares lower after the XOR than before.
    BYTE_GROUP = "byte"
    # Flag when any individual lit bit is cleared.
    BIT_EXACT = "bit"

    def erased(self, before: int, after: int) -> bool:
        if self is CollisionPolicy.BYTE_GROUP:
            return after < before
        return (before & ~after & 0xFF) != 0


class Framebuffer:
    """Packed 64x32 bitmap with XOR sprite blitting."""

    def __init__(self, policy: CollisionPolicy = CollisionPolicy.BYTE_GROUP) -> None:
        self.policy = policy
        self._data = bytearray(FRAMEBUFFER_SIZE)

    def __len__(self) -> int:
        return FRAMEBUFFER_SIZE

    def clear(self) -> None:
        self._data[:] = bytes(FRAMEBUFFER_SIZE)

    def snapshot(self) -> bytes:
        return bytes(self._data)

    def load(self, data: bytes) -> None:
        if len(data) != FRAMEBUFFER_SIZE:
            raise ValueError(f"framebuffer image must be {FRAMEBUFFER_SIZE} bytes, got {len(data)}")
        self._data[:] = data

    def is_blank(self) -> bool:
        return not any(self._data)

    def get_pixel(self, x: int, y: int) -> bool:
        if not (0 <= x < SCREEN_WIDTH and 0 <= y < SCREEN_HEIGHT):
            raise ValueError(f"pixel ({x}, {y}) outside {SCREEN_WIDTH}x{SCREEN_HEIGHT} screen")
        value = self._data[y * STRIDE + x // 8]
        return (value & (0x80 >> (x & 0x07))) != 0

    def blit_sprite(self, x: int, y: int, rows: Iterable[int]) -> bool:
        """XOR ``rows`` onto the screen at ``(x, y)``; return the collision flag.

        The origin wraps around the screen edges. Rows below the bottom
        edge and byte groups beyond the right edge are clipped.
        """

        origin_x = x % SCREEN_WIDTH
        origin_y = y % SCREEN_HEIGHT
        shift = origin_x & 0x07
        column = origin_x // 8
        erased = self.policy.erased
        collision = False

        for row_offset, row in enumerate(rows):
            target_y = origin_y + row_offset
            if target_y >= SCREEN_HEIGHT:
                break
            window = ((row & 0xFF) << 8) >> shift
            groups = ((window >> 8) & 0xFF, window & 0xFF)
            row_base = target_y * STRIDE
            for group_offset, group in enumerate(groups):
                target_column = column + group_offset
                if target_column >= STRIDE:
                    break
                if group == 0:
                    continue
                index = row_base + target_column
                before = self._data[index]
                after = before ^ group
                self._data[index] = after
                if erased(before, after):
                    collision = True
        return collision

    def unpack_pixels(self) -> List[bool]:
        """Return one boolean per pixel, row-major. Does not mutate state."""

        pixels = [False] * SCREEN_PIXELS
        for index, value in enumerate(self._data):
            if value == 0:
                continue
            base = (index // STRIDE) * SCREEN_WIDTH + (index % STRIDE) * 8
            for bit in range(8):
                if value & (0x80 >> bit):
                    pixels[base + bit] = True
        return pixels

    def rows_as_text(self, on: str = "#", off: str = ".") -> Sequence[str]:
        pixels = self.unpack_pixels()
        return [
            "".join(on if pixels[y * SCREEN_WIDTH + x] else off for x in range(SCREEN_WIDTH))
            for y in range(SCREEN_HEIGHT)
        ]
