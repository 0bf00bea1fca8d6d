"""Built-in hexadecimal glyph table."""

from __future__ import annotations

from typing import Final, Sequence

FONT_START: Final[int] = 0x000
GLYPH_COUNT: Final[int] = 16
GLYPH_BYTES: Final[int] = 5
FONT_WIDTH: Final[int] = 4
FONT_HEIGHT: Final[int] = GLYPH_BYTES

# One 4x5 glyph per hex digit; the low nibble of each row is unused.
GLYPHS: Final[Sequence[bytes]] = (
    bytes((0xF0, 0x90, 0x90, 0x90, 0xF0)),  # 0
    bytes((0x20, 0x60, 0x20, 0x20, 0x70)),  # 1
    bytes((0xF0, 0x10, 0xF0, 0x80, 0xF0)),  # 2
    bytes((0xF0, 0x10, 0xF0, 0x10, 0xF0)),  # 3
    bytes((0x90, 0x90, 0xF0, 0x10, 0x10)),  # 4
    bytes((0xF0, 0x80, 0xF0, 0x10, 0xF0)),  # 5
    bytes((0xF0, 0x80, 0xF0, 0x90, 0xF0)),  # 6
    bytes((0xF0, 0x10, 0x20, 0x40, 0x40)),  # 7
    bytes((0xF0, 0x90, 0xF0, 0x90, 0xF0)),  # 8
    bytes((0xF0, 0x90, 0xF0, 0x10, 0xF0)),  # 9
    bytes((0xF0, 0x90, 0xF0, 0x90, 0x90)),  # A
    bytes((0xE0, 0x90, 0xE0, 0x90, 0xE0)),  # B
    bytes((0xF0, 0x80, 0x80, 0x80, 0xF0)),  # C
    bytes((0xE0, 0x90, 0x90, 0x90, 0xE0)),  # D
    bytes((0xF0, 0x80, 0xF0, 0x80, 0xF0)),  # E
    bytes((0xF0, 0x80, 0xF0, 0x80, 0x80)),  # F
)

FONT_DATA: Final[bytes] = b"".join(GLYPHS)


def glyph_address(digit: int) -> int:
    """Return the memory address of the glyph for the low nibble of ``digit``."""

    return FONT_START + (digit & 0x0F) * GLYPH_BYTES


def glyph_rows(digit: int) -> bytes:
    return GLYPHS[digit & 0x0F]
