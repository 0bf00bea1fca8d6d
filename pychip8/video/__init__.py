"""Video helpers for the CHIP-8 interpreter."""

from __future__ import annotations

from .font import FONT_DATA, FONT_START, GLYPH_BYTES, GLYPH_COUNT, glyph_address
from .framebuffer import (
    FRAMEBUFFER_SIZE,
    SCREEN_HEIGHT,
    SCREEN_PIXELS,
    SCREEN_WIDTH,
    CollisionPolicy,
    Framebuffer,
)
from .palette import MONOCHROME, PALETTES, palette_by_name, validate_palette
from .renderer import RenderResult, Renderer

__all__ = [
    "FONT_DATA",
    "FONT_START",
    "GLYPH_BYTES",
    "GLYPH_COUNT",
    "glyph_address",
    "FRAMEBUFFER_SIZE",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "SCREEN_PIXELS",
    "CollisionPolicy",
    "Framebuffer",
    "Renderer",
    "RenderResult",
    "MONOCHROME",
    "PALETTES",
    "palette_by_name",
    "validate_palette",
]
