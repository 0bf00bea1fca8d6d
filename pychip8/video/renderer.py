"""Convert unpacked CHIP-8 pixels into RGB frames."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from .framebuffer import SCREEN_HEIGHT, SCREEN_PIXELS, SCREEN_WIDTH
from .palette import MONOCHROME, RGBColor, validate_palette


@dataclass
class RenderResult:
    """RGB24 frame produced by :class:`Renderer`."""

    width: int
    height: int
    data: bytes

    def get_pixel(self, x: int, y: int) -> RGBColor:
        offset = (y * self.width + x) * 3
        return (self.data[offset], self.data[offset + 1], self.data[offset + 2])

    def to_surface(self):
        try:
            import pygame  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pygame is required to build surfaces") from exc
        return pygame.image.frombuffer(self.data, (self.width, self.height), "RGB")


class Renderer:
    """Scale a boolean pixel array into a two-colour RGB frame."""

    def __init__(self, palette: Sequence[RGBColor] = MONOCHROME) -> None:
        self._background, self._foreground = validate_palette(palette)

    def render(self, pixels: Sequence[bool], *, scale: int = 1) -> RenderResult:
        if scale <= 0:
            raise ValueError("scale must be positive")
        if len(pixels) != SCREEN_PIXELS:
            raise ValueError(f"expected {SCREEN_PIXELS} pixels, got {len(pixels)}")

        background = bytes(self._background) * scale
        foreground = bytes(self._foreground) * scale
        width = SCREEN_WIDTH * scale
        height = SCREEN_HEIGHT * scale

        frame = bytearray()
        for y in range(SCREEN_HEIGHT):
            row = pixels[y * SCREEN_WIDTH : (y + 1) * SCREEN_WIDTH]
            line = b"".join(foreground if lit else background for lit in row)
            frame += line * scale
        return RenderResult(width=width, height=height, data=bytes(frame))
