"""Audio output for the CHIP-8 tone event."""

from __future__ import annotations

from .beeper import ToneBeeper, square_wave

__all__ = ["ToneBeeper", "square_wave"]
