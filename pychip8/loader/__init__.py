"""Loaders for CHIP-8 program images."""

from __future__ import annotations

from .rom import (
    MAX_PROGRAM_SIZE,
    RomImage,
    RomLoadError,
    load_rom,
    load_rom_bytes,
    load_rom_from_path,
)

__all__ = [
    "MAX_PROGRAM_SIZE",
    "RomImage",
    "RomLoadError",
    "load_rom",
    "load_rom_bytes",
    "load_rom_from_path",
]
