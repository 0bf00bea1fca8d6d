"""Raw CHIP-8 program image loader."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO

from pychip8.bus import MEMORY_SIZE, PROGRAM_START, Memory
from pychip8.utils import debug_enabled, debug_log

MAX_PROGRAM_SIZE = MEMORY_SIZE - PROGRAM_START


class RomLoadError(RuntimeError):
    """Raised when a program image cannot be opened or read."""


@dataclass
class RomImage:
    """Describes a program copied into memory.

    ``data`` holds the bytes actually written, so the program can be
    restored without reading the file again.
    """

    name: str = ""
    size: int = 0
    loaded: int = 0
    start: int = PROGRAM_START
    data: bytes = field(default=b"", repr=False)

    @property
    def truncated(self) -> bool:
        return self.loaded < self.size

    @property
    def end(self) -> int:
        return self.start + self.loaded - 1 if self.loaded else self.start


def load_rom(stream: BinaryIO, memory: Memory, *, name: str = "") -> RomImage:
    """Copy ``stream`` into ``memory`` at 0x200, truncating at the end of memory."""

    try:
        payload = stream.read()
    except OSError as exc:
        raise RomLoadError(f"Failed to read ROM {name or '<stream>'}: {exc}") from exc

    loaded = _install(memory, payload)
    image = RomImage(name=name, size=len(payload), loaded=loaded, data=bytes(payload[:loaded]))
    if debug_enabled("loader"):
        debug_log(
            "loader",
            "rom=%s size=%d loaded=%d truncated=%s",
            name or "<stream>",
            image.size,
            image.loaded,
            image.truncated,
        )
    return image


def load_rom_bytes(data: bytes, memory: Memory, *, name: str = "") -> RomImage:
    loaded = _install(memory, data)
    return RomImage(name=name, size=len(data), loaded=loaded, data=bytes(data[:loaded]))


def load_rom_from_path(path: Path, memory: Memory) -> RomImage:
    """Load a program image from the filesystem.

    Memory is left untouched when the file cannot be opened or read.
    """

    try:
        handle = Path(path).open("rb")
    except OSError as exc:
        raise RomLoadError(f"Failed to load rom `{path}`: {exc.strerror or exc}") from exc
    with handle:
        return load_rom(handle, memory, name=Path(path).name)


def _install(memory: Memory, payload: bytes) -> int:
    # Clear the whole program region so a shorter image leaves no stale tail.
    memory.load_block(PROGRAM_START, bytes(MAX_PROGRAM_SIZE))
    return memory.load_block(PROGRAM_START, payload)
