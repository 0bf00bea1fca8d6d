"""Memory image for the CHIP-8 interpreter.

The machine exposes a single flat 4 KiB address space. Every access goes
through :meth:`Memory.load8`/:meth:`Memory.store8`, which fold the address
into the 12-bit range so that composed addresses (``I + offset``,
``pc + 1``) can never index past the end of the backing store.
"""

from __future__ import annotations

MEMORY_SIZE = 0x1000
ADDRESS_MASK = MEMORY_SIZE - 1
PROGRAM_START = 0x200


def mask12(value: int) -> int:
    """Clamp ``value`` to the 12-bit address space expected by CHIP-8."""

    return value & ADDRESS_MASK


class MemoryError(Exception):
    """Raised when the memory image is misconfigured or used incorrectly."""


class Memory:
    """Byte-addressable 4 KiB store."""

    size = MEMORY_SIZE

    def __init__(self, image: bytes | None = None) -> None:
        self._data = bytearray(self.size)
        if image is not None:
            self.load_block(0, image)

    def __len__(self) -> int:
        return self.size

    def load8(self, address: int) -> int:
        return self._data[mask12(address)]

    def store8(self, address: int, value: int) -> None:
        self._data[mask12(address)] = value & 0xFF

    def load16(self, address: int) -> int:
        high = self.load8(address)
        low = self.load8(address + 1)
        return (high << 8) | low

    def store16(self, address: int, value: int) -> None:
        self.store8(address, (value >> 8) & 0xFF)
        self.store8(address + 1, value & 0xFF)

    def load_block(self, address: int, data: bytes) -> int:
        """Copy ``data`` starting at ``address``; stop at the end of memory.

        Returns the number of bytes actually written.
        """

        if not 0 <= address < self.size:
            raise MemoryError(f"block start {address:#06x} outside memory")
        length = min(len(data), self.size - address)
        self._data[address : address + length] = data[:length]
        return length

    def read_block(self, address: int, length: int) -> bytes:
        if length < 0:
            raise MemoryError("block length must not be negative")
        return bytes(self.load8(address + offset) for offset in range(length))

    def snapshot(self) -> bytes:
        return bytes(self._data)

    def reset(self) -> None:
        self._data[:] = bytes(self.size)
