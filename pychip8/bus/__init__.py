"""Bus-related helpers for the CHIP-8 interpreter."""

from .memory import ADDRESS_MASK, MEMORY_SIZE, PROGRAM_START, Memory, MemoryError, mask12

__all__ = [
    "ADDRESS_MASK",
    "MEMORY_SIZE",
    "PROGRAM_START",
    "Memory",
    "MemoryError",
    "mask12",
]
