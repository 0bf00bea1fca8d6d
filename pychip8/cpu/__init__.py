"""CPU package for the CHIP-8 interpreter."""

from .core import (
    CPUError,
    CPUFault,
    CPUState,
    Chip8CPU,
    IllegalOpcodeError,
    StackError,
    StackOverflowError,
    StackUnderflowError,
)
from . import opcodes

__all__ = [
    "Chip8CPU",
    "CPUState",
    "CPUFault",
    "CPUError",
    "IllegalOpcodeError",
    "StackError",
    "StackOverflowError",
    "StackUnderflowError",
    "opcodes",
]
