"""Python CHIP-8 interpreter.

This package hosts the memory, CPU, video, input, timer, audio and UI
layers used by ``run.py``.
"""

from __future__ import annotations

from . import audio, bus, cpu, io, loader, system, ui, utils, video
from .system import Machine, MachineConfig, create_machine

__version__ = "0.1.0"

__all__: list[str] = [
    "audio",
    "bus",
    "cpu",
    "io",
    "loader",
    "system",
    "ui",
    "utils",
    "video",
    "Machine",
    "MachineConfig",
    "create_machine",
]
