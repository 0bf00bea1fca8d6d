"""CHIP-8 system assembly helpers."""

from __future__ import annotations

from .machine import STEPS_PER_FRAME, FrameResult, Machine, MachineConfig, create_machine
from .timers import TIMER_HZ, Timers

__all__ = [
    "STEPS_PER_FRAME",
    "TIMER_HZ",
    "FrameResult",
    "MachineConfig",
    "Machine",
    "Timers",
    "create_machine",
]
