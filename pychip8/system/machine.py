"""CHIP-8 machine assembly and frame scheduling."""

from __future__ import annotations

import random
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from pychip8.bus import PROGRAM_START, Memory
from pychip8.cpu import Chip8CPU, CPUFault
from pychip8.cpu.opcodes import EXTENDED_OPCODE_TABLE, OPCODE_TABLE
from pychip8.io import Keypad
from pychip8.loader import RomImage, load_rom_bytes, load_rom_from_path
from pychip8.video import FONT_DATA, FONT_START, CollisionPolicy, Framebuffer

from .timers import Timers

STEPS_PER_FRAME = 10


@dataclass
class MachineConfig:
    """Runtime configuration for a CHIP-8 machine."""

    rom_image: Optional[bytes] = None
    strict: bool = False
    seed: Optional[int] = None
    collision_policy: CollisionPolicy = CollisionPolicy.BYTE_GROUP
    extended_opcodes: bool = False


@dataclass
class FrameResult:
    """Outcome of one host frame: N steps followed by one timer tick."""

    draw: bool = False
    tone: bool = False
    executed: int = 0


@dataclass
class Machine:
    """Aggregates the core components of the interpreter."""

    memory: Memory
    cpu: Chip8CPU
    framebuffer: Framebuffer
    keypad: Keypad
    timers: Timers
    rom: RomImage | None = None

    def step(self) -> bool:
        return self.cpu.step()

    def tick(self) -> bool:
        return self.timers.tick()

    def run_frame(self, steps: int = STEPS_PER_FRAME) -> FrameResult:
        """Run ``steps`` instructions and then tick the timers once.

        CPU errors propagate to the caller; the timers are not ticked for a
        frame that was cut short.
        """

        result = FrameResult()
        for _ in range(steps):
            if self.cpu.step():
                result.draw = True
            result.executed += 1
        result.tone = self.timers.tick()
        return result

    def set_keys(self, pressed) -> None:
        self.keypad.set_keys(pressed)

    def pixels(self) -> List[bool]:
        return self.framebuffer.unpack_pixels()

    def load_rom(self, path: Path) -> RomImage:
        """Load a program file; ``pc`` is relocated only when loading succeeds."""

        image = load_rom_from_path(path, self.memory)
        self.rom = image
        self.cpu.state.pc = PROGRAM_START
        return image

    def drain_faults(self) -> List[CPUFault]:
        faults = list(self.cpu.faults)
        self.cpu.faults.clear()
        return faults

    def reset(self) -> None:
        """Return to the post-create state, restoring the program as it was loaded."""

        self.memory.reset()
        self.memory.load_block(FONT_START, FONT_DATA)
        if self.rom is not None:
            self.memory.load_block(PROGRAM_START, self.rom.data)
        self.framebuffer.clear()
        self.keypad.reset()
        self.timers.reset()
        self.cpu.reset(PROGRAM_START if self.rom is not None else 0x000)


def create_machine(config: MachineConfig | None = None) -> Machine:
    """Instantiate a CHIP-8 machine with the requested configuration."""

    config = config or MachineConfig()

    memory = Memory()
    memory.load_block(FONT_START, FONT_DATA)

    framebuffer = Framebuffer(config.collision_policy)
    keypad = Keypad()
    timers = Timers()
    cpu = Chip8CPU(
        memory,
        framebuffer,
        keypad,
        timers,
        strict=config.strict,
        rng=random.Random(config.seed),
        opcode_table=EXTENDED_OPCODE_TABLE if config.extended_opcodes else OPCODE_TABLE,
    )

    rom = None
    if config.rom_image is not None:
        rom = load_rom_bytes(config.rom_image, memory)
    cpu.reset(PROGRAM_START if rom is not None else 0x000)

    return Machine(
        memory=memory,
        cpu=cpu,
        framebuffer=framebuffer,
        keypad=keypad,
        timers=timers,
        rom=rom,
    )
