"""CHIP-8 fetch/decode/execute engine."""

from __future__ import annotations

import random
from collections import deque
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Deque, Sequence

from pychip8.bus import Memory, mask12
from pychip8.io import Keypad
from pychip8.utils import debug_enabled, debug_log
from pychip8.video import Framebuffer, glyph_address

from .opcodes import OPCODE_TABLE, Instruction, OpcodePattern, decode

if TYPE_CHECKING:
    from pychip8.system.timers import Timers


NUM_REGISTERS = 16
STACK_DEPTH = 16
FLAG_REGISTER = 0xF
INSTRUCTION_SIZE = 2
MAX_FAULTS = 64


class CPUError(Exception):
    """Base error for CPU-related failures."""

    def __init__(self, message: str, *, pc: int | None = None, opcode: int | None = None) -> None:
        super().__init__(message)
        self.pc = pc
        self.opcode = opcode


class IllegalOpcodeError(CPUError):
    """Raised in strict mode when an instruction word matches no pattern."""


class StackError(CPUError):
    """Raised when a call or return would leave the 16-level stack."""


class StackOverflowError(StackError):
    pass


class StackUnderflowError(StackError):
    pass


@dataclass(frozen=True)
class CPUFault:
    """A recoverable condition recorded while running in lenient mode."""

    pc: int
    opcode: int
    reason: str

    def describe(self) -> str:
        return f"{self.reason} {self.opcode:04X} at {self.pc:03X}"


@dataclass
class CPUState:
    """Snapshot of the CHIP-8 register file and call stack."""

    v: bytearray = field(default_factory=lambda: bytearray(NUM_REGISTERS))
    i: int = 0x0000
    pc: int = 0x000
    sp: int = 0
    stack: list[int] = field(default_factory=lambda: [0] * STACK_DEPTH)

    def clone(self) -> "CPUState":
        return CPUState(bytearray(self.v), self.i, self.pc, self.sp, list(self.stack))


@dataclass
class Chip8CPU:
    """Interpreter core; one :meth:`step` executes one instruction."""

    memory: Memory
    framebuffer: Framebuffer
    keypad: Keypad
    timers: Timers
    strict: bool = False
    rng: random.Random = field(default_factory=random.Random)
    opcode_table: Sequence[Sequence[OpcodePattern]] = field(default=OPCODE_TABLE)

    state: CPUState = field(default_factory=CPUState)
    instruction_count: int = 0
    last_instruction: Instruction | None = None
    faults: Deque[CPUFault] = field(default_factory=lambda: deque(maxlen=MAX_FAULTS))

    DRAW_HANDLERS = frozenset({"op_cls", "op_drw"})

    def reset(self, pc: int = 0x000) -> None:
        """Clear registers, stack and counters; keep memory untouched."""

        self.state = CPUState(pc=mask12(pc))
        self.instruction_count = 0
        self.last_instruction = None
        self.faults.clear()

    def step(self) -> bool:
        """Execute a single instruction and return whether the screen changed."""

        pc = self.state.pc
        word = self.memory.load16(pc)
        instruction = decode(word, self.opcode_table)
        if debug_enabled("cpu"):
            debug_log(
                "cpu",
                "pc=%03x opcode=%04x %s",
                pc,
                word,
                instruction.disassemble() if instruction is not None else "??",
            )

        if instruction is None:
            self._unsupported(pc, word)
            self._advance(INSTRUCTION_SIZE)
            self.last_instruction = None
            self.instruction_count += 1
            return False

        handler = getattr(self, instruction.handler, None)
        if handler is None:
            raise CPUError(f"handler '{instruction.handler}' not implemented", pc=pc, opcode=word)

        advance = handler(instruction)
        self._advance(INSTRUCTION_SIZE if advance is None else advance)
        self.last_instruction = instruction
        self.instruction_count += 1
        return instruction.handler in self.DRAW_HANDLERS

    def peek_instruction(self) -> Instruction | None:
        return decode(self.memory.load16(self.state.pc), self.opcode_table)

    # ------------------------------------------------------------------
    # Instruction handlers
    #
    # A handler returns the program counter advance (``None`` = default,
    # ``0`` = the handler set ``pc`` itself or the instruction must repeat).

    def op_cls(self, _: Instruction) -> None:
        self.framebuffer.clear()

    def op_ret(self, instruction: Instruction) -> None:
        state = self.state
        if state.sp == 0:
            raise StackUnderflowError(
                f"return with empty stack at {state.pc:03X}", pc=state.pc, opcode=instruction.word)
        state.sp -= 1
        # The stack holds the address of the CALL; the default advance skips it.
        state.pc = state.stack[state.sp]

    def op_jp(self, instruction: Instruction) -> int:
        self.state.pc = instruction.nnn
        return 0

    def op_call(self, instruction: Instruction) -> int:
        state = self.state
        if state.sp >= STACK_DEPTH:
            raise StackOverflowError(
                f"call depth exceeds {STACK_DEPTH} at {state.pc:03X}", pc=state.pc, opcode=instruction.word)
        state.stack[state.sp] = state.pc
        state.sp += 1
        state.pc = instruction.nnn
        return 0

    def op_se_byte(self, instruction: Instruction) -> int | None:
        return self._skip_if(self.state.v[instruction.x] == instruction.kk)

    def op_sne_byte(self, instruction: Instruction) -> int | None:
        return self._skip_if(self.state.v[instruction.x] != instruction.kk)

    def op_se_reg(self, instruction: Instruction) -> int | None:
        v = self.state.v
        return self._skip_if(v[instruction.x] == v[instruction.y])

    def op_sne_reg(self, instruction: Instruction) -> int | None:
        v = self.state.v
        return self._skip_if(v[instruction.x] != v[instruction.y])

    def op_ld_byte(self, instruction: Instruction) -> None:
        self.state.v[instruction.x] = instruction.kk

    def op_add_byte(self, instruction: Instruction) -> None:
        v = self.state.v
        v[instruction.x] = (v[instruction.x] + instruction.kk) & 0xFF

    def op_ld_reg(self, instruction: Instruction) -> None:
        v = self.state.v
        v[instruction.x] = v[instruction.y]

    def op_or(self, instruction: Instruction) -> None:
        v = self.state.v
        v[instruction.x] |= v[instruction.y]

    def op_and(self, instruction: Instruction) -> None:
        v = self.state.v
        v[instruction.x] &= v[instruction.y]

    def op_xor(self, instruction: Instruction) -> None:
        v = self.state.v
        v[instruction.x] ^= v[instruction.y]

    def op_add_reg(self, instruction: Instruction) -> None:
        v = self.state.v
        total = v[instruction.x] + v[instruction.y]
        self._store_with_flag(instruction.x, total & 0xFF, total > 0xFF)

    def op_sub(self, instruction: Instruction) -> None:
        v = self.state.v
        minuend, subtrahend = v[instruction.x], v[instruction.y]
        self._store_with_flag(instruction.x, (minuend - subtrahend) & 0xFF, minuend > subtrahend)

    def op_subn(self, instruction: Instruction) -> None:
        v = self.state.v
        minuend, subtrahend = v[instruction.y], v[instruction.x]
        self._store_with_flag(instruction.x, (minuend - subtrahend) & 0xFF, minuend > subtrahend)

    def op_shr(self, instruction: Instruction) -> None:
        value = self.state.v[instruction.x]
        self._store_with_flag(instruction.x, value >> 1, (value & 0x01) != 0)

    def op_shl(self, instruction: Instruction) -> None:
        value = self.state.v[instruction.x]
        self._store_with_flag(instruction.x, (value << 1) & 0xFF, (value & 0x80) != 0)

    def op_ld_i(self, instruction: Instruction) -> None:
        self.state.i = instruction.nnn

    def op_jp_v0(self, instruction: Instruction) -> int:
        self.state.pc = mask12(instruction.nnn + self.state.v[0])
        return 0

    def op_rnd(self, instruction: Instruction) -> None:
        self.state.v[instruction.x] = instruction.kk & self.rng.randrange(0x100)

    def op_drw(self, instruction: Instruction) -> None:
        state = self.state
        rows = [self.memory.load8(state.i + offset) for offset in range(instruction.n)]
        state.v[FLAG_REGISTER] = 0
        collision = self.framebuffer.blit_sprite(state.v[instruction.x], state.v[instruction.y], rows)
        if collision:
            state.v[FLAG_REGISTER] = 1

    def op_skp(self, instruction: Instruction) -> int | None:
        return self._skip_if(self.keypad.is_pressed(self.state.v[instruction.x] & 0x0F))

    def op_sknp(self, instruction: Instruction) -> int | None:
        return self._skip_if(not self.keypad.is_pressed(self.state.v[instruction.x] & 0x0F))

    def op_ld_vx_dt(self, instruction: Instruction) -> None:
        self.state.v[instruction.x] = self.timers.delay

    def op_ld_key(self, instruction: Instruction) -> int | None:
        key = self.keypad.first_pressed()
        if key is None:
            # Re-execute this instruction on the next step until a key is down.
            return 0
        self.state.v[instruction.x] = key
        return None

    def op_ld_dt_vx(self, instruction: Instruction) -> None:
        self.timers.load_delay(self.state.v[instruction.x])

    def op_ld_st_vx(self, instruction: Instruction) -> None:
        self.timers.load_sound(self.state.v[instruction.x])

    def op_add_i(self, instruction: Instruction) -> None:
        state = self.state
        state.i = (state.i + state.v[instruction.x]) & 0xFFFF

    def op_ld_font(self, instruction: Instruction) -> None:
        self.state.i = glyph_address(self.state.v[instruction.x])

    def op_bcd(self, instruction: Instruction) -> None:
        value = self.state.v[instruction.x]
        base = self.state.i
        self.memory.store8(base, value // 100)
        self.memory.store8(base + 1, (value // 10) % 10)
        self.memory.store8(base + 2, value % 10)

    def op_store_regs(self, instruction: Instruction) -> None:
        state = self.state
        for index in range(instruction.x + 1):
            self.memory.store8(state.i + index, state.v[index])

    def op_load_regs(self, instruction: Instruction) -> None:
        state = self.state
        for index in range(instruction.x + 1):
            state.v[index] = self.memory.load8(state.i + index)

    # ------------------------------------------------------------------
    # Helpers

    def _advance(self, amount: int) -> None:
        self.state.pc = mask12(self.state.pc + amount)

    @staticmethod
    def _skip_if(condition: bool) -> int | None:
        return INSTRUCTION_SIZE * 2 if condition else None

    def _store_with_flag(self, register: int, value: int, flag: bool) -> None:
        # The result is written last so that it wins when the target is VF.
        v = self.state.v
        v[FLAG_REGISTER] = 1 if flag else 0
        v[register] = value & 0xFF

    def _unsupported(self, pc: int, word: int) -> None:
        if self.strict:
            raise IllegalOpcodeError(f"unsupported opcode {word:#06x} at {pc:#05x}", pc=pc, opcode=word)
        self.faults.append(CPUFault(pc, word, "unsupported opcode"))
        if debug_enabled("cpu"):
            debug_log("cpu", "unsupported opcode=%04x pc=%03x", word, pc)
