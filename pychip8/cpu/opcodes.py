"""Opcode metadata and decoder for the CHIP-8 instruction set."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final, Iterable, List, Sequence


@dataclass(frozen=True)
class OpcodePattern:
    """One instruction family entry: ``word & mask == value`` selects it."""

    mask: int
    value: int
    mnemonic: str
    operands: str
    handler: str

    def __post_init__(self) -> None:
        if not 0 <= self.mask <= 0xFFFF or not 0 <= self.value <= 0xFFFF:
            raise ValueError(f"pattern out of range: {self.value:#06x}/{self.mask:#06x}")
        if self.value & ~self.mask:
            raise ValueError(f"pattern {self.value:#06x} has bits outside mask {self.mask:#06x}")

    def matches(self, word: int) -> bool:
        return (word & self.mask) == self.value


@dataclass(frozen=True)
class Instruction:
    """A decoded 16-bit instruction word."""

    word: int
    pattern: OpcodePattern

    @property
    def mnemonic(self) -> str:
        return self.pattern.mnemonic

    @property
    def handler(self) -> str:
        return self.pattern.handler

    @property
    def x(self) -> int:
        return (self.word >> 8) & 0x0F

    @property
    def y(self) -> int:
        return (self.word >> 4) & 0x0F

    @property
    def n(self) -> int:
        return self.word & 0x000F

    @property
    def kk(self) -> int:
        return self.word & 0x00FF

    @property
    def nnn(self) -> int:
        return self.word & 0x0FFF

    def disassemble(self) -> str:
        operands = self.pattern.operands.format(x=self.x, y=self.y, n=self.n, kk=self.kk, nnn=self.nnn)
        return f"{self.mnemonic} {operands}".rstrip()


class OpcodeTable:
    """Builder grouping patterns by the high nibble of the instruction word."""

    _FAMILIES: Final[int] = 0x10

    def __init__(self) -> None:
        self._families: List[List[OpcodePattern]] = [[] for _ in range(self._FAMILIES)]

    def register(self, pattern: OpcodePattern) -> None:
        if pattern.mask & 0xF000 != 0xF000:
            raise ValueError(f"pattern {pattern.value:#06x} must fix the high nibble")
        family = self._families[pattern.value >> 12]
        for existing in family:
            if existing.mask == pattern.mask and existing.value == pattern.value:
                raise ValueError(
                    f"pattern {pattern.value:#06x} already registered as {existing.mnemonic}")
        family.append(pattern)

    def register_all(self, patterns: Iterable[OpcodePattern]) -> None:
        for pattern in patterns:
            self.register(pattern)

    def freeze(self) -> Sequence[Sequence[OpcodePattern]]:
        return tuple(tuple(family) for family in self._families)


def build_opcode_table(patterns: Iterable[OpcodePattern]) -> Sequence[Sequence[OpcodePattern]]:
    table = OpcodeTable()
    table.register_all(patterns)
    return table.freeze()


DEFAULT_PATTERNS: Sequence[OpcodePattern] = (
    OpcodePattern(0xFFFF, 0x00E0, "CLS", "", "op_cls"),
    OpcodePattern(0xFFFF, 0x00EE, "RET", "", "op_ret"),
    OpcodePattern(0xF000, 0x1000, "JP", "{nnn:#05x}", "op_jp"),
    OpcodePattern(0xF000, 0x2000, "CALL", "{nnn:#05x}", "op_call"),
    OpcodePattern(0xF000, 0x3000, "SE", "V{x:X}, {kk:#04x}", "op_se_byte"),
    OpcodePattern(0xF000, 0x4000, "SNE", "V{x:X}, {kk:#04x}", "op_sne_byte"),
    OpcodePattern(0xF000, 0x6000, "LD", "V{x:X}, {kk:#04x}", "op_ld_byte"),
    OpcodePattern(0xF000, 0x7000, "ADD", "V{x:X}, {kk:#04x}", "op_add_byte"),
    # ALU family
    OpcodePattern(0xF00F, 0x8000, "LD", "V{x:X}, V{y:X}", "op_ld_reg"),
    OpcodePattern(0xF00F, 0x8001, "OR", "V{x:X}, V{y:X}", "op_or"),
    OpcodePattern(0xF00F, 0x8002, "AND", "V{x:X}, V{y:X}", "op_and"),
    OpcodePattern(0xF00F, 0x8003, "XOR", "V{x:X}, V{y:X}", "op_xor"),
    OpcodePattern(0xF00F, 0x8004, "ADD", "V{x:X}, V{y:X}", "op_add_reg"),
    OpcodePattern(0xF00F, 0x8005, "SUB", "V{x:X}, V{y:X}", "op_sub"),
    OpcodePattern(0xF00F, 0x8006, "SHR", "V{x:X}", "op_shr"),
    OpcodePattern(0xF00F, 0x8007, "SUBN", "V{x:X}, V{y:X}", "op_subn"),
    OpcodePattern(0xF00F, 0x800E, "SHL", "V{x:X}", "op_shl"),
    OpcodePattern(0xF000, 0xA000, "LD", "I, {nnn:#05x}", "op_ld_i"),
    OpcodePattern(0xF000, 0xC000, "RND", "V{x:X}, {kk:#04x}", "op_rnd"),
    OpcodePattern(0xF000, 0xD000, "DRW", "V{x:X}, V{y:X}, {n}", "op_drw"),
    OpcodePattern(0xF0FF, 0xE09E, "SKP", "V{x:X}", "op_skp"),
    OpcodePattern(0xF0FF, 0xE0A1, "SKNP", "V{x:X}", "op_sknp"),
    # Timers, keys and index register
    OpcodePattern(0xF0FF, 0xF007, "LD", "V{x:X}, DT", "op_ld_vx_dt"),
    OpcodePattern(0xF0FF, 0xF00A, "LD", "V{x:X}, K", "op_ld_key"),
    OpcodePattern(0xF0FF, 0xF015, "LD", "DT, V{x:X}", "op_ld_dt_vx"),
    OpcodePattern(0xF0FF, 0xF018, "LD", "ST, V{x:X}", "op_ld_st_vx"),
    OpcodePattern(0xF0FF, 0xF01E, "ADD", "I, V{x:X}", "op_add_i"),
    OpcodePattern(0xF0FF, 0xF029, "LD", "F, V{x:X}", "op_ld_font"),
    OpcodePattern(0xF0FF, 0xF033, "LD", "B, V{x:X}", "op_bcd"),
    OpcodePattern(0xF0FF, 0xF055, "LD", "[I], V{x:X}", "op_store_regs"),
    OpcodePattern(0xF0FF, 0xF065, "LD", "V{x:X}, [I]", "op_load_regs"),
)


# Register-compare skips and the V0-relative jump; enabled per machine
# through ``MachineConfig.extended_opcodes``.
EXTENDED_PATTERNS: Sequence[OpcodePattern] = (
    OpcodePattern(0xF00F, 0x5000, "SE", "V{x:X}, V{y:X}", "op_se_reg"),
    OpcodePattern(0xF00F, 0x9000, "SNE", "V{x:X}, V{y:X}", "op_sne_reg"),
    OpcodePattern(0xF000, 0xB000, "JP", "V0, {nnn:#05x}", "op_jp_v0"),
)


OPCODE_TABLE: Sequence[Sequence[OpcodePattern]] = build_opcode_table(DEFAULT_PATTERNS)
EXTENDED_OPCODE_TABLE: Sequence[Sequence[OpcodePattern]] = build_opcode_table(
    (*DEFAULT_PATTERNS, *EXTENDED_PATTERNS))


def decode(word: int, table: Sequence[Sequence[OpcodePattern]] = OPCODE_TABLE) -> Instruction | None:
    """Decode a 16-bit instruction word, or return None if nothing matches."""

    word &= 0xFFFF
    for pattern in table[word >> 12]:
        if pattern.matches(word):
            return Instruction(word, pattern)
    return None


def disassemble(word: int, table: Sequence[Sequence[OpcodePattern]] = OPCODE_TABLE) -> str:
    instruction = decode(word, table)
    if instruction is None:
        return f"DW {word & 0xFFFF:#06x}"
    return instruction.disassemble()
