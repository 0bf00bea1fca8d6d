"""Tests for the 4 KiB memory image."""

from __future__ import annotations

import pytest

from pychip8.bus import MEMORY_SIZE, Memory, MemoryError, mask12


def test_memory_starts_zeroed() -> None:
    memory = Memory()
    assert len(memory) == MEMORY_SIZE
    assert memory.snapshot() == bytes(MEMORY_SIZE)


def test_store_and_load_byte() -> None:
    memory = Memory()
    memory.store8(0x300, 0x1AB)

    assert memory.load8(0x300) == 0xAB


def test_addresses_fold_into_12_bits() -> None:
    memory = Memory()
    memory.store8(0x1005, 0x42)

    assert memory.load8(0x005) == 0x42
    assert mask12(0xFFFF) == 0xFFF


def test_load16_is_big_endian_and_wraps_at_the_end() -> None:
    memory = Memory()
    memory.store8(0xFFF, 0x12)
    memory.store8(0x000, 0x34)

    assert memory.load16(0xFFF) == 0x1234


def test_store16_writes_high_byte_first() -> None:
    memory = Memory()
    memory.store16(0x400, 0xBEEF)

    assert memory.load8(0x400) == 0xBE
    assert memory.load8(0x401) == 0xEF


def test_load_block_stops_at_memory_boundary() -> None:
    memory = Memory()
    written = memory.load_block(0xFFC, b"\x01\x02\x03\x04\x05\x06")

    assert written == 4
    assert memory.read_block(0xFFC, 4) == b"\x01\x02\x03\x04"
    assert memory.load8(0x000) == 0x00


def test_load_block_rejects_start_outside_memory() -> None:
    memory = Memory()
    with pytest.raises(MemoryError):
        memory.load_block(0x1000, b"\x00")


def test_initial_image_and_reset() -> None:
    memory = Memory(b"\xAA\xBB")
    assert memory.load16(0x000) == 0xAABB

    memory.reset()
    assert memory.snapshot() == bytes(MEMORY_SIZE)
