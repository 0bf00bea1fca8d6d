"""Tests for the pygame-free parts of the host application."""

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from pychip8.bus import PROGRAM_START
from pychip8.ui import AppConfig, Chip8App
from pychip8.utils import debug as debug_module


def write_rom(tmp_path: Path, data: bytes, name: str = "test.ch8") -> Path:
    rom_path = tmp_path / name
    rom_path.write_bytes(data)
    return rom_path


def fake_pygame(names: dict[int, str]) -> SimpleNamespace:
    return SimpleNamespace(key=SimpleNamespace(name=lambda code: names.get(code, "unknown")))


def test_create_machine_loads_rom(tmp_path: Path) -> None:
    rom_path = write_rom(tmp_path, b"\x60\x05\xA0\x00")
    app = Chip8App(AppConfig(rom_path=rom_path, seed=1))

    machine = app._create_machine()

    assert machine.cpu.state.pc == PROGRAM_START
    assert machine.rom is not None
    assert machine.rom.name == "test.ch8"
    assert machine.memory.load16(PROGRAM_START) == 0x6005


def test_create_machine_requires_rom() -> None:
    app = Chip8App(AppConfig())

    with pytest.raises(RuntimeError, match="ROM image is required"):
        app._create_machine()


def test_create_machine_reports_missing_rom(tmp_path: Path) -> None:
    app = Chip8App(AppConfig(rom_path=tmp_path / "missing.ch8"))

    with pytest.raises(RuntimeError, match="Failed to load rom"):
        app._create_machine()


def test_create_machine_warns_about_truncation(tmp_path: Path, capsys) -> None:
    rom_path = write_rom(tmp_path, bytes(5000), name="big.ch8")
    app = Chip8App(AppConfig(rom_path=rom_path))

    app._create_machine()

    assert "truncated: loaded 3584 of 5000 bytes" in capsys.readouterr().err


def test_invalid_config_rejected() -> None:
    with pytest.raises(ValueError):
        Chip8App(AppConfig(scale=0))
    with pytest.raises(ValueError):
        Chip8App(AppConfig(steps_per_frame=0))


def test_run_frame_turns_stack_overflow_into_runtime_error(tmp_path: Path) -> None:
    rom_path = write_rom(tmp_path, b"\x22\x00")
    app = Chip8App(AppConfig(rom_path=rom_path, steps_per_frame=20))
    machine = app._create_machine()
    app._running = True

    with pytest.raises(RuntimeError, match="CPU fault"):
        app._run_frame(machine)

    assert app._running is False


def test_report_faults_prints_each_location_once(tmp_path: Path, capsys) -> None:
    # Unsupported 0123 followed by a jump back to it.
    rom_path = write_rom(tmp_path, b"\x01\x23\x12\x00")
    app = Chip8App(AppConfig(rom_path=rom_path, steps_per_frame=6))
    machine = app._create_machine()

    app._run_frame(machine)
    app._report_faults(machine)
    app._run_frame(machine)
    app._report_faults(machine)

    err = capsys.readouterr().err
    assert err.count("CHIP-8: unsupported opcode 0123 at 200") == 1


def test_key_events_update_keypad(tmp_path: Path) -> None:
    rom_path = write_rom(tmp_path, b"\x12\x00")
    app = Chip8App(AppConfig(rom_path=rom_path))
    app._machine = app._create_machine()
    pygame = fake_pygame({113: "q", 118: "v", 32: "space"})

    app._handle_key_event(pygame, 113, pressed=True)
    app._handle_key_event(pygame, 118, pressed=True)
    app._handle_key_event(pygame, 32, pressed=True)
    app._handle_key_event(pygame, 113, pressed=False)

    assert app._machine.keypad.pressed_keys() == frozenset({0xF})


def test_dump_cpu(tmp_path: Path, capsys) -> None:
    rom_path = write_rom(tmp_path, b"\x60\x05\xA0\x00")
    app = Chip8App(AppConfig(rom_path=rom_path))
    machine = app._create_machine()

    app._dump_cpu(machine)

    out = capsys.readouterr().out
    assert "CPU PC=200 I=000 SP=0 DT=00 ST=00" in out
    assert "Next: LD V0, 0x05" in out


def test_dump_memory_with_range(tmp_path: Path, capsys) -> None:
    rom_path = write_rom(tmp_path, b"\x60\x05\xA0\x00")
    app = Chip8App(AppConfig(rom_path=rom_path))
    machine = app._create_machine()

    app._dump_memory(machine, "200 4")

    assert capsys.readouterr().out.strip() == "200: 60 05 A0 00"


def test_trace_recorder_captures_steps(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("CHIP8_DEBUG", "trace")
    debug_module.reload_categories()
    try:
        rom_path = write_rom(tmp_path, b"\x60\x05\x12\x02")
        app = Chip8App(AppConfig(rom_path=rom_path, steps_per_frame=3))
        machine = app._create_machine()
        result = app._run_frame(machine)
    finally:
        monkeypatch.delenv("CHIP8_DEBUG")
        debug_module.reload_categories()

    assert result.executed == 3
    recorder = app._trace_recorder
    assert recorder is not None
    entries = list(recorder.entries())
    assert [entry.pc for entry in entries] == [0x200, 0x202, 0x202]
    assert entries[0].mnemonic == "LD V0, 0x05"
    assert entries[-1].note == "repeat"


def test_trace_records_timers_as_seen_before_the_step(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("CHIP8_DEBUG", "trace")
    debug_module.reload_categories()
    try:
        # LD V0, 0x09 ; LD DT, V0 ; LD ST, V0 ; JP 0x206
        rom_path = write_rom(tmp_path, b"\x60\x09\xF0\x15\xF0\x18\x12\x06")
        app = Chip8App(AppConfig(rom_path=rom_path, steps_per_frame=4))
        machine = app._create_machine()
        app._run_frame(machine)
    finally:
        monkeypatch.delenv("CHIP8_DEBUG")
        debug_module.reload_categories()

    recorder = app._trace_recorder
    assert recorder is not None
    entries = list(recorder.entries())
    assert [(entry.delay, entry.sound) for entry in entries] == [(0, 0), (0, 0), (9, 0), (9, 9)]


def test_extended_opcodes_flow_into_machine(tmp_path: Path) -> None:
    rom_path = write_rom(tmp_path, b"\xB2\x06")
    app = Chip8App(AppConfig(rom_path=rom_path, extended_opcodes=True))
    machine = app._create_machine()

    machine.step()

    assert machine.cpu.state.pc == 0x206
