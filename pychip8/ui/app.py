"""Pygame host loop for the CHIP-8 interpreter."""

from __future__ import annotations

import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from pychip8.audio import ToneBeeper
from pychip8.cpu import CPUError
from pychip8.io import lookup
from pychip8.loader import RomLoadError
from pychip8.system import STEPS_PER_FRAME, TIMER_HZ, FrameResult, Machine, MachineConfig, create_machine
from pychip8.utils import TraceRecorder, debug_enabled, debug_log
from pychip8.video import MONOCHROME, SCREEN_HEIGHT, SCREEN_WIDTH, Renderer
from pychip8.video.palette import RGBColor


@dataclass
class AppConfig:
    """Configuration for the CHIP-8 frontend."""

    rom_path: Optional[Path] = None
    scale: int = 10
    fullscreen: bool = False
    steps_per_frame: int = STEPS_PER_FRAME
    frame_rate: int = TIMER_HZ
    strict: bool = False
    extended_opcodes: bool = False
    seed: Optional[int] = None
    palette: Sequence[RGBColor] = MONOCHROME
    mute: bool = False


class Chip8App:
    """Thin wrapper around the Pygame event loop."""

    def __init__(self, config: AppConfig) -> None:
        if config.scale <= 0:
            raise ValueError("scale must be positive")
        if config.steps_per_frame <= 0:
            raise ValueError("steps per frame must be positive")
        self._config = config
        self._running = False
        self._machine: Machine | None = None
        self._beeper: ToneBeeper | None = None
        self._renderer = Renderer(config.palette)
        self._perf_enabled = debug_enabled("perf")
        self._frame_counter = 0
        self._reported_faults: set[tuple[int, int]] = set()
        self._trace_recorder: TraceRecorder | None = None
        if debug_enabled("trace"):
            self._trace_recorder = TraceRecorder(512)

    def run(self) -> None:
        try:
            import pygame  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pygame is required to run the UI") from exc

        machine = self._create_machine()
        self._machine = machine

        pygame.mixer.pre_init(44_100, -16, 1, 512)
        pygame.init()
        pygame.display.set_caption(f"CHIP-8 - {machine.rom.name if machine.rom else 'no program'}")

        if not self._config.mute:
            self._initialise_audio(pygame)

        surface_size = (SCREEN_WIDTH * self._config.scale, SCREEN_HEIGHT * self._config.scale)
        flags = pygame.FULLSCREEN if self._config.fullscreen else 0
        screen = pygame.display.set_mode(surface_size, flags)

        clock = pygame.time.Clock()
        self._running = True
        redraw = True

        try:
            while self._running:
                for event in pygame.event.get():
                    if event.type == pygame.QUIT:
                        self._running = False
                    elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                        self._enter_debug_shell(machine)
                        pygame.event.clear()
                    elif event.type == pygame.KEYDOWN:
                        self._handle_key_event(pygame, event.key, pressed=True)
                    elif event.type == pygame.KEYUP:
                        self._handle_key_event(pygame, event.key, pressed=False)

                frame_start_time = time.perf_counter()
                result = self._run_frame(machine)
                self._report_faults(machine)

                if result.draw or redraw:
                    frame = self._renderer.render(machine.pixels(), scale=self._config.scale)
                    screen.blit(frame.to_surface(), (0, 0))
                    pygame.display.flip()
                    redraw = False

                if result.tone:
                    self._handle_tone()

                if self._perf_enabled:
                    frame_duration = time.perf_counter() - frame_start_time
                    debug_log(
                        "perf",
                        "frame=%d executed=%d frame_ms=%.3f draw=%s",
                        self._frame_counter,
                        result.executed,
                        frame_duration * 1000.0,
                        result.draw,
                    )

                clock.tick(self._config.frame_rate)
                self._frame_counter += 1
        finally:
            if self._beeper is not None:
                self._beeper.shutdown()
            pygame.quit()

    def _initialise_audio(self, pygame) -> None:
        if pygame.mixer.get_init() is None:
            try:
                pygame.mixer.init(44_100, -16, 1)
            except pygame.error as exc:  # pragma: no cover - best-effort path
                if debug_enabled("audio"):
                    debug_log("audio", "mixer_init_failed=%s", exc)
                return

        mixer_state = pygame.mixer.get_init()
        if mixer_state is None:
            if debug_enabled("audio"):
                debug_log("audio", "mixer_unavailable")
            return
        try:
            self._beeper = ToneBeeper(sample_rate=mixer_state[0])
        except RuntimeError as exc:
            self._beeper = None
            if debug_enabled("audio"):
                debug_log("audio", "beeper_init_failed=%s", exc)

    def _create_machine(self) -> Machine:
        if not self._config.rom_path:
            raise RuntimeError("ROM image is required; pass --rom <path>")

        config = MachineConfig(
            strict=self._config.strict,
            seed=self._config.seed,
            extended_opcodes=self._config.extended_opcodes,
        )
        machine = create_machine(config)
        try:
            machine.load_rom(self._config.rom_path)
        except RomLoadError as exc:
            raise RuntimeError(str(exc)) from exc
        if machine.rom is not None and machine.rom.truncated:
            print(
                f"ROM {machine.rom.name} truncated: loaded {machine.rom.loaded} of {machine.rom.size} bytes",
                file=sys.stderr,
            )
        return machine

    def _handle_key_event(self, pygame, key_code: int, *, pressed: bool) -> None:
        machine = self._machine
        if machine is None:
            return
        name = pygame.key.name(key_code)
        index = lookup(name)
        if debug_enabled("input"):
            debug_log("input", "event=%s index=%s pressed=%s", name, index, pressed)
        if index is None:
            return
        if pressed:
            machine.keypad.press(index)
        else:
            machine.keypad.release(index)

    def _handle_tone(self) -> None:
        if debug_enabled("audio"):
            debug_log("audio", "tone frame=%d", self._frame_counter)
        if self._beeper is not None:
            self._beeper.beep()

    def _run_frame(self, machine: Machine) -> FrameResult:
        trace = self._trace_recorder
        if trace is None:
            try:
                return machine.run_frame(self._config.steps_per_frame)
            except CPUError as exc:
                self._running = False
                raise RuntimeError(f"CPU fault: {exc}") from exc

        cpu = machine.cpu
        result = FrameResult()
        try:
            for _ in range(self._config.steps_per_frame):
                state_before = cpu.state.clone()
                instruction = cpu.peek_instruction()
                opcode = machine.memory.load16(state_before.pc)
                delay_before, sound_before = machine.timers.delay, machine.timers.sound
                drew = cpu.step()
                note = "repeat" if cpu.state.pc == state_before.pc else ""
                trace.record_step(
                    state_before,
                    opcode,
                    delay=delay_before,
                    sound=sound_before,
                    drew=drew,
                    mnemonic=instruction.disassemble() if instruction is not None else "",
                    note=note,
                )
                result.draw = result.draw or drew
                result.executed += 1
        except CPUError as exc:
            self._running = False
            trace.dump("trace", 16)
            raise RuntimeError(f"CPU fault: {exc}") from exc
        result.tone = machine.timers.tick()
        return result

    def _report_faults(self, machine: Machine) -> None:
        for fault in machine.drain_faults():
            key = (fault.pc, fault.opcode)
            if key in self._reported_faults:
                continue
            self._reported_faults.add(key)
            print(f"CHIP-8: {fault.describe()}", file=sys.stderr)

    # ------------------------------------------------------------------
    # Debug shell

    def _enter_debug_shell(self, machine: Machine) -> None:
        print("\n=== CHIP-8 Debug Menu ===")
        print("Enter command: [c]pu, [k]eys, [s]creen, [m]em, [t]race, [q]uit, [Enter] resume")

        paused = True
        while paused and self._running:
            try:
                command = input("debug> ").strip().lower()
            except (EOFError, KeyboardInterrupt):
                print("Resuming emulator.")
                break

            if command == "" or command in {"resume"}:
                paused = False
            elif command in {"c", "cpu"}:
                self._dump_cpu(machine)
            elif command in {"k", "keys"}:
                self._dump_keys(machine)
            elif command in {"s", "screen"}:
                self._dump_screen(machine)
            elif command in {"t", "trace"}:
                self._dump_trace()
            elif command.startswith("m"):
                spec = command[1:].strip()
                self._dump_memory(machine, spec if spec else None)
            elif command in {"q", "quit", "exit"}:
                print("Exiting emulator.")
                self._running = False
                paused = False
            else:
                print("Commands: [Enter]=resume, [c]pu, [k]eys, [s]creen, [m]em, [t]race, [q]uit")

    def _dump_cpu(self, machine: Machine) -> None:
        state = machine.cpu.state
        print(
            "CPU PC={:03X} I={:03X} SP={:X} DT={:02X} ST={:02X}".format(
                state.pc,
                state.i,
                state.sp,
                machine.timers.delay,
                machine.timers.sound,
            )
        )
        print("V  " + " ".join(f"{index:X}={value:02X}" for index, value in enumerate(state.v)))
        if state.sp:
            print("Stack: " + " ".join(f"{address:03X}" for address in state.stack[: state.sp]))
        instruction = machine.cpu.peek_instruction()
        print(f"Next: {instruction.disassemble() if instruction is not None else '??'}")

    def _dump_keys(self, machine: Machine) -> None:
        print(f"Keys: {machine.keypad.describe()}")

    def _dump_screen(self, machine: Machine) -> None:
        for y, row in enumerate(machine.framebuffer.rows_as_text()):
            print(f"{y:02d}: {row}")

    def _dump_trace(self, limit: int = 64) -> None:
        if self._trace_recorder is None:
            print("Trace recorder is disabled. Set CHIP8_DEBUG=trace to enable it.")
            return
        lines = list(self._trace_recorder.format_entries(limit))
        if not lines:
            print("Trace buffer is empty.")
            return
        print("Last trace entries:")
        for line in lines:
            print(f"  {line}")

    def _dump_memory(self, machine: Machine, spec: str | None = None) -> None:
        def parse_value(text: str, default: int) -> int:
            text = text.strip()
            if not text:
                return default
            lowered = text.lower()
            if lowered.startswith("0x"):
                return int(lowered, 16)
            if any(c in "abcdef" for c in lowered):
                return int(lowered, 16)
            return int(lowered, 10)

        if spec:
            parts = spec.split()
            try:
                start = parse_value(parts[0], 0x200)
                length = parse_value(parts[1], 0x80) if len(parts) > 1 else 0x80
            except (ValueError, IndexError):
                print("Usage: m [start_hex] [length]")
                return
        else:
            try:
                addr_input = input("Start address (hex) [200]: ").strip()
            except (EOFError, KeyboardInterrupt):
                print("Cancelled.")
                return
            try:
                start = int(addr_input, 16) if addr_input else 0x200
            except ValueError:
                print(f"Invalid address '{addr_input}'.")
                return
            length = 0x80

        if length <= 0:
            print("Length must be positive.")
            return

        end = start + length
        memory = machine.memory
        for addr in range(start, end, 16):
            chunk = [memory.load8(addr + offset) for offset in range(16) if addr + offset < end]
            hex_part = " ".join(f"{value:02X}" for value in chunk)
            print(f"{addr & 0xFFF:03X}: {hex_part}")
