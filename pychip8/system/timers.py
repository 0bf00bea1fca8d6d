"""Delay and sound countdown timers."""

from __future__ import annotations

from dataclasses import dataclass

from pychip8.utils import debug_enabled, debug_log

TIMER_HZ = 60


@dataclass
class Timers:
    """Two 8-bit countdown registers decremented once per host tick."""

    delay: int = 0
    sound: int = 0

    def load_delay(self, value: int) -> None:
        self.delay = value & 0xFF

    def load_sound(self, value: int) -> None:
        self.sound = value & 0xFF

    def tick(self) -> bool:
        """Decrement both timers; return True when the sound timer expires."""

        if self.delay > 0:
            self.delay -= 1

        if self.sound > 0:
            self.sound -= 1
            if self.sound == 0:
                if debug_enabled("audio"):
                    debug_log("audio", "tone")
                return True
        return False

    @property
    def sounding(self) -> bool:
        return self.sound > 0

    def reset(self) -> None:
        self.delay = 0
        self.sound = 0
