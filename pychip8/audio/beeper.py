"""Square-wave tone played when the sound timer expires."""

from __future__ import annotations

from array import array
from typing import Optional


class ToneBeeper:
    """Play a short fixed-pitch beep using pygame's mixer."""

    def __init__(
        self,
        *,
        sample_rate: int = 44_100,
        frequency: float = 440.0,
        volume: float = 0.25,
        duration_ms: int = 80,
    ) -> None:
        try:
            import pygame  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pygame is required for audio output") from exc

        if pygame.mixer.get_init() is None:
            raise RuntimeError("pygame mixer must be initialised before creating ToneBeeper")

        if frequency <= 0.0:
            raise ValueError("frequency must be positive")

        self._pygame = pygame
        self._sample_rate = max(1, sample_rate)
        self._frequency = frequency
        self._volume = max(0.0, min(1.0, volume))
        self._duration_ms = max(1, duration_ms)
        self._sound: Optional["pygame.mixer.Sound"] = None
        self._channel: Optional["pygame.mixer.Channel"] = None

    # ------------------------------------------------------------------
    # Public API

    def beep(self) -> None:
        """Start one beep; a beep already playing is restarted."""

        if self._sound is None:
            self._sound = self._build_sound()
            self._sound.set_volume(self._volume)
        self._channel = self._sound.play(maxtime=self._duration_ms)

    def shutdown(self) -> None:
        """Stop any active tone and release resources."""

        if self._channel is not None:
            self._channel.stop()
        self._channel = None
        self._sound = None

    # ------------------------------------------------------------------
    # Internals

    def _build_sound(self) -> "pygame.mixer.Sound":
        return self._pygame.mixer.Sound(buffer=square_wave(self._sample_rate, self._frequency, self._duration_ms))


def square_wave(sample_rate: int, frequency: float, duration_ms: int, *, amplitude: int = 12_000) -> bytes:
    """Return signed 16-bit mono samples for a square wave."""

    if sample_rate <= 0 or frequency <= 0.0:
        raise ValueError("sample rate and frequency must be positive")
    total = max(1, sample_rate * duration_ms // 1000)
    half_period = max(1, int(round(sample_rate / (2.0 * frequency))))
    buffer = array("h")
    for index in range(total):
        buffer.append(amplitude if (index // half_period) % 2 == 0 else -amplitude)
    return buffer.tobytes()


__all__ = ["ToneBeeper", "square_wave"]
