from __future__ import annotations

from pychip8.system import Timers


def test_tick_decrements_both_timers() -> None:
    timers = Timers(delay=3, sound=5)

    timers.tick()

    assert timers.delay == 2
    assert timers.sound == 4


def test_timers_stop_at_zero() -> None:
    timers = Timers()

    assert timers.tick() is False
    assert timers.delay == 0
    assert timers.sound == 0


def test_tone_reported_once_when_sound_expires() -> None:
    timers = Timers(sound=2)

    assert timers.tick() is False
    assert timers.sounding
    assert timers.tick() is True
    assert not timers.sounding
    assert timers.tick() is False


def test_loads_are_masked_to_eight_bits() -> None:
    timers = Timers()
    timers.load_delay(0x1FF)
    timers.load_sound(0x101)

    assert timers.delay == 0xFF
    assert timers.sound == 0x01


def test_reset() -> None:
    timers = Timers(delay=9, sound=9)
    timers.reset()

    assert (timers.delay, timers.sound) == (0, 0)
