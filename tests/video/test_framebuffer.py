"""Tests for the packed framebuffer and sprite blit."""

from __future__ import annotations

import pytest

from pychip8.video import (
    FRAMEBUFFER_SIZE,
    SCREEN_PIXELS,
    SCREEN_WIDTH,
    CollisionPolicy,
    Framebuffer,
)


def lit(fb: Framebuffer) -> set[tuple[int, int]]:
    pixels = fb.unpack_pixels()
    return {(index % SCREEN_WIDTH, index // SCREEN_WIDTH) for index, value in enumerate(pixels) if value}


def test_new_framebuffer_is_blank() -> None:
    fb = Framebuffer()

    assert len(fb) == FRAMEBUFFER_SIZE == 256
    assert fb.is_blank()
    assert fb.unpack_pixels() == [False] * SCREEN_PIXELS


def test_clear_then_unpack_is_all_false() -> None:
    fb = Framebuffer()
    fb.blit_sprite(10, 10, [0xFF, 0xFF])

    fb.clear()

    assert fb.unpack_pixels() == [False] * SCREEN_PIXELS


def test_blit_aligned_row() -> None:
    fb = Framebuffer()

    collision = fb.blit_sprite(8, 1, [0b1010_0001])

    assert collision is False
    assert lit(fb) == {(8, 1), (10, 1), (15, 1)}
    assert fb.snapshot()[1 * 8 + 1] == 0b1010_0001


def test_blit_straddles_two_byte_groups() -> None:
    fb = Framebuffer()

    fb.blit_sprite(4, 0, [0xFF])

    data = fb.snapshot()
    assert data[0] == 0x0F
    assert data[1] == 0xF0
    assert lit(fb) == {(x, 0) for x in range(4, 12)}


def test_origin_wraps_modulo_screen_size() -> None:
    wrapped = Framebuffer()
    direct = Framebuffer()

    wrapped.blit_sprite(64 + 3, 32 + 1, [0xC0])
    direct.blit_sprite(3, 1, [0xC0])

    assert wrapped.snapshot() == direct.snapshot()


def test_columns_past_right_edge_are_clipped() -> None:
    fb = Framebuffer()

    fb.blit_sprite(60, 0, [0xFF])

    assert lit(fb) == {(60, 0), (61, 0), (62, 0), (63, 0)}


def test_rows_past_bottom_edge_are_clipped() -> None:
    fb = Framebuffer()

    fb.blit_sprite(0, 30, [0x80, 0x80, 0x80, 0x80])

    assert lit(fb) == {(0, 30), (0, 31)}


def test_double_blit_restores_framebuffer_and_reports_collision() -> None:
    fb = Framebuffer()
    fb.blit_sprite(0, 0, [0x3C])
    before = fb.snapshot()

    first = fb.blit_sprite(13, 7, [0xF0, 0x90, 0xF0])
    second = fb.blit_sprite(13, 7, [0xF0, 0x90, 0xF0])

    assert first is False
    assert second is True
    assert fb.snapshot() == before


def test_byte_group_policy_misses_masked_erasure() -> None:
    fb = Framebuffer(CollisionPolicy.BYTE_GROUP)
    fb.blit_sprite(0, 0, [0x01])

    # 0x01 -> 0x80 erases bit 0 but the byte group grows.
    assert fb.blit_sprite(0, 0, [0x81]) is False
    assert fb.snapshot()[0] == 0x80


def test_bit_exact_policy_flags_any_erased_pixel() -> None:
    fb = Framebuffer(CollisionPolicy.BIT_EXACT)
    fb.blit_sprite(0, 0, [0x01])

    assert fb.blit_sprite(0, 0, [0x81]) is True
    assert fb.snapshot()[0] == 0x80


@pytest.mark.parametrize("policy", list(CollisionPolicy))
def test_policies_agree_when_byte_shrinks(policy: CollisionPolicy) -> None:
    fb = Framebuffer(policy)
    fb.blit_sprite(0, 0, [0x81])

    assert fb.blit_sprite(0, 0, [0x01]) is True


def test_empty_sprite_changes_nothing() -> None:
    fb = Framebuffer()

    assert fb.blit_sprite(5, 5, []) is False
    assert fb.is_blank()


def test_unpack_is_read_only_and_idempotent() -> None:
    fb = Framebuffer()
    fb.blit_sprite(20, 20, [0xAA, 0x55])
    snapshot = fb.snapshot()

    first = fb.unpack_pixels()
    second = fb.unpack_pixels()

    assert first == second
    assert fb.snapshot() == snapshot
    assert len(first) == SCREEN_PIXELS


def test_get_pixel_and_bounds() -> None:
    fb = Framebuffer()
    fb.blit_sprite(63, 31, [0x80])

    assert fb.get_pixel(63, 31) is True
    assert fb.get_pixel(0, 0) is False
    with pytest.raises(ValueError):
        fb.get_pixel(64, 0)


def test_load_requires_full_image() -> None:
    fb = Framebuffer()
    with pytest.raises(ValueError):
        fb.load(b"\x00" * 10)

    fb.load(b"\xFF" * FRAMEBUFFER_SIZE)
    assert all(fb.unpack_pixels())


def test_rows_as_text() -> None:
    fb = Framebuffer()
    fb.blit_sprite(0, 0, [0xC0])

    rows = fb.rows_as_text()

    assert len(rows) == 32
    assert rows[0].startswith("##..")
    assert set(rows[1]) == {"."}
