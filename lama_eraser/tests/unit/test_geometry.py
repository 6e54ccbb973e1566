"""Unit tests for geometry value objects."""

import pytest
from lama_eraser.domain.value_objects.geometry import (
    LetterboxMapping, PixelRect, WordBox, round_half_up
)


@pytest.mark.parametrize("value, expected", [
    (2.5, 3), (3.5, 4), (0.5, 1), (1.49, 1), (-0.5, 0), (287.99999, 288),
])
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected


class TestWordBox:
    """Tests for WordBox class."""

    def test_dimensions(self):
        box = WordBox(10, 20, 40, 30)
        assert box.width == 30
        assert box.height == 10
        assert box.center == (25, 25)

    def test_normalized_center(self):
        assert WordBox(70, 5, 80, 15).normalized_center(100, 100) == pytest.approx((0.75, 0.1))

    def test_rescaled_floor_origin_ceil_extent(self):
        rect = WordBox(1.5, 2.2, 3.1, 4.0).rescaled(2.0)
        assert rect == PixelRect(3, 4, 4, 4)

    def test_rescaled_never_empty(self):
        rect = WordBox(5, 5, 5, 5).rescaled(3.0)
        assert (rect.width, rect.height) == (1, 1)

    def test_rescaled_clamps_origin(self):
        assert WordBox(-2, -1, 4, 4).rescaled(1.0).x == 0


class TestPixelRect:
    """Tests for PixelRect class."""

    def test_edges(self):
        rect = PixelRect(10, 20, 30, 40)
        assert rect.right == 40
        assert rect.bottom == 60
        assert rect.area == 1200

    def test_clip(self):
        assert PixelRect(90, 5, 20, 10).clip(100, 100) == PixelRect(90, 5, 10, 10)

    def test_clip_outside(self):
        assert PixelRect(150, 150, 10, 10).clip(100, 100).area == 0


class TestLetterboxMapping:
    """Tests for LetterboxMapping class."""

    def test_full_hd(self):
        m = LetterboxMapping.compute(1920, 1080, 512)
        assert (m.pasted_width, m.pasted_height) == (512, 288)
        assert (m.offset_x, m.offset_y) == (0, 112)
        assert m.pasted_rect == PixelRect(0, 112, 512, 288)

    def test_square_source(self):
        m = LetterboxMapping.compute(300, 300, 512)
        assert m.scale == pytest.approx(512 / 300)
        assert (m.pasted_width, m.pasted_height, m.offset_x, m.offset_y) == (512, 512, 0, 0)

    def test_extreme_aspect_keeps_one_pixel(self):
        m = LetterboxMapping.compute(10000, 1, 512)
        assert m.pasted_height == 1
        assert m.offset_y == 255
