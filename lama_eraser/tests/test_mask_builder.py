"""Tests for hole-mask construction."""

import numpy as np
import pytest

from ..config import RectFraction, Zone
from ..domain.entities.raster import RasterImage
from ..domain.services.mask_builder import (
    build_rectangle_mask,
    dilate_hole,
    dilate_mask,
    downsample_for_ocr,
    mask_from_words,
    rasterize_word_boxes,
    rectangle_rect,
    words_in_zone,
)
from ..domain.value_objects.geometry import PixelRect, WordBox
from ..exceptions import GeometryError, ValidationError


class TestRectangleMask:
    """Test the fixed corner rectangle."""

    def test_default_rectangle(self):
        """1000x800 -> 280x192 box anchored at (720, 0)."""
        assert rectangle_rect(1000, 800) == PixelRect(720, 0, 280, 192)

    def test_mask_pixels(self):
        mask = build_rectangle_mask(RasterImage.blank(1000, 800))
        hole = mask.nonzero()

        assert mask.size == (1000, 800)
        assert hole[:192, 720:].all()
        assert hole.sum() == 280 * 192
        assert tuple(mask.pixels[0, 999]) == (255, 255, 255, 255)
        assert tuple(mask.pixels[799, 0]) == (0, 0, 0, 0)

    def test_custom_fraction(self):
        hole = build_rectangle_mask(RasterImage.blank(10, 10), RectFraction(0.5, 1.0)).nonzero()
        assert hole[:, 5:].all()
        assert not hole[:, :5].any()

    def test_zero_area(self):
        with pytest.raises(GeometryError):
            build_rectangle_mask(RasterImage.blank(0, 0))

    def test_bad_fraction(self):
        with pytest.raises(ValidationError):
            build_rectangle_mask(RasterImage.blank(10, 10), RectFraction(0.0, 0.5))


class TestDownsample:
    """Test OCR input reduction."""

    def test_long_edge_bounded(self):
        small = downsample_for_ocr(RasterImage.blank(3200, 1000), 1600)
        assert small.raster.size == (1600, 500)
        assert small.scale == pytest.approx(0.5)
        assert small.inv_scale == pytest.approx(2.0)

    def test_portrait_uses_height(self):
        small = downsample_for_ocr(RasterImage.blank(500, 2000), 1000)
        assert small.raster.size == (250, 1000)

    def test_never_upscales(self):
        source = RasterImage.blank(800, 600)
        small = downsample_for_ocr(source, 1600)
        assert small.raster is source
        assert small.scale == 1.0


class TestWordsInZone:
    """Test filtering words by normalized centre."""

    def test_filter(self):
        outside = WordBox(45, 5, 55, 15)   # centre (0.5, 0.1)
        inside = WordBox(70, 5, 80, 15)    # centre (0.75, 0.1)
        assert words_in_zone([outside, inside], 100, 100) == [inside]

    def test_border_is_inside(self):
        edge = WordBox(55, 35, 65, 45)     # centre (0.6, 0.4)
        assert words_in_zone([edge], 100, 100) == [edge]

    def test_custom_zone(self):
        word = WordBox(0, 90, 10, 100)
        assert words_in_zone([word], 100, 100, Zone(0.0, 0.8, 0.2, 1.0)) == [word]


class TestRasterize:
    """Test word box rasterization."""

    def test_rescaled_box(self):
        hole = rasterize_word_boxes([WordBox(1200, 0, 1210, 10)], 3200, 1000, inv_scale=2.0)
        assert hole.sum() == 20 * 20
        assert hole[0:20, 2400:2420].all()

    def test_box_clipped_to_image(self):
        hole = rasterize_word_boxes([WordBox(95, 0, 120, 5)], 100, 100)
        assert hole.sum() == 5 * 5

    def test_degenerate_box_still_covers_a_pixel(self):
        hole = rasterize_word_boxes([WordBox(10, 10, 10, 10)], 20, 20)
        assert hole.sum() == 1

    def test_mask_from_words_dilates(self):
        mask = mask_from_words([WordBox(70, 5, 80, 15)], 100, 100, dilate_px=2, name="a.png")
        assert mask.nonzero().sum() == 14 * 14
        assert mask.name == "a.png"


class TestDilation:
    """Test square-neighbourhood dilation."""

    def test_single_pixel(self):
        hole = np.zeros((11, 11), dtype=bool)
        hole[5, 5] = True
        grown = dilate_hole(hole, 2)
        assert grown.sum() == 25
        assert grown[3:8, 3:8].all()

    def test_corner_clipped(self):
        hole = np.zeros((5, 5), dtype=bool)
        hole[0, 0] = True
        assert dilate_hole(hole, 1).sum() == 4

    def test_monotonic(self):
        """Every hole pixel stays a hole, for any radius."""
        rng = np.random.default_rng(3)
        hole = rng.random((20, 30)) > 0.9
        for radius in (1, 3, 5):
            grown = dilate_hole(hole, radius)
            assert np.all(grown[hole])
            assert grown.sum() >= hole.sum()

    def test_nested_radii(self):
        """A larger radius covers everything a smaller one does."""
        rng = np.random.default_rng(5)
        hole = rng.random((20, 30)) > 0.95
        for radius in range(1, 6):
            smaller = dilate_hole(hole, radius - 1)
            assert np.all(dilate_hole(hole, radius)[smaller])

    def test_radius_zero_is_identity(self):
        mask = build_rectangle_mask(RasterImage.blank(20, 20))
        assert dilate_mask(mask, 0) is mask

    def test_negative_radius(self):
        with pytest.raises(ValidationError):
            dilate_mask(RasterImage.blank(4, 4), -1)

    def test_dilated_mask_is_white(self):
        hole = np.zeros((5, 5), dtype=bool)
        hole[2, 2] = True
        grown = dilate_mask(RasterImage.from_mask(hole), 1)
        assert tuple(grown.pixels[1, 1]) == (255, 255, 255, 255)
        assert tuple(grown.pixels[0, 0]) == (0, 0, 0, 0)
