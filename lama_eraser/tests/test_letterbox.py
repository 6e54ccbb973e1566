"""Tests for the letterbox transform."""

import numpy as np
import pytest

from ..domain.entities.raster import RasterImage
from ..domain.services.letterbox import OPAQUE_BLACK, TRANSPARENT, invert, letterbox
from ..exceptions import GeometryError
from .fakes import solid


class TestLetterbox:
    """Test scaling onto the square canvas."""

    def test_landscape_full_hd(self):
        """1920x1080 fills the width and is centred vertically."""
        result = letterbox(RasterImage.blank(1920, 1080), 512)
        m = result.mapping

        assert m.scale == pytest.approx(512 / 1920)
        assert (m.pasted_width, m.pasted_height) == (512, 288)
        assert (m.offset_x, m.offset_y) == (0, 112)
        assert result.square.size == (512, 512)

    def test_portrait(self):
        m = letterbox(RasterImage.blank(100, 200), 64).mapping
        assert (m.pasted_width, m.pasted_height) == (32, 64)
        assert (m.offset_x, m.offset_y) == (16, 0)

    def test_upscales_small_source(self):
        m = letterbox(RasterImage.blank(3, 1), 4).mapping
        assert (m.pasted_width, m.pasted_height) == (4, 1)
        assert m.offset_y == 1

    def test_opaque_black_padding(self):
        """Padding outside the pasted region is opaque black by default."""
        square = letterbox(solid(64, 32), 64).square.pixels
        assert tuple(square[0, 0]) == OPAQUE_BLACK
        assert tuple(square[63, 63]) == OPAQUE_BLACK
        assert tuple(square[32, 32]) == (10, 200, 30, 255)

    def test_transparent_padding_for_masks(self):
        square = letterbox(solid(64, 32), 64, background=TRANSPARENT).square
        assert not square.nonzero()[:16].any()
        assert not square.nonzero()[48:].any()
        assert square.nonzero()[16:48].all()

    def test_same_size_is_copy(self):
        source = solid(16, 16)
        result = letterbox(source, 16)
        np.testing.assert_array_equal(result.square.pixels, source.pixels)
        assert (result.mapping.offset_x, result.mapping.offset_y) == (0, 0)

    def test_zero_area_rejected(self):
        with pytest.raises(GeometryError):
            letterbox(RasterImage.blank(0, 10), 64)

    def test_non_positive_target_rejected(self):
        with pytest.raises(GeometryError):
            letterbox(solid(4, 4), 0)


class TestInvert:
    """Test mapping the square back to source geometry."""

    def test_round_trip_restores_size(self):
        source = solid(1920, 1080)
        result = letterbox(source, 512)
        restored = invert(result.mapping, result.square)
        assert restored.size == (1920, 1080)

    def test_round_trip_uniform_colour(self):
        """Only padding is cropped; a flat image survives resampling."""
        result = letterbox(solid(200, 120), 64)
        restored = invert(result.mapping, result.square)
        assert np.all(restored.pixels[:, :, :3] == (10, 200, 30))

    def test_wrong_square_size(self):
        result = letterbox(solid(20, 10), 32)
        with pytest.raises(GeometryError):
            invert(result.mapping, RasterImage.blank(16, 16))
