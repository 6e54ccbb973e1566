"""Tests for configuration module."""

import pytest

from ..config import (
    DEFAULT_OCR_ZONE,
    PROVIDER_NAMES,
    UPPER_RIGHT_FRACTION,
    ExecutionProvider,
    MaskPolicy,
    OCREngineType,
    Zone,
)


class TestEnums:
    """Test configuration enums."""

    def test_mask_policy_values(self):
        """Test that mask policies parse from their CLI names."""
        assert MaskPolicy("rectangle") is MaskPolicy.RECTANGLE
        assert MaskPolicy("ocr") is MaskPolicy.OCR
        assert MaskPolicy("auto") is MaskPolicy.AUTO

    def test_invalid_mask_policy(self):
        """Test that an unknown policy raises error."""
        with pytest.raises(ValueError):
            MaskPolicy("lasso")

    def test_ocr_engine_values(self):
        assert OCREngineType.TESSERACT.value == "tesseract"
        assert OCREngineType.EASYOCR.value == "easyocr"

    def test_every_provider_has_runtime_name(self):
        """Test that each short provider name maps to an onnxruntime id."""
        for provider in ExecutionProvider:
            assert PROVIDER_NAMES[provider].endswith("ExecutionProvider")


class TestZone:
    """Test the normalized OCR zone."""

    def test_default_zone(self):
        assert DEFAULT_OCR_ZONE == Zone(0.6, 0.0, 1.0, 0.4)

    def test_contains_inclusive_edges(self):
        """Centres on the zone border count as inside."""
        zone = Zone()
        assert zone.contains(0.6, 0.0)
        assert zone.contains(1.0, 0.4)
        assert zone.contains(0.75, 0.1)

    def test_outside(self):
        zone = Zone()
        assert not zone.contains(0.5, 0.1)
        assert not zone.contains(0.75, 0.41)


def test_default_rectangle_fraction():
    """The corner rectangle covers 28% of the width and 24% of the height."""
    assert UPPER_RIGHT_FRACTION.w == pytest.approx(0.28)
    assert UPPER_RIGHT_FRACTION.h == pytest.approx(0.24)
