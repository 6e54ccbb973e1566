"""Tests for OCR adapters and OCR-driven masking."""

from types import SimpleNamespace

import pytest

from ..adapters.ocr.easyocr_adapter import EasyOCRAdapter, polygon_to_box
from ..adapters.ocr.factory import create_ocr_engine, easyocr_languages
from ..adapters.ocr.tesseract_adapter import TesseractOCRAdapter, parse_word_data
from ..application.ports.event_publisher import Severity, SimpleEventPublisher
from ..application.ports.ocr_engine import OCREngine
from ..application.services.ocr_masking import OCRMaskBuilder
from ..domain.entities.raster import RasterImage
from ..domain.services.mask_builder import build_rectangle_mask
from ..domain.value_objects.geometry import WordBox
from ..exceptions import ConfigurationError, OCRError, ValidationError
from .fakes import FakeOCR

TESSERACT_DATA = {
    "level": [1, 5, 5, 5],
    "text": ["", "Hello", "  ", "42"],
    "left": [0, 10, 30, 60],
    "top": [0, 20, 20, 5],
    "width": [100, 15, 5, 12],
    "height": [100, 8, 8, 9],
}


def test_parse_word_data_keeps_non_blank_words():
    """Only word-level rows with text become boxes."""
    words = parse_word_data(TESSERACT_DATA)
    assert words == [WordBox(10, 20, 25, 28), WordBox(60, 5, 72, 14)]


def test_polygon_to_box():
    box = polygon_to_box([[10, 20], [30, 18], [32, 40], [8, 42]])
    assert box == WordBox(8, 18, 32, 42)


def test_tesseract_recognize_with_stub_module():
    """recognize() passes language and DICT output to image_to_data."""
    calls = {}

    def image_to_data(image, lang, config, output_type):
        calls.update(size=image.size, mode=image.mode, lang=lang, output_type=output_type)
        return TESSERACT_DATA

    adapter = TesseractOCRAdapter(lang="eng+deu")
    adapter._module = SimpleNamespace(image_to_data=image_to_data, Output=SimpleNamespace(DICT="dict"))

    result = adapter.recognize(RasterImage.blank(40, 30))

    assert result.word_count == 2
    assert calls == {"size": (40, 30), "mode": "RGB", "lang": "eng+deu", "output_type": "dict"}


def test_tesseract_failure_wrapped():
    def image_to_data(*args, **kwargs):
        raise RuntimeError("tesseract crashed")

    adapter = TesseractOCRAdapter()
    adapter._module = SimpleNamespace(image_to_data=image_to_data, Output=SimpleNamespace(DICT="dict"))
    with pytest.raises(OCRError):
        adapter.recognize(RasterImage.blank(4, 4))


def test_easyocr_recognize_with_stub_reader():
    reader = SimpleNamespace(readtext=lambda rgb: [
        ([[70, 5], [80, 5], [80, 15], [70, 15]], "12", 0.9),
        ([[0, 0], [5, 0], [5, 5], [0, 5]], " ", 0.1),
    ])
    adapter = EasyOCRAdapter()
    adapter._reader = reader
    assert adapter.recognize(RasterImage.blank(100, 100)).words == [WordBox(70, 5, 80, 15)]


class TestFactory:
    """Test OCR engine creation."""

    def test_tesseract(self):
        engine = create_ocr_engine("tesseract", lang="deu")
        assert isinstance(engine, TesseractOCRAdapter)
        assert isinstance(engine, OCREngine)

    def test_easyocr_languages(self):
        engine = create_ocr_engine("easyocr", lang="eng+jpn")
        assert isinstance(engine, EasyOCRAdapter)
        assert engine.lang_list == ["en", "ja"]

    def test_unknown_code_passes_through(self):
        assert easyocr_languages("eng+xx") == ["en", "xx"]

    def test_unknown_engine(self):
        with pytest.raises(ConfigurationError):
            create_ocr_engine("paddle")


class TestOCRMaskBuilder:
    """Test OCR masking and its rectangle fallback."""

    def test_words_in_zone_are_masked(self):
        ocr = FakeOCR([WordBox(45, 5, 55, 15), WordBox(70, 5, 80, 15)])
        outcome = OCRMaskBuilder(ocr, dilate_px=0).build(RasterImage.blank(100, 100))

        assert not outcome.fell_back
        assert (outcome.words_detected, outcome.words_kept) == (2, 1)
        hole = outcome.mask.nonzero()
        assert hole.sum() == 100
        assert hole[5:15, 70:80].all()

    def test_no_words_in_zone_falls_back(self):
        """A word centred at (0.5, 0.1) is outside the zone."""
        source = RasterImage.blank(100, 100)
        outcome = OCRMaskBuilder(FakeOCR([WordBox(45, 5, 55, 15)])).build(source)

        assert outcome.fell_back
        assert outcome.words_detected == 1
        assert (outcome.mask.pixels == build_rectangle_mask(source).pixels).all()

    def test_ocr_error_falls_back(self, failing_ocr):
        events = SimpleEventPublisher()
        seen = []
        events.subscribe(seen.append)
        source = RasterImage.blank(100, 100, name="a.png")

        outcome = OCRMaskBuilder(failing_ocr, events=events).build(source)

        assert outcome.fell_back
        assert "engine crashed" in outcome.reason
        assert (outcome.mask.pixels == build_rectangle_mask(source).pixels).all()
        assert seen[-1].severity is Severity.WARNING
        assert seen[-1].image_name == "a.png"

    def test_missing_engine_falls_back(self):
        assert OCRMaskBuilder(None).build(RasterImage.blank(10, 10)).fell_back

    def test_large_images_are_downsampled_for_ocr(self):
        """Boxes come back at OCR scale and are mapped to the source."""
        ocr = FakeOCR([WordBox(1200, 0, 1210, 10)])
        mask = OCRMaskBuilder(ocr, dilate_px=0)(RasterImage.blank(3200, 1000))

        assert ocr.seen[0].size == (1600, 500)
        assert mask.size == (3200, 1000)
        assert mask.nonzero()[0:20, 2400:2420].all()
        assert mask.nonzero().sum() == 400

    def test_negative_dilation_rejected(self):
        with pytest.raises(ValidationError):
            OCRMaskBuilder(None, dilate_px=-1)
