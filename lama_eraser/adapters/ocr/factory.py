"""Factory for creating OCR engine instances."""

from __future__ import annotations

import logging

from ...application.ports.ocr_engine import OCREngine
from ...config import OCREngineType
from ...exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# Tesseract language codes -> EasyOCR language codes
_EASYOCR_LANGS = {
    "eng": "en",
    "deu": "de",
    "fra": "fr",
    "spa": "es",
    "ita": "it",
    "por": "pt",
    "nld": "nl",
    "jpn": "ja",
    "kor": "ko",
    "chi_sim": "ch_sim",
    "chi_tra": "ch_tra",
}


def easyocr_languages(lang: str) -> list[str]:
    """Translate a Tesseract style 'eng+deu' string into EasyOCR codes."""
    return [_EASYOCR_LANGS.get(part, part) for part in lang.split("+") if part]


def create_ocr_engine(
    engine_type: OCREngineType | str,
    lang: str = "eng",
    **kwargs
) -> OCREngine:
    """Create an OCR engine instance.

    Engines import their backing library lazily, so creating one never
    fails on a missing dependency; ``load`` does.

    Args:
        engine_type: Engine type (enum or string)
        lang: Tesseract style language string
        **kwargs: Additional engine-specific arguments

    Returns:
        Configured OCR engine

    Raises:
        ConfigurationError: If the engine type is not supported
    """
    try:
        engine_type = OCREngineType(engine_type)
    except ValueError:
        available = ", ".join(t.value for t in OCREngineType)
        raise ConfigurationError(
            f"Unknown OCR engine: {engine_type}. Available: {available}",
            config_key="ocr_engine"
        ) from None

    if engine_type is OCREngineType.TESSERACT:
        from .tesseract_adapter import TesseractOCRAdapter
        return TesseractOCRAdapter(lang=lang, **kwargs)

    from .easyocr_adapter import EasyOCRAdapter
    return EasyOCRAdapter(lang_list=easyocr_languages(lang), **kwargs)
