"""Tesseract adapter - implements OCREngine port via pytesseract."""

from __future__ import annotations

import logging
import time

from ...application.ports.ocr_engine import OCREngine, OCRResult
from ...domain.entities.raster import RasterImage
from ...domain.value_objects.geometry import WordBox
from ...exceptions import OCRError

logger = logging.getLogger(__name__)

# image_to_data level for individual words
WORD_LEVEL = 5


def parse_word_data(data: dict) -> list[WordBox]:
    """Convert ``image_to_data`` DICT output to word boxes.

    Only word-level rows with non-blank text are kept.
    """
    words: list[WordBox] = []
    texts = data.get("text", [])
    for i, text in enumerate(texts):
        if int(data["level"][i]) != WORD_LEVEL or not str(text).strip():
            continue
        left = float(data["left"][i])
        top = float(data["top"][i])
        words.append(WordBox(
            x0=left,
            y0=top,
            x1=left + float(data["width"][i]),
            y1=top + float(data["height"][i]),
        ))
    return words


class TesseractOCRAdapter(OCREngine):
    """Adapter for the Tesseract engine.

    Requires the ``tesseract`` binary on PATH (or ``tesseract_cmd``).

    Args:
        lang: Tesseract language code(s), e.g. 'eng' or 'eng+deu'
        config: Extra command-line configuration passed to tesseract
        tesseract_cmd: Explicit path to the tesseract binary
    """

    def __init__(
        self,
        lang: str = "eng",
        config: str = "",
        tesseract_cmd: str | None = None
    ):
        self._lang = lang
        self._config = config
        self._tesseract_cmd = tesseract_cmd
        self._module = None

    @property
    def name(self) -> str:
        return "Tesseract"

    @property
    def is_available(self) -> bool:
        """Check if pytesseract is installed."""
        try:
            import pytesseract  # noqa: F401
            return True
        except ImportError:
            return False

    def load(self) -> None:
        """Import pytesseract and check that the binary runs."""
        if self._module is not None:
            return

        try:
            import pytesseract
        except ImportError as e:
            raise OCRError(
                "pytesseract not installed. Install with: pip install pytesseract",
                engine=self.name
            ) from e

        if self._tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = self._tesseract_cmd
        try:
            version = pytesseract.get_tesseract_version()
        except pytesseract.TesseractNotFoundError as e:
            raise OCRError("tesseract binary not found on PATH", engine=self.name) from e

        logger.debug(f"Tesseract {version} ready (lang={self._lang})")
        self._module = pytesseract

    def unload(self) -> None:
        """Nothing is held in memory between calls."""
        self._module = None

    def recognize(self, raster: RasterImage) -> OCRResult:
        """Detect words in ``raster``."""
        if self._module is None:
            self.load()

        start = time.perf_counter()
        try:
            data = self._module.image_to_data(
                raster.to_pil().convert("RGB"),
                lang=self._lang,
                config=self._config,
                output_type=self._module.Output.DICT,
            )
        except Exception as e:
            raise OCRError(f"Tesseract recognition failed: {e}", engine=self.name) from e

        words = parse_word_data(data)
        elapsed = (time.perf_counter() - start) * 1000
        logger.debug(f"Tesseract found {len(words)} words in {elapsed:.0f}ms")
        return OCRResult(words=words, processing_time_ms=elapsed)
