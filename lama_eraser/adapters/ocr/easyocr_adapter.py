"""EasyOCR adapter - implements OCREngine port."""

from __future__ import annotations

import gc
import logging
import time

import numpy as np

from ...application.ports.ocr_engine import OCREngine, OCRResult
from ...domain.entities.raster import RasterImage
from ...domain.value_objects.geometry import WordBox
from ...exceptions import OCRError

logger = logging.getLogger(__name__)


def polygon_to_box(points: object) -> WordBox:
    """Axis-aligned bounds of an EasyOCR polygon ``[[x, y], ...]``."""
    pts = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    return WordBox(
        x0=float(pts[:, 0].min()),
        y0=float(pts[:, 1].min()),
        x1=float(pts[:, 0].max()),
        y1=float(pts[:, 1].max()),
    )


class EasyOCRAdapter(OCREngine):
    """Adapter for EasyOCR.

    EasyOCR returns line-level boxes rather than words; a line is treated
    as one word box. It has no system binary dependency, which makes it
    the easier engine to install on Windows.

    Args:
        lang_list: List of language codes to recognize (default: ['en'])
        gpu: Whether to use GPU acceleration

    Installation:
        pip install easyocr
    """

    def __init__(self, lang_list: list[str] | None = None, gpu: bool = False):
        self.lang_list = lang_list or ['en']
        self.gpu = gpu
        self._reader = None

    @property
    def name(self) -> str:
        return "EasyOCR"

    @property
    def is_available(self) -> bool:
        """Check if EasyOCR is installed."""
        try:
            import easyocr  # noqa: F401
            return True
        except ImportError:
            return False

    def load(self) -> None:
        """Load the EasyOCR reader.

        Raises:
            OCRError: If EasyOCR is not installed or loading fails
        """
        if self._reader is not None:
            logger.debug("EasyOCR model already loaded")
            return

        logger.debug(f"Loading EasyOCR model (languages={self.lang_list}, gpu={self.gpu})...")
        try:
            import easyocr
            self._reader = easyocr.Reader(self.lang_list, gpu=self.gpu, verbose=False)
        except ImportError as e:
            raise OCRError(
                "EasyOCR not installed. Install with: pip install easyocr",
                engine=self.name
            ) from e
        except Exception as e:
            raise OCRError(f"Failed to load EasyOCR model: {e}", engine=self.name) from e
        logger.debug("EasyOCR model loaded successfully")

    def unload(self) -> None:
        """Unload the reader and free memory."""
        if self._reader is not None:
            del self._reader
            self._reader = None
            gc.collect()
            logger.debug("EasyOCR model unloaded")

    def recognize(self, raster: RasterImage) -> OCRResult:
        """Detect text boxes in ``raster``."""
        if self._reader is None:
            self.load()

        start = time.perf_counter()
        try:
            # readtext returns list of (bbox, text, confidence)
            results = self._reader.readtext(raster.rgb())
        except Exception as e:
            raise OCRError(f"EasyOCR detection failed: {e}", engine=self.name) from e

        words = [polygon_to_box(bbox) for bbox, text, _conf in results if str(text).strip()]
        elapsed = (time.perf_counter() - start) * 1000
        logger.debug(f"EasyOCR found {len(words)} boxes in {elapsed:.0f}ms")
        return OCRResult(words=words, processing_time_ms=elapsed)
