"""OCR Engine port - interface for word detection."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from ...domain.entities.raster import RasterImage
from ...domain.value_objects.geometry import WordBox


@dataclass(frozen=True, slots=True)
class OCRResult:
    """Words found in one raster, boxes in that raster's pixel coordinates."""
    words: list[WordBox] = field(default_factory=list)
    processing_time_ms: float = 0.0

    @property
    def word_count(self) -> int:
        return len(self.words)

    @property
    def is_empty(self) -> bool:
        return len(self.words) == 0


@runtime_checkable
class OCREngine(Protocol):
    """Port for OCR word detection engines.

    Implementations: Tesseract, EasyOCR.
    """

    @property
    def name(self) -> str:
        """Engine name."""
        ...

    @property
    def is_available(self) -> bool:
        """Check if engine dependencies are installed."""
        ...

    def load(self) -> None:
        """Load model into memory."""
        ...

    def unload(self) -> None:
        """Unload model and free memory."""
        ...

    def recognize(self, raster: RasterImage) -> OCRResult:
        """Detect words in ``raster``.

        Args:
            raster: Image to process

        Returns:
            Word boxes in ``raster`` pixel coordinates

        Raises:
            OCRError: If the engine is unavailable or detection fails
        """
        ...
