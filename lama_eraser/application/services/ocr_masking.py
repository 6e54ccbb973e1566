"""OCR-driven mask construction with rectangle fallback."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ...config import (
    DEFAULT_DILATE_PX,
    DEFAULT_OCR_ZONE,
    OCR_MAX_LONG_EDGE,
    UPPER_RIGHT_FRACTION,
    RectFraction,
    Zone,
)
from ...domain.entities.raster import Mask, RasterImage
from ...domain.services.mask_builder import (
    build_rectangle_mask,
    downsample_for_ocr,
    mask_from_words,
    words_in_zone,
)
from ...exceptions import ValidationError
from ..ports.event_publisher import EventPublisher, ProcessingEvent, Severity, SimpleEventPublisher
from ..ports.ocr_engine import OCREngine

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class OCRMaskOutcome:
    """Mask plus how it was obtained."""
    mask: Mask
    words_detected: int = 0
    words_kept: int = 0
    fell_back: bool = False
    reason: str | None = None


class OCRMaskBuilder:
    """Build a hole mask from OCR word boxes inside a corner zone.

    OCR failures and empty matches degrade to the rectangle mask; they are
    reported through the event publisher and never raised.
    """

    def __init__(
        self,
        ocr: OCREngine | None,
        zone: Zone = DEFAULT_OCR_ZONE,
        dilate_px: int = DEFAULT_DILATE_PX,
        fraction: RectFraction = UPPER_RIGHT_FRACTION,
        max_long_edge: int = OCR_MAX_LONG_EDGE,
        events: EventPublisher | None = None
    ):
        if dilate_px < 0:
            raise ValidationError(f"dilate_px must be >= 0, got {dilate_px}", field="dilate_px")
        self._ocr = ocr
        self._zone = zone
        self._dilate_px = dilate_px
        self._fraction = fraction
        self._max_long_edge = max_long_edge
        self._events = events or SimpleEventPublisher()

    def _fallback(self, source: RasterImage, reason: str, detected: int = 0) -> OCRMaskOutcome:
        self._events.publish(ProcessingEvent(
            stage="ocr_mask",
            message=f"{reason}; falling back to fixed mask",
            severity=Severity.WARNING,
            image_name=source.name,
            fields={"words_detected": detected},
        ))
        return OCRMaskOutcome(
            mask=build_rectangle_mask(source, self._fraction),
            words_detected=detected,
            fell_back=True,
            reason=reason,
        )

    def build(self, source: RasterImage) -> OCRMaskOutcome:
        """Detect words, keep those centred in the zone and rasterize them.

        Args:
            source: Full-resolution image

        Returns:
            Outcome whose mask matches the source dimensions
        """
        if self._ocr is None:
            return self._fallback(source, "No OCR engine configured")

        small = downsample_for_ocr(source, self._max_long_edge)
        logger.debug(
            f"OCR input {small.raster.width}x{small.raster.height} (scale {small.scale:.4f})"
        )

        try:
            result = self._ocr.recognize(small.raster)
        except Exception as e:
            logger.warning(f"OCR mask generation failed: {e}")
            return self._fallback(source, f"OCR failed: {e}")

        kept = words_in_zone(result.words, small.raster.width, small.raster.height, self._zone)
        if not kept:
            return self._fallback(
                source, "OCR found no words in the zone", detected=result.word_count
            )

        mask = mask_from_words(
            kept,
            source.width,
            source.height,
            inv_scale=small.inv_scale,
            dilate_px=self._dilate_px,
            name=source.name,
        )
        self._events.publish(ProcessingEvent(
            stage="ocr_mask",
            message=f"Masked {len(kept)} of {result.word_count} words",
            image_name=source.name,
            fields={"words_detected": result.word_count, "words_kept": len(kept)},
        ))
        return OCRMaskOutcome(
            mask=mask,
            words_detected=result.word_count,
            words_kept=len(kept),
        )

    def __call__(self, source: RasterImage) -> Mask:
        return self.build(source).mask
