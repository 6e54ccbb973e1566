"""Configuration value objects with validation."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from ...config import (
    DEFAULT_DILATE_PX,
    DEFAULT_OCR_ZONE,
    DEFAULT_TARGET_SIZE,
    MAX_DILATE_PX,
    OCR_MAX_LONG_EDGE,
    UPPER_RIGHT_FRACTION,
    ExecutionProvider,
    MaskPolicy,
    OCREngineType,
    RectFraction,
    Zone,
)


class ProcessingConfig(BaseModel):
    """Processing configuration with validation."""

    model_config = {"validate_assignment": False, "frozen": True}

    # Model settings
    target_size: int = Field(default=DEFAULT_TARGET_SIZE, ge=1)
    assume_bgr: bool = False
    execution_providers: list[ExecutionProvider] = Field(
        default_factory=lambda: [ExecutionProvider.CPU]
    )

    # Mask policy
    mask_policy: MaskPolicy = MaskPolicy.RECTANGLE
    prompt: str = ""

    # Rectangle mask
    rect_width_fraction: float = Field(default=UPPER_RIGHT_FRACTION.w, gt=0.0, le=1.0)
    rect_height_fraction: float = Field(default=UPPER_RIGHT_FRACTION.h, gt=0.0, le=1.0)

    # OCR mask
    ocr_engine: OCREngineType = OCREngineType.TESSERACT
    ocr_lang: str = "eng"
    ocr_zone: tuple[float, float, float, float] = (
        DEFAULT_OCR_ZONE.x0, DEFAULT_OCR_ZONE.y0, DEFAULT_OCR_ZONE.x1, DEFAULT_OCR_ZONE.y1
    )
    dilate_px: int = Field(default=DEFAULT_DILATE_PX, ge=0, le=MAX_DILATE_PX)
    ocr_max_long_edge: int = Field(default=OCR_MAX_LONG_EDGE, ge=1)

    @field_validator('ocr_zone')
    @classmethod
    def validate_zone(cls, v: tuple[float, float, float, float]) -> tuple[float, float, float, float]:
        """Zone corners must be ordered and normalized."""
        x0, y0, x1, y1 = v
        if not all(0.0 <= c <= 1.0 for c in v):
            raise ValueError(f"ocr_zone values must be within [0, 1], got {v}")
        if x0 > x1 or y0 > y1:
            raise ValueError(f"ocr_zone must satisfy x0 <= x1 and y0 <= y1, got {v}")
        return v

    @field_validator('execution_providers')
    @classmethod
    def dedupe_providers(cls, v: list[ExecutionProvider]) -> list[ExecutionProvider]:
        """Drop repeated providers while keeping preference order."""
        if not v:
            raise ValueError("execution_providers must not be empty")
        seen: list[ExecutionProvider] = []
        for p in v:
            if p not in seen:
                seen.append(p)
        return seen

    @property
    def rect_fraction(self) -> RectFraction:
        return RectFraction(self.rect_width_fraction, self.rect_height_fraction)

    @property
    def zone(self) -> Zone:
        return Zone(*self.ocr_zone)


__all__ = [
    'ProcessingConfig',
]
