"""Geometry value objects."""

from __future__ import annotations

import math
from dataclasses import dataclass


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from negative infinity.

    Python's ``round`` rounds halves to even, which shifts pasted sizes by a
    pixel compared to canvas-based letterboxing.
    """
    return int(math.floor(value + 0.5))


@dataclass(frozen=True, slots=True)
class WordBox:
    """OCR word bounding box in pixel coordinates of the OCR input."""
    x0: float
    y0: float
    x1: float
    y1: float

    @property
    def width(self) -> float:
        return self.x1 - self.x0

    @property
    def height(self) -> float:
        return self.y1 - self.y0

    @property
    def center(self) -> tuple[float, float]:
        return ((self.x0 + self.x1) * 0.5, (self.y0 + self.y1) * 0.5)

    def normalized_center(self, width: int, height: int) -> tuple[float, float]:
        """Centre divided by the dimensions of the image the box lives in."""
        cx, cy = self.center
        return (cx / width, cy / height)

    def rescaled(self, inv_scale: float) -> PixelRect:
        """Map the box to a pixel rectangle in a larger image.

        The origin is floored and the extent ceiled so the rescaled
        rectangle never shrinks below the word it covers.
        """
        return PixelRect(
            x=max(0, math.floor(self.x0 * inv_scale)),
            y=max(0, math.floor(self.y0 * inv_scale)),
            width=max(1, math.ceil(self.width * inv_scale)),
            height=max(1, math.ceil(self.height * inv_scale)),
        )


@dataclass(frozen=True, slots=True)
class PixelRect:
    """Integer rectangle: origin plus extent."""
    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    def clip(self, width: int, height: int) -> PixelRect:
        """Intersect with the ``width`` x ``height`` image bounds."""
        x0 = min(max(self.x, 0), width)
        y0 = min(max(self.y, 0), height)
        x1 = min(max(self.right, 0), width)
        y1 = min(max(self.bottom, 0), height)
        return PixelRect(x0, y0, x1 - x0, y1 - y0)

    @property
    def area(self) -> int:
        return self.width * self.height


@dataclass(frozen=True, slots=True)
class LetterboxMapping:
    """Uniform scale-and-pad mapping from a source raster to a square canvas.

    ``invert`` in ``domain.services.letterbox`` is the inverse; this value
    only records the geometry.
    """
    source_width: int
    source_height: int
    target_size: int
    scale: float
    pasted_width: int
    pasted_height: int
    offset_x: int
    offset_y: int

    @property
    def pasted_rect(self) -> PixelRect:
        return PixelRect(self.offset_x, self.offset_y, self.pasted_width, self.pasted_height)

    @classmethod
    def compute(cls, source_width: int, source_height: int, target_size: int) -> LetterboxMapping:
        """Compute the mapping; callers validate the arguments first."""
        scale = min(target_size / source_width, target_size / source_height)
        pasted_w = max(1, round_half_up(source_width * scale))
        pasted_h = max(1, round_half_up(source_height * scale))
        return cls(
            source_width=source_width,
            source_height=source_height,
            target_size=target_size,
            scale=scale,
            pasted_width=pasted_w,
            pasted_height=pasted_h,
            offset_x=(target_size - pasted_w) // 2,
            offset_y=(target_size - pasted_h) // 2,
        )
