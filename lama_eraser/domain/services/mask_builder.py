"""Hole-mask construction: corner rectangle, word boxes and dilation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

import cv2
import numpy as np
import numpy.typing as npt

from ...config import DEFAULT_OCR_ZONE, OCR_MAX_LONG_EDGE, UPPER_RIGHT_FRACTION, RectFraction, Zone
from ...exceptions import GeometryError, ValidationError
from ..entities.raster import Mask, RasterImage
from ..value_objects.geometry import PixelRect, WordBox, round_half_up


@dataclass(frozen=True, slots=True)
class Downsampled:
    """Raster reduced for OCR plus the factor that produced it."""
    raster: RasterImage
    scale: float

    @property
    def inv_scale(self) -> float:
        return 1.0 if self.scale == 0 else 1.0 / self.scale


def rectangle_rect(width: int, height: int, fraction: RectFraction = UPPER_RIGHT_FRACTION) -> PixelRect:
    """Rectangle anchored to the top-right corner of a ``width`` x ``height`` image."""
    rw = round_half_up(width * fraction.w)
    rh = round_half_up(height * fraction.h)
    return PixelRect(x=width - rw, y=0, width=rw, height=rh)


def build_rectangle_mask(
    source: RasterImage,
    fraction: RectFraction = UPPER_RIGHT_FRACTION
) -> Mask:
    """Solid white rectangle in the top-right corner, zero elsewhere.

    Args:
        source: Raster whose size the mask matches
        fraction: Rectangle width/height as fractions of the source size

    Returns:
        Mask with the same dimensions as ``source``
    """
    if source.is_empty:
        raise GeometryError(f"Source raster has zero area ({source.width}x{source.height})")
    if not (0.0 < fraction.w <= 1.0 and 0.0 < fraction.h <= 1.0):
        raise ValidationError(f"Rectangle fractions must be in (0, 1], got {fraction}", field="fraction")

    hole = np.zeros((source.height, source.width), dtype=bool)
    rect = rectangle_rect(source.width, source.height, fraction)
    hole[rect.y:rect.bottom, rect.x:rect.right] = True
    return RasterImage.from_mask(hole, name=source.name)


def downsample_for_ocr(source: RasterImage, max_long_edge: int = OCR_MAX_LONG_EDGE) -> Downsampled:
    """Shrink ``source`` so its long edge is at most ``max_long_edge``.

    Never upscales. Downsampled sides are rounded and kept at least 1 px.
    """
    if source.is_empty:
        raise GeometryError(f"Source raster has zero area ({source.width}x{source.height})")
    if max_long_edge <= 0:
        raise ValidationError(f"max_long_edge must be positive, got {max_long_edge}", field="max_long_edge")

    long_edge = max(source.width, source.height)
    scale = max_long_edge / long_edge if long_edge > max_long_edge else 1.0
    if scale == 1.0:
        return Downsampled(raster=source, scale=1.0)

    width = max(1, round_half_up(source.width * scale))
    height = max(1, round_half_up(source.height * scale))
    small = cv2.resize(
        np.ascontiguousarray(source.pixels), (width, height), interpolation=cv2.INTER_AREA
    )
    return Downsampled(raster=RasterImage(small, name=source.name), scale=scale)


def words_in_zone(
    words: Iterable[WordBox],
    width: int,
    height: int,
    zone: Zone = DEFAULT_OCR_ZONE
) -> list[WordBox]:
    """Keep words whose normalized box centre lies inside ``zone``.

    ``width`` and ``height`` are the dimensions of the image the boxes were
    detected in.
    """
    kept = []
    for word in words:
        cx, cy = word.normalized_center(width, height)
        if zone.contains(cx, cy):
            kept.append(word)
    return kept


def rasterize_word_boxes(
    words: Iterable[WordBox],
    width: int,
    height: int,
    inv_scale: float = 1.0
) -> npt.NDArray[np.bool_]:
    """Fill each word box, rescaled by ``inv_scale``, into a boolean hole map."""
    hole = np.zeros((height, width), dtype=bool)
    for word in words:
        rect = word.rescaled(inv_scale).clip(width, height)
        if rect.area:
            hole[rect.y:rect.bottom, rect.x:rect.right] = True
    return hole


def dilate_hole(hole: npt.NDArray[np.bool_], radius: int) -> npt.NDArray[np.bool_]:
    """Square-neighbourhood dilation of a boolean hole map.

    Every offset of the ``(2r+1) x (2r+1)`` window is visited, so the cost is
    O(width * height * radius^2).
    """
    if radius < 0:
        raise ValidationError(f"Dilation radius must be >= 0, got {radius}", field="radius")
    if radius == 0:
        return hole.copy()

    height, width = hole.shape
    out = np.zeros_like(hole)
    for dy in range(-radius, radius + 1):
        # Destination rows whose neighbour at dy exists
        dst_y0, dst_y1 = max(0, -dy), min(height, height - dy)
        if dst_y0 >= dst_y1:
            continue
        for dx in range(-radius, radius + 1):
            dst_x0, dst_x1 = max(0, -dx), min(width, width - dx)
            if dst_x0 >= dst_x1:
                continue
            out[dst_y0:dst_y1, dst_x0:dst_x1] |= hole[
                dst_y0 + dy:dst_y1 + dy, dst_x0 + dx:dst_x1 + dx
            ]
    return out


def dilate_mask(mask: Mask, radius: int) -> Mask:
    """Dilate ``mask`` by ``radius`` px; radius 0 returns the mask unchanged."""
    if radius < 0:
        raise ValidationError(f"Dilation radius must be >= 0, got {radius}", field="radius")
    if radius == 0:
        return mask
    return RasterImage.from_mask(dilate_hole(mask.nonzero(), radius), name=mask.name)


def mask_from_words(
    words: Iterable[WordBox],
    width: int,
    height: int,
    inv_scale: float = 1.0,
    dilate_px: int = 0,
    name: str | None = None
) -> Mask:
    """Rasterize rescaled word boxes and dilate them into a source-sized mask."""
    hole = rasterize_word_boxes(words, width, height, inv_scale)
    if dilate_px > 0:
        hole = dilate_hole(hole, dilate_px)
    return RasterImage.from_mask(hole, name=name)
