"""Letterbox transform and its geometric inverse."""

from __future__ import annotations

from dataclasses import dataclass

import cv2
import numpy as np

from ...exceptions import GeometryError
from ..entities.raster import RasterImage
from ..value_objects.geometry import LetterboxMapping

# Opaque black, as drawn behind the pasted image
OPAQUE_BLACK = (0, 0, 0, 255)
# All-zero padding, used for masks so the border stays "keep"
TRANSPARENT = (0, 0, 0, 0)


@dataclass(frozen=True, slots=True)
class LetterboxResult:
    """Square working canvas plus the mapping that produced it."""
    square: RasterImage
    mapping: LetterboxMapping


def _resample(pixels: np.ndarray, width: int, height: int) -> np.ndarray:
    """Bilinear resample of an RGBA array to ``width`` x ``height``."""
    if pixels.shape[1] == width and pixels.shape[0] == height:
        return np.array(pixels, copy=True)
    return cv2.resize(np.ascontiguousarray(pixels), (width, height), interpolation=cv2.INTER_LINEAR)


def letterbox(
    source: RasterImage,
    target_size: int,
    background: tuple[int, int, int, int] = OPAQUE_BLACK
) -> LetterboxResult:
    """Scale ``source`` uniformly into a ``target_size`` square with centred padding.

    Args:
        source: Raster to place on the canvas
        target_size: Side length of the square canvas
        background: RGBA fill outside the pasted region

    Returns:
        The square raster and its mapping

    Raises:
        GeometryError: If the source has zero area or target_size <= 0
    """
    if target_size <= 0:
        raise GeometryError(f"target_size must be positive, got {target_size}")
    if source.is_empty:
        raise GeometryError(f"Source raster has zero area ({source.width}x{source.height})")

    mapping = LetterboxMapping.compute(source.width, source.height, target_size)

    canvas = np.empty((target_size, target_size, 4), dtype=np.uint8)
    canvas[:, :] = background

    pasted = _resample(source.pixels, mapping.pasted_width, mapping.pasted_height)
    y, x = mapping.offset_y, mapping.offset_x
    canvas[y:y + mapping.pasted_height, x:x + mapping.pasted_width] = pasted

    return LetterboxResult(square=RasterImage(canvas, name=source.name), mapping=mapping)


def invert(mapping: LetterboxMapping, square: RasterImage) -> RasterImage:
    """Crop the pasted rectangle out of ``square`` and resample to source size.

    Same geometry, not same pixels: the round trip resamples twice.

    Raises:
        GeometryError: If ``square`` is not ``target_size`` on both sides
    """
    t = mapping.target_size
    if square.width != t or square.height != t:
        raise GeometryError(
            f"Expected a {t}x{t} raster, got {square.width}x{square.height}"
        )
    rect = mapping.pasted_rect
    crop = square.pixels[rect.y:rect.bottom, rect.x:rect.right]
    restored = _resample(crop, mapping.source_width, mapping.source_height)
    return RasterImage(restored, name=square.name)
