"""Raster <-> tensor conversion for LaMa-style models.

Images are fed as NCHW float32 in [-1, 1]; masks as NCHW float32 with 1 for
holes and 0 for pixels to keep. Model output is read back from [-1, 1].
"""

from __future__ import annotations

import numpy as np

from ...exceptions import ValidationError
from ..entities.raster import RasterImage
from ..value_objects.tensor import Tensor


def _require_square(raster: RasterImage) -> int:
    if raster.width != raster.height or raster.is_empty:
        raise ValidationError(
            f"Expected a non-empty square raster, got {raster.width}x{raster.height}",
            field="raster"
        )
    return raster.width


def encode_image(raster: RasterImage, assume_bgr: bool = False) -> Tensor:
    """Encode an RGBA square raster as a ``[1, 3, T, T]`` tensor.

    Each sample is divided by 255, red and blue are swapped when
    ``assume_bgr`` is set, then mapped to [-1, 1] via ``v * 2 - 1``.
    Alpha is ignored.
    """
    size = _require_square(raster)
    rgb = raster.pixels[:, :, :3].astype(np.float32) / np.float32(255.0)
    if assume_bgr:
        rgb = rgb[:, :, ::-1]
    rgb = rgb * np.float32(2.0) - np.float32(1.0)
    # HWC -> CHW; plane c holds offset c*T*T + y*T + x
    chw = np.ascontiguousarray(np.transpose(rgb, (2, 0, 1)))
    return Tensor(shape=(1, 3, size, size), data=chw)


def encode_mask(raster: RasterImage) -> Tensor:
    """Encode a mask raster as a ``[1, 1, T, T]`` tensor of 0.0 / 1.0."""
    size = _require_square(raster)
    hole = raster.nonzero().astype(np.float32)
    return Tensor(shape=(1, 1, size, size), data=hole)


def decode_output(tensor: Tensor) -> RasterImage:
    """Decode a ``[1, 3, H, W]`` (or ``[3, H, W]``) tensor into an opaque raster.

    Values map [-1, 1] -> [0, 1] via ``(v + 1) * 0.5``, are clamped, scaled to
    [0, 255] and truncated. Alpha is forced to 255.
    """
    data = tensor.data
    if data.ndim == 4:
        if data.shape[0] != 1:
            raise ValidationError(f"Expected batch size 1, got {data.shape[0]}", field="shape")
        data = data[0]
    if data.ndim != 3 or data.shape[0] < 3:
        raise ValidationError(
            f"Expected a [1, 3, H, W] output tensor, got {tensor.shape}",
            field="shape"
        )

    planes = np.nan_to_num(data[:3].astype(np.float64), nan=-1.0, posinf=1.0, neginf=-1.0)
    unit = np.clip((planes + 1.0) * 0.5, 0.0, 1.0)
    samples = (unit * 255.0).astype(np.uint8)  # truncation

    height, width = samples.shape[1:]
    out = np.empty((height, width, 4), dtype=np.uint8)
    out[:, :, :3] = np.transpose(samples, (1, 2, 0))
    out[:, :, 3] = 255
    return RasterImage(out)
