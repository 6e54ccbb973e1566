"""Raster entity - immutable RGBA pixel buffer."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import numpy as np
import numpy.typing as npt

from ...exceptions import ImageProcessingError, ValidationError

PixelArray = npt.NDArray[np.uint8]  # Shape (H, W, 4), RGBA


@dataclass(frozen=True, slots=True)
class RasterImage:
    """8-bit RGBA raster in row-major order.

    The pixel array is made read-only on construction, so a raster can be
    shared between pipeline stages without defensive copies.
    """
    pixels: PixelArray
    name: str | None = None

    def __post_init__(self) -> None:
        arr = np.asarray(self.pixels)
        if arr.dtype != np.uint8:
            raise ValidationError(f"Raster must be uint8, got {arr.dtype}", field="pixels")
        if arr.ndim != 3 or arr.shape[2] != 4:
            raise ValidationError(
                f"Raster must have shape (H, W, 4), got {arr.shape}",
                field="pixels"
            )
        if arr.flags.writeable or arr is not self.pixels:
            arr = arr.copy()
            arr.flags.writeable = False
        object.__setattr__(self, "pixels", arr)

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def size(self) -> tuple[int, int]:
        return (self.width, self.height)

    @property
    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0

    def rgb(self) -> npt.NDArray[np.uint8]:
        """Return a writable (H, W, 3) RGB copy."""
        return self.pixels[:, :, :3].copy()

    def nonzero(self) -> npt.NDArray[np.bool_]:
        """Per-pixel flag: any of the four samples is non-zero."""
        return np.any(self.pixels != 0, axis=2)

    @classmethod
    def blank(cls, width: int, height: int, name: str | None = None) -> RasterImage:
        """Fully transparent raster (all samples zero)."""
        return cls(np.zeros((height, width, 4), dtype=np.uint8), name=name)

    @classmethod
    def from_array(cls, data: npt.ArrayLike, name: str | None = None) -> RasterImage:
        """Create from a grayscale, RGB or RGBA uint8 array.

        Missing alpha is filled with 255.
        """
        arr = np.asarray(data)
        if arr.dtype != np.uint8:
            raise ValidationError(f"Expected uint8 array, got {arr.dtype}", field="data")
        if arr.ndim == 2:
            arr = np.stack([arr, arr, arr], axis=2)
        if arr.ndim != 3 or arr.shape[2] not in (3, 4):
            raise ValidationError(f"Unsupported array shape {arr.shape}", field="data")
        if arr.shape[2] == 3:
            alpha = np.full(arr.shape[:2] + (1,), 255, dtype=np.uint8)
            arr = np.concatenate([arr, alpha], axis=2)
        return cls(arr, name=name)

    @classmethod
    def from_mask(cls, hole: npt.ArrayLike, name: str | None = None) -> RasterImage:
        """White opaque where ``hole`` is true, all zero elsewhere."""
        flags = np.asarray(hole, dtype=bool)
        arr = np.zeros(flags.shape + (4,), dtype=np.uint8)
        arr[flags] = 255
        return cls(arr, name=name)

    @classmethod
    def from_file(cls, path: Path | str) -> RasterImage:
        """Decode an image file into RGBA."""
        path = Path(path)
        # Lazy import - domain doesn't depend on PIL at import time
        from PIL import Image as PILImage, UnidentifiedImageError

        try:
            with PILImage.open(path) as img:
                data = np.array(img.convert("RGBA"))
        except FileNotFoundError as e:
            raise ImageProcessingError("Image file not found", image_path=str(path)) from e
        except (UnidentifiedImageError, OSError) as e:
            raise ImageProcessingError(f"Could not decode image: {e}", image_path=str(path)) from e
        return cls(data, name=path.name)

    def to_pil(self):
        """Convert to a Pillow RGBA image."""
        from PIL import Image as PILImage
        return PILImage.fromarray(np.ascontiguousarray(self.pixels))

    def save(self, path: Path | str) -> None:
        """Encode to ``path``; the format follows the file extension."""
        path = Path(path)
        img = self.to_pil()
        if path.suffix.lower() in ('.jpg', '.jpeg', '.jpe', '.bmp'):
            img = img.convert("RGB")
        try:
            img.save(path)
        except (OSError, ValueError) as e:
            raise ImageProcessingError(f"Could not save image: {e}", image_path=str(path)) from e


# A mask is a raster with binary semantics: non-zero sample => hole
Mask = RasterImage
