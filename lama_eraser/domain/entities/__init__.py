"""Domain entities."""

from .raster import Mask, RasterImage

__all__ = ['RasterImage', 'Mask']
