"""Domain layer - pure image and tensor logic, no session or OCR libraries."""

from .entities.raster import Mask, RasterImage
from .value_objects.config import ProcessingConfig
from .value_objects.geometry import LetterboxMapping, PixelRect, WordBox
from .value_objects.tensor import ModelIOBinding, ModelMetadata, Tensor, TensorMetadata

__all__ = [
    # Entities
    'RasterImage',
    'Mask',
    # Value Objects
    'ProcessingConfig',
    'LetterboxMapping',
    'PixelRect',
    'WordBox',
    'Tensor',
    'TensorMetadata',
    'ModelMetadata',
    'ModelIOBinding',
]
