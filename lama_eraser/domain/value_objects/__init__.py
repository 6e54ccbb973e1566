"""Value objects - immutable data with validation."""

from .config import ProcessingConfig
from .geometry import LetterboxMapping, PixelRect, WordBox, round_half_up
from .tensor import ModelIOBinding, ModelMetadata, Tensor, TensorMetadata

__all__ = [
    'WordBox',
    'PixelRect',
    'LetterboxMapping',
    'round_half_up',
    'Tensor',
    'TensorMetadata',
    'ModelMetadata',
    'ModelIOBinding',
    'ProcessingConfig',
]
