"""Domain services - pure image and tensor transforms."""

from .io_binding import bind_model_io
from .letterbox import invert, letterbox
from .mask_builder import build_rectangle_mask, dilate_mask, mask_from_words
from .tensor_codec import decode_output, encode_image, encode_mask

__all__ = [
    'bind_model_io',
    'letterbox',
    'invert',
    'build_rectangle_mask',
    'dilate_mask',
    'mask_from_words',
    'encode_image',
    'encode_mask',
    'decode_output',
]
