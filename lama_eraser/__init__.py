"""LaMa Eraser - erase text and watermarks from images with an ONNX inpainting model."""

__version__ = "1.0.0"

from .application.services.batch_processor import BatchProcessor, BatchResult
from .application.services.inpaint_pipeline import InpaintPipeline, InpaintResult
from .config import ExecutionProvider, MaskPolicy, OCREngineType
from .domain.entities.raster import RasterImage
from .domain.value_objects.config import ProcessingConfig
from .exceptions import (
    LamaEraserError,
    ConfigurationError,
    ImageProcessingError,
    OCRError,
    ModelLoadError,
    ModelNotReadyError,
    InferenceError,
    GeometryError,
    ValidationError,
)
from .infrastructure.model_loader import load_model
from .utils.env import setup_logging

__all__ = [
    '__version__',
    'MaskPolicy',
    'OCREngineType',
    'ExecutionProvider',
    'ProcessingConfig',
    'RasterImage',
    'InpaintPipeline',
    'InpaintResult',
    'BatchProcessor',
    'BatchResult',
    'load_model',
    'setup_logging',
    # Exceptions
    'LamaEraserError',
    'ConfigurationError',
    'ImageProcessingError',
    'OCRError',
    'ModelLoadError',
    'ModelNotReadyError',
    'InferenceError',
    'GeometryError',
    'ValidationError',
]
