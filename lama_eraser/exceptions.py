"""Custom exceptions for the LaMa eraser."""

from typing import Optional


class LamaEraserError(Exception):
    """Base exception for all application errors.

    Attributes:
        message: Human-readable error description
        error_code: Optional error code for programmatic handling
    """

    def __init__(self, message: str, error_code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code

    def __str__(self) -> str:
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message


class ConfigurationError(LamaEraserError):
    """Error in configuration or settings.

    Attributes:
        config_key: The configuration key that caused the error (if applicable)
    """

    def __init__(self, message: str, config_key: Optional[str] = None):
        super().__init__(message, error_code="CONFIG_ERROR")
        self.config_key = config_key


class ImageProcessingError(LamaEraserError):
    """Error reading or writing an image.

    Attributes:
        image_path: Path to the image being processed when error occurred
    """

    def __init__(self, message: str, image_path: Optional[str] = None):
        super().__init__(message, error_code="IMAGE_ERROR")
        self.image_path = image_path

    def __str__(self) -> str:
        if self.image_path:
            return f"{super().__str__()} (image: {self.image_path})"
        return super().__str__()


class OCRError(LamaEraserError):
    """Error during OCR/text detection.

    The mask builder absorbs this error and falls back to the rectangle mask.
    """

    def __init__(self, message: str, engine: Optional[str] = None):
        super().__init__(message, error_code="OCR_ERROR")
        self.engine = engine


class ModelLoadError(LamaEraserError):
    """Error loading an inference model.

    Attributes:
        model_source: Path or description of the model that failed to load
    """

    def __init__(self, message: str, model_source: Optional[str] = None):
        super().__init__(message, error_code="MODEL_ERROR")
        self.model_source = model_source


class ModelNotReadyError(LamaEraserError):
    """Raised when inference is requested before a model is bound."""

    def __init__(self, message: str = "Model not initialized. Load an .onnx model first."):
        super().__init__(message, error_code="MODEL_NOT_READY")


class InferenceError(LamaEraserError):
    """Error raised by the inference session for a single image."""

    def __init__(self, message: str, image_name: Optional[str] = None):
        super().__init__(message, error_code="INFERENCE_ERROR")
        self.image_name = image_name


class GeometryError(LamaEraserError):
    """Degenerate geometry: zero-area raster or non-positive target size."""

    def __init__(self, message: str):
        super().__init__(message, error_code="GEOMETRY_ERROR")


class ValidationError(LamaEraserError):
    """Error validating inputs or parameters.

    Attributes:
        field: The field that failed validation (if applicable)
    """

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, error_code="VALIDATION_ERROR")
        self.field = field
