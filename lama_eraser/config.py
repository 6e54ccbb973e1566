"""Configuration and constants for the LaMa eraser project."""

from dataclasses import dataclass
from enum import Enum


class MaskPolicy(str, Enum):
    """How the hole mask for an image is produced."""
    RECTANGLE = "rectangle"
    OCR = "ocr"
    AUTO = "auto"  # Decide from the prompt text


class OCREngineType(str, Enum):
    """Supported OCR engines."""
    TESSERACT = "tesseract"
    EASYOCR = "easyocr"


class ExecutionProvider(str, Enum):
    """Execution provider preferences understood by the ONNX adapter."""
    CUDA = "cuda"
    DIRECTML = "directml"
    COREML = "coreml"
    CPU = "cpu"


# Short names -> onnxruntime provider identifiers
PROVIDER_NAMES: dict[ExecutionProvider, str] = {
    ExecutionProvider.CUDA: "CUDAExecutionProvider",
    ExecutionProvider.DIRECTML: "DmlExecutionProvider",
    ExecutionProvider.COREML: "CoreMLExecutionProvider",
    ExecutionProvider.CPU: "CPUExecutionProvider",
}

# Always present in every onnxruntime build
FALLBACK_PROVIDER = "CPUExecutionProvider"


@dataclass(frozen=True)
class RectFraction:
    """Size of the corner rectangle mask as fractions of the image size."""
    w: float = 0.28
    h: float = 0.24


@dataclass(frozen=True)
class Zone:
    """Normalized rectangle used to keep OCR words by their centre."""
    x0: float = 0.60
    y0: float = 0.00
    x1: float = 1.00
    y1: float = 0.40

    def contains(self, x: float, y: float) -> bool:
        """Inclusive containment test in normalized coordinates."""
        return self.x0 <= x <= self.x1 and self.y0 <= y <= self.y1


# Model working resolution when the model declares dynamic spatial dims
DEFAULT_TARGET_SIZE = 512

# Tuned for a corner stamp in the upper right; adjust per collection
UPPER_RIGHT_FRACTION = RectFraction()
DEFAULT_OCR_ZONE = Zone()
DEFAULT_DILATE_PX = 10
MAX_DILATE_PX = 200

# Long edge bound for the image handed to OCR
OCR_MAX_LONG_EDGE = 1600

# Rolling inference estimate used for progress displays
INFER_AVERAGE_SEED_MS = 1200.0
INFER_AVERAGE_DECAY = 0.7
MIN_INFER_ESTIMATE_MS = 300.0

# Prompt patterns that switch the mask policy to OCR
PROMPT_UPPER_RIGHT = r"upper\s*right"
PROMPT_REMOVE_TEXT = r"(remove|erase|clean).*(text|number|digit)"

# Suffix appended to the stem of cleaned output files
OUTPUT_SUFFIX = ".clean.png"

# Formats Pillow can decode in a default install
SUPPORTED_IMAGE_EXTENSIONS: tuple[str, ...] = (
    '.jpg', '.jpeg', '.jpe',
    '.png',
    '.bmp', '.dib',
    '.tiff', '.tif',
    '.webp',
    '.gif',
    '.ppm', '.pgm', '.pbm', '.pnm',
)


# Logging
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"
