"""OCR adapters - implementations of OCREngine port."""

from .easyocr_adapter import EasyOCRAdapter
from .factory import create_ocr_engine
from .tesseract_adapter import TesseractOCRAdapter

__all__ = ['TesseractOCRAdapter', 'EasyOCRAdapter', 'create_ocr_engine']
