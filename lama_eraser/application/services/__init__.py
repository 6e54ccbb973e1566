"""Application services - orchestrate use cases."""

from .batch_processor import BatchItemResult, BatchProcessor, BatchResult
from .inpaint_pipeline import InpaintPipeline, InpaintResult, StageTimings, select_mask_policy
from .ocr_masking import OCRMaskBuilder, OCRMaskOutcome

__all__ = [
    'InpaintPipeline',
    'InpaintResult',
    'StageTimings',
    'select_mask_policy',
    'OCRMaskBuilder',
    'OCRMaskOutcome',
    'BatchProcessor',
    'BatchResult',
    'BatchItemResult',
]
