"""Application layer - use cases and orchestration."""

from .services.batch_processor import BatchProcessor
from .services.inpaint_pipeline import InpaintPipeline

__all__ = ['InpaintPipeline', 'BatchProcessor']
