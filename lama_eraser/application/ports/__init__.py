"""Ports - interfaces for external dependencies (Dependency Inversion)."""

from .ocr_engine import OCREngine, OCRResult
from .inference_session import InferenceSession, InputMetadata, LoadedModel
from .event_publisher import (
    EventPublisher,
    LoggingEventSubscriber,
    ProcessingEvent,
    Severity,
    SimpleEventPublisher,
)

__all__ = [
    'OCREngine',
    'OCRResult',
    'InferenceSession',
    'InputMetadata',
    'LoadedModel',
    'EventPublisher',
    'LoggingEventSubscriber',
    'ProcessingEvent',
    'Severity',
    'SimpleEventPublisher',
]
