"""Infrastructure - wiring of adapters into application services."""

from .model_loader import load_model

__all__ = ['load_model']
