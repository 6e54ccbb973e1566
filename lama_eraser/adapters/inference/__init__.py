"""Inference adapters - implementations of InferenceSession port."""

from .onnx_session import OnnxInferenceSession, select_execution_providers

__all__ = ['OnnxInferenceSession', 'select_execution_providers']
