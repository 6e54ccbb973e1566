"""onnxruntime adapter - implements InferenceSession port."""

from __future__ import annotations

import logging
from typing import Iterable, Mapping

import numpy as np

from ...application.ports.inference_session import InferenceSession, InputMetadata
from ...config import FALLBACK_PROVIDER, PROVIDER_NAMES, ExecutionProvider
from ...domain.value_objects.tensor import Dimension, Tensor
from ...exceptions import ConfigurationError, ModelLoadError

logger = logging.getLogger(__name__)


def _provider_id(provider: ExecutionProvider | str) -> str:
    """Map a short name ('cuda') or full id ('CUDAExecutionProvider') to the full id."""
    if isinstance(provider, ExecutionProvider):
        return PROVIDER_NAMES[provider]
    try:
        return PROVIDER_NAMES[ExecutionProvider(provider.lower())]
    except ValueError:
        if provider.endswith("ExecutionProvider"):
            return provider
        raise ConfigurationError(
            f"Unknown execution provider: {provider}", config_key="execution_providers"
        ) from None


def available_providers() -> list[str]:
    """Providers compiled into the installed onnxruntime build."""
    import onnxruntime as ort
    return list(ort.get_available_providers())


def select_execution_providers(
    requested: Iterable[ExecutionProvider | str],
    available: Iterable[str] | None = None
) -> list[str]:
    """Keep requested providers the runtime can use, in preference order.

    Unusable providers are dropped silently. When none survive, the CPU
    provider, which every build ships, is returned.

    Args:
        requested: Preference list of short names or provider ids
        available: Provider ids of the runtime (queried when None)

    Returns:
        Non-empty list of provider ids
    """
    usable = set(available_providers() if available is None else available)
    selected: list[str] = []
    for provider in requested:
        pid = _provider_id(provider)
        if pid in usable and pid not in selected:
            selected.append(pid)
        elif pid not in usable:
            logger.debug(f"Execution provider {pid} unavailable, skipping")
    return selected or [FALLBACK_PROVIDER]


def _dimension(value: object) -> Dimension:
    """Normalize an onnxruntime shape entry: ints stay, symbols stay, others become None."""
    if isinstance(value, (int, np.integer)) and not isinstance(value, bool):
        return int(value)
    if isinstance(value, str):
        return value
    return None


class OnnxInferenceSession(InferenceSession):
    """Adapter over ``onnxruntime.InferenceSession``."""

    def __init__(self, session: object, providers: list[str] | None = None):
        self._session = session
        self._providers = providers or []
        self._input_names = [i.name for i in session.get_inputs()]
        self._output_names = [o.name for o in session.get_outputs()]
        self._input_metadata = {
            i.name: InputMetadata(dimensions=tuple(_dimension(d) for d in (i.shape or ())))
            for i in session.get_inputs()
        }

    @classmethod
    def create(
        cls,
        model_bytes: bytes,
        execution_providers: Iterable[ExecutionProvider | str] = (ExecutionProvider.CPU,),
        source: str | None = None
    ) -> OnnxInferenceSession:
        """Build a session from serialized model bytes.

        Args:
            model_bytes: Contents of an .onnx file
            execution_providers: Preference list, filtered by availability
            source: Description used in error messages

        Raises:
            ModelLoadError: If onnxruntime is missing or the bytes are not a valid model
        """
        try:
            import onnxruntime as ort
        except ImportError as e:
            raise ModelLoadError(
                "onnxruntime not installed. Install with: pip install onnxruntime",
                model_source=source
            ) from e

        providers = select_execution_providers(execution_providers, ort.get_available_providers())
        logger.info(f"Creating session; providers={providers}")

        so = ort.SessionOptions()
        so.graph_optimization_level = ort.GraphOptimizationLevel.ORT_ENABLE_ALL
        try:
            session = ort.InferenceSession(bytes(model_bytes), sess_options=so, providers=providers)
        except Exception as e:
            raise ModelLoadError(f"Failed to load ONNX model: {e}", model_source=source) from e

        return cls(session, providers=providers)

    @property
    def providers(self) -> list[str]:
        return list(self._providers)

    @property
    def input_names(self) -> list[str]:
        return list(self._input_names)

    @property
    def output_names(self) -> list[str]:
        return list(self._output_names)

    @property
    def input_metadata(self) -> Mapping[str, InputMetadata]:
        return dict(self._input_metadata)

    def run(self, feeds: Mapping[str, Tensor]) -> dict[str, Tensor]:
        """Run the model on ``feeds`` and wrap every output as a Tensor."""
        arrays = {name: np.ascontiguousarray(t.data, dtype=np.float32) for name, t in feeds.items()}
        outputs = self._session.run(self._output_names, arrays)
        return {
            name: Tensor.from_array(value)
            for name, value in zip(self._output_names, outputs)
        }
