"""Inference session port - interface for the inpainting network runtime."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Protocol, runtime_checkable

from ...domain.value_objects.tensor import Dimension, ModelIOBinding, ModelMetadata, Tensor


@dataclass(frozen=True, slots=True)
class InputMetadata:
    """Declared dimensions of one model input."""
    dimensions: tuple[Dimension, ...]


@runtime_checkable
class InferenceSession(Protocol):
    """Port for a loaded inference model.

    Implementations: onnxruntime.
    """

    @property
    def input_names(self) -> list[str]:
        """Declared input names, in model order."""
        ...

    @property
    def output_names(self) -> list[str]:
        """Declared output names, in model order."""
        ...

    @property
    def input_metadata(self) -> Mapping[str, InputMetadata]:
        """Dimensions per input name."""
        ...

    def run(self, feeds: Mapping[str, Tensor]) -> dict[str, Tensor]:
        """Run the model.

        Args:
            feeds: Input tensors keyed by input name

        Returns:
            Output tensors keyed by output name
        """
        ...


@dataclass(frozen=True, slots=True)
class LoadedModel:
    """A session together with the I/O binding computed for it.

    Rebuilt wholesale whenever a new model is loaded.
    """
    session: InferenceSession
    binding: ModelIOBinding
    source: str | None = None

    @property
    def metadata(self) -> ModelMetadata:
        return ModelMetadata.from_session(self.session)
