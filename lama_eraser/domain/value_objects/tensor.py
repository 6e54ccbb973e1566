"""Tensor and model I/O value objects."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Union

import numpy as np
import numpy.typing as npt

from ...exceptions import ValidationError

# A declared dimension: a positive int when static, a symbol or None when dynamic
Dimension = Union[int, str, None]


@dataclass(frozen=True, slots=True)
class Tensor:
    """Dense float32 tensor.

    ``data`` is stored with ``shape``; ``flat`` exposes the row-major buffer.
    """
    shape: tuple[int, ...]
    data: npt.NDArray[np.float32]
    dtype: str = "float32"

    def __post_init__(self) -> None:
        shape = tuple(int(d) for d in self.shape)
        if not shape or any(d <= 0 for d in shape):
            raise ValidationError(f"Tensor shape must be positive, got {shape}", field="shape")
        arr = np.asarray(self.data, dtype=np.float32)
        if arr.size != math.prod(shape):
            raise ValidationError(
                f"Buffer length {arr.size} does not match shape {shape}",
                field="data"
            )
        object.__setattr__(self, "shape", shape)
        object.__setattr__(self, "data", arr.reshape(shape))

    @property
    def flat(self) -> npt.NDArray[np.float32]:
        return self.data.reshape(-1)

    @classmethod
    def zeros(cls, shape: tuple[int, ...]) -> Tensor:
        return cls(shape=shape, data=np.zeros(shape, dtype=np.float32))

    @classmethod
    def from_array(cls, data: npt.ArrayLike) -> Tensor:
        arr = np.asarray(data, dtype=np.float32)
        return cls(shape=arr.shape, data=arr)


@dataclass(frozen=True, slots=True)
class TensorMetadata:
    """Declared name and dimensions of a model input."""
    name: str
    dimensions: tuple[Dimension, ...] = ()

    def dim(self, index: int) -> Dimension:
        """Dimension at ``index`` or None when the rank is too small."""
        if 0 <= index < len(self.dimensions):
            return self.dimensions[index]
        return None

    def static_dim(self, index: int) -> int | None:
        """Dimension at ``index`` when it is a known positive integer."""
        value = self.dim(index)
        if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
            return None
        return int(value) if value > 0 else None

    @property
    def channels(self) -> int | None:
        """Channel axis under the NCHW convention."""
        return self.static_dim(1)


@dataclass(frozen=True, slots=True)
class ModelMetadata:
    """Declared inputs and outputs of an inference model, in model order."""
    inputs: tuple[TensorMetadata, ...] = ()
    output_names: tuple[str, ...] = ()

    @property
    def input_names(self) -> tuple[str, ...]:
        return tuple(t.name for t in self.inputs)

    def input(self, name: str) -> TensorMetadata | None:
        for t in self.inputs:
            if t.name == name:
                return t
        return None

    @classmethod
    def from_session(cls, session: object) -> ModelMetadata:
        """Snapshot the metadata of an ``InferenceSession`` port."""
        names = list(session.input_names)
        declared = session.input_metadata
        inputs = []
        for name in names:
            meta = declared.get(name)
            dims = tuple(meta.dimensions) if meta is not None else ()
            inputs.append(TensorMetadata(name=name, dimensions=dims))
        return cls(inputs=tuple(inputs), output_names=tuple(session.output_names))


@dataclass(frozen=True, slots=True)
class ModelIOBinding:
    """Which model tensors carry the image, the mask and the result."""
    image_input_name: str
    mask_input_name: str
    output_name: str | None
    target_size: int
    assume_bgr: bool = False

    @property
    def image_shape(self) -> tuple[int, int, int, int]:
        return (1, 3, self.target_size, self.target_size)

    @property
    def mask_shape(self) -> tuple[int, int, int, int]:
        return (1, 1, self.target_size, self.target_size)
