"""Fakes for the inference session and OCR ports."""

from __future__ import annotations

import numpy as np

from ..application.ports.inference_session import InputMetadata, LoadedModel
from ..application.ports.ocr_engine import OCRResult
from ..domain.entities.raster import RasterImage
from ..domain.services.io_binding import bind_model_io
from ..domain.value_objects.tensor import ModelMetadata, Tensor


class FakeSession:
    """In-memory session that echoes the image feed back as its output."""

    def __init__(
        self,
        inputs: dict[str, tuple] | None = None,
        outputs: tuple[str, ...] = ("output",),
        fail_on: set[int] | None = None,
        output_size: int | None = None
    ):
        self._inputs = inputs if inputs is not None else {
            "image": (1, 3, 64, 64),
            "mask": (1, 1, 64, 64),
        }
        self._outputs = outputs
        self._fail_on = fail_on or set()
        self._output_size = output_size
        self.calls: list[dict[str, Tensor]] = []

    @property
    def input_names(self) -> list[str]:
        return list(self._inputs)

    @property
    def output_names(self) -> list[str]:
        return list(self._outputs)

    @property
    def input_metadata(self) -> dict[str, InputMetadata]:
        return {name: InputMetadata(dimensions=dims) for name, dims in self._inputs.items()}

    def run(self, feeds):
        self.calls.append(dict(feeds))
        if len(self.calls) in self._fail_on:
            raise RuntimeError("device lost")
        image = next(t for t in feeds.values() if t.shape[1] == 3)
        data = image.data
        if self._output_size is not None:
            data = np.zeros((1, 3, self._output_size, self._output_size), dtype=np.float32)
        return {name: Tensor.from_array(data) for name in self._outputs}


class FakeOCR:
    """OCR engine returning canned words, or raising when ``error`` is set."""

    name = "Fake"
    is_available = True

    def __init__(self, words=(), error: Exception | None = None):
        self._words = list(words)
        self._error = error
        self.seen: list[RasterImage] = []

    def load(self) -> None:
        pass

    def unload(self) -> None:
        pass

    def recognize(self, raster: RasterImage) -> OCRResult:
        self.seen.append(raster)
        if self._error is not None:
            raise self._error
        return OCRResult(words=list(self._words))


def make_model(session: FakeSession, default_target_size: int = 64) -> LoadedModel:
    binding = bind_model_io(ModelMetadata.from_session(session), default_target_size)
    return LoadedModel(session=session, binding=binding, source="fake.onnx")


def solid(width: int, height: int, rgb=(10, 200, 30), name: str | None = "solid.png") -> RasterImage:
    arr = np.zeros((height, width, 3), dtype=np.uint8)
    arr[:, :] = rgb
    return RasterImage.from_array(arr, name=name)


