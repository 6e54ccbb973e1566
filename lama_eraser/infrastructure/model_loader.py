"""Model loader - builds a session and binds its inputs and outputs."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Iterable

from ..adapters.inference.onnx_session import OnnxInferenceSession
from ..application.ports.event_publisher import EventPublisher, ProcessingEvent
from ..application.ports.inference_session import InferenceSession, LoadedModel
from ..config import ExecutionProvider
from ..domain.services.io_binding import bind_model_io
from ..domain.value_objects.config import ProcessingConfig
from ..domain.value_objects.tensor import ModelMetadata
from ..exceptions import ModelLoadError

logger = logging.getLogger(__name__)

SessionFactory = Callable[[bytes, Iterable[ExecutionProvider], str], InferenceSession]


def _onnx_factory(
    model_bytes: bytes,
    providers: Iterable[ExecutionProvider],
    source: str
) -> InferenceSession:
    return OnnxInferenceSession.create(model_bytes, providers, source=source)


def read_model_bytes(path: Path | str) -> bytes:
    """Read an .onnx file.

    Raises:
        ModelLoadError: If the file is missing, empty or unreadable
    """
    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as e:
        raise ModelLoadError(f"Cannot read model file: {e}", model_source=str(path)) from e
    if not data:
        raise ModelLoadError("Model file is empty", model_source=str(path))
    return data


def load_model(
    model: Path | str | bytes,
    config: ProcessingConfig | None = None,
    events: EventPublisher | None = None,
    session_factory: SessionFactory = _onnx_factory
) -> LoadedModel:
    """Create an inference session and compute its I/O binding.

    Every call builds a fresh session and binding; nothing is carried over
    from a previously loaded model.

    Args:
        model: Path to an .onnx file, or its bytes
        config: Providers, channel order and default target size
        events: Optional publisher for load events
        session_factory: Session constructor (onnxruntime by default)

    Returns:
        The session with its binding

    Raises:
        ModelLoadError: If the model cannot be read or parsed
    """
    config = config or ProcessingConfig()
    if isinstance(model, (bytes, bytearray, memoryview)):
        model_bytes, source = bytes(model), "<bytes>"
    else:
        model_bytes, source = read_model_bytes(model), str(model)

    session = session_factory(model_bytes, config.execution_providers, source)
    metadata = ModelMetadata.from_session(session)
    logger.info(f"inputs: {list(metadata.input_names)} outputs: {list(metadata.output_names)}")

    binding = bind_model_io(metadata, config.target_size, config.assume_bgr)
    logger.info(
        f"I/O chosen -> image={binding.image_input_name!r} mask={binding.mask_input_name!r} "
        f"out={binding.output_name!r} target={binding.target_size}"
    )
    if events is not None:
        events.publish(ProcessingEvent(
            stage="model_loaded",
            message=f"Loaded model {Path(source).name}",
            fields={
                "image_input": binding.image_input_name,
                "mask_input": binding.mask_input_name,
                "output": binding.output_name,
                "target_size": binding.target_size,
            }
        ))
    return LoadedModel(session=session, binding=binding, source=source)
