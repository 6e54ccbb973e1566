"""Model I/O binding - map declared model tensors to image, mask and output."""

from __future__ import annotations

from ...config import DEFAULT_TARGET_SIZE
from ...exceptions import ModelNotReadyError, ValidationError
from ..value_objects.tensor import ModelIOBinding, ModelMetadata, TensorMetadata

IMAGE_CHANNELS = 3
MASK_CHANNELS = 1


def _select_image_input(inputs: tuple[TensorMetadata, ...]) -> TensorMetadata:
    for t in inputs:
        if t.channels == IMAGE_CHANNELS:
            return t
    return inputs[0]


def _select_mask_input(
    inputs: tuple[TensorMetadata, ...],
    image: TensorMetadata
) -> TensorMetadata:
    for t in inputs:
        if t.name != image.name and t.channels == MASK_CHANNELS:
            return t
    if len(inputs) > 1:
        return inputs[1]
    return image


def _select_target_size(image: TensorMetadata, default: int) -> int:
    height = image.static_dim(2)
    width = image.static_dim(3)
    if height is not None and height == width:
        return height
    return default


def bind_model_io(
    metadata: ModelMetadata | None,
    default_target_size: int = DEFAULT_TARGET_SIZE,
    assume_bgr: bool = False
) -> ModelIOBinding:
    """Decide which inputs carry the image and the mask.

    Selection rules, under the NCHW convention:

    * image: first input with 3 channels, else the first input;
    * mask: first other input with 1 channel, else the second input,
      else the image input when the model has a single input;
    * output: the first declared output;
    * target size: the image input's height when height and width are
      static and equal, else ``default_target_size``.

    Args:
        metadata: Declared model inputs/outputs, None when no model is loaded
        default_target_size: Working resolution for dynamic spatial dims
        assume_bgr: Whether the image input expects swapped red/blue

    Returns:
        Immutable binding for the loaded model

    Raises:
        ModelNotReadyError: If no metadata is available
        ValidationError: If the model declares no inputs
    """
    if metadata is None:
        raise ModelNotReadyError()
    if not metadata.inputs:
        raise ValidationError("Model declares no inputs", field="inputs")
    if default_target_size <= 0:
        raise ValidationError(
            f"default_target_size must be positive, got {default_target_size}",
            field="default_target_size"
        )

    image = _select_image_input(metadata.inputs)
    mask = _select_mask_input(metadata.inputs, image)
    output = metadata.output_names[0] if metadata.output_names else None

    return ModelIOBinding(
        image_input_name=image.name,
        mask_input_name=mask.name,
        output_name=output,
        target_size=_select_target_size(image, default_target_size),
        assume_bgr=assume_bgr,
    )
