"""Inpaint pipeline - orchestrates mask, letterbox, codec and inference."""

from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass, field

from ...config import PROMPT_REMOVE_TEXT, PROMPT_UPPER_RIGHT, MaskPolicy
from ...domain.entities.raster import Mask, RasterImage
from ...domain.services.letterbox import TRANSPARENT, LetterboxResult, invert, letterbox
from ...domain.services.mask_builder import build_rectangle_mask
from ...domain.services.tensor_codec import decode_output, encode_image, encode_mask
from ...domain.value_objects.config import ProcessingConfig
from ...domain.value_objects.tensor import Tensor
from ...exceptions import InferenceError, ModelNotReadyError, ValidationError
from ..ports.event_publisher import EventPublisher, ProcessingEvent, SimpleEventPublisher
from ..ports.inference_session import LoadedModel
from ..ports.ocr_engine import OCREngine
from .ocr_masking import OCRMaskBuilder

logger = logging.getLogger(__name__)

_UPPER_RIGHT_RE = re.compile(PROMPT_UPPER_RIGHT, re.IGNORECASE)
_REMOVE_TEXT_RE = re.compile(PROMPT_REMOVE_TEXT, re.IGNORECASE)


def select_mask_policy(prompt: str | None) -> MaskPolicy:
    """OCR masking when the prompt asks to remove upper-right text, else rectangle."""
    if not prompt:
        return MaskPolicy.RECTANGLE
    if _UPPER_RIGHT_RE.search(prompt) and _REMOVE_TEXT_RE.search(prompt):
        return MaskPolicy.OCR
    return MaskPolicy.RECTANGLE


@dataclass(frozen=True, slots=True)
class StageTimings:
    """Wall-clock milliseconds spent before, during and after inference."""
    pre: float = 0.0
    infer: float = 0.0
    post: float = 0.0

    @property
    def total(self) -> float:
        return self.pre + self.infer + self.post


@dataclass(frozen=True, slots=True)
class InpaintResult:
    """Cleaned image at source resolution plus the mask that was filled."""
    image: RasterImage
    mask: Mask
    timings: StageTimings
    policy: MaskPolicy = MaskPolicy.RECTANGLE


@dataclass
class PipelineContext:
    """Context passed through pipeline steps."""
    source: RasterImage
    model: LoadedModel | None
    policy: MaskPolicy
    mask: Mask | None = None
    image_box: LetterboxResult | None = None
    mask_box: LetterboxResult | None = None
    feeds: dict[str, Tensor] = field(default_factory=dict)
    outputs: dict[str, Tensor] = field(default_factory=dict)
    square: RasterImage | None = None
    result: RasterImage | None = None


class PipelineStep:
    """Base class for pipeline steps."""

    phase = "pre"

    def __init__(self, name: str):
        self.name = name

    def execute(self, ctx: PipelineContext) -> PipelineContext:
        """Execute this step and return updated context."""
        raise NotImplementedError


class BuildMaskStep(PipelineStep):
    """Step 1: Build the hole mask unless the caller supplied one."""

    def __init__(self, config: ProcessingConfig, ocr_masks: OCRMaskBuilder):
        super().__init__("build_mask")
        self._config = config
        self._ocr_masks = ocr_masks

    def execute(self, ctx: PipelineContext) -> PipelineContext:
        if ctx.mask is not None:
            return ctx
        if ctx.policy is MaskPolicy.OCR:
            ctx.mask = self._ocr_masks(ctx.source)
        else:
            ctx.mask = build_rectangle_mask(ctx.source, self._config.rect_fraction)
        return ctx


class LetterboxStep(PipelineStep):
    """Step 2: Letterbox image and mask onto the model's square canvas."""

    def __init__(self):
        super().__init__("letterbox")

    def execute(self, ctx: PipelineContext) -> PipelineContext:
        target = ctx.model.binding.target_size
        ctx.image_box = letterbox(ctx.source, target)
        # Padding must read as "keep", so the mask border stays all-zero
        ctx.mask_box = letterbox(ctx.mask, target, background=TRANSPARENT)
        return ctx


class EncodeStep(PipelineStep):
    """Step 3: Encode the square rasters into feeds keyed by bound names."""

    def __init__(self):
        super().__init__("encode")

    def execute(self, ctx: PipelineContext) -> PipelineContext:
        binding = ctx.model.binding
        ctx.feeds = {
            binding.image_input_name: encode_image(ctx.image_box.square, binding.assume_bgr),
        }
        if binding.mask_input_name != binding.image_input_name:
            ctx.feeds[binding.mask_input_name] = encode_mask(ctx.mask_box.square)
        return ctx


class InferStep(PipelineStep):
    """Step 4: Run the inference session."""

    phase = "infer"

    def __init__(self):
        super().__init__("infer")

    def execute(self, ctx: PipelineContext) -> PipelineContext:
        try:
            ctx.outputs = ctx.model.session.run(ctx.feeds)
        except Exception as e:
            raise InferenceError(f"Inference failed: {e}", image_name=ctx.source.name) from e
        return ctx


class DecodeStep(PipelineStep):
    """Step 5: Decode the bound output tensor into a square raster."""

    phase = "post"

    def __init__(self):
        super().__init__("decode")

    def _output_name(self, ctx: PipelineContext) -> str:
        name = ctx.model.binding.output_name
        if name is None:
            declared = list(ctx.model.session.output_names or [])
            name = declared[0] if declared else next(iter(ctx.outputs), None)
        if name is None or name not in ctx.outputs:
            raise InferenceError(
                f"Model returned no output named {name!r} (got {list(ctx.outputs)})",
                image_name=ctx.source.name
            )
        return name

    def execute(self, ctx: PipelineContext) -> PipelineContext:
        output = ctx.outputs[self._output_name(ctx)]
        target = ctx.model.binding.target_size
        if tuple(output.shape[-2:]) != (target, target):
            raise InferenceError(
                f"Output spatial size {output.shape[-2:]} does not match {target}x{target}",
                image_name=ctx.source.name
            )
        try:
            ctx.square = decode_output(output)
        except ValidationError as e:
            raise InferenceError(str(e.message), image_name=ctx.source.name) from e
        return ctx


class RestoreStep(PipelineStep):
    """Step 6: Map the square result back to source geometry."""

    phase = "post"

    def __init__(self):
        super().__init__("restore")

    def execute(self, ctx: PipelineContext) -> PipelineContext:
        restored = invert(ctx.image_box.mapping, ctx.square)
        ctx.result = RasterImage(restored.pixels, name=ctx.source.name)
        return ctx


class InpaintPipeline:
    """Erase the masked region of an image with a fixed-size inpainting model.

    The pipeline owns no global state: the loaded session and its binding are
    passed in as a ``LoadedModel`` and may be swapped between runs with
    ``set_model``.
    """

    def __init__(
        self,
        model: LoadedModel | None,
        config: ProcessingConfig | None = None,
        ocr: OCREngine | None = None,
        events: EventPublisher | None = None
    ):
        self._model = model
        self._config = config or ProcessingConfig()
        self._events = events or SimpleEventPublisher()
        self._ocr_masks = OCRMaskBuilder(
            ocr,
            zone=self._config.zone,
            dilate_px=self._config.dilate_px,
            fraction=self._config.rect_fraction,
            max_long_edge=self._config.ocr_max_long_edge,
            events=self._events,
        )
        self._steps = self._build_pipeline()

    def _build_pipeline(self) -> list[PipelineStep]:
        """Build processing pipeline."""
        return [
            BuildMaskStep(self._config, self._ocr_masks),
            LetterboxStep(),
            EncodeStep(),
            InferStep(),
            DecodeStep(),
            RestoreStep(),
        ]

    @property
    def model(self) -> LoadedModel | None:
        return self._model

    @property
    def is_ready(self) -> bool:
        return self._model is not None

    def set_model(self, model: LoadedModel | None) -> None:
        """Replace the loaded model; call only between runs."""
        self._model = model

    def resolve_policy(self, policy: MaskPolicy | None) -> MaskPolicy:
        policy = policy or self._config.mask_policy
        if policy is MaskPolicy.AUTO:
            return select_mask_policy(self._config.prompt)
        return policy

    def build_mask(self, source: RasterImage, policy: MaskPolicy | None = None) -> Mask:
        """Build the mask ``run`` would use for ``source``."""
        ctx = PipelineContext(source=source, model=None, policy=self.resolve_policy(policy))
        return self._steps[0].execute(ctx).mask

    def run(
        self,
        source: RasterImage,
        policy: MaskPolicy | None = None,
        external_mask: Mask | None = None
    ) -> InpaintResult:
        """Inpaint one image.

        Args:
            source: Image to clean
            policy: Mask policy; defaults to the configured one
            external_mask: Caller-supplied mask that overrides the policy

        Returns:
            Result raster at source resolution, the mask and stage timings

        Raises:
            ModelNotReadyError: If no model is loaded
            InferenceError: If the session fails for this image
            GeometryError: If the source has zero area
        """
        if self._model is None:
            raise ModelNotReadyError()
        if external_mask is not None and external_mask.size != source.size:
            raise ValidationError(
                f"Mask size {external_mask.size} does not match image size {source.size}",
                field="external_mask"
            )

        ctx = PipelineContext(
            source=source,
            model=self._model,
            policy=self.resolve_policy(policy),
            mask=external_mask,
        )
        spent = {"pre": 0.0, "infer": 0.0, "post": 0.0}

        for step in self._steps:
            self._events.publish(ProcessingEvent(
                stage=step.name,
                message=f"Executing {step.name}",
                image_name=source.name
            ))
            start = time.perf_counter()
            ctx = step.execute(ctx)
            spent[step.phase] += (time.perf_counter() - start) * 1000

        timings = StageTimings(**spent)
        logger.debug(
            f"{source.name or 'image'}: pre={timings.pre:.1f}ms "
            f"infer={timings.infer:.1f}ms post={timings.post:.1f}ms"
        )
        self._events.publish(ProcessingEvent(
            stage="complete",
            message="Processing complete",
            progress=1.0,
            image_name=source.name,
            fields={"pre_ms": round(timings.pre, 1), "infer_ms": round(timings.infer, 1),
                    "post_ms": round(timings.post, 1)}
        ))
        return InpaintResult(image=ctx.result, mask=ctx.mask, timings=timings, policy=ctx.policy)

    def subscribe_to_events(self, callback) -> None:
        """Subscribe to processing events."""
        self._events.subscribe(callback)
